"""Shared test wiring: isolated in-memory databases and an app client bound to them."""

from collections.abc import Generator
from datetime import timedelta

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from storefront.core.config import settings
from storefront.core.database import build_engine, get_db
from storefront.core.permissions import Role
from storefront.main import app
from storefront.models import Base, User
from storefront.services.identity import create_principal
from storefront.services.sessions import SessionRegistry, get_session_registry

API = settings.API_V1_PREFIX


def make_session_factory(url: str = "sqlite://") -> sessionmaker:
    """Fresh database with the schema created; in-memory unless url says otherwise."""
    engine = build_engine(url)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


class AppHarness:
    """TestClient over the real app with its own database and session registry."""

    def __init__(self) -> None:
        self.session_factory = make_session_factory()
        self.registry = SessionRegistry(ttl=timedelta(minutes=settings.JWT_EXPIRE_MINUTES))

        def override_get_db() -> Generator[Session, None, None]:
            db = self.session_factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_session_registry] = lambda: self.registry
        self.client = TestClient(app)

    def close(self) -> None:
        self.client.close()
        app.dependency_overrides.clear()

    def create_user(
        self,
        username: str,
        password: str,
        role: Role,
        staff_id: int | None = None,
        name: str | None = None,
    ) -> User:
        db = self.session_factory()
        try:
            return create_principal(db, username, password, role, staff_id=staff_id, name=name)
        finally:
            db.close()

    def login(self, username: str, password: str, role: Role = Role.ADMIN) -> str:
        resp = self.client.post(
            f"{API}/{role.value}/login",
            json={"username": username, "password": password},
        )
        assert resp.status_code == 200, resp.text
        return resp.json()["access_token"]

    def admin_token(self) -> str:
        self.create_user("owner", "owner-pass", Role.ADMIN, name="Owner")
        return self.login("owner", "owner-pass", Role.ADMIN)


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
