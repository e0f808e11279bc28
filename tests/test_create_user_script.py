"""Tests for the create_user bootstrap CLI."""

import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from storefront.models import User
from storefront.scripts.create_user import main
from tests.helpers import make_session_factory


class TestCreateUserScript(unittest.TestCase):
    def setUp(self) -> None:
        self.factory = make_session_factory()
        patcher = patch("storefront.scripts.create_user.SessionLocal", self.factory)
        patcher.start()
        self.addCleanup(patcher.stop)

    def run_main(self, *argv: str) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def stored(self) -> list[User]:
        db = self.factory()
        try:
            return db.query(User).order_by(User.id).all()
        finally:
            db.close()

    def test_creates_admin_by_default(self) -> None:
        code, out, _ = self.run_main("owner", "owner-pass", "--name", "Owner")
        self.assertEqual(code, 0)
        self.assertIn("role 'admin'", out)
        [user] = self.stored()
        self.assertEqual((user.username, user.role, user.name), ("owner", "admin", "Owner"))

    def test_creates_staff_with_staff_id(self) -> None:
        code, _, _ = self.run_main("alice", "secret1", "staff", "--staff-id", "7")
        self.assertEqual(code, 0)
        self.assertEqual(self.stored()[0].staff_id, 7)

    def test_duplicate_username(self) -> None:
        self.run_main("owner", "owner-pass")
        code, _, err = self.run_main("owner", "other-pass")
        self.assertEqual(code, 1)
        self.assertIn("already exists", err)

    def test_rejects_short_password(self) -> None:
        code, _, err = self.run_main("owner", "abc")
        self.assertEqual(code, 1)
        self.assertIn("Password must be", err)
        self.assertEqual(self.stored(), [])

    def test_staff_id_requires_staff_role(self) -> None:
        code, _, _ = self.run_main("owner", "owner-pass", "admin", "--staff-id", "3")
        self.assertEqual(code, 1)


if __name__ == "__main__":
    unittest.main()
