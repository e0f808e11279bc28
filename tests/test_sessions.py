"""Tests for the server-side session registry."""

import unittest
from datetime import timedelta

from storefront.core.permissions import Role
from storefront.services.identity import create_principal
from storefront.services.sessions import SessionRegistry
from tests.helpers import make_session_factory


class SessionTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session_factory()()
        self.alice = create_principal(self.db, "alice", "secret1", Role.STAFF, staff_id=7, name="Alice")
        self.registry = SessionRegistry(ttl=timedelta(minutes=30))

    def tearDown(self) -> None:
        self.db.close()


class TestOpenAndResolve(SessionTestCase):
    def test_resolve_returns_copied_principal(self) -> None:
        record, token = self.registry.open(self.alice)
        resolved = self.registry.resolve(token)
        self.assertEqual(resolved, record)
        self.assertEqual(resolved.principal_id, self.alice.id)
        self.assertIs(resolved.role, Role.STAFF)
        self.assertEqual(resolved.staff_id, 7)
        self.assertEqual(resolved.expires_at - resolved.issued_at, timedelta(minutes=30))

    def test_role_change_after_login_does_not_leak_into_session(self) -> None:
        _, token = self.registry.open(self.alice)
        self.alice.role = Role.ADMIN.value
        self.alice.staff_id = None
        self.db.commit()
        self.assertIs(self.registry.resolve(token).role, Role.STAFF)

    def test_garbage_token(self) -> None:
        self.assertIsNone(self.registry.resolve("not-a-token"))

    def test_token_from_other_registry_is_unknown(self) -> None:
        _, token = SessionRegistry(ttl=timedelta(minutes=5)).open(self.alice)
        self.assertIsNone(self.registry.resolve(token))

    def test_resolve_has_no_side_effects(self) -> None:
        _, token = self.registry.open(self.alice)
        for _ in range(3):
            self.registry.resolve(token)
        self.assertEqual(len(self.registry), 1)


class TestRevocationAndExpiry(SessionTestCase):
    def test_revoke(self) -> None:
        record, token = self.registry.open(self.alice)
        self.assertTrue(self.registry.revoke(record.session_id))
        self.assertIsNone(self.registry.resolve(token))
        self.assertFalse(self.registry.revoke(record.session_id))

    def test_revoke_principal_drops_all_sessions(self) -> None:
        _, first = self.registry.open(self.alice)
        _, second = self.registry.open(self.alice)
        self.assertEqual(self.registry.revoke_principal(self.alice.id), 2)
        self.assertIsNone(self.registry.resolve(first))
        self.assertIsNone(self.registry.resolve(second))

    def test_expired_session_not_resolved_and_purged(self) -> None:
        registry = SessionRegistry(ttl=timedelta(seconds=-1))
        _, token = registry.open(self.alice)
        self.assertIsNone(registry.resolve(token))
        self.assertEqual(registry.purge_expired(), 1)
        self.assertEqual(len(registry), 0)


if __name__ == "__main__":
    unittest.main()
