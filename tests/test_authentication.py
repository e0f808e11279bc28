"""Tests for the login flow: generic failures, dummy verification and role-bound logins."""

import statistics
import time
import unittest
from unittest.mock import patch

from storefront.core.errors import (
    GENERIC_LOGIN_FAILURE,
    InvalidCredentialFormatError,
    InvalidCredentialsError,
)
from storefront.core.permissions import Role
from storefront.core.security import dummy_password_hash, verify_password
from storefront.services.authentication import authenticate
from storefront.services.identity import create_principal, find_by_username
from tests.helpers import make_session_factory


class AuthenticationTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session_factory()()
        create_principal(self.db, "alice", "secret1", Role.STAFF, staff_id=7, name="Alice")
        create_principal(self.db, "owner", "owner-pass", Role.ADMIN)

    def tearDown(self) -> None:
        self.db.close()


class TestAuthenticate(AuthenticationTestCase):
    def test_correct_credentials(self) -> None:
        user = authenticate(self.db, "alice", "secret1")
        self.assertEqual(user.username, "alice")
        self.assertEqual(user.role, "staff")

    def test_wrong_password_and_unknown_user_share_message(self) -> None:
        with self.assertRaises(InvalidCredentialsError) as wrong:
            authenticate(self.db, "alice", "wrong")
        with self.assertRaises(InvalidCredentialsError) as unknown:
            authenticate(self.db, "nobody", "secret1")
        self.assertEqual(wrong.exception.message, GENERIC_LOGIN_FAILURE)
        self.assertEqual(str(wrong.exception), str(unknown.exception))

    def test_unknown_user_verifies_against_dummy_hash(self) -> None:
        with patch(
            "storefront.services.authentication.verify_password", wraps=verify_password
        ) as verify:
            with self.assertRaises(InvalidCredentialsError):
                authenticate(self.db, "nobody", "secret1")
        verify.assert_called_once_with("secret1", dummy_password_hash())

    def test_expected_role_mismatch_is_generic_failure(self) -> None:
        with self.assertRaises(InvalidCredentialsError) as ctx:
            authenticate(self.db, "owner", "owner-pass", expected_role=Role.STAFF)
        self.assertEqual(ctx.exception.message, GENERIC_LOGIN_FAILURE)
        self.assertEqual(
            authenticate(self.db, "alice", "secret1", expected_role=Role.STAFF).staff_id, 7
        )

    def test_malformed_stored_hash(self) -> None:
        user = find_by_username(self.db, "alice")
        user.password_hash = "corrupted"
        self.db.commit()
        with self.assertLogs("storefront.services.authentication", level="ERROR") as logs:
            with self.assertRaises(InvalidCredentialFormatError):
                authenticate(self.db, "alice", "secret1")
        self.assertNotIn("corrupted", "\n".join(logs.output))

    def test_flow_is_reentrant(self) -> None:
        with self.assertRaises(InvalidCredentialsError):
            authenticate(self.db, "alice", "wrong")
        self.assertEqual(authenticate(self.db, "alice", "secret1").username, "alice")


class TestLoginTiming(AuthenticationTestCase):
    """Unknown-user rejections cost about as much as wrong-password rejections."""

    TRIALS = 25

    def _time(self, username: str, password: str) -> float:
        start = time.perf_counter()
        with self.assertRaises(InvalidCredentialsError):
            authenticate(self.db, username, password)
        return time.perf_counter() - start

    def test_medians_are_comparable(self) -> None:
        dummy_password_hash()
        self._time("alice", "warmup")
        unknown, wrong = [], []
        for _ in range(self.TRIALS):
            unknown.append(self._time("nobody", "secret1"))
            wrong.append(self._time("alice", "wrong"))
        ratio = statistics.median(unknown) / statistics.median(wrong)
        # Without the dummy verification the unknown path is an order of magnitude faster.
        self.assertGreater(ratio, 0.5)
        self.assertLess(ratio, 2.0)


if __name__ == "__main__":
    unittest.main()
