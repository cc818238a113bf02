"""Unit tests for app.services.accounts: registration, login, profile edits, admin maintenance."""

import asyncio
import unittest

from app.core.security import verify_password
from app.models import User
from app.models.user import DEFAULT_PROFILE_PIC, ROLE_ADMIN, ROLE_OWNER, ROLE_STAFF
from app.services import accounts
from app.services.accounts import InvalidCredentialsError
from app.services.errors import NotFoundError, PermissionDeniedError, PreconditionError
from tests.helpers import add_user, make_engine, make_notifier, make_session_factory


class AccountsTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = make_engine()
        self.db = make_session_factory(self.engine)()
        self.notifier = make_notifier()

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()


class TestRegisterAndLogin(AccountsTestCase):
    def test_register_creates_owner_and_alerts_staff(self) -> None:
        user = asyncio.run(
            accounts.register(self.db, self.notifier, "Ana", " Ana@Example.com ", "secret1")
        )
        self.assertEqual(user.role, ROLE_OWNER)
        self.assertEqual(user.email, "ana@example.com")
        self.assertEqual(user.profile_pic, DEFAULT_PROFILE_PIC)
        self.assertTrue(verify_password("secret1", user.password_hash))
        event = self.notifier.notify_staff.await_args.args[0]
        self.assertIn("Ana", event.message)

    def test_duplicate_email(self) -> None:
        asyncio.run(accounts.register(self.db, self.notifier, "A", "a@example.com", "secret1"))
        with self.assertRaises(PreconditionError):
            asyncio.run(accounts.register(self.db, self.notifier, "B", "A@example.com", "secret2"))

    def test_authenticate(self) -> None:
        accounts.create_user(self.db, "Staff", "staff@example.com", "secret1", ROLE_STAFF)
        user = accounts.authenticate(self.db, "STAFF@example.com", "secret1")
        self.assertEqual(user.role, ROLE_STAFF)
        with self.assertRaises(InvalidCredentialsError):
            accounts.authenticate(self.db, "staff@example.com", "wrong-pass")
        with self.assertRaises(NotFoundError):
            accounts.authenticate(self.db, "nobody@example.com", "secret1")


class TestProfileAndAdmin(AccountsTestCase):
    def test_update_own_profile_keeps_password_when_blank(self) -> None:
        user = accounts.create_user(self.db, "Old", "o@example.com", "secret1", ROLE_OWNER)
        old_hash = user.password_hash
        updated = accounts.update_profile(
            self.db, user.id, user.id, "New", password="", profile_pic="/uploads/me.png"
        )
        self.assertEqual(updated.name, "New")
        self.assertEqual(updated.password_hash, old_hash)
        self.assertEqual(updated.profile_pic, "/uploads/me.png")

    def test_cannot_edit_someone_elses_profile(self) -> None:
        a = add_user(self.db, ROLE_OWNER)
        b = add_user(self.db, ROLE_OWNER)
        with self.assertRaises(PermissionDeniedError):
            accounts.update_profile(self.db, a.id, b.id, "Hacked")

    def test_staff_only_see_owners(self) -> None:
        add_user(self.db, ROLE_OWNER)
        add_user(self.db, ROLE_STAFF)
        add_user(self.db, ROLE_ADMIN)
        self.assertEqual({u.role for u in accounts.list_users(self.db, ROLE_STAFF)}, {ROLE_OWNER})
        self.assertEqual(len(accounts.list_users(self.db, ROLE_ADMIN)), 3)

    def test_admin_update_changes_role_and_rejects_taken_email(self) -> None:
        user = add_user(self.db, ROLE_OWNER)
        taken = add_user(self.db, ROLE_STAFF)
        updated = accounts.admin_update_user(self.db, user.id, "Promoted", user.email, ROLE_STAFF)
        self.assertEqual(updated.role, ROLE_STAFF)
        with self.assertRaises(PreconditionError):
            accounts.admin_update_user(self.db, user.id, "X", taken.email, ROLE_STAFF)
        with self.assertRaises(NotFoundError):
            accounts.admin_update_user(self.db, 999, "X", "x@example.com", ROLE_STAFF)

    def test_admin_edit_staff_only_edits_staff(self) -> None:
        owner = add_user(self.db, ROLE_OWNER)
        staff = add_user(self.db, ROLE_STAFF)
        edited = accounts.admin_edit_staff(self.db, staff.id, "Renamed", "renamed@example.com")
        self.assertEqual(edited.email, "renamed@example.com")
        with self.assertRaises(PreconditionError):
            accounts.admin_edit_staff(self.db, owner.id, "X", "x@example.com")

    def test_admin_reset_password(self) -> None:
        user = accounts.create_user(self.db, "U", "u@example.com", "secret1", ROLE_OWNER)
        accounts.admin_reset_password(self.db, user.id, "another1")
        stored = self.db.query(User).filter(User.id == user.id).one()
        self.assertTrue(verify_password("another1", stored.password_hash))


if __name__ == "__main__":
    unittest.main()
