"""HTTP and WebSocket tests for the v1 API using TestClient with an in-memory database."""

import tempfile
import time
import unittest

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import QueuePool
from starlette.websockets import WebSocketDisconnect

from app.api.v1.deps import get_file_storage
from app.core.database import get_db
from app.core.security import create_access_token
from app.main import app
from app.models import Base
from app.models.application import STATUS_APPROVED, STATUS_PENDING, STATUS_PERMIT_ISSUED
from app.models.user import ROLE_ADMIN, ROLE_OWNER, ROLE_STAFF
from app.services.accounts import create_user
from app.services.notifications import NotificationDispatcher, owner_channel
from app.services.storage import FileStorage
from tests.helpers import add_application, make_engine, make_session_factory

PREFIX = "/api/v1"


class ApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = make_engine()
        self.session_factory = make_session_factory(self.engine)
        self._tmp = tempfile.TemporaryDirectory()
        storage = FileStorage(self._tmp.name, "/uploads")

        def override_get_db():
            db = self.session_factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_file_storage] = lambda: storage
        app.state.notifier = NotificationDispatcher()
        self.client = TestClient(app)

        self.db = self.session_factory()
        self.owner = create_user(self.db, "Juan Dela Cruz", "owner@example.com", "secret1", ROLE_OWNER)
        self.staff = create_user(self.db, "Maria Staff", "staff@example.com", "secret1", ROLE_STAFF)
        self.admin = create_user(self.db, "Admin", "admin@example.com", "secret1", ROLE_ADMIN)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.db.close()
        self.engine.dispose()
        self._tmp.cleanup()

    def _headers(self, user) -> dict[str, str]:
        token = create_access_token(sub=user.id, role=user.role, name=user.name)
        return {"Authorization": f"Bearer {token}"}


class TestAuthEndpoints(ApiTestCase):
    def test_register_then_login(self) -> None:
        resp = self.client.post(
            f"{PREFIX}/auth/register",
            json={"name": "Ana", "email": "ana@example.com", "password": "secret1"},
        )
        self.assertEqual(resp.status_code, 200)

        resp = self.client.post(
            f"{PREFIX}/auth/login", json={"email": "ana@example.com", "password": "secret1"}
        )
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["token"])
        self.assertEqual(body["user"]["role"], ROLE_OWNER)
        self.assertNotIn("password_hash", body["user"])

        me = self.client.get(
            f"{PREFIX}/auth/me", headers={"Authorization": f"Bearer {body['token']}"}
        )
        self.assertEqual(me.json()["email"], "ana@example.com")

    def test_duplicate_registration(self) -> None:
        resp = self.client.post(
            f"{PREFIX}/auth/register",
            json={"name": "X", "email": "owner@example.com", "password": "secret1"},
        )
        self.assertEqual(resp.status_code, 400)

    def test_login_failures(self) -> None:
        wrong = self.client.post(
            f"{PREFIX}/auth/login", json={"email": "owner@example.com", "password": "nope"}
        )
        self.assertEqual(wrong.status_code, 401)
        unknown = self.client.post(
            f"{PREFIX}/auth/login", json={"email": "ghost@example.com", "password": "secret1"}
        )
        self.assertEqual(unknown.status_code, 404)

    def test_missing_and_invalid_tokens(self) -> None:
        self.assertEqual(self.client.get(f"{PREFIX}/applications").status_code, 401)
        resp = self.client.get(
            f"{PREFIX}/applications", headers={"Authorization": "Bearer not-a-jwt"}
        )
        self.assertEqual(resp.status_code, 401)


class TestApplicationEndpoints(ApiTestCase):
    def test_owner_submits_and_staff_approves(self) -> None:
        resp = self.client.post(
            f"{PREFIX}/applications",
            json={"business_name": "Carinderia", "business_type": "Food", "address": "Poblacion"},
            headers=self._headers(self.owner),
        )
        self.assertEqual(resp.status_code, 201)
        application = resp.json()["application"]
        self.assertEqual(application["status"], STATUS_PENDING)
        self.assertEqual(application["owner_name"], "Juan Dela Cruz")

        resp = self.client.put(
            f"{PREFIX}/applications/{application['id']}/status",
            json={"status": "approved", "fee": 150.0},
            headers=self._headers(self.staff),
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], STATUS_APPROVED)
        self.assertEqual(resp.json()["fee"], 150.0)

        actions = self.client.get(
            f"{PREFIX}/admin/applications/{application['id']}/actions",
            headers=self._headers(self.staff),
        )
        self.assertEqual(len(actions.json()), 1)
        self.assertEqual(actions.json()[0]["staff_name"], "Maria Staff")

    def test_staff_cannot_submit_and_owner_cannot_decide(self) -> None:
        resp = self.client.post(
            f"{PREFIX}/applications",
            json={"business_name": "X"},
            headers=self._headers(self.staff),
        )
        self.assertEqual(resp.status_code, 403)
        application = add_application(self.db, self.owner)
        resp = self.client.put(
            f"{PREFIX}/applications/{application.id}/status",
            json={"status": "approved", "fee": 1},
            headers=self._headers(self.owner),
        )
        self.assertEqual(resp.status_code, 403)

    def test_decision_preconditions(self) -> None:
        application = add_application(self.db, self.owner)
        no_fee = self.client.put(
            f"{PREFIX}/applications/{application.id}/status",
            json={"status": "approved"},
            headers=self._headers(self.staff),
        )
        self.assertEqual(no_fee.status_code, 400)
        negative_fee = self.client.put(
            f"{PREFIX}/applications/{application.id}/status",
            json={"status": "approved", "fee": -1},
            headers=self._headers(self.staff),
        )
        self.assertEqual(negative_fee.status_code, 400)
        missing = self.client.put(
            f"{PREFIX}/applications/9999/status",
            json={"status": "rejected", "remarks": "no"},
            headers=self._headers(self.staff),
        )
        self.assertEqual(missing.status_code, 404)

    def test_owner_cannot_read_another_owners_application(self) -> None:
        other = create_user(self.db, "Other", "other@example.com", "secret1", ROLE_OWNER)
        application = add_application(self.db, self.owner)
        resp = self.client.get(
            f"{PREFIX}/applications/{application.id}", headers=self._headers(other)
        )
        self.assertEqual(resp.status_code, 403)

    def test_delete_then_get_is_404(self) -> None:
        application = add_application(self.db, self.owner)
        headers = self._headers(self.owner)
        self.assertEqual(
            self.client.delete(f"{PREFIX}/applications/{application.id}", headers=headers).status_code,
            200,
        )
        self.assertEqual(
            self.client.get(f"{PREFIX}/applications/{application.id}", headers=headers).status_code,
            404,
        )

    def test_documents(self) -> None:
        application = add_application(self.db, self.owner)
        headers = self._headers(self.owner)
        resp = self.client.post(
            f"{PREFIX}/applications/{application.id}/documents",
            json={"file_name": "fire-safety.pdf", "file_path": "/uploads/fire-safety.pdf"},
            headers=headers,
        )
        self.assertEqual(resp.status_code, 201)
        listed = self.client.get(f"{PREFIX}/applications/{application.id}/documents", headers=headers)
        self.assertEqual([d["file_name"] for d in listed.json()], ["fire-safety.pdf"])


class TestPaymentEndpoints(ApiTestCase):
    def test_payment_issues_permit(self) -> None:
        application = add_application(self.db, self.owner, status=STATUS_APPROVED, fee=250.0)
        headers = self._headers(self.owner)

        before = self.client.get(f"{PREFIX}/payments/{application.id}", headers=headers)
        self.assertEqual(before.json()["status"], "not_paid")

        resp = self.client.post(
            f"{PREFIX}/payments",
            json={"applicationId": application.id, "amount": 250.0, "transactionId": "T-1"},
            headers=headers,
        )
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["success"])
        self.assertTrue(body["permit_file"].startswith("/uploads/permits/"))

        after = self.client.get(f"{PREFIX}/payments/{application.id}", headers=headers)
        self.assertEqual(after.json()["status"], "completed")
        self.assertEqual(after.json()["transaction_id"], "T-1")

        detail = self.client.get(f"{PREFIX}/applications/{application.id}", headers=headers)
        self.assertEqual(detail.json()["status"], STATUS_PERMIT_ISSUED)
        self.assertEqual(detail.json()["payment_status"], "completed")

        listing = self.client.get(f"{PREFIX}/payments", headers=self._headers(self.admin))
        self.assertEqual(listing.json()[0]["owner_name"], "Juan Dela Cruz")
        self.assertEqual(
            self.client.get(f"{PREFIX}/payments", headers=headers).status_code, 403
        )

    def test_payment_on_pending_is_400_and_unknown_is_404(self) -> None:
        application = add_application(self.db, self.owner)
        headers = self._headers(self.owner)
        pending = self.client.post(
            f"{PREFIX}/payments",
            json={"applicationId": application.id, "amount": 10},
            headers=headers,
        )
        self.assertEqual(pending.status_code, 400)
        unknown = self.client.post(
            f"{PREFIX}/payments", json={"applicationId": 4242, "amount": 10}, headers=headers
        )
        self.assertEqual(unknown.status_code, 404)

    def test_zero_fee_application_can_be_paid(self) -> None:
        application = add_application(self.db, self.owner)
        approved = self.client.put(
            f"{PREFIX}/applications/{application.id}/status",
            json={"status": "approved", "fee": 0},
            headers=self._headers(self.staff),
        )
        self.assertEqual(approved.status_code, 200)
        self.assertEqual(approved.json()["fee"], 0)

        resp = self.client.post(
            f"{PREFIX}/payments",
            json={"applicationId": application.id, "amount": 0},
            headers=self._headers(self.owner),
        )
        self.assertEqual(resp.status_code, 200)
        detail = self.client.get(
            f"{PREFIX}/applications/{application.id}", headers=self._headers(self.owner)
        )
        self.assertEqual(detail.json()["status"], STATUS_PERMIT_ISSUED)
        self.assertEqual(detail.json()["payment_status"], "completed")

    def test_malformed_amounts_are_400(self) -> None:
        application = add_application(self.db, self.owner, status=STATUS_APPROVED, fee=10)
        headers = self._headers(self.owner)
        for amount in (-5, "ten"):
            with self.subTest(amount=amount):
                resp = self.client.post(
                    f"{PREFIX}/payments",
                    json={"applicationId": application.id, "amount": amount},
                    headers=headers,
                )
                self.assertEqual(resp.status_code, 400)
        zero_charge = self.client.post(
            f"{PREFIX}/payments/create-payment-intent",
            json={"applicationId": application.id, "amount": 0},
            headers=headers,
        )
        self.assertEqual(zero_charge.status_code, 400)
        self.assertEqual(
            self.client.get(f"{PREFIX}/payments/{application.id}", headers=headers).json()["status"],
            "not_paid",
        )


class TestDashboardsAndAccounts(ApiTestCase):
    def test_admin_overview_requires_staff(self) -> None:
        add_application(self.db, self.owner)
        ok = self.client.get(f"{PREFIX}/admin/overview", headers=self._headers(self.staff))
        self.assertEqual(ok.status_code, 200)
        self.assertEqual(ok.json()["totalApplications"], 1)
        self.assertEqual(ok.json()["totalBusinessOwners"], 1)
        denied = self.client.get(f"{PREFIX}/admin/overview", headers=self._headers(self.owner))
        self.assertEqual(denied.status_code, 403)

    def test_owner_analytics(self) -> None:
        add_application(self.db, self.owner, status=STATUS_APPROVED)
        resp = self.client.get(f"{PREFIX}/analytics", headers=self._headers(self.owner))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["stats"]["approved"], 1)

    def test_admin_creates_staff(self) -> None:
        body = {"name": "New Staff", "email": "new@example.com", "password": "secret1"}
        resp = self.client.post(f"{PREFIX}/staff", json=body, headers=self._headers(self.admin))
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["data"]["role"], ROLE_STAFF)
        again = self.client.post(f"{PREFIX}/staff", json=body, headers=self._headers(self.admin))
        self.assertEqual(again.status_code, 400)
        denied = self.client.post(f"{PREFIX}/staff", json=body, headers=self._headers(self.staff))
        self.assertEqual(denied.status_code, 403)

    def test_profile_update_is_own_only(self) -> None:
        resp = self.client.put(
            f"{PREFIX}/users/{self.owner.id}",
            json={"name": "Juan D."},
            headers=self._headers(self.owner),
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["data"]["name"], "Juan D.")
        denied = self.client.put(
            f"{PREFIX}/users/{self.staff.id}",
            json={"name": "Nope"},
            headers=self._headers(self.owner),
        )
        self.assertEqual(denied.status_code, 403)

    def test_health(self) -> None:
        resp = self.client.get(f"{PREFIX}/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["database"], "connected")


class TestNotificationSocket(ApiTestCase):
    def _wait_for_subscriber(self, channel: str) -> None:
        deadline = time.monotonic() + 2.0
        while app.state.notifier.subscriber_count(channel) == 0:
            if time.monotonic() > deadline:
                self.fail(f"no subscriber on {channel}")
            time.sleep(0.01)

    def test_invalid_token_is_closed_with_policy_violation(self) -> None:
        with self.assertRaises(WebSocketDisconnect) as ctx:
            with self.client.websocket_connect(f"{PREFIX}/notifications/ws?token=bad"):
                pass
        self.assertEqual(ctx.exception.code, 1008)

    def test_owner_receives_decision(self) -> None:
        application = add_application(self.db, self.owner)
        token = create_access_token(sub=self.owner.id, role=ROLE_OWNER)
        with self.client.websocket_connect(f"{PREFIX}/notifications/ws?token={token}") as ws:
            self._wait_for_subscriber(owner_channel(self.owner.id))
            resp = self.client.put(
                f"{PREFIX}/applications/{application.id}/status",
                json={"status": "rejected", "remarks": "Missing lease contract"},
                headers=self._headers(self.staff),
            )
            self.assertEqual(resp.status_code, 200)
            frame = ws.receive_json()
        self.assertEqual(frame["event"], "ownerNotification")
        self.assertEqual(frame["data"]["applicationId"], application.id)
        self.assertEqual(frame["data"]["status"], "rejected")
        self.assertEqual(frame["data"]["remarks"], "Missing lease contract")

    def test_open_socket_holds_no_database_connection(self) -> None:
        engine = create_engine(
            f"sqlite:///{self._tmp.name}/pool.db",
            connect_args={"check_same_thread": False},
            poolclass=QueuePool,
            pool_size=1,
            max_overflow=0,
            pool_timeout=1,
        )
        self.addCleanup(engine.dispose)
        Base.metadata.create_all(engine)
        factory = make_session_factory(engine)
        with factory() as db:
            owner = create_user(db, "Pool Owner", "pool@example.com", "secret1", ROLE_OWNER)
            owner_id = owner.id

        def pooled_get_db():
            db = factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = pooled_get_db
        token = create_access_token(sub=owner_id, role=ROLE_OWNER)
        with self.client.websocket_connect(f"{PREFIX}/notifications/ws?token={token}"):
            self._wait_for_subscriber(owner_channel(owner_id))
            self.assertEqual(engine.pool.checkedout(), 0)
            resp = self.client.get(
                f"{PREFIX}/applications",
                headers={"Authorization": f"Bearer {token}"},
            )
            self.assertEqual(resp.status_code, 200)


if __name__ == "__main__":
    unittest.main()
