import asyncio
import time
import unittest
from unittest import mock

import httpx
from fastapi.testclient import TestClient

from nightlife_api.app.core.errors import (
    MSG_CREDENTIALS_REQUIRED,
    MSG_LOGIN_REQUIRED,
    MSG_USERNAME_TAKEN,
    MSG_VENUE_DATA_MISSING,
    StorageError,
)
from nightlife_api.app.core.security import hash_password
from nightlife_api.app.main import create_app
from nightlife_api.app.services.attendance_service import AttendanceService
from nightlife_api.app.services.user_service import UserService

from tests.testing_utils import TempDatabaseMixin


class SessionApiTests(TempDatabaseMixin, unittest.TestCase):
    def setUp(self):
        super().setUp()
        self.client = TestClient(create_app())

    def register(self, username="alice", password="pw1234"):
        return self.client.post("/api/register", json={"username": username, "password": password})

    def login(self, username="alice", password="pw1234"):
        return self.client.post("/api/login", json={"username": username, "password": password})

    def test_anonymous_session(self):
        response = self.client.get("/api/current-session")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"currentlyLoggedIn": False})

    def test_register_requires_both_fields(self):
        response = self.client.post("/api/register", json={"username": "alice"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": MSG_CREDENTIALS_REQUIRED})

        response = self.client.post("/api/register", json={"password": "pw1234"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.count_rows("users"), 0)

    def test_register_duplicate_username(self):
        self.assertEqual(self.register().status_code, 201)
        response = self.register(password="different")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"error": MSG_USERNAME_TAKEN})
        self.assertEqual(self.count_rows("users"), 1)

    def test_login_with_wrong_password(self):
        self.register()
        response = self.login(password="wrong")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"currentlyLoggedIn": False})
        self.assertEqual(self.client.get("/api/current-session").json(), {"currentlyLoggedIn": False})

    def test_login_unknown_user(self):
        response = self.login(username="nobody")
        self.assertEqual(response.json(), {"currentlyLoggedIn": False})

    def test_register_without_body(self):
        response = self.client.post("/api/register")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": MSG_CREDENTIALS_REQUIRED})

    def test_register_and_login_with_form_body(self):
        response = self.client.post("/api/register", data={"username": "alice", "password": "pw1234"})
        self.assertEqual(response.status_code, 201)
        response = self.client.post("/api/login", data={"username": "alice", "password": "pw1234"})
        self.assertTrue(response.json()["loginSuccessful"])

    def test_malformed_json_is_rejected(self):
        response = self.client.post(
            "/api/register", content=b"{not json", headers={"content-type": "application/json"}
        )
        self.assertEqual(response.status_code, 422)

    def test_login_without_body(self):
        response = self.client.post("/api/login")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"currentlyLoggedIn": False})

    def test_register_storage_failure(self):
        failing = mock.AsyncMock(side_effect=StorageError("disk full"))
        with mock.patch.object(UserService, "insert_if_absent", new=failing):
            response = self.register()
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Internal server error"})
        self.assertEqual(self.count_rows("users"), 0)

    def test_logout_ends_session(self):
        self.register()
        self.login()
        self.assertTrue(self.client.get("/api/current-session").json()["currentlyLoggedIn"])
        response = self.client.get("/api/logout")
        self.assertEqual(response.json(), {"logoutSuccessful": True})
        self.assertEqual(self.client.get("/api/current-session").json(), {"currentlyLoggedIn": False})

    def test_end_to_end_attendance_flow(self):
        response = self.register()
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json(), {"message": "User created successfully"})

        self.assertEqual(self.login(password="wrong").json(), {"currentlyLoggedIn": False})

        response = self.login()
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertTrue(payload["loginSuccessful"])
        self.assertEqual(payload["username"], "alice")
        self.assertEqual(payload["venuesAttendingIds"], [])
        user_id = payload["userId"]

        response = self.client.post(
            "/api/venues-attending", json={"venueYelpId": "biz-1", "userId": user_id}
        )
        self.assertEqual(response.json()["insertSuccessful"], True)

        session = self.client.get("/api/current-session").json()
        self.assertEqual(
            session,
            {
                "currentlyLoggedIn": True,
                "userId": user_id,
                "username": "alice",
                "venuesAttendingIds": ["biz-1"],
            },
        )

        count = self.client.get("/api/number-attending/biz-1").json()
        self.assertEqual(count, {"countAttendeesSuccessful": True, "attendingCount": 1})

        response = self.client.post(
            "/api/venue-remove", json={"venueYelpId": "biz-1", "userId": user_id}
        )
        self.assertEqual(response.json()["removeSuccessful"], True)
        self.assertEqual(self.client.get("/api/current-session").json()["venuesAttendingIds"], [])


class VenueApiTests(TempDatabaseMixin, unittest.TestCase):
    def setUp(self):
        super().setUp()
        self.client = TestClient(create_app())
        self.client.post("/api/register", json={"username": "alice", "password": "pw1234"})
        login = self.client.post("/api/login", json={"username": "alice", "password": "pw1234"})
        self.user_id = login.json()["userId"]

    def test_protected_routes_require_login(self):
        anonymous = TestClient(create_app())
        body = {"venueYelpId": "biz-1", "userId": self.user_id}
        for method, path in (
            ("post", "/api/venues-attending"),
            ("post", "/api/venue-remove"),
            ("get", "/api/number-attending/biz-1"),
        ):
            if method == "post":
                response = anonymous.post(path, json=body)
            else:
                response = anonymous.get(path)
            self.assertEqual(response.status_code, 401, path)
            self.assertEqual(response.json(), {"message": MSG_LOGIN_REQUIRED})
        self.assertEqual(self.count_rows("users_venues"), 0)
        self.assertEqual(self.count_rows("venues"), 0)

    def test_add_twice_keeps_one_row(self):
        body = {"venueYelpId": "biz-1", "userId": self.user_id}
        self.assertTrue(self.client.post("/api/venues-attending", json=body).json()["insertSuccessful"])
        self.assertTrue(self.client.post("/api/venues-attending", json=body).json()["insertSuccessful"])
        self.assertEqual(self.count_rows("users_venues"), 1)

    def test_remove_unknown_venue_is_noop(self):
        response = self.client.post(
            "/api/venue-remove", json={"venueYelpId": "never-seen", "userId": self.user_id}
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["removeSuccessful"])

    def test_missing_venue_data(self):
        response = self.client.post("/api/venues-attending", json={"userId": self.user_id})
        self.assertEqual(response.json(), {"insertSuccessful": False, "error": MSG_VENUE_DATA_MISSING})
        response = self.client.post("/api/venue-remove", json={"venueYelpId": "biz-1"})
        self.assertEqual(response.json(), {"removeSuccessful": False, "error": MSG_VENUE_DATA_MISSING})

    def test_other_users_id_is_rejected(self):
        response = self.client.post(
            "/api/venues-attending", json={"venueYelpId": "biz-1", "userId": self.user_id + 1}
        )
        self.assertEqual(response.status_code, 403)
        self.assertFalse(response.json()["insertSuccessful"])
        self.assertEqual(self.count_rows("users_venues"), 0)

    def test_routes_without_body_report_missing_data(self):
        response = self.client.post("/api/venues-attending")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"insertSuccessful": False, "error": MSG_VENUE_DATA_MISSING})
        response = self.client.post("/api/venue-remove")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"removeSuccessful": False, "error": MSG_VENUE_DATA_MISSING})

    def test_form_encoded_body(self):
        response = self.client.post(
            "/api/venues-attending", data={"venueYelpId": "biz-1", "userId": str(self.user_id)}
        )
        self.assertTrue(response.json()["insertSuccessful"])
        self.assertEqual(self.count_rows("users_venues"), 1)

    def test_storage_failures_are_reported_in_payload(self):
        body = {"venueYelpId": "biz-1", "userId": self.user_id}
        failing = mock.AsyncMock(side_effect=StorageError("disk full"))
        with mock.patch.object(AttendanceService, "add_attendance", new=failing):
            response = self.client.post("/api/venues-attending", json=body)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"insertSuccessful": False, "error": "disk full"})

        with mock.patch.object(AttendanceService, "remove_attendance", new=failing):
            response = self.client.post("/api/venue-remove", json=body)
        self.assertEqual(response.json(), {"removeSuccessful": False, "error": "disk full"})

        with mock.patch.object(AttendanceService, "count_attendees", new=failing):
            response = self.client.get("/api/number-attending/biz-1")
        self.assertEqual(response.json(), {"countAttendeesSuccessful": False, "error": "disk full"})

    def test_count_unknown_venue_is_zero(self):
        response = self.client.get("/api/number-attending/never-seen")
        self.assertEqual(response.json(), {"countAttendeesSuccessful": True, "attendingCount": 0})


class ConcurrentLoginTests(TempDatabaseMixin, unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        await UserService.insert_if_absent("alice", "pw1234")
        started = time.perf_counter()
        hash_password("pw1234")
        self.hash_seconds = time.perf_counter() - started

    async def test_logins_do_not_block_the_event_loop(self):
        gaps = []
        done = asyncio.Event()

        async def ticker():
            last = time.perf_counter()
            while not done.is_set():
                await asyncio.sleep(0.01)
                now = time.perf_counter()
                gaps.append(now - last)
                last = now

        transport = httpx.ASGITransport(app=create_app())
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
            ticking = asyncio.create_task(ticker())
            responses = await asyncio.gather(
                *(
                    client.post("/api/login", json={"username": "alice", "password": "pw1234"})
                    for _ in range(4)
                )
            )
            done.set()
            await ticking

        for response in responses:
            self.assertEqual(response.status_code, 200)
            self.assertTrue(response.json()["loginSuccessful"])
        # Hashing on the loop would stall the ticker for a whole hash each time.
        self.assertLess(max(gaps), self.hash_seconds / 2)


if __name__ == "__main__":
    unittest.main()
