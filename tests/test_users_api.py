"""API tests for user CRUD under /users, including the end-to-end admin scenario."""

import unittest

from gatekeeper.core.security import verify_password
from tests.support import DEFAULT_PASSWORD, ApiTestCase


def _new_user(email: str = "new@example.com", role: str = "client", **fields: object) -> dict:
    body = {
        "email": email,
        "password": DEFAULT_PASSWORD,
        "role": role,
        "first_name": "New",
        "last_name": "Person",
    }
    body.update(fields)
    return body


class TestAdminScenario(ApiTestCase):
    """Create, log in, list, forbidden patch, bad login, deactivate, locked login."""

    def test_scenario(self) -> None:
        self.make_role("admin")
        self.make_role("client")
        bootstrap_id = self.make_user("root@example.com", role="admin")
        admin_headers = self.auth_headers(bootstrap_id, "admin")

        created = self.client.post(
            "/users", json=_new_user("a@x.com", role="admin", password="Passw0rd!"), headers=admin_headers
        )
        self.assertEqual(created.status_code, 201)
        user = created.json()
        self.assertNotIn("password", user)
        self.assertNotIn("password_hash", user)
        self.assertEqual(user["role"]["name"], "admin")

        login = self.client.post("/auth", json={"email": "a@x.com", "password": "Passw0rd!"})
        self.assertEqual(login.status_code, 201)
        headers = {"Authorization": f"Bearer {login.json()['token']}"}

        listed = self.client.get("/users", headers=headers)
        self.assertEqual(listed.status_code, 200)
        match = [u for u in listed.json() if u["email"] == "a@x.com"]
        self.assertEqual(len(match), 1)
        self.assertEqual(match[0]["role"]["name"], "admin")
        self.assertNotIn("password", match[0])

        client_id = self.make_user("someone@example.com", role="client")
        patched = self.client.patch(
            f"/users/{user['id']}",
            json={"last_name": "Changed"},
            headers=self.auth_headers(client_id, "client"),
        )
        self.assertEqual(patched.status_code, 403)

        bad_login = self.client.post("/auth", json={"email": "a@x.com", "password": "Wrong0rd!"})
        self.assertEqual(bad_login.status_code, 401)

        deactivated = self.client.patch(
            f"/users/{user['id']}", json={"is_active": False}, headers=admin_headers
        )
        self.assertEqual(deactivated.status_code, 200)
        self.assertFalse(deactivated.json()["is_active"])

        locked = self.client.post("/auth", json={"email": "a@x.com", "password": "Passw0rd!"})
        self.assertEqual(locked.status_code, 423)


class TestUserReads(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.make_role("client")
        self.active_id = self.make_user("active@example.com")
        self.inactive_id = self.make_user("inactive@example.com", is_active=False)
        self.headers = self.auth_headers(self.active_id, "client")

    def test_list_returns_active_users_by_default(self) -> None:
        response = self.client.get("/users", headers=self.headers)
        self.assertEqual([u["id"] for u in response.json()], [self.active_id])

    def test_list_can_include_inactive(self) -> None:
        response = self.client.get("/users?include_inactive=true", headers=self.headers)
        self.assertEqual(
            sorted(u["id"] for u in response.json()), sorted([self.active_id, self.inactive_id])
        )

    def test_get_by_id(self) -> None:
        response = self.client.get(f"/users/{self.active_id}", headers=self.headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["email"], "active@example.com")
        self.assertEqual(response.json()["role"]["name"], "client")

    def test_get_missing_user(self) -> None:
        response = self.client.get("/users/9999", headers=self.headers)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "User not found")

    def test_non_numeric_id_is_bad_request(self) -> None:
        response = self.client.get("/users/abc", headers=self.headers)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Validation error")
        self.assertTrue(response.json()["errors"][0].startswith("path.user_id"))


class TestCreateUser(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.make_role("client")
        caller = self.make_user("caller@example.com")
        self.headers = self.auth_headers(caller, "client")

    def test_creates_with_hashed_password_and_normalized_email(self) -> None:
        response = self.client.post(
            "/users",
            json=_new_user(
                " New@Example.COM ",
                username="newbie",
                phone="+54 11 5555 5555",
                government_id={"type": "dni", "number": "30111222"},
                born_date="1990-05-17",
            ),
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertEqual(data["email"], "new@example.com")
        self.assertEqual(data["government_id"], {"type": "dni", "number": "30111222"})
        self.assertEqual(data["born_date"], "1990-05-17")
        self.assertTrue(data["is_active"])

        stored = self.load_user(data["id"])
        self.assertNotEqual(stored.password_hash, DEFAULT_PASSWORD)
        self.assertTrue(verify_password(DEFAULT_PASSWORD, stored.password_hash))

    def test_unknown_role(self) -> None:
        response = self.client.post("/users", json=_new_user(role="wizard"), headers=self.headers)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "Role not found")

    def test_weak_password(self) -> None:
        response = self.client.post(
            "/users", json=_new_user(password="password1!"), headers=self.headers
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json()["errors"], ["Password must contain at least one uppercase letter"]
        )

    def test_invalid_email(self) -> None:
        response = self.client.post("/users", json=_new_user("not-an-email"), headers=self.headers)
        self.assertEqual(response.status_code, 400)
        self.assertTrue(any(e.startswith("email") for e in response.json()["errors"]))

    def test_duplicate_email(self) -> None:
        first = self.client.post("/users", json=_new_user(), headers=self.headers)
        self.assertEqual(first.status_code, 201)
        second = self.client.post("/users", json=_new_user("NEW@example.com"), headers=self.headers)
        self.assertEqual(second.status_code, 400)
        self.assertEqual(second.json()["message"], "Duplicate key error: email already in use")

    def test_duplicate_government_id(self) -> None:
        gov = {"type": "dni", "number": "123"}
        self.client.post("/users", json=_new_user(government_id=gov), headers=self.headers)
        response = self.client.post(
            "/users", json=_new_user("other@example.com", government_id=gov), headers=self.headers
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Duplicate key error: governmentId already in use")

    def test_non_admin_cannot_create_admin(self) -> None:
        self.make_role("admin")
        response = self.client.post("/users", json=_new_user(role="admin"), headers=self.headers)
        self.assertEqual(response.status_code, 403)
        self.assertIsNone(self.load_user_by_email("new@example.com"))

        login = self.client.post("/auth", json={"email": "new@example.com", "password": DEFAULT_PASSWORD})
        self.assertEqual(login.status_code, 401)

    def test_non_admin_cannot_create_inactive_user(self) -> None:
        response = self.client.post("/users", json=_new_user(is_active=False), headers=self.headers)
        self.assertEqual(response.status_code, 403)
        self.assertIsNone(self.load_user_by_email("new@example.com"))

    def test_admin_can_create_admin_and_inactive_users(self) -> None:
        self.make_role("admin")
        admin_id = self.make_user("boss@example.com", role="admin")
        headers = self.auth_headers(admin_id, "admin")
        created = self.client.post("/users", json=_new_user(role="admin"), headers=headers)
        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.json()["role"]["name"], "admin")
        inactive = self.client.post(
            "/users", json=_new_user("off@example.com", is_active=False), headers=headers
        )
        self.assertEqual(inactive.status_code, 201)
        self.assertFalse(inactive.json()["is_active"])


class TestUpdateUser(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.make_role("admin")
        self.make_role("client")
        self.admin_id = self.make_user("admin@example.com", role="admin")
        self.owner_id = self.make_user("owner@example.com", phone="123")
        self.other_id = self.make_user("other@example.com")
        self.admin = self.auth_headers(self.admin_id, "admin")
        self.owner = self.auth_headers(self.owner_id, "client")
        self.other = self.auth_headers(self.other_id, "client")

    def _replace_body(self, **fields: object) -> dict:
        body = {"role": "client", "first_name": "Owen", "last_name": "Owner"}
        body.update(fields)
        return body

    def test_owner_can_patch_self(self) -> None:
        response = self.client.patch(
            f"/users/{self.owner_id}", json={"last_name": "Renamed"}, headers=self.owner
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["last_name"], "Renamed")
        self.assertEqual(response.json()["phone"], "123")

    def test_other_user_is_forbidden(self) -> None:
        for method in ("put", "patch"):
            with self.subTest(method=method):
                response = getattr(self.client, method)(
                    f"/users/{self.owner_id}", json=self._replace_body(), headers=self.other
                )
                self.assertEqual(response.status_code, 403)

    def test_put_replaces_profile_fields(self) -> None:
        response = self.client.put(
            f"/users/{self.owner_id}", json=self._replace_body(), headers=self.owner
        )
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual((data["first_name"], data["last_name"]), ("Owen", "Owner"))
        self.assertIsNone(data["phone"])
        self.assertTrue(data["is_active"])

    def test_email_cannot_change(self) -> None:
        for method, body in (
            ("put", self._replace_body(email="changed@example.com")),
            ("patch", {"email": "changed@example.com"}),
        ):
            with self.subTest(method=method):
                response = getattr(self.client, method)(
                    f"/users/{self.owner_id}", json=body, headers=self.admin
                )
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json()["message"], "Email cannot be changed")

    def test_same_email_is_accepted(self) -> None:
        response = self.client.put(
            f"/users/{self.owner_id}",
            json=self._replace_body(email="OWNER@example.com"),
            headers=self.owner,
        )
        self.assertEqual(response.status_code, 200)

    def test_password_change_is_rehashed(self) -> None:
        before = self.load_user(self.owner_id).password_hash
        response = self.client.patch(
            f"/users/{self.owner_id}", json={"password": "N3w-Secret"}, headers=self.owner
        )
        self.assertEqual(response.status_code, 200)
        after = self.load_user(self.owner_id).password_hash
        self.assertNotEqual(before, after)
        self.assertTrue(verify_password("N3w-Secret", after))
        login = self.client.post("/auth", json={"email": "owner@example.com", "password": "N3w-Secret"})
        self.assertEqual(login.status_code, 201)

    def test_weak_password_on_update(self) -> None:
        response = self.client.patch(
            f"/users/{self.owner_id}", json={"password": "short"}, headers=self.owner
        )
        self.assertEqual(response.status_code, 400)

    def test_non_admin_cannot_change_own_role_or_status(self) -> None:
        for body in ({"role": "admin"}, {"is_active": False}):
            with self.subTest(body=body):
                response = self.client.patch(f"/users/{self.owner_id}", json=body, headers=self.owner)
                self.assertEqual(response.status_code, 403)

    def test_admin_changes_role(self) -> None:
        response = self.client.patch(
            f"/users/{self.owner_id}", json={"role": "ADMIN"}, headers=self.admin
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["role"]["name"], "admin")

    def test_unknown_role_on_update(self) -> None:
        response = self.client.put(
            f"/users/{self.owner_id}", json=self._replace_body(role="wizard"), headers=self.admin
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Role not found")

    def test_update_missing_user(self) -> None:
        response = self.client.patch("/users/9999", json={"last_name": "X"}, headers=self.admin)
        self.assertEqual(response.status_code, 404)

    def test_unknown_field_rejected(self) -> None:
        response = self.client.patch(
            f"/users/{self.owner_id}", json={"password_hash": "x"}, headers=self.admin
        )
        self.assertEqual(response.status_code, 400)


class TestDeleteUser(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.make_role("admin")
        self.make_role("client")
        self.admin_id = self.make_user("admin@example.com", role="admin")
        self.target_id = self.make_user("target@example.com")
        self.other_id = self.make_user("other@example.com")

    def test_admin_deletes_user(self) -> None:
        headers = self.auth_headers(self.admin_id, "admin")
        response = self.client.delete(f"/users/{self.target_id}", headers=headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"id": self.target_id, "deleted": True})
        self.assertIsNone(self.load_user(self.target_id))
        again = self.client.delete(f"/users/{self.target_id}", headers=headers)
        self.assertEqual(again.status_code, 404)

    def test_user_deletes_self(self) -> None:
        response = self.client.delete(
            f"/users/{self.target_id}", headers=self.auth_headers(self.target_id, "client")
        )
        self.assertEqual(response.status_code, 200)

    def test_other_user_is_forbidden(self) -> None:
        response = self.client.delete(
            f"/users/{self.target_id}", headers=self.auth_headers(self.other_id, "client")
        )
        self.assertEqual(response.status_code, 403)
        self.assertIsNotNone(self.load_user(self.target_id))


class TestRolesApi(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.make_role("admin")
        self.make_role("client")
        self.admin = self.auth_headers(self.make_user("admin@example.com", role="admin"), "admin")
        self.client_headers = self.auth_headers(self.make_user("c@example.com"), "client")

    def test_list_roles(self) -> None:
        response = self.client.get("/roles", headers=self.client_headers)
        self.assertEqual([r["name"] for r in response.json()], ["admin", "client"])

    def test_admin_creates_role(self) -> None:
        response = self.client.post(
            "/roles",
            json={"name": " Editor ", "description": "Edits content", "permissions": {"write": True}},
            headers=self.admin,
        )
        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertEqual(data["name"], "editor")
        self.assertEqual(
            data["permissions"], {"read": False, "write": True, "update": False, "delete": False}
        )

    def test_duplicate_role(self) -> None:
        response = self.client.post("/roles", json={"name": "Admin"}, headers=self.admin)
        self.assertEqual(response.status_code, 400)

    def test_non_admin_cannot_create_role(self) -> None:
        response = self.client.post("/roles", json={"name": "editor"}, headers=self.client_headers)
        self.assertEqual(response.status_code, 403)
        self.assertIsNone(self.load_role("editor"))

    def test_roles_require_authentication(self) -> None:
        self.assertEqual(self.client.get("/roles").status_code, 401)


if __name__ == "__main__":
    unittest.main()
