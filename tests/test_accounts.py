"""
Tests for signup and login.
"""

from sqlmodel import select

from models import User


class TestSignup:

    def test_signup_returns_public_user(self, client):
        response = client.post(
            "/api/signup",
            json={"email": "ana@example.com", "password": "pw123456", "display_name": "Ana"},
        )

        assert response.status_code == 201
        user = response.json()["user"]
        assert user["email"] == "ana@example.com"
        assert user["display_name"] == "Ana"
        assert "password_hash" not in user
        assert "password" not in user

    def test_role_defaults_to_receiver(self, make_user):
        user = make_user(role=None)

        assert user["is_receiver"] is True
        assert user["is_giver"] is False
        assert user["is_driver"] is False

    def test_role_sets_matching_flag(self, make_user):
        giver = make_user(role="giver")
        driver = make_user(role="driver")

        assert (giver["is_giver"], giver["is_receiver"], giver["is_driver"]) == (True, False, False)
        assert (driver["is_giver"], driver["is_receiver"], driver["is_driver"]) == (False, False, True)

    def test_default_preferences(self, make_user):
        user = make_user()

        assert user["no_contact"] is False
        assert user["pickup_notes"] is None
        assert user["notification_level"] == "all"

    def test_password_is_stored_hashed(self, make_user, session):
        created = make_user(password="plain-text-pw")

        stored = session.get(User, created["id"])
        assert stored.password_hash != "plain-text-pw"
        assert stored.password_hash.startswith("$pbkdf2-sha256$")

    def test_duplicate_email_conflicts(self, client, make_user, session):
        make_user(email="dup@example.com")

        response = client.post(
            "/api/signup",
            json={"email": "dup@example.com", "password": "other", "display_name": "Again"},
        )

        assert response.status_code == 409
        assert response.json() == {"error": "Email already registered"}
        rows = session.exec(select(User).where(User.email == "dup@example.com")).all()
        assert len(rows) == 1

    def test_missing_fields_rejected(self, client):
        for missing in ("email", "password", "display_name"):
            payload = {"email": "x@example.com", "password": "pw", "display_name": "X"}
            del payload[missing]

            response = client.post("/api/signup", json=payload)

            assert response.status_code == 400
            assert missing in response.json()["error"]

    def test_email_without_at_rejected(self, client):
        response = client.post(
            "/api/signup",
            json={"email": "not-an-email", "password": "pw", "display_name": "X"},
        )

        assert response.status_code == 400

    def test_dotless_domain_rejected(self, client, session):
        response = client.post(
            "/api/signup",
            json={"email": "bob@localhost", "password": "pw", "display_name": "Bob"},
        )

        assert response.status_code == 400
        assert session.exec(select(User)).all() == []

    def test_blank_display_name_rejected(self, client):
        response = client.post(
            "/api/signup",
            json={"email": "blank@example.com", "password": "pw", "display_name": "   "},
        )

        assert response.status_code == 400

    def test_unknown_role_rejected(self, client, session):
        response = client.post(
            "/api/signup",
            json={"email": "r@example.com", "password": "pw", "display_name": "R", "role": "admin"},
        )

        assert response.status_code == 400
        assert session.exec(select(User)).all() == []


class TestLogin:

    def test_login_with_correct_credentials(self, client, make_user):
        created = make_user(email="login@example.com", password="right-pw")

        response = client.post("/api/login", json={"email": "login@example.com", "password": "right-pw"})

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["id"] == created["id"]
        assert "password_hash" not in user

    def test_login_with_mixed_case_domain(self, client):
        signup = client.post(
            "/api/signup",
            json={"email": "Ana@Example.COM", "password": "pw123456", "display_name": "Ana"},
        )

        response = client.post("/api/login", json={"email": "Ana@Example.COM", "password": "pw123456"})

        assert signup.status_code == 201
        assert signup.json()["user"]["email"] == "Ana@example.com"
        assert response.status_code == 200
        assert response.json()["user"]["id"] == signup.json()["user"]["id"]

    def test_wrong_password_and_unknown_email_look_the_same(self, client, make_user):
        make_user(email="login@example.com", password="right-pw")

        wrong_password = client.post(
            "/api/login", json={"email": "login@example.com", "password": "wrong-pw"}
        )
        unknown_email = client.post(
            "/api/login", json={"email": "nobody@example.com", "password": "right-pw"}
        )

        assert wrong_password.status_code == 401
        assert unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json() == {"error": "Invalid email or password"}

    def test_missing_password_is_a_validation_error(self, client):
        response = client.post("/api/login", json={"email": "login@example.com"})

        assert response.status_code == 400

    def test_invalid_email_is_a_validation_error(self, client):
        response = client.post("/api/login", json={"email": "not-an-email", "password": "pw"})

        assert response.status_code == 400
