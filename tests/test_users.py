import pytest

from models.log import Log
from models.users import User
from routes.users import get_verifier
from services.accounts import PasswordVerifier, register_user
from utils.errors import AuthError, DuplicateEntry, ValidationError
from utils.hashing import get_password_hash, verify_password


class TestHashing:
    def test_round_trip(self):
        hashed = get_password_hash("hunter2")
        assert hashed != "hunter2"
        assert verify_password("hunter2", hashed)
        assert not verify_password("hunter3", hashed)

    def test_plaintext_stored_value_never_matches(self):
        assert not verify_password("admin123", "admin123")


class TestAccounts:
    def test_register_normalizes_email(self, db):
        user = register_user(db, "Grace", "  Grace@Example.COM ", "pw")
        assert user.email == "grace@example.com"
        assert user.password_hash != "pw"

    def test_duplicate_email_is_case_insensitive(self, db, user):
        with pytest.raises(DuplicateEntry):
            register_user(db, "Other", "ADA@example.com", "pw")

    def test_register_requires_fields(self, db):
        with pytest.raises(ValidationError):
            register_user(db, "", "x@example.com", "pw")

    def test_password_verifier(self, db, user):
        verifier = PasswordVerifier(db)
        assert verifier.verify("ada@example.com", "s3cret").id == user.id
        with pytest.raises(AuthError):
            verifier.verify("ada@example.com", "wrong")
        with pytest.raises(AuthError):
            verifier.verify("nobody@example.com", "s3cret")


class TestUsersApi:
    def test_register_returns_token_and_identity(self, client, db):
        response = client.post("/api/users/register", json={
            "name": "Linus", "email": "linus@example.com", "password": "pw123",
        })

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Registered successfully"
        assert body["token"]
        assert body["user"]["email"] == "linus@example.com"
        assert "password" not in body["user"]
        assert "password_hash" not in body["user"]
        assert db.query(User).count() == 1

    def test_register_duplicate(self, client, user):
        response = client.post("/api/users/register", json={
            "name": "Ada again", "email": "ada@example.com", "password": "x",
        })
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Email already exists"}

    def test_register_missing_field(self, client):
        response = client.post("/api/users/register", json={"email": "a@example.com", "password": "x"})
        assert response.status_code == 400

    def test_login_and_me(self, client, user):
        login = client.post("/api/users/login", json={"email": "ada@example.com", "password": "s3cret"})

        assert login.status_code == 200
        body = login.json()
        assert body["message"] == "Login successful"
        assert body["user"] == {"id": user.id, "name": "Ada", "email": "ada@example.com"}

        me = client.get("/api/users/me", headers={"Authorization": f"Bearer {body['token']}"})
        assert me.status_code == 200
        assert me.json()["user"]["id"] == user.id

    def test_login_bad_password(self, client, db, user):
        response = client.post("/api/users/login", json={"email": "ada@example.com", "password": "nope"})

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Invalid credentials"}
        db.expire_all()
        failed = db.query(Log).filter(Log.action == "LOGIN", Log.status == "FAIL").count()
        assert failed == 1

    def test_me_requires_token(self, client):
        assert client.get("/api/users/me").status_code == 401
        bad = client.get("/api/users/me", headers={"Authorization": "Bearer not-a-token"})
        assert bad.status_code == 401
        assert bad.json()["success"] is False

    def test_verifier_is_pluggable(self, app, client, user):
        class AcceptAll:
            def verify(self, email, secret):
                return user

        app.dependency_overrides[get_verifier] = lambda: AcceptAll()

        response = client.post("/api/users/login", json={"email": "ada@example.com", "password": "anything"})
        assert response.status_code == 200
        assert response.json()["user"]["id"] == user.id
