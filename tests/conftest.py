"""Pytest configuration and fixtures for the admin API tests.

Provides an in-memory stand-in for the Supabase client that covers the
parts this service touches: ``auth.get_user``, ``auth.sign_in_with_password``,
the ``auth.admin`` user CRUD calls and the ``profiles`` table query builder.
Errors are raised with the real supabase exception types so the services'
error mapping is exercised as in production.
"""

from __future__ import annotations

import os
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Optional

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("SUPABASE_URL", "http://127.0.0.1:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")

import pytest
from fastapi.testclient import TestClient
from supabase import AuthApiError, PostgrestAPIError

from app.database.supabase_client import get_supabase, get_supabase_admin
from app.main import app

ADMIN_TOKEN = "admin-token"
USER_TOKEN = "user-token"
NO_PROFILE_TOKEN = "no-profile-token"


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================================
# Fake Supabase Auth
# ============================================================================


class FakeUser:
    """Mimics supabase_auth.types.User for the fields this service reads."""

    def __init__(self, email: str, user_metadata: Optional[dict] = None) -> None:
        self.id = str(uuid.uuid4())
        self.email = email
        self.aud = "authenticated"
        self.role = "authenticated"
        self.app_metadata = {"provider": "email", "providers": ["email"]}
        self.user_metadata = dict(user_metadata or {})
        self.created_at = _now()
        self.updated_at = self.created_at
        self.email_confirmed_at = self.created_at
        self.last_sign_in_at: Optional[datetime] = None

    def model_dump(self, mode: str = "python") -> dict[str, Any]:
        def ts(value: Optional[datetime]) -> Any:
            if value is None or mode != "json":
                return value
            return value.isoformat()

        return {
            "id": self.id,
            "email": self.email,
            "aud": self.aud,
            "role": self.role,
            "app_metadata": dict(self.app_metadata),
            "user_metadata": dict(self.user_metadata),
            "created_at": ts(self.created_at),
            "updated_at": ts(self.updated_at),
            "email_confirmed_at": ts(self.email_confirmed_at),
            "last_sign_in_at": ts(self.last_sign_in_at),
        }


def _user_not_found() -> AuthApiError:
    return AuthApiError("User not found", 404, "user_not_found")


class FakeAuthAdmin:
    def __init__(self, db: FakeSupabase) -> None:
        self.db = db

    def create_user(self, attributes: dict) -> SimpleNamespace:
        self.db.calls.append(("create_user", attributes))
        if any(u.email == attributes["email"] for u in self.db.users.values()):
            raise AuthApiError(
                "A user with this email address has already been registered", 422, "email_exists"
            )
        user = FakeUser(attributes["email"], attributes.get("user_metadata"))
        self.db.users[user.id] = user
        self.db.passwords[user.id] = attributes["password"]
        # profiles trigger
        self.db.tables["profiles"].append(
            {"id": user.id, "username": None, "full_name": None, "is_admin": False}
        )
        return SimpleNamespace(user=user)

    def list_users(self) -> list:
        self.db.calls.append(("list_users", None))
        return list(self.db.users.values())

    def get_user_by_id(self, uid: str) -> SimpleNamespace:
        self.db.calls.append(("get_user_by_id", uid))
        if uid not in self.db.users:
            raise _user_not_found()
        return SimpleNamespace(user=self.db.users[uid])

    def update_user_by_id(self, uid: str, attributes: dict) -> SimpleNamespace:
        self.db.calls.append(("update_user_by_id", attributes))
        if uid not in self.db.users:
            raise _user_not_found()
        user = self.db.users[uid]
        if "email" in attributes:
            user.email = attributes["email"]
        if "password" in attributes:
            self.db.passwords[uid] = attributes["password"]
        if "user_metadata" in attributes:
            user.user_metadata.update(attributes["user_metadata"])
        user.updated_at = _now()
        return SimpleNamespace(user=user)

    def delete_user(self, uid: str, should_soft_delete: bool = False) -> None:
        self.db.calls.append(("delete_user", uid))
        if uid not in self.db.users:
            raise _user_not_found()
        del self.db.users[uid]
        self.db.tables["profiles"] = [r for r in self.db.tables["profiles"] if r["id"] != uid]


class FakeAuth:
    def __init__(self, db: FakeSupabase) -> None:
        self.db = db
        self.admin = FakeAuthAdmin(db)

    def get_user(self, jwt: Optional[str] = None) -> SimpleNamespace:
        uid = self.db.tokens.get(jwt)
        if uid is None or uid not in self.db.users:
            raise AuthApiError("invalid JWT: unable to parse or verify signature", 403, "bad_jwt")
        return SimpleNamespace(user=self.db.users[uid])

    def sign_in_with_password(self, credentials: dict) -> SimpleNamespace:
        user = next((u for u in self.db.users.values() if u.email == credentials["email"]), None)
        if user is None or self.db.passwords[user.id] != credentials["password"]:
            raise AuthApiError("Invalid login credentials", 400, "invalid_credentials")
        token = f"token-{uuid.uuid4()}"
        self.db.tokens[token] = user.id
        user.last_sign_in_at = _now()
        return SimpleNamespace(user=user, session=SimpleNamespace(access_token=token))


# ============================================================================
# Fake PostgREST table access
# ============================================================================


class FakeQuery:
    """Mimics the postgrest request builder chain used against profiles."""

    def __init__(self, db: FakeSupabase, table: str) -> None:
        self.db = db
        self.table = table
        self._columns = "*"
        self._filters: list[tuple[str, Any]] = []
        self._single = False
        self._update: Optional[dict] = None

    def select(self, columns: str = "*") -> FakeQuery:
        self._columns = columns
        return self

    def update(self, data: dict) -> FakeQuery:
        self._update = dict(data)
        return self

    def eq(self, column: str, value: Any) -> FakeQuery:
        self._filters.append((column, value))
        return self

    def single(self) -> FakeQuery:
        self._single = True
        return self

    def execute(self) -> SimpleNamespace:
        if self.db.table_error is not None:
            raise self.db.table_error
        rows = self.db.tables[self.table]
        matched = [r for r in rows if all(r.get(c) == v for c, v in self._filters)]

        if self._update is not None:
            self.db.calls.append(("update_profile", self._update))
            if self.db.update_error is not None:
                raise self.db.update_error
            for row in matched:
                row.update(self._update)
            return SimpleNamespace(data=[dict(r) for r in matched])

        data = [self._project(r) for r in matched]
        if self._single:
            if len(data) != 1:
                raise PostgrestAPIError({
                    "message": "JSON object requested, multiple (or no) rows returned",
                    "code": "PGRST116",
                    "details": f"The result contains {len(data)} rows",
                    "hint": None,
                })
            return SimpleNamespace(data=data[0])
        return SimpleNamespace(data=data)

    def _project(self, row: dict) -> dict:
        if self._columns == "*":
            return dict(row)
        return {c.strip(): row.get(c.strip()) for c in self._columns.split(",")}


class FakeSupabase:
    def __init__(self) -> None:
        self.users: dict[str, FakeUser] = {}
        self.passwords: dict[str, str] = {}
        self.tokens: dict[str, str] = {}
        self.tables: dict[str, list[dict]] = {"profiles": []}
        self.calls: list[tuple[str, Any]] = []
        self.table_error: Optional[Exception] = None
        self.update_error: Optional[Exception] = None
        self.auth = FakeAuth(self)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def add_user(
        self,
        email: str,
        password: str = "password123",
        is_admin: bool = False,
        username: Optional[str] = None,
        with_profile: bool = True,
        token: Optional[str] = None,
    ) -> FakeUser:
        user = FakeUser(email, {"full_name": email.split("@")[0].title()})
        self.users[user.id] = user
        self.passwords[user.id] = password
        if with_profile:
            self.tables["profiles"].append(
                {"id": user.id, "username": username, "full_name": None, "is_admin": is_admin}
            )
        if token:
            self.tokens[token] = user.id
        return user

    def profile(self, user_id: str) -> Optional[dict]:
        return next((r for r in self.tables["profiles"] if r["id"] == user_id), None)

    def calls_named(self, name: str) -> list:
        return [args for call, args in self.calls if call == name]


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    fake = FakeSupabase()
    fake.add_user("alice@example.com", is_admin=True, username="alice", token=ADMIN_TOKEN)
    fake.add_user("bob@example.com", is_admin=False, username="bob", token=USER_TOKEN)
    fake.add_user("carol@example.com", with_profile=False, token=NO_PROFILE_TOKEN)
    fake.calls.clear()
    return fake


@pytest.fixture
def client(fake_supabase):
    app.dependency_overrides[get_supabase] = lambda: fake_supabase
    app.dependency_overrides[get_supabase_admin] = lambda: fake_supabase
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> dict:
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def user_headers() -> dict:
    return {"Authorization": f"Bearer {USER_TOKEN}"}
