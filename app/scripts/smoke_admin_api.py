"""
Admin API Smoke Test
Exercises a running admin API end to end against a real Supabase project:
unauthorized access, admin login, non-admin rejection, create / get / update /
list / delete, and a repeated delete.

Usage:
    ADMIN_API_URL=http://localhost:3001 \
    SMOKE_ADMIN_EMAIL=alice@example.com SMOKE_ADMIN_PASSWORD=password123 \
    python -m app.scripts.smoke_admin_api

Set SMOKE_USER_EMAIL / SMOKE_USER_PASSWORD to also check that a non-admin
account is rejected with 403.
"""

import os
import sys
import time
import logging
from typing import List, Optional, Tuple

import httpx

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)

API_URL = os.environ.get("ADMIN_API_URL", "http://localhost:3001")

results: List[Tuple[str, bool, Optional[str]]] = []


def check(name: str, passed: bool, error: Optional[str] = None) -> bool:
    results.append((name, passed, error))
    if passed:
        logger.info(f"PASS {name}")
    else:
        logger.error(f"FAIL {name}: {error}")
    return passed


def login(client: httpx.Client, email: str, password: str) -> Optional[str]:
    response = client.post("/auth/login", json={"email": email, "password": password})
    data = response.json()
    if response.status_code != 200 or not data.get("success"):
        logger.error(f"Login failed for {email}: {data.get('error')}")
        return None
    return data["access_token"]


def run(client: httpx.Client) -> None:
    response = client.get("/admin/users")
    check(
        "Unauthorized access is rejected",
        response.status_code == 401 and "error" in response.json(),
        f"got status {response.status_code}",
    )

    admin_token = login(
        client,
        os.environ.get("SMOKE_ADMIN_EMAIL", "alice@example.com"),
        os.environ.get("SMOKE_ADMIN_PASSWORD", "password123"),
    )
    if not check("Admin login", admin_token is not None, "no access token"):
        return
    admin_headers = {"Authorization": f"Bearer {admin_token}"}

    user_email = os.environ.get("SMOKE_USER_EMAIL")
    if user_email:
        user_token = login(client, user_email, os.environ.get("SMOKE_USER_PASSWORD", "password123"))
        response = client.get("/admin/users", headers={"Authorization": f"Bearer {user_token}"})
        check("Non-admin access is rejected", response.status_code == 403, f"got status {response.status_code}")

    test_email = f"testuser{int(time.time() * 1000)}@example.com"
    response = client.post("/admin/users", headers=admin_headers, json={
        "email": test_email,
        "password": "testPassword123",
        "full_name": "Test User",
        "username": "testuser",
    })
    data = response.json()
    if not check("Create user", response.status_code == 200 and data.get("success"), data.get("error")):
        return
    user_id = data["user"]["id"]

    response = client.get(f"/admin/users/{user_id}", headers=admin_headers)
    user = response.json().get("user") or {}
    check(
        "Get user round trip",
        user.get("email") == test_email and (user.get("profile") or {}).get("username") == "testuser",
        f"got {user.get('email')} / {user.get('profile')}",
    )

    response = client.put(f"/admin/users/{user_id}", headers=admin_headers, json={"password": "newPassword456"})
    updated = response.json().get("user") or {}
    check(
        "Password-only update keeps email",
        response.status_code == 200 and updated.get("email") == test_email,
        response.json().get("error"),
    )

    response = client.get("/admin/users", headers=admin_headers)
    ids = {u["id"] for u in response.json().get("users", [])}
    check(f"List users (found {len(ids)})", user_id in ids, "created user missing from list")

    response = client.delete(f"/admin/users/{user_id}", headers=admin_headers)
    check("Delete user", response.status_code == 200, response.json().get("error"))

    response = client.delete(f"/admin/users/{user_id}", headers=admin_headers)
    check("Repeated delete is a backend error", response.status_code == 400, f"got status {response.status_code}")


def main() -> int:
    logger.info(f"Admin API: {API_URL}")
    with httpx.Client(base_url=API_URL, timeout=30.0) as client:
        run(client)

    failed = [r for r in results if not r[1]]
    logger.info(f"Total: {len(results)} | Passed: {len(results) - len(failed)} | Failed: {len(failed)}")
    return 1 if failed or not results else 0


if __name__ == "__main__":
    sys.exit(main())
