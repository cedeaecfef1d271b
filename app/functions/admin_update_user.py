"""Function-per-request entry point for the admin-update-user operation.

Takes an API Gateway proxy event, runs the same authentication, admin check
and partial-update logic as ``PUT /admin/users/{id}``, and returns a proxy
response. Intended for deployments that run one function per operation
instead of the long-lived FastAPI server.

Request body::

    {"user_id": "...", "email"?, "password"?, "full_name"?,
     "username"?, "metadata"?, "is_admin"?}
"""

import base64
import json
import logging
from typing import Any, Dict, Mapping, Optional

from fastapi import HTTPException
from pydantic import ValidationError

from app.core.dependencies import ensure_admin
from app.core.logging_setup import configure_logging
from app.database.supabase_client import get_supabase_admin
from app.modules.auth.service import AuthService
from app.modules.users.schemas import AdminUpdateUserRequest, UpdatedUser, UpdatedUserResponse
from app.modules.users.service import UserService

configure_logging()
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def json_response(status_code: int, body: Any) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {**CORS_HEADERS, "Content-Type": "application/json"},
        "body": json.dumps(body, default=str),
    }


def lambda_handler(event: Mapping[str, Any], context: Any) -> Dict[str, Any]:
    method = (event.get("httpMethod") or "").upper()
    if method == "OPTIONS":
        return {"statusCode": 200, "headers": dict(CORS_HEADERS), "body": "ok"}
    if method != "POST":
        return json_response(405, {"error": "Method not allowed"})

    try:
        return _handle_update(event)
    except HTTPException as exc:
        return json_response(exc.status_code, {"error": exc.detail})
    except Exception:
        logger.exception("Unexpected error in admin-update-user")
        return json_response(500, {"error": "Internal server error"})


def _handle_update(event: Mapping[str, Any]) -> Dict[str, Any]:
    supabase = get_supabase_admin()

    user_data = AuthService(supabase).authenticate(_get_header(event, "authorization"))
    ensure_admin(user_data, supabase)

    body = _parse_body(event)
    if not body.user_id:
        raise HTTPException(status_code=400, detail="user_id is required")

    updated = UserService(supabase).update_user(body.user_id, body)
    response = UpdatedUserResponse(
        user=UpdatedUser(
            id=updated["id"],
            email=updated.get("email"),
            user_metadata=updated.get("user_metadata") or {},
            updated_at=updated.get("updated_at"),
        )
    )
    return json_response(200, response.model_dump())


def _get_header(event: Mapping[str, Any], name: str) -> Optional[str]:
    headers = event.get("headers") or {}
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def _parse_body(event: Mapping[str, Any]) -> AdminUpdateUserRequest:
    raw = event.get("body") or "{}"
    try:
        if event.get("isBase64Encoded"):
            raw = base64.b64decode(raw, validate=True).decode("utf-8")
        payload = json.loads(raw)
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail="Invalid JSON body")
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Invalid JSON body")
    try:
        return AdminUpdateUserRequest.model_validate(payload)
    except ValidationError:
        raise HTTPException(status_code=400, detail="Invalid request body")
