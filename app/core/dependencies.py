"""
Core dependencies for route protection and admin checking
"""

from fastapi import Depends, Header, HTTPException, status
from app.database.supabase_client import get_supabase_admin
from app.modules.auth.service import AuthService
from supabase import Client
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

ADMIN_REQUIRED = "Forbidden: Admin access required"


def get_auth_service(supabase: Client = Depends(get_supabase_admin)) -> AuthService:
    return AuthService(supabase)


def get_current_user(
    authorization: Optional[str] = Header(None),
    auth_service: AuthService = Depends(get_auth_service)
) -> Dict[str, Any]:
    """Resolve the bearer token in the Authorization header to a Supabase user"""
    return auth_service.authenticate(authorization)


def is_admin(user_id: str, supabase: Client) -> bool:
    """Check the is_admin flag on the user's profile row.

    A missing row or a failed query counts as not admin.
    """
    try:
        result = supabase.table("profiles")\
            .select("is_admin")\
            .eq("id", user_id)\
            .single()\
            .execute()
    except Exception as e:
        logger.warning(f"Admin lookup failed for user {user_id}: {e}")
        return False
    if not result.data:
        return False
    return result.data.get("is_admin") is True


def ensure_admin(user_data: Dict[str, Any], supabase: Client) -> Dict[str, Any]:
    if not is_admin(user_data["id"], supabase):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=ADMIN_REQUIRED
        )
    return user_data


def require_admin(
    user_data: Dict[str, Any] = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_admin)
) -> Dict[str, Any]:
    """Dependency that lets the request through only for admin profiles"""
    return ensure_admin(user_data, supabase)
