from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase_admin
from app.modules.users.schemas import (
    UserCreate, UserUpdate, CreateUserResponse, ListUsersResponse,
    UserEnvelope, MessageResponse
)
from app.modules.users.service import UserService
from app.core.dependencies import require_admin
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/admin/users", tags=["admin-users"])


def get_user_service(supabase: Client = Depends(get_supabase_admin)) -> UserService:
    return UserService(supabase)


@router.post("", response_model=CreateUserResponse)
def create_user(
    user_data: UserCreate,
    admin: Dict = Depends(require_admin),
    service: UserService = Depends(get_user_service)
):
    """Create a user with a confirmed email (admin only)"""
    return service.create_user(user_data)


@router.get("", response_model=ListUsersResponse)
def list_users(
    admin: Dict = Depends(require_admin),
    service: UserService = Depends(get_user_service)
):
    """List all users (admin only)"""
    return service.list_users()


@router.get("/{user_id}", response_model=UserEnvelope)
def get_user(
    user_id: str,
    admin: Dict = Depends(require_admin),
    service: UserService = Depends(get_user_service)
):
    """Get user by ID (admin only)"""
    return UserEnvelope(user=service.get_user(user_id))


@router.put("/{user_id}", response_model=UserEnvelope)
def update_user(
    user_id: str,
    user_data: UserUpdate,
    admin: Dict = Depends(require_admin),
    service: UserService = Depends(get_user_service)
):
    """Update only the fields present in the body (admin only)"""
    return UserEnvelope(user=service.update_user(user_id, user_data))


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    admin: Dict = Depends(require_admin),
    service: UserService = Depends(get_user_service)
):
    """Delete user (admin only)"""
    return service.delete_user(user_id)
