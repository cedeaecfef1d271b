from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase, get_supabase_admin
from app.modules.auth.schemas import LoginRequest, LoginResponse, MeResponse, MeUser
from app.modules.auth.service import AuthService
from app.modules.users.service import UserService
from app.core.dependencies import get_current_user
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])
me_router = APIRouter(tags=["auth"])


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_profile_service(supabase: Client = Depends(get_supabase_admin)) -> UserService:
    return UserService(supabase)


@router.post("/login", response_model=LoginResponse)
def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@me_router.get("/me", response_model=MeResponse)
def get_me(
    current_user: Dict = Depends(get_current_user),
    service: UserService = Depends(get_profile_service)
):
    """Get the authenticated caller and their profile"""
    return MeResponse(
        user=MeUser(
            id=current_user["id"],
            email=current_user.get("email"),
            profile=service.get_profile(current_user["id"])
        )
    )
