import logging
from supabase import Client, AuthError
from app.modules.auth.schemas import LoginRequest, LoginResponse
from fastapi import HTTPException
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def user_to_dict(user: Any) -> Dict[str, Any]:
    """JSON-ready copy of a Supabase Auth user"""
    return user.model_dump(mode="json")


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def login(self, login_data: LoginRequest) -> LoginResponse:
        """Authenticate user using Supabase Auth password grant"""
        if not login_data.email or not login_data.password:
            raise HTTPException(status_code=400, detail="Email and password required")

        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })
        except AuthError as e:
            raise HTTPException(status_code=400, detail=e.message)

        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=400, detail="Invalid login credentials")

        return LoginResponse(
            access_token=auth_response.session.access_token,
            user=user_to_dict(auth_response.user)
        )

    def authenticate(self, authorization: Optional[str]) -> Dict[str, Any]:
        """Resolve an Authorization header value to the calling user.

        Raises 401 with "Missing authorization header" when there is no
        header, and 401 with "Invalid token" for anything Supabase does not
        accept, including failures to reach Supabase at all.
        """
        if not authorization:
            raise HTTPException(status_code=401, detail="Missing authorization header")

        token = authorization
        if token.startswith(BEARER_PREFIX):
            token = token[len(BEARER_PREFIX):]
        return self.get_current_user(token.strip())

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token"""
        if not token:
            raise HTTPException(status_code=401, detail="Invalid token")
        try:
            user_response = self.supabase.auth.get_user(jwt=token)
        except Exception as e:
            logger.debug(f"Token verification failed: {e}")
            raise HTTPException(status_code=401, detail="Invalid token")

        if not user_response or not user_response.user:
            raise HTTPException(status_code=401, detail="Invalid token")
        return user_to_dict(user_response.user)
