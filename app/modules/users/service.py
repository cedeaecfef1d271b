import logging
from supabase import Client, AuthError, PostgrestAPIError
from app.modules.auth.service import user_to_dict
from app.modules.users.schemas import (
    UserCreate, UserUpdate, CreateUserResponse, CreatedUser,
    ListUsersResponse, UserSummary, MessageResponse
)
from typing import Dict, Any, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"


class UserService:
    """User management through the Supabase Auth admin API and the profiles table.

    Requires a service_role client. Multi-step operations run their backend
    calls in order and stop at the first failure; earlier steps are not
    rolled back.
    """

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_user(self, user_data: UserCreate) -> CreateUserResponse:
        """Create a pre-confirmed user, then apply username / is_admin to the profile"""
        if not user_data.email or not user_data.password:
            raise HTTPException(status_code=400, detail="Email and password are required")

        user_metadata = {
            "full_name": user_data.full_name or "",
            **(user_data.metadata or {})
        }

        try:
            response = self.supabase.auth.admin.create_user({
                "email": user_data.email,
                "password": user_data.password,
                "email_confirm": True,
                "user_metadata": user_metadata
            })
        except AuthError as e:
            raise HTTPException(status_code=400, detail=e.message)
        except Exception as e:
            logger.exception(f"Create user error: {e}")
            raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

        created = user_to_dict(response.user)

        profile_changes = user_data.profile_changes()
        if profile_changes:
            try:
                self.update_profile(created["id"], profile_changes)
            except Exception as e:
                # The identity already exists; report success and leave the profile as provisioned
                logger.error(f"Profile update error for user {created['id']}: {e}")

        return CreateUserResponse(
            user=CreatedUser(
                id=created["id"],
                email=created.get("email"),
                created_at=created.get("created_at")
            )
        )

    def list_users(self) -> ListUsersResponse:
        """List every identity known to Supabase Auth"""
        try:
            users = self.supabase.auth.admin.list_users()
        except AuthError as e:
            raise HTTPException(status_code=400, detail=e.message)
        except Exception as e:
            logger.exception(f"List users error: {e}")
            raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

        summaries = []
        for user in users:
            data = user_to_dict(user)
            summaries.append(UserSummary(
                id=data["id"],
                email=data.get("email"),
                created_at=data.get("created_at"),
                last_sign_in_at=data.get("last_sign_in_at")
            ))
        return ListUsersResponse(users=summaries)

    def get_user(self, user_id: str) -> Dict[str, Any]:
        """Full identity by ID, with its profile row attached under "profile" """
        try:
            response = self.supabase.auth.admin.get_user_by_id(user_id)
        except AuthError:
            raise HTTPException(status_code=404, detail="User not found")
        except Exception as e:
            logger.exception(f"Get user error: {e}")
            raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

        if not response or not response.user:
            raise HTTPException(status_code=404, detail="User not found")

        user = user_to_dict(response.user)
        user["profile"] = self.get_profile(user_id)
        return user

    def update_user(self, user_id: str, user_data: UserUpdate) -> Dict[str, Any]:
        """Apply a partial update and return the identity as stored afterwards.

        Up to three calls, in order: email/password, user_metadata, profile.
        """
        identity_changes = user_data.identity_changes()
        if identity_changes:
            self._update_identity(user_id, identity_changes)

        metadata = user_data.metadata_changes()
        if metadata is not None:
            self._update_identity(user_id, {"user_metadata": metadata})

        profile_changes = user_data.profile_changes()
        if profile_changes:
            self.update_profile(user_id, profile_changes)

        try:
            response = self.supabase.auth.admin.get_user_by_id(user_id)
        except AuthError as e:
            raise HTTPException(status_code=400, detail=e.message)
        except Exception as e:
            logger.exception(f"Get updated user error: {e}")
            raise HTTPException(status_code=500, detail=INTERNAL_ERROR)
        return user_to_dict(response.user)

    def delete_user(self, user_id: str) -> MessageResponse:
        """Hard delete an identity; its profile goes with it via CASCADE"""
        try:
            self.supabase.auth.admin.delete_user(user_id)
        except AuthError as e:
            raise HTTPException(status_code=400, detail=e.message)
        except Exception as e:
            logger.exception(f"Delete user error: {e}")
            raise HTTPException(status_code=500, detail=INTERNAL_ERROR)
        return MessageResponse(message="User deleted successfully")

    def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Profile row for a user, or None when there is none"""
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", user_id)\
                .single()\
                .execute()
        except PostgrestAPIError as e:
            logger.debug(f"No profile for user {user_id}: {e.message}")
            return None
        return result.data or None

    def update_profile(self, user_id: str, changes: Dict[str, Any]) -> list:
        try:
            result = self.supabase.table("profiles")\
                .update(changes)\
                .eq("id", user_id)\
                .execute()
        except PostgrestAPIError as e:
            raise HTTPException(status_code=400, detail=e.message)
        return result.data

    def _update_identity(self, user_id: str, attributes: Dict[str, Any]) -> None:
        try:
            self.supabase.auth.admin.update_user_by_id(user_id, attributes)
        except AuthError as e:
            raise HTTPException(status_code=400, detail=e.message)
        except Exception as e:
            logger.exception(f"Update user error: {e}")
            raise HTTPException(status_code=500, detail=INTERNAL_ERROR)
