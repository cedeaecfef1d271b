from pydantic import BaseModel
from typing import Optional, List, Dict, Any

PROFILE_FIELDS = ("username", "is_admin", "full_name")


def _drop_null_admin_flag(changes: Dict[str, Any]) -> Dict[str, Any]:
    # profiles.is_admin is NOT NULL
    if changes.get("is_admin", False) is None:
        del changes["is_admin"]
    return changes


class UserCreate(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    full_name: Optional[str] = None
    username: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    is_admin: Optional[bool] = None

    def profile_changes(self) -> Dict[str, Any]:
        """username / is_admin that were sent, including explicit false or empty"""
        changes = self.model_dump(include={"username", "is_admin"}, exclude_unset=True)
        return _drop_null_admin_flag(changes)


class UserUpdate(BaseModel):
    """Partial update. Only fields present in the request body are applied."""
    email: Optional[str] = None
    password: Optional[str] = None
    user_metadata: Optional[Dict[str, Any]] = None
    metadata: Optional[Dict[str, Any]] = None
    full_name: Optional[str] = None
    username: Optional[str] = None
    is_admin: Optional[bool] = None

    def identity_changes(self) -> Dict[str, Any]:
        # email/password cannot be cleared, so an explicit null is ignored
        changes = self.model_dump(include={"email", "password"}, exclude_unset=True)
        return {k: v for k, v in changes.items() if v is not None}

    def metadata_changes(self) -> Optional[Dict[str, Any]]:
        sent = self.model_fields_set
        if not sent & {"user_metadata", "metadata", "full_name"}:
            return None
        user_metadata = dict(self.user_metadata or {})
        if "full_name" in sent:
            user_metadata["full_name"] = self.full_name
        user_metadata.update(self.metadata or {})
        return user_metadata

    def profile_changes(self) -> Dict[str, Any]:
        changes = self.model_dump(include=set(PROFILE_FIELDS), exclude_unset=True)
        return _drop_null_admin_flag(changes)


class AdminUpdateUserRequest(UserUpdate):
    user_id: Optional[str] = None


class CreatedUser(BaseModel):
    id: str
    email: Optional[str] = None
    created_at: Optional[str] = None


class CreateUserResponse(BaseModel):
    success: bool = True
    user: CreatedUser


class UserSummary(BaseModel):
    id: str
    email: Optional[str] = None
    created_at: Optional[str] = None
    last_sign_in_at: Optional[str] = None


class ListUsersResponse(BaseModel):
    success: bool = True
    users: List[UserSummary]


class UserEnvelope(BaseModel):
    success: bool = True
    user: Dict[str, Any]


class UpdatedUser(BaseModel):
    id: str
    email: Optional[str] = None
    user_metadata: Dict[str, Any] = {}
    updated_at: Optional[str] = None


class UpdatedUserResponse(BaseModel):
    success: bool = True
    user: UpdatedUser


class MessageResponse(BaseModel):
    success: bool = True
    message: str
