from pydantic import BaseModel
from typing import Optional, Dict, Any


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(BaseModel):
    success: bool = True
    access_token: str
    user: Dict[str, Any]


class MeUser(BaseModel):
    id: str
    email: Optional[str] = None
    profile: Optional[Dict[str, Any]] = None


class MeResponse(BaseModel):
    success: bool = True
    user: MeUser
