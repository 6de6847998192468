"""Authentication schemas"""

from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr

from hostmate.models.user import UserRole


class Token(BaseModel):
    """JWT token response"""
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class UserCreate(BaseModel):
    """Sign-up request"""
    email: EmailStr
    password: str
    full_name: str
    phone: Optional[str] = None


class UserResponse(BaseModel):
    """User response"""
    id: UUID
    email: str
    full_name: Optional[str]
    phone: Optional[str]
    role: UserRole
    is_active: bool
    email_verified: bool
    created_at: datetime
    last_login: Optional[datetime]

    class Config:
        from_attributes = True


class UserIdentity(BaseModel):
    """
    Identity of the signed-in user, passed explicitly into core services.
    Only id, email, name, role and email verification are ever consumed.
    """
    id: UUID
    email: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    role: UserRole = UserRole.CUSTOMER
    email_verified: bool = False

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @classmethod
    def from_user(cls, user) -> "UserIdentity":
        return cls(
            id=user.id,
            email=user.email,
            name=user.full_name,
            phone=user.phone,
            role=user.role,
            email_verified=bool(user.email_verified),
        )


class EmailVerificationRequest(BaseModel):
    """Token from the verification link"""
    token: str
