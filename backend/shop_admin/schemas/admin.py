from pydantic import EmailStr, constr
from typing import Optional
from datetime import datetime
import uuid

from shop_admin.schemas.common import ORMModel
from shop_admin.schemas.image import CamelModel


class AdminCreate(CamelModel):
    name: Optional[str] = None
    email: EmailStr
    password: constr(min_length=8) # Enforce minimum password length
    mobile: Optional[str] = None


class AdminLogin(CamelModel):
    email: EmailStr
    password: str


class AdminOut(ORMModel):
    id: uuid.UUID
    name: str
    email: EmailStr
    role: str
    mobile: Optional[str] = None
    is_active: bool = True
    last_login: Optional[datetime] = None


class LoginResponse(CamelModel):
    admin: AdminOut
    token: str
    token_type: str = "bearer"


class TokenPayload(CamelModel):
    sub: Optional[str] = None # Account ID
    role: Optional[str] = None


class CurrentUser(CamelModel):
    # What the auth layer hands to the request context
    id: uuid.UUID
    role: str


# --- Password reset / OTP ---
class ForgotPasswordRequest(CamelModel):
    email: EmailStr


class ResetPasswordRequest(CamelModel):
    token: constr(min_length=1)
    new_password: constr(min_length=8)


class SendOtpRequest(CamelModel):
    email: EmailStr


class VerifyOtpRequest(CamelModel):
    email: EmailStr
    otp: constr(strip_whitespace=True, min_length=1)


class VerifyOtpResetRequest(VerifyOtpRequest):
    new_password: constr(min_length=8)


class EmailAck(CamelModel):
    success: bool = True
    message: str
    email: Optional[EmailStr] = None


class AdminStats(CamelModel):
    message: str
    total_admins: int
    active_admins: int
    timestamp: datetime
