from pydantic import EmailStr, constr
from typing import Any, Dict, List, Optional
from datetime import datetime
import uuid

from shop_admin.schemas.common import ORMModel, Pagination
from shop_admin.schemas.image import CamelModel


class UserRegister(CamelModel):
    name: Optional[str] = None
    email: EmailStr
    password: constr(min_length=8)
    mobile: Optional[str] = None


# Properties to return to client (never include password)
class UserOut(ORMModel):
    id: uuid.UUID
    name: str
    email: EmailStr
    mobile: Optional[str] = None
    role: str
    is_active: bool = True
    address: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None


class UserPage(CamelModel):
    data: List[UserOut]
    pagination: Pagination


class UserBlockResult(CamelModel):
    message: str
    user_id: uuid.UUID
    is_active: bool
