# backend/shop_admin/api/endpoints/admin.py
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Optional
import uuid

from shop_admin import crud, models, schemas
from shop_admin.api import deps
from shop_admin.core.exceptions import NotFoundError
from shop_admin.db.session import get_db
from shop_admin.services.admin_auth import AdminAuthService
from shop_admin.services.email_service import EmailService

router = APIRouter()

@router.get("/stats", response_model=schemas.AdminStats)
async def read_admin_stats(
    db: AsyncSession = Depends(get_db),
    admin_auth: AdminAuthService = Depends(deps.get_admin_auth),
    current_admin: models.Admin = Depends(deps.get_current_admin),
) -> Any:
    return await admin_auth.stats(db)

# --- Password recovery (no auth: the admin is locked out) ---
@router.post("/forgot-password", response_model=schemas.EmailAck)
async def forgot_password(
    request_in: schemas.ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db),
    admin_auth: AdminAuthService = Depends(deps.get_admin_auth),
) -> Any:
    message = await admin_auth.forgot_password(db, email=str(request_in.email))
    return schemas.EmailAck(message=message)

@router.post("/reset-password", response_model=schemas.Message)
async def reset_password(
    request_in: schemas.ResetPasswordRequest,
    db: AsyncSession = Depends(get_db),
    admin_auth: AdminAuthService = Depends(deps.get_admin_auth),
) -> Any:
    await admin_auth.reset_password(db, token=request_in.token, new_password=request_in.new_password)
    return schemas.Message(message="Password has been reset successfully")

@router.post("/send-otp", response_model=schemas.EmailAck)
async def send_otp(
    request_in: schemas.SendOtpRequest,
    db: AsyncSession = Depends(get_db),
    admin_auth: AdminAuthService = Depends(deps.get_admin_auth),
) -> Any:
    message = await admin_auth.send_otp(db, email=str(request_in.email))
    return schemas.EmailAck(message=message, email=request_in.email)

@router.post("/verify-otp", response_model=schemas.EmailAck)
async def verify_otp(
    request_in: schemas.VerifyOtpRequest,
    db: AsyncSession = Depends(get_db),
    admin_auth: AdminAuthService = Depends(deps.get_admin_auth),
) -> Any:
    await admin_auth.verify_otp(db, email=str(request_in.email), otp=request_in.otp)
    return schemas.EmailAck(message="OTP verified successfully", email=request_in.email)

@router.post("/verify-otp-reset-password", response_model=schemas.Message)
async def verify_otp_and_reset_password(
    request_in: schemas.VerifyOtpResetRequest,
    db: AsyncSession = Depends(get_db),
    admin_auth: AdminAuthService = Depends(deps.get_admin_auth),
) -> Any:
    await admin_auth.verify_otp_and_reset_password(
        db, email=str(request_in.email), otp=request_in.otp, new_password=request_in.new_password
    )
    return schemas.Message(message="Password has been reset successfully")

@router.get("/test-email")
async def test_email(
    email_service: EmailService = Depends(deps.get_email_service),
    current_admin: models.Admin = Depends(deps.get_current_admin),
) -> Any:
    """
    Sends a test message to the calling admin. 500 with the provider error when delivery fails.
    """
    ok, error = await email_service.test_config(current_admin.email)
    if not ok:
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Email configuration error", "error": error},
        )
    return schemas.Message(message="Email configuration is working correctly")

# --- Storefront users ---
@router.get("/users", response_model=schemas.UserPage)
async def read_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, description="Matches name, email or mobile"),
    db: AsyncSession = Depends(get_db),
    current_admin: models.Admin = Depends(deps.get_current_admin),
) -> Any:
    users, total = await crud.user.get_users(db, page=page, limit=limit, search=search)
    return schemas.UserPage(
        data=[schemas.UserOut.model_validate(u) for u in users],
        pagination=schemas.Pagination.build(page=page, limit=limit, total=total),
    )

@router.put("/users/{user_id}/block", response_model=schemas.UserBlockResult)
async def toggle_user_block(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_admin: models.Admin = Depends(deps.get_current_admin),
) -> Any:
    user = await crud.user.get_user(db, user_id=user_id)
    if not user:
        raise NotFoundError("User not found")
    user = await crud.user.toggle_user_active(db, db_obj=user)
    action = "unblocked" if user.is_active else "blocked"
    return schemas.UserBlockResult(message=f"User {action} successfully", user_id=user.id, is_active=user.is_active)
