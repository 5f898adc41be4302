"""
Admin account flows: first-admin bootstrap, login, and the two password
recovery paths (emailed reset link, emailed one-time code).

Unknown emails get the same answer as known ones on the recovery endpoints so
callers cannot probe which addresses have accounts.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from shop_admin.core.config import settings
from shop_admin.core.exceptions import AuthenticationError, ConflictError, ValidationError
from shop_admin.core.security import (
    create_access_token,
    generate_otp,
    generate_reset_token,
    get_password_hash,
    verify_password,
)
from shop_admin.crud import crud_admin
from shop_admin.models.admin import Admin as AdminModel
from shop_admin.schemas.admin import AdminCreate, AdminStats
from shop_admin.services.email_service import EmailService

logger = logging.getLogger(__name__)

RESET_SENT_MESSAGE = "If the email exists, password reset instructions have been sent"
OTP_SENT_MESSAGE = "If the email exists, OTP has been sent"
INVALID_OTP_MESSAGE = "Invalid or expired OTP"
TOO_MANY_ATTEMPTS_MESSAGE = "Too many failed attempts. Please request a new OTP"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_future(moment: Optional[datetime], now: datetime) -> bool:
    if moment is None:
        return False
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment > now


class AdminAuthService:
    def __init__(
        self,
        email_service: EmailService,
        repository: Any = crud_admin,
        clock: Callable[[], datetime] = utcnow,
        otp_max_attempts: int = settings.OTP_MAX_ATTEMPTS,
        otp_expire_minutes: int = settings.OTP_EXPIRE_MINUTES,
        reset_expire_minutes: int = settings.PASSWORD_RESET_EXPIRE_MINUTES,
    ):
        self.email_service = email_service
        self.repository = repository
        self.clock = clock
        self.otp_max_attempts = otp_max_attempts
        self.otp_expire_minutes = otp_expire_minutes
        self.reset_expire_minutes = reset_expire_minutes

    async def create_first_admin(self, db: AsyncSession, admin_in: AdminCreate) -> AdminModel:
        """Only allowed while no admin account exists."""
        if await self.repository.get_first_admin(db):
            raise ValidationError("Admin user already exists")
        if await self.repository.get_admin_by_email(db, email=admin_in.email):
            raise ConflictError("Admin already exists with this email")
        admin = await self.repository.create_admin(
            db,
            name=admin_in.name or "Admin",
            email=str(admin_in.email),
            password=admin_in.password,
            mobile=admin_in.mobile,
        )
        logger.info("First admin account created: %s", admin.email)
        return admin

    async def login(self, db: AsyncSession, email: str, password: str) -> Tuple[AdminModel, str]:
        admin = await self.repository.get_admin_by_email(db, email=email)
        if not admin or not verify_password(password, admin.hashed_password):
            raise AuthenticationError("Invalid email or password")
        if not admin.is_active:
            raise AuthenticationError("Account is disabled")
        admin.last_login = self.clock()
        admin = await self.repository.save_admin(db, db_obj=admin)
        token = create_access_token(subject=str(admin.id), role=admin.role)
        return admin, token

    async def forgot_password(self, db: AsyncSession, email: str) -> str:
        admin = await self.repository.get_admin_by_email(db, email=email)
        if not admin:
            logger.info("Password reset requested for unknown email %s", email)
            return RESET_SENT_MESSAGE

        token = generate_reset_token()
        admin.reset_password_token = token
        admin.reset_password_expiry = self.clock() + timedelta(minutes=self.reset_expire_minutes)
        await self.repository.save_admin(db, db_obj=admin)
        logger.debug("Password reset token for %s: %s", admin.email, token)

        # Delivery failures stay invisible to the caller
        await self.email_service.send_password_reset_email(
            admin.email, admin.name, token, expire_minutes=self.reset_expire_minutes
        )
        return RESET_SENT_MESSAGE

    async def reset_password(self, db: AsyncSession, token: str, new_password: str) -> None:
        admin = await self.repository.get_admin_by_reset_token(db, token=token)
        if not admin or not _is_future(admin.reset_password_expiry, self.clock()):
            raise ValidationError("Invalid or expired reset token")
        admin.hashed_password = get_password_hash(new_password)
        admin.reset_password_token = None
        admin.reset_password_expiry = None
        await self.repository.save_admin(db, db_obj=admin)
        logger.info("Password reset completed for %s", admin.email)

    async def send_otp(self, db: AsyncSession, email: str) -> str:
        admin = await self.repository.get_admin_by_email(db, email=email)
        if not admin:
            logger.info("OTP requested for unknown email %s", email)
            return OTP_SENT_MESSAGE

        otp = generate_otp()
        admin.otp_code = otp
        admin.otp_expiry = self.clock() + timedelta(minutes=self.otp_expire_minutes)
        admin.otp_attempts = 0
        await self.repository.save_admin(db, db_obj=admin)
        logger.debug("OTP for %s: %s", admin.email, otp)

        await self.email_service.send_otp_email(
            admin.email, admin.name, otp, expire_minutes=self.otp_expire_minutes
        )
        return OTP_SENT_MESSAGE

    async def _check_otp(self, db: AsyncSession, email: str, otp: str) -> AdminModel:
        """
        A wrong or expired code counts one failed attempt. A correct code is
        still refused once the attempt threshold has been reached.
        """
        admin = await self.repository.get_admin_by_email(db, email=email)
        if admin is None:
            raise ValidationError(INVALID_OTP_MESSAGE)

        code_matches = bool(admin.otp_code) and admin.otp_code == otp.strip()
        if not code_matches or not _is_future(admin.otp_expiry, self.clock()):
            await self.repository.increment_otp_attempts(db, admin.id)
            raise ValidationError(INVALID_OTP_MESSAGE)

        if (admin.otp_attempts or 0) >= self.otp_max_attempts:
            raise ValidationError(TOO_MANY_ATTEMPTS_MESSAGE)
        return admin

    async def verify_otp(self, db: AsyncSession, email: str, otp: str) -> AdminModel:
        return await self._check_otp(db, email, otp)

    async def verify_otp_and_reset_password(
        self, db: AsyncSession, email: str, otp: str, new_password: str
    ) -> None:
        admin = await self._check_otp(db, email, otp)
        admin.hashed_password = get_password_hash(new_password)
        admin.otp_code = None
        admin.otp_expiry = None
        admin.otp_attempts = 0
        await self.repository.save_admin(db, db_obj=admin)
        logger.info("Password reset via OTP completed for %s", admin.email)

    async def stats(self, db: AsyncSession) -> AdminStats:
        return AdminStats(
            message="Admin panel is ready",
            total_admins=await self.repository.count_admins(db),
            active_admins=await self.repository.count_admins(db, active_only=True),
            timestamp=self.clock(),
        )
