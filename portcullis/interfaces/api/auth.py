"""Auth API routes: login, signup, external login, password reset, session."""

import structlog
from fastapi import APIRouter, Depends, Query

from portcullis.application.services import auth_service, password_reset_service, provisioning_service
from portcullis.application.services.authorization_service import has_role
from portcullis.application.services.token_service import Principal
from portcullis.config import get_settings
from portcullis.core.exceptions import ValidationFailedException
from portcullis.domain.models.user import User
from portcullis.domain.repositories.invitation_repository import InvitationRepository
from portcullis.domain.repositories.password_reset_repository import PasswordResetRepository
from portcullis.domain.repositories.role_repository import RoleRepository
from portcullis.domain.repositories.user_repository import UserRepository
from portcullis.domain.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    ExternalIdentity,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    ProfileUpdate,
    ResetPasswordRequest,
    RoleCheckResponse,
    SignupRequest,
    VerifyCodeRequest,
)
from portcullis.domain.schemas.user import UserRead
from portcullis.interfaces.api.deps import get_current_principal, get_current_user
from portcullis.interfaces.deps import (
    get_invitation_repository,
    get_password_reset_repository,
    get_role_repository,
    get_user_repository,
)

settings = get_settings()
logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

FORGOT_PASSWORD_MESSAGE = "If the email is registered, a reset code has been sent"


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, repo: UserRepository = Depends(get_user_repository)):
    return await auth_service.login(repo, body.email_or_phone.strip(), body.password)


@router.post("/signup", response_model=AuthResponse)
async def signup(
    body: SignupRequest,
    user_repo: UserRepository = Depends(get_user_repository),
    role_repo: RoleRepository = Depends(get_role_repository),
    invitation_repo: InvitationRepository = Depends(get_invitation_repository),
):
    return await provisioning_service.signup(user_repo, role_repo, invitation_repo, body)


@router.post("/external-login", response_model=AuthResponse)
async def external_login(
    body: ExternalIdentity,
    user_repo: UserRepository = Depends(get_user_repository),
    role_repo: RoleRepository = Depends(get_role_repository),
    invitation_repo: InvitationRepository = Depends(get_invitation_repository),
):
    """Identity already verified by the provider handshake, which happens elsewhere."""
    return await provisioning_service.external_signin(user_repo, role_repo, invitation_repo, body)


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    body: ForgotPasswordRequest,
    user_repo: UserRepository = Depends(get_user_repository),
    reset_repo: PasswordResetRepository = Depends(get_password_reset_repository),
):
    """Same answer whether or not the email is registered."""
    user = await user_repo.get_by_email(body.email)
    if user is None or not user.is_active:
        logger.info("Reset requested for unknown or inactive account")
        return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)

    code = await password_reset_service.generate_code(reset_repo, body.email)
    # no delivery channel is wired in; the code only leaves the server when explicitly enabled
    return MessageResponse(
        message=FORGOT_PASSWORD_MESSAGE,
        code=code if settings.EXPOSE_RESET_CODE else None,
    )


@router.post("/verify-code", response_model=MessageResponse)
async def verify_code(
    body: VerifyCodeRequest,
    reset_repo: PasswordResetRepository = Depends(get_password_reset_repository),
):
    if not await password_reset_service.verify_code(reset_repo, body.email, body.code):
        raise ValidationFailedException("Invalid or expired code")
    return MessageResponse(message="Code verified")


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    body: ResetPasswordRequest,
    user_repo: UserRepository = Depends(get_user_repository),
    reset_repo: PasswordResetRepository = Depends(get_password_reset_repository),
):
    if not await password_reset_service.verify_code(reset_repo, body.email, body.code):
        raise ValidationFailedException("Invalid or expired code")
    if not await auth_service.reset_password(user_repo, body.email, body.new_password):
        raise ValidationFailedException("Invalid or expired code")
    await password_reset_service.mark_used(reset_repo, body.email, body.code)
    return MessageResponse(message="Password has been reset")


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    body: ChangePasswordRequest,
    principal: Principal = Depends(get_current_principal),
    repo: UserRepository = Depends(get_user_repository),
):
    changed = await auth_service.change_password(repo, principal.user_id, body.current_password, body.new_password)
    if not changed:
        raise ValidationFailedException("Current password is incorrect")
    return MessageResponse(message="Password changed")


@router.post("/refresh-token", response_model=AuthResponse)
async def refresh_token(
    principal: Principal = Depends(get_current_principal),
    repo: UserRepository = Depends(get_user_repository),
):
    return await auth_service.refresh(repo, principal.user_id)


@router.post("/logout", response_model=MessageResponse)
async def logout(principal: Principal = Depends(get_current_principal)):
    """Tokens are stateless; the client discards its copy."""
    logger.info("Logout", user_id=principal.user_id)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=UserRead)
async def get_me(user: User = Depends(get_current_user)):
    return UserRead.model_validate(user)


@router.patch("/me", response_model=UserRead)
async def update_me(
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    repo: UserRepository = Depends(get_user_repository),
):
    updated = await auth_service.update_profile(repo, user, body)
    return UserRead.model_validate(updated)


@router.get("/role-check", response_model=RoleCheckResponse)
async def role_check(
    role_name: str = Query(alias="roleName", min_length=1),
    principal: Principal = Depends(get_current_principal),
    repo: UserRepository = Depends(get_user_repository),
):
    return RoleCheckResponse(
        has_role=await has_role(repo, principal.user_id, role_name),
        role_name=role_name,
    )
