"""Pydantic schemas for Auth: login, signup, external identities, password reset."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from portcullis.domain.schemas.user import EmailAddress, PersonName, UserRead


class LoginRequest(BaseModel):
    email_or_phone: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)


class SignupRequest(BaseModel):
    first_name: PersonName
    last_name: PersonName
    email: Optional[EmailAddress] = None
    phone_number: Optional[str] = Field(default=None, max_length=20)
    password: str = Field(min_length=6, max_length=100)
    confirm_password: str

    @model_validator(mode="after")
    def _check_contact_and_passwords(self) -> "SignupRequest":
        if not self.email and not self.phone_number:
            raise ValueError("Either email or phone number is required")
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class ExternalIdentity(BaseModel):
    """Identity already verified by a third-party provider."""

    email: EmailAddress
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    display_name: Optional[str] = Field(default=None, max_length=200)
    picture_url: Optional[str] = Field(default=None, max_length=500)
    provider_id: Optional[str] = Field(default=None, max_length=255)


class AuthResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expiration: datetime
    user: UserRead


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6, max_length=100)
    confirm_new_password: str

    @model_validator(mode="after")
    def _passwords_match(self) -> "ChangePasswordRequest":
        if self.new_password != self.confirm_new_password:
            raise ValueError("Passwords do not match")
        return self


class ProfileUpdate(BaseModel):
    first_name: Optional[PersonName] = None
    last_name: Optional[PersonName] = None
    phone_number: Optional[str] = Field(default=None, max_length=20)
    profile_picture: Optional[str] = Field(default=None, max_length=500)


class ForgotPasswordRequest(BaseModel):
    email: EmailAddress


class VerifyCodeRequest(BaseModel):
    email: EmailAddress
    code: str = Field(pattern=r"^\d{6}$")


class ResetPasswordRequest(VerifyCodeRequest):
    new_password: str = Field(min_length=6, max_length=100)
    confirm_new_password: str

    @model_validator(mode="after")
    def _passwords_match(self) -> "ResetPasswordRequest":
        if self.new_password != self.confirm_new_password:
            raise ValueError("Passwords do not match")
        return self


class MessageResponse(BaseModel):
    message: str
    code: Optional[str] = None


class RoleCheckResponse(BaseModel):
    has_role: bool
    role_name: str
