"""
Authentication schemas for the SaaS starter

Form and API payloads for signup and login.
"""

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ValidationInfo, field_validator

PASSWORD_MIN_LENGTH = 8


def _check_email(v):
    if not v:
        raise ValueError('Email is required')
    try:
        validate_email(v, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError('Invalid email address')
    return v.lower()


class LoginSchema(BaseModel):
    """Schema for logging in"""
    email: str = ""
    password: str = ""

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return _check_email(v.strip())

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        if not v:
            raise ValueError('Password is required')
        return v


class SignupSchema(BaseModel):
    """Schema for creating an account"""
    email: str = ""
    password: str = ""
    confirm_password: str = ""

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return _check_email(v.strip())

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        if not v:
            raise ValueError('Password is required')
        if len(v) < PASSWORD_MIN_LENGTH:
            raise ValueError(f'Password must be at least {PASSWORD_MIN_LENGTH} characters')
        return v

    @field_validator('confirm_password')
    @classmethod
    def validate_confirm_password(cls, v, info: ValidationInfo):
        password = info.data.get('password')
        if password is not None and v != password:
            raise ValueError('Passwords must match')
        return v


class RefreshTokenSchema(BaseModel):
    """Schema for refreshing a session"""
    refresh_token: str
