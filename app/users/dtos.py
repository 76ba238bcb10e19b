"""用户请求 DTO"""

from typing import Optional

from pydantic import Field, field_validator

from modboot.utils import validate_email
from modboot.web import RequestDto


class RegisterDto(RequestDto):
    email: str = Field(max_length=250)
    password: str = Field(min_length=5)
    username: Optional[str] = Field(default=None, min_length=2, max_length=150)

    @field_validator('email')
    @classmethod
    def check_email(cls, value: str) -> str:
        if not validate_email(value):
            raise ValueError('email must be an email')
        return value.lower()


class LoginDto(RequestDto):
    email: str = Field(max_length=250)
    password: str = Field(min_length=5)
