"""Auth and profile request models.

Every field is optional so that missing fields reach the controller's ordered validation instead of
being rejected wholesale by FastAPI.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RegisterPayload(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    answer: Optional[str] = None


class LoginPayload(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ForgotPasswordPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    answer: Optional[str] = None
    new_password: Optional[str] = Field(None, alias="newPassword")


class ProfileUpdatePayload(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
