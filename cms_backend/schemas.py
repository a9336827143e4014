"""
Pydantic schemas for the CMS API.

Request fields are optional here; the repositories check required fields.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel


def envelope(
    data: Any = None,
    *,
    message: Optional[str] = None,
    total: Optional[int] = None,
    success: bool = True,
) -> dict:
    """``{success, message?, data?, total?}`` response body."""
    body: dict = {"success": success}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if total is not None:
        body["total"] = total
    return body


class Payload(BaseModel):
    def present_fields(self) -> dict:
        """Only the keys the client actually sent with a value."""
        return self.model_dump(exclude_none=True)


class EventPayload(Payload):
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None
    location: Optional[str] = None
    participants: Optional[Union[str, int]] = None
    category: Optional[str] = None
    image: Optional[str] = None
    featured: Optional[bool] = None
    active: Optional[bool] = None


class NewsPayload(Payload):
    title: Optional[str] = None
    summary: Optional[str] = None
    content: Optional[str] = None
    date: Optional[str] = None
    author: Optional[str] = None
    category: Optional[str] = None
    image: Optional[str] = None
    link: Optional[str] = None
    featured: Optional[bool] = None
    active: Optional[bool] = None


class ContactInfoPayload(Payload):
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    business_hours: Optional[str] = None
    social_media: Optional[dict[str, str]] = None


class MessagePayload(Payload):
    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None


class MessageUpdatePayload(BaseModel):
    read: Optional[bool] = None
    responded: Optional[bool] = None


class AdminCreatePayload(Payload):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class AdminUpdatePayload(Payload):
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    active: Optional[bool] = None


class SetPasswordPayload(BaseModel):
    new_password: Optional[str] = None


class ChangePasswordPayload(BaseModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None


class LoginPayload(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class RestorePayload(BaseModel):
    filename: Optional[str] = None
