"""Pydantic models for users, images and comments.

Wire format is camelCase (``fileName``, ``uploadedBy``...); Python code uses
snake_case attributes. Dump with ``by_alias=True`` when building responses.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Role(str, Enum):
    user = "user"
    admin = "admin"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# ----- Stored entities -----

class User(BaseModel):
    """A registered account. Only the password hash is kept."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    password_hash: str
    role: Role = Role.user

    def public(self) -> "PublicUser":
        return PublicUser(id=self.id, name=self.name, role=self.role)


class PublicUser(CamelModel):
    id: str
    name: str
    role: Role


class Image(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    file_name: str
    url: str
    uploaded_by: str
    upload_time: str


class Comment(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    image_id: str
    user_id: str
    user_name: str
    user_role: Optional[str] = None
    text: str
    timestamp: str


# ----- Request bodies -----
# Fields are optional here so that missing values reach the services and
# fail with the service's own ValidationError message.

class RegisterRequest(CamelModel):
    name: Optional[str] = None
    id: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class LoginRequest(CamelModel):
    name: Optional[str] = None
    id: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class CommentRequest(CamelModel):
    image_id: Optional[str] = None
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    user_role: Optional[str] = None
    text: Optional[str] = None
