"""Message value object — one role-tagged entry of a conversation."""

from typing import Literal

from pydantic import BaseModel

type Role = Literal["system", "user", "assistant"]


class Message(BaseModel, frozen=True):
    role: Role
    content: str
