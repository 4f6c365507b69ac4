from pydantic import BaseModel
from typing import Optional


class LoginRequest(BaseModel):
    """Either an NFC card uid, or a username and password."""
    uid: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
