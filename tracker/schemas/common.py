"""Small response bodies shared by several endpoints."""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    message: str
