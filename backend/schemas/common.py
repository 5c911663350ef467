"""Shared response schemas."""
from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Plain acknowledgement, e.g. after a delete."""

    message: str
