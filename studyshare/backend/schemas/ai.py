"""
Assistant Schemas.
"""

from pydantic import BaseModel, ConfigDict


class AskRequest(BaseModel):
    message: str | None = None

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


class AskResponse(BaseModel):
    reply: str
