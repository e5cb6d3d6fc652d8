"""
Note Schemas.

Pydantic schemas for the note JSON endpoints.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RateRequest(BaseModel):
    """Body of POST /rate/{id}. The value is checked by the rating rules."""

    rating: Any = Field(default=None, description="Rating value", examples=[4])

    model_config = ConfigDict(extra="ignore")


class RateResponse(BaseModel):
    success: bool = True
    rating: str = Field(description="New mean rating, one decimal", examples=["4.0"])
    rating_count: int = Field(serialization_alias="ratingCount", description="Number of ratings")
