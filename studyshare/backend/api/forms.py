"""
Request Payloads.

The browser scripts post either JSON or url-encoded forms to the same
endpoints; both are read into a dict and validated with a pydantic model.
"""

from typing import Any, TypeVar

import pydantic
from fastapi import Request

from studyshare.backend.core.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)


async def read_payload(request: Request) -> dict[str, Any]:
    """Body as a dict, from JSON or form encoding. An unreadable body is empty."""
    content_type = request.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            data = await request.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}
    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


async def parse_payload(request: Request, model: type[ModelT]) -> ModelT:
    """
    Validate the request body against a schema.

    Raises:
        ValidationError: If the body does not fit the schema
    """
    payload = await read_payload(request)
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as e:
        raise ValidationError(
            "Invalid request body",
            details={"fields": [".".join(str(p) for p in err["loc"]) for err in e.errors()]},
        )
