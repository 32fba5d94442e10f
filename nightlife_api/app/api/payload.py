"""
Request body parsing shared by the session and venue routes.

The front-end posts JSON, but older clients submit HTML forms and some
send no body at all.  ``body_of(Model)`` returns a dependency that
accepts all three and always yields a model instance; a missing body
becomes a model with every field unset so the route can answer with
its own "missing data" payload instead of a 422.
"""

import json
from typing import Any, Callable, Dict, Type, TypeVar

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def read_payload(request: Request) -> Dict[str, Any]:
    """Return the request body as a dict (empty when there is none)."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items()}

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        raise RequestValidationError(
            [{"type": "json_invalid", "loc": ("body",), "msg": "JSON decode error", "input": {}}]
        )
    if not isinstance(data, dict):
        raise RequestValidationError(
            [{"type": "model_type", "loc": ("body",), "msg": "Input should be an object", "input": data}]
        )
    return data


def body_of(model: Type[ModelT]) -> Callable[..., Any]:
    """Dependency factory validating the request body against ``model``."""

    async def _dependency(request: Request) -> ModelT:
        data = await read_payload(request)
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise RequestValidationError(exc.errors(include_url=False), body=data)

    return _dependency
