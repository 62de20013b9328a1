import logging
from typing import Any, TypeVar

from fastapi import HTTPException, Request
from pydantic import BaseModel, ValidationError

from narrator.schemas import validation_details

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def present_params(**params: str | None) -> dict[str, str]:
    """Drop absent or empty parameters so schema defaults apply."""
    return {name: value for name, value in params.items() if value not in (None, "")}


def parse_or_400(schema: type[SchemaT], data: Any, error: str) -> SchemaT:
    """Validate *data* against *schema* or raise 400 ``{"error", "details"}``."""
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise HTTPException(
            status_code=400, detail={"error": error, "details": validation_details(e)}
        ) from e


def parse_or_422(schema: type[SchemaT], data: Any, message: str = "Validation failed") -> SchemaT:
    """Validate *data* against *schema* or raise 422 ``{"message", "errors"}``."""
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise HTTPException(
            status_code=422, detail={"message": message, "errors": validation_details(e)}
        ) from e


async def read_json_body(request: Request, detail: str | dict) -> Any:
    """Return the decoded JSON body or raise 400 with *detail*."""
    try:
        return await request.json()
    except ValueError as e:
        logger.info(f"Invalid JSON in request body for {request.method} {request.url.path}: {e}")
        raise HTTPException(status_code=400, detail=detail) from e
