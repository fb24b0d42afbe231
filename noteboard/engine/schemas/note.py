"""
Note Schemas.

Pydantic schemas for note snapshots: the plain structure handed to the
persistence collaborator and read back at startup.

Snapshots coming back from storage may be partial or corrupt. Every field
is lenient: a value that fails validation is logged and dropped to None,
so the factory substitutes its default instead of rejecting the entry.
"""

import math
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
)

from noteboard.engine.core.logging import get_logger

logger = get_logger(__name__)


class NoteSnapshot(BaseModel):
    """Serialized form of a single note."""

    id: str | None = Field(default=None, description="Note unique identifier")
    content: str | None = Field(default=None, description="Note text")
    x: float | None = Field(default=None, description="Board-space x coordinate")
    y: float | None = Field(default=None, description="Board-space y coordinate")
    color: str | None = Field(default=None, description="Palette entry")
    timestamp: str | None = Field(default=None, description="ISO 8601 creation time")
    image: str | None = Field(default=None, description="Attached image data URL")

    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="wrap")
    @classmethod
    def _drop_invalid(cls, value: Any, handler: ValidatorFunctionWrapHandler, info) -> Any:
        try:
            result = handler(value)
        except ValidationError:
            logger.warning(
                "Discarding invalid snapshot field",
                extra={"field": info.field_name, "value_type": type(value).__name__},
            )
            return None
        if isinstance(result, float) and not math.isfinite(result):
            logger.warning(
                "Discarding non-finite coordinate",
                extra={"field": info.field_name},
            )
            return None
        if isinstance(result, str) and info.field_name == "id" and not result.strip():
            return None
        return result

    def provided(self) -> dict[str, Any]:
        """Fields that survived validation, ready for create_note()."""
        return self.model_dump(exclude_none=True)
