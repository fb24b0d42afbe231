"""
Quote Schemas.

Shape of a successful text-retrieval result.
"""

from pydantic import BaseModel, Field


class Quote(BaseModel):
    """A retrieved quote and who said it."""

    text: str = Field(min_length=1, description="Quote text")
    attribution: str = Field(min_length=1, description="Quote author or source")

    def formatted(self) -> str:
        """Render as it is appended to a note: "text" — attribution."""
        return f'"{self.text}" — {self.attribution}'
