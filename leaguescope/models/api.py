"""Response schemas for the league REST backend."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PaginatedResponse(BaseModel):
    """Envelope every list endpoint returns."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    data: list[dict[str, Any]] = []
    total_items: int = Field(default=0, ge=0)
    total_pages: int = Field(default=0, ge=0)
    current_page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1)


class ApiErrorBody(BaseModel):
    """Error payload; ``message`` is a string or a list of validation messages."""

    model_config = ConfigDict(extra="ignore")

    message: str | list[str] | None = None
    error: str | None = None
    status_code: int | None = Field(default=None, alias="statusCode")

    def text(self) -> str | None:
        if isinstance(self.message, list):
            joined = "; ".join(m for m in self.message if m)
            return joined or self.error
        return self.message or self.error
