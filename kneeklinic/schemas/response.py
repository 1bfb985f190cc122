from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional, Any


class ApiModel(BaseModel):
    """
    Base for every DTO exchanged with the backend.
    Fields are snake_case in Python and camelCase on the wire.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_payload(self) -> dict:
        """JSON-ready dict using the backend's field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ApiResponse(ApiModel):
    """
    Generic acknowledgement returned by mutation endpoints.
    """
    success: Optional[bool] = None
    message: Optional[str] = None
    data: Optional[Any] = None
    error: Optional[str] = None
