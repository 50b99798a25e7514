"""Response envelope schemas shared by Bitso endpoints."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")


class ApiErrorDetail(BaseModel):
    """Error object Bitso includes when success is false.

    Attributes:
        code: Bitso error code (e.g., '0201')
        message: Human-readable error message
    """

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    code: str | None = Field(None, description="Bitso error code")
    message: str = Field("Unknown error", description="Error message")


class ListResponse(BaseModel, Generic[T]):
    """Envelope of a list endpoint.

    Attributes:
        ok: Wire field `success`; false signals an API-level failure
        items: Wire field `payload`, in the order returned
        error: Error detail when ok is false
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    ok: bool = Field(..., alias="success")
    items: list[T] = Field(default_factory=list, alias="payload")
    error: ApiErrorDetail | None = None

    @field_validator("items", mode="before")
    @classmethod
    def null_payload(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def error_message(self) -> str:
        return self.error.message if self.error else "API request failed"
