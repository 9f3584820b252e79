from __future__ import annotations

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

ERROR_TYPE = "error"
DATA_TYPE = "data"


class ErrorInfo(BaseModel):
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    id: int = 0
    description: Optional[str] = None


class Customer(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    customer_id: int = Field(0, alias="customerId")
    name: Optional[str] = None


class Supplier(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    supplier_id: int = Field(0, alias="supplierId")
    company: Optional[str] = None


class RawEnvelope(BaseModel):
    """
    First-pass shape: the discriminator plus an opaque payload node.
    The payload is typed later, once `type` is known.
    """

    type: str
    data: Any = None


class Envelope(BaseModel, Generic[T]):
    model_config = ConfigDict(frozen=True)

    type: str
    data: Optional[T] = None
    error: Optional[ErrorInfo] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def error_message(self) -> str:
        if not self.is_error:
            return ""
        return f"An error occurred. Error code {self.error.id} - {self.error.description}"
