from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import UnsupportedFormat


def _scalar_to_str(value):
    # JSON numbers are accepted for text fields and kept verbatim
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class Category(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str
    has_subcategories: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value):
        return _scalar_to_str(value)


class Product(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    price: str
    url: str = Field(min_length=1)

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, value):
        return _scalar_to_str(value)


class ExportFormat(str, Enum):
    """Supported export formats."""

    json = "json"
    csv = "csv"

    @property
    def default_filename(self) -> str:
        return f"products.{self.value}"

    @classmethod
    def parse(cls, token: "str | ExportFormat") -> "ExportFormat":
        """Map a user-supplied token onto a format, raising UnsupportedFormat."""
        if isinstance(token, cls):
            return token
        normalized = str(token).strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            raise UnsupportedFormat(str(token), [x.value for x in cls]) from None


class FailureKind(str, Enum):
    network = "network"
    decode = "decode"


class FetchFailure(BaseModel):
    kind: FailureKind
    message: str


T = TypeVar("T")


class FetchResult(BaseModel, Generic[T]):
    """Outcome of a catalog request.

    A successful fetch with no items and a failed fetch both carry an empty
    ``items`` list; ``failure`` tells them apart.
    """

    items: list[T] = []
    failure: FetchFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def is_empty(self) -> bool:
        return self.ok and not self.items

    @classmethod
    def failed(cls, kind: FailureKind, message: str) -> "FetchResult[T]":
        return cls(failure=FetchFailure(kind=kind, message=message))
