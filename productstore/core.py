# productstore/core.py
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar, Union

from pydantic import ValidationError as PydanticValidationError

from .models import Product, ProductIn

# Result types, error taxonomy and payload validation shared by the store
# and the HTTP layer.

T = TypeVar("T")

INVALID_PRODUCT_MESSAGE = "Invalid product data format"
NOT_FOUND_MESSAGE = "Product not found"


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"


# kind -> (error name, HTTP status)
ERROR_TABLE: Dict[ErrorKind, tuple] = {
    ErrorKind.VALIDATION: ("ValidationError", 400),
    ErrorKind.NOT_FOUND: ("NotFoundError", 404),
}


@dataclass(frozen=True)
class StoreError:
    kind: ErrorKind
    message: str

    @property
    def name(self) -> str:
        return ERROR_TABLE[self.kind][0]

    @property
    def status_code(self) -> int:
        return ERROR_TABLE[self.kind][1]

    def to_json(self) -> Dict[str, Any]:
        return {"name": self.name, "message": self.message, "statusCode": self.status_code}


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T
    ok = True


@dataclass(frozen=True)
class Err:
    error: StoreError
    ok = False


Result = Union[Ok[T], Err]


def validation_error(message: str = INVALID_PRODUCT_MESSAGE) -> Err:
    return Err(StoreError(ErrorKind.VALIDATION, message))


def not_found(message: str = NOT_FOUND_MESSAGE) -> Err:
    return Err(StoreError(ErrorKind.NOT_FOUND, message))


def validate_product_payload(payload: Any) -> "Result[ProductIn]":
    """
    Type-check a decoded request body against the product shape.

    name, description and category must be strings, price an int or float
    and inStock a bool. Extra keys are ignored; nothing is coerced.
    """
    if not isinstance(payload, dict):
        return validation_error()
    try:
        return Ok(ProductIn.model_validate(payload))
    except PydanticValidationError:
        return validation_error()


_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(raw: Any) -> Optional[int]:
    """Lenient integer parse: leading digits win ("12abc" -> 12), junk -> None."""
    if raw is None:
        return None
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    m = _LEADING_INT.match(str(raw))
    if not m:
        return None
    return int(m.group(1))


def _make_product(product_id: int, p: ProductIn) -> Product:
    return Product(
        id=product_id,
        name=p.name,
        description=p.description,
        price=p.price,
        category=p.category,
        in_stock=p.in_stock,
    )
