# productstore/models.py
import math

from pydantic import (
    BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr, field_validator,
)
from typing import Any, Dict, List, Union

Number = Union[StrictInt, StrictFloat]


class ProductIn(BaseModel):
    """Payload accepted by create and update. Strict: no type coercion."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore", allow_inf_nan=False)

    name: StrictStr
    description: StrictStr
    price: Number
    category: StrictStr
    in_stock: StrictBool = Field(alias="inStock")

    @field_validator("price", mode="before")
    @classmethod
    def _check_price(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("price must be a number")
        # NaN and Infinity cannot be rendered back as JSON
        if isinstance(v, float) and not math.isfinite(v):
            raise ValueError("price must be finite")
        return v


class Product(ProductIn):
    id: int

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "category": self.category,
            "inStock": self.in_stock,
        }


class ProductPage(BaseModel):
    page: int
    limit: int
    total: int
    data: List[Product]

    def to_json(self) -> Dict[str, Any]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "data": [p.to_json() for p in self.data],
        }


class HealthResponse(BaseModel):
    status: str
    service: str
