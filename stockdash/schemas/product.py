from datetime import date
from typing import Optional

from pydantic import ConfigDict, Field, field_validator

from stockdash.schemas.common import ResourceId, WireModel


def _clean_name(value):
    if value is None:
        return value
    value = str(value).strip()
    if not value:
        raise ValueError("name must not be empty")
    return value


class ProductBase(WireModel):
    name: str
    price: float = Field(ge=0, allow_inf_nan=False)
    stock: float = Field(ge=0, allow_inf_nan=False)
    expiration_date: date

    check_name = field_validator("name")(_clean_name)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(WireModel):
    name: Optional[str] = None
    price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    stock: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    expiration_date: Optional[date] = None

    check_name = field_validator("name")(_clean_name)


class ProductRead(ProductBase):
    id: ResourceId

    model_config = ConfigDict(from_attributes=True)


class ProductView(ProductRead):
    days_until: int
    status: str
    stock_level: str
