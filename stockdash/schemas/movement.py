from datetime import datetime
from typing import List, Optional

from pydantic import ConfigDict, Field

from stockdash.schemas.common import ResourceId, WireModel
from stockdash.schemas.product import ProductRead


class MovementCreate(WireModel):
    product_id: ResourceId
    quantity: float = Field(gt=0, allow_inf_nan=False)
    date: Optional[datetime] = None


class MovementRead(WireModel):
    id: ResourceId
    product_id: ResourceId
    quantity: float
    date: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MovementRow(MovementRead):
    kind: str
    product_name: str
    product_missing: bool = False


class MovementStats(WireModel):
    total_movements: int
    total_kg: float
    unique_products: int


class MovementListing(WireModel):
    count: int
    stats: MovementStats
    results: List[MovementRow] = Field(default_factory=list)


class MovementCommitted(WireModel):
    status: str
    state: str
    product: ProductRead
    low_stock: bool = False
