from typing import Optional, List, Dict, Any, Literal
from pydantic import BaseModel, Field


OrderType = Literal["export", "local"]


# --- Spreadsheet Dataset ---
class ExcelDataset(BaseModel):
    """Raw rows of the three legacy exports, one dict per spreadsheet row."""

    box_in_hand: List[Dict[str, Any]] = Field(default_factory=list)
    export_orders: List[Dict[str, Any]] = Field(default_factory=list)
    local_orders: List[Dict[str, Any]] = Field(default_factory=list)


# --- Normalized Records ---
class OrderRecord(BaseModel):
    order_number: Optional[str] = None
    customer: str
    product: str
    quantity: float = 0
    value: float = 0
    date: Optional[str] = None
    type: OrderType
    country: str


class StockRecord(BaseModel):
    product_code: str
    product: str
    denier: str
    net_weight: float = 0
    location: str
    grade: str

    @property
    def product_key(self) -> str:
        return f"{self.product_code}-{self.denier}"


# --- Inventory Schemas ---
class InventoryItemBase(BaseModel):
    name: str
    type: Literal["raw", "semi", "finished"]
    quantity: float
    unit: str
    status: Literal["normal", "low", "out"]
    last_updated: str = Field(..., serialization_alias="lastUpdated")
    batch_number: str = Field(..., serialization_alias="batchNumber")


class InventoryItem(InventoryItemBase):
    id: int
