# erp_backend/app/db/inventory.py
from typing import List, Optional
from loguru import logger

from .schemas import InventoryItem

# Mock inventory; nothing in this module is persisted.
_INVENTORY_ITEMS: List[InventoryItem] = [
    InventoryItem(
        id=1,
        name="Raw Material A",
        type="raw",
        quantity=1500,
        unit="kg",
        status="normal",
        last_updated="2025-08-20",
        batch_number="RM-A-2025-08-15",
    ),
    InventoryItem(
        id=2,
        name="Raw Material B",
        type="raw",
        quantity=800,
        unit="kg",
        status="low",
        last_updated="2025-08-19",
        batch_number="RM-B-2025-08-10",
    ),
    InventoryItem(
        id=3,
        name="Semi-Finished Product X",
        type="semi",
        quantity=350,
        unit="units",
        status="normal",
        last_updated="2025-08-21",
        batch_number="SF-X-2025-08-18",
    ),
    InventoryItem(
        id=4,
        name="Finished Product Alpha",
        type="finished",
        quantity=120,
        unit="units",
        status="normal",
        last_updated="2025-08-20",
        batch_number="FP-A-2025-08-17",
    ),
    InventoryItem(
        id=5,
        name="Finished Product Beta",
        type="finished",
        quantity=45,
        unit="units",
        status="low",
        last_updated="2025-08-18",
        batch_number="FP-B-2025-08-15",
    ),
    InventoryItem(
        id=6,
        name="Raw Material C",
        type="raw",
        quantity=0,
        unit="liters",
        status="out",
        last_updated="2025-08-15",
        batch_number="RM-C-2025-08-01",
    ),
]


def get_inventory_items_db(
    item_type: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
) -> List[InventoryItem]:
    items = _INVENTORY_ITEMS
    if item_type:
        items = [i for i in items if i.type == item_type]
    if status:
        items = [i for i in items if i.status == status]
    if search:
        needle = search.lower()
        items = [
            i
            for i in items
            if needle in i.name.lower() or needle in i.batch_number.lower()
        ]
    logger.debug(
        f"get_inventory_items_db(type={item_type}, status={status}, search={search}) -> {len(items)} items"
    )
    return items


def get_inventory_item_by_id_db(item_id: int) -> Optional[InventoryItem]:
    for item in _INVENTORY_ITEMS:
        if item.id == item_id:
            return item
    return None
