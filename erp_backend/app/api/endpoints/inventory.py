# erp_backend/app/api/endpoints/inventory.py
from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Form, HTTPException, Query
from fastapi.responses import RedirectResponse
from loguru import logger

from erp_backend.app.db import inventory as db_inventory
from erp_backend.app.db import schemas as db_schemas

router = APIRouter()


@router.get(
    "",
    response_model=List[db_schemas.InventoryItem],
    summary="List inventory items",
)
async def read_inventory_items(
    item_type: Optional[str] = Query(None, alias="type"),
    status: Optional[str] = None,
    search: Optional[str] = Query(None, description="Matches name or batch number"),
):
    return db_inventory.get_inventory_items_db(
        item_type=item_type, status=status, search=search
    )


@router.get(
    "/{item_id}",
    response_model=db_schemas.InventoryItem,
    summary="Get inventory item by ID",
)
async def read_inventory_item(item_id: int):
    item = db_inventory.get_inventory_item_by_id_db(item_id)
    if not item:
        raise HTTPException(404, "Inventory item not found.")
    return item


# --- Form handlers: accepted and logged, never persisted ---
# Form values arrive as raw text; blank or missing fields are accepted.
@router.post("/add", status_code=303, summary="Submit the add-item form")
async def add_inventory_item(
    name: Optional[str] = Form(None),
    item_type: Optional[str] = Form(None, alias="type"),
    quantity: Optional[str] = Form(None),
    unit: Optional[str] = Form(None),
    batch_number: Optional[str] = Form(None, alias="batchNumber"),
    status: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
):
    logger.info(
        f"Add-item form received for '{name}' ({item_type}, {quantity} {unit}, batch {batch_number}). Not persisted."
    )
    return RedirectResponse(url="/inventory", status_code=303)


@router.post("/edit/{item_id}", status_code=303, summary="Submit the edit-item form")
async def update_inventory_item(
    item_id: int,
    form_item_id: Optional[str] = Form(None, alias="id"),
    name: Optional[str] = Form(None),
    item_type: Optional[str] = Form(None, alias="type"),
    quantity: Optional[str] = Form(None),
    unit: Optional[str] = Form(None),
    batch_number: Optional[str] = Form(None, alias="batchNumber"),
    status: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    supplier: Optional[str] = Form(None),
    cost: Optional[str] = Form(None),
    currency: Optional[str] = Form(None),
    minimum_stock: Optional[str] = Form(None, alias="minimumStock"),
    reorder_point: Optional[str] = Form(None, alias="reorderPoint"),
    description: Optional[str] = Form(None),
):
    target_id = (form_item_id or "").strip() or str(item_id)
    logger.info(
        f"Edit-item form received for item {target_id} (name={name}, quantity={quantity}). Not persisted."
    )
    return RedirectResponse(
        url=f"/inventory/{quote(target_id, safe='')}", status_code=303
    )
