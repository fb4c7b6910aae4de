"""Pantry item and recipe endpoints for direct user actions."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import BaseModel, Field

from src.core.config import constants
from src.core.db_client import RecordNotFoundError
from src.core.record_store import RecordStore
from src.domain.pantry import InventoryItem, PantrySummary, Recipe
from src.interface.dependencies import get_record_store, require_owner_id
from src.services import pantry_service, recipe_service


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["pantry"])

ITEM_NOT_FOUND = "Item not found."


class ItemCreate(BaseModel):
    """Payload for adding an item by hand."""

    name: str = Field(..., min_length=1, description="Item name")
    amount: float = Field(default=1, ge=0, description="Starting quantity")


class RecipeRequest(BaseModel):
    """Payload for generating a recipe."""

    ingredients: list[str] = Field(..., min_length=1, description="Selected ingredient names")


@router.get("/items", response_model=list[InventoryItem])
async def list_items(
    search: str = Query(default="", description="Case-insensitive name filter"),
    owner_id: str = Depends(require_owner_id),
    store: RecordStore = Depends(get_record_store),
) -> list[InventoryItem]:
    """List the user's pantry items."""
    return await pantry_service.list_items(store=store, owner_id=owner_id, search=search)


@router.post("/items", response_model=InventoryItem, status_code=status.HTTP_201_CREATED)
async def add_item(
    payload: ItemCreate,
    owner_id: str = Depends(require_owner_id),
    store: RecordStore = Depends(get_record_store),
) -> InventoryItem:
    """Add an item to the user's pantry."""
    try:
        return await pantry_service.add_item(store=store, owner_id=owner_id, name=payload.name, amount=payload.amount)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.get("/items/top", response_model=list[InventoryItem])
async def top_items(
    limit: int = Query(default=constants.TOP_ITEMS_LIMIT, ge=1, le=constants.DEFAULT_PER_PAGE_LIMIT),
    owner_id: str = Depends(require_owner_id),
    store: RecordStore = Depends(get_record_store),
) -> list[InventoryItem]:
    """List the user's items with the largest amounts."""
    return await pantry_service.get_top_items(store=store, owner_id=owner_id, limit=limit)


@router.get("/items/summary", response_model=PantrySummary)
async def summary(
    owner_id: str = Depends(require_owner_id),
    store: RecordStore = Depends(get_record_store),
) -> PantrySummary:
    """Total amount and chart data for the user's pantry."""
    return await pantry_service.get_summary(store=store, owner_id=owner_id)


@router.post("/items/{item_id}/increase", response_model=InventoryItem)
async def increase_item(
    item_id: str,
    owner_id: str = Depends(require_owner_id),
    store: RecordStore = Depends(get_record_store),
) -> InventoryItem:
    """Add one unit to an item."""
    try:
        return await pantry_service.increase_item(store=store, owner_id=owner_id, item_id=item_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ITEM_NOT_FOUND) from e


@router.post("/items/{item_id}/decrease", response_model=InventoryItem | None)
async def decrease_item(
    item_id: str,
    owner_id: str = Depends(require_owner_id),
    store: RecordStore = Depends(get_record_store),
) -> InventoryItem | None:
    """Remove one unit from an item; the item is deleted when its last unit goes.

    Returns null when the item was deleted.
    """
    try:
        return await pantry_service.decrease_item(store=store, owner_id=owner_id, item_id=item_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ITEM_NOT_FOUND) from e


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: str,
    owner_id: str = Depends(require_owner_id),
    store: RecordStore = Depends(get_record_store),
) -> Response:
    """Delete an item permanently."""
    if not await pantry_service.delete_item(store=store, owner_id=owner_id, item_id=item_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ITEM_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/recipes", response_model=Recipe, status_code=status.HTTP_201_CREATED)
async def generate_recipe(
    payload: RecipeRequest,
    owner_id: str = Depends(require_owner_id),
    store: RecordStore = Depends(get_record_store),
) -> Recipe:
    """Generate and save a recipe from selected ingredients."""
    try:
        return await recipe_service.generate_recipe(store=store, owner_id=owner_id, ingredients=payload.ingredients)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.get("/recipes", response_model=list[Recipe])
async def list_recipes(
    owner_id: str = Depends(require_owner_id),
    store: RecordStore = Depends(get_record_store),
) -> list[Recipe]:
    """List the user's generated recipes, newest first."""
    return await recipe_service.list_recipes(store=store, owner_id=owner_id)
