"""Pantry domain models."""

import math

from pydantic import BaseModel, Field


def normalize_item_name(name: str) -> str:
    """Normalize an item name for storage and lookup (trimmed, case-folded)."""
    return name.strip().casefold()


def is_valid_amount(amount: float | None) -> bool:
    """Return True for finite, non-negative quantities.

    Integers too large to convert to float count as non-finite.
    """
    if amount is None:
        return False
    try:
        return math.isfinite(amount) and amount >= 0
    except OverflowError:
        return False


def normalize_amount(amount: float) -> int | float:
    """Return integral amounts as int so stored quantities read back as whole numbers."""
    if isinstance(amount, float) and amount.is_integer():
        return int(amount)
    return amount


class InventoryItem(BaseModel):
    """Pantry item data transfer object."""

    id: str = Field(..., description="Opaque item ID assigned by the store")
    name: str = Field(..., description="Normalized item name (e.g., 'milk', 'eggs')")
    amount: float = Field(..., ge=0, description="Current quantity")
    owner_id: str = Field(..., description="ID of the owning user")


class Recipe(BaseModel):
    """Generated recipe data transfer object."""

    id: str = Field(..., description="Opaque recipe ID assigned by the store")
    title: str = Field(..., description="Recipe title")
    minutes_takes: int = Field(..., description="Preparation time in minutes")
    steps: str = Field(..., description="Preparation steps")
    ingredients: list[str] = Field(default_factory=list, description="Ingredient names used")
    owner_id: str = Field(..., description="ID of the owning user")
    created: str | None = Field(default=None, description="Creation timestamp")


class PantrySummary(BaseModel):
    """Aggregate view of a user's pantry for charts."""

    total: float = Field(..., description="Sum of all item amounts")
    labels: list[str] = Field(default_factory=list, description="Item names in chart order")
    amounts: list[float] = Field(default_factory=list, description="Item amounts in chart order")
