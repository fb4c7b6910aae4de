from src.services import (
    pantry_service,
    recipe_service,
)


__all__ = [
    "pantry_service",
    "recipe_service",
]
