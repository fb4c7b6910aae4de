"""Recipe generation from selected pantry ingredients."""

import json
import logging
from datetime import datetime

from src.core.config import constants
from src.core.logging import span
from src.core.record_store import RecordStore
from src.domain.pantry import Recipe


logger = logging.getLogger(__name__)

COLLECTION = constants.RECIPES_COLLECTION


def build_recipe_draft(ingredients: list[str]) -> dict[str, object]:
    """Build a templated recipe from ingredient names.

    Args:
        ingredients: Ingredient names, at least one

    Returns:
        Dict with title, minutes_takes and steps

    Raises:
        ValueError: If no non-blank ingredient is given
    """
    names = [name.strip() for name in ingredients if name.strip()]
    if not names:
        raise ValueError("At least one ingredient is required to generate a recipe")

    title = f"Recipe with {', '.join(names[: constants.RECIPE_TITLE_INGREDIENTS])}"
    steps = f"1. Combine {', '.join(names)}. 2. Cook for {constants.RECIPE_DEFAULT_MINUTES} minutes. 3. Serve hot."
    return {"title": title, "minutes_takes": constants.RECIPE_DEFAULT_MINUTES, "steps": steps, "ingredients": names}


async def generate_recipe(*, store: RecordStore, owner_id: str, ingredients: list[str]) -> Recipe:
    """Generate a recipe from ingredients and save it for the user."""
    with span("recipe_service.generate_recipe"):
        draft = build_recipe_draft(ingredients)
        created = datetime.now().isoformat()
        data = {
            **draft,
            "ingredients": json.dumps(draft["ingredients"]),
            "owner_id": owner_id,
            "created": created,
        }

        recipe_id = await store.insert(COLLECTION, data)
        logger.info(f"Generated recipe \"{draft['title']}\"", extra={"user_id": owner_id})

        return Recipe(id=recipe_id, owner_id=owner_id, created=created, **draft)


async def list_recipes(*, store: RecordStore, owner_id: str) -> list[Recipe]:
    """Get a user's generated recipes, newest first."""
    with span("recipe_service.list_recipes"):
        records = await store.query(COLLECTION, [("owner_id", "=", owner_id)], sort="-id")

        recipes = []
        for record in records:
            fields = dict(record.fields)
            fields["ingredients"] = json.loads(fields.get("ingredients") or "[]")
            recipes.append(Recipe(id=record.id, **fields))
        return recipes
