from __future__ import annotations

import copy
import json
import logging
import os
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .models import Recipe
from .storage import RecipeInput, RecipeNotFoundError, RecipeRepository

logger = logging.getLogger(__name__)

DEFAULT_SEED_FILE = "recipes.json"


def load_seed(path: str | os.PathLike[str]) -> Tuple[List[Recipe], Optional[str]]:
    """Read a JSON array of recipes from ``path``.

    Never raises. Returns the recipes that could be read together with a
    diagnostic message, which is ``None`` when the file loaded cleanly.
    """

    try:
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, ValueError) as exc:
        return [], f"Could not read seed file {path}: {exc}"

    if not isinstance(data, list):
        return [], f"Seed file {path} does not contain a JSON array."

    try:
        recipes = [Recipe.from_dict(item) for item in data]
    except (TypeError, ValueError) as exc:
        return [], f"Seed file {path} contains an invalid recipe: {exc}"

    return recipes, None


class InMemoryRecipeStorage(RecipeRepository):
    """Process-local recipe store guarded by a single lock.

    Recipes are kept in insertion order. Every recipe handed out is a copy, so
    callers cannot mutate stored state behind the lock's back.
    """

    def __init__(self, seed: Iterable[Recipe] = ()) -> None:
        self._lock = threading.Lock()
        self._recipes: List[Recipe] = []

        loaded_at = datetime.now(timezone.utc)
        seen = set()
        for recipe in seed:
            recipe = copy.deepcopy(recipe)
            if not recipe.id:
                recipe.id = self._new_id()
            if recipe.id in seen:
                logger.warning("Skipping seed recipe with duplicate id %s", recipe.id)
                continue
            if recipe.published_at is None:
                recipe.published_at = loaded_at
            seen.add(recipe.id)
            self._recipes.append(recipe)

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> "InMemoryRecipeStorage":
        """Build a store seeded from ``path``, starting empty if it cannot be read."""

        recipes, diagnostic = load_seed(path)
        if diagnostic:
            logger.warning("%s; starting with an empty recipe collection", diagnostic)
        else:
            logger.info("Loaded %d recipes from %s", len(recipes), path)
        return cls(recipes)

    @classmethod
    def from_env(cls) -> "InMemoryRecipeStorage":
        """Build a store from environment variables."""

        return cls.from_file(Path(os.environ.get("RECIPES_FILE", DEFAULT_SEED_FILE)))

    def list_recipes(self) -> List[Recipe]:
        with self._lock:
            return copy.deepcopy(self._recipes)

    def get_recipe(self, recipe_id: str) -> Recipe:
        with self._lock:
            return copy.deepcopy(self._recipes[self._index_of(recipe_id)])

    def add_recipe(
        self,
        *,
        name: str,
        tags: List[str],
        ingredients: List[str],
        instructions: List[str],
    ) -> Recipe:
        recipe_input = RecipeInput(
            name=name, tags=list(tags), ingredients=list(ingredients), instructions=list(instructions)
        )
        recipe_input.validate()

        with self._lock:
            recipe = Recipe(
                id=self._new_id(),
                name=recipe_input.name,
                tags=recipe_input.tags,
                ingredients=recipe_input.ingredients,
                instructions=recipe_input.instructions,
                published_at=datetime.now(timezone.utc),
            )
            self._recipes.append(recipe)
            logger.debug("Created recipe %s", recipe.id)
            return copy.deepcopy(recipe)

    def update_recipe(
        self,
        recipe_id: str,
        *,
        name: str,
        tags: List[str],
        ingredients: List[str],
        instructions: List[str],
    ) -> Recipe:
        with self._lock:
            index = self._index_of(recipe_id)

            recipe_input = RecipeInput(
                name=name, tags=list(tags), ingredients=list(ingredients), instructions=list(instructions)
            )
            recipe_input.validate()

            current = self._recipes[index]
            updated = Recipe(
                id=current.id,
                name=recipe_input.name,
                tags=recipe_input.tags,
                ingredients=recipe_input.ingredients,
                instructions=recipe_input.instructions,
                published_at=current.published_at,
            )
            self._recipes[index] = updated
            logger.debug("Updated recipe %s", recipe_id)
            return copy.deepcopy(updated)

    def delete_recipe(self, recipe_id: str) -> None:
        with self._lock:
            del self._recipes[self._index_of(recipe_id)]
            logger.debug("Deleted recipe %s", recipe_id)

    def search_recipes(self, tag: str) -> List[Recipe]:
        if not tag:
            return []

        needle = tag.casefold()
        with self._lock:
            return [
                copy.deepcopy(recipe)
                for recipe in self._recipes
                if any(existing.casefold() == needle for existing in recipe.tags)
            ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._recipes)

    def _index_of(self, recipe_id: str) -> int:
        """Return the position of ``recipe_id``. Callers must hold the lock."""

        matches = [index for index, recipe in enumerate(self._recipes) if recipe.id == recipe_id]
        if not matches:
            raise RecipeNotFoundError(recipe_id)
        if len(matches) > 1:
            logger.error("Recipe id %s is stored %d times; using the first", recipe_id, len(matches))
        return matches[0]

    def _new_id(self) -> str:
        return uuid.uuid4().hex


__all__ = ["DEFAULT_SEED_FILE", "InMemoryRecipeStorage", "load_seed"]
