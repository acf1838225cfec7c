from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Protocol

from .models import Recipe, string_list


class RecipeNotFoundError(KeyError):
    """Raised when no stored recipe has the requested id."""

    def __init__(self, recipe_id: str) -> None:
        super().__init__(recipe_id)
        self.recipe_id = recipe_id

    def __str__(self) -> str:
        return f"Recipe '{self.recipe_id}' does not exist."


class InvalidRecipeError(ValueError):
    """Raised when recipe input is missing a required field or is malformed."""


@dataclass
class RecipeInput:
    """Caller-supplied recipe fields; ``id`` and ``published_at`` are store-owned."""

    name: str
    tags: List[str] = field(default_factory=list)
    ingredients: List[str] = field(default_factory=list)
    instructions: List[str] = field(default_factory=list)

    def validate(self) -> None:
        if not self.name:
            raise InvalidRecipeError("Field 'name' is required.")

    @classmethod
    def from_json(cls, payload: Any) -> "RecipeInput":
        """Parse a request body, ignoring any ``id`` or ``publishedAt`` it carries.

        Only the shape is checked here; the store enforces the required ``name``.
        """

        if not isinstance(payload, Mapping):
            raise InvalidRecipeError("Request body must be a JSON object.")

        name = payload.get("name")
        if name is not None and not isinstance(name, str):
            raise InvalidRecipeError("Field 'name' must be a string.")

        try:
            return cls(
                name=name or "",
                tags=string_list(payload.get("tags"), "tags"),
                ingredients=string_list(payload.get("ingredients"), "ingredients"),
                instructions=string_list(payload.get("instructions"), "instructions"),
            )
        except TypeError as exc:
            raise InvalidRecipeError(f"Field {exc}") from exc


class RecipeRepository(Protocol):
    """Protocol describing the behaviour required by the web layer."""

    def list_recipes(self) -> Iterable[Recipe]:
        """Return every stored recipe in insertion order."""

    def get_recipe(self, recipe_id: str) -> Recipe:
        """Return a single recipe or raise :class:`RecipeNotFoundError`."""

    def add_recipe(
        self,
        *,
        name: str,
        tags: List[str],
        ingredients: List[str],
        instructions: List[str],
    ) -> Recipe:
        """Store a new recipe and return the stored instance."""

    def update_recipe(
        self,
        recipe_id: str,
        *,
        name: str,
        tags: List[str],
        ingredients: List[str],
        instructions: List[str],
    ) -> Recipe:
        """Replace an existing recipe and return the new representation."""

    def delete_recipe(self, recipe_id: str) -> None:
        """Remove a recipe."""

    def search_recipes(self, tag: str) -> List[Recipe]:
        """Return recipes carrying ``tag``, compared case-insensitively."""


__all__ = ["InvalidRecipeError", "RecipeInput", "RecipeNotFoundError", "RecipeRepository"]
