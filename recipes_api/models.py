import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

# Fractional seconds, which Go writes with 1 to 9 digits and trailing zeros dropped.
_FRACTION = re.compile(r"\.(\d+)")


@dataclass
class Recipe:
    """Domain object representing a stored recipe."""

    id: str
    name: str
    tags: List[str] = field(default_factory=list)
    ingredients: List[str] = field(default_factory=list)
    instructions: List[str] = field(default_factory=list)
    published_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON representation used on the wire."""

        data: Dict[str, Any] = {}
        if self.id:
            data["id"] = self.id
        data["name"] = self.name
        data["tags"] = list(self.tags)
        data["ingredients"] = list(self.ingredients)
        data["instructions"] = list(self.instructions)
        if self.published_at is not None:
            data["publishedAt"] = self.published_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Recipe":
        """Build a recipe from its wire representation.

        Raises :class:`ValueError` or :class:`TypeError` when the data is not
        shaped like a recipe.
        """

        if not isinstance(data, dict):
            raise TypeError(f"Expected a JSON object, got {type(data).__name__}.")

        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            tags=string_list(data.get("tags"), "tags"),
            ingredients=string_list(data.get("ingredients"), "ingredients"),
            instructions=string_list(data.get("instructions"), "instructions"),
            published_at=parse_timestamp(data.get("publishedAt")),
        )


def parse_timestamp(value: Any) -> Optional[datetime]:
    if value in (None, ""):
        return None
    if not isinstance(value, str):
        raise TypeError("publishedAt must be an ISO-8601 string.")
    # fromisoformat only accepts a trailing "Z" from Python 3.11 onwards.
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    # fromisoformat on 3.10 only accepts exactly 3 or 6 digits.
    value = _FRACTION.sub(lambda match: "." + match.group(1)[:6].ljust(6, "0"), value)
    return datetime.fromisoformat(value)


def string_list(value: Any, field_name: str) -> List[str]:
    """Return a copy of ``value`` or raise :class:`TypeError` if it is not a list of strings."""

    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise TypeError(f"{field_name} must be a list of strings.")
    return list(value)


__all__ = ["Recipe", "parse_timestamp", "string_list"]
