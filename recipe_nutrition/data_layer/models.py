"""Data models for the recipe store."""
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class Recipe:
    """A user-submitted recipe."""

    id: int
    title: str
    description: str = ""
    ingredients: str = ""  # JSON-encoded list or free text, one ingredient per line
    steps: str = ""
    image_url: str = ""
    author: str = "Anonymous"
    created_at: str = field(default_factory=_now_iso)

    def ingredient_text(self) -> str:
        """Ingredients as newline-delimited text for nutrition lookups.

        Ingredients stored as a JSON list are joined one per line;
        anything else is returned as stored.
        """
        text = self.ingredients or ""
        try:
            decoded = json.loads(text)
        except ValueError:
            return text
        if isinstance(decoded, list):
            return "\n".join(str(item) for item in decoded)
        return text

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the client-facing (camelCase) field names."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "ingredients": self.ingredients,
            "steps": self.steps,
            "imageUrl": self.image_url,
            "author": self.author,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Recipe":
        created_at: Optional[str] = data.get("createdAt")
        return cls(
            id=int(data["id"]),
            title=data["title"],
            description=data.get("description") or "",
            ingredients=data.get("ingredients") or "",
            steps=data.get("steps") or "",
            image_url=data.get("imageUrl") or "",
            author=data.get("author") or "Anonymous",
            created_at=created_at or _now_iso(),
        )
