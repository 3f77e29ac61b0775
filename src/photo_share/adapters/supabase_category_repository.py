"""Supabase-backed category repository."""

from dataclasses import dataclass

from supabase import Client

from photo_share.adapters.supabase_errors import execute
from photo_share.domain.photos import Category
from photo_share.services.photos import CategoryRepository


@dataclass
class SupabaseCategoryRepository(CategoryRepository):
    """Supabase implementation for category lookups."""

    client: Client

    def get_category(self, category_id: str) -> Category | None:
        """Return a category by id, if present."""
        return self._first("id", category_id)

    def get_by_name(self, name: str) -> Category | None:
        """Return a category by its URL name, if present."""
        return self._first("name", name)

    def _first(self, column: str, value: str) -> Category | None:
        response = execute(
            self.client.table("categories").select("*").eq(column, value).limit(1),
            "load category",
        )
        if not response.data:
            return None
        row = response.data[0]
        return Category(
            id=str(row["id"]),
            name=str(row.get("name", "")),
            label=str(row.get("label", "")),
            description=str(row.get("description") or ""),
            image_url=row.get("image_url"),
        )
