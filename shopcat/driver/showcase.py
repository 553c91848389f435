"""JSON showcase API client for the e-commerce catalog service."""

from typing import Any

from .base import BaseCatalog
from ..model import Category, FetchResult, Product


class Catalog(BaseCatalog):
    """Client for the showcase (category) and product listing endpoints."""

    def fetch_categories(self, parent_id: str | None = None) -> FetchResult[Category]:
        """Fetch top-level categories, or the subcategories of ``parent_id``."""
        params = None
        context = "categories"
        if parent_id is not None:
            params = {self.settings.parent_param: parent_id}
            context = f"subcategories of '{parent_id}'"

        return self._fetch_list(
            self.settings.categories_path, Category, params=params, context=context
        )

    def fetch_products(self, category_id: str) -> FetchResult[Product]:
        """Fetch the products listed in a leaf category."""
        return self._fetch_list(
            self.settings.products_path,
            Product,
            params={self.settings.category_param: category_id},
            context=f"products in category '{category_id}'",
        )

    def _build_item(self, model, entry: Any):
        if model is Category and isinstance(entry, dict):
            # has_subcategories is derived during navigation, never taken from the wire
            entry = {k: v for k, v in entry.items() if k != "has_subcategories"}
        if model is Product and isinstance(entry, dict) and isinstance(entry.get("url"), str):
            base_url = self.settings.base_url.rstrip("/") + "/"
            entry = {**entry, "url": self._normalize_url(entry["url"], base_url)}
        return super()._build_item(model, entry)
