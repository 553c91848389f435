from typing import runtime_checkable, Protocol

from .model import Category, FetchResult, Product


@runtime_checkable
class Catalog(Protocol):
    def fetch_categories(self, parent_id: str | None = None) -> FetchResult[Category]: ...
    def fetch_products(self, category_id: str) -> FetchResult[Product]: ...
