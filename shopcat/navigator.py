"""Category tree navigation down to product-bearing (leaf) categories."""

import logging
from enum import Enum
from typing import Callable

from pydantic import BaseModel

from .errors import InvalidSelection, NavigationError
from .model import Category, FetchFailure, FetchResult, Product
from .protocol import Catalog

logger = logging.getLogger(__name__)

Chooser = Callable[[list[Category]], Category]


class NavigationState(str, Enum):
    listing = "listing"
    resolving = "resolving"
    leaf = "leaf"


class NavigationStep(BaseModel):
    """Result of descending one level into a category.

    Exactly one of ``subcategories`` (non-empty), ``products`` or
    ``failure`` describes what happened.
    """

    category: Category
    subcategories: list[Category] = []
    products: FetchResult[Product] | None = None
    failure: FetchFailure | None = None

    @property
    def is_leaf(self) -> bool:
        return self.products is not None


class Navigator:
    """Walks the category tree of a catalog.

    Subcategories are detected by probing: a category whose subcategory
    listing comes back empty is a leaf and its products are fetched.
    """

    def __init__(self, catalog: Catalog):
        self.catalog = catalog
        self.state = NavigationState.listing

    def list_top_level(self) -> FetchResult[Category]:
        self.state = NavigationState.listing
        return self.catalog.fetch_categories()

    @staticmethod
    def display_lines(categories: list[Category]) -> list[str]:
        """Display lines for a listing, numbered from 1 in listing order."""
        return [f"{i}. {category.name}" for i, category in enumerate(categories, start=1)]

    @staticmethod
    def choose(categories: list[Category], selection: str | int) -> Category:
        """Return the category the user picked by its displayed number."""
        try:
            index = int(str(selection).strip())
        except ValueError:
            raise InvalidSelection(selection, len(categories)) from None

        if not 1 <= index <= len(categories):
            raise InvalidSelection(selection, len(categories))
        return categories[index - 1]

    def step(self, category: Category) -> NavigationStep:
        """Descend into ``category`` by one level."""
        self.state = NavigationState.resolving
        logger.info(f"Resolving category '{category.name}' ({category.id})")

        result = self.catalog.fetch_categories(category.id)
        if not result.ok:
            logger.warning(
                f"Could not list subcategories of '{category.name}': {result.failure.message}"
            )
            self.state = NavigationState.listing
            return NavigationStep(category=category, failure=result.failure)

        if result.items:
            self.state = NavigationState.listing
            parent = category.model_copy(update={"has_subcategories": True})
            return NavigationStep(category=parent, subcategories=result.items)

        self.state = NavigationState.leaf
        return NavigationStep(category=category, products=self.fetch_products(category))

    def fetch_products(self, category: Category) -> FetchResult[Product]:
        if category.has_subcategories:
            raise NavigationError(
                f"Category '{category.name}' has subcategories; pick one of them instead"
            )

        products = self.catalog.fetch_products(category.id)
        if products.is_empty:
            logger.info(f"Category '{category.name}' has no products")
        return products

    def resolve(self, category: Category, chooser: Chooser) -> NavigationStep:
        """Descend until a leaf category is reached or a fetch fails.

        ``chooser`` is called with each non-empty subcategory listing and
        must return one of its members.
        """
        step = self.step(category)
        while step.subcategories:
            step = self.step(chooser(step.subcategories))
        return step
