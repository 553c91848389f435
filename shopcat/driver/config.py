"""Configuration for the catalog client."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


class ClientSettings(BaseSettings):
    """Catalog client configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SHOPCAT_CLIENT_",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    base_url: str = Field(
        default="https://api.example-shop.com/v1",
        description="Base URL of the catalog service",
    )

    # The service rejects requests that look like scripts
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent header sent with every request",
    )

    accept_language: str = Field(
        default="en-US,en;q=0.5",
        description="Accept-Language header sent with every request",
    )

    timeout: int = Field(
        default=30,
        description="Request timeout in seconds",
        ge=1,
        le=300,
    )

    categories_path: str = Field(
        default="/showcases",
        description="Path of the category (showcase) listing endpoint",
    )

    products_path: str = Field(
        default="/products",
        description="Path of the product listing endpoint",
    )

    parent_param: str = Field(
        default="parent",
        description="Query parameter scoping a showcase listing to a parent category",
    )

    category_param: str = Field(
        default="category",
        description="Query parameter selecting the category of a product listing",
    )

    def endpoint(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"
