"""Base classes for catalog clients."""

from typing import Any, TypeVar
import logging
from urllib.parse import urljoin, urlparse

import requests
from pydantic import BaseModel, ValidationError

from ..model import FailureKind, FetchResult
from .config import ClientSettings

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class DecodeError(Exception):
    """Response body did not have the expected shape."""


class BaseCatalog:
    """Base class for JSON catalog clients.

    Owns a configured ``requests.Session`` and turns transport and decode
    problems into failed ``FetchResult`` values instead of exceptions.
    """

    settings: ClientSettings
    session: requests.Session
    logger: logging.Logger

    def __init__(
        self,
        settings: ClientSettings | None = None,
        session: requests.Session | None = None,
    ):
        self.settings = settings or ClientSettings()
        self.session = session or requests.Session()
        self.logger = logging.getLogger(self.__module__)

        self.session.headers.update(
            {
                "User-Agent": self.settings.user_agent,
                "Accept": "application/json, text/plain, */*",
                "Accept-Language": self.settings.accept_language,
            }
        )

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _normalize_url(self, href: str, base_url: str) -> str:
        """Normalize relative URLs to fully qualified URLs."""
        if href and not urlparse(href).scheme:
            return urljoin(base_url, href)
        return href

    def _get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        """GET an endpoint and return the decoded JSON body.

        Raises requests.RequestException on transport errors and non-2xx
        responses, DecodeError when the body is not JSON.
        """
        url = self.settings.endpoint(path)
        self.logger.debug(f"GET {url} params={params}")
        response = self.session.get(url, params=params, timeout=self.settings.timeout)
        response.raise_for_status()

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Response from {url} is not valid JSON: {e}") from e

    def _decode_list(self, payload: Any, model: type[M]) -> list[M]:
        """Validate a JSON array into a list of models."""
        if not isinstance(payload, list):
            raise DecodeError(
                f"Expected a JSON array, got {type(payload).__name__}"
            )

        items = []
        for index, entry in enumerate(payload):
            try:
                items.append(self._build_item(model, entry))
            except (ValidationError, TypeError) as e:
                raise DecodeError(f"Invalid {model.__name__} at index {index}: {e}") from e
        return items

    def _build_item(self, model: type[M], entry: Any) -> M:
        return model.model_validate(entry)

    def _fetch_list(
        self,
        path: str,
        model: type[M],
        params: dict[str, str] | None = None,
        context: str = "items",
    ) -> FetchResult[M]:
        """Fetch and decode a list endpoint, collapsing errors into a failed result."""
        try:
            payload = self._get_json(path, params)
            items = self._decode_list(payload, model)
        except requests.RequestException as e:
            self.logger.error(f"Network error fetching {context}: {e}")
            return FetchResult[model].failed(FailureKind.network, str(e))
        except DecodeError as e:
            self.logger.error(f"Could not decode {context}: {e}")
            return FetchResult[model].failed(FailureKind.decode, str(e))

        self.logger.info(f"Found {len(items)} {context}")
        return FetchResult[model](items=items)
