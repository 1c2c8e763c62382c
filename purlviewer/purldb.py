"""PurlDB package metadata models and enrichment client."""

from __future__ import annotations

import threading
from typing import Any, Dict, List, Optional

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from purlviewer.config import API_CONFIG
from .api_client import APIClient
from .badges import encode_uri_component

PURLDB_API_PATH = "/api/packages/"
PURLDB_MAX_VERSIONS_DISPLAY = 10


class PurlDBDependency(BaseModel):
    """A dependency of a package as reported by PurlDB."""
    model_config = ConfigDict(extra="ignore")

    purl: str
    scope: Optional[str] = None
    is_runtime: bool = False
    is_optional: bool = False


class PurlDBPackage(BaseModel):
    """A single package entry of the PurlDB packages API.

    Only the fields the viewer displays are modelled; anything else in the
    API payload is ignored.
    """
    model_config = ConfigDict(extra="ignore")

    url: Optional[str] = None
    purl: str
    type: Optional[str] = None
    namespace: Optional[str] = None
    name: Optional[str] = None
    version: Optional[str] = None
    declared_license_expression: Optional[str] = None
    declared_license_expression_spdx: Optional[str] = None
    description: Optional[str] = None
    homepage_url: Optional[str] = None
    repository_homepage_url: Optional[str] = None
    release_date: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)
    dependencies: Any = None

    @property
    def license(self) -> Optional[str]:
        """The SPDX license expression, falling back to the declared one."""
        return self.declared_license_expression_spdx or self.declared_license_expression

    def get_dependencies(self) -> List[PurlDBDependency]:
        """Returns the package dependencies when the payload lists them inline."""
        if not isinstance(self.dependencies, list):
            return []
        deps = []
        for item in self.dependencies:
            if isinstance(item, dict) and item.get("purl"):
                deps.append(PurlDBDependency(**item))
        return deps


class PurlDBResponse(BaseModel):
    """The paginated envelope returned by the packages API."""
    count: int = 0
    next: Optional[str] = None
    previous: Optional[str] = None
    results: List[PurlDBPackage] = Field(default_factory=list)


def get_purldb_url(purl: str, base_url: Optional[str] = None) -> str:
    """Generates the direct PurlDB API link for a PURL string.

    Args:
        purl: The PURL string to look up.
        base_url: Root URL of the PurlDB instance. Defaults to the
            configured `base_url`, so the link matches the instance queried.
    """
    root = (base_url or API_CONFIG["base_url"]).rstrip("/")
    return f"{root}{PURLDB_API_PATH}?purl={encode_uri_component(purl)}"


def get_versions_cache_key(purl_type: str, namespace: Optional[str], name: str) -> str:
    return f"{purl_type}/{namespace or ''}/{name}"


class PurlDBClient:
    """Fetches package metadata from PurlDB with a session-scoped cache.

    Lookups never raise: failures are logged and reported as None or an
    empty list. Results are cached in memory for the lifetime of the
    client, keyed by PURL string for single packages and by
    type/namespace/name for version listings.

    Attributes:
        api_client: The HTTP client used for requests.
        max_pages: Maximum number of result pages read per version listing.
    """

    def __init__(self, api_client: Optional[APIClient] = None, max_pages: Optional[int] = None):
        self.api_client = api_client or APIClient()
        self.logger = self.api_client.logger
        self.max_pages = max_pages if max_pages is not None else API_CONFIG["max_pages"]
        # A cached None records that PurlDB has no such package.
        self._package_cache: Dict[str, Optional[PurlDBPackage]] = {}
        self._versions_cache: Dict[str, List[PurlDBPackage]] = {}
        self._cache_lock = threading.Lock()

    def __enter__(self) -> "PurlDBClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def close(self) -> None:
        self.api_client.close()

    def _set_cached_package(self, purl: str, package: Optional[PurlDBPackage]) -> None:
        with self._cache_lock:
            self._package_cache[purl] = package

    def fetch_package_by_purl(self, purl: str) -> Optional[PurlDBPackage]:
        """Fetches package data by exact PURL.

        Args:
            purl: Full PURL string (e.g., pkg:npm/lodash@4.17.21).

        Returns:
            The first matching package, or None if PurlDB has none or the
            request failed.
        """
        with self._cache_lock:
            if purl in self._package_cache:
                self.logger.debug(f"[PurlDB] Cache hit for {purl}")
                return self._package_cache[purl]

        try:
            response = self.api_client.get(PURLDB_API_PATH, params={"purl": purl})
            data = PurlDBResponse.model_validate(response.json())
        except requests.exceptions.HTTPError as e:
            self.logger.error(f"[PurlDB] API error for {purl}: {e}")
            self._set_cached_package(purl, None)
            return None
        except requests.exceptions.Timeout:
            self.logger.error(f"[PurlDB] Request for {purl} timed out")
            return None
        except (requests.exceptions.RequestException, ValueError, ValidationError) as e:
            self.logger.error(f"[PurlDB] Fetch error for {purl}: {e}")
            return None

        result = data.results[0] if data.results else None
        self._set_cached_package(purl, result)
        return result

    def fetch_package_versions(
        self, purl_type: str, namespace: Optional[str], name: str
    ) -> List[PurlDBPackage]:
        """Fetches all known versions of a package.

        Follows pagination for at most `max_pages` pages. A failing page ends
        the listing with the versions gathered so far.

        Args:
            purl_type: Package type (npm, pypi, maven, etc.).
            namespace: Package namespace or None.
            name: Package name.

        Returns:
            The package versions, in API order.
        """
        cache_key = get_versions_cache_key(purl_type, namespace, name)
        with self._cache_lock:
            cached = self._versions_cache.get(cache_key)
        if cached is not None:
            self.logger.debug(f"[PurlDB] Cache hit for versions of {cache_key}")
            return list(cached)

        params = {"type": purl_type, "name": name}
        if namespace:
            params["namespace"] = namespace

        results: List[PurlDBPackage] = []
        pages = self.api_client.paginate(
            PURLDB_API_PATH, params=params, data_key=None, max_pages=self.max_pages
        )
        try:
            for page in pages:
                results.extend(PurlDBResponse.model_validate(page).results)
        except requests.exceptions.HTTPError as e:
            self.logger.error(f"[PurlDB] Versions API error for {cache_key}: {e}")
        except (requests.exceptions.RequestException, ValidationError) as e:
            self.logger.error(f"[PurlDB] Versions fetch error for {cache_key}: {e}")
            return []

        with self._cache_lock:
            self._versions_cache[cache_key] = results
        return list(results)

    def clear_cache(self) -> None:
        """Clears all cached lookups."""
        with self._cache_lock:
            self._package_cache.clear()
            self._versions_cache.clear()
