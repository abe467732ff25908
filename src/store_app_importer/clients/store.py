"""
Store catalog clients.

Resolves package manifests from the store's manifest service and downloads
product icons via the product-details service. One outbound call per lookup,
no retries: failures are raised to the orchestrator.
"""

import logging

import httpx

from store_app_importer.core.builder import normalize_url
from store_app_importer.core.errors import (
    DownloadFailed,
    IconNotFound,
    ManifestNotFound,
    UpstreamUnavailable,
)
from store_app_importer.models.manifest import IconAsset, PackageManifest

logger = logging.getLogger(__name__)

MANIFEST_BASE_URL = "https://storeedgefd.dsx.mp.microsoft.com/v9.0/packageManifests"
PRODUCT_DETAILS_URL = "https://apps.microsoft.com/store/api/ProductsDetails/GetProductDetailsById"


async def _get(client: httpx.AsyncClient, url: str, **kwargs) -> httpx.Response:
    """GET a store URL, mapping transport errors to UpstreamUnavailable."""
    try:
        return await client.get(url, **kwargs)
    except httpx.HTTPError as e:
        raise UpstreamUnavailable(f"Request to {url} failed ({type(e).__name__}): {e}") from e


class ManifestResolver:
    """Looks up the authoritative manifest for a package identifier."""

    def __init__(self, client: httpx.AsyncClient, base_url: str = MANIFEST_BASE_URL):
        self.client = client
        self.base_url = base_url.rstrip("/")

    async def resolve(self, package_identifier: str) -> PackageManifest:
        """
        Fetch the manifest for the most recent version of a package.

        Raises:
            ManifestNotFound: Unknown package or no published versions.
            UpstreamUnavailable: Catalog errors or unreadable responses.
        """
        url = f"{self.base_url}/{package_identifier}"
        resp = await _get(self.client, url)

        if resp.status_code == 404:
            raise ManifestNotFound(f"Catalog has no manifest for {package_identifier}")
        if not resp.is_success:
            raise UpstreamUnavailable(f"Catalog returned {resp.status_code} for {package_identifier}")

        try:
            data = resp.json().get("Data") or {}
        except (ValueError, AttributeError) as e:
            raise UpstreamUnavailable(f"Catalog returned an unreadable manifest for {package_identifier}") from e

        manifest = PackageManifest.from_catalog(data, package_identifier)
        logger.debug(
            f"[Manifest] {manifest.package_identifier} {manifest.latest_version} "
            f"({len(manifest.installers)} installers)"
        )
        return manifest


class IconResolver:
    """Finds and downloads the product icon for a package identifier."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        details_url: str = PRODUCT_DETAILS_URL,
        locale: str = "en-US",
        market: str = "US",
    ):
        self.client = client
        self.details_url = details_url.rstrip("/")
        self.locale = locale
        self.market = market

    async def _icon_url(self, package_identifier: str) -> str:
        url = f"{self.details_url}/{package_identifier}"
        resp = await _get(self.client, url, params={"hl": self.locale, "gl": self.market})

        if resp.status_code == 404:
            raise IconNotFound(f"No product details for {package_identifier}")
        if not resp.is_success:
            raise UpstreamUnavailable(f"Product details returned {resp.status_code} for {package_identifier}")

        try:
            icon_url = resp.json().get("IconUrl")
        except (ValueError, AttributeError) as e:
            raise UpstreamUnavailable(f"Unreadable product details for {package_identifier}") from e

        if not isinstance(icon_url, str):
            raise IconNotFound(f"Product details for {package_identifier} have no icon")
        icon_url = normalize_url(icon_url)
        if not icon_url:
            raise IconNotFound(f"Product details for {package_identifier} have no icon")
        return icon_url

    async def resolve(self, package_identifier: str) -> IconAsset:
        """
        Resolve and download the icon, tagged as PNG for the backend.

        Raises:
            IconNotFound: No product details or no icon URL.
            DownloadFailed: The icon bytes could not be fetched.
        """
        icon_url = await self._icon_url(package_identifier)

        try:
            resp = await self.client.get(icon_url)
        except httpx.HTTPError as e:
            raise DownloadFailed(f"Icon download from {icon_url} failed ({type(e).__name__}): {e}") from e

        if not resp.is_success:
            raise DownloadFailed(f"Icon download from {icon_url} returned {resp.status_code}")

        logger.debug(f"[Icon] {package_identifier}: {len(resp.content)} bytes from {icon_url}")
        return IconAsset(source_url=icon_url, content=resp.content)
