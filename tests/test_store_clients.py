"""Tests for the store manifest and icon resolvers."""

import httpx
import pytest

from conftest import catalog_document
from store_app_importer.clients.store import IconResolver, ManifestResolver
from store_app_importer.core.errors import (
    DownloadFailed,
    IconNotFound,
    ManifestNotFound,
    UpstreamUnavailable,
)


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


# ═══════════════════════════════════════════
# ManifestResolver
# ═══════════════════════════════════════════


class TestManifestResolver:
    @pytest.mark.asyncio
    async def test_resolves_latest_version(self):
        requested = []

        def handler(request):
            requested.append(str(request.url))
            return httpx.Response(200, json=catalog_document())

        async with mock_client(handler) as client:
            manifest = await ManifestResolver(client).resolve("Publisher.App")

        assert requested == ["https://storeedgefd.dsx.mp.microsoft.com/v9.0/packageManifests/Publisher.App"]
        assert manifest.latest_version == "2.0.0"

    @pytest.mark.asyncio
    async def test_not_found(self):
        async with mock_client(lambda r: httpx.Response(404)) as client:
            with pytest.raises(ManifestNotFound):
                await ManifestResolver(client).resolve("Missing.App")

    @pytest.mark.asyncio
    async def test_empty_versions_is_not_found(self):
        async with mock_client(lambda r: httpx.Response(200, json=catalog_document(versions=()))) as client:
            with pytest.raises(ManifestNotFound):
                await ManifestResolver(client).resolve("Publisher.App")

    @pytest.mark.asyncio
    async def test_server_error(self):
        async with mock_client(lambda r: httpx.Response(503)) as client:
            with pytest.raises(UpstreamUnavailable):
                await ManifestResolver(client).resolve("Publisher.App")

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        async with mock_client(handler) as client:
            with pytest.raises(UpstreamUnavailable):
                await ManifestResolver(client).resolve("Publisher.App")

    @pytest.mark.asyncio
    async def test_unreadable_body(self):
        async with mock_client(lambda r: httpx.Response(200, text="<html>")) as client:
            with pytest.raises(UpstreamUnavailable):
                await ManifestResolver(client).resolve("Publisher.App")


# ═══════════════════════════════════════════
# IconResolver
# ═══════════════════════════════════════════


def store_handler(details_status=200, icon_url="//store-images.example.com/icon", icon_status=200):
    def handler(request):
        if "GetProductDetailsById" in request.url.path:
            if details_status != 200:
                return httpx.Response(details_status)
            return httpx.Response(200, json={"IconUrl": icon_url, "Title": "App"})
        if icon_status != 200:
            return httpx.Response(icon_status)
        return httpx.Response(200, content=b"image-bytes", headers={"Content-Type": "image/jpeg"})

    return handler


class TestIconResolver:
    @pytest.mark.asyncio
    async def test_downloads_icon(self):
        async with mock_client(store_handler()) as client:
            icon = await IconResolver(client).resolve("9NBLGGH4NNS1")

        assert icon.source_url == "https://store-images.example.com/icon"
        assert icon.content == b"image-bytes"
        assert icon.mime_type == "image/png"

    @pytest.mark.asyncio
    async def test_sends_locale_and_market(self):
        seen = []

        def handler(request):
            seen.append(request.url)
            return store_handler()(request)

        async with mock_client(handler) as client:
            await IconResolver(client, locale="de-DE", market="DE").resolve("9NBLGGH4NNS1")

        assert seen[0].params["hl"] == "de-DE"
        assert seen[0].params["gl"] == "DE"

    @pytest.mark.asyncio
    async def test_no_product_details(self):
        async with mock_client(store_handler(details_status=404)) as client:
            with pytest.raises(IconNotFound):
                await IconResolver(client).resolve("Unknown")

    @pytest.mark.asyncio
    async def test_missing_icon_url(self):
        async with mock_client(store_handler(icon_url="")) as client:
            with pytest.raises(IconNotFound):
                await IconResolver(client).resolve("9NBLGGH4NNS1")

    @pytest.mark.asyncio
    async def test_non_string_icon_url(self):
        async with mock_client(store_handler(icon_url=123)) as client:
            with pytest.raises(IconNotFound):
                await IconResolver(client).resolve("9NBLGGH4NNS1")

    @pytest.mark.asyncio
    async def test_details_server_error(self):
        async with mock_client(store_handler(details_status=500)) as client:
            with pytest.raises(UpstreamUnavailable):
                await IconResolver(client).resolve("9NBLGGH4NNS1")

    @pytest.mark.asyncio
    async def test_download_failure(self):
        async with mock_client(store_handler(icon_status=403)) as client:
            with pytest.raises(DownloadFailed):
                await IconResolver(client).resolve("9NBLGGH4NNS1")
