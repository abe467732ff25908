"""Low-level HTTP client for the device-management backend.

Every call takes the BackendContext explicitly; no token or header state is
kept on the client.
"""

import logging

import httpx

from store_app_importer.core.auth import BackendContext

logger = logging.getLogger(__name__)

MOBILE_APPS_PATH = "deviceAppManagement/mobileApps"


class GraphClient:
    """Thin wrapper over httpx for mobile-app resources.

    Transport errors propagate as httpx.HTTPError for the calling stage to
    classify.
    """

    def __init__(self, client: httpx.AsyncClient, context: BackendContext):
        self.client = client
        self.context = context

    async def post(self, path: str, payload: dict) -> httpx.Response:
        url = self.context.url(path)
        logger.debug(f"POST {url}")
        return await self.client.post(url, json=payload, headers=self.context.headers)

    async def get(self, path: str) -> httpx.Response:
        url = self.context.url(path)
        logger.debug(f"GET {url}")
        return await self.client.get(url, headers=self.context.headers)

    async def create_mobile_app(self, payload: dict) -> httpx.Response:
        return await self.post(MOBILE_APPS_PATH, payload)

    async def get_mobile_app(self, app_id: str) -> httpx.Response:
        return await self.get(f"{MOBILE_APPS_PATH}/{app_id}")

    async def assign_mobile_app(self, app_id: str, payload: dict) -> httpx.Response:
        return await self.post(f"{MOBILE_APPS_PATH}/{app_id}/assign", payload)
