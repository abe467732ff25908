"""
Example: Import store apps using the orchestrator directly.

Usage:
    export AZURE_TENANT_ID=... AZURE_CLIENT_ID=... AZURE_CLIENT_SECRET=...
    python examples/import_apps.py
"""

import asyncio
import json
import os
from pathlib import Path

import httpx

from store_app_importer import ImportOrchestrator
from store_app_importer.core.auth import BackendContext, ClientCredentialsProvider
from store_app_importer.models.descriptor import load_descriptors


async def main():
    apps_file = Path(__file__).parent / "apps.json"
    descriptors = load_descriptors(json.loads(apps_file.read_text()))

    provider = ClientCredentialsProvider(
        os.environ["AZURE_TENANT_ID"],
        os.environ["AZURE_CLIENT_ID"],
        os.environ["AZURE_CLIENT_SECRET"],
    )

    async with httpx.AsyncClient(timeout=30.0, follow_redirects=True) as client:
        token = await provider.acquire(client)
        orchestrator = ImportOrchestrator.create(client, BackendContext(token=token), poll=True)
        results = await orchestrator.run(descriptors)

    for result in results:
        print(json.dumps(result.to_dict()))


if __name__ == "__main__":
    asyncio.run(main())
