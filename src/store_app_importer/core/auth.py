"""
Credential context for the management backend.

The token is acquired once per run through the client-credentials grant and
passed explicitly to every stage inside a BackendContext.
"""

import logging
import time
from dataclasses import dataclass

import httpx

from store_app_importer.core.errors import AuthenticationFailed

logger = logging.getLogger(__name__)

GRAPH_BASE_URL = "https://graph.microsoft.com/beta"
GRAPH_SCOPE = "https://graph.microsoft.com/.default"
LOGIN_BASE_URL = "https://login.microsoftonline.com"


@dataclass(frozen=True)
class AccessToken:
    """Bearer token with its absolute expiry (epoch seconds)."""

    value: str
    expires_at: float

    def is_expired(self, skew: float = 60.0) -> bool:
        return time.time() + skew >= self.expires_at


@dataclass(frozen=True)
class BackendContext:
    """Everything a backend call needs: the token and where to send it."""

    token: AccessToken
    base_url: str = GRAPH_BASE_URL

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token.value}",
            "Content-Type": "application/json",
        }

    def url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"


class ClientCredentialsProvider:
    """
    Acquires a backend token with the OAuth2 client-credentials grant.

    Usage:
        provider = ClientCredentialsProvider(tenant_id, client_id, client_secret)
        token = await provider.acquire(client)
    """

    def __init__(
        self,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        login_base_url: str = LOGIN_BASE_URL,
        scope: str = GRAPH_SCOPE,
    ):
        self.tenant_id = tenant_id
        self.client_id = client_id
        self.client_secret = client_secret
        self.token_url = f"{login_base_url.rstrip('/')}/{tenant_id}/oauth2/v2.0/token"
        self.scope = scope

    async def acquire(self, client: httpx.AsyncClient) -> AccessToken:
        """
        Request a new access token.

        Raises:
            AuthenticationFailed: On transport errors, non-2xx responses, or a
                response without an access token.
        """
        data = {
            "grant_type": "client_credentials",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "scope": self.scope,
        }
        try:
            resp = await client.post(self.token_url, data=data)
        except httpx.HTTPError as e:
            raise AuthenticationFailed(f"Token request failed ({type(e).__name__}): {e}") from e

        if not resp.is_success:
            raise AuthenticationFailed(f"Token endpoint returned {resp.status_code}: {resp.text}")

        try:
            payload = resp.json()
            value = payload["access_token"]
        except (ValueError, KeyError) as e:
            raise AuthenticationFailed("Token endpoint response has no access_token") from e

        expires_in = float(payload.get("expires_in", 3600))
        logger.info(f"Acquired backend token for tenant {self.tenant_id} (expires in {expires_in:.0f}s)")
        return AccessToken(value=value, expires_at=time.time() + expires_in)
