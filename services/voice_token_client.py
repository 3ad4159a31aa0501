"""Client for the voice provider's access token endpoint."""
import asyncio
import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class VoiceTokenError(Exception):
    """Raised when an access token cannot be obtained."""


class VoiceTokenClient:
    """Exchanges the server-held API key pair for a short-lived access token."""

    TOKEN_PATH = "/oauth2-cc/token"

    def __init__(
        self,
        api_key: str,
        secret_key: str,
        base_url: str = "https://api.hume.ai",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the token client.

        Args:
            api_key: Provider API key
            secret_key: Provider secret key
            base_url: Provider API base URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.api_key = api_key
        self.secret_key = secret_key
        self.base_url = base_url.rstrip('/')
        self.timeout = httpx.Timeout(timeout, connect=min(timeout, 5.0))
        self._transport = transport

    @classmethod
    def from_settings(cls, settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "VoiceTokenClient":
        return cls(
            api_key=settings.HUME_API_KEY,
            secret_key=settings.HUME_SECRET_KEY,
            base_url=settings.HUME_API_BASE_URL,
            timeout=settings.VOICE_TOKEN_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def fetch_access_token(self) -> str:
        """Request an access token with the client credentials grant.

        Returns:
            Access token string

        Raises:
            VoiceTokenError: If credentials are missing, the request fails
                or the response has no token
        """
        if not self.api_key or not self.secret_key:
            raise VoiceTokenError("HUME_API_KEY and HUME_SECRET_KEY must both be set")

        url = f"{self.base_url}{self.TOKEN_PATH}"
        logger.info(f"Requesting voice access token from {url}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    url,
                    data={'grant_type': 'client_credentials'},
                    auth=(self.api_key, self.secret_key),
                    headers={'Content-Type': 'application/x-www-form-urlencoded'},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Token request rejected: status={e.response.status_code} body={e.response.text}")
            raise VoiceTokenError(f"Token request failed with status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"Token request failed: {e}")
            raise VoiceTokenError(f"Token request failed: {e}") from e
        except ValueError as e:
            logger.error(f"Token response is not JSON: {e}")
            raise VoiceTokenError("Token response is not valid JSON") from e

        access_token = data.get('access_token') if isinstance(data, dict) else None
        if not access_token or access_token == "undefined":
            logger.error("Token response did not include an access_token")
            raise VoiceTokenError("Token response did not include an access token")

        logger.info("Voice access token issued")
        return access_token

    def fetch_access_token_sync(self) -> str:
        """Synchronous version of fetch_access_token."""
        return asyncio.run(self.fetch_access_token())
