"""remove.bg background removal client."""

from dataclasses import dataclass

import httpx

from portrait_booth.domain.errors import BackgroundRemovalError
from portrait_booth.services.composition import BackgroundRemover

REMOVEBG_URL = "https://api.remove.bg/v1.0/removebg"


@dataclass
class HttpxRemoveBgClient(BackgroundRemover):
    """Background remover backed by the remove.bg REST API."""

    api_key: str
    http_client: httpx.AsyncClient
    url: str = REMOVEBG_URL
    timeout_seconds: float = 30.0

    @classmethod
    def create(
        cls, api_key: str, url: str = REMOVEBG_URL, timeout_seconds: float = 30.0
    ) -> "HttpxRemoveBgClient":
        """Create a client with a managed httpx session."""
        return cls(
            api_key=api_key,
            http_client=httpx.AsyncClient(),
            url=url,
            timeout_seconds=timeout_seconds,
        )

    async def remove_background(self, image_bytes: bytes, size: str = "auto") -> bytes:
        """Upload the portrait and return the transparent PNG bytes."""
        if not image_bytes:
            raise BackgroundRemovalError("Empty image bytes provided")
        try:
            response = await self.http_client.post(
                self.url,
                headers={"X-Api-Key": self.api_key},
                files={"image_file": ("capture.png", image_bytes, "image/png")},
                data={"size": size},
                timeout=self.timeout_seconds,
            )
        except httpx.HTTPError as exc:
            raise BackgroundRemovalError(f"Could not reach remove.bg: {exc}") from exc
        if response.status_code != httpx.codes.OK:
            raise BackgroundRemovalError(
                f"remove.bg error: HTTP {response.status_code} - {response.text[:300]}"
            )
        if not response.content:
            raise BackgroundRemovalError("remove.bg returned an empty image")
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
