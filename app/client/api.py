"""Async HTTP client for the Headshot Studio API."""

from typing import Any, Dict, Optional

import httpx

DEFAULT_BASE_URL = "http://localhost:3001/api"


class ApiError(Exception):
    """Non-2xx response from the API. ``message`` comes from the JSON body when present."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class HeadshotClient:
    """Thin wrapper over the REST surface.

    Usage:
        async with HeadshotClient() as client:
            upload = await client.upload_photo("me.jpg", data, "image/jpeg")
            job = await client.generate_headshot(upload["fileId"], "corporate")
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "HeadshotClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def upload_photo(self, filename: str, content: bytes, content_type: str) -> Dict[str, Any]:
        files = {"photo": (filename, content, content_type)}
        return self._json(await self._http.post("/upload", files=files))

    async def generate_headshot(self, file_id: str, style: str) -> Dict[str, Any]:
        return self._json(await self._http.post("/generate", json={"fileId": file_id, "style": style}))

    async def check_status(self, job_id: str) -> Dict[str, Any]:
        return self._json(await self._http.get(f"/status/{job_id}"))

    async def download_image(self, result_id: str) -> Dict[str, Any]:
        return self._json(await self._http.get(f"/download/{result_id}"))

    async def health_check(self) -> Dict[str, Any]:
        return self._json(await self._http.get("/health"))

    @staticmethod
    def _json(response: httpx.Response) -> Dict[str, Any]:
        if response.is_success:
            try:
                body = response.json()
            except ValueError:
                raise ApiError(response.status_code, "Invalid response body")
            if not isinstance(body, dict):
                raise ApiError(response.status_code, "Invalid response body")
            return body
        try:
            message = response.json().get("message") or response.reason_phrase
        except (ValueError, AttributeError):
            message = response.reason_phrase
        raise ApiError(response.status_code, message)
