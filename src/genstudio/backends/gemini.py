"""Gemini / Veo backend over the Generative Language REST API.

Provides text generation, image description and long-running video
generation. Video jobs follow the long-running operation pattern:
- Submit: POST /models/{model}:predictLongRunning, returns an operation name
- Status: GET /{operation name}, "done" flips to true once finished
- Result: response.generateVideoResponse.generatedSamples[].video.uri
"""

import base64
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Literal

import httpx

from ..artifacts import inline_data_part
from ..config import Settings, settings as default_settings
from ..logging import get_logger
from .base import BackendError, OperationSnapshot

logger = get_logger(__name__)


class GeminiBackend:
    """Generation backend for Google's Gemini and Veo models."""

    def __init__(
        self,
        settings: Settings | None = None,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.api_key = api_key or self.settings.api_key
        if not self.api_key:
            raise ValueError("API configuration invalid. Missing GEMINI_API_KEY environment variable")
        self.base_url = self.settings.api_base_url.rstrip("/")
        self._client = client

    @asynccontextmanager
    async def _session(self, timeout: float) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=timeout) as client:
            yield client

    async def _make_request(
        self,
        url: str,
        method: Literal["GET", "POST"],
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated JSON request with standard error handling.

        Raises:
            BackendError: If the request fails or returns an error response
        """
        headers = {"x-goog-api-key": self.api_key}
        try:
            async with self._session(self.settings.request_timeout) as client:
                if method == "POST":
                    response = await client.post(
                        url,
                        json=json,
                        headers={**headers, "Content-Type": "application/json"},
                        timeout=self.settings.request_timeout,
                    )
                else:
                    response = await client.get(
                        url, headers=headers, timeout=self.settings.request_timeout
                    )
        except httpx.HTTPError as e:
            raise BackendError(f"Gemini API request failed: {e}") from e

        if response.status_code != 200:
            raise BackendError(
                f"Gemini API request failed: {response.status_code} {response.text}",
                status_code=response.status_code,
                status_text=response.reason_phrase,
            )

        result = response.json()
        if "error" in result and not result.get("done"):
            error = result["error"]
            raise BackendError(f"Gemini API error: {error.get('message', 'Unknown error')}")
        return result

    async def submit_video(
        self,
        model: str,
        prompt: str,
        image_bytes: bytes | None = None,
        mime_type: str | None = None,
        video_count: int = 1,
    ) -> str:
        instance: dict[str, Any] = {"prompt": prompt}
        if image_bytes is not None:
            instance["image"] = {
                "bytesBase64Encoded": base64.b64encode(image_bytes).decode("ascii"),
                "mimeType": mime_type or "image/png",
            }

        body = {"instances": [instance], "parameters": {"sampleCount": video_count}}
        result = await self._make_request(
            f"{self.base_url}/models/{model}:predictLongRunning", "POST", json=body
        )

        name = result.get("name")
        if not name:
            raise BackendError(f"No operation name returned from Gemini API. Response: {result}")

        logger.info("Video operation submitted", model=model, operation=name)
        return name

    async def check_video_status(self, handle: str) -> OperationSnapshot:
        result = await self._make_request(f"{self.base_url}/{handle}", "GET")
        snapshot = OperationSnapshot(name=result.get("name", handle), done=bool(result.get("done")))

        if snapshot.done:
            error = result.get("error")
            if error:
                snapshot.error = error.get("message", "Unknown error")
            snapshot.artifact_uri = _extract_video_uri(result.get("response") or {})

        return snapshot

    async def download(self, uri: str) -> bytes:
        url = _with_credential(uri, self.api_key)
        try:
            async with self._session(self.settings.download_timeout) as client:
                response = await client.get(
                    url, follow_redirects=True, timeout=self.settings.download_timeout
                )
        except httpx.HTTPError as e:
            raise BackendError(f"Download failed: {e}", status_text=str(e)) from e

        if not response.is_success:
            raise BackendError(
                f"Download failed: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                status_text=response.reason_phrase,
            )

        content = response.content
        logger.info("Downloaded artifact", size_bytes=len(content))
        return content

    async def generate_text(self, prompt: str) -> str:
        body = {"contents": [{"parts": [{"text": prompt}]}]}
        result = await self._generate_content(body)
        return _extract_text(result)

    async def describe_image(self, prompt: str, image_bytes: bytes, mime_type: str) -> str:
        body = {
            "contents": [
                {
                    "parts": [
                        {"text": prompt},
                        inline_data_part(image_bytes, mime_type),
                    ]
                }
            ]
        }
        result = await self._generate_content(body)
        return _extract_text(result)

    async def _generate_content(self, body: dict[str, Any]) -> dict[str, Any]:
        model = self.settings.text_model
        return await self._make_request(
            f"{self.base_url}/models/{model}:generateContent", "POST", json=body
        )


def _with_credential(uri: str, api_key: str) -> str:
    separator = "&" if "?" in uri else "?"
    return f"{uri}{separator}key={api_key}"


def _extract_video_uri(response: dict[str, Any]) -> str | None:
    """Pull the first video URI out of an operation response.

    The REST API nests samples under generateVideoResponse.generatedSamples;
    SDK-shaped payloads use generatedVideos instead.
    """
    container = response.get("generateVideoResponse", response)
    samples = container.get("generatedSamples") or container.get("generatedVideos") or []
    for sample in samples:
        uri = (sample.get("video") or {}).get("uri")
        if uri:
            return uri
    return None


def _extract_text(result: dict[str, Any]) -> str:
    candidates = result.get("candidates") or []
    if not candidates:
        raise BackendError(f"No candidates in Gemini response. Response: {result}")

    parts = (candidates[0].get("content") or {}).get("parts") or []
    text = "".join(part.get("text", "") for part in parts)
    if not text:
        raise BackendError("Gemini response contained no text")
    return text
