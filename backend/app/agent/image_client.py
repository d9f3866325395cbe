import json
import logging
import re
import uuid
from collections.abc import Callable, Mapping
from typing import Any

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_SIZE = "1024x1024"
RESPONSE_DATA_PREFIX = "Response data:"
_SIZE_RE = re.compile(r"^\s*(\d+)\s*x\s*(\d+)\s*$", re.IGNORECASE)

UrlExtractor = Callable[[Mapping[str, Any]], list[str]]


class ImageGenerationError(RuntimeError):
    """The image provider could not be reached or rejected the request."""


def parse_size(size: str) -> tuple[int, int]:
    match = _SIZE_RE.match(size or "")
    if not match:
        raise ValueError(f"Image size must look like '1024x1024', got {size!r}")
    return int(match.group(1)), int(match.group(2))


def _urls_from_objects(items: Any, field: str) -> list[str]:
    if not isinstance(items, list):
        return []
    return [
        item[field]
        for item in items
        if isinstance(item, dict) and isinstance(item.get(field), str) and item[field]
    ]


def urls_from_images(payload: Mapping[str, Any]) -> list[str]:
    """Direct result objects: {"images": [{"url": ...}]}."""
    return _urls_from_objects(payload.get("images"), "url")


def urls_from_data(payload: Mapping[str, Any]) -> list[str]:
    """Native task results: {"data": [{"imageURL": ...}]}."""
    return _urls_from_objects(payload.get("data"), "imageURL")


def urls_from_warnings(payload: Mapping[str, Any]) -> list[str]:
    """Diagnostic entries whose message embeds 'Response data: [<json>]'."""
    warnings = payload.get("warnings")
    if not isinstance(warnings, list):
        return []

    urls: list[str] = []
    for warning in warnings:
        message = warning.get("message") if isinstance(warning, dict) else None
        if not isinstance(message, str) or RESPONSE_DATA_PREFIX not in message:
            continue
        embedded = message.split(RESPONSE_DATA_PREFIX, 1)[1].strip()
        try:
            response_data = json.loads(embedded)
        except (json.JSONDecodeError, ValueError):
            logger.warning("Skipping image provider warning with unparsable response data")
            continue
        urls.extend(_urls_from_objects(response_data, "imageURL"))
    return urls


# Direct shapes first, diagnostics last.
URL_EXTRACTORS: tuple[UrlExtractor, ...] = (
    urls_from_images,
    urls_from_data,
    urls_from_warnings,
)


def extract_image_urls(payload: Any) -> list[str]:
    if isinstance(payload, list):
        payload = {"data": payload}
    if not isinstance(payload, Mapping):
        return []
    urls: list[str] = []
    for extractor in URL_EXTRACTORS:
        urls.extend(extractor(payload))
    return urls


class ImageGenerationClient:
    """Async client for the image-generation provider's task API."""

    def __init__(
        self,
        *,
        api_url: str | None = None,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url or settings.IMAGE_API_URL
        self.api_key = api_key or settings.IMAGE_API_KEY
        self.model = model or settings.IMAGE_MODEL
        self.timeout = timeout or settings.IMAGE_API_TIMEOUT_SECONDS
        self._transport = transport

    def build_task(
        self,
        prompt: str,
        count: int,
        size: str,
        *,
        steps: int,
        cfg_scale: float,
        scheduler: str,
    ) -> dict[str, Any]:
        width, height = parse_size(size)
        return {
            "taskType": "imageInference",
            "taskUUID": str(uuid.uuid4()),
            "positivePrompt": prompt,
            "width": width,
            "height": height,
            "model": self.model,
            "numberResults": count,
            "steps": steps,
            "CFGScale": cfg_scale,
            "scheduler": scheduler,
            "outputType": "URL",
        }

    async def generate(
        self,
        prompt: str,
        count: int,
        size: str = DEFAULT_IMAGE_SIZE,
        *,
        steps: int = 30,
        cfg_scale: float = 7.5,
        scheduler: str = "DPM++ 2M",
    ) -> list[str]:
        """Generate `count` images for `prompt` and return their URLs in provider order."""
        if count < 1:
            raise ValueError("count must be a positive integer")
        if not self.api_key:
            raise ImageGenerationError("IMAGE_API_KEY is not configured")

        task = self.build_task(prompt, count, size, steps=steps, cfg_scale=cfg_scale, scheduler=scheduler)
        logger.info("Requesting %s image(s) from %s (model=%s)", count, self.api_url, self.model)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.api_url,
                    json=[task],
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ImageGenerationError(
                f"Image provider returned {exc.response.status_code}: {exc.response.text[:500]}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ImageGenerationError(f"Failed to contact the image provider: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise ImageGenerationError("Image provider returned a non-JSON response") from exc

        urls = extract_image_urls(payload)
        if not urls and isinstance(payload, Mapping) and payload.get("errors"):
            raise ImageGenerationError(f"Image provider reported errors: {payload['errors']}")

        logger.info("Extracted %s image URL(s) from provider response", len(urls))
        return urls
