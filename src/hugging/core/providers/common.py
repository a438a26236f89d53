"""
HTTP plumbing shared by the built-in providers.

Posts a JSON payload, maps transport failures and HTTP status codes to the
GenerationError family, and turns returned image bytes into an EncodedImage.
"""

import io
import json
import time
from typing import Any

import requests
from PIL import Image

from hugging.core.encoder import EncodedImage, parse_data_url, sniff_media_type, to_data_url
from hugging.logging_config import get_logger
from hugging.utils.exceptions import APIError, EncodingError, NetworkError, RequestTimeoutError

logger = get_logger(__name__)

_DEBUG_TRUNCATE_THRESHOLD = 200
_DEBUG_NEVER_TRUNCATE_KEYS = frozenset({"text", "message", "raw"})
_DEBUG_MAX_TEXT = 2000


def truncate_image_data_for_log(obj: Any, parent_key: str | None = None) -> Any:
    """Recursively replace long base64/data URL strings with placeholders for safe logging."""
    if isinstance(obj, dict):
        return {k: truncate_image_data_for_log(v, k) for k, v in obj.items()}
    if isinstance(obj, list):
        return [truncate_image_data_for_log(v, None) for v in obj]
    if isinstance(obj, str) and len(obj) >= _DEBUG_TRUNCATE_THRESHOLD:
        if parent_key in _DEBUG_NEVER_TRUNCATE_KEYS:
            return obj
        if obj.startswith("data:"):
            return f"<data URL, {len(obj)} chars>"
        return f"<string, {len(obj)} chars>"
    return obj


def _log_response_body(response: requests.Response) -> None:
    content_type = response.headers.get("content-type", "")
    if content_type.startswith("image/"):
        logger.info(
            "API response (image data truncated): <image body, %s bytes>", len(response.content)
        )
        return
    try:
        body = response.json()
    except ValueError:
        text = response.text
        if len(text) > _DEBUG_MAX_TEXT:
            text = text[:_DEBUG_MAX_TEXT] + f"... <truncated, {len(response.text)} chars total>"
        logger.info("API response (raw text): %s", text)
        return
    logger.info(
        "API response (image data truncated): %s",
        json.dumps(truncate_image_data_for_log(body), indent=2, default=str),
    )


def raise_for_status(response: requests.Response, service: str, model: str) -> None:
    """Map a non-200 response to APIError with a readable message."""
    status = response.status_code
    if status == 200:
        return
    if status in (401, 403):
        raise APIError(
            f"Authentication failed. Please check your {service} API key.",
            status_code=status,
            response=response.text,
        )
    if status == 404:
        raise APIError(
            f"Model not found or endpoint unavailable: {model}",
            status_code=404,
            response=response.text,
        )
    if status == 429:
        raise APIError(
            "Rate limit exceeded. Please wait before making more requests.",
            status_code=429,
            response=response.text,
        )
    if status >= 500:
        raise APIError(
            f"{service} service error: {status}",
            status_code=status,
            response=response.text,
        )
    raise APIError(
        f"API request failed with status {status}: {response.text}",
        status_code=status,
        response=response.text,
    )


def post_json(
    url: str,
    headers: dict[str, str],
    payload: dict[str, Any],
    timeout: int,
    *,
    service: str,
    model: str,
    debug: bool = False,
) -> tuple[requests.Response, float]:
    """
    POST a JSON payload and return (response, elapsed seconds).

    Raises:
        RequestTimeoutError: If the request times out
        NetworkError: If the connection fails or requests raises otherwise
        APIError: If the service answers with a non-200 status
    """
    logger.debug("API request url=%s model=%s timeout=%s", url, model, timeout)
    if debug:
        logger.info(
            "API request payload (image data truncated): %s",
            json.dumps(truncate_image_data_for_log(payload), indent=2, default=str),
        )
    start_time = time.time()
    try:
        response = requests.post(url, headers=headers, json=payload, timeout=timeout)
    except requests.exceptions.Timeout as e:
        raise RequestTimeoutError(
            f"Request timed out after {timeout} seconds. "
            "The generation may be taking longer than expected."
        ) from e
    except requests.exceptions.ConnectionError as e:
        raise NetworkError(
            f"Failed to connect to {service}. Please check your internet connection.",
            original_error=e,
        ) from e
    except requests.exceptions.RequestException as e:
        raise NetworkError(f"Network error during API request: {str(e)}", original_error=e) from e
    elapsed = time.time() - start_time
    logger.debug(
        "API response status=%s content_type=%s time=%.2fs",
        response.status_code,
        response.headers.get("content-type", ""),
        elapsed,
    )
    if debug:
        _log_response_body(response)
    raise_for_status(response, service, model)
    return response, elapsed


def image_from_bytes(data: bytes, media_type: str | None = None) -> EncodedImage:
    """
    Check that data decodes as an image and wrap it as an EncodedImage.

    The MIME type is taken from media_type when given, else from the decoded
    format, else from magic bytes.

    Raises:
        APIError: If the bytes are empty or not a decodable image
    """
    if not data:
        raise APIError("Generated image is empty.")
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format
            img.verify()
    except Exception as e:
        raise APIError(f"Generated image could not be decoded: {str(e)}") from e
    mime = media_type or (Image.MIME.get(fmt) if fmt else None) or sniff_media_type(data)
    return parse_data_url(to_data_url(mime or "image/png", data))


def image_from_data_url(data_url: str) -> EncodedImage:
    """Validate an image delivered as a data URL. Raises APIError if it is malformed."""
    try:
        encoded = parse_data_url(data_url)
        data = encoded.decode()
    except EncodingError as e:
        raise APIError(f"Malformed image data URL in response: {str(e)}") from e
    return image_from_bytes(data, encoded.media_type)
