"""
Ingestion of user-selected photos.

Turns a selected image file into an EncodedImage (MIME type + base64 payload)
ready to be placed in a generation request. The file is read off the event
loop; no resizing or dimension checks are applied.
"""

import asyncio
import base64
import binascii
import mimetypes
import re
from dataclasses import dataclass
from pathlib import Path

from hugging.logging_config import get_logger
from hugging.utils.exceptions import EncodingError

logger = get_logger(__name__)

# Header of a data URL, e.g. "data:image/png;base64" -> "image/png"
_HEADER_MIME_RE = re.compile(r":(.*?);")


def sniff_media_type(data: bytes) -> str | None:
    """Infer an image MIME type from magic bytes. Returns None when unknown."""
    if data[:8] == b"\x89PNG\r\n\x1a\n":
        return "image/png"
    if data[:3] == b"\xff\xd8\xff":
        return "image/jpeg"
    if data[:6] in (b"GIF87a", b"GIF89a"):
        return "image/gif"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if data[4:12] in (b"ftypheic", b"ftypheix", b"ftypmif1"):
        return "image/heic"
    return None


def to_data_url(media_type: str, data: bytes) -> str:
    """Build a base64 data URL (data:<mime>;base64,<payload>) from raw bytes."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{media_type};base64,{encoded}"


@dataclass(frozen=True)
class EncodedImage:
    """An image ready for transmission: MIME type plus base64 payload."""

    media_type: str
    payload: str

    def __post_init__(self) -> None:
        if not self.media_type:
            raise EncodingError("Could not determine MIME type")
        if not self.payload:
            raise EncodingError("Invalid file format")

    @property
    def data_url(self) -> str:
        """The image as a data URL, suitable for chat-style APIs and <img> tags."""
        return f"data:{self.media_type};base64,{self.payload}"

    def decode(self) -> bytes:
        """Return the raw image bytes."""
        try:
            return base64.b64decode(self.payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise EncodingError(f"Invalid base64 payload: {e}") from e


def parse_data_url(data_url: str) -> EncodedImage:
    """
    Split a data URL into an EncodedImage.

    The string is split at the first comma into header and payload; the MIME
    type is taken from the ":<mime>;" part of the header.

    Raises:
        EncodingError: If there is no header/payload split or no MIME type
    """
    header, _, payload = data_url.partition(",")
    if not header or not payload:
        raise EncodingError("Invalid file format")
    match = _HEADER_MIME_RE.search(header)
    if not match or not match.group(1):
        raise EncodingError("Could not determine MIME type")
    return EncodedImage(media_type=match.group(1), payload=payload)


@dataclass(frozen=True)
class RawImage:
    """
    A photo as handed over by file selection.

    source is a filesystem path or the file's bytes; media_type and name are
    the metadata reported alongside it (either may be empty).
    """

    source: str | Path | bytes
    media_type: str = ""
    name: str = ""

    @classmethod
    def from_path(cls, path: str | Path, media_type: str | None = None) -> "RawImage":
        """Describe a file on disk, guessing its MIME type from the file name."""
        p = Path(path)
        if media_type is None:
            guessed, _ = mimetypes.guess_type(p.name)
            media_type = guessed if guessed and guessed.startswith("image/") else ""
        return cls(source=p, media_type=media_type, name=p.name)

    @property
    def size(self) -> int:
        """Size of the file in bytes."""
        if isinstance(self.source, bytes):
            return len(self.source)
        return Path(self.source).stat().st_size

    @property
    def preview(self) -> str:
        """Something a browser can display: the file path, or a data URL for in-memory bytes."""
        if isinstance(self.source, bytes):
            return to_data_url(self.media_type or "application/octet-stream", self.source)
        return str(self.source)

    def read_bytes(self) -> bytes:
        """Read the full content of the file (blocking)."""
        if isinstance(self.source, bytes):
            return self.source
        return Path(self.source).read_bytes()


async def encode(raw: RawImage) -> EncodedImage:
    """
    Read a selected photo and encode it for transmission.

    Args:
        raw: The selected file and its metadata

    Returns:
        EncodedImage with the file's MIME type and base64 payload

    Raises:
        EncodingError: If the file cannot be read, is empty, or its MIME type
            cannot be determined
    """
    label = raw.name or (str(raw.source) if not isinstance(raw.source, bytes) else "<bytes>")
    try:
        data = await asyncio.to_thread(raw.read_bytes)
    except OSError as e:
        raise EncodingError(f"Failed to read image: {e}", source=label) from e

    media_type = raw.media_type or sniff_media_type(data) or ""
    try:
        encoded = parse_data_url(to_data_url(media_type, data))
    except EncodingError as e:
        e.source = label
        raise
    logger.debug("Encoded image %s media_type=%s bytes=%d", label, encoded.media_type, len(data))
    return encoded
