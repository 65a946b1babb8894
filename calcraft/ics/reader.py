"""Reading uploaded ICS documents into text."""

import asyncio
import codecs
import logging
from pathlib import Path
from typing import Union

from .exceptions import ICSContentTooLargeError

logger = logging.getLogger(__name__)

# Size validation constants
MAX_ICS_SIZE_BYTES = 50 * 1024 * 1024  # 50MB limit
MAX_ICS_SIZE_WARNING = 10 * 1024 * 1024  # 10MB warning threshold


def decode_ics_bytes(data: bytes) -> str:
    """Decode uploaded ICS bytes as UTF-8, replacing invalid sequences.

    Raises:
        ICSContentTooLargeError: If content exceeds MAX_ICS_SIZE_BYTES
    """
    size = len(data)
    if size > MAX_ICS_SIZE_BYTES:
        raise ICSContentTooLargeError(
            f"ICS content too large: {size} bytes exceeds {MAX_ICS_SIZE_BYTES} limit",
            details={"size": size},
        )
    if size > MAX_ICS_SIZE_WARNING:
        logger.warning(f"Large ICS content detected: {size} bytes (threshold: {MAX_ICS_SIZE_WARNING})")

    if data.startswith(codecs.BOM_UTF8):
        data = data[len(codecs.BOM_UTF8) :]
    return data.decode("utf-8", errors="replace")


async def read_ics_file(path: Union[str, Path]) -> str:
    """Read an uploaded ICS file without blocking the event loop.

    Args:
        path: Path to the uploaded document

    Returns:
        Decoded document text
    """
    file_path = Path(path)
    data = await asyncio.to_thread(file_path.read_bytes)
    logger.debug("Read %d bytes from %s", len(data), file_path)
    return decode_ics_bytes(data)
