"""Output utilities for tool handlers.

Provides size formatting and parsing, content truncation, and file size
ceilings shared by the built-in tools.
"""

from __future__ import annotations

import logging
import os
import re

from ..errors import SizeLimitExceededError

logger = logging.getLogger(__name__)

MEGABYTE = 1024 * 1024

TRUNCATION_MARKER = "\n... (truncated)"

SIZE_UNITS = {
    "B": 1,
    "K": 1024,
    "KB": 1024,
    "M": 1024**2,
    "MB": 1024**2,
    "G": 1024**3,
    "GB": 1024**3,
    "T": 1024**4,
    "TB": 1024**4,
}

_SIZE_TOKEN = re.compile(r"^([\d.]+)\s*([BKMGT]B?)$")

_DISPLAY_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_file_size(num_bytes: int) -> str:
    """Format a byte count for humans (e.g., ``1536`` -> ``"1.5 KB"``)."""
    if num_bytes <= 0:
        return "0 B"
    value = float(num_bytes)
    unit = 0
    while value >= 1024 and unit < len(_DISPLAY_UNITS) - 1:
        value /= 1024
        unit += 1
    formatted = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{formatted} {_DISPLAY_UNITS[unit]}"


def parse_size_to_bytes(size: str | None) -> int:
    """Parse a human-readable size token such as ``"24K"`` or ``"4.0GB"``.

    Unparsable tokens yield 0.

    Args:
        size: Size token as printed by ``du -h``.

    Returns:
        The size in bytes.
    """
    if not size:
        return 0

    match = _SIZE_TOKEN.match(size.strip().upper())
    if not match:
        logger.warning("Failed to parse size: %r", size)
        return 0

    try:
        value = float(match.group(1))
    except ValueError:
        logger.warning("Failed to parse size: %r", size)
        return 0
    return int(value * SIZE_UNITS[match.group(2)])


def truncate_content(content: str, max_chars: int) -> tuple[str, bool]:
    """Cut content to ``max_chars`` characters and append the truncation marker.

    Returns:
        A tuple of (text, truncated).
    """
    if len(content) <= max_chars:
        return content, False
    return content[:max_chars] + TRUNCATION_MARKER, True


def check_file_size(file_path: str, max_size_mb: float) -> int:
    """Raise SizeLimitExceededError when a file is above the ceiling.

    Returns:
        The file size in bytes.
    """
    size = os.stat(file_path).st_size
    if size > max_size_mb * MEGABYTE:
        raise SizeLimitExceededError(
            f"File too large ({size / MEGABYTE:.2f}MB). Maximum: {max_size_mb:g}MB"
        )
    return size


def read_text(file_path: str) -> str:
    with open(file_path, encoding="utf-8", errors="replace") as f:
        return f.read()
