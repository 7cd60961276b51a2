"""Program image loading."""

from __future__ import annotations

import logging
import struct
from pathlib import Path
from typing import List, Union

from .memory import ADDRESS_SPACE

LOGGER = logging.getLogger("synvm.loader")


def unpack_words(data: bytes) -> List[int]:
    """Unpack little-endian 16-bit code units; a trailing odd byte is ignored."""
    count = len(data) // 2
    if count > ADDRESS_SPACE:
        raise ValueError(f"program image too large: {count} words (max {ADDRESS_SPACE})")
    return list(struct.unpack_from(f"<{count}H", data))


def load_program(path: Union[str, Path], *, verbose: bool = False) -> List[int]:
    data = Path(path).read_bytes()
    words = unpack_words(data)
    if len(data) % 2:
        LOGGER.warning("%s has an odd length; ignoring trailing byte", path)
    if verbose:
        print(f"[IMG] {path}: {len(words)} words")
    LOGGER.debug("loaded %d words from %s", len(words), path)
    return words


__all__ = ["unpack_words", "load_program"]
