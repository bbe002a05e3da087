from __future__ import annotations

import logging

TRACE = 15
PROTOCOL = 18
logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(PROTOCOL, "PROTOCOL")


def hexdump(data: bytes, width: int = 16) -> list[str]:
    """Split *data* into uppercase, space-separated hex lines of *width* bytes."""
    return [data[i : i + width].hex(" ").upper() for i in range(0, len(data), width)]
