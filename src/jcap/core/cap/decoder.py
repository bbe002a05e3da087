"""CAP container decoding."""

from __future__ import annotations

import io
import logging
import zipfile
from collections.abc import Callable
from pathlib import Path
from typing import BinaryIO

from jcap.core.cap.applet import decode_applet
from jcap.core.cap.directory import decode_directory
from jcap.core.cap.errors import (
    CONTAINER_ERRORS,
    CapDecodeError,
    ContainerFormatError,
    ErrorKind,
)
from jcap.core.cap.header import decode_header
from jcap.core.cap.model import CapFile
from jcap.core.cap.tags import Component
from jcap.core.logging import TRACE, hexdump

lg = logging.getLogger(__name__)

# Components with a decoder.  Every other Component is recognized and skipped.
DECODERS: dict[Component, Callable[[bytes], object]] = {
    Component.HEADER: decode_header,
    Component.DIRECTORY: decode_directory,
    Component.APPLET: decode_applet,
}

def decode(source: bytes | bytearray | memoryview | BinaryIO) -> CapFile:
    """Decode a CAP container from bytes or a binary file object.

    A file object passed in stays open; closing it is up to the caller.
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        stream: BinaryIO = io.BytesIO(bytes(source))
    elif not source.seekable():
        # zipfile needs random access to reach the central directory.
        try:
            stream = io.BytesIO(source.read())
        except CONTAINER_ERRORS as exc:
            raise ContainerFormatError(f"cannot read CAP container: {exc}") from exc
    else:
        stream = source

    decoded: dict[Component, object] = {}
    skipped: list[Component] = []
    try:
        with zipfile.ZipFile(stream) as zf:
            for info in zf.infolist():
                if info.is_dir():
                    continue
                kind = Component.from_entry_name(info.filename)
                if kind is None:
                    lg.debug("ignoring entry %s", info.filename)
                    continue
                payload = zf.read(info)
                _route(kind, info.filename, payload, decoded, skipped)
    except CONTAINER_ERRORS as exc:
        raise ContainerFormatError(f"unrecognized CAP container: {exc}") from exc

    return CapFile(
        header=decoded.get(Component.HEADER),
        directory=decoded.get(Component.DIRECTORY),
        applet=decoded.get(Component.APPLET),
        skipped=tuple(skipped),
    )


def decode_file(path: str | Path) -> CapFile:
    """Decode the CAP container at *path*."""
    with open(path, "rb") as f:
        return decode(f)


def _route(
    kind: Component,
    name: str,
    payload: bytes,
    decoded: dict[Component, object],
    skipped: list[Component],
) -> None:
    decoder = DECODERS.get(kind)
    if decoder is None:
        lg.debug("skipping %s (%d bytes, no decoder)", name, len(payload))
        if kind not in skipped:
            skipped.append(kind)
        return

    lg.log(TRACE, "decoding %s (%d bytes)", name, len(payload))
    if lg.isEnabledFor(TRACE):
        for line in hexdump(payload[:64]):
            lg.log(TRACE, "  %s", line)
    if not payload:
        raise CapDecodeError(kind, ErrorKind.TRUNCATED, "empty entry")
    if kind in decoded:
        lg.debug("%s appears more than once, keeping the last", kind.file_name)
    decoded[kind] = decoder(payload)
