"""CAP/IJC load file handling."""

from __future__ import annotations

import logging
import zipfile
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from cryptography.hazmat.primitives import hashes

from jcap.core.cap.applet import decode_applet
from jcap.core.cap.errors import CONTAINER_ERRORS, ContainerFormatError
from jcap.core.cap.header import decode_header
from jcap.core.cap.tags import Component

lg = logging.getLogger(__name__)

# JCVM 2.2 section 6.2: component order inside a load file.
LOAD_ORDER = [
    Component.HEADER,
    Component.DIRECTORY,
    Component.IMPORT,
    Component.APPLET,
    Component.CLASS,
    Component.METHOD,
    Component.STATIC_FIELD,
    Component.EXPORT,
    Component.CONSTANT_POOL,
    Component.REFERENCE_LOCATION,
    Component.DESCRIPTOR,
]

LOAD_FILE_DATA_BLOCK = 0xC4

_HASHES: dict[str, type[hashes.HashAlgorithm]] = {
    "sha1": hashes.SHA1,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
}


@dataclass
class LoadFileInfo:
    """Metadata and data extracted from a CAP or IJC file."""

    data: bytes
    package_aid: bytes = b""
    applet_aids: list[bytes] = field(default_factory=list)

    def data_block_hash(self, algorithm: str = "sha1") -> bytes:
        """Load File Data Block Hash for INSTALL [for load]."""
        try:
            algo = _HASHES[algorithm]
        except KeyError:
            known = ", ".join(_HASHES)
            raise ValueError(f"unknown hash {algorithm!r} (known: {known})") from None
        digest = hashes.Hash(algo())
        digest.update(self.data)
        return digest.finalize()

    def blocks(self, block_size: int) -> list[bytes]:
        """Split the C4-wrapped load file data into LOAD command payloads."""
        if block_size < 1:
            raise ValueError(f"block size must be positive, got {block_size}")
        block = bytes([LOAD_FILE_DATA_BLOCK]) + _ber_length(len(self.data)) + self.data
        return [block[i : i + block_size] for i in range(0, len(block), block_size)]


def read_load_file(path: str | Path) -> LoadFileInfo:
    """Read a CAP or IJC file and return load file data plus metadata.

    CAP files are ZIP archives; components are extracted and concatenated
    in load order.  IJC files are raw binary data already in load-file
    format.
    """
    p = Path(path)
    if p.suffix.lower() == ".ijc":
        data = p.read_bytes()
    else:
        data = _read_cap(p)
    package_aid, applet_aids = _parse_metadata(data)
    return LoadFileInfo(data=data, package_aid=package_aid, applet_aids=applet_aids)


def iter_components(data: bytes) -> Iterator[tuple[int, bytes]]:
    """Walk concatenated components, yielding ``(tag, component bytes)``.

    Each yielded slice includes its own tag and size prefix.  A trailing
    fragment shorter than its declared size is yielded as-is.
    """
    offset = 0
    while offset + 3 <= len(data):
        tag = data[offset]
        size = int.from_bytes(data[offset + 1 : offset + 3], "big")
        yield tag, data[offset : offset + 3 + size]
        offset += 3 + size


def _read_cap(path: Path) -> bytes:
    try:
        with zipfile.ZipFile(path, "r") as zf:
            # Map component to zip entry.
            entries: dict[Component, str] = {}
            for info in zf.infolist():
                if info.is_dir():
                    continue
                kind = Component.from_entry_name(info.filename)
                if kind is not None:
                    entries[kind] = info.filename
            if not entries:
                raise ContainerFormatError(f"no CAP components found in {path}")

            # Concatenate in load order.
            buf = bytearray()
            for kind in LOAD_ORDER:
                if kind in entries:
                    buf.extend(zf.read(entries[kind]))
    except CONTAINER_ERRORS as exc:
        raise ContainerFormatError(f"unrecognized CAP container {path}: {exc}") from exc

    lg.debug("%s: %d bytes of load file data", path, len(buf))
    return bytes(buf)


def _parse_metadata(data: bytes) -> tuple[bytes, list[bytes]]:
    """Extract package AID and applet AIDs from concatenated component data."""
    package_aid = b""
    applet_aids: list[bytes] = []

    for tag, component in iter_components(data):
        if tag == Component.HEADER:
            package_aid = bytes.fromhex(decode_header(component).package_aid)
        elif tag == Component.APPLET:
            applet = decode_applet(component)
            applet_aids = [bytes.fromhex(entry.aid) for entry in applet.entries]

    return package_aid, applet_aids


def _ber_length(length: int) -> bytes:
    if length < 0x80:
        return bytes([length])
    if length <= 0xFF:
        return bytes([0x81, length])
    if length <= 0xFFFF:
        return b"\x82" + length.to_bytes(2, "big")
    return b"\x83" + length.to_bytes(3, "big")
