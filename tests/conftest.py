"""Shared fixtures and payload builders for jcap tests."""

from __future__ import annotations

import io
import zipfile
from pathlib import Path

import pytest
from click.testing import CliRunner

PACKAGE_AID = bytes.fromhex("A000000062")
APPLET_AID = bytes.fromhex("A00000006203010C01")


def component(tag: int, body: bytes, size: int | None = None) -> bytes:
    """Wrap *body* in a tag(1) size(2) prefix; *size* overrides the real length."""
    if size is None:
        size = len(body)
    return bytes([tag]) + size.to_bytes(2, "big") + body


def header_payload(
    *,
    magic: int = 0xDECAFFED,
    version: tuple[int, int] = (1, 2),
    flags: int = 0x00,
    package_version: tuple[int, int] = (1, 0),
    aid: bytes = PACKAGE_AID,
    name: bytes | None = None,
) -> bytes:
    """Build a Header component.  Versions are (minor, major)."""
    body = bytearray(magic.to_bytes(4, "big"))
    body.extend(version)
    body.append(flags)
    body.extend(package_version)
    body.append(len(aid))
    body.extend(aid)
    if name is not None:
        body.append(len(name))
        body.extend(name)
    return component(0x01, bytes(body))


def directory_payload(
    *,
    sizes: list[int] | None = None,
    static_field: tuple[int, int, int] = (0, 0, 0),
    import_count: int = 1,
    applet_count: int = 1,
    custom: list[tuple[int, bytes]] | None = None,
) -> bytes:
    """Build a Directory component; *custom* is a list of (tag, aid)."""
    sizes = sizes if sizes is not None else [0] * 11
    custom = custom or []
    body = bytearray()
    for value in sizes:
        body.extend(value.to_bytes(2, "big"))
    for value in static_field:
        body.extend(value.to_bytes(2, "big"))
    body.append(import_count)
    body.append(applet_count)
    body.append(len(custom))
    for tag, aid in custom:
        body.append(tag)
        body.extend((1 + len(aid)).to_bytes(2, "big"))
        body.append(len(aid))
        body.extend(aid)
    return component(0x02, bytes(body))


def applet_payload(entries: list[tuple[bytes, int]]) -> bytes:
    """Build an Applet component from (aid, install_method_offset) pairs."""
    body = bytearray([len(entries)])
    for aid, offset in entries:
        body.append(len(aid))
        body.extend(aid)
        body.extend(offset.to_bytes(2, "big"))
    return component(0x03, bytes(body))


def make_cap(entries: list[tuple[str, bytes]]) -> bytes:
    """Build an in-memory ZIP container from (entry name, payload) pairs."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, payload in entries:
            zf.writestr(name, payload)
    return buf.getvalue()


def standard_entries(prefix: str = "com/example/hello/javacard/") -> list[tuple[str, bytes]]:
    """Entries of a small but complete CAP file."""
    return [
        (f"{prefix}Header.cap", header_payload(flags=0x04)),
        (f"{prefix}Directory.cap", directory_payload(sizes=list(range(1, 12)))),
        (f"{prefix}Applet.cap", applet_payload([(APPLET_AID, 0x0010)])),
        (f"{prefix}Import.cap", component(0x04, bytes.fromhex("01000107A0000000620101"))),
        (f"{prefix}Method.cap", component(0x07, b"\x00\x01\x02")),
        (f"{prefix}RefLocation.cap", component(0x09, b"\x00\x00\x00\x00")),
    ]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def cap_path(tmp_path: Path) -> Path:
    """A complete CAP file on disk."""
    path = tmp_path / "hello.cap"
    path.write_bytes(make_cap(standard_entries()))
    return path


def patch_zip_headers(data: bytes, *, flags: int = 0, method: int | None = None) -> bytes:
    """OR *flags* into, and optionally replace the compression method of, every
    local and central directory header of a ZIP built by make_cap()."""
    buf = bytearray(data)
    # (signature, offset of general purpose flags; method follows it)
    for signature, flag_at in ((b"PK\x03\x04", 6), (b"PK\x01\x02", 8)):
        pos = buf.find(signature)
        while pos != -1:
            at = pos + flag_at
            value = int.from_bytes(buf[at : at + 2], "little") | flags
            buf[at : at + 2] = value.to_bytes(2, "little")
            if method is not None:
                buf[at + 2 : at + 4] = method.to_bytes(2, "little")
            pos = buf.find(signature, pos + 4)
    return bytes(buf)
