"""Tests for CAP container decoding."""

import io

import pytest

from conftest import (
    APPLET_AID,
    applet_payload,
    component,
    directory_payload,
    header_payload,
    make_cap,
    patch_zip_headers,
    standard_entries,
)
from jcap.core.cap import (
    CapDecodeError,
    CapFile,
    Component,
    ContainerFormatError,
    ErrorKind,
    decode,
    decode_file,
)


def test_decode_complete_cap():
    cap = decode(make_cap(standard_entries()))
    assert cap.header is not None
    assert cap.header.package_aid == "a000000062"
    assert cap.header.acc_applet
    assert cap.directory is not None
    assert cap.directory.component_sizes == tuple(range(1, 12))
    assert cap.applet is not None
    assert [e.aid for e in cap.applet.entries] == [APPLET_AID.hex()]
    assert cap.skipped == (Component.IMPORT, Component.METHOD, Component.REFERENCE_LOCATION)


def test_decode_file(cap_path):
    assert decode_file(cap_path) == decode(cap_path.read_bytes())


def test_decode_from_stream():
    data = make_cap(standard_entries())
    stream = io.BytesIO(data)
    cap = decode(stream)
    assert cap == decode(data)
    assert not stream.closed


class _Unseekable(io.RawIOBase):
    def __init__(self, data: bytes) -> None:
        self._inner = io.BytesIO(data)

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return False

    def readinto(self, b) -> int:
        chunk = self._inner.read(len(b))
        b[: len(chunk)] = chunk
        return len(chunk)


def test_decode_from_unseekable_stream():
    data = make_cap(standard_entries())
    assert decode(_Unseekable(data)) == decode(data)


def test_missing_header_is_absent():
    cap = decode(make_cap([("pkg/javacard/Applet.cap", applet_payload([(APPLET_AID, 1)]))]))
    assert cap.header is None
    assert cap.directory is None
    assert cap.applet is not None


def test_empty_container():
    assert decode(make_cap([])) == CapFile()


def test_bare_entry_names():
    cap = decode(make_cap([("Header", header_payload()), ("Debug", b"\x0c\x00\x00")]))
    assert cap.header is not None
    assert cap.skipped == (Component.DEBUG,)


def test_nested_paths_match_on_base_name():
    cap = decode(make_cap([("a/b/c/d/e/Header.cap", header_payload())]))
    assert cap.header is not None


def test_unknown_entries_are_ignored():
    cap = decode(
        make_cap(
            [
                ("META-INF/MANIFEST.MF", b"Manifest-Version: 1.0\n"),
                ("pkg/javacard/Header.cap", header_payload()),
                ("pkg/javacard/header.cap", b"\xff"),
                ("pkg/javacard/Applet.bin", b"\xff"),
            ]
        )
    )
    assert cap.header is not None
    assert cap.skipped == ()


def test_skipped_payloads_are_not_decoded():
    # Garbage in a component without a decoder is not an error.
    cap = decode(make_cap([("pkg/javacard/Class.cap", b"\xff\xff"), ("pkg/javacard/Export.cap", b"")]))
    assert cap.skipped == (Component.CLASS, Component.EXPORT)


def test_directory_entries_are_skipped():
    entries = [("pkg/", b""), ("pkg/javacard/", b"")] + standard_entries("pkg/javacard/")
    assert decode(make_cap(entries)) == decode(make_cap(standard_entries("pkg/javacard/")))


@pytest.mark.filterwarnings("ignore:Duplicate name")
def test_last_component_wins():
    first = header_payload(package_version=(1, 0))
    second = header_payload(package_version=(2, 1))
    cap = decode(make_cap([("pkg/Header.cap", first), ("pkg/Header.cap", second)]))
    assert cap.header.package_version == 0x0102


def test_component_error_propagates():
    bad = bytearray(header_payload())
    bad[3] = 0x00
    with pytest.raises(CapDecodeError) as exc_info:
        decode(make_cap([("pkg/javacard/Header.cap", bytes(bad))]))
    assert exc_info.value.component is Component.HEADER
    assert exc_info.value.kind is ErrorKind.INVALID_MAGIC


def test_directory_error_propagates():
    payload = directory_payload(custom=[(0x50, bytes.fromhex("A000000151"))])
    with pytest.raises(CapDecodeError) as exc_info:
        decode(make_cap([("pkg/javacard/Directory.cap", payload)]))
    assert exc_info.value.kind is ErrorKind.INVALID_COMPONENT_TAG


def test_empty_decoded_entry():
    with pytest.raises(CapDecodeError) as exc_info:
        decode(make_cap([("pkg/javacard/Applet.cap", b"")]))
    assert exc_info.value.component is Component.APPLET
    assert exc_info.value.kind is ErrorKind.TRUNCATED


def test_not_a_zip():
    with pytest.raises(ContainerFormatError):
        decode(b"this is not a zip file")


def test_corrupt_zip_entry():
    data = bytearray(make_cap([("pkg/javacard/Header.cap", component(0x01, bytes(200)))]))
    # Damage the deflate stream of the only entry.
    start = data.index(b"Header.cap") + len(b"Header.cap")
    for i in range(start, start + 8):
        data[i] ^= 0xFF
    with pytest.raises(ContainerFormatError):
        decode(bytes(data))


def test_encrypted_entry():
    data = patch_zip_headers(make_cap([("pkg/javacard/Header.cap", header_payload())]), flags=0x01)
    with pytest.raises(ContainerFormatError):
        decode(data)


def test_unsupported_compression_method():
    data = patch_zip_headers(make_cap([("pkg/javacard/Header.cap", header_payload())]), method=99)
    with pytest.raises(ContainerFormatError):
        decode(data)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        decode_file(tmp_path / "missing.cap")


def test_decoding_is_deterministic():
    data = make_cap(standard_entries())
    assert decode(data) == decode(data)
