from __future__ import annotations

import logging

from jcap.core.cap.errors import CapDecodeError, ErrorKind
from jcap.core.cap.model import Header
from jcap.core.cap.reader import declared_size, open_component
from jcap.core.cap.tags import HEADER_MAGIC, Component
from jcap.core.logging import TRACE

lg = logging.getLogger(__name__)


def decode_header(payload: bytes) -> Header:
    """Decode a Header component.

    header_component: tag(1) size(2) magic(4) minor(1) major(1) flags(1)
        package_info: minor(1) major(1) aid_length(1) aid(n)
        package_name_info (optional): name_length(1) name(n)
    """
    reader, size = open_component(payload, Component.HEADER)
    with declared_size(reader, size):
        magic = reader.read_u32()
        if magic != HEADER_MAGIC:
            raise CapDecodeError(
                Component.HEADER, ErrorKind.INVALID_MAGIC, f"got 0x{magic:08X}"
            )

        version = reader.read_version()
        flags = reader.read_u8()

        package_version = reader.read_version()
        package_aid = reader.read_aid(
            ErrorKind.INVALID_AID_LENGTH, ErrorKind.INVALID_PACKAGE_AID
        )

        package_name = None
        if reader.remaining() > 0:
            package_name = _read_package_name(reader)

    header = Header(
        version=version,
        flags=flags,
        package_version=package_version,
        package_aid=package_aid,
        package_name=package_name,
    )
    lg.log(
        TRACE,
        "header: version %d.%d flags %02X package %s v%d.%d",
        header.major, header.minor, flags,
        package_aid.upper(), header.package_major, header.package_minor,
    )
    return header


def _read_package_name(reader) -> str | None:
    length = reader.read_u8()
    if length == 0:
        return None
    if reader.remaining() < length:
        raise CapDecodeError(
            Component.HEADER,
            ErrorKind.INVALID_PACKAGE_NAME,
            f"need {length} bytes, have {reader.remaining()}",
        )
    raw = reader.read_bytes(length)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CapDecodeError(
            Component.HEADER, ErrorKind.INVALID_PACKAGE_NAME, "not UTF-8"
        ) from exc
