from __future__ import annotations

import logging

from jcap.core.cap.errors import CapDecodeError, ErrorKind
from jcap.core.cap.model import CustomComponent, Directory
from jcap.core.cap.reader import Reader, declared_size, open_component
from jcap.core.cap.tags import (
    CUSTOM_COUNT_MAX,
    CUSTOM_TAG_MIN,
    DIRECTORY_SIZE_SLOTS,
    Component,
)
from jcap.core.logging import TRACE

lg = logging.getLogger(__name__)


def decode_directory(payload: bytes) -> Directory:
    """Decode a Directory component.

    directory_component: tag(1) size(2) component_sizes(2 * 11)
        static_field_size_info: image_size(2) array_init_count(2) array_init_size(2)
        import_count(1) applet_count(1) custom_count(1)
        custom_component_info[custom_count]:
            component_tag(1) size(2) aid_length(1) aid(n)
    """
    reader, size = open_component(payload, Component.DIRECTORY)
    with declared_size(reader, size):
        component_sizes = tuple(reader.read_u16() for _ in range(DIRECTORY_SIZE_SLOTS))

        image_size = reader.read_u16()
        array_init_count = reader.read_u16()
        array_init_size = reader.read_u16()

        import_count = reader.read_u8()
        applet_count = reader.read_u8()

        custom_count = reader.read_u8()
        if custom_count > CUSTOM_COUNT_MAX:
            raise CapDecodeError(
                Component.DIRECTORY,
                ErrorKind.INVALID_COMPONENT_TAG,
                f"custom component count {custom_count}",
            )
        custom = tuple(_read_custom_component(reader) for _ in range(custom_count))

    directory = Directory(
        component_sizes=component_sizes,
        static_field_image_size=image_size,
        array_init_count=array_init_count,
        array_init_size=array_init_size,
        import_count=import_count,
        applet_count=applet_count,
        custom_components=custom,
    )
    lg.log(
        TRACE,
        "directory: %d imports, %d applets, %d custom components",
        import_count, applet_count, len(custom),
    )
    return directory


def _read_custom_component(reader: Reader) -> CustomComponent:
    tag = reader.read_u8()
    if tag < CUSTOM_TAG_MIN:
        raise CapDecodeError(
            Component.DIRECTORY, ErrorKind.INVALID_COMPONENT_TAG, f"tag 0x{tag:02X}"
        )

    size = reader.read_u16()
    if size > reader.remaining():
        raise CapDecodeError(
            Component.DIRECTORY,
            ErrorKind.TRUNCATED_COMPONENT,
            f"tag 0x{tag:02X} declares {size} bytes, have {reader.remaining()}",
        )

    aid = reader.read_aid(
        ErrorKind.INVALID_CUSTOM_AID_LENGTH, ErrorKind.TRUNCATED_COMPONENT
    )
    return CustomComponent(tag=tag, aid=aid)
