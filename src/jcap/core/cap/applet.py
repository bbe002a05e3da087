from __future__ import annotations

import logging

from jcap.core.cap.errors import CapDecodeError, ErrorKind
from jcap.core.cap.model import Applet, AppletEntry
from jcap.core.cap.reader import declared_size, open_component
from jcap.core.cap.tags import Component
from jcap.core.logging import TRACE

lg = logging.getLogger(__name__)


def decode_applet(payload: bytes) -> Applet:
    """Decode an Applet component.

    applet_component: tag(1) size(2) count(1)
        applets[count]: aid_length(1) aid(n) install_method_offset(2)
    """
    reader, size = open_component(payload, Component.APPLET)
    with declared_size(reader, size):
        count = reader.read_u8()
        if count < 1:
            raise CapDecodeError(Component.APPLET, ErrorKind.INVALID_APPLET_COUNT, "0")

        entries = []
        for _ in range(count):
            aid = reader.read_aid(ErrorKind.INVALID_AID_LENGTH, ErrorKind.INVALID_AID)
            offset = reader.read_u16()
            entries.append(AppletEntry(aid=aid, install_method_offset=offset))
            lg.log(TRACE, "applet %s install method at %04X", aid.upper(), offset)

    return Applet(entries=tuple(entries))
