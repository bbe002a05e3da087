"""CAP decoding errors."""

from __future__ import annotations

import zipfile
import zlib
from enum import Enum

from jcap.core.cap.tags import Component


class ErrorKind(Enum):
    """Structural rule a component payload violated.

    INVALID_PACKAGE_NAME_LENGTH and INVALID_INSTALL_OFFSET are reserved: the
    fields they guard are read unsigned, so every value is in range.
    """

    TRUNCATED = "truncated"
    INVALID_TAG = "invalid tag"
    INVALID_SIZE = "invalid size"
    INVALID_MAGIC = "invalid magic"
    INVALID_AID_LENGTH = "invalid AID length"
    INVALID_AID = "invalid AID"
    INVALID_PACKAGE_AID = "invalid package AID"
    INVALID_PACKAGE_NAME_LENGTH = "invalid package name length"
    INVALID_PACKAGE_NAME = "invalid package name"
    INVALID_COMPONENT_TAG = "invalid custom component tag"
    TRUNCATED_COMPONENT = "truncated custom component"
    INVALID_CUSTOM_AID_LENGTH = "invalid custom component AID length"
    INVALID_APPLET_COUNT = "invalid applet count"
    INVALID_INSTALL_OFFSET = "invalid install method offset"


class CapError(Exception):
    """Base class for everything that can go wrong decoding a CAP file."""


class CapDecodeError(CapError):
    """A component payload broke one of its structural rules."""

    def __init__(self, component: Component, kind: ErrorKind, detail: str = "") -> None:
        self.component = component
        self.kind = kind
        self.detail = detail
        message = f"{component.file_name}: {kind.value}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class ContainerFormatError(CapError):
    """The input is not a readable CAP container."""


# Packaging-layer failures, reported as ContainerFormatError.  zipfile raises
# RuntimeError for encrypted entries and NotImplementedError for unsupported
# compression methods.
CONTAINER_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    EOFError,
    OSError,
    NotImplementedError,
    RuntimeError,
)
