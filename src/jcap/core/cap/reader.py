"""Bounds-checked big-endian reader over a component payload."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from jcap.core.cap.errors import CapDecodeError, ErrorKind
from jcap.core.cap.tags import AID_MAX_LENGTH, AID_MIN_LENGTH, Component


@dataclass
class Reader:
    """Sequential reader over the bytes of one component.

    Every read either consumes exactly the requested bytes or raises a
    TRUNCATED error for ``component`` and leaves ``offset`` untouched.
    """

    data: bytes
    component: Component
    offset: int = 0

    def _require(self, count: int) -> None:
        if self.offset + count > len(self.data):
            raise CapDecodeError(
                self.component,
                ErrorKind.TRUNCATED,
                f"need {count} bytes at offset {self.offset}, have {self.remaining()}",
            )

    def remaining(self) -> int:
        return len(self.data) - self.offset

    def read_bytes(self, count: int) -> bytes:
        self._require(count)
        value = self.data[self.offset : self.offset + count]
        self.offset += count
        return value

    def read_u8(self) -> int:
        self._require(1)
        value = self.data[self.offset]
        self.offset += 1
        return value

    def read_u16(self) -> int:
        return int.from_bytes(self.read_bytes(2), "big")

    def read_u32(self) -> int:
        return int.from_bytes(self.read_bytes(4), "big")

    def read_version(self) -> int:
        """Read a minor/major byte pair as ``minor | major << 8``."""
        self._require(2)
        minor = self.read_u8()
        major = self.read_u8()
        return minor | (major << 8)

    def read_aid(self, length_error: ErrorKind, short_error: ErrorKind) -> str:
        """Read a length-prefixed AID and return it as lowercase hex."""
        length = self.read_u8()
        if not AID_MIN_LENGTH <= length <= AID_MAX_LENGTH:
            raise CapDecodeError(self.component, length_error, f"{length} bytes")
        if self.remaining() < length:
            raise CapDecodeError(
                self.component,
                short_error,
                f"need {length} bytes, have {self.remaining()}",
            )
        return self.read_bytes(length).hex()


def open_component(payload: bytes, component: Component) -> tuple[Reader, int]:
    """Check the tag of *payload* and return a reader past the tag and size.

    The returned size is the declared one; pass it to declared_size() around
    the body parse.
    """
    if not payload:
        raise ValueError(f"{component.file_name} payload is empty")
    reader = Reader(bytes(payload), component)
    tag = reader.read_u8()
    if tag != component:
        raise CapDecodeError(component, ErrorKind.INVALID_TAG, f"got 0x{tag:02X}")
    return reader, reader.read_u16()


@contextmanager
def declared_size(reader: Reader, size: int) -> Iterator[Reader]:
    """Validate a component's declared size against the bytes that follow it.

    Field rules raised inside the block win.  Running out of bytes while the
    declared size overshoots the payload is reported as INVALID_SIZE.
    """
    available = reader.remaining()

    def _invalid() -> CapDecodeError:
        return CapDecodeError(
            reader.component,
            ErrorKind.INVALID_SIZE,
            f"declared {size}, have {available}",
        )

    try:
        yield reader
    except CapDecodeError as exc:
        if exc.kind is ErrorKind.TRUNCATED and size > available:
            raise _invalid() from exc
        raise
    if size > available:
        raise _invalid()
