"""Java Card CAP component tags (JCVM spec, section 6.1)."""

from __future__ import annotations

from enum import IntEnum
from pathlib import PurePosixPath


class Component(IntEnum):
    """CAP component kind; the value is the component's tag byte."""

    HEADER = 1
    DIRECTORY = 2
    APPLET = 3
    IMPORT = 4
    CONSTANT_POOL = 5
    CLASS = 6
    METHOD = 7
    STATIC_FIELD = 8
    REFERENCE_LOCATION = 9
    EXPORT = 10
    DESCRIPTOR = 11
    DEBUG = 12

    @property
    def file_name(self) -> str:
        """Base name of this component's entry inside a CAP container."""
        return _FILE_NAMES[self]

    @classmethod
    def from_entry_name(cls, path: str) -> Component | None:
        """Map a container entry path to a component kind.

        Only the final path segment matters; a trailing ``.cap`` extension is
        ignored.  Returns None for names that are not CAP components.
        """
        name = PurePosixPath(path).name
        if name.lower().endswith(".cap"):
            name = name[:-4]
        return _BY_NAME.get(name)


_FILE_NAMES: dict[Component, str] = {
    Component.HEADER: "Header",
    Component.DIRECTORY: "Directory",
    Component.APPLET: "Applet",
    Component.IMPORT: "Import",
    Component.CONSTANT_POOL: "ConstantPool",
    Component.CLASS: "Class",
    Component.METHOD: "Method",
    Component.STATIC_FIELD: "StaticField",
    Component.REFERENCE_LOCATION: "ReferenceLocation",
    Component.EXPORT: "Export",
    Component.DESCRIPTOR: "Descriptor",
    Component.DEBUG: "Debug",
}

_BY_NAME: dict[str, Component] = {name: kind for kind, name in _FILE_NAMES.items()}
# Name emitted by the Java Card converter.
_BY_NAME["RefLocation"] = Component.REFERENCE_LOCATION

HEADER_MAGIC = 0xDECAFFED

AID_MIN_LENGTH = 5
AID_MAX_LENGTH = 16

# Directory: number of component_sizes slots and custom component limits.
DIRECTORY_SIZE_SLOTS = 11
CUSTOM_TAG_MIN = 128
CUSTOM_COUNT_MAX = 127

# Header flags.
ACC_INT = 0x01
ACC_EXPORT = 0x02
ACC_APPLET = 0x04
