from __future__ import annotations

from dataclasses import dataclass

from jcap.core.cap.tags import ACC_APPLET, ACC_EXPORT, ACC_INT, Component


@dataclass(frozen=True)
class Header:
    """Decoded Header component."""

    version: int
    flags: int
    package_version: int
    package_aid: str
    package_name: str | None = None

    @property
    def major(self) -> int:
        return self.version >> 8

    @property
    def minor(self) -> int:
        return self.version & 0xFF

    @property
    def package_major(self) -> int:
        return self.package_version >> 8

    @property
    def package_minor(self) -> int:
        return self.package_version & 0xFF

    @property
    def acc_int(self) -> bool:
        """Package uses the int type."""
        return bool(self.flags & ACC_INT)

    @property
    def acc_export(self) -> bool:
        """CAP file carries an Export component."""
        return bool(self.flags & ACC_EXPORT)

    @property
    def acc_applet(self) -> bool:
        """CAP file carries an Applet component."""
        return bool(self.flags & ACC_APPLET)


@dataclass(frozen=True)
class CustomComponent:
    """Proprietary component listed in the Directory."""

    tag: int
    aid: str


@dataclass(frozen=True)
class Directory:
    """Decoded Directory component.

    ``component_sizes`` keeps the on-card order; the position of each value
    identifies the component it describes.
    """

    component_sizes: tuple[int, ...]
    static_field_image_size: int
    array_init_count: int
    array_init_size: int
    import_count: int
    applet_count: int
    custom_components: tuple[CustomComponent, ...] = ()


@dataclass(frozen=True)
class AppletEntry:
    aid: str
    install_method_offset: int


@dataclass(frozen=True)
class Applet:
    """Decoded Applet component."""

    entries: tuple[AppletEntry, ...]


@dataclass(frozen=True)
class CapFile:
    """Everything decoded from one CAP container.

    Components missing from the container are None.  ``skipped`` lists the
    component kinds that were present but have no decoder.
    """

    header: Header | None = None
    directory: Directory | None = None
    applet: Applet | None = None
    skipped: tuple[Component, ...] = ()
