"""Human-readable CAP file formatting."""

from __future__ import annotations

from jcap.core.cap import CapFile, Component, Directory, Header, LoadFileInfo


def _hex(data: bytes) -> str:
    return data.hex(" ").upper() if data else ""


# --- Lookup tables ---

_AID_NAMES: dict[bytes, str] = {
    # Java Card platform packages (RID A000000062)
    bytes.fromhex("A0000000620001"): "java.lang",
    bytes.fromhex("A0000000620002"): "java.io",
    bytes.fromhex("A0000000620003"): "java.rmi",
    bytes.fromhex("A0000000620101"): "javacard.framework",
    bytes.fromhex("A000000062010101"): "javacard.framework.service",
    bytes.fromhex("A0000000620102"): "javacard.security",
    bytes.fromhex("A0000000620201"): "javacardx.crypto",
    bytes.fromhex("A0000000620202"): "javacardx.biometry",
    bytes.fromhex("A0000000620203"): "javacardx.external",
    bytes.fromhex("A0000000620204"): "javacardx.biometry1toN",
    bytes.fromhex("A0000000620205"): "javacardx.security",
    bytes.fromhex("A000000062020801"): "javacardx.framework.util",
    bytes.fromhex("A00000006202080101"): "javacardx.framework.util.intx",
    bytes.fromhex("A000000062020802"): "javacardx.framework.math",
    bytes.fromhex("A000000062020803"): "javacardx.framework.tlv",
    bytes.fromhex("A000000062020804"): "javacardx.framework.string",
    bytes.fromhex("A0000000620209"): "javacardx.apdu",
    bytes.fromhex("A000000062020901"): "javacardx.apdu.util",
    # GlobalPlatform (RID A000000151)
    bytes.fromhex("A00000015100"): "org.globalplatform",
    bytes.fromhex("A0000001510000"): "org.globalplatform",
}

_FLAGS: list[tuple[int, str]] = [
    (0x01, "ACC_INT"),
    (0x02, "ACC_EXPORT"),
    (0x04, "ACC_APPLET"),
]

# component_sizes slot i describes Component(i + 2); Header has no slot.
_SIZE_SLOTS = [Component(tag) for tag in range(Component.DIRECTORY, Component.DEBUG + 1)]


# --- Helpers ---

def _aid(aid: str | bytes) -> str:
    raw = bytes.fromhex(aid) if isinstance(aid, str) else aid
    name = _AID_NAMES.get(raw)
    return f"{_hex(raw)}  ({name})" if name else _hex(raw)


def _version(value: int) -> str:
    return f"{value >> 8}.{value & 0xFF}"


def _flags(flags: int) -> str:
    names = [label for mask, label in _FLAGS if flags & mask]
    return f"{flags:02X} ({', '.join(names)})" if names else f"{flags:02X}"


def _table(fields: list[tuple[str, str]]) -> str:
    w = max(len(label) for label, _ in fields)
    return "\n".join(f"  {label:<{w}}  {value}" for label, value in fields)


# --- Section formatters ---

def format_header(header: Header) -> str:
    fields = [
        ("CAP Version", _version(header.version)),
        ("Flags", _flags(header.flags)),
        ("Package AID", _aid(header.package_aid)),
        ("Package Version", _version(header.package_version)),
    ]
    if header.package_name is not None:
        fields.append(("Package Name", header.package_name))
    return _table(fields)


def format_directory(directory: Directory) -> str:
    fields = [
        (kind.file_name, str(size))
        for kind, size in zip(_SIZE_SLOTS, directory.component_sizes)
    ]
    fields += [
        ("Static Image Size", str(directory.static_field_image_size)),
        ("Array Init Count", str(directory.array_init_count)),
        ("Array Init Size", str(directory.array_init_size)),
        ("Import Count", str(directory.import_count)),
        ("Applet Count", str(directory.applet_count)),
    ]
    lines = [_table(fields)]
    for custom in directory.custom_components:
        lines.append(f"  Custom {custom.tag:02X}  {_aid(custom.aid)}")
    return "\n".join(lines)


# --- Composite formatters ---

def format_cap_file(cap: CapFile) -> str:
    """Format every decoded component of a CAP file."""
    sections: list[str] = []
    if cap.header is not None:
        sections.append(f"--- Header ---\n{format_header(cap.header)}")
    if cap.directory is not None:
        sections.append(f"--- Directory ---\n{format_directory(cap.directory)}")
    if cap.applet is not None:
        entries = "\n".join(
            f"  {_hex(bytes.fromhex(e.aid)):<48s}install @ {e.install_method_offset:04X}"
            for e in cap.applet.entries
        )
        sections.append(f"--- Applets ({len(cap.applet.entries)}) ---\n{entries}")
    if cap.skipped:
        names = ", ".join(kind.file_name for kind in cap.skipped)
        sections.append(f"--- Not Decoded ---\n  {names}")
    return "\n\n".join(sections)


def format_load_file(info: LoadFileInfo, algorithm: str = "sha1") -> str:
    """Format load file size, AIDs and data block hash."""
    fields = [
        ("Load File Size", str(len(info.data))),
        ("Package AID", _aid(info.package_aid) if info.package_aid else "-"),
        (f"Hash ({algorithm})", info.data_block_hash(algorithm).hex().upper()),
    ]
    sections = [f"--- Load File ---\n{_table(fields)}"]
    if info.applet_aids:
        entries = "\n".join(f"  {_aid(aid)}" for aid in info.applet_aids)
        sections.append(f"--- Applets ({len(info.applet_aids)}) ---\n{entries}")
    return "\n\n".join(sections)
