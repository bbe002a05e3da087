from jcap.core.cap.applet import decode_applet
from jcap.core.cap.decoder import decode, decode_file
from jcap.core.cap.directory import decode_directory
from jcap.core.cap.errors import CapDecodeError, CapError, ContainerFormatError, ErrorKind
from jcap.core.cap.header import decode_header
from jcap.core.cap.loadfile import LoadFileInfo, read_load_file
from jcap.core.cap.model import (
    Applet,
    AppletEntry,
    CapFile,
    CustomComponent,
    Directory,
    Header,
)
from jcap.core.cap.reader import Reader
from jcap.core.cap.tags import Component

__all__ = [
    "Applet",
    "AppletEntry",
    "CapDecodeError",
    "CapError",
    "CapFile",
    "Component",
    "ContainerFormatError",
    "CustomComponent",
    "Directory",
    "ErrorKind",
    "Header",
    "LoadFileInfo",
    "Reader",
    "decode",
    "decode_applet",
    "decode_directory",
    "decode_file",
    "decode_header",
    "read_load_file",
]
