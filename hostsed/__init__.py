"""
hostsed - 读取、编辑和保存操作系统 hosts 文件
"""

__version__ = "1.0.0"
__author__ = "hostsed Project"

from hostsed.app import HostsEditor
from hostsed.collection import EntryCollection
from hostsed.config import Config
from hostsed.errors import HostsFileBusyError, HostsFileError, HostsFileNotFoundError
from hostsed.hosts_manager import HostsFileManager
from hostsed.models import Hostname, HostsEntry, LoadReport, parse_address
from hostsed.parser import ParsedLine, clean_line, try_parse_line
from hostsed.platforms import LINUX, MACOS, WINDOWS, PlatformProfile, get_profile
from hostsed.templates import Templates

__all__ = [
    "HostsEditor",
    "Config",
    "EntryCollection",
    "HostsFileManager",
    "HostsFileError",
    "HostsFileNotFoundError",
    "HostsFileBusyError",
    "Hostname",
    "HostsEntry",
    "LoadReport",
    "parse_address",
    "ParsedLine",
    "clean_line",
    "try_parse_line",
    "PlatformProfile",
    "WINDOWS",
    "LINUX",
    "MACOS",
    "get_profile",
    "Templates",
]
