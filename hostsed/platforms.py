"""
平台相关的 hosts 文件约定
"""

import platform
from dataclasses import dataclass, replace
from typing import Dict


@dataclass(frozen=True)
class PlatformProfile:
    """
    描述某个平台上 hosts 文件的约定

    属性:
        name: 平台名称
        hosts_file_path: hosts 文件默认路径
        default_encoding: 非 Unicode 模式下使用的编码
        localhost_entry: 是否需要显式写入 localhost 条目
        hosts_file_header: 保存时是否需要写入说明头
        hosts_file_bom: Unicode 模式下是否写入 BOM
        newline: 写入时使用的换行符
    """

    name: str
    hosts_file_path: str
    default_encoding: str
    localhost_entry: bool
    hosts_file_header: bool
    hosts_file_bom: bool
    newline: str = "\n"

    def with_path(self, hosts_file_path: str) -> "PlatformProfile":
        """返回指向另一个 hosts 文件的副本"""
        return replace(self, hosts_file_path=hosts_file_path)


# Vista 以后的 Windows 不需要 localhost 条目
WINDOWS = PlatformProfile(
    name="windows",
    hosts_file_path=r"C:\Windows\System32\drivers\etc\hosts",
    default_encoding="cp1252",
    localhost_entry=False,
    hosts_file_header=True,
    hosts_file_bom=True,
    newline="\r\n",
)

LINUX = PlatformProfile(
    name="linux",
    hosts_file_path="/etc/hosts",
    default_encoding="utf-8",
    localhost_entry=True,
    hosts_file_header=False,
    hosts_file_bom=False,
)

MACOS = PlatformProfile(
    name="macos",
    hosts_file_path="/private/etc/hosts",
    default_encoding="utf-8",
    localhost_entry=True,
    hosts_file_header=True,
    hosts_file_bom=False,
)

PROFILES: Dict[str, PlatformProfile] = {
    profile.name: profile for profile in (WINDOWS, LINUX, MACOS)
}

_SYSTEMS = {
    "Windows": WINDOWS,
    "Linux": LINUX,
    "Darwin": MACOS,
}


def detect_profile() -> PlatformProfile:
    """根据当前操作系统选择约定，未知系统按 Linux 处理"""
    return _SYSTEMS.get(platform.system(), LINUX)


def get_profile(name: str) -> PlatformProfile:
    """
    按名称获取平台约定

    参数:
        name: windows、linux、macos 或 auto

    异常:
        ValueError: 如果名称未知
    """
    key = name.strip().lower()
    if key == "auto":
        return detect_profile()
    try:
        return PROFILES[key]
    except KeyError:
        raise ValueError(
            f"无效的平台: {name}. "
            f"必须是以下之一: auto, {', '.join(PROFILES)}"
        ) from None
