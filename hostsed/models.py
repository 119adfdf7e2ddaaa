"""
Hosts 文件数据模型
"""

import ipaddress
import re
from dataclasses import dataclass
from typing import ClassVar, Optional, Union

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

# 单个标签: 1-63 个字母、数字、连字符或下划线，首尾不能是连字符
_LABEL_RE = re.compile(r"(?!-)[A-Za-z0-9_-]{1,63}(?<!-)")

MAX_HOSTNAME_LENGTH = 253


def parse_address(raw: object) -> Optional[IPAddress]:
    """
    解析 IPv4 或 IPv6 地址，仅做语法校验

    参数:
        raw: 原始字符串

    返回:
        地址对象，格式无效时返回 None
    """
    if not isinstance(raw, str):
        return None
    try:
        return ipaddress.ip_address(raw.strip())
    except ValueError:
        return None


def _is_valid_hostname(value: str) -> bool:
    if not value or len(value) > MAX_HOSTNAME_LENGTH:
        return False
    return all(_LABEL_RE.fullmatch(label) for label in value.split('.'))


@dataclass(frozen=True)
class Hostname:
    """
    经过校验的主机名，不可变

    直接构造时校验失败抛出 ValueError；try_parse 不抛出异常，返回 None。
    """

    value: str

    LOCALHOST: ClassVar["Hostname"]

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not _is_valid_hostname(self.value):
            raise ValueError(f"无效的主机名: {self.value!r}")

    @classmethod
    def try_parse(cls, raw: object) -> Optional["Hostname"]:
        """
        解析主机名

        参数:
            raw: 原始字符串

        返回:
            Hostname 实例，格式无效时返回 None
        """
        if not isinstance(raw, str):
            return None

        candidate = raw.strip()
        # 允许一个结尾的点（FQDN 写法），不计入长度
        if candidate.endswith('.'):
            candidate = candidate[:-1]

        if not _is_valid_hostname(candidate):
            return None

        return cls(candidate)

    def __str__(self) -> str:
        return self.value


Hostname.LOCALHOST = Hostname("localhost")


@dataclass
class HostsEntry:
    """
    代表 hosts 文件中的单个条目

    编辑过程中 address 或 hostname 可以为 None，此时条目无效，
    保存时会被跳过。

    属性:
        address: IP 地址
        hostname: 要映射的主机名
        comment: 可选注释
    """

    address: Optional[IPAddress]
    hostname: Optional[Hostname]
    comment: str = ""

    @classmethod
    def from_strings(cls, ip: str, host: str, comment: str = "") -> Optional["HostsEntry"]:
        """
        从字符串构建条目，地址和主机名都有效时才返回实例
        """
        address = parse_address(ip)
        hostname = Hostname.try_parse(host)
        if address is None or hostname is None:
            return None
        return cls(address, hostname, comment or "")

    @property
    def is_valid(self) -> bool:
        """每次访问都根据当前字段重新计算"""
        return self.address is not None and self.hostname is not None

    @property
    def has_comment(self) -> bool:
        return bool(self.comment and self.comment.strip())

    def set_address(self, raw: str) -> bool:
        """
        设置地址，解析失败时地址被置为 None

        返回:
            解析是否成功
        """
        self.address = parse_address(raw)
        return self.address is not None

    def set_hostname(self, raw: str) -> bool:
        """
        设置主机名，解析失败时主机名被置为 None

        返回:
            解析是否成功
        """
        self.hostname = Hostname.try_parse(raw)
        return self.hostname is not None

    def __str__(self) -> str:
        return f"{self.hostname} -> {self.address}"


@dataclass(frozen=True)
class LoadReport:
    """
    一次加载操作的结果

    属性:
        path: 读取的文件路径
        loaded: 加入集合的条目数
        skipped: 被丢弃的非空非注释行数
    """

    path: str
    loaded: int
    skipped: int
