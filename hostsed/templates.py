"""
hosts 文件文本模板
"""

from dataclasses import dataclass

from hostsed.models import HostsEntry

DEFAULT_HEADER = """\
# This file contains the mappings of IP addresses to host names. Each
# entry should be kept on an individual line. The IP address should
# be placed in the first column followed by the corresponding host name.
# The IP address and the host name should be separated by at least one
# space.
#
# Additionally, comments (such as these) may be inserted on individual
# lines or following the machine name denoted by a '#' symbol.
#
# This file was generated by hostsed. Manual changes may be overwritten.
"""


@dataclass(frozen=True)
class Templates:
    """
    保存 hosts 文件时使用的文本模板

    属性:
        header: 文件头，每行都必须以 # 开头
        entry_single: 无注释条目的格式
        entry_with_comment: 带注释条目的格式
    """

    header: str = DEFAULT_HEADER
    entry_single: str = "{address} {hostname}"
    entry_with_comment: str = "{address} {hostname} #{comment}"

    def format_entry(self, entry: HostsEntry) -> str:
        """
        转换为 hosts 文件行格式

        参数:
            entry: 有效条目

        返回:
            不含换行符的 hosts 文件行
        """
        if entry.has_comment:
            return self.entry_with_comment.format(
                address=entry.address,
                hostname=entry.hostname,
                comment=entry.comment.strip(),
            )
        return self.entry_single.format(address=entry.address, hostname=entry.hostname)

    def header_lines(self) -> list:
        return self.header.rstrip('\n').split('\n')
