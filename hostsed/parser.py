"""
hosts 文件单行解析模块
"""

import re
import unicodedata
from typing import NamedTuple, Optional

COMMENT_MARKER = '#'

_WHITESPACE_RE = re.compile(r'\s+')


class ParsedLine(NamedTuple):
    """
    一行 hosts 文本中提取出的候选字段

    地址和主机名尚未经过校验。
    """

    ip: str
    host: str
    comment: str


def _strip_controls(line: Optional[str]) -> str:
    # 去掉 BOM 和非空白的控制字符，保留原有空白
    if not line:
        return ""
    return ''.join(
        ch for ch in line
        if ch != '\ufeff' and not (unicodedata.category(ch) == 'Cc' and not ch.isspace())
    )


def clean_line(line: Optional[str]) -> str:
    """
    清理一行文本

    控制字符和 BOM 被移除，连续空白（包括制表符）折叠为单个空格，
    并去掉首尾空白。

    参数:
        line: 原始行

    返回:
        清理后的行
    """
    return _WHITESPACE_RE.sub(' ', _strip_controls(line)).strip()


def try_parse_line(line: Optional[str]) -> Optional[ParsedLine]:
    """
    解析一行 hosts 文本

    规则:
    - 空行和以 # 开头的行不是条目
    - 第一个字段是地址，第二个字段是主机名；第二个字段以 # 开头时不是条目
    - 主机名之后第一个 # 起的内容（去掉 #，只去掉首尾空白）作为注释，
      主机名和 # 之间的其他内容（例如别名）被丢弃

    参数:
        line: 原始行

    返回:
        ParsedLine，不是有效条目行时返回 None
    """
    stripped = _strip_controls(line).strip()
    if not stripped or stripped.startswith(COMMENT_MARKER):
        return None

    # 按空白切分，剩余部分保留原有空白，注释内容不被折叠
    parts = stripped.split(None, 2)
    if len(parts) < 2 or parts[1].startswith(COMMENT_MARKER):
        return None

    ip, host = parts[0], parts[1]
    comment = ""

    if len(parts) == 3:
        marker = parts[2].find(COMMENT_MARKER)
        if marker >= 0:
            comment = parts[2][marker + 1:].strip()

    return ParsedLine(ip, host, comment)
