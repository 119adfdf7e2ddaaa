"""
Hosts 文件管理模块，支持异步读写和原子性保存
"""

import asyncio
import codecs
import logging
import os
import stat
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

from hostsed.collection import EntryCollection
from hostsed.errors import HostsFileBusyError, HostsFileNotFoundError
from hostsed.models import Hostname, HostsEntry, IPAddress, LoadReport, parse_address
from hostsed.parser import COMMENT_MARKER, clean_line, try_parse_line
from hostsed.platforms import PlatformProfile
from hostsed.templates import Templates

PathLike = Union[str, os.PathLike]

DEFAULT_FILE_MODE = 0o644


class HostsFileManager:
    """
    管理 hosts 文件的读取、保存和恢复默认

    同一时间只允许一个文件操作；在另一个操作进行时发起新操作
    会抛出 HostsFileBusyError。保存使用临时文件 + 重命名，防止文件损坏。
    """

    def __init__(
        self,
        profile: PlatformProfile,
        logger: Optional[logging.Logger] = None,
        templates: Optional[Templates] = None
    ):
        """
        初始化 hosts 文件管理器

        参数:
            profile: 平台约定
            logger: 日志记录器实例
            templates: 文本模板，默认使用内置模板
        """
        self.profile = profile
        self.logger = logger or logging.getLogger('hostsed')
        self.templates = templates or Templates()
        self.file_path = Path(profile.hosts_file_path)
        self.contents = EntryCollection(logger=self.logger)
        self.lock = threading.Lock()
        self._multibyte = False

    @property
    def multibyte_encoding(self) -> bool:
        """是否使用 Unicode 编码读写"""
        return self._multibyte

    @multibyte_encoding.setter
    def multibyte_encoding(self, value: bool) -> None:
        # 只影响之后的读写，不改动已加载的条目
        self._multibyte = bool(value)
        self.logger.debug(f"文件编码切换为: {self.encoding}")

    @property
    def encoding(self) -> str:
        """写入时使用的编码"""
        if not self._multibyte:
            return self.profile.default_encoding
        return 'utf-8-sig' if self.profile.hosts_file_bom else 'utf-8'

    @property
    def read_encoding(self) -> str:
        """读取时使用的编码，Unicode 模式下自动跳过 BOM"""
        return 'utf-8-sig' if self._multibyte else self.profile.default_encoding

    @property
    def encoding_name(self) -> str:
        """用户可读的编码名称"""
        name = codecs.lookup(self.encoding).name
        if self._multibyte:
            return f"Unicode ({name})"
        return name

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        if not self.lock.acquire(blocking=False):
            self.logger.warning(f"无法开始 {name}: 已有其他文件操作在进行")
            raise HostsFileBusyError(
                f"无法开始 {name}: 已有其他 hosts 文件操作在进行"
            )
        try:
            yield
        finally:
            self.lock.release()

    def add_entry(self, address: IPAddress, hostname: Hostname, comment: str = "") -> HostsEntry:
        """
        添加新条目

        参数:
            address: IP 地址
            hostname: 主机名
            comment: 注释

        返回:
            新建的条目
        """
        entry = HostsEntry(address, hostname, comment)
        self.contents.append(entry)
        return entry

    def _read_entries(self, source: Path) -> Tuple[List[HostsEntry], int]:
        """
        逐行读取文件并解析条目

        返回:
            (条目列表, 被丢弃的行数)
        """
        entries: List[HostsEntry] = []
        skipped = 0

        with open(source, 'r', encoding=self.read_encoding, newline=None) as f:
            for line_number, line in enumerate(f, start=1):
                cleaned = clean_line(line)
                if not cleaned or cleaned.startswith(COMMENT_MARKER):
                    continue

                parsed = try_parse_line(line)
                address = parse_address(parsed.ip) if parsed else None
                hostname = Hostname.try_parse(parsed.host) if parsed else None

                if address is None or hostname is None:
                    skipped += 1
                    self.logger.debug(f"跳过第 {line_number} 行: {cleaned!r}")
                    continue

                entries.append(HostsEntry(address, hostname, parsed.comment))

        return entries, skipped

    async def _load(self, source: Path) -> LoadReport:
        try:
            entries, skipped = await asyncio.to_thread(self._read_entries, source)
        except FileNotFoundError:
            self.logger.error(f"Hosts 文件不存在: {source}")
            raise HostsFileNotFoundError(str(source)) from None
        except PermissionError:
            self.logger.error(f"读取 hosts 文件权限被拒绝: {source}")
            raise
        except Exception as e:
            self.logger.error(f"读取 hosts 文件时出错: {e}")
            raise

        # 整个文件读完后再一次性加入，读取失败时集合保持不变
        self.contents.extend(entries)

        if skipped:
            self.logger.info(f"已从 {source} 加载 {len(entries)} 条记录，跳过 {skipped} 行")
        else:
            self.logger.info(f"已从 {source} 加载 {len(entries)} 条记录")

        return LoadReport(path=str(source), loaded=len(entries), skipped=skipped)

    async def load(self, path: Optional[PathLike] = None) -> LoadReport:
        """
        读取 hosts 文件并追加到当前集合（不清空现有条目）

        参数:
            path: 源文件路径，默认为当前 hosts 文件

        返回:
            LoadReport

        异常:
            HostsFileNotFoundError: 如果文件不存在
            OSError: 其他文件系统错误
            UnicodeDecodeError: 如果文件编码与当前设置不符
        """
        source = Path(path) if path is not None else self.file_path
        with self._operation('load'):
            return await self._load(source)

    async def refresh(self) -> LoadReport:
        """清空集合并重新读取当前 hosts 文件，丢弃内存中的修改"""
        with self._operation('refresh'):
            self.contents.clear()
            return await self._load(self.file_path)

    def restore(self) -> None:
        """
        恢复默认内容

        只修改内存中的集合，需要再调用 save() 才会写入磁盘。
        """
        with self._operation('restore'):
            self.contents.clear()
            if self.profile.localhost_entry:
                self.contents.extend([
                    HostsEntry(parse_address('127.0.0.1'), Hostname.LOCALHOST, ""),
                    HostsEntry(parse_address('::1'), Hostname.LOCALHOST, ""),
                ])
            self.logger.info("已恢复默认 hosts 条目")

    def _render_lines(self, skip_header: bool) -> List[str]:
        lines: List[str] = []
        if self.profile.hosts_file_header and not skip_header:
            lines.extend(self.templates.header_lines())

        for entry in self.contents.valid_entries():
            lines.append(self.templates.format_entry(entry))
        return lines

    def render(self, skip_header: bool = False) -> str:
        """
        生成保存时写入的完整文本

        参数:
            skip_header: 是否跳过文件头

        返回:
            以换行符结尾的文本，换行符统一为 \\n
        """
        lines = self._render_lines(skip_header)
        return '\n'.join(lines) + '\n' if lines else ''

    def _write_hosts_file(self, target: Path, content: str) -> None:
        # hosts 文件可能是符号链接，替换链接指向的真实文件
        target = target.resolve()

        # 写入同一目录中的临时文件，再原子性替换
        temp_fd, temp_path = tempfile.mkstemp(
            dir=target.parent,
            prefix='.hosts.tmp.',
            text=True
        )

        try:
            with os.fdopen(temp_fd, 'w', encoding=self.encoding, newline=self.profile.newline) as f:
                f.write(content)

            try:
                mode = stat.S_IMODE(os.stat(target).st_mode)
            except FileNotFoundError:
                mode = DEFAULT_FILE_MODE
            os.chmod(temp_path, mode)

            os.replace(temp_path, target)

        except Exception:
            # 出错时清理临时文件
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

    async def save(self, path: Optional[PathLike] = None, skip_header: Optional[bool] = None) -> int:
        """
        将有效条目写入文件，完整替换原有内容

        参数:
            path: 目标路径，默认为当前 hosts 文件
            skip_header: 是否跳过文件头；默认保存到 hosts 文件时写入，
                导出到其他文件时跳过

        返回:
            写入的条目数

        异常:
            PermissionError: 如果没有写入权限
            OSError: 如果文件系统操作失败
            UnicodeEncodeError: 如果条目无法用当前编码表示
        """
        target = Path(path) if path is not None else self.file_path
        if skip_header is None:
            skip_header = path is not None

        with self._operation('save'):
            content = self.render(skip_header)
            written = sum(1 for _ in self.contents.valid_entries())

            try:
                await asyncio.to_thread(self._write_hosts_file, target, content)
            except PermissionError:
                self.logger.error(
                    f"写入 hosts 文件权限被拒绝: {target}. "
                    "请确保以管理员权限运行。"
                )
                raise
            except Exception as e:
                self.logger.error(f"写入 hosts 文件失败: {e}")
                raise

            self.logger.info(f"已写入 {written} 条记录到 {target}")
            return written
