"""
hostsed 主应用模块
"""

import asyncio
import logging
import sys
from os import PathLike
from typing import Iterator, Tuple, Union

from hostsed.config import Config
from hostsed.hosts_manager import HostsFileManager
from hostsed.models import HostsEntry, LoadReport


class HostsEditor:
    """
    主应用控制器，协调配置、日志和 hosts 文件管理器

    为命令行提供同步接口：
    - 读取当前 hosts 文件
    - 添加、删除、排序条目
    - 导入、导出其他文件
    - 恢复默认内容并保存
    """

    def __init__(self, config: Config):
        """
        初始化应用

        参数:
            config: 应用配置

        异常:
            ValueError: 如果配置无效
        """
        self.config = config
        self.config.validate()

        self.logger = self._setup_logging()
        self.profile = config.profile()

        self.hosts_manager = HostsFileManager(self.profile, self.logger)
        self.hosts_manager.multibyte_encoding = config.multibyte_encoding

        self.logger.debug(
            f"平台: {self.profile.name}, Hosts 文件: {self.hosts_manager.file_path}, "
            f"编码: {self.hosts_manager.encoding_name}"
        )

    def _setup_logging(self) -> logging.Logger:
        """
        配置日志系统

        返回:
            配置好的日志记录器实例
        """
        logger = logging.getLogger('hostsed')
        logger.setLevel(self.config.log_level)

        # 避免重复的处理器，已有处理器时只更新级别
        if logger.handlers:
            for handler in logger.handlers:
                handler.setLevel(self.config.log_level)
            return logger

        # 输出到 stderr，stdout 留给命令输出
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(self.config.log_level)

        # 格式: 时间戳 - 名称 - 级别 - 消息
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)

        logger.addHandler(handler)
        return logger

    def open(self) -> LoadReport:
        """丢弃内存中的条目并重新读取 hosts 文件"""
        return asyncio.run(self.hosts_manager.refresh())

    def entries(self) -> Iterator[Tuple[int, HostsEntry]]:
        """按当前顺序返回 (序号, 条目)"""
        return enumerate(self.hosts_manager.contents)

    def add(self, ip: str, host: str, comment: str = "") -> HostsEntry:
        """
        添加条目

        异常:
            ValueError: 如果地址或主机名无效
        """
        entry = HostsEntry.from_strings(ip, host, comment)
        if entry is None:
            raise ValueError(f"无效的条目: {ip} {host}")
        self.hosts_manager.contents.append(entry)
        self.logger.info(f"已添加主机记录: {entry}")
        return entry

    def delete(self, index: int) -> HostsEntry:
        """
        按序号删除条目

        异常:
            IndexError: 如果序号超出范围
        """
        if not 0 <= index < len(self.hosts_manager.contents):
            raise IndexError(f"条目序号超出范围: {index}")
        entry = self.hosts_manager.contents.pop(index)
        self.logger.info(f"已移除主机记录: {entry}")
        return entry

    def sort(self, field: str, reverse: bool = False) -> None:
        self.hosts_manager.contents.sort_by(field, reverse)

    def import_file(self, path: Union[str, PathLike]) -> LoadReport:
        """把其他文件中的条目追加到当前集合"""
        return asyncio.run(self.hosts_manager.load(path))

    def export_file(self, path: Union[str, PathLike]) -> int:
        """导出到其他文件，不写文件头"""
        return asyncio.run(self.hosts_manager.save(path))

    def restore_defaults(self) -> None:
        self.hosts_manager.restore()

    def save(self) -> int:
        """写回当前 hosts 文件"""
        return asyncio.run(self.hosts_manager.save())

    def render(self) -> str:
        return self.hosts_manager.render()
