"""
hosts 文件操作异常
"""


class HostsFileError(Exception):
    """hosts 文件操作的基础异常"""


class HostsFileNotFoundError(HostsFileError, FileNotFoundError):
    """要读取的 hosts 文件不存在"""

    def __init__(self, path: str):
        super().__init__(f"Hosts 文件不存在: {path}")
        self.path = path


class HostsFileBusyError(HostsFileError, RuntimeError):
    """同一管理器上已有文件操作在进行"""
