"""
配置管理模块，支持环境变量
"""

import os
from dataclasses import dataclass
from typing import Optional

from hostsed.platforms import PROFILES, PlatformProfile, get_profile


@dataclass
class Config:
    """应用配置类，从环境变量加载配置"""

    hosts_file_path: Optional[str] = None
    platform: str = "auto"
    encoding: str = "default"
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "Config":
        """
        从环境变量加载配置

        环境变量说明:
            HOSTS_FILE: hosts 文件路径 (默认: 平台默认路径)
            HOSTS_PLATFORM: 平台约定 auto/windows/linux/macos (默认: auto)
            HOSTS_ENCODING: 文件编码 default/unicode (默认: default)
            LOG_LEVEL: 日志级别 (默认: WARNING)
        """
        return cls(
            hosts_file_path=os.getenv("HOSTS_FILE") or None,
            platform=os.getenv("HOSTS_PLATFORM", "auto").lower(),
            encoding=os.getenv("HOSTS_ENCODING", "default").lower(),
            log_level=os.getenv("LOG_LEVEL", "WARNING").upper()
        )

    @property
    def multibyte_encoding(self) -> bool:
        return self.encoding == "unicode"

    def profile(self) -> PlatformProfile:
        """返回应用了 HOSTS_FILE 覆盖的平台约定"""
        profile = get_profile(self.platform)
        if self.hosts_file_path:
            profile = profile.with_path(self.hosts_file_path)
        return profile

    def validate(self) -> None:
        """验证配置是否有效"""
        valid_log_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.log_level not in valid_log_levels:
            raise ValueError(
                f"无效的 LOG_LEVEL: {self.log_level}. "
                f"必须是以下之一: {', '.join(sorted(valid_log_levels))}"
            )

        valid_platforms = {"auto", *PROFILES}
        if self.platform not in valid_platforms:
            raise ValueError(
                f"无效的 HOSTS_PLATFORM: {self.platform}. "
                f"必须是以下之一: {', '.join(sorted(valid_platforms))}"
            )

        valid_encodings = {"default", "unicode"}
        if self.encoding not in valid_encodings:
            raise ValueError(
                f"无效的 HOSTS_ENCODING: {self.encoding}. "
                f"必须是以下之一: {', '.join(sorted(valid_encodings))}"
            )
