"""
配置文件
凭证与网关环境可由参数传入，缺省时读取 IG_* 环境变量（含 .env）
"""
import os
from typing import Optional

from dotenv import load_dotenv

from .ig_client import IGSession

load_dotenv()

_TRUTHY = ("true", "1", "yes")


def _env_flag(name: str) -> bool:
    return os.getenv(name, "false").lower() in _TRUTHY


class IGConfig:
    """IG 会话配置"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        base_url: Optional[str] = None,
        demo: Optional[bool] = None,
    ):
        """
        Args:
            api_key: API Key，缺省读取 IG_API_KEY
            username: 用户名，缺省读取 IG_USERNAME
            password: 密码，缺省读取 IG_PASSWORD
            base_url: 网关地址，缺省读取 IG_BASE_URL，均未设置时按 demo 选择
            demo: 是否使用模拟环境，缺省读取 IG_DEMO
        """
        self.api_key = api_key or os.getenv("IG_API_KEY", "")
        self.username = username or os.getenv("IG_USERNAME", "")
        self.password = password or os.getenv("IG_PASSWORD", "")
        self.demo = _env_flag("IG_DEMO") if demo is None else demo

        # 网关地址只在 IGSession.resolve_base_url 中决定
        self.base_url = IGSession.resolve_base_url(
            base_url or os.getenv("IG_BASE_URL"), self.demo
        )

    def create_session(self, **kwargs) -> IGSession:
        """按当前配置创建 IGSession，额外参数（如 client）原样传入"""
        return IGSession(
            api_key=self.api_key,
            username=self.username,
            password=self.password,
            base_url=self.base_url,
            **kwargs,
        )
