"""
IG REST API Python Client
=========================
IG REST Trading API 的异步 Python 客户端
"""
from loguru import logger

from .ig_client import (
    IGSession,
    IGAPIError,
    InvalidStatusError,
    MissingTokensError,
    LoginInProgressError,
)
from .models import LoginResponse, AccountInfo, Account
from .config import IGConfig

# 库默认不输出日志，使用方可通过 logger.enable("ig_api") 打开
logger.disable("ig_api")


__all__ = [
    "IGSession",
    "IGConfig",
    "IGAPIError",
    "InvalidStatusError",
    "MissingTokensError",
    "LoginInProgressError",
    "LoginResponse",
    "AccountInfo",
    "Account",
]
