"""
IG REST API Client
==================
封装 IG REST Trading API 的 HTTP 请求，包括会话登录、安全令牌管理和请求处理。
"""
import json
from typing import Optional, Any, Dict

import httpx
from loguru import logger

from .models import LoginResponse


class IGAPIError(Exception):
    """IG API 错误"""


class InvalidStatusError(IGAPIError):
    """响应状态码不是 200"""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Invalid status code: {status_code}")


class MissingTokensError(IGAPIError):
    """登录响应缺少 cst 或 x-security-token 头"""

    def __init__(self):
        super().__init__("Response had no cst or x-security-token headers")


class LoginInProgressError(IGAPIError):
    """同一会话上已有登录请求在进行中"""

    def __init__(self):
        super().__init__("A login is already in progress on this session")


class IGSession:
    """IG REST API 会话"""

    # API 端点
    REST_BASE_LIVE = "https://api.ig.com/gateway/deal"
    REST_BASE_DEMO = "https://demo-api.ig.com/gateway/deal"

    def __init__(
        self,
        api_key: str,
        username: str,
        password: str,
        base_url: Optional[str] = None,
        demo: bool = False,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        初始化 IG 会话

        Args:
            api_key: API Key
            username: 用户名（登录时作为 identifier 发送）
            password: 密码
            base_url: 自定义基础 URL（可选）
            demo: 是否使用模拟账户环境
            client: 外部传入的 httpx.AsyncClient（可选，由调用方负责关闭）
        """
        self._api_key = api_key
        self._username = username
        self._password = password

        self.base_url = self.resolve_base_url(base_url, demo)

        # 登录成功后才会设置
        self.cst: Optional[str] = None
        self.xst: Optional[str] = None
        self.lightstreamer_endpoint: Optional[str] = None

        self._client = client
        self._owns_client = False
        self._login_in_progress = False

    @classmethod
    def resolve_base_url(cls, base_url: Optional[str] = None, demo: bool = False) -> str:
        """自定义 URL 优先，否则按 demo 选择模拟或实盘网关"""
        if base_url:
            return base_url.rstrip("/")
        return cls.REST_BASE_DEMO if demo else cls.REST_BASE_LIVE

    async def __aenter__(self):
        if self._client is None:
            self._client = httpx.AsyncClient()
            self._owns_client = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._owns_client and self._client:
            await self._client.aclose()
            self._client = None
            self._owns_client = False

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def username(self) -> str:
        return self._username

    @property
    def password(self) -> str:
        return self._password

    @property
    def auth_endpoint(self) -> str:
        """登录端点 POST /session/"""
        return f"{self.base_url}/session/"

    @property
    def is_authenticated(self) -> bool:
        """两个安全令牌都存在时才视为已认证"""
        return bool(self.cst) and bool(self.xst)

    def _auth_headers(self) -> Dict[str, str]:
        """构建认证请求头（未登录时令牌为空字符串）"""
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "X-IG-API-KEY": self._api_key,
            "CST": self.cst or "",
            "X-SECURITY-TOKEN": self.xst or "",
        }

    async def _send(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        content: Optional[str] = None,
    ) -> httpx.Response:
        """
        发送单个 HTTP 请求

        未进入上下文管理器且未注入 client 时，为本次请求临时创建一个 client。
        """
        logger.debug(f"{method.upper()} {url}")
        try:
            if self._client is not None:
                return await self._client.request(
                    method, url, headers=headers, content=content
                )
            async with httpx.AsyncClient() as client:
                return await client.request(
                    method, url, headers=headers, content=content
                )
        except httpx.HTTPError as e:
            logger.error(f"Request failed: {e!r}")
            raise

    def _check_status(self, response: httpx.Response):
        # 唯一合法的状态码是 200
        if response.status_code != 200:
            logger.error(f"HTTP Error: {response.status_code} {response.request.url}")
            raise InvalidStatusError(response.status_code, response.text)

    def _parse(self, response: httpx.Response) -> Any:
        # 先解码为文本（非法字节被替换），保证所有畸形响应体都以 JSONDecodeError 结束
        try:
            return json.loads(response.text)
        except json.JSONDecodeError as e:
            logger.error(f"JSON Decode Error: {e}")
            raise

    async def login(self) -> LoginResponse:
        """
        创建 IG API 会话
        POST /session/

        成功后保存 CST、X-SECURITY-TOKEN 以及 lightstreamerEndpoint。
        任何失败都不会改动之前保存的令牌。

        Returns:
            登录响应（raw 字段为完整的 JSON 响应体）

        Raises:
            LoginInProgressError: 该会话已有登录在进行中
            InvalidStatusError: 状态码不是 200
            MissingTokensError: 响应头缺少 cst 或 x-security-token
            json.JSONDecodeError: 响应体不是合法 JSON
            httpx.HTTPError: 网络层错误
        """
        if self._login_in_progress:
            raise LoginInProgressError()

        self._login_in_progress = True
        try:
            headers = {
                "X-IG-API-KEY": self._api_key,
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
            body = json.dumps({"identifier": self._username, "password": self._password})

            response = await self._send("POST", self.auth_endpoint, headers, body)
            self._check_status(response)

            # CST = Client Security Token, XST = Account Security Token
            cst = response.headers.get("cst")
            xst = response.headers.get("x-security-token")
            if not cst or not xst:
                logger.error("Login response missing security tokens")
                raise MissingTokensError()

            parsed = self._parse(response)
            result = LoginResponse.from_dict(parsed)

            self.cst = cst
            self.xst = xst
            self.lightstreamer_endpoint = result.lightstreamer_endpoint
            logger.info(f"Logged in to {self.base_url} as {self._username}")
            return result
        finally:
            self._login_in_progress = False

    async def perform(self, url: str, method: str, body: Any = None) -> Any:
        """
        发送任意认证请求，附带 API Key、CST 和 X-SECURITY-TOKEN

        不检查是否已登录；未登录时令牌头为空，由服务端拒绝。

        Args:
            url: 完整请求 URL
            method: HTTP 方法
            body: 请求体（会被序列化为 JSON，None 表示不发送请求体）

        Returns:
            解析后的 JSON 响应体
        """
        content = None if body is None else json.dumps(body)
        response = await self._send(method, url, self._auth_headers(), content)
        self._check_status(response)
        return self._parse(response)

    async def market_search(self, search_term: str) -> Any:
        """
        搜索市场
        GET /markets?searchTerm=

        Args:
            search_term: 搜索关键字（原样拼接，不做编码）

        Returns:
            perform 的返回值
        """
        return await self.perform(
            f"{self.base_url}/markets?searchTerm={search_term}", "GET"
        )
