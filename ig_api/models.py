"""
登录响应数据结构
只对文档中列出的字段做类型化，未知字段保留在 raw 中
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class AccountInfo:
    """账户资金概况"""

    balance: Optional[float] = None
    deposit: Optional[float] = None
    profit_loss: Optional[float] = None
    available: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AccountInfo":
        data = data or {}
        return cls(
            balance=data.get("balance"),
            deposit=data.get("deposit"),
            profit_loss=data.get("profitLoss"),
            available=data.get("available"),
        )


@dataclass
class Account:
    """客户名下的单个账户"""

    account_id: str = ""
    account_name: str = ""
    preferred: bool = False
    account_type: str = ""  # CFD, PHYSICAL, SPREADBET

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Account":
        return cls(
            account_id=data.get("accountId", ""),
            account_name=data.get("accountName", ""),
            preferred=bool(data.get("preferred", False)),
            account_type=data.get("accountType", ""),
        )


@dataclass
class LoginResponse:
    """POST /session 的响应体"""

    account_type: Optional[str] = None
    account_info: AccountInfo = field(default_factory=AccountInfo)
    currency_iso_code: Optional[str] = None
    currency_symbol: Optional[str] = None
    current_account_id: Optional[str] = None
    lightstreamer_endpoint: Optional[str] = None
    accounts: List[Account] = field(default_factory=list)
    client_id: Optional[str] = None
    timezone_offset: Optional[int] = None
    has_active_demo_accounts: Optional[bool] = None
    has_active_live_accounts: Optional[bool] = None
    trailing_stops_enabled: Optional[bool] = None
    rerouting_environment: Optional[str] = None
    dealing_enabled: Optional[bool] = None

    # 完整的原始响应体
    raw: Any = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "LoginResponse":
        """
        从解析后的 JSON 构建

        Args:
            data: 解析后的响应体（非 dict 时只保留在 raw 中）

        Returns:
            LoginResponse
        """
        if not isinstance(data, dict):
            return cls(raw=data)

        return cls(
            account_type=data.get("accountType"),
            account_info=AccountInfo.from_dict(data.get("accountInfo")),
            currency_iso_code=data.get("currencyIsoCode"),
            currency_symbol=data.get("currencySymbol"),
            current_account_id=data.get("currentAccountId"),
            lightstreamer_endpoint=data.get("lightstreamerEndpoint"),
            accounts=[Account.from_dict(a) for a in data.get("accounts") or []],
            client_id=data.get("clientId"),
            timezone_offset=data.get("timezoneOffset"),
            has_active_demo_accounts=data.get("hasActiveDemoAccounts"),
            has_active_live_accounts=data.get("hasActiveLiveAccounts"),
            trailing_stops_enabled=data.get("trailingStopsEnabled"),
            rerouting_environment=data.get("reroutingEnvironment"),
            dealing_enabled=data.get("dealingEnabled"),
            raw=data,
        )

    @property
    def preferred_account(self) -> Optional[Account]:
        """首选账户（没有则返回 None）"""
        for account in self.accounts:
            if account.preferred:
                return account
        return None
