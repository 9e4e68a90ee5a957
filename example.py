"""
IG REST API 客户端使用示例
在 .env 或环境变量中设置 IG_API_KEY / IG_USERNAME / IG_PASSWORD / IG_DEMO
"""
import asyncio
import sys

from loguru import logger

from ig_api import IGConfig, IGAPIError


async def example_login_and_search(search_term: str):
    """登录并搜索市场"""
    print("=" * 50)
    print("登录 & 市场搜索示例")
    print("=" * 50)

    config = IGConfig()

    try:
        async with config.create_session() as session:
            print("\n1. 登录:")
            result = await session.login()
            print(f"当前账户: {result.current_account_id}")
            print(f"Lightstreamer: {session.lightstreamer_endpoint}")
            for account in result.accounts:
                flag = "*" if account.preferred else " "
                print(f" {flag} {account.account_id} {account.account_name} ({account.account_type})")

            print(f"\n2. 搜索市场 ({search_term}):")
            markets = await session.market_search(search_term)
            for market in markets.get("markets", []):
                print(f"{market.get('epic')}: {market.get('instrumentName')}")

    except IGAPIError as e:
        print(f"API 错误: {e}")
    except Exception as e:
        print(f"错误: {e!r}")


if __name__ == "__main__":
    logger.enable("ig_api")
    term = sys.argv[1] if len(sys.argv) > 1 else "EURUSD"
    asyncio.run(example_login_and_search(term))
