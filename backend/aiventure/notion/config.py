# backend/aiventure/notion/config.py

"""
Notion 連携に必要な設定値をまとめるモジュール。
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from aiventure.utils.config import get_env, get_env_float

DEFAULT_TOOLS_DATABASE_ID = "cead259089f84056a8b17cf0bbb6bb76"


@dataclass(frozen=True)
class NotionConfig:
    """Notion API 用の設定値コンテナ。"""

    api_key: str
    tools_database_id: str
    blog_database_id: Optional[str]
    submissions_database_id: Optional[str]
    api_base_url: str
    api_version: str
    timeout_seconds: float = 10.0


@lru_cache()
def get_notion_config() -> NotionConfig:
    """
    環境変数から Notion 設定を読み込む。

    必須:
      - NOTION_API_KEY

    任意:
      - TOOLS_DATABASE_ID        (デフォルト: 公開ディレクトリのデータベース)
      - BLOG_DATABASE_ID         (未設定ならブログは空扱い)
      - SUBMISSIONS_DATABASE_ID  (未設定なら掲載申請は受け付けない)
      - NOTION_API_BASE_URL      (デフォルト: https://api.notion.com/v1)
      - NOTION_API_VERSION       (デフォルト: 2022-06-28)
      - NOTION_TIMEOUT_SECONDS   (デフォルト: 10)
    """
    api_key = get_env("NOTION_API_KEY")

    return NotionConfig(
        api_key=api_key,
        tools_database_id=get_env(
            "TOOLS_DATABASE_ID",
            default=DEFAULT_TOOLS_DATABASE_ID,
            required=False,
        ),
        blog_database_id=get_env("BLOG_DATABASE_ID", required=False),
        submissions_database_id=get_env("SUBMISSIONS_DATABASE_ID", required=False),
        api_base_url=get_env(
            "NOTION_API_BASE_URL",
            default="https://api.notion.com/v1",
            required=False,
        ),
        api_version=get_env(
            "NOTION_API_VERSION",
            default="2022-06-28",
            required=False,
        ),
        timeout_seconds=get_env_float("NOTION_TIMEOUT_SECONDS", default=10.0),
    )
