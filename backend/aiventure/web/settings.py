# backend/aiventure/web/settings.py

"""
サイト全体の設定値読み出しモジュール。
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from aiventure.utils.config import get_env


@dataclass(frozen=True)
class SiteSettings:
    site_url: str
    bare_host: str
    static_dir: Path
    api_cache_ttl: int = 300


@lru_cache()
def get_site_settings() -> SiteSettings:
    """
    環境変数からサイト設定を読み込む。すべて任意。

      - SITE_URL       (デフォルト: https://www.aiventure.me)
      - BARE_HOST      (デフォルト: aiventure.me, www なしのホスト)
      - STATIC_DIR     (デフォルト: public)
      - API_CACHE_TTL  (デフォルト: 300 秒)
    """
    raw_ttl = get_env("API_CACHE_TTL", default="300", required=False)
    try:
        api_cache_ttl = int(raw_ttl)
    except ValueError as exc:
        raise RuntimeError(f"Invalid integer value for env var API_CACHE_TTL: {raw_ttl!r}") from exc

    return SiteSettings(
        site_url=get_env("SITE_URL", default="https://www.aiventure.me", required=False).rstrip("/"),
        bare_host=get_env("BARE_HOST", default="aiventure.me", required=False),
        static_dir=Path(get_env("STATIC_DIR", default="public", required=False)),
        api_cache_ttl=api_cache_ttl,
    )
