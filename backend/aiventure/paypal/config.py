# backend/aiventure/paypal/config.py

"""
PayPal 注文検証に必要な設定値をまとめるモジュール。
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional

from aiventure.utils.config import get_env, get_env_float

LIVE_API_BASE_URL = "https://api-m.paypal.com"
SANDBOX_API_BASE_URL = "https://api-m.sandbox.paypal.com"

DEFAULT_EXPECTED_CURRENCY = "USD"
DEFAULT_SUBMISSION_FEE = "49.00"


@dataclass(frozen=True)
class PayPalSettings:
    """
    PayPal API 用の設定値コンテナ。

    client_id / client_secret は読み込み時には必須にしない。
    未設定の場合は verify_order() がネットワークに出る前に PayPalConfigError にする。
    """

    client_id: Optional[str]
    client_secret: Optional[str]
    mode: str = "sandbox"
    expected_currency: str = DEFAULT_EXPECTED_CURRENCY
    expected_fee: str = DEFAULT_SUBMISSION_FEE
    timeout_seconds: float = 10.0

    @property
    def api_base_url(self) -> str:
        """mode=live の場合のみ本番ホストを使う。それ以外は sandbox。"""
        if self.mode == "live":
            return LIVE_API_BASE_URL
        return SANDBOX_API_BASE_URL

    def missing_credentials(self) -> List[str]:
        """未設定の認証情報に対応する環境変数名を返す（値そのものは含めない）。"""
        missing: List[str] = []
        if not self.client_id:
            missing.append("PAYPAL_CLIENT_ID")
        if not self.client_secret:
            missing.append("PAYPAL_CLIENT_SECRET")
        return missing


@lru_cache()
def get_paypal_settings() -> PayPalSettings:
    """
    環境変数から PayPal 設定を読み込む。

    認証情報:
      - PAYPAL_CLIENT_ID
      - PAYPAL_CLIENT_SECRET

    任意:
      - PAYPAL_MODE               (sandbox / live, デフォルト: sandbox)
      - PAYPAL_EXPECTED_CURRENCY  (デフォルト: USD)
      - PAYPAL_SUBMISSION_FEE     (デフォルト: 49.00, 文字列のまま比較する)
      - PAYPAL_TIMEOUT_SECONDS    (デフォルト: 10)
    """
    mode = (get_env("PAYPAL_MODE", default="sandbox", required=False) or "sandbox").lower()

    return PayPalSettings(
        client_id=get_env("PAYPAL_CLIENT_ID", required=False),
        client_secret=get_env("PAYPAL_CLIENT_SECRET", required=False),
        mode=mode,
        expected_currency=get_env(
            "PAYPAL_EXPECTED_CURRENCY",
            default=DEFAULT_EXPECTED_CURRENCY,
            required=False,
        ),
        expected_fee=get_env(
            "PAYPAL_SUBMISSION_FEE",
            default=DEFAULT_SUBMISSION_FEE,
            required=False,
        ),
        timeout_seconds=get_env_float("PAYPAL_TIMEOUT_SECONDS", default=10.0),
    )
