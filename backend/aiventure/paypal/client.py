# backend/aiventure/paypal/client.py

"""
PayPal REST API との通信を担当するクライアントモジュール。

- POST /v1/oauth2/token          （client credentials によるトークン取得）
- GET  /v2/checkout/orders/{id}  （注文の取得）

リトライは行わない。失敗はそのまま例外として呼び出し元に伝える。
"""

from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from .config import PayPalSettings, get_paypal_settings


class PayPalError(RuntimeError):
    """PayPal 連携全般の基底例外。"""


class PayPalConfigError(PayPalError):
    """認証情報が未設定など、デプロイ設定の不備を表す例外。"""


class PayPalAuthError(PayPalError):
    """アクセストークン取得に失敗した場合の例外。"""


class PayPalFetchError(PayPalError):
    """注文取得に失敗した場合の例外。"""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        debug_id: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.debug_id = debug_id


def _debug_id(response: httpx.Response) -> Optional[str]:
    """PayPal がエラー時に返す debug_id を取り出す（ログ用）。"""
    header = response.headers.get("paypal-debug-id")
    if header:
        return header
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        value = body.get("debug_id")
        if isinstance(value, str):
            return value
    return None


class PayPalClient:
    """
    PayPal REST API の薄いラッパークライアント。

    アクセストークンはキャッシュしない。呼び出しごとに取得し直す前提。
    """

    def __init__(self, settings: Optional[PayPalSettings] = None) -> None:
        self._settings = settings or get_paypal_settings()

    @property
    def base_url(self) -> str:
        return self._settings.api_base_url

    @property
    def timeout(self) -> float:
        return self._settings.timeout_seconds

    def get_access_token(self) -> str:
        """
        client credentials grant でアクセストークンを取得する。

        :raises PayPalAuthError: 2xx 以外 / 通信エラー / access_token が含まれない場合。
            メッセージに認証情報は含めない。
        """
        url = f"{self.base_url}/v1/oauth2/token"

        try:
            response = httpx.post(
                url,
                auth=(self._settings.client_id or "", self._settings.client_secret or ""),
                data={"grant_type": "client_credentials"},
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except httpx.RequestError as exc:
            raise PayPalAuthError(f"Failed to call PayPal token endpoint: {exc}") from exc

        if response.status_code // 100 != 2:
            raise PayPalAuthError(
                f"PayPal token request failed: status_code={response.status_code} "
                f"debug_id={_debug_id(response)}"
            )

        try:
            data: Dict[str, Any] = response.json()
        except ValueError as exc:
            raise PayPalAuthError("PayPal token response is not valid JSON.") from exc

        token = data.get("access_token") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            raise PayPalAuthError("PayPal token response did not contain an access_token.")

        return token

    def get_order(self, order_id: str, access_token: str) -> Dict[str, Any]:
        """
        注文リソースを取得し、生の JSON（dict）を返す。

        :raises PayPalFetchError: 2xx 以外 / 通信エラー / JSON でないレスポンスの場合。
        """
        url = f"{self.base_url}/v2/checkout/orders/{quote(order_id, safe='')}"

        try:
            response = httpx.get(
                url,
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        except httpx.RequestError as exc:
            raise PayPalFetchError(f"Failed to call PayPal orders endpoint: {exc}") from exc

        if response.status_code // 100 != 2:
            raise PayPalFetchError(
                f"PayPal order request failed: status_code={response.status_code}",
                status_code=response.status_code,
                debug_id=_debug_id(response),
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise PayPalFetchError(
                "PayPal order response is not valid JSON.",
                status_code=response.status_code,
            ) from exc

        if not isinstance(data, dict):
            raise PayPalFetchError(
                "Unexpected PayPal order response format.",
                status_code=response.status_code,
            )

        return data
