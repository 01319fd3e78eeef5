# backend/aiventure/paypal/verifier.py

"""
掲載料（ツール掲載申請）の支払い検証ロジック。

1. アクセストークン取得
2. 注文取得
3. 受理条件を決められた順番で評価し、最初に失敗した条件を理由として返す
   a. status == COMPLETED
   b. purchase_units[0].payments.captures[0] が存在する
   c. 通貨コードが期待値と一致
   d. 金額が期待値と文字列として完全一致（"49.0" や "49.00 " は不一致）

受理条件の不一致は例外ではなく VerificationResult(valid=False) として返す。
設定不備・認証失敗・取得失敗は例外として呼び出し元に伝える。
"""

import logging
from typing import Optional, Protocol

from pydantic import ValidationError

from .client import PayPalClient, PayPalConfigError, PayPalFetchError
from .config import PayPalSettings, get_paypal_settings
from .schemas import PayPalOrder, RejectionReason, VerificationResult

logger = logging.getLogger(__name__)

ORDER_STATUS_COMPLETED = "COMPLETED"


class OrderClient(Protocol):
    """verify_order() が必要とする PayPal クライアントの最小インターフェース。"""

    def get_access_token(self) -> str:  # pragma: no cover - Protocol
        ...

    def get_order(self, order_id: str, access_token: str) -> dict:  # pragma: no cover - Protocol
        ...


def evaluate_order(
    order: PayPalOrder,
    *,
    order_id: str,
    expected_currency: str,
    expected_fee: str,
) -> VerificationResult:
    """
    取得済みの注文に受理条件を順番に適用する。副作用なし。
    """
    if order.status != ORDER_STATUS_COMPLETED:
        return VerificationResult.rejected(
            order_id,
            RejectionReason.STATUS_NOT_COMPLETED,
            f"order status is {order.status}, expected {ORDER_STATUS_COMPLETED}",
        )

    units = order.purchase_units
    captures = []
    if units and units[0].payments is not None:
        captures = units[0].payments.captures

    if not captures or not captures[0].id:
        return VerificationResult.rejected(
            order_id,
            RejectionReason.NO_CAPTURE,
            "no payment capture found",
        )

    # 複数 purchase unit / 複数 capture の注文は対象外（先頭だけを見て通すことはしない）
    if len(units) > 1 or len(captures) > 1:
        return VerificationResult.rejected(
            order_id,
            RejectionReason.UNSUPPORTED_ORDER_SHAPE,
            f"unsupported order shape: {len(units)} purchase units, "
            f"{len(captures)} captures in the first unit",
        )

    capture = captures[0]
    amount = capture.amount
    currency = amount.currency_code if amount is not None else None
    value = amount.value if amount is not None else None

    if currency != expected_currency:
        return VerificationResult.rejected(
            order_id,
            RejectionReason.CURRENCY_MISMATCH,
            f"currency mismatch: got {currency}, expected {expected_currency}",
        )

    if value != expected_fee:
        return VerificationResult.rejected(
            order_id,
            RejectionReason.AMOUNT_MISMATCH,
            f"amount mismatch: got {value!r}, expected {expected_fee!r}",
        )

    return VerificationResult(
        valid=True,
        order_id=order_id,
        capture_id=capture.id,
        payer_email=order.payer.email_address if order.payer is not None else None,
    )


def verify_order(
    order_id: str,
    settings: Optional[PayPalSettings] = None,
    *,
    client: Optional[OrderClient] = None,
) -> VerificationResult:
    """
    PayPal 注文 ID を検証して VerificationResult を返す。

    :raises ValueError: order_id が空の場合。
    :raises PayPalConfigError: 認証情報が未設定の場合（通信は一切行わない）。
    :raises PayPalAuthError: トークン取得に失敗した場合（注文取得は行わない）。
    :raises PayPalFetchError: 注文取得に失敗した場合。
    """
    if not order_id or not order_id.strip():
        raise ValueError("order_id is required.")

    settings = settings or get_paypal_settings()

    missing = settings.missing_credentials()
    if missing:
        raise PayPalConfigError(
            "PayPal credentials are not configured. Please set " + " and ".join(missing) + "."
        )

    client = client or PayPalClient(settings)

    # トークンは毎回取得し直す（キャッシュしない）
    access_token = client.get_access_token()
    raw_order = client.get_order(order_id, access_token)

    try:
        order = PayPalOrder.model_validate(raw_order)
    except ValidationError as exc:
        raise PayPalFetchError(f"Unexpected PayPal order payload: {exc}") from exc

    result = evaluate_order(
        order,
        order_id=order_id,
        expected_currency=settings.expected_currency,
        expected_fee=settings.expected_fee,
    )

    if not result.valid:
        logger.info(
            "PayPal order %s rejected: %s (%s)",
            order_id,
            result.reason.value if result.reason else None,
            result.error,
        )

    return result
