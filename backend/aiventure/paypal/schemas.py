# backend/aiventure/paypal/schemas.py

"""
PayPal Orders API のレスポンスと、注文検証結果のスキーマ定義。

PayPal のレスポンスは snake_case なので、フィールド名はそのまま合わせる。
金額 (amount.value) は Decimal に変換せず、受け取った文字列のまま保持する。
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class Money(BaseModel):
    value: Optional[str] = None
    currency_code: Optional[str] = None


class Capture(BaseModel):
    """注文に対する実際の入金記録（capture）。"""

    id: Optional[str] = None
    status: Optional[str] = None
    amount: Optional[Money] = None


class Payments(BaseModel):
    captures: List[Capture] = Field(default_factory=list)


class PurchaseUnit(BaseModel):
    reference_id: Optional[str] = None
    payments: Optional[Payments] = None


class Payer(BaseModel):
    email_address: Optional[str] = None


class PayPalOrder(BaseModel):
    """
    GET /v2/checkout/orders/{id} のレスポンスのうち、検証に必要な部分だけを表すモデル。
    """

    id: Optional[str] = None
    status: Optional[str] = None
    purchase_units: List[PurchaseUnit] = Field(default_factory=list)
    payer: Optional[Payer] = None


class RejectionReason(str, Enum):
    """
    検証が通らなかった理由。エラーではなく「不正な注文」という通常の結果として扱う。
    """

    STATUS_NOT_COMPLETED = "status_not_completed"
    NO_CAPTURE = "no_capture"
    UNSUPPORTED_ORDER_SHAPE = "unsupported_order_shape"
    CURRENCY_MISMATCH = "currency_mismatch"
    AMOUNT_MISMATCH = "amount_mismatch"


class VerificationResult(BaseModel):
    """
    verify_order() の戻り値。永続化はしない。

    valid=False の場合は reason / error に理由が入る。
    valid=True の場合は capture_id が必ず入り、payer_email は任意。
    """

    valid: bool = Field(..., description="掲載料の支払いとして受け付けてよいか")
    order_id: str = Field(..., description="検証対象の PayPal 注文 ID")
    reason: Optional[RejectionReason] = Field(
        None,
        description="不受理の理由コード（valid=True の場合は None）",
    )
    error: Optional[str] = Field(
        None,
        description="利用者にそのまま返してよい不受理理由の説明文",
    )
    capture_id: Optional[str] = Field(None, description="PayPal capture ID")
    payer_email: Optional[str] = Field(None, description="支払者のメールアドレス")

    @classmethod
    def rejected(
        cls,
        order_id: str,
        reason: RejectionReason,
        error: str,
    ) -> "VerificationResult":
        return cls(valid=False, order_id=order_id, reason=reason, error=error)
