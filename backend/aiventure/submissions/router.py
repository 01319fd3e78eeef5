# backend/aiventure/submissions/router.py

"""
フォーム送信 API の FastAPI ルーター定義。

- POST /api/newsletter
- POST /api/contact
- POST /api/advertise
- POST /api/submit-tool  （PayPal 支払い検証 → Notion に申請ページ作成）
"""

import logging
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, status

from aiventure.notion.router import get_notion_service
from aiventure.notion.schemas import SubmissionRecord
from aiventure.notion.service import NotionService
from aiventure.paypal.client import PayPalAuthError, PayPalConfigError, PayPalFetchError
from aiventure.paypal.config import PayPalSettings, get_paypal_settings
from aiventure.paypal.schemas import VerificationResult
from aiventure.paypal.verifier import verify_order

from .schemas import (
    AdvertiseRequest,
    ContactRequest,
    MessageResponse,
    NewsletterRequest,
    SubmitToolRequest,
)
from .store import RecordStore, get_record_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["submissions"])

OrderVerifier = Callable[[str], VerificationResult]

PAYMENT_NOT_CONFIGURED = "Payment verification is not configured."
PAYMENT_FAILED = "Payment verification failed. Please contact support."


def get_order_verifier() -> OrderVerifier:
    """
    注文検証関数を返す。テストでは dependency_overrides で差し替える。
    """
    return verify_order


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


@router.post(
    "/newsletter",
    response_model=MessageResponse,
    response_model_exclude_none=True,
    summary="ニュースレター購読",
)
def subscribe_newsletter(
    body: NewsletterRequest,
    store: RecordStore = Depends(get_record_store),
) -> MessageResponse:
    if not body.email or "@" not in body.email:
        raise _bad_request("Valid email required")

    store.create("newsletter", {"email": body.email})
    return MessageResponse(message="Successfully subscribed to newsletter")


@router.post(
    "/contact",
    response_model=MessageResponse,
    response_model_exclude_none=True,
    summary="お問い合わせフォーム",
)
def submit_contact(
    body: ContactRequest,
    store: RecordStore = Depends(get_record_store),
) -> MessageResponse:
    if not body.name or not body.email or not body.message:
        raise _bad_request("Name, email, and message are required")

    store.create(
        "contact",
        {
            "name": body.name,
            "email": body.email,
            "subject": body.subject or "General Inquiry",
            "message": body.message,
        },
    )
    return MessageResponse(message="Message sent successfully")


@router.post(
    "/advertise",
    response_model=MessageResponse,
    response_model_exclude_none=True,
    summary="広告掲載の問い合わせ",
)
def submit_advertise(
    body: AdvertiseRequest,
    store: RecordStore = Depends(get_record_store),
) -> MessageResponse:
    if not body.company_name or not body.contact_email or not body.ad_type:
        raise _bad_request("Company name, email, and ad type are required")

    store.create("advertise", body.model_dump(by_alias=True))
    return MessageResponse(
        message="Advertising inquiry received. We will contact you within 24 hours."
    )


@router.post(
    "/submit-tool",
    response_model=MessageResponse,
    response_model_exclude_none=True,
    summary="有料のツール掲載申請",
    description="PayPal 注文を検証し、受理条件をすべて満たした場合のみ Notion に申請ページを作成する。",
)
def submit_tool(
    body: SubmitToolRequest,
    service: NotionService = Depends(get_notion_service),
    verifier: OrderVerifier = Depends(get_order_verifier),
    paypal_settings: PayPalSettings = Depends(get_paypal_settings),
) -> MessageResponse:
    """
    - 必須項目不足 → 400
    - 支払い検証の不受理 → 400（理由をそのまま返す）
    - PayPal / Notion の設定不備 → 500
    - PayPal との通信・認証失敗 → 502（詳細はログのみ）

    NOTE: 同じ orderId で複数回呼ばれた場合の重複排除は行っていない。
    """
    if not body.is_complete():
        raise _bad_request("All fields are required")

    # 支払い検証の前に保存先を確認する（検証後に保存できない状態を避ける）
    if not service.client.config.submissions_database_id:
        logger.error("SUBMISSIONS_DATABASE_ID is not set; refusing tool submission.")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Tool submissions are not configured.",
        )

    try:
        result = verifier(body.order_id)
    except PayPalConfigError as exc:
        logger.error("PayPal is not configured: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=PAYMENT_NOT_CONFIGURED,
        ) from exc
    except (PayPalAuthError, PayPalFetchError) as exc:
        logger.error("PayPal verification failed for order %s: %s", body.order_id, exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=PAYMENT_FAILED,
        ) from exc

    if not result.valid:
        raise _bad_request(result.error or "Payment could not be verified")

    record = SubmissionRecord(
        tool_name=body.tool_name,
        tool_url=body.tool_url,
        category=body.category,
        description=body.description,
        contact_email=body.contact_email,
        order_id=result.order_id,
        capture_id=result.capture_id,
        payer_email=result.payer_email,
        amount=paypal_settings.expected_fee,
    )

    try:
        submission_id = service.create_submission(record)
    except Exception as exc:  # noqa: BLE001
        logger.exception(
            "Payment %s verified (capture %s) but the submission could not be saved.",
            result.order_id,
            result.capture_id,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Payment verified but the submission could not be saved. Please contact support.",
        ) from exc

    return MessageResponse(
        message="Tool submitted for review",
        data={
            "submissionId": submission_id,
            "orderId": result.order_id,
            "captureId": result.capture_id,
        },
    )
