# backend/aiventure/submissions/schemas.py

"""
フォーム送信 API のリクエスト／レスポンススキーマ。

必須チェックは API ごとにエラーメッセージが異なるため、
フィールドはすべて Optional で受けてルーター側で判定する。
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class NewsletterRequest(BaseModel):
    email: Optional[str] = None


class ContactRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None


class AdvertiseRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    company_name: Optional[str] = Field(None, alias="companyName")
    contact_email: Optional[str] = Field(None, alias="contactEmail")
    ad_type: Optional[str] = Field(None, alias="adType")
    budget: Optional[str] = None
    message: Optional[str] = None


class SubmitToolRequest(BaseModel):
    """
    /api/submit-tool のリクエストボディ。orderId は支払い完了後に PayPal から受け取った注文 ID。
    """

    model_config = ConfigDict(populate_by_name=True)

    tool_name: Optional[str] = Field(None, alias="toolName")
    tool_url: Optional[str] = Field(None, alias="toolUrl")
    category: Optional[str] = None
    description: Optional[str] = None
    contact_email: Optional[str] = Field(None, alias="contactEmail")
    order_id: Optional[str] = Field(None, alias="orderId")

    def is_complete(self) -> bool:
        """空白だけの値は未入力として扱う。"""
        values = [
            self.tool_name,
            self.tool_url,
            self.category,
            self.description,
            self.contact_email,
            self.order_id,
        ]
        return all(value and value.strip() for value in values)


class MessageResponse(BaseModel):
    success: bool = True
    message: str
    data: Optional[Dict[str, Any]] = None
