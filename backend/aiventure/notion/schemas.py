# backend/aiventure/notion/schemas.py

"""
Notion から取得したデータを公開 API で扱うためのスキーマ定義。

公開 API のフィールド名はフロントエンドに合わせて camelCase（alias）で出力する。
"""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Tool(BaseModel):
    """
    ツール一覧データベースの 1 レコードを表す公開モデル。
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., description="並び順に基づく 1 始まりの番号")
    notion_id: str = Field(..., alias="notionId", description="Notion ページ ID")
    name: str = "Unnamed"
    category: str = "Uncategorized"
    category_slug: str = Field("other", alias="categorySlug")
    description: str = ""
    features: List[str] = Field(default_factory=list)
    rating: float = 0
    reviews: int = 0
    pricing: str = "free"
    price_label: str = Field("Free", alias="priceLabel")
    icon: str = "🔧"
    travel_style: List[str] = Field(default_factory=list, alias="travelStyle")
    url: str = "#"
    featured: bool = False
    created_at: Optional[str] = Field(None, alias="createdAt")


class ToolFilters(BaseModel):
    """
    /api/tools のクエリパラメータ。値はクエリ文字列のまま受け取る。
    """

    category: Optional[str] = None
    pricing: Optional[str] = None
    featured: Optional[str] = None
    search: Optional[str] = None
    sort: Optional[str] = None
    limit: Optional[str] = None


class ToolListResponse(BaseModel):
    success: bool = True
    count: int
    source: str = "notion"
    data: List[Tool]


class ToolDetailResponse(BaseModel):
    success: bool = True
    data: Tool


class Category(BaseModel):
    id: str = Field(..., description="カテゴリ名のスラッグ")
    name: str
    icon: str
    count: int


class CategoryListResponse(BaseModel):
    success: bool = True
    data: List[Category]


class DirectoryStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_tools: int = Field(..., alias="totalTools")
    total_reviews: int = Field(..., alias="totalReviews")
    categories: int
    # 1 件もない場合は 0、それ以外は小数 1 桁の文字列（例: "4.5"）
    avg_rating: Union[str, int] = Field(..., alias="avgRating")
    last_updated: datetime = Field(..., alias="lastUpdated")


class DirectoryStatsResponse(BaseModel):
    success: bool = True
    data: DirectoryStats


class SubmissionRecord(BaseModel):
    """
    支払い検証済みの掲載申請。Notion の申請データベースに 1 ページとして作成する。
    """

    tool_name: str
    tool_url: str
    category: str
    description: str
    contact_email: str
    order_id: str
    capture_id: str
    payer_email: Optional[str] = None
    amount: str = Field(..., description="掲載料（検証に使った文字列そのまま）")
    status: str = "Pending Review"
