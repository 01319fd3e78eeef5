# backend/aiventure/notion/service.py

"""
Notion クライアントと公開 API 用スキーマをつなぐサービス層。

- ツール一覧の query 組み立て（filter / sorts）
- Notion API レスポンス → Tool への変換
- 取得後の検索・件数制限
- カテゴリ集計・統計情報
- 掲載申請ページの作成
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .client import NotionClient
from .properties import multi_select_names, number, plain_text, select_name
from .schemas import Category, DirectoryStats, SubmissionRecord, Tool, ToolFilters

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
PAGE_SIZE = 100

PRICING_MAP = {"free": "Free", "freemium": "Freemium", "paid": "Paid"}

SORT_MAP: Dict[str, List[Dict[str, str]]] = {
    "rating": [{"property": "Rating", "direction": "descending"}],
    "reviews": [{"property": "Reviews", "direction": "descending"}],
    "name": [{"property": "Name", "direction": "ascending"}],
    "newest": [{"timestamp": "created_time", "direction": "descending"}],
}
DEFAULT_SORT = "reviews"

CATEGORY_ICONS = {
    "Trip Planning": "🗺️",
    "Local Guides": "📍",
    "Flights & Hotels": "✈️",
    "Road Trip Planning": "🚗",
    "Luxury Travel": "💎",
    "Group Travel": "👥",
    "Adventure Travel": "🏕️",
    "Points & Rewards": "🎁",
}
DEFAULT_CATEGORY_ICON = "📦"


class SubmissionsNotConfiguredError(RuntimeError):
    """SUBMISSIONS_DATABASE_ID が未設定で掲載申請を保存できない場合の例外。"""


def slugify(name: str) -> str:
    """カテゴリ名を小文字化し、空白の連続を '-' に置き換える。"""
    return re.sub(r"\s+", "-", name.lower())


def transform_tool(page: Dict[str, Any], index: int) -> Tool:
    """
    Notion ページ 1 件を Tool に変換する。欠けている値はデフォルトで埋める。
    """
    props: Dict[str, Any] = page.get("properties", {}) or {}

    category = select_name(props.get("Category", {}))
    pricing = select_name(props.get("Pricing", {}))
    website = (props.get("Website URL") or {}).get("url")
    featured = (props.get("Featured") or {}).get("checkbox")

    return Tool(
        id=index + 1,
        notion_id=page.get("id", ""),
        name=plain_text(props.get("Name", {}), "title") or "Unnamed",
        category=category or "Uncategorized",
        category_slug=slugify(category or "other"),
        description=plain_text(props.get("Description", {}), "rich_text") or "",
        features=multi_select_names(props.get("Features", {})),
        rating=number(props.get("Rating", {})) or 0,
        reviews=int(number(props.get("Reviews", {})) or 0),
        pricing=(pricing or "free").lower(),
        price_label=plain_text(props.get("Price Text", {}), "rich_text") or "Free",
        icon=plain_text(props.get("Icon", {}), "rich_text") or "🔧",
        travel_style=multi_select_names(props.get("Travel Style", {})),
        url=website if isinstance(website, str) and website else "#",
        featured=featured is True,
        created_at=page.get("created_time"),
    )


def build_tools_query(filters: ToolFilters) -> Dict[str, Any]:
    """
    ToolFilters から Notion の database query ボディを組み立てる。

    条件が 1 つならそのまま、2 つ以上なら and でまとめる。
    """
    body: Dict[str, Any] = {"page_size": PAGE_SIZE}

    conditions: List[Dict[str, Any]] = []
    if filters.category:
        conditions.append({"property": "Category", "select": {"equals": filters.category}})
    if filters.pricing:
        conditions.append(
            {
                "property": "Pricing",
                "select": {"equals": PRICING_MAP.get(filters.pricing, filters.pricing)},
            }
        )
    if filters.featured == "true":
        conditions.append({"property": "Featured", "checkbox": {"equals": True}})

    if len(conditions) == 1:
        body["filter"] = conditions[0]
    elif len(conditions) > 1:
        body["filter"] = {"and": conditions}

    body["sorts"] = SORT_MAP.get(filters.sort or "", SORT_MAP[DEFAULT_SORT])
    return body


def parse_limit(raw: Optional[str]) -> int:
    """
    limit クエリを整数として解釈する。先頭の数字部分だけを見て、
    解釈できない場合や 0 の場合は DEFAULT_LIMIT を返す。
    """
    if raw is None:
        return DEFAULT_LIMIT
    match = re.match(r"\s*([+-]?\d+)", raw)
    if not match:
        return DEFAULT_LIMIT
    return int(match.group(1)) or DEFAULT_LIMIT


def search_tools(tools: List[Tool], query: str) -> List[Tool]:
    """名前・説明・機能タグに対する大文字小文字を区別しない部分一致検索。"""
    q = query.lower()
    return [
        t
        for t in tools
        if q in t.name.lower()
        or q in t.description.lower()
        or any(q in f.lower() for f in t.features)
    ]


class NotionService:
    """
    NotionClient を利用して、公開 API に対して扱いやすいモデルを返すサービス。
    """

    def __init__(self, client: Optional[NotionClient] = None) -> None:
        self.client = client or NotionClient()

    def fetch_tools(self, filters: Optional[ToolFilters] = None) -> List[Tool]:
        """
        ツール一覧を取得し、検索・件数制限を適用して返す。
        """
        filters = filters or ToolFilters()
        query = build_tools_query(filters)
        pages = self.client.query_database(self.client.config.tools_database_id, query)

        tools = [transform_tool(page, index) for index, page in enumerate(pages)]

        if filters.search:
            tools = search_tools(tools, filters.search)

        return tools[: parse_limit(filters.limit)]

    def get_tool(self, tool_id: int) -> Optional[Tool]:
        """
        既定の並び順での番号（id）からツールを 1 件探す。見つからなければ None。
        """
        tools = self.fetch_tools(ToolFilters(limit=str(PAGE_SIZE)))
        for tool in tools:
            if tool.id == tool_id:
                return tool
        return None

    def fetch_categories(self) -> List[Category]:
        """
        ツールをカテゴリごとに数え上げる。並びは最初に出現した順。
        """
        tools = self.fetch_tools(ToolFilters(limit=str(PAGE_SIZE)))

        counts: Dict[str, int] = {}
        for tool in tools:
            counts[tool.category] = counts.get(tool.category, 0) + 1

        return [
            Category(
                id=slugify(name),
                name=name,
                icon=CATEGORY_ICONS.get(name, DEFAULT_CATEGORY_ICON),
                count=count,
            )
            for name, count in counts.items()
        ]

    def fetch_stats(self, now: Optional[datetime] = None) -> DirectoryStats:
        """
        ツール件数・レビュー総数・カテゴリ数・平均評価をまとめる。
        """
        tools = self.fetch_tools(ToolFilters(limit=str(PAGE_SIZE)))

        total_reviews = sum(t.reviews for t in tools)
        if tools:
            avg_rating: Any = f"{sum(t.rating for t in tools) / len(tools):.1f}"
        else:
            avg_rating = 0

        return DirectoryStats(
            total_tools=len(tools),
            total_reviews=total_reviews,
            categories=len({t.category for t in tools}),
            avg_rating=avg_rating,
            last_updated=now or datetime.now(timezone.utc),
        )

    def create_submission(self, record: SubmissionRecord) -> str:
        """
        掲載申請を申請データベースにページとして作成し、ページ ID を返す。

        呼び出し側は支払い検証が valid の場合にのみこのメソッドを呼ぶこと。
        同じ注文 ID での重複作成は防いでいない。
        """
        database_id = self.client.config.submissions_database_id
        if not database_id:
            raise SubmissionsNotConfiguredError(
                "SUBMISSIONS_DATABASE_ID is not set; cannot store tool submissions."
            )

        page = self.client.create_page(database_id, build_submission_properties(record))
        page_id = page.get("id", "")
        logger.info(
            "Created submission page %s for order %s (capture %s)",
            page_id,
            record.order_id,
            record.capture_id,
        )
        return page_id


def _rich_text(value: str) -> Dict[str, Any]:
    return {"rich_text": [{"text": {"content": value}}]}


def build_submission_properties(record: SubmissionRecord) -> Dict[str, Any]:
    """
    SubmissionRecord を Notion のページプロパティ形式に変換する。
    """
    properties: Dict[str, Any] = {
        "Tool Name": {"title": [{"text": {"content": record.tool_name}}]},
        "Website URL": {"url": record.tool_url},
        "Category": {"select": {"name": record.category}},
        "Description": _rich_text(record.description),
        "Contact Email": {"email": record.contact_email},
        "Order ID": _rich_text(record.order_id),
        "Capture ID": _rich_text(record.capture_id),
        "Amount": {"number": float(record.amount)},
        "Status": {"select": {"name": record.status}},
    }
    if record.payer_email:
        properties["Payer Email"] = {"email": record.payer_email}
    return properties
