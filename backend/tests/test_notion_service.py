# backend/tests/test_notion_service.py

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from aiventure.notion.schemas import SubmissionRecord, ToolFilters
from aiventure.notion.service import (
    NotionService,
    SubmissionsNotConfiguredError,
    build_submission_properties,
    build_tools_query,
    parse_limit,
    transform_tool,
)


def _page(name, *, category=None, rating=None, reviews=None, features=(), description="", **extra):
    props = {
        "Name": {"title": [{"plain_text": name}]},
        "Description": {"rich_text": [{"plain_text": description}] if description else []},
        "Features": {"multi_select": [{"name": f} for f in features]},
        "Rating": {"number": rating},
        "Reviews": {"number": reviews},
    }
    if category:
        props["Category"] = {"select": {"name": category}}
    props.update(extra)
    return {"id": f"page-{name}", "created_time": "2025-01-01T00:00:00.000Z", "properties": props}


class DummyNotionClient:
    """
    実際の NotionClient の代わりに使用するテスト用クライアント。
    """

    def __init__(self, pages=None, submissions_database_id="subs-db") -> None:
        self.pages = pages or []
        self.queries = []
        self.created = []
        self.config = SimpleNamespace(
            tools_database_id="tools-db",
            submissions_database_id=submissions_database_id,
        )

    def query_database(self, database_id, payload=None):
        self.queries.append((database_id, payload))
        return self.pages

    def create_page(self, database_id, properties):
        self.created.append((database_id, properties))
        return {"id": "created-page"}


def test_transform_tool_fills_defaults():
    tool = transform_tool({"id": "p1", "properties": {}}, 0)

    assert tool.id == 1
    assert tool.notion_id == "p1"
    assert tool.name == "Unnamed"
    assert tool.category == "Uncategorized"
    assert tool.category_slug == "other"
    assert tool.pricing == "free"
    assert tool.price_label == "Free"
    assert tool.icon == "🔧"
    assert tool.url == "#"
    assert tool.featured is False
    assert tool.features == []


def test_transform_tool_maps_properties():
    page = _page(
        "Layla",
        category="Trip Planning",
        rating=4.8,
        reviews=2847,
        features=["Itinerary Planning"],
        description="AI planner",
        **{
            "Pricing": {"select": {"name": "Freemium"}},
            "Price Text": {"rich_text": [{"plain_text": "Free / $49/yr"}]},
            "Icon": {"rich_text": [{"plain_text": "🗺️"}]},
            "Travel Style": {"multi_select": [{"name": "Adventure"}]},
            "Website URL": {"url": "https://layla.ai"},
            "Featured": {"checkbox": True},
        },
    )

    tool = transform_tool(page, 4)
    dumped = tool.model_dump(by_alias=True)

    assert tool.id == 5
    assert dumped["categorySlug"] == "trip-planning"
    assert dumped["priceLabel"] == "Free / $49/yr"
    assert dumped["travelStyle"] == ["Adventure"]
    assert dumped["createdAt"] == "2025-01-01T00:00:00.000Z"
    assert tool.pricing == "freemium"
    assert tool.url == "https://layla.ai"
    assert tool.featured is True
    assert tool.reviews == 2847


def test_build_tools_query_single_condition_is_not_wrapped():
    body = build_tools_query(ToolFilters(category="Trip Planning"))

    assert body["filter"] == {"property": "Category", "select": {"equals": "Trip Planning"}}
    assert body["page_size"] == 100


def test_build_tools_query_multiple_conditions_use_and():
    body = build_tools_query(ToolFilters(pricing="freemium", featured="true"))

    assert body["filter"] == {
        "and": [
            {"property": "Pricing", "select": {"equals": "Freemium"}},
            {"property": "Featured", "checkbox": {"equals": True}},
        ]
    }


def test_build_tools_query_unknown_pricing_passes_through():
    body = build_tools_query(ToolFilters(pricing="Enterprise"))

    assert body["filter"]["select"]["equals"] == "Enterprise"


def test_build_tools_query_featured_must_be_literal_true():
    body = build_tools_query(ToolFilters(featured="1"))

    assert "filter" not in body


@pytest.mark.parametrize(
    "sort, expected",
    [
        (None, [{"property": "Reviews", "direction": "descending"}]),
        ("bogus", [{"property": "Reviews", "direction": "descending"}]),
        ("rating", [{"property": "Rating", "direction": "descending"}]),
        ("name", [{"property": "Name", "direction": "ascending"}]),
        ("newest", [{"timestamp": "created_time", "direction": "descending"}]),
    ],
)
def test_build_tools_query_sorts(sort, expected):
    assert build_tools_query(ToolFilters(sort=sort))["sorts"] == expected


@pytest.mark.parametrize(
    "raw, expected",
    [(None, 50), ("", 50), ("abc", 50), ("0", 50), ("10", 10), ("7px", 7)],
)
def test_parse_limit(raw, expected):
    assert parse_limit(raw) == expected


def test_fetch_tools_applies_search_and_limit():
    pages = [
        _page("Layla", description="Itinerary generator"),
        _page("Wonderplan", features=["Offline Mode"]),
        _page("GuideGeek", description="Budget guide"),
    ]
    client = DummyNotionClient(pages)
    service = NotionService(client=client)

    found = service.fetch_tools(ToolFilters(search="OFFLINE"))
    limited = service.fetch_tools(ToolFilters(limit="2"))

    assert [t.name for t in found] == ["Wonderplan"]
    assert [t.name for t in limited] == ["Layla", "Wonderplan"]
    assert client.queries[0][0] == "tools-db"


def test_get_tool_by_position():
    service = NotionService(client=DummyNotionClient([_page("A"), _page("B")]))

    assert service.get_tool(2).name == "B"
    assert service.get_tool(3) is None


def test_fetch_categories_counts_and_icons():
    pages = [
        _page("A", category="Trip Planning"),
        _page("B", category="Trip Planning"),
        _page("C", category="Space Travel"),
    ]
    service = NotionService(client=DummyNotionClient(pages))

    categories = service.fetch_categories()

    assert [(c.id, c.name, c.icon, c.count) for c in categories] == [
        ("trip-planning", "Trip Planning", "🗺️", 2),
        ("space-travel", "Space Travel", "📦", 1),
    ]


def test_fetch_stats():
    pages = [
        _page("A", category="Trip Planning", rating=5.0, reviews=10),
        _page("B", category="Local Guides", rating=4.0, reviews=5),
    ]
    now = datetime(2025, 1, 2, tzinfo=timezone.utc)
    service = NotionService(client=DummyNotionClient(pages))

    stats = service.fetch_stats(now=now)

    assert stats.total_tools == 2
    assert stats.total_reviews == 15
    assert stats.categories == 2
    assert stats.avg_rating == "4.5"
    assert stats.last_updated == now


def test_fetch_stats_empty_directory():
    stats = NotionService(client=DummyNotionClient([])).fetch_stats()

    assert stats.total_tools == 0
    assert stats.avg_rating == 0


def _record(**overrides) -> SubmissionRecord:
    values = dict(
        tool_name="Layla",
        tool_url="https://layla.ai",
        category="Trip Planning",
        description="AI planner",
        contact_email="owner@layla.ai",
        order_id="ORDER-1",
        capture_id="CAPTURE-1",
        payer_email="buyer@example.com",
        amount="49.00",
    )
    values.update(overrides)
    return SubmissionRecord(**values)


def test_create_submission_writes_page_to_submissions_database():
    client = DummyNotionClient()

    page_id = NotionService(client=client).create_submission(_record())

    database_id, properties = client.created[0]
    assert page_id == "created-page"
    assert database_id == "subs-db"
    assert properties["Status"] == {"select": {"name": "Pending Review"}}
    assert properties["Amount"] == {"number": 49.0}
    assert properties["Capture ID"]["rich_text"][0]["text"]["content"] == "CAPTURE-1"
    assert properties["Payer Email"] == {"email": "buyer@example.com"}


def test_create_submission_requires_database():
    client = DummyNotionClient(submissions_database_id=None)

    with pytest.raises(SubmissionsNotConfiguredError):
        NotionService(client=client).create_submission(_record())

    assert client.created == []


def test_submission_properties_omit_missing_payer_email():
    properties = build_submission_properties(_record(payer_email=None))

    assert "Payer Email" not in properties
