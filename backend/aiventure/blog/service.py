# backend/aiventure/blog/service.py

"""
ブログ記事の取得と、本文ブロックを HTML テンプレート向けの構造に変換するサービス層。

対応ブロック: paragraph / heading_1..3 / bulleted_list_item / numbered_list_item /
quote / code / divider。それ以外のブロックは読み飛ばす。
"""

import logging
from typing import Any, Dict, List, Optional

from aiventure.notion.client import NotionClient
from aiventure.notion.properties import date_start, multi_select_names, plain_text

from .schemas import BlogPost

logger = logging.getLogger(__name__)

TEXT_BLOCKS = {"paragraph", "heading_1", "heading_2", "heading_3", "quote", "code"}
LIST_BLOCKS = {
    "bulleted_list_item": "bulleted_list",
    "numbered_list_item": "numbered_list",
}


def transform_post(page: Dict[str, Any]) -> Optional[BlogPost]:
    """
    Notion ページを BlogPost に変換する。Slug が空の記事は URL を作れないので None。
    """
    props: Dict[str, Any] = page.get("properties", {}) or {}

    slug = plain_text(props.get("Slug", {}), "rich_text")
    if not slug:
        return None

    return BlogPost(
        notion_id=page.get("id", ""),
        title=plain_text(props.get("Title", {}), "title") or "Untitled",
        slug=slug,
        excerpt=plain_text(props.get("Excerpt", {}), "rich_text") or "",
        author=plain_text(props.get("Author", {}), "rich_text"),
        tags=multi_select_names(props.get("Tags", {})),
        published_on=date_start(props.get("Date", {})),
    )


def rich_text_segments(items: Any) -> List[Dict[str, Any]]:
    """
    rich_text 配列をテンプレートで描画しやすい segment のリストにする。
    エスケープはテンプレート側（autoescape）に任せる。
    """
    if not isinstance(items, list):
        return []

    segments: List[Dict[str, Any]] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        text = item.get("plain_text")
        if not isinstance(text, str):
            continue
        annotations = item.get("annotations") or {}
        href = item.get("href")
        segments.append(
            {
                "text": text,
                "href": href if isinstance(href, str) else None,
                "bold": bool(annotations.get("bold")),
                "italic": bool(annotations.get("italic")),
                "code": bool(annotations.get("code")),
            }
        )
    return segments


def build_content_nodes(blocks: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Notion ブロックのリストをテンプレート用ノードのリストに変換する。

    連続する list item は 1 つの bulleted_list / numbered_list ノードにまとめる。
    """
    nodes: List[Dict[str, Any]] = []

    for block in blocks:
        block_type = block.get("type")
        payload = block.get(block_type) if isinstance(block_type, str) else None

        if block_type == "divider":
            nodes.append({"type": "divider"})
            continue

        if not isinstance(payload, dict):
            continue

        segments = rich_text_segments(payload.get("rich_text"))

        if block_type in LIST_BLOCKS:
            list_type = LIST_BLOCKS[block_type]
            if nodes and nodes[-1]["type"] == list_type:
                nodes[-1]["entries"].append(segments)
            else:
                nodes.append({"type": list_type, "entries": [segments]})
            continue

        if block_type in TEXT_BLOCKS:
            node: Dict[str, Any] = {"type": block_type, "segments": segments}
            if block_type == "code":
                node["language"] = payload.get("language") or ""
            nodes.append(node)
            continue

        logger.debug("Skipping unsupported Notion block type %s", block_type)

    return nodes


class BlogService:
    """
    ブログデータベースから公開済み記事を取得するサービス。

    BLOG_DATABASE_ID が未設定の場合は記事 0 件として扱う。
    """

    def __init__(self, client: Optional[NotionClient] = None) -> None:
        self.client = client or NotionClient()

    @property
    def database_id(self) -> Optional[str]:
        return self.client.config.blog_database_id

    def _query(self, extra_filter: Optional[Dict[str, Any]] = None) -> List[BlogPost]:
        if not self.database_id:
            return []

        published = {"property": "Published", "checkbox": {"equals": True}}
        payload: Dict[str, Any] = {
            "page_size": 100,
            "filter": {"and": [published, extra_filter]} if extra_filter else published,
            "sorts": [{"property": "Date", "direction": "descending"}],
        }

        pages = self.client.query_database(self.database_id, payload)
        posts = [transform_post(page) for page in pages]
        return [post for post in posts if post is not None]

    def fetch_posts(self) -> List[BlogPost]:
        """公開済みの記事を新しい順に返す。"""
        return self._query()

    def get_post(self, slug: str) -> Optional[BlogPost]:
        """Slug が完全一致する公開済み記事を返す。なければ None。"""
        posts = self._query({"property": "Slug", "rich_text": {"equals": slug}})
        for post in posts:
            if post.slug == slug:
                return post
        return None

    def get_post_content(self, post: BlogPost) -> List[Dict[str, Any]]:
        """記事ページの本文ブロックを取得し、テンプレート用ノードに変換する。"""
        blocks = self.client.list_block_children(post.notion_id)
        return build_content_nodes(blocks)
