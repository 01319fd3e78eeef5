# backend/aiventure/notion/properties.py

"""
Notion のページプロパティから値を取り出すヘルパー群。

欠けている値・想定外の型には None / 空リストを返し、例外は投げない。
"""

from datetime import date
from typing import Any, Dict, List, Optional


def plain_text(prop: Dict[str, Any], key: str) -> Optional[str]:
    """
    title / rich_text プロパティの先頭要素から plain_text を取り出す。
    """
    items = (prop or {}).get(key)
    if isinstance(items, list) and items:
        first = items[0]
        if isinstance(first, dict):
            text = first.get("plain_text")
            if isinstance(text, str):
                return text
    return None


def select_name(prop: Dict[str, Any]) -> Optional[str]:
    """
    select プロパティから name を抽出する。
    """
    select = (prop or {}).get("select")
    if isinstance(select, dict):
        name = select.get("name")
        if isinstance(name, str):
            return name
    return None


def multi_select_names(prop: Dict[str, Any]) -> List[str]:
    options = (prop or {}).get("multi_select")
    if not isinstance(options, list):
        return []
    return [o["name"] for o in options if isinstance(o, dict) and isinstance(o.get("name"), str)]


def number(prop: Dict[str, Any]) -> Optional[float]:
    value = (prop or {}).get("number")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return None


def date_start(prop: Dict[str, Any]) -> Optional[date]:
    """
    date プロパティの start を date として返す。日時が入っていても日付部分だけを使う。
    """
    value = (prop or {}).get("date")
    if not isinstance(value, dict):
        return None

    start = value.get("start")
    if not isinstance(start, str):
        return None

    try:
        return date.fromisoformat(start[:10])
    except ValueError:
        return None
