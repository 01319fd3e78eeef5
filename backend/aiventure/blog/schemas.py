# backend/aiventure/blog/schemas.py

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BlogPost(BaseModel):
    """
    ブログデータベースの 1 レコード（本文は含まない）。
    """

    model_config = ConfigDict(populate_by_name=True)

    notion_id: str = Field(..., alias="notionId")
    title: str = "Untitled"
    slug: str
    excerpt: str = ""
    author: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    published_on: Optional[date] = Field(None, alias="date")


class BlogPostListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[BlogPost]
