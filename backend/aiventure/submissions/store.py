# backend/aiventure/submissions/store.py

"""
フォーム送信レコードの保存先インターフェースと最小実装。

- RecordStore: create / list だけを持つ保存先の Protocol
- InMemoryRecordStore: アプリケーションインスタンスが所有するメモリ上の実装

保存先はモジュールのグローバル変数ではなく app.state に持たせ、
ハンドラには Depends(get_record_store) で注入する。
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Protocol

from fastapi import Request


class RecordStore(Protocol):
    """
    フォーム送信レコード保存先の最小インターフェース。

    kind はレコードの種類（"newsletter" / "contact" / "advertise" など）。
    """

    def create(self, kind: str, record: Dict[str, Any]) -> Dict[str, Any]:  # pragma: no cover - Protocol
        ...

    def list(self, kind: str) -> List[Dict[str, Any]]:  # pragma: no cover - Protocol
        ...


class InMemoryRecordStore:
    """
    プロセス内メモリにレコードを保持する実装。再起動で消える。
    """

    def __init__(self) -> None:
        self._records: Dict[str, List[Dict[str, Any]]] = {}

    def create(self, kind: str, record: Dict[str, Any]) -> Dict[str, Any]:
        stored = {
            "id": uuid.uuid4().hex,
            **record,
            "submittedAt": datetime.now(timezone.utc).isoformat(),
        }
        self._records.setdefault(kind, []).append(stored)
        return stored

    def list(self, kind: str) -> List[Dict[str, Any]]:
        return list(self._records.get(kind, []))


def get_record_store(request: Request) -> RecordStore:
    """
    create_app() が app.state に登録した RecordStore を返す。
    """
    return request.app.state.record_store
