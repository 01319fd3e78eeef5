# backend/aiventure/notion/client.py

"""
Notion API との通信を担当するクライアントモジュール。
"""

from typing import Any, Dict, List, Optional

import httpx

from .config import NotionConfig, get_notion_config


class NotionClientError(RuntimeError):
    """Notion クライアント全般の例外。"""


class NotionAuthError(NotionClientError):
    """認証・権限関連のエラー。"""


class NotionAPIError(NotionClientError):
    """その他 Notion API 呼び出し時のエラー。"""


class NotionClient:
    """
    Notion API の薄いラッパークライアント。

    - データベースの query
    - ページの作成（掲載申請）
    - ブロック子要素の取得（ブログ本文）
    """

    def __init__(self, config: Optional[NotionConfig] = None) -> None:
        self.config = config or get_notion_config()

    @property
    def timeout(self) -> float:
        return self.config.timeout_seconds

    def _build_headers(self) -> Dict[str, str]:
        """
        Notion API 呼び出しに必要なヘッダーを構築。
        """
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Notion-Version": self.config.api_version,
            "Content-Type": "application/json",
        }

    def _raise_for_status(self, response: httpx.Response) -> None:
        """
        HTTP レスポンスコードに応じて適切な例外を投げる。

        Notion はエラー時に {"object": "error", "message": ...} を返すので、
        message があればそれを例外メッセージに使う。
        """
        if response.status_code == 401:
            raise NotionAuthError("Unauthorized. Check NOTION_API_KEY.")
        if response.status_code == 403:
            raise NotionAuthError("Forbidden. Check Notion integration permissions.")
        if response.status_code >= 400:
            message = None
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("object") == "error":
                message = body.get("message")
            raise NotionAPIError(
                f"Notion API error: {response.status_code} {message or response.text}"
            )

    def _json(self, response: httpx.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            raise NotionAPIError("Notion API returned a non-JSON response.") from exc
        if not isinstance(data, dict):
            raise NotionAPIError("Unexpected Notion API response format.")
        return data

    def _results(self, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        results = data.get("results", [])
        if not isinstance(results, list):
            raise NotionAPIError("Unexpected Notion API response format: 'results' is not a list.")
        return results

    def query_database(
        self,
        database_id: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        """
        データベースを query し、Notion API の生のページオブジェクトのリストを返す。

        payload には filter / sorts / page_size をそのまま渡す。
        上位レイヤー（service.py）で内部モデルに変換する。
        """
        url = f"{self.config.api_base_url}/databases/{database_id}/query"

        try:
            response = httpx.post(
                url,
                headers=self._build_headers(),
                json=payload or {},
                timeout=self.timeout,
            )
        except httpx.RequestError as exc:
            raise NotionClientError(f"Failed to call Notion API: {exc}") from exc

        self._raise_for_status(response)
        return self._results(self._json(response))

    def create_page(self, database_id: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        """
        データベースにページを 1 件作成し、作成されたページオブジェクトを返す。
        """
        url = f"{self.config.api_base_url}/pages"

        body = {
            "parent": {"database_id": database_id},
            "properties": properties,
        }

        try:
            response = httpx.post(
                url,
                headers=self._build_headers(),
                json=body,
                timeout=self.timeout,
            )
        except httpx.RequestError as exc:
            raise NotionClientError(f"Failed to create Notion page: {exc}") from exc

        self._raise_for_status(response)
        return self._json(response)

    def list_block_children(self, block_id: str) -> List[Dict[str, Any]]:
        """
        ページ（ブロック）の子ブロックを先頭 100 件まで取得する。
        """
        url = f"{self.config.api_base_url}/blocks/{block_id}/children"

        try:
            response = httpx.get(
                url,
                headers=self._build_headers(),
                params={"page_size": 100},
                timeout=self.timeout,
            )
        except httpx.RequestError as exc:
            raise NotionClientError(f"Failed to fetch Notion blocks: {exc}") from exc

        self._raise_for_status(response)
        return self._results(self._json(response))
