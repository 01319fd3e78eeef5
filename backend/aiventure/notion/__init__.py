# backend/aiventure/notion/__init__.py

"""
Notion 連携用モジュール群。

主な責務:
- ツール一覧データベースを検索し、公開 API 向けの Tool モデルに変換する
- カテゴリ集計・統計情報を組み立てる
- 支払い済みの掲載申請を申請データベースにページとして作成する
"""
