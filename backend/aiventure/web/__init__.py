# backend/aiventure/web/__init__.py

"""
サイト全体に関わる HTTP 処理（CORS・リダイレクト・静的ファイル）。
"""
