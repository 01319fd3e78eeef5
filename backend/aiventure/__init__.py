# backend/aiventure/__init__.py

"""
Aiventure バックエンド。

AI 旅行ツールディレクトリサイト向けに、Notion（ツール・ブログ・掲載申請）と
PayPal（掲載料の支払い検証）をつなぐ HTTP ハンドラ群を提供する。
"""
