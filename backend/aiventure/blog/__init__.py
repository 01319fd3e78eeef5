# backend/aiventure/blog/__init__.py

"""
Notion のブログデータベースを読み取り、記事ページを HTML として返すモジュール群。
"""
