# backend/aiventure/paypal/__init__.py

"""
PayPal 連携用モジュール群。

主な責務:
- client credentials でアクセストークンを取得する
- 注文（order）を取得し、掲載料の支払いが完了しているかを検証する
"""

from .verifier import verify_order  # noqa: F401
