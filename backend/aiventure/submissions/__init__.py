# backend/aiventure/submissions/__init__.py

"""
フォーム送信（ニュースレター・お問い合わせ・広告掲載・ツール掲載申請）を扱うモジュール群。
"""
