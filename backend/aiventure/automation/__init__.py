# backend/aiventure/automation/__init__.py

"""
定期実行ジョブ（cron トリガー）用モジュール群。
"""
