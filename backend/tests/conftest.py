# backend/tests/conftest.py
"""
Pytest configuration for Aiventure backend tests.

- Ensures that the project root (backend/) is added to sys.path
  so that `import aiventure.*` works correctly in tests.
- Ensures required environment variables for tests are set
  with safe dummy values (e.g., NOTION_API_KEY).
- Clears cached settings between tests so monkeypatched env vars take effect.
"""

import os
import sys
from pathlib import Path

import pytest


def _ensure_project_root_in_sys_path() -> None:
    # This file is located at: backend/tests/conftest.py
    # parents[1] -> backend/
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)

    if project_root_str not in sys.path:
        # Insert at the beginning so it has priority over site-packages, etc.
        sys.path.insert(0, project_root_str)


def _ensure_test_env_vars() -> None:
    """
    Set dummy environment variables required for tests.

    These values are only for local testing and do NOT contain real secrets.
    PayPal credentials are deliberately left unset; tests that need them
    build PayPalSettings explicitly or use monkeypatch.
    """
    os.environ.setdefault("NOTION_API_KEY", "dummy-notion-api-key-for-tests")
    os.environ.setdefault("TOOLS_DATABASE_ID", "dummy-tools-db-for-tests")


_ensure_project_root_in_sys_path()
_ensure_test_env_vars()


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    from aiventure.notion.config import get_notion_config
    from aiventure.paypal.config import get_paypal_settings
    from aiventure.web.settings import get_site_settings

    for loader in (get_notion_config, get_paypal_settings, get_site_settings):
        loader.cache_clear()
    yield
    for loader in (get_notion_config, get_paypal_settings, get_site_settings):
        loader.cache_clear()
