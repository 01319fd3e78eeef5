# backend/aiventure/automation/jobs.py
from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

DAILY_REFRESH_CRON = "0 0 * * *"
RATING_UPDATE_CRON = "0 */6 * * *"


def run_daily_refresh() -> None:
    """
    日次（0 時）のデータ更新ジョブ。

    現時点ではログ出力のみ。ツール一覧は毎回 Notion から取得しているため、
    ここで更新すべきローカルデータはない。
    """
    logger.info("Running daily data refresh...")


def run_rating_update() -> None:
    """
    6 時間ごとの評価・レビュー数更新ジョブ。現時点ではログ出力のみ。
    """
    logger.info("Running rating updates...")


JOBS: Dict[str, Callable[[], None]] = {
    DAILY_REFRESH_CRON: run_daily_refresh,
    RATING_UPDATE_CRON: run_rating_update,
}


def run_scheduled(cron: str) -> bool:
    """
    cron 式に対応するジョブを実行する。

    :return: 対応するジョブがあれば True、未知の cron 式なら False（warning ログのみ）
    """
    job: Optional[Callable[[], None]] = JOBS.get(cron)
    if job is None:
        logger.warning("No scheduled job registered for cron %r", cron)
        return False

    job()
    return True


def main() -> None:
    """
    簡易 CLI エントリーポイント。

    例:
        python -m aiventure.automation.jobs "0 0 * * *"
        python -m aiventure.automation.jobs "0 */6 * * *"
    """
    import argparse

    parser = argparse.ArgumentParser(description="Scheduled jobs runner")
    parser.add_argument(
        "cron",
        help="実行するジョブの cron 式",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not run_scheduled(args.cron):
        raise SystemExit(1)


if __name__ == "__main__":
    main()
