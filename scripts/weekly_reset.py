"""
Weekly reminder job. Schedule it for Monday 00:00 in WEEKLY_RESET_TIMEZONE.
"""

from __future__ import annotations

import logging
import sys

from tilawah import create_app
from tilawah.context import get_context
from tilawah.triggers import weekly_auto_reset


def main() -> None:
    """Main entry point for the weekly reset job."""
    logging.basicConfig(level=logging.INFO)
    app = create_app()

    try:
        ctx = get_context(app.config["DISPATCH_MAX_WORKERS"])
        summary = weekly_auto_reset(ctx, tz=app.config["WEEKLY_RESET_TIMEZONE"])
    except Exception as e:
        print(f"\nWeekly reset failed: {e}")
        sys.exit(1)

    print(
        f"Week {summary.week_id}: processed {summary.processed} groups, "
        f"reminded {len(summary.reminded)}, failed {len(summary.failed)}."
    )
    if summary.failed:
        print(f"Failed groups: {', '.join(summary.failed)}")


if __name__ == "__main__":
    main()
