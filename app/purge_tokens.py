"""
Drop session-denylist rows for tokens that have expired on their own.

A revoked token only needs its denylist row until its `exp` passes; after that
the signer rejects it anyway. Schedule it next to the app, e.g. hourly:

  0 * * * * cd /path/to/quillpost && .venv/bin/python -m app.purge_tokens

Pass --dry-run to report how many rows are due without deleting them.
"""

import argparse
import logging
import sys

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.services.auth import count_expired_revocations, purge_expired_revocations

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Purge expired rows from the Quillpost session denylist.")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only count the rows that would be deleted",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=get_settings().LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )

    db = SessionLocal()
    try:
        if args.dry_run:
            logger.info("Denylist rows due for purge: %s", count_expired_revocations(db))
        else:
            logger.info("Denylist purge done: rows_deleted=%s", purge_expired_revocations(db))
    except Exception:
        logger.exception("Denylist purge failed")
        return 1
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
