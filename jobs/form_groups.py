"""
Study group formation background job.

Runs one formation pass: buckets every ungrouped person by availability and
marks each bucketed person as grouped. Safe to re-run; people grouped by an
earlier (or concurrent) pass are left alone.

Usage:
    Run via CRON:
        */30 * * * * cd /path/to/project && python -m jobs.form_groups

    Or run directly:
        python -m jobs.form_groups
"""

import asyncio
import logging
import sys

from common.database import MongoDB
from common.utils.exceptions import APIException
from studygroups.config import settings
from studygroups.database.queries import signature_values
from studygroups.dependencies import get_grouping_service, get_profile_store, init_services

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


async def main():
    """Main entry point for the group formation job."""
    settings.validate_required()
    if settings.DEBUG:
        logging.getLogger().setLevel(logging.DEBUG)

    db = MongoDB()
    await db.connect(uri=settings.MONGODB_URI, database_name=settings.MONGODB_DATABASE)

    try:
        init_services(db.db, settings)
        await get_profile_store().ensure_indexes()

        result = await get_grouping_service().run_formation_pass(
            sort_key=lambda person: person.id
        )

        print("\n=== Group Formation Job Results ===")
        print(f"Groups: {len(result.groups)}")
        for signature, members in result.groups.items():
            days = ", ".join(signature_values(signature))
            print(f"  [{days}] {len(members)} members")
        print(f"Users Grouped: {len(result.grouped)}")
        print(f"Users Skipped: {len(result.skipped)}")
        sys.exit(0)

    except APIException as e:
        logger.error(f"Group formation failed: {e.code}: {e.message}")
        sys.exit(1)

    finally:
        await db.disconnect()


if __name__ == "__main__":
    asyncio.run(main())
