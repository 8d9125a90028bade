"""Create the schema, seed reference data and provision an HR operator."""
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ems.core.config import get_settings  # noqa: E402  (import after sys.path manipulation)
from ems.core.log import get_logger, init_logging, timeit  # noqa: E402
from ems.db.engine import create_sync_engine  # noqa: E402
from ems.db.seed import provision_operator, seed_reference_data  # noqa: E402
from ems.db.session import session_scope  # noqa: E402
from ems.models import Base  # noqa: E402

LOGGER = get_logger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--url", type=str, default=None, help="Database URL (defaults to settings)")
    parser.add_argument("--skip-seed", action="store_true", help="Only create tables")
    parser.add_argument("--username", type=str, default=None, help="HR operator username to provision")
    parser.add_argument(
        "--password",
        type=str,
        default=os.getenv("EMS_OPERATOR_PASSWORD"),
        help="Operator password (or EMS_OPERATOR_PASSWORD)",
    )
    parser.add_argument("--name", type=str, default="HR Operator", help="Operator display name")
    parser.add_argument("--region", type=str, default="North", help="Region the operator manages")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    init_logging(get_settings())

    engine = create_sync_engine(args.url)
    with timeit("Schema creation", logger=LOGGER):
        Base.metadata.create_all(engine)

    if args.skip_seed:
        return

    with session_scope(engine=engine) as session:
        summary = seed_reference_data(session)
        if args.username:
            if not args.password:
                raise SystemExit("--password (or EMS_OPERATOR_PASSWORD) is required with --username")
            region_id = summary.region_ids.get(args.region)
            if region_id is None:
                raise SystemExit(f"Unknown region {args.region!r}; choose from {sorted(summary.region_ids)}")
            provision_operator(
                session,
                hr_name=args.name,
                username=args.username,
                password=args.password,
                region_id=region_id,
                country_id=summary.country_id,
            )

    LOGGER.info("Database initialised")


if __name__ == "__main__":
    main()
