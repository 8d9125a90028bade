"""Simple database connectivity check."""
from __future__ import annotations

import sys
from pathlib import Path

from sqlalchemy import func, select, text

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ems.core.config import get_settings  # noqa: E402  (import after sys.path manipulation)
from ems.db.engine import create_sync_engine  # noqa: E402
from ems.models import Employee, EmployeeSalaryCurrent, EmployeeSalaryHistory  # noqa: E402

settings = get_settings()
engine = create_sync_engine()


def main() -> None:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
        print(f"✅ Connected via {settings.database.driver} to {engine.url.render_as_string(hide_password=True)}")
        for model in (Employee, EmployeeSalaryCurrent, EmployeeSalaryHistory):
            count = conn.execute(select(func.count()).select_from(model)).scalar_one()
            print(f"{model.__tablename__}: {count} rows")

        # Snapshots whose salary differs from their newest history row.
        latest = (
            select(EmployeeSalaryHistory.employee_id, func.max(EmployeeSalaryHistory.history_id).label("history_id"))
            .group_by(EmployeeSalaryHistory.employee_id)
            .subquery()
        )
        drift = conn.execute(
            select(func.count())
            .select_from(EmployeeSalaryCurrent)
            .join(latest, latest.c.employee_id == EmployeeSalaryCurrent.employee_id)
            .join(EmployeeSalaryHistory, EmployeeSalaryHistory.history_id == latest.c.history_id)
            .where(EmployeeSalaryHistory.ctc_lpa != EmployeeSalaryCurrent.ctc_lpa)
        ).scalar_one()
        print(f"Snapshots archived at least once: {drift}")


if __name__ == "__main__":
    main()
