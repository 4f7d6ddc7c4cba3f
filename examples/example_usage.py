"""Example: drive the aggregation engine through the service layer (no Flask).

Controllers stay thin; the daily view, monthly summary and corrections
all live in services reachable from the container.
"""

import importlib

from config import get_settings_module

from src.hr_attendance.hr_attendance.container import build_container


def main(tenant_id: int = 1, year_month: str = "2024-11"):
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    view = container.monthly_aggregator.build_monthly(tenant_id=tenant_id, year_month=year_month)
    for row in view.per_employee:
        print(row.to_summary_dict())


if __name__ == "__main__":
    main()
