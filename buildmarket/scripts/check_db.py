#!/usr/bin/env python3
"""
Print the tables and columns of the configured database with row counts.
"""
from sqlalchemy import inspect, text

from buildmarket.database import engine


def describe(bind):
    inspector = inspect(bind)
    report = {}
    with bind.connect() as conn:
        for table in sorted(inspector.get_table_names()):
            columns = [(col["name"], str(col["type"])) for col in inspector.get_columns(table)]
            count = conn.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar()
            report[table] = {"columns": columns, "rows": count}
    return report


def main():
    report = describe(engine)
    if not report:
        print("Database is empty, start the API once to create the schema")
        return
    for table, info in report.items():
        print(f"\n{table} ({info['rows']} rows)")
        for name, type_ in info["columns"]:
            print(f"  - {name}: {type_}")


if __name__ == "__main__":
    main()
