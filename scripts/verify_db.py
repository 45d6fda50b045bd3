# scripts/verify_db.py
from __future__ import annotations

import sys

from sqlalchemy import inspect, text

from checklist.core.config import settings
from checklist.core.db import make_engine


def die(msg: str) -> None:
    print(f"[verify-db] ERROR: {msg}", file=sys.stderr)
    sys.exit(1)


REQUIRED_COLUMNS = {
    "inspections": {
        "id",
        "equipment",
        "inspector",
        "supervisor",
        "horometer",
        "date",
        "isCompleted",
        "conformityPercentage",
    },
    "inspection_items": {"id", "inspectionId", "name", "position"},
    "inspection_questions": {"id", "itemId", "text", "isConform", "comment", "position"},
    "photos": {"id", "questionId", "uri", "hasDrawings", "drawingUri", "timestamp", "position"},
}

CASCADE_FKS = {
    "inspection_items": "inspections",
    "inspection_questions": "inspection_items",
    "photos": "inspection_questions",
}


def main() -> None:
    engine = make_engine(settings.database_url)

    with engine.connect() as conn:
        # 1) connectivity
        conn.execute(text("select 1")).scalar_one()
        print(f"[ok] connected ({settings.db_driver})")

        insp = inspect(conn)

        # 2) required tables
        present = set(insp.get_table_names())
        missing = set(REQUIRED_COLUMNS) - present
        if missing:
            die(f"missing tables: {sorted(missing)} (run: alembic upgrade head)")

        print("[ok] required tables present")

        # 3) columns
        for table, expected_cols in REQUIRED_COLUMNS.items():
            cols = {c["name"] for c in insp.get_columns(table)}
            missing_cols = expected_cols - cols
            if missing_cols:
                die(f"{table} missing columns: {sorted(missing_cols)}")

        print("[ok] columns sane")

        # 4) parent FKs must cascade
        for table, parent in CASCADE_FKS.items():
            fks = [fk for fk in insp.get_foreign_keys(table) if fk["referred_table"] == parent]
            if not fks:
                die(f"missing FK {table} -> {parent}")
            if (fks[0].get("options") or {}).get("ondelete", "").upper() != "CASCADE":
                die(f"FK {table} -> {parent} is not ON DELETE CASCADE")

        print("[ok] cascading FKs present")

    engine.dispose()
    print("[verify-db] ALL CHECKS PASSED")


if __name__ == "__main__":
    main()
