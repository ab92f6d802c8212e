from pathlib import Path

from src.timeclock.timeclock.database.bootstrap import _strip_create_db_and_use, iter_sql_statements

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_splitter_ignores_semicolons_inside_quotes():
    sql = "INSERT INTO t VALUES ('a;b');\nSELECT \"x;y\";\nSELECT 1"

    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'SELECT "x;y"',
        "SELECT 1",
    ]


def test_schema_creates_the_four_tables():
    sql = _strip_create_db_and_use(SCHEMA.read_text(encoding="utf-8"))
    statements = list(iter_sql_statements(sql))

    assert len(statements) == 4
    for table in ("working_sessions", "working_session_actions", "time_trackings", "pause_times"):
        assert any(f"CREATE TABLE IF NOT EXISTS {table} " in s for s in statements)
