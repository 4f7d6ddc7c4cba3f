from datetime import time, timedelta

import pytest

from src.hr_attendance.hr_attendance.database.bootstrap import _iter_sql_statements, _strip_create_db_and_use
from src.hr_attendance.hr_attendance.database.mysql_base import normalize_mysql_time, read_wall_clock


def test_normalize_mysql_time_variants():
    assert normalize_mysql_time(None) is None
    assert normalize_mysql_time(time(9, 5)) == time(9, 5)
    assert normalize_mysql_time(timedelta(hours=9, minutes=16)) == time(9, 16)
    assert normalize_mysql_time("08:30:15") == time(8, 30, 15)
    assert normalize_mysql_time("08:30") == time(8, 30)


def test_normalize_mysql_time_rejects_garbage():
    with pytest.raises(ValueError):
        normalize_mysql_time("0830")
    with pytest.raises(TypeError):
        normalize_mysql_time(830)


def test_read_wall_clock_keeps_unreadable_text():
    assert read_wall_clock("09:00:00") == time(9, 0)
    assert read_wall_clock("late-ish") == "late-ish"
    assert read_wall_clock("25:61") == "25:61"


def test_sql_splitter_handles_quotes_and_comments():
    sql = """
    -- leading comment; with semicolon
    CREATE TABLE a (x VARCHAR(10) DEFAULT 'a;b');
    INSERT INTO a VALUES ("c;d"); -- trailing
    """
    assert list(_iter_sql_statements(sql)) == [
        "CREATE TABLE a (x VARCHAR(10) DEFAULT 'a;b')",
        'INSERT INTO a VALUES ("c;d")',
    ]


def test_strip_create_database_and_use():
    sql = "CREATE DATABASE IF NOT EXISTS hr_attendance;\nUSE hr_attendance;\nCREATE TABLE t (id INT);\n"
    assert list(_iter_sql_statements(_strip_create_db_and_use(sql))) == ["CREATE TABLE t (id INT)"]
