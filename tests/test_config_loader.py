from datetime import date, time
from decimal import Decimal

import pytest

from django_boxoffice.config_loader import load_schedule_config

VALID_SCHEDULE = """
[[schedule.prices]]
category = "adult"
price = 15000.50

[[schedule.prices]]
category = "child"
name = "Kids"
price = 5000

[[schedule.days]]
name = "Opening Day"
date = 2027-06-01

[[schedule.days.sessions]]
name = "Morning"
start = 09:00:00
end = 12:00:00
capacity = { adult = 10, child = 4 }
"""


def _write(tmp_path, content):
    config_file = tmp_path / "schedule.toml"
    config_file.write_text(content)
    return config_file


def test_load_schedule_config_parses_native_types(tmp_path):
    schedule = load_schedule_config(_write(tmp_path, VALID_SCHEDULE))

    day = schedule["days"][0]
    assert day["date"] == date(2027, 6, 1)
    assert day["active"] is True
    session = day["sessions"][0]
    assert session["start"] == time(9, 0)
    assert session["end"] == time(12, 0)
    assert session["capacity"] == {"adult": 10, "student": 0, "child": 4}
    assert session["active"] is True


def test_load_schedule_config_parses_prices_as_decimal(tmp_path):
    schedule = load_schedule_config(_write(tmp_path, VALID_SCHEDULE))

    adult, child = schedule["prices"]
    assert isinstance(adult["price"], Decimal)
    assert adult["price"] == Decimal("15000.50")
    assert adult["name"] == "Adult"
    assert child["price"] == Decimal("5000")
    assert child["name"] == "Kids"


def test_load_schedule_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError, match="not found"):
        load_schedule_config(tmp_path / "missing.toml")


def test_load_schedule_config_invalid_toml(tmp_path):
    with pytest.raises(ValueError, match="Invalid TOML"):
        load_schedule_config(_write(tmp_path, "[schedule\n"))


def test_load_schedule_config_requires_schedule_table(tmp_path):
    with pytest.raises(ValueError, match=r"Missing required \[schedule\] table"):
        load_schedule_config(_write(tmp_path, "[other]\nkey = 1\n"))


def test_load_schedule_config_requires_days(tmp_path):
    with pytest.raises(ValueError, match="missing required fields: days"):
        load_schedule_config(_write(tmp_path, "[schedule]\nname = 'x'\n"))


def test_load_schedule_config_rejects_negative_capacity(tmp_path):
    content = VALID_SCHEDULE.replace("adult = 10", "adult = -1")
    with pytest.raises(ValueError, match=r"capacity.adult must be a non-negative integer"):
        load_schedule_config(_write(tmp_path, content))


def test_load_schedule_config_rejects_unknown_capacity_category(tmp_path):
    content = VALID_SCHEDULE.replace("child = 4", "senior = 4")
    with pytest.raises(ValueError, match="unknown categories: senior"):
        load_schedule_config(_write(tmp_path, content))


def test_load_schedule_config_rejects_end_before_start(tmp_path):
    content = VALID_SCHEDULE.replace("end = 12:00:00", "end = 08:00:00")
    with pytest.raises(ValueError, match="end must be after start"):
        load_schedule_config(_write(tmp_path, content))


def test_load_schedule_config_rejects_duplicate_session_names(tmp_path):
    content = VALID_SCHEDULE + """
[[schedule.days.sessions]]
name = "Morning"
start = 13:00:00
end = 14:00:00
"""
    with pytest.raises(ValueError, match="duplicate name: Morning"):
        load_schedule_config(_write(tmp_path, content))


def test_load_schedule_config_rejects_duplicate_price_category(tmp_path):
    content = VALID_SCHEDULE + """
[[schedule.prices]]
category = "adult"
price = 1.00
"""
    with pytest.raises(ValueError, match="duplicate category: adult"):
        load_schedule_config(_write(tmp_path, content))


def test_load_schedule_config_rejects_unknown_price_category(tmp_path):
    content = VALID_SCHEDULE.replace('category = "child"', 'category = "senior"')
    with pytest.raises(ValueError, match="category must be one of"):
        load_schedule_config(_write(tmp_path, content))


def test_load_schedule_config_rejects_datetime_as_date(tmp_path):
    content = VALID_SCHEDULE.replace("date = 2027-06-01", "date = 2027-06-01T10:00:00")
    with pytest.raises(ValueError, match="must be a TOML local date"):
        load_schedule_config(_write(tmp_path, content))
