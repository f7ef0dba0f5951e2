from datetime import date, datetime

import pytest

from iftarnow_cli.models import Location, TimeOfDay


def test_parse_hh_mm() -> None:
    assert TimeOfDay.parse("04:30") == TimeOfDay(4, 30, 0)


def test_parse_strips_timezone_suffix() -> None:
    assert TimeOfDay.parse("5:07 (+03)") == TimeOfDay(5, 7)


def test_parse_with_seconds() -> None:
    assert TimeOfDay.parse("18:45:30") == TimeOfDay(18, 45, 30)


@pytest.mark.parametrize("value", ["", "soon", "25:00", "12:60"])
def test_parse_rejects_invalid(value: str) -> None:
    with pytest.raises(ValueError):
        TimeOfDay.parse(value)


def test_str_and_on() -> None:
    assert str(TimeOfDay(4, 30)) == "04:30"
    assert str(TimeOfDay(17, 0, 5)) == "17:00:05"
    assert TimeOfDay(18, 45).on(date(2026, 3, 5)) == datetime(2026, 3, 5, 18, 45)


def test_location_roundtrip_defaults_method() -> None:
    loc = Location.from_dict({"city": "Ankara", "country": "Turkey"})

    assert loc.method == 13
    assert loc.to_dict() == {"city": "Ankara", "country": "Turkey", "method": 13}


@pytest.mark.parametrize("value", ["123:456", "12:345", "x05:07"])
def test_parse_rejects_overlong_or_prefixed_fields(value: str) -> None:
    with pytest.raises(ValueError):
        TimeOfDay.parse(value)


def test_isoformat_always_has_seconds() -> None:
    assert TimeOfDay(17, 0).isoformat() == "17:00:00"
    assert TimeOfDay(4, 5, 9).isoformat() == "04:05:09"
