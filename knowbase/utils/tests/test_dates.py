import pytest

from knowbase.utils.dates import normalize_ymd, within_window


@pytest.mark.parametrize(
    "value,expected",
    [
        ("2025-04-01", "2025-04-01"),
        ("2025-04-01T09:30:00Z", "2025-04-01"),
        ("2025-13-01", None),
        ("2025/04/01", None),
        ("", None),
        (None, None),
    ],
)
def test_normalize_ymd(value, expected):
    assert normalize_ymd(value) == expected


def test_within_window():
    assert within_window(None, None, "2025-01-01")
    assert within_window("2025-01-01", None, "2025-01-01")
    assert within_window(None, "2025-01-01", "2025-01-01")
    assert not within_window("2025-01-02", None, "2025-01-01")
    assert not within_window(None, "2024-12-31", "2025-01-01")
