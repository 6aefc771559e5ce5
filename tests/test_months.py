from datetime import datetime, timezone

import pytest

from sales_tracker.core.months import MONTH_NAMES, month_name_of, resolve_month
from sales_tracker.errors import InvalidMonth


@pytest.mark.parametrize("ordinal, name", list(enumerate(MONTH_NAMES, start=1)))
def test_resolve_month_valid_names(ordinal, name):
    assert resolve_month(name) == ordinal


@pytest.mark.parametrize(
    "name", ["march", "MARCH", "Mar", "", " March", "March ", "Marchh", "3", "Sept", None]
)
def test_resolve_month_rejects_everything_else(name):
    with pytest.raises(InvalidMonth):
        resolve_month(name)


def test_invalid_month_is_a_value_error():
    with pytest.raises(ValueError, match="Invalid month name"):
        resolve_month("Smarch")


def test_month_name_of():
    assert month_name_of(datetime(2021, 1, 31, tzinfo=timezone.utc)) == "January"
    assert month_name_of(datetime(2023, 12, 1, tzinfo=timezone.utc)) == "December"
    assert month_name_of(None) is None
