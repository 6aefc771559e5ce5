import pytest

from sales_tracker.errors import InvalidMonth
from sales_tracker.report import (
    category_summary,
    combined_report,
    price_range_summary,
    sales_summary,
)
from tests.fakes import DriftingStore, InMemoryStore, march_scenario


def test_sales_summary_for_march():
    summary = sales_summary(InMemoryStore(march_scenario()), "March")

    assert summary["count"] == 3
    assert summary["totalSaleAmount"] == 950
    assert summary["totalSoldItems"] == 2
    assert summary["totalNotSoldItems"] == 1
    assert [r["id"] for r in summary["records"]] == [1, 2, 3]
    assert set(summary["records"][0]) == {
        "id", "category", "price", "sold", "dateOfSale", "monthName",
    }


def test_chart_summaries_for_march():
    store = InMemoryStore(march_scenario())

    bars = price_range_summary(store, "March")
    pie = category_summary(store, "March")

    assert bars["count"] == 3
    assert bars["priceRanges"]["0-100"] == 1
    assert bars["priceRanges"]["101-200"] == 1
    assert bars["priceRanges"]["801-900"] == 1
    assert bars["priceRanges"]["901-above"] == 0
    assert pie["categoryCounts"] == {"A": 2, "B": 1}


def test_combined_report_is_the_merge_of_each_view():
    store = InMemoryStore(march_scenario())

    combined = combined_report(store, "March")

    expected = {}
    for view in (sales_summary, price_range_summary, category_summary):
        expected.update(view(store, "March"))
    assert combined == expected
    assert set(combined) == {
        "records",
        "count",
        "totalSaleAmount",
        "totalSoldItems",
        "totalNotSoldItems",
        "priceRanges",
        "categoryCounts",
    }


def test_combined_report_selects_once():
    store = DriftingStore(march_scenario())

    combined = combined_report(store, "March")

    assert store.calls == [("query_by_month", 3)]
    count = combined["count"]
    assert count == len(combined["records"]) == 3
    assert combined["totalSoldItems"] + combined["totalNotSoldItems"] == count
    assert sum(combined["priceRanges"].values()) == count
    assert sum(combined["categoryCounts"].values()) == count


def test_month_without_sales():
    combined = combined_report(InMemoryStore(march_scenario()), "July")

    assert combined["records"] == []
    assert combined["count"] == 0
    assert combined["totalSaleAmount"] == 0
    assert len(combined["priceRanges"]) == 10
    assert sum(combined["priceRanges"].values()) == 0
    assert combined["categoryCounts"] == {}


@pytest.mark.parametrize(
    "view", [sales_summary, price_range_summary, category_summary, combined_report]
)
def test_invalid_month_short_circuits(view):
    store = InMemoryStore(march_scenario())

    with pytest.raises(InvalidMonth):
        view(store, "Marhc")

    assert store.calls == []
