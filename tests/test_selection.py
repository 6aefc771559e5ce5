import pytest

from sales_tracker.errors import InvalidMonth
from sales_tracker.selection import search_month, select_month
from tests.fakes import InMemoryStore, make_tx, march_scenario


def _search_store():
    return InMemoryStore(
        [
            make_tx(1, 899.0, title="Gaming LAPTOP 15in", date_of_sale="2022-03-05T09:00:00Z"),
            make_tx(2, 45.0, title="Sleeve", description="Fits any laptop up to 15in",
                    date_of_sale="2021-03-11T09:00:00Z"),
            make_tx(3, 250.0, title="Desk lamp", date_of_sale="2022-03-12T09:00:00Z"),
            make_tx(4, 12.0, title="Water bottle 250ml", date_of_sale="2022-03-13T09:00:00Z"),
            make_tx(5, 25.0, title="Cap", date_of_sale="2022-03-14T09:00:00Z"),
            make_tx(6, 999.0, title="Laptop stand", date_of_sale="2022-04-01T09:00:00Z"),
        ]
    )


def test_select_month_matches_any_year():
    store = InMemoryStore(march_scenario() + [make_tx(9, 10.0, date_of_sale=None)])

    records = select_month(store, 3)

    assert [r.transaction.id for r in records] == [1, 2, 3]
    assert {r.transaction.date_of_sale.year for r in records} == {2021, 2022, 2023}
    assert all(r.month_name == "March" for r in records)


def test_select_month_labels_from_the_record_date():
    class MislabelingStore(InMemoryStore):
        def query_by_month(self, month):
            return list(self.transactions)

    store = MislabelingStore([make_tx(1, 10.0, date_of_sale="2022-04-10T00:00:00Z")])

    (record,) = select_month(store, 3)
    assert record.month_name == "April"


def test_search_without_query_returns_whole_month():
    store = _search_store()

    expected = [r.detail() for r in select_month(store, 3)]
    assert [r.detail() for r in search_month(store, "March", "")] == expected
    assert [r.detail() for r in search_month(store, "March", None)] == expected
    assert ("query_by_month_and_text",) not in [c[:1] for c in store.calls]


def test_search_text_is_case_insensitive_on_title_and_description():
    store = _search_store()

    records = search_month(store, "March", "laptop")

    assert sorted(r.transaction.id for r in records) == [1, 2]
    assert store.calls[-1] == ("query_by_month_and_text", 3, "laptop", None)


def test_search_numeric_query_matches_price_or_text():
    store = _search_store()

    records = search_month(store, "March", "250")

    assert sorted(r.transaction.id for r in records) == [3, 4]
    assert store.calls[-1] == ("query_by_month_and_text", 3, "250", 250.0)


@pytest.mark.parametrize("query", ["lamp", "nan", "inf", "1e400", "1_000"])
def test_search_non_numeric_query_skips_price(query):
    store = _search_store()

    search_month(store, "March", query)

    assert store.calls[-1][3] is None


def test_search_detail_projection():
    store = _search_store()

    (record,) = search_month(store, "March", "desk")

    assert record.detail() == {
        "id": 3,
        "title": "Desk lamp",
        "price": 250.0,
        "description": "Description for item 3",
        "category": "electronics",
        "image": "https://example.com/3.jpg",
        "sold": False,
        "dateOfSale": "2022-03-12T09:00:00.000+00:00",
        "monthName": "March",
    }


def test_search_invalid_month_never_queries():
    store = _search_store()

    with pytest.raises(InvalidMonth):
        search_month(store, "march", "laptop")

    assert store.calls == []


def test_search_digit_separators_do_not_match_price():
    store = InMemoryStore([make_tx(1, 1000.0, title="Sofa")])

    assert search_month(store, "March", "1_000") == []
