"""Tests for the Row Builder and Query Pipeline"""

import pytest

from giftrank.schemas.gift import GiftItem
from giftrank.schemas.query import GiftQuery, SortDirection, SortKey, SortSpec
from giftrank.services.corpus import Corpus
from giftrank.services.query import (
    build_rows,
    filter_rows,
    parse_number,
    run_query,
    sort_rows,
    summarize_rows,
)


def make_corpus(records, **options):
    items = [GiftItem.model_validate(record) for record in records]
    options.setdefault("formula", "review")
    options.setdefault("fallback", False)
    options.setdefault("high_score_threshold", 9.0)
    return Corpus.from_items(items, **options)


@pytest.fixture
def two_item_corpus():
    """Cheap fresh item against an expensive old item"""

    return make_corpus([
        {"id": 1, "title": "Cheap fresh", "category": "Брелки", "price": 100, "stars": 5, "daysSinceAdded": 0, "reviews": 50},
        {"id": 2, "title": "Pricey old", "category": "Кубки", "price": 1000, "stars": 3, "daysSinceAdded": 365, "reviews": 10},
    ])


@pytest.fixture
def catalogue():
    """Ten gifts across three categories"""

    return make_corpus([
        {"id": 1, "title": "Брелок Тризуб", "category": "Брелки", "price": 180, "stars": 4.9, "reviews": 530, "tags": ["type.patriotic"]},
        {"id": 2, "title": "Брелок відкривачка", "category": "Брелки", "price": 120, "stars": 4.1, "reviews": 48, "stock": False},
        {"id": 3, "title": "Кубок тато", "category": "Кубки", "price": 650, "stars": 4.7, "reviews": 310, "tags": ["recipients.men"]},
        {"id": 4, "title": "Кубок колега", "category": "Кубки", "price": 650, "stars": 4.3, "reviews": 22},
        {"id": 5, "title": "Гра Козацька рада", "category": "Игры", "price": 890, "stars": 4.6, "reviews": 1250, "tags": ["type.patriotic"]},
        {"id": 6, "title": "Гра фанти", "category": "Игры", "price": 340, "stars": 3.9, "reviews": 75},
        {"id": 7, "title": "Кубок мамі", "category": "Кубки", "price": 290, "stars": 4.2, "reviews": 88},
        {"id": 8, "title": "Брелок серце", "category": "Брелки", "price": 95, "stars": 4.0, "reviews": 12},
        {"id": 9, "title": "Гра пазл", "category": "Игры", "price": 450, "stars": 4.4, "reviews": 160},
        {"id": 10, "title": "Брелок кубок", "category": "Брелки", "price": 210, "stars": 4.6, "reviews": 64},
    ])


def ids(rows):
    return [row.id for row in rows]


def test_rows_carry_derived_fields(two_item_corpus):
    """Test every row has score, value, popularity and priority"""

    rows = build_rows(two_item_corpus)

    assert ids(rows) == [1, 2]
    for row in rows:
        assert row.score > 0
        assert row.value == pytest.approx(row.score / (row.price / 100))
        assert 1 <= row.analytics_priority <= 5
        assert row.analytics_label
        assert row.components.score == row.score


def test_score_and_value_ranking(two_item_corpus):
    """Test the cheap fresh item ranks first by score and by value"""

    by_score = run_query(two_item_corpus, GiftQuery(sort=SortSpec(key=SortKey.SCORE)))
    by_value = run_query(two_item_corpus, GiftQuery(sort=SortSpec(key=SortKey.VALUE)))

    assert ids(by_score) == [1, 2]
    assert ids(by_value) == [1, 2]
    assert by_value[0].value > by_value[1].value


def test_all_category_returns_everything(catalogue):
    """Test the 'All' sentinel with empty search is unfiltered"""

    rows = run_query(catalogue, GiftQuery(category="All", search=""))
    assert len(rows) == len(catalogue)


def test_category_filter(catalogue):
    """Test exact category match"""

    rows = run_query(catalogue, GiftQuery(category="Кубки"))
    assert sorted(ids(rows)) == [3, 4, 7]


def test_tag_filter_takes_precedence(catalogue):
    """Test a tag filter replaces the category filter"""

    by_field = run_query(catalogue, GiftQuery(category="Кубки", tag="type.patriotic"))
    by_selector = run_query(catalogue, GiftQuery(category="tag:type.patriotic"))

    assert sorted(ids(by_field)) == [1, 5]
    assert sorted(ids(by_selector)) == [1, 5]


def test_search_matches_title_or_category(catalogue):
    """Test case-insensitive search in title and category"""

    assert sorted(ids(run_query(catalogue, GiftQuery(search="КУБОК")))) == [3, 4, 7, 10]
    assert sorted(ids(run_query(catalogue, GiftQuery(search="  игры ")))) == [5, 6, 9]


def test_price_and_rating_filters(catalogue):
    """Test numeric filters, including numeric strings"""

    cheap = run_query(catalogue, GiftQuery(max_price="200"))
    rated = run_query(catalogue, GiftQuery(min_rating=4.6))

    assert sorted(ids(cheap)) == [1, 2, 8]
    assert sorted(ids(rated)) == [1, 3, 5, 10]


def test_non_numeric_filters_ignored(catalogue):
    """Test malformed numeric filters leave the result unchanged"""

    unfiltered = run_query(catalogue, GiftQuery())

    assert ids(run_query(catalogue, GiftQuery(max_price="abc"))) == ids(unfiltered)
    assert ids(run_query(catalogue, GiftQuery(min_rating="five"))) == ids(unfiltered)
    assert ids(run_query(catalogue, GiftQuery(max_price="", min_rating="nan"))) == ids(unfiltered)


def test_in_stock_filter(catalogue):
    """Test gifts marked out of stock can be hidden"""

    rows = run_query(catalogue, GiftQuery(in_stock_only=True))
    assert 2 not in ids(rows)
    assert len(rows) == 9


def test_filters_commute(catalogue):
    """Test combined filters equal the intersection of single filters"""

    category = GiftQuery(category="Брелки")
    search = GiftQuery(search="брелок")
    price = GiftQuery(max_price=200)
    combined = GiftQuery(category="Брелки", search="брелок", max_price=200)

    expected = (
        set(ids(run_query(catalogue, category)))
        & set(ids(run_query(catalogue, search)))
        & set(ids(run_query(catalogue, price)))
    )

    assert set(ids(run_query(catalogue, combined))) == expected == {1, 2, 8}


def test_sort_is_stable_in_both_directions():
    """Test equal keys keep their input order through repeated sorts"""

    corpus = make_corpus([
        {"id": 1, "title": "A", "price": 300, "stars": 4.0},
        {"id": 2, "title": "B", "price": 100, "stars": 4.5},
        {"id": 3, "title": "C", "price": 300, "stars": 4.0},
        {"id": 4, "title": "D", "price": 300, "stars": 3.0},
    ])
    rows = build_rows(corpus)

    ascending = sort_rows(rows, SortSpec(key=SortKey.PRICE, direction=SortDirection.ASC))
    descending = sort_rows(ascending, SortSpec(key=SortKey.PRICE, direction=SortDirection.DESC))
    again = sort_rows(descending, SortSpec(key=SortKey.PRICE, direction=SortDirection.ASC))

    assert ids(ascending) == [2, 1, 3, 4]
    assert ids(descending) == [1, 3, 4, 2]
    assert ids(again) == [2, 1, 3, 4]


def test_sort_text_keys():
    """Test text keys sort case-insensitively"""

    corpus = make_corpus([
        {"id": 1, "title": "banana", "price": 10},
        {"id": 2, "title": "Apple", "price": 10},
        {"id": 3, "title": "cherry", "price": 10},
    ])

    rows = run_query(corpus, GiftQuery(sort=SortSpec(key=SortKey.TITLE, direction=SortDirection.ASC)))
    assert ids(rows) == [2, 1, 3]

    rows = run_query(corpus, GiftQuery(sort=SortSpec(key="name", direction="desc")))
    assert ids(rows) == [3, 1, 2]


def test_sort_cyrillic_titles():
    """Test titles follow alphabetical order rather than code point order"""

    titles = ["Яблуко", "Їжак", "Ґудзик", "Дзвін", "Єнот", "Жук", "Гном"]
    corpus = make_corpus([
        {"id": n, "title": title, "price": 10} for n, title in enumerate(titles, start=1)
    ])

    rows = run_query(corpus, GiftQuery(sort=SortSpec(key=SortKey.TITLE, direction=SortDirection.ASC)))
    assert [row.title for row in rows] == ["Гном", "Ґудзик", "Дзвін", "Єнот", "Жук", "Їжак", "Яблуко"]

    rows = run_query(corpus, GiftQuery(sort=SortSpec(key=SortKey.TITLE, direction=SortDirection.DESC)))
    assert rows[0].title == "Яблуко"
    assert rows[-1].title == "Гном"


def test_sort_missing_numbers_as_zero():
    """Test items without reviews sort as zero reviews"""

    corpus = make_corpus([
        {"id": 1, "title": "A", "price": 10, "reviews": 5},
        {"id": 2, "title": "B", "price": 10},
        {"id": 3, "title": "C", "price": 10, "reviews": 1},
    ])

    rows = run_query(corpus, GiftQuery(sort=SortSpec(key=SortKey.REVIEWS, direction=SortDirection.ASC)))
    assert ids(rows) == [2, 3, 1]


def test_query_does_not_mutate_corpus(catalogue):
    """Test filtering and sorting leave the catalogue untouched"""

    before = [item.model_dump() for item in catalogue.items]
    run_query(catalogue, GiftQuery(category="Игры", sort=SortSpec(key=SortKey.PRICE)))

    assert [item.model_dump() for item in catalogue.items] == before


def test_empty_corpus_query():
    """Test an empty catalogue yields an empty result"""

    corpus = make_corpus([])
    assert run_query(corpus, GiftQuery(search="x", max_price=10)) == []


def test_interaction_corpus_priorities():
    """Test classification on the interaction-index schema"""

    corpus = make_corpus(
        [
            {"id": 1, "title": "Hit", "price_min": 1, "price_max": 1, "stars": 5, "item_popularity": 1_000_000},
            {"id": 2, "title": "Niche", "price_min": 1, "price_max": 2, "stars": 5, "item_popularity": 150},
            {"id": 3, "title": "Known", "price_min": 800, "price_max": 900, "stars": 2, "item_popularity": 5000},
            {"id": 4, "title": "Plain", "price_min": 900, "price_max": 900, "stars": 2, "item_popularity": 300},
        ],
        formula="auto",
        value_percentile=0.5,
        high_score_threshold=6.0,
    )
    rows = {row.id: row for row in build_rows(corpus)}

    assert corpus.formula.name == "interaction"
    assert rows[1].pop_rating == 5.0
    assert rows[1].analytics_priority == 5
    assert rows[2].analytics_priority == 4
    assert rows[3].analytics_priority == 2
    assert rows[4].analytics_priority == 1


def test_parse_number():
    """Test numeric parsing of user input"""

    assert parse_number("42") == 42.0
    assert parse_number(" 3.5 ") == 3.5
    assert parse_number(7) == 7.0
    assert parse_number("abc") is None
    assert parse_number("") is None
    assert parse_number(None) is None
    assert parse_number("inf") is None
    assert parse_number(True) is None


def test_summarize_rows(two_item_corpus):
    """Test result averages"""

    rows = build_rows(two_item_corpus)
    summary = summarize_rows(rows)

    assert summary.count == 2
    assert summary.avg_price == pytest.approx(550)
    assert summary.avg_score == pytest.approx((rows[0].score + rows[1].score) / 2)
    assert summarize_rows([]).count == 0


def test_filter_rows_returns_new_list(catalogue):
    """Test filtering never hands back the input list"""

    rows = build_rows(catalogue)
    filtered = filter_rows(rows, GiftQuery())

    assert filtered == rows
    assert filtered is not rows
