# tests/test_query.py
import pytest

from product_api.errors import InvalidParameter
from product_api.query import ProductQuery, parse_fields, parse_product_query


def test_no_parameters_means_no_constraints():
    q = parse_product_query()
    assert q == ProductQuery()
    assert q.mongo_filter() == {}
    assert q.mongo_sort() is None
    assert q.mongo_projection() is None


def test_category_and_min_price_filter():
    q = parse_product_query(category="books", min_price=" 12.5 ")
    assert q.mongo_filter() == {"category": "books", "price": {"$gte": 12.5}}


def test_empty_category_is_ignored():
    assert parse_product_query(category="").category is None


@pytest.mark.parametrize("raw", ["abc", "", "  ", "inf", "-Infinity", "nan", "1e999"])
def test_min_price_must_be_finite_number(raw):
    with pytest.raises(InvalidParameter) as exc:
        parse_product_query(min_price=raw)
    assert exc.value.message == "minPrice must be a number"


def test_min_price_zero_is_a_constraint():
    assert parse_product_query(min_price="0").mongo_filter() == {"price": {"$gte": 0}}


def test_sort_directions():
    assert parse_product_query(sort="price").mongo_sort() == [("price", 1)]
    assert parse_product_query(sort="-price").mongo_sort() == [("price", -1)]
    assert parse_product_query(sort="").mongo_sort() is None


@pytest.mark.parametrize("raw", ["foo", "Price", "+price", "name", " price"])
def test_unknown_sort_rejected(raw):
    with pytest.raises(InvalidParameter):
        parse_product_query(sort=raw)


def test_parse_fields_trims_and_drops_blanks():
    assert parse_fields(" name, price ,,category,") == ("name", "price", "category")
    assert parse_fields("name,name") == ("name",)


def test_projection_excludes_id_unless_asked():
    assert parse_product_query(fields="name,price").mongo_projection() == {"name": 1, "price": 1, "_id": 0}
    assert parse_product_query(fields="id,name").mongo_projection() == {"_id": 1, "name": 1}


def test_blank_fields_mean_full_records():
    assert parse_product_query(fields=" , ,").fields is None


def test_in_memory_evaluation():
    q = parse_product_query(category="a", min_price="10", fields="_id,price")
    assert q.matches({"category": "a", "price": 10})
    assert not q.matches({"category": "a", "price": 9.99})
    assert not q.matches({"category": "b", "price": 50})
    assert not q.matches({"category": "a"})
    assert q.project({"id": "x", "name": "n", "price": 10, "category": "a"}) == {"id": "x", "price": 10}
