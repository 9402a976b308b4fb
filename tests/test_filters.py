"""
Tests for the list query grammar
"""
import pytest

from app.crud.errors import InvalidColumnError, InvalidFilterError, InvalidOperatorError, InvalidPaginationError
from app.crud.filters import Filter, filters_from, is_column_name, merge, parse_list_query
from app.crud.operator import Operator


class TestIsColumnName:
    def test_letters_and_underscores(self):
        assert is_column_name("created_at")
        assert is_column_name("Camera")
        assert is_column_name("_")

    def test_rejects_everything_else(self):
        for name in ("", "a1", "a-b", "a b", "a;drop", "ñ", "id)"):
            assert not is_column_name(name), name


class TestMerge:
    def test_trims_dedupes_and_keeps_order(self):
        assert merge([" b", "a ", "b", "", "  ", "c"]) == ["b", "a", "c"]

    def test_empty(self):
        assert merge([]) == []


class TestFiltersFrom:
    def test_single_filter(self):
        filters = filters_from({"q:camera:eq": ["A"]})
        assert filters == [Filter(field="camera", operator=Operator.EQ, values=frozenset({"A"}))]

    def test_keys_with_spaces_merge_into_one_filter(self):
        filters = filters_from({"q:camera:eq": ["A"], "q: camera : eq ": ["B", "A"]})
        assert len(filters) == 1
        assert filters[0].values == frozenset({"A", "B"})

    def test_distinct_operators_stay_separate(self):
        filters = filters_from({"q:timestamp:ge": ["x"], "q:timestamp:le": ["y"]})
        assert {f.operator for f in filters} == {Operator.GE, Operator.LE}

    def test_filter_without_values_is_dropped(self):
        assert filters_from({"q:camera:eq": ["", " "]}) == []

    @pytest.mark.parametrize("key", ["q:camera", "q::eq", "q:camera:", "q:"])
    def test_malformed_key(self, key):
        with pytest.raises(InvalidFilterError):
            filters_from({key: ["A"]})

    def test_invalid_column(self):
        with pytest.raises(InvalidColumnError):
            filters_from({"q:cam-era:eq": ["A"]})

    def test_unknown_operator_is_an_error(self):
        with pytest.raises(InvalidOperatorError):
            filters_from({"q:camera:contains": ["A"]})


class TestParseListQuery:
    def test_defaults(self):
        query = parse_list_query([])
        assert query.filters == []
        assert query.sort == []
        assert query.ascending is False
        assert query.offset == 0
        assert query.limit == 100

    @pytest.mark.parametrize("value", ["t", "true", "Y", "yes", " TRUE "])
    def test_ascending_truthy(self, value):
        assert parse_list_query([("asc", value)]).ascending is True

    @pytest.mark.parametrize("value", ["", "1", "no", "false", "on"])
    def test_ascending_falsy(self, value):
        assert parse_list_query([("asc", value)]).ascending is False

    def test_negative_offset_becomes_zero(self):
        assert parse_list_query([("offset", "-5")]).offset == 0

    @pytest.mark.parametrize("value,expected", [("0", 100), ("-1", 100), ("101", 100), ("100", 100), ("1", 1), ("20", 20)])
    def test_limit_is_clamped(self, value, expected):
        assert parse_list_query([("limit", value)]).limit == expected

    @pytest.mark.parametrize("name", ["offset", "limit"])
    def test_non_integer_pagination(self, name):
        with pytest.raises(InvalidPaginationError):
            parse_list_query([(name, "ten")])

    def test_sort_merged_in_order(self):
        query = parse_list_query([("sort", "timestamp"), ("sort", " camera"), ("sort", "timestamp"), ("sort", "")])
        assert query.sort == ["timestamp", "camera"]

    def test_invalid_sort_column(self):
        with pytest.raises(InvalidColumnError):
            parse_list_query([("sort", "id; DROP TABLE users")])

    def test_only_prefixed_keys_become_filters(self):
        query = parse_list_query([
            ("q:camera:eq", "A"),
            ("q:camera:eq", "B"),
            ("redirectOnError", "/x"),
            ("camera", "ignored"),
        ])
        assert query.filters == [Filter(field="camera", operator=Operator.EQ, values=frozenset({"A", "B"}))]
