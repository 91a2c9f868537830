import pytest

from core.errors import InvalidFilterError
from core.filter_engine import filter_records
from core.models import FilterCriteria


@pytest.fixture
def records(make_record):
    return [
        make_record("r1", "Soil Temperature", "18.5", "North Plot", "2024-03-06T00:00:01"),
        make_record("r2", "Humidity", "55", "Greenhouse 2", "2024-03-05T23:59:00"),
        make_record("r3", "Soil pH", "6.4", "north plot", "2024-03-04T08:30:00"),
        make_record("r4", "Rainfall", "12mm", "45.123456, -122.654321", "2024-03-01T10:00:00"),
    ]


def ids(records):
    return [r.id for r in records]


def test_empty_criteria_returns_input_unchanged(records):
    assert filter_records(records, FilterCriteria()) == records


def test_empty_records_return_empty_list():
    assert filter_records([], FilterCriteria(search_term="soil", date_from="2024-01-01")) == []


def test_search_term_matches_any_of_field_value_location(records):
    assert ids(filter_records(records, FilterCriteria(search_term="SOIL"))) == ["r1", "r3"]
    assert ids(filter_records(records, FilterCriteria(search_term="55"))) == ["r2"]
    assert ids(filter_records(records, FilterCriteria(search_term="greenhouse"))) == ["r2"]


def test_field_and_location_filters_are_case_insensitive_substrings(records):
    assert ids(filter_records(records, FilterCriteria(field="soil"))) == ["r1", "r3"]
    assert ids(filter_records(records, FilterCriteria(location="NORTH"))) == ["r1", "r3"]


def test_criteria_are_combined_with_and(records):
    criteria = FilterCriteria(field="soil", location="north", search_term="ph")
    assert ids(filter_records(records, criteria)) == ["r3"]


def test_date_to_includes_the_whole_end_day(records):
    result = filter_records(records, FilterCriteria(date_to="2024-03-05"))
    assert "r2" in ids(result)
    assert "r1" not in ids(result)


def test_date_from_is_inclusive_from_midnight(records):
    assert ids(filter_records(records, FilterCriteria(date_from="2024-03-05"))) == ["r1", "r2"]


def test_date_range(records):
    criteria = FilterCriteria(date_from="2024-03-02", date_to="2024-03-05")
    assert ids(filter_records(records, criteria)) == ["r2", "r3"]


def test_result_is_an_ordered_subsequence(records):
    result = filter_records(records, FilterCriteria(search_term="o"))
    positions = [records.index(r) for r in result]
    assert positions == sorted(set(positions))


def test_whitespace_only_criteria_impose_no_constraint(records):
    assert filter_records(records, FilterCriteria(search_term="   ", field=" ")) == records


@pytest.mark.parametrize("bad", ["2024-13-01", "yesterday", "05/03/2024"])
def test_malformed_dates_raise(records, bad):
    with pytest.raises(InvalidFilterError):
        filter_records(records, FilterCriteria(date_from=bad))
    with pytest.raises(InvalidFilterError):
        filter_records([], FilterCriteria(date_to=bad))


def test_naive_timestamps_are_read_as_utc(make_record):
    record = make_record("n1", "Temp", "20", timestamp="2024-03-05T23:59:00")
    naive = record.model_copy(update={"timestamp": record.timestamp.replace(tzinfo=None)})
    assert filter_records([naive], FilterCriteria(date_to="2024-03-05")) == [naive]


def test_reset_criteria_is_empty():
    assert FilterCriteria.reset().is_empty()
    assert not FilterCriteria(location="plot").is_empty()
