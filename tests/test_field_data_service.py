from datetime import date
from unittest.mock import MagicMock

import pytest

from core.errors import InvalidFilterError, StoreError, ValidationError
from core.field_data_service import FieldDataService, RecordsBrowser
from core.models import FilterCriteria


def test_submit_record_trims_values_and_logs_entry(service, session, activity_logger):
    record = service.submit_record(session, "  Soil pH ", " 6.4", "North Plot  ")

    assert (record.field, record.value, record.location) == ("Soil pH", "6.4", "North Plot")
    entries = activity_logger.get_recent_entries(session)
    assert entries[0].action == "DATA_ENTRY"
    assert entries[0].details == "Added field record: Soil pH = 6.4"


def test_submit_record_reports_every_blank_field(service, session):
    with pytest.raises(ValidationError) as exc_info:
        service.submit_record(session, " ", "", "Plot A")

    assert exc_info.value.errors == {"field": "Field name is required", "value": "Value is required"}
    assert service.load_records(session) == []


def test_delete_record_logs_deletion(service, session, activity_logger):
    record = service.submit_record(session, "Temp", "20", "Plot A")
    service.delete_record(session, record.id)

    entries = activity_logger.get_recent_entries(session)
    assert {e.action for e in entries} == {"DATA_ENTRY", "DATA_DELETE"}
    assert any(e.details == f"Deleted field record with ID: {record.id}" for e in entries)


def test_failed_insert_writes_no_activity(session):
    store = MagicMock()
    store.add_record.side_effect = StoreError("write failed")
    activity = MagicMock()

    with pytest.raises(StoreError):
        FieldDataService(store, activity).submit_record(session, "Temp", "20", "Plot A")
    activity.log.assert_not_called()


@pytest.fixture
def browser(service, session):
    service.submit_record(session, "Temp", "20", "Plot A")
    service.submit_record(session, "Humidity", "55", "Greenhouse")
    browser = RecordsBrowser(service, session)
    browser.load()
    return browser


def test_browser_filters_and_clears(browser):
    assert [r.field for r in browser.apply(FilterCriteria(search_term="green"))] == ["Humidity"]
    assert len(browser.visible) == 1

    browser.clear_filters()
    assert len(browser.visible) == 2


def test_browser_keeps_criteria_on_malformed_date(browser):
    browser.apply(FilterCriteria(field="temp"))
    with pytest.raises(InvalidFilterError):
        browser.apply(FilterCriteria(date_to="not-a-date"))
    assert browser.criteria.field == "temp"


def test_browser_delete_removes_record_locally(browser):
    target = browser.records[0]
    browser.delete(target.id)
    assert target not in browser.records


def test_browser_failed_delete_leaves_records_intact(browser):
    before = list(browser.records)
    with pytest.raises(StoreError):
        browser.delete("missing-id")
    assert browser.records == before


def test_browser_exports_visible_records(browser):
    browser.apply(FilterCriteria(field="humidity"))
    filename, content = browser.export("csv", today=date(2024, 3, 5))

    assert filename == "filtered_records_2024-03-05.csv"
    assert len(content.splitlines()) == 2
    assert ",Humidity,55,Greenhouse," in content


def failing_activity_logger():
    activity = MagicMock()
    activity.log.side_effect = StoreError("activity_logs unavailable")
    return activity


def test_audit_failure_does_not_fail_a_saved_record(store, session):
    service = FieldDataService(store, failing_activity_logger())

    record = service.submit_record(session, "Temp", "20", "Plot A")

    assert [r.id for r in store.get_records(session)] == [record.id]


def test_audit_failure_does_not_leave_a_deleted_record_in_the_browser(store, session):
    service = FieldDataService(store, failing_activity_logger())
    record = service.submit_record(session, "Temp", "20", "Plot A")
    browser = RecordsBrowser(service, session)
    browser.load()

    browser.delete(record.id)

    assert store.get_records(session) == []
    assert browser.records == []
