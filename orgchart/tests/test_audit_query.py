"""
Tests for tenant-scoped audit log queries
"""
from datetime import timedelta

import pytest

from orgchart.core.actor import Actor, AuditContext
from orgchart.core.config import AuditConfig
from orgchart.core.exceptions import NotFoundError, UnauthenticatedError
from orgchart.models.audit_log import AuditAction, TargetType
from orgchart.schemas.audit import AuditLogFilter, AuditLogPage
from orgchart.services.audit_query_service import AuditQueryService
from orgchart.utils.datetime_utils import now_utc


def _login(recorder, context, n=1):
    return [recorder.record(context, AuditAction.LOGIN, TargetType.SYSTEM) for _ in range(n)]


def test_pages_cover_every_entry_once(recorder, query_service, context):
    _login(recorder, context, 120)

    seen = []
    for offset in (0, 50, 100):
        page = query_service.list(context, AuditLogPage(offset=offset, limit=50))
        seen.extend(entry.id for entry in page)

    assert len(seen) == 120
    assert len(set(seen)) == 120
    assert query_service.count(context) == 120


def test_listing_is_newest_first(recorder, query_service, context):
    entries = _login(recorder, context, 5)

    listed = query_service.list(context)
    timestamps = [entry.created_at for entry in listed]

    assert timestamps == sorted(timestamps, reverse=True)
    assert {e.id for e in listed} == {e.id for e in entries}


def test_default_and_clamped_page_size(recorder, store, context):
    _login(recorder, context, 12)
    service = AuditQueryService(store, AuditConfig(organization_id="org_test", page_size=5, max_page_size=10))

    assert len(service.list(context)) == 5
    assert len(service.list(context, AuditLogPage(limit=1000))) == 10
    assert len(service.list(context, AuditLogPage(limit=0))) == 1
    assert len(service.list(context, AuditLogPage(offset=-5, limit=3))) == 3


def test_other_tenants_entries_are_invisible(recorder, query_service, context, actor):
    other = AuditContext(organization_id="org_other", actor=actor)
    _login(recorder, context, 2)
    foreign = _login(recorder, other, 3)

    assert query_service.count(context) == 2
    assert query_service.count(other) == 3
    with pytest.raises(NotFoundError):
        query_service.get_by_id(context, foreign[0].id)


def test_filters_are_conjunctive(recorder, query_service, context):
    other_actor = AuditContext(
        organization_id="org_test", actor=Actor(email="jiro@example.com", display_name="Jiro")
    )
    recorder.record(context, AuditAction.CREATE, TargetType.EMPLOYEE, "e1", "Taro", after_data={"name": "Taro"})
    recorder.record(context, AuditAction.CREATE, TargetType.DEPARTMENT, "d1", "Sales", after_data={"name": "Sales"})
    recorder.record(other_actor, AuditAction.CREATE, TargetType.EMPLOYEE, "e2", "Ken", after_data={"name": "Ken"})
    _login(recorder, context)

    assert query_service.count(context, AuditLogFilter(action=AuditAction.CREATE)) == 3
    assert query_service.count(context, AuditLogFilter(target_type=TargetType.EMPLOYEE)) == 2
    assert query_service.count(
        context, AuditLogFilter(action=AuditAction.CREATE, target_type=TargetType.EMPLOYEE, actor_email="jiro@example.com")
    ) == 1

    listed = query_service.list(context, AuditLogPage(target_type=TargetType.DEPARTMENT))
    assert [e.target_name for e in listed] == ["Sales"]


def test_date_range_filter(recorder, query_service, context):
    _login(recorder, context, 3)
    now = now_utc()

    assert query_service.count(context, AuditLogFilter(start_date=now - timedelta(days=1))) == 3
    assert query_service.count(context, AuditLogFilter(start_date=now + timedelta(days=1))) == 0
    assert query_service.count(context, AuditLogFilter(end_date=now - timedelta(days=1))) == 0


def test_anonymous_reads_are_empty(recorder, query_service, context, anonymous_context):
    entries = _login(recorder, context, 2)

    assert query_service.list(anonymous_context) == []
    assert query_service.count(anonymous_context) == 0
    with pytest.raises(UnauthenticatedError):
        query_service.get_by_id(anonymous_context, entries[0].id)


def test_get_by_id(recorder, query_service, context):
    entry = _login(recorder, context)[0]

    assert query_service.get_by_id(context, entry.id).id == entry.id
    with pytest.raises(NotFoundError):
        query_service.get_by_id(context, "missing")
