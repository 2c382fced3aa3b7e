"""
Tests for changed-field detection and change summaries
"""
from orgchart.models.audit_log import AuditAction, TargetType
from orgchart.services.snapshot_differ import (
    generate_change_summary,
    generate_rollback_summary,
    get_changed_field_names,
    get_changed_fields,
    translate_field,
)


def test_changed_fields_in_first_appearance_order():
    before = {"name": "Taro", "email": "a@example.com", "position": "Lead"}
    after = {"name": "Jiro", "email": "b@example.com", "position": "Lead"}

    assert get_changed_field_names(before, after) == ["name", "email"]
    assert get_changed_fields(before, after) == ["Name", "Email"]


def test_system_fields_are_ignored():
    before = {"id": "1", "name": "Sales", "created_at": "2024-01-01", "updated_at": "x", "department_order": 1}
    after = {"id": "2", "name": "Sales", "created_at": "2025-01-01", "updated_at": "y", "department_order": 5}

    assert get_changed_field_names(before, after) == []


def test_key_on_one_side_counts_as_changed_even_if_null():
    assert get_changed_field_names({"name": "A"}, {"name": "A", "position": None}) == ["position"]
    assert get_changed_field_names({"name": "A", "position": None}, {"name": "A"}) == ["position"]


def test_nested_key_order_is_insignificant():
    before = {"meta": {"a": 1, "b": 2}}
    after = {"meta": {"b": 2, "a": 1}}

    assert get_changed_field_names(before, after) == []


def test_integral_float_equals_int():
    assert get_changed_field_names({"level": 1, "meta": {"rank": [2]}}, {"level": 1.0, "meta": {"rank": [2.0]}}) == []
    assert get_changed_field_names({"level": 1}, {"level": 1.5}) == ["level"]


def test_list_order_is_significant():
    assert get_changed_field_names({"departments": ["d1", "d2"]}, {"departments": ["d2", "d1"]}) == ["departments"]


def test_missing_snapshots_yield_no_changes():
    assert get_changed_field_names(None, None) == []
    assert get_changed_field_names(None, {"name": "A"}) == ["name"]


def test_unmapped_field_keeps_raw_name():
    assert translate_field("nickname") == "nickname"
    assert get_changed_fields({"nickname": "a"}, {"nickname": "b"}, "ja") == ["nickname"]


def test_japanese_field_labels():
    assert get_changed_fields({"name": "a", "email": "x"}, {"name": "b", "email": "y"}, "ja") == ["名前", "メール"]


def test_update_summary_lists_changes():
    summary = generate_change_summary(
        AuditAction.UPDATE,
        TargetType.EMPLOYEE,
        "Taro",
        {"name": "Taro", "email": "a@example.com"},
        {"name": "Taro", "email": "b@example.com"},
    )
    assert summary == "Employee Taro was updated (Email)"


def test_update_summary_in_japanese():
    summary = generate_change_summary(
        "update", "employee", "太郎", {"name": "太郎"}, {"name": "次郎"}, locale="ja"
    )
    assert summary == "社員「太郎」を更新（名前）"


def test_create_and_delete_summaries_omit_field_list():
    assert generate_change_summary("create", "department", "Sales", None, {"name": "Sales"}) == "Department Sales was created"
    assert generate_change_summary("delete", "department", "Sales", {"name": "Sales"}, None) == "Department Sales was deleted"


def test_update_without_changes_has_no_parenthesis():
    assert generate_change_summary("update", "employee", "Taro", {"name": "Taro"}, {"name": "Taro"}) == "Employee Taro was updated"


def test_unnamed_target_and_unknown_locale_fall_back():
    assert generate_change_summary("login", "system", None, locale="de") == "System (unnamed) was logged in"


def test_rollback_summary_references_original_entry():
    assert generate_rollback_summary("abc") == "Rolled back from audit log abc"
    assert "abc" in generate_rollback_summary("abc", "ja")
