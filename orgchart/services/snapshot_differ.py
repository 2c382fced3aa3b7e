"""
Snapshot differ - changed-field detection and localized change summaries
"""
from typing import Any, Dict, List, Mapping, Optional

from orgchart.utils.json_serializer import canonical_json

# System-managed fields never reported as changed
SYSTEM_FIELDS = frozenset({"id", "created_at", "updated_at", "department_order"})

DEFAULT_LOCALE = "en"

TARGET_TYPE_LABELS: Dict[str, Dict[str, str]] = {
    "en": {
        "employee": "Employee",
        "department": "Department",
        "role": "Role",
        "editor": "Editor",
        "system": "System",
    },
    "ja": {
        "employee": "社員",
        "department": "部署",
        "role": "役職",
        "editor": "編集者",
        "system": "システム",
    },
}

ACTION_LABELS: Dict[str, Dict[str, str]] = {
    "en": {
        "create": "created",
        "update": "updated",
        "delete": "deleted",
        "rollback": "rolled back",
        "login": "logged in",
        "logout": "logged out",
    },
    "ja": {
        "create": "追加",
        "update": "更新",
        "delete": "削除",
        "rollback": "ロールバック",
        "login": "ログイン",
        "logout": "ログアウト",
    },
}

FIELD_LABELS: Dict[str, Dict[str, str]] = {
    "en": {
        "name": "Name",
        "email": "Email",
        "department_id": "Department",
        "position": "Position",
        "role_id": "Role ID",
        "employment_type": "Employment type",
        "chatwork_account_id": "ChatWork ID",
        "departments": "Concurrent departments",
        "parent_id": "Parent department",
        "level": "Level",
    },
    "ja": {
        "name": "名前",
        "email": "メール",
        "department_id": "部署",
        "position": "役職",
        "role_id": "役職ID",
        "employment_type": "雇用形態",
        "chatwork_account_id": "ChatWork ID",
        "departments": "兼務先",
        "parent_id": "親部署",
        "level": "レベル",
    },
}

UNNAMED_LABELS = {"en": "(unnamed)", "ja": "(名前なし)"}


def _locale(locale: Optional[str]) -> str:
    return locale if locale in FIELD_LABELS else DEFAULT_LOCALE


def _value(value: Any) -> str:
    """Plain string form of an enum or string (action/target type)"""
    return getattr(value, "value", value) if value is not None else ""


def get_changed_field_names(
    before: Optional[Mapping[str, Any]],
    after: Optional[Mapping[str, Any]],
) -> List[str]:
    """
    Raw names of fields whose values differ between two snapshots

    Keys are visited in the order they first appear in before, then after.
    A key present on only one side counts as changed even if its value is null.
    """
    before = before or {}
    after = after or {}
    changed = []
    for key in dict.fromkeys([*before.keys(), *after.keys()]):
        if key in SYSTEM_FIELDS:
            continue
        if (key in before) != (key in after):
            changed.append(key)
        elif canonical_json(before[key]) != canonical_json(after[key]):
            changed.append(key)
    return changed


def translate_field(field: str, locale: Optional[str] = None) -> str:
    return FIELD_LABELS[_locale(locale)].get(field, field)


def get_changed_fields(
    before: Optional[Mapping[str, Any]],
    after: Optional[Mapping[str, Any]],
    locale: Optional[str] = None,
) -> List[str]:
    """Display labels of the changed fields; unmapped fields keep their raw name"""
    return [translate_field(field, locale) for field in get_changed_field_names(before, after)]


def generate_change_summary(
    action: Any,
    target_type: Any,
    target_name: Optional[str],
    before: Optional[Mapping[str, Any]] = None,
    after: Optional[Mapping[str, Any]] = None,
    locale: Optional[str] = None,
) -> str:
    """
    Compose a one-line summary, e.g. 'Employee Taro was updated (Name, Email)'

    Only updates with both snapshots list the changed fields.
    """
    loc = _locale(locale)
    action_key = _value(action)
    type_key = _value(target_type)
    type_label = TARGET_TYPE_LABELS[loc].get(type_key, type_key)
    action_label = ACTION_LABELS[loc].get(action_key, action_key)
    name = target_name or UNNAMED_LABELS[loc]

    changes: List[str] = []
    if action_key == "update" and before and after:
        changes = get_changed_fields(before, after, loc)

    if loc == "ja":
        summary = f"{type_label}「{name}」を{action_label}"
        if changes:
            summary += f"（{'、'.join(changes)}）"
        return summary

    summary = f"{type_label} {name} was {action_label}"
    if changes:
        summary += f" ({', '.join(changes)})"
    return summary


def generate_rollback_summary(original_entry_id: str, locale: Optional[str] = None) -> str:
    if _locale(locale) == "ja":
        return f"監査ログ {original_entry_id} からロールバック"
    return f"Rolled back from audit log {original_entry_id}"
