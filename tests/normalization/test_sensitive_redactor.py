from __future__ import annotations

from plan_commenter.normalization import (
    NEW_SENSITIVE_VALUE,
    OLD_SENSITIVE_VALUE,
    SensitiveFieldRedactor,
)
from plan_commenter.normalization.sensitive import is_sensitive


def test_unchanged_sensitive_value_is_removed_from_both_sides() -> None:
    result = SensitiveFieldRedactor().redact(
        {"password": "hunter2", "username": "admin"},
        {"password": "hunter2", "username": "root"},
        {"password": True},
        {"password": True},
    )

    assert result.before == {"username": "admin"}
    assert result.after == {"username": "root"}


def test_changed_sensitive_value_is_masked() -> None:
    result = SensitiveFieldRedactor().redact(
        {"password": "old-secret"},
        {"password": "new-secret"},
        {},
        {"password": True},
    )

    assert result.before == {"password": OLD_SENSITIVE_VALUE}
    assert result.after == {"password": NEW_SENSITIVE_VALUE}
    assert "secret" not in repr(result)


def test_sensitive_key_missing_on_one_side() -> None:
    result = SensitiveFieldRedactor().redact(
        {},
        {"token": "abc123"},
        None,
        {"token": True},
    )

    assert result.before == {}
    assert result.after == {"token": NEW_SENSITIVE_VALUE}


def test_sensitive_key_missing_on_both_sides_is_ignored() -> None:
    result = SensitiveFieldRedactor().redact({"name": "x"}, {"name": "y"}, {"token": True}, None)

    assert result.before == {"name": "x"}
    assert result.after == {"name": "y"}


def test_nested_marker_masks_whole_attribute() -> None:
    result = SensitiveFieldRedactor().redact(
        {"settings": {"key": "a", "region": "eu"}},
        {"settings": {"key": "b", "region": "eu"}},
        {"settings": {"key": True}},
        {"settings": {"key": True}},
    )

    assert result.before == {"settings": OLD_SENSITIVE_VALUE}
    assert result.after == {"settings": NEW_SENSITIVE_VALUE}


def test_empty_and_false_markers_mark_nothing() -> None:
    result = SensitiveFieldRedactor().redact(
        {"tags": {"team": "a"}, "name": "x", "security_groups": ["sg-1"]},
        {"tags": {"team": "b"}, "name": "x", "security_groups": ["sg-2"]},
        {"tags": {}, "name": False, "security_groups": [False]},
        {"tags": [], "name": False, "security_groups": [False]},
    )

    assert result.before == {"tags": {"team": "a"}, "name": "x", "security_groups": ["sg-1"]}
    assert result.after == {"tags": {"team": "b"}, "name": "x", "security_groups": ["sg-2"]}


def test_inputs_are_not_mutated() -> None:
    before = {"password": "a"}
    after = {"password": "b"}

    SensitiveFieldRedactor().redact(before, after, {"password": True}, {"password": True})

    assert before == {"password": "a"}
    assert after == {"password": "b"}


def test_missing_mappings_default_to_empty() -> None:
    result = SensitiveFieldRedactor().redact(None, None, None, None)

    assert result.before == {}
    assert result.after == {}


def test_whole_object_marker_masks_every_changed_attribute() -> None:
    result = SensitiveFieldRedactor().redact(
        {"password": "hunter2-old", "username": "admin"},
        {"password": "hunter2-new", "username": "admin", "port": 5432},
        True,
        True,
    )

    assert result.before == {"password": OLD_SENSITIVE_VALUE}
    assert result.after == {"password": NEW_SENSITIVE_VALUE, "port": NEW_SENSITIVE_VALUE}


def test_whole_object_marker_on_one_side_only() -> None:
    result = SensitiveFieldRedactor().redact(
        {"token": "abc"},
        {},
        True,
        False,
    )

    assert result.before == {"token": OLD_SENSITIVE_VALUE}
    assert result.after == {}


def test_is_sensitive_looks_for_a_true_leaf() -> None:
    assert is_sensitive(True)
    assert is_sensitive([False, True])
    assert is_sensitive({"rule": [{"key": True}]})
    assert not is_sensitive(False)
    assert not is_sensitive([False])
    assert not is_sensitive({"rule": [{"key": False}], "tags": {}})
    assert not is_sensitive(None)
