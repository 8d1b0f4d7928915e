"""Masking of sensitive attributes before they reach a rendered diff."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Union

OLD_SENSITIVE_VALUE = "(OLD_SENSITIVE_VALUE)"
NEW_SENSITIVE_VALUE = "(NEW_SENSITIVE_VALUE)"

SensitivityMarkers = Union[Mapping[str, Any], bool, None]

_MISSING = object()


def is_sensitive(marker: Any) -> bool:
    """Return ``True`` when ``marker`` flags at least one value as sensitive.

    Terraform mirrors the attribute structure with booleans, so a marker is
    sensitive only when some leaf is ``true``; ``{}``, ``[]`` and ``[false]``
    mark nothing.
    """

    if isinstance(marker, bool):
        return marker
    if isinstance(marker, Mapping):
        return any(is_sensitive(value) for value in marker.values())
    if isinstance(marker, (list, tuple)):
        return any(is_sensitive(value) for value in marker)
    return False


@dataclass(frozen=True, slots=True)
class RedactedAttributes:
    """Sanitized copies of a resource's before/after attribute mappings."""

    before: Dict[str, Any]
    after: Dict[str, Any]


class SensitiveFieldRedactor:
    """Drop unchanged sensitive attributes and mask the ones that changed.

    A key is sensitive when its marker in ``before_sensitive`` or
    ``after_sensitive`` flags any value below it; a partially sensitive block
    masks the whole attribute. A bare ``true`` marker makes every attribute of
    the resource sensitive.
    """

    def __init__(
        self,
        *,
        old_placeholder: str = OLD_SENSITIVE_VALUE,
        new_placeholder: str = NEW_SENSITIVE_VALUE,
    ) -> None:
        self.old_placeholder = old_placeholder
        self.new_placeholder = new_placeholder

    def redact(
        self,
        before: Mapping[str, Any] | None,
        after: Mapping[str, Any] | None,
        before_sensitive: SensitivityMarkers = None,
        after_sensitive: SensitivityMarkers = None,
    ) -> RedactedAttributes:
        """Return sanitized copies of ``before`` and ``after``; inputs are untouched."""

        sanitized_before = dict(before or {})
        sanitized_after = dict(after or {})
        all_keys = list(dict.fromkeys([*sanitized_before, *sanitized_after]))

        for markers in (before_sensitive, after_sensitive):
            for key in self._sensitive_keys(markers, all_keys):
                self._apply(key, sanitized_before, sanitized_after)

        return RedactedAttributes(before=sanitized_before, after=sanitized_after)

    # ------------------------------------------------------------------
    def _apply(self, key: str, before: Dict[str, Any], after: Dict[str, Any]) -> None:
        if before.get(key, _MISSING) == after.get(key, _MISSING):
            before.pop(key, None)
            after.pop(key, None)
            return

        if key in before:
            before[key] = self.old_placeholder
        if key in after:
            after[key] = self.new_placeholder

    def _sensitive_keys(
        self, markers: SensitivityMarkers, all_keys: Iterable[str]
    ) -> Iterable[str]:
        if markers is True:
            return tuple(all_keys)
        if not isinstance(markers, Mapping):
            return ()
        return tuple(key for key, marker in markers.items() if is_sensitive(marker))


__all__ = [
    "NEW_SENSITIVE_VALUE",
    "OLD_SENSITIVE_VALUE",
    "RedactedAttributes",
    "SensitiveFieldRedactor",
    "SensitivityMarkers",
    "is_sensitive",
]
