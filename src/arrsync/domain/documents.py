"""Merge and compare semi-structured API documents.

Documents are the JSON-shaped payloads exchanged with a service: mappings,
arrays and scalars nested arbitrarily. Merging follows the rules the services
expect when we overlay a guide definition onto an existing remote record:

- arrays on both sides are merged element-wise; when every element carries the
  key field (``name``) elements are paired by key, otherwise by position
- elements only present in the base array are dropped
- scalars and mappings in the overlay replace the base value
- fields only present in the base are kept
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import TYPE_CHECKING, cast

from .errors import DocumentShapeError

if TYPE_CHECKING:
    from collections.abc import Sequence

type Scalar = str | int | float | bool | None
type Document = Scalar | list[Document] | dict[str, Document]
type DocumentMapping = dict[str, Document]

DEFAULT_KEY_FIELD = "name"
SPECIFICATIONS_FIELD = "specifications"


def merge_documents(
    base: Mapping[str, Document],
    overlay: Mapping[str, Document],
    *,
    key_field: str = DEFAULT_KEY_FIELD,
) -> DocumentMapping:
    """Return ``overlay`` merged onto a copy of ``base``; neither input is mutated."""

    if not isinstance(base, Mapping) or not isinstance(overlay, Mapping):
        raise DocumentShapeError("Only mapping documents can be merged")
    merged = cast("DocumentMapping", copy.deepcopy(dict(base)))
    _merge_into(merged, overlay, key_field)
    return merged


def _merge_into(target: DocumentMapping, overlay: Mapping[str, Document], key_field: str) -> None:
    for name, value in overlay.items():
        current = target.get(name)
        if isinstance(value, list) and isinstance(current, list):
            target[name] = _merge_arrays(current, value, key_field)
        else:
            target[name] = copy.deepcopy(value)


def _merge_arrays(
    base: Sequence[Document],
    overlay: Sequence[Document],
    key_field: str,
) -> list[Document]:
    if _is_keyed(base, key_field) and _is_keyed(overlay, key_field):
        return _merge_keyed(
            cast("Sequence[DocumentMapping]", base),
            cast("Sequence[DocumentMapping]", overlay),
            key_field,
        )
    return _merge_positional(base, overlay, key_field)


def _is_keyed(items: Sequence[Document], key_field: str) -> bool:
    return all(isinstance(item, dict) and key_field in item for item in items)


def _merge_keyed(
    base: Sequence[DocumentMapping],
    overlay: Sequence[DocumentMapping],
    key_field: str,
) -> list[Document]:
    merged: list[Document] = []
    for item in overlay:
        match = next(
            (candidate for candidate in base if candidate[key_field] == item[key_field]),
            None,
        )
        merged.append(_merge_element(match, item, key_field))
    return merged


def _merge_positional(
    base: Sequence[Document],
    overlay: Sequence[Document],
    key_field: str,
) -> list[Document]:
    merged: list[Document] = []
    for index, item in enumerate(overlay):
        counterpart = base[index] if index < len(base) else None
        merged.append(_merge_element(counterpart, item, key_field))
    return merged


def _merge_element(base: Document, overlay: Document, key_field: str) -> Document:
    if isinstance(base, dict) and isinstance(overlay, dict):
        combined = cast("DocumentMapping", copy.deepcopy(base))
        _merge_into(combined, overlay, key_field)
        return combined
    return copy.deepcopy(overlay)


def documents_equal(left: Document, right: Document) -> bool:
    """Structural equality; mapping order is ignored and booleans never equal numbers."""

    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if isinstance(left, dict) and isinstance(right, dict):
        return left.keys() == right.keys() and all(
            documents_equal(value, right[name]) for name, value in left.items()
        )
    if isinstance(left, list) and isinstance(right, list):
        return len(left) == len(right) and all(
            documents_equal(a, b) for a, b in zip(left, right, strict=True)
        )
    if isinstance(left, (dict, list)) or isinstance(right, (dict, list)):
        return False
    return left == right


def normalize_specification_fields(document: Mapping[str, Document]) -> DocumentMapping:
    """Return a copy of ``document`` with singleton ``fields`` mappings wrapped in arrays.

    Guide exports store ``specifications[*].fields`` as a single object while the
    API only accepts an array of ``{"name": ..., "value": ...}`` objects.
    """

    normalized = cast("DocumentMapping", copy.deepcopy(dict(document)))
    specifications = normalized.get(SPECIFICATIONS_FIELD)
    if specifications is None:
        return normalized
    if not isinstance(specifications, list):
        raise DocumentShapeError(
            f"'{SPECIFICATIONS_FIELD}' must be a list, got {type(specifications).__name__}",
            field=SPECIFICATIONS_FIELD,
        )

    for index, specification in enumerate(specifications):
        if not isinstance(specification, dict):
            raise DocumentShapeError(
                f"Specification #{index} must be a mapping, got {type(specification).__name__}",
                field=SPECIFICATIONS_FIELD,
            )
        fields = specification.get("fields")
        if isinstance(fields, dict):
            fields["name"] = "value"
            specification["fields"] = [fields]
        elif fields is not None and not isinstance(fields, list):
            raise DocumentShapeError(
                f"Specification {specification.get('name', index)!r} has malformed 'fields'",
                field="fields",
            )
    return normalized
