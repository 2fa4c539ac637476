"""Coercion of arbitrary Python values into the JSON data model."""

from __future__ import annotations

import datetime
import json
import logging
import math
import warnings
from collections.abc import Iterator, Mapping, Sequence, Set
from contextlib import contextmanager
from enum import Enum, IntEnum, auto
from typing import Any, Protocol, runtime_checkable

from human_json.exceptions import CyclicStructureError

logger = logging.getLogger(__name__)
debug = logger.debug

SIMPLE_TYPES = (str, int, float, bool, type(None))


class _AbsentType:
    """Marker for a value that has no JSON representation."""

    _instance = None

    def __new__(cls: type[_AbsentType]) -> _AbsentType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self: _AbsentType) -> str:
        return "Absent"

    def __bool__(self: _AbsentType) -> bool:
        return False


Absent = _AbsentType()


@runtime_checkable
class SupportsJson(Protocol):
    """Any object that can supply its own JSON representation."""

    def __json__(self) -> Any:  # noqa: ANN401, D105
        ...


class ContainerKind(IntEnum):
    """Shape of a value once it has been normalized."""

    ABSENT = auto()
    SCALAR = auto()
    SEQUENCE = auto()
    MAPPING = auto()


def is_simple(value: object) -> bool:
    """Return True for values that are eligible for fill-wrapping.

    The test is made on the value as supplied by the caller, before any
    normalization, so a date or an object with ``__json__`` is not simple
    even though it renders as a string.
    """
    return value is Absent or isinstance(value, SIMPLE_TYPES)


def _resolve(value: object) -> object:
    """Apply __json__, enum and date conversions until none applies."""
    while True:
        if isinstance(value, SupportsJson) and not isinstance(value, type):
            replacement = value.__json__()
            if replacement is value:
                raise CyclicStructureError(value)
            value = replacement
        elif isinstance(value, Enum):
            value = value.value
        elif isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
            return value.isoformat()
        else:
            return value


def _coerce_key(key: object) -> str:
    if isinstance(key, Enum):
        key = key.value
    if not isinstance(key, str):
        warnings.warn(
            f"converting key value {key} to string",
            RuntimeWarning,
            stacklevel=2,
        )
        if isinstance(key, bool):
            return "true" if key else "false"
        if key is None:
            return "null"
    return str(key)


def _coerce_mapping(value: Mapping) -> dict[str, Any]:
    items: dict[str, Any] = {}
    for k, v in value.items():
        k = _coerce_key(k)  # noqa: PLW2901
        if k in items:
            warnings.warn(
                f"duplicate key value {k}",
                RuntimeWarning,
                stacklevel=2,
            )
        # Assigning to an existing key keeps its original position
        items[k] = v
    return items


def classify(value: object) -> tuple[ContainerKind, Any, object, object]:
    """Normalize one level of a value.

    Returns a tuple of ``(kind, normalized, identity, source)``:

    * ``SCALAR``: ``normalized`` is None, a bool, a number or a string.
    * ``SEQUENCE``: ``normalized`` is a list of the (unnormalized) items.
    * ``MAPPING``: ``normalized`` is a dict of string keys to (unnormalized)
      values, in the mapping's iteration order.
    * ``ABSENT``: the value has no JSON representation.

    ``identity`` is the container object the items were read from and
    ``source`` is the original object when ``__json__`` or another
    conversion replaced it (otherwise None). Both are used to detect cycles.
    """
    resolved = _resolve(value)
    source = None if resolved is value else value
    if resolved is Absent:
        return ContainerKind.ABSENT, Absent, None, None
    if isinstance(resolved, SIMPLE_TYPES):
        return ContainerKind.SCALAR, resolved, None, None
    if isinstance(resolved, Mapping):
        return ContainerKind.MAPPING, _coerce_mapping(resolved), resolved, source
    if isinstance(resolved, Set):
        return ContainerKind.SEQUENCE, list(resolved), resolved, source
    if isinstance(resolved, Sequence) and not isinstance(resolved, (bytes, bytearray)):
        return ContainerKind.SEQUENCE, list(resolved), resolved, source

    debug(f"classify: no JSON representation for {type(resolved).__name__}")
    return ContainerKind.ABSENT, Absent, None, None


@contextmanager
def visiting(active: set[int], identity: object, source: object = None) -> Iterator[None]:
    """Mark a container, and the object it came from, as being formatted.

    Raises CyclicStructureError if either is already being formatted
    further up the current path.
    """
    tracked = [identity] if source is None else [source, identity]
    for obj in tracked:
        if id(obj) in active:
            raise CyclicStructureError(obj)
    ids = {id(obj) for obj in tracked}
    active.update(ids)
    try:
        yield
    finally:
        active.difference_update(ids)


def encode_scalar(value: object, ensure_ascii: bool = False) -> str:  # noqa: FBT001, FBT002
    """Encode a normalized scalar using standard JSON encoding."""
    if isinstance(value, float) and not math.isfinite(value):
        return "null"
    return json.dumps(value, ensure_ascii=ensure_ascii)


def to_json_value(value: object, active: set[int] | None = None) -> Any:  # noqa: ANN401
    """Deeply normalize a value into plain dicts, lists and scalars.

    Entries that normalize to Absent are dropped from dicts and replaced with
    None in lists. A top-level Absent is returned as is. ``active`` holds the
    ids of containers currently being visited; a repeat visit raises
    CyclicStructureError.
    """
    if active is None:
        active = set()

    kind, normalized, identity, source = classify(value)
    if kind == ContainerKind.ABSENT:
        return Absent
    if kind == ContainerKind.SCALAR:
        if isinstance(normalized, float) and not math.isfinite(normalized):
            return None
        return normalized

    with visiting(active, identity, source):
        if kind == ContainerKind.SEQUENCE:
            result = []
            for child in normalized:
                child_value = to_json_value(child, active)
                result.append(None if child_value is Absent else child_value)
            return result

        result = {}
        for k, child in normalized.items():
            child_value = to_json_value(child, active)
            if child_value is not Absent:
                result[k] = child_value
        return result
