"""Human readable JSON formatting package."""

import importlib.metadata

from human_json.exceptions import (  # noqa: F401
    ConfigurationError,
    CyclicStructureError,
    HumanJsonError,
)
from human_json.formatter import BlockMode, EolStyle, Formatter  # noqa: F401
from human_json.keys import DEFAULT_PRIORITY_KEYS, KeyPriorityComparator  # noqa: F401
from human_json.values import Absent, SupportsJson  # noqa: F401

__version__ = importlib.metadata.version("human-json")

_DEFAULT_LINE_LENGTH = 120
_DEFAULT_INDENT = 2


def _get_version() -> str:
    return __version__


def stringify(
    obj: object,
    indent_spaces: object = _DEFAULT_INDENT,
    max_line_length: int = _DEFAULT_LINE_LENGTH,
    **options: object,
) -> str:
    """Format a value as human readable JSON in a single call.

    ``options`` are passed to Formatter; ``first_keys`` is accepted as
    another name for ``priority_keys``.

    This can also be called like ``json.dumps`` callers expect from
    ``JSON.stringify(obj, null, 2)``: when ``indent_spaces`` is None (or a
    replacer function or key list, which are ignored) and
    ``max_line_length`` is less than 10, the second number is taken as the
    indent and the default line length is used.
    """
    if indent_spaces is None or callable(indent_spaces) or isinstance(indent_spaces, (list, tuple)):
        if max_line_length < 10:  # noqa: PLR2004
            indent_spaces = max_line_length
            max_line_length = _DEFAULT_LINE_LENGTH
        else:
            indent_spaces = _DEFAULT_INDENT

    if "first_keys" in options:
        options["priority_keys"] = options.pop("first_keys")
    if options.get("priority_keys", DEFAULT_PRIORITY_KEYS) is None:
        options["priority_keys"] = DEFAULT_PRIORITY_KEYS

    formatter = Formatter(
        indent_spaces=indent_spaces,
        max_line_length=max_line_length,
        **options,
    )
    return formatter.serialize(obj)
