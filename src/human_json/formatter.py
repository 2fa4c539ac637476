"""Human readable JSON formatter."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum, IntEnum, auto
from functools import lru_cache
from typing import TYPE_CHECKING, Any

from wcwidth import wcswidth

from human_json.exceptions import ConfigurationError
from human_json.keys import DEFAULT_PRIORITY_KEYS, KeyPriorityComparator
from human_json.values import (
    Absent,
    ContainerKind,
    classify,
    encode_scalar,
    is_simple,
    to_json_value,
    visiting,
)

if TYPE_CHECKING:
    from pathlib import PosixPath

logger = logging.getLogger(__name__)
debug = logger.debug

UNLIMITED = float("inf")


@lru_cache(4096)
def _wcswidth(s: str) -> int:
    return wcswidth(s)


class EolStyle(IntEnum):
    """End of line style enumeration."""

    CRLF = auto()
    LF = auto()


class BlockMode(str, Enum):
    """Which kinds of container a spacing or fill policy applies to."""

    NONE = "none"
    ARRAY = "array"
    OBJECT = "object"
    ALL = "all"

    @property
    def arrays(self: BlockMode) -> bool:
        """Return True if the policy applies to lists."""
        return self in (BlockMode.ARRAY, BlockMode.ALL)

    @property
    def objects(self: BlockMode) -> bool:
        """Return True if the policy applies to dicts."""
        return self in (BlockMode.OBJECT, BlockMode.ALL)


_EMPTY = ("{}", "[]")


def pad_tokens(text: str, spacing: BlockMode) -> str:
    """Insert spaces after commas and colons, and inside enabled brackets.

    Commas and colons are always followed by a space. Braces are padded when
    spacing applies to objects and square brackets when it applies to
    arrays. Empty containers are never padded. Text inside string literals
    is copied unchanged.
    """
    buffer = []
    in_string = False
    escaped = False
    for index, ch in enumerate(text):
        if in_string:
            buffer.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
            buffer.append(ch)
        elif ch in ",:":
            buffer += [ch, " "]
        elif text[index : index + 2] in _EMPTY or text[index - 1 : index + 1] in _EMPTY:
            buffer.append(ch)
        elif (ch == "{" and spacing.objects) or (ch == "[" and spacing.arrays):
            buffer += [ch, " "]
        elif (ch == "}" and spacing.objects) or (ch == "]" and spacing.arrays):
            buffer += [" ", ch]
        else:
            buffer.append(ch)
    return "".join(buffer)


@dataclass(frozen=True)
class Formatter:
    """Class that outputs JSON formatted in a human readable way.

    Any given container is formatted in one of three ways:
    * Lists and dicts are written on a single line if the result fits within
      max_line_length.
    * Lists (and optionally dicts) whose items are all simple values can be
      written over multiple lines, with as many items per line as will fit.
    * Otherwise, each dict property or list item is written on its own line,
      indented one step deeper than its parent.

    Properties:

    indent_spaces
        Number of spaces to use per indent level. Zero disables wrapping
        and everything is written on one line.

    max_line_length
        Maximum width of an output line, including indentation. Strings that
        are longer than this on their own are never split.

    sort_keys
        If True (the default), dict keys are sorted with the priority keys
        first. If False, dict keys are written in insertion order.

    priority_keys
        Keys that sort ahead of all others, in the order given. Matching
        ignores case.

    spacing_mode
        One of "none", "array", "object" or "all". Adds a space inside the
        brackets of single-line lists and/or dicts.

    fill_mode
        One of "none", "array", "object" or "all". Allows several simple
        items per line when a list and/or dict has to be expanded.

    append_trailing_newline
        If True, the output ends with a line ending.

    ensure_ascii
        If True, non-ASCII characters in strings are escaped.

    east_asian_string_widths
        If True, measure strings using their displayed width rather than
        the number of characters.

    json_eol_style
        Dictates what sort of line endings to use.
    """

    indent_spaces: int = 2
    max_line_length: int = 120
    sort_keys: bool = True
    priority_keys: tuple[str, ...] = DEFAULT_PRIORITY_KEYS
    spacing_mode: BlockMode = BlockMode.OBJECT
    fill_mode: BlockMode = BlockMode.ARRAY
    append_trailing_newline: bool = True
    ensure_ascii: bool = False
    east_asian_string_widths: bool = False
    json_eol_style: EolStyle = EolStyle.LF
    key_comparator: KeyPriorityComparator = field(init=False, repr=False, compare=False)

    def __post_init__(self: Formatter) -> None:
        """Validate settings and set up derived fields."""
        if (
            isinstance(self.indent_spaces, bool)
            or not isinstance(self.indent_spaces, int)
            or self.indent_spaces < 0
        ):
            msg = f"indent_spaces must be a non-negative integer, not {self.indent_spaces!r}"
            raise ConfigurationError(msg)
        if (
            isinstance(self.max_line_length, bool)
            or not isinstance(self.max_line_length, int)
            or self.max_line_length <= 0
        ):
            msg = f"max_line_length must be a positive integer, not {self.max_line_length!r}"
            raise ConfigurationError(msg)

        if isinstance(self.priority_keys, str):
            msg = "priority_keys must be a sequence of strings, not a string"
            raise ConfigurationError(msg)
        priority_keys = tuple(self.priority_keys)
        for key in priority_keys:
            if not isinstance(key, str):
                msg = f"priority key {key!r} is not a string"
                raise ConfigurationError(msg)

        object.__setattr__(self, "priority_keys", priority_keys)
        object.__setattr__(self, "spacing_mode", self._block_mode("spacing_mode"))
        object.__setattr__(self, "fill_mode", self._block_mode("fill_mode"))
        object.__setattr__(self, "key_comparator", KeyPriorityComparator(priority_keys))

    def _block_mode(self: Formatter, name: str) -> BlockMode:
        value = getattr(self, name)
        try:
            return BlockMode(value)
        except ValueError:
            choices = ", ".join(m.value for m in BlockMode)
            msg = f"{name} must be one of {choices}, not {value!r}"
            raise ConfigurationError(msg) from None

    @property
    def indent_str(self: Formatter) -> str:
        """Return the string for a single level of indent."""
        return " " * self.indent_spaces

    @property
    def max_length(self: Formatter) -> float:
        """Return the effective line length limit."""
        return UNLIMITED if self.indent_spaces == 0 else self.max_line_length

    @property
    def eol_str(self: Formatter) -> str:
        """Return the line ending string."""
        return "\r\n" if self.json_eol_style == EolStyle.CRLF else "\n"

    def str_len(self: Formatter, s: str) -> int:
        """Return string length supporting east-Asian characters."""
        if not self.east_asian_string_widths or s.isascii():
            return len(s)
        return _wcswidth(s)

    def dump(
        self: Formatter,
        obj: Any,  # noqa: ANN401
        output_file: str | PosixPath,
    ) -> None:
        """Write JSON to a file."""
        formatted = self.serialize(obj)
        with open(output_file, "w", newline="") as f:
            f.write(formatted)

    def serialize(self: Formatter, value: Any) -> str:  # noqa: ANN401
        """Serialize a value to formatted JSON."""
        result = self.format_element(0, value, 0, set())
        if result is Absent:
            debug("serialize: root value has no JSON representation")
            result = ""
        if self.json_eol_style == EolStyle.CRLF:
            # String literals never contain a raw newline
            result = result.replace("\n", "\r\n")
        if self.append_trailing_newline:
            result += self.eol_str
        return result

    def format_element(
        self: Formatter,
        depth: int,
        element: object,
        reserve: int,
        active: set[int],
    ) -> str | object:
        """Root formatting function for recursion.

        Returns the formatted text, or Absent if the element has no JSON
        representation. ``reserve`` is the width held back at the end of the
        line for punctuation that follows the element.
        """
        kind, value, identity, source = classify(element)
        if kind == ContainerKind.ABSENT:
            return Absent
        if value is None:
            return "null"

        if kind == ContainerKind.SCALAR:
            # Scalars are atomic, so they are written whole even if too wide
            return encode_scalar(value, self.ensure_ascii)

        if not self.sort_keys:
            inline = self.format_inline(depth, value, reserve, active)
            if inline is not None:
                return inline

        with visiting(active, identity, source):
            if kind == ContainerKind.SEQUENCE:
                return self.format_list(depth, value, reserve, active)
            return self.format_dict(depth, value, reserve, active)

    def format_inline(
        self: Formatter,
        depth: int,
        value: object,
        reserve: int,
        active: set[int],
    ) -> str | None:
        """Format a value on a single line if it fits, otherwise return None."""
        compact = json.dumps(
            to_json_value(value, active),
            separators=(",", ":"),
            ensure_ascii=self.ensure_ascii,
        )
        available = self.max_length - depth * self.indent_spaces - reserve
        if self.str_len(compact) > available:
            return None

        padded = pad_tokens(compact, self.spacing_mode).strip()
        if self.str_len(padded) > available:
            debug(f"format_inline: padding overflows available={available}")
            return None
        return padded

    def format_list(
        self: Formatter,
        depth: int,
        element: list,
        reserve: int,
        active: set[int],
    ) -> str:
        """Recursively format all of this list's elements."""
        items = []
        for child in element:
            value = self.format_element(depth + 1, child, 2, active)
            # Lists can't have holes, so anything without a representation becomes null
            items.append("null" if value is Absent else value)

        if self.fill_mode.arrays and all(is_simple(child) for child in element):
            items = self.fill_wrap(depth + 1, items)

        return self.join_items(depth, reserve, items, "[]", self.spacing_mode.arrays)

    def format_dict(
        self: Formatter,
        depth: int,
        element: dict,
        reserve: int,
        active: set[int],
    ) -> str:
        """Recursively format all of this dict's property values."""
        keys = list(element.keys())
        if self.sort_keys:
            keys = self.key_comparator.sorted_keys(keys)

        items = []
        for key in keys:
            name = json.dumps(key, ensure_ascii=self.ensure_ascii) + ": "
            value = self.format_element(
                depth + 1,
                element[key],
                self.str_len(name) + 1,
                active,
            )
            if value is Absent:
                debug(f"format_dict: dropping {name}")
                continue
            items.append(name + value)

        if self.fill_mode.objects and all(is_simple(v) for v in element.values()):
            items = self.fill_wrap(depth + 1, items)

        return self.join_items(depth, reserve, items, "{}", self.spacing_mode.objects)

    def fill_wrap(self: Formatter, depth: int, items: list[str]) -> list[str]:
        """Pack consecutive items onto shared lines.

        This is a single greedy pass with no backtracking: each item joins
        the current line if the line, including the separator and a trailing
        comma, still fits within max_line_length. Otherwise it starts a new
        line.
        """
        indent_length = depth * self.indent_spaces
        lines: list[str] = []
        for item in items:
            if lines and (
                indent_length + self.str_len(lines[-1]) + self.str_len(item) + 3
                <= self.max_length
            ):
                lines[-1] = lines[-1] + ", " + item
            else:
                lines.append(item)
        debug(f"fill_wrap: {len(items)} items on {len(lines)} lines")
        return lines

    def join_items(
        self: Formatter,
        depth: int,
        reserve: int,
        items: list[str],
        brackets: str,
        padded: bool,  # noqa: FBT001
    ) -> str:
        """Combine formatted items on a single line, or one per line."""
        if len(items) == 0:
            return brackets

        (open_bracket, close_bracket) = brackets
        joined = ", ".join(items)
        if padded:
            single_line = f"{open_bracket} {joined} {close_bracket}"
        else:
            single_line = f"{open_bracket}{joined}{close_bracket}"

        margin = self.indent_str * depth
        # Leave room for at least a trailing comma and space
        overhead = max(reserve, 2)
        if (
            "\n" not in joined
            and len(margin) + self.str_len(single_line) + overhead <= self.max_length
        ):
            return single_line

        debug(f"join_items: expanding {brackets} at depth {depth}")
        next_indent = margin + self.indent_str
        buffer = [open_bracket, "\n", next_indent]
        buffer.append((",\n" + next_indent).join(items))
        buffer += ["\n", margin, close_bracket]
        return "".join(buffer)
