# Copyright 2026 The cassandra-records Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
"""
Column and row selection intents.

Each selector is a small immutable variant. The predicate builder turns them
into protocol requests; new read shapes are added as new variants without
touching the existing ones.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Union

from cassandra_records._helpers import _to_key
from cassandra_records.exceptions import ValidationError
from cassandra_records.types import TokenRange

LOGGER = logging.getLogger(__name__)

DEFAULT_COLUMN_COUNT = 100
DEFAULT_ROW_COUNT = 100


def _validate_count(count: int, name: str = "count"):
    if isinstance(count, bool) or not isinstance(count, int):
        raise ValidationError(f"{name} must be an integer")
    if count < 0:
        raise ValidationError(f"{name} must be >= 0")


@dataclass(frozen=True)
class ColumnNames:
    """An explicit, ordered set of column names."""

    names: tuple[bytes, ...]

    def __init__(self, names: Iterable[str | bytes]):
        if isinstance(names, (str, bytes)):
            names = [names]
        unique: list[bytes] = []
        for name in names:
            name = _to_key(name, "column name")
            if name not in unique:
                unique.append(name)
        object.__setattr__(self, "names", tuple(unique))


@dataclass(frozen=True)
class ColumnSlice:
    """
    An ordered range of columns.

    An empty ``start`` or ``finish`` leaves that end of the range open.
    ``count`` caps the number of columns returned; the server default of 100
    applies when it is not given.
    """

    start: bytes = b""
    finish: bytes = b""
    reversed: bool = False
    count: int = DEFAULT_COLUMN_COUNT

    def __post_init__(self):
        object.__setattr__(self, "start", _to_key(self.start, "start"))
        object.__setattr__(self, "finish", _to_key(self.finish, "finish"))
        _validate_count(self.count)


ColumnSelector = Union[ColumnNames, ColumnSlice]


def column_selector(
    names: Iterable[str | bytes] | None = None,
    start: str | bytes | None = None,
    finish: str | bytes | None = None,
    reversed: bool | None = None,
    count: int | None = None,
) -> ColumnSelector:
    """
    Build a ColumnSelector from keyword intent.

    Explicit names take precedence: when a non-empty ``names`` is given the
    range arguments are ignored. With no arguments the selector is the first
    100 columns of the row.

    Raises:
      - ValidationError if ``names`` is empty and no range argument is given
    """
    has_range = any(arg is not None for arg in (start, finish, reversed, count))
    if names is not None:
        selector = ColumnNames(names)
        if selector.names:
            if has_range:
                LOGGER.debug("column names given, ignoring slice range arguments")
            return selector
        if not has_range:
            raise ValidationError("column names must not be empty")
    kwargs = {}
    if start is not None:
        kwargs["start"] = start
    if finish is not None:
        kwargs["finish"] = finish
    if reversed is not None:
        kwargs["reversed"] = bool(reversed)
    if count is not None:
        kwargs["count"] = count
    return ColumnSlice(**kwargs)


@dataclass(frozen=True)
class SingleKey:
    key: bytes

    def __post_init__(self):
        object.__setattr__(self, "key", _to_key(self.key))


@dataclass(frozen=True)
class KeyList:
    """Explicit keys, in request order. Duplicates are collapsed."""

    keys: tuple[bytes, ...]

    def __init__(self, keys: Iterable[str | bytes]):
        if isinstance(keys, (str, bytes)):
            keys = [keys]
        unique: dict[bytes, None] = {}
        for key in keys:
            unique[_to_key(key)] = None
        object.__setattr__(self, "keys", tuple(unique))


@dataclass(frozen=True)
class KeySpan:
    """
    Rows between two keys, both ends inclusive.

    ``KeySpan(k, k)`` selects at most one row. An empty key leaves that end
    open. ``count`` is the number of rows fetched per page.
    """

    start_key: bytes = b""
    end_key: bytes = b""
    count: int = DEFAULT_ROW_COUNT

    def __post_init__(self):
        object.__setattr__(self, "start_key", _to_key(self.start_key, "start_key"))
        object.__setattr__(self, "end_key", _to_key(self.end_key, "end_key"))
        _validate_count(self.count)


@dataclass(frozen=True)
class TokenSpan:
    """
    Rows whose token lies in ``(start_token, end_token]``.

    The start is exclusive and the span may wrap around the ring when the
    end token sorts before the start one. ``TokenSpan(t, t)`` is the whole
    ring, not a single row. ``count`` is the number of rows fetched per page.
    """

    start_token: str
    end_token: str
    count: int = DEFAULT_ROW_COUNT

    def __post_init__(self):
        for name in ("start_token", "end_token"):
            value = getattr(self, name)
            if isinstance(value, bytes):
                object.__setattr__(self, name, value.decode("utf-8"))
            elif not isinstance(value, str):
                raise ValidationError(f"{name} must be a string or bytes")
        _validate_count(self.count)

    @property
    def covers_full_ring(self) -> bool:
        return self.start_token == self.end_token

    @classmethod
    def from_token_range(cls, token_range: TokenRange, count: int = DEFAULT_ROW_COUNT):
        """Selects the rows owned by one ring segment, as reported by describe_ring."""
        return cls(token_range.start_token, token_range.end_token, count)


KeySelector = Union[SingleKey, KeyList, KeySpan, TokenSpan]
