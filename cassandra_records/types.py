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
Wire data model of the Cassandra Thrift interface.

These classes are plain containers. They mirror the Thrift structs field for
field so that a serialization layer can map them one to one; the only
behavior they carry is ``validate()``, which checks required fields the same
way the generated structs do.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum


class ConsistencyLevel(IntEnum):
    """
    Read/write durability requirement, chosen per call.

    The integer values are the ones used on the wire.
    """

    ZERO = 0
    ONE = 1
    QUORUM = 2
    DCQUORUM = 3
    DCQUORUMSYNC = 4
    ALL = 5
    ANY = 6


VALUE_MAP = {level.value: level.name for level in ConsistencyLevel}
VALID_VALUES = frozenset(VALUE_MAP)


class StructValidationError(ValueError):
    """Raised by ``validate()`` when a required field is unset."""


def _require(struct, *field_names):
    for name in field_names:
        if getattr(struct, name) is None:
            raise StructValidationError(f"Required field {name} is unset!")


@dataclass
class Column:
    name: bytes
    value: bytes
    timestamp: int

    def validate(self):
        _require(self, "name", "value", "timestamp")


@dataclass
class SuperColumn:
    name: bytes
    columns: list[Column] = field(default_factory=list)

    def validate(self):
        _require(self, "name", "columns")
        for column in self.columns:
            column.validate()


@dataclass
class ColumnOrSuperColumn:
    column: Column | None = None
    super_column: SuperColumn | None = None

    def validate(self):
        if (self.column is None) == (self.super_column is None):
            raise StructValidationError(
                "ColumnOrSuperColumn must set exactly one of column or super_column"
            )


@dataclass
class ColumnParent:
    column_family: str
    super_column: bytes | None = None

    def validate(self):
        _require(self, "column_family")


@dataclass
class ColumnPath:
    column_family: str
    super_column: bytes | None = None
    column: bytes | None = None

    def validate(self):
        _require(self, "column_family")


@dataclass
class SliceRange:
    """
    Ordered range of column names with a limit.

    An empty ``start`` begins at the first column; an empty ``finish`` keeps
    going until ``count`` columns have been seen.
    """

    start: bytes = b""
    finish: bytes = b""
    reversed: bool = False
    count: int = 100

    def validate(self):
        _require(self, "start", "finish", "reversed", "count")


@dataclass
class SlicePredicate:
    """
    Either a list of column names or a SliceRange.

    When ``column_names`` is set the server ignores ``slice_range``.
    """

    column_names: list[bytes] | None = None
    slice_range: SliceRange | None = None


@dataclass
class KeyRange:
    """
    Range of rows for get_range_slices.

    Keys are start-inclusive; tokens are start-exclusive and the range may
    wrap, with the end token lower than the start one. A range from keyX to
    keyX holds one row, while a range from tokenY to tokenY is the full ring.
    """

    start_key: bytes | None = None
    end_key: bytes | None = None
    start_token: str | None = None
    end_token: str | None = None
    count: int = 100

    def validate(self):
        _require(self, "count")
        has_keys = self.start_key is not None or self.end_key is not None
        has_tokens = self.start_token is not None or self.end_token is not None
        if has_keys and has_tokens:
            raise StructValidationError("KeyRange cannot mix keys and tokens")
        if not has_keys and not has_tokens:
            raise StructValidationError("KeyRange needs a key or token bound")


@dataclass
class KeySlice:
    key: bytes
    columns: list[ColumnOrSuperColumn] = field(default_factory=list)


@dataclass
class Deletion:
    timestamp: int
    super_column: bytes | None = None
    predicate: SlicePredicate | None = None

    def validate(self):
        _require(self, "timestamp")


@dataclass
class Mutation:
    """An insert (``column_or_supercolumn``) or a ``deletion``, never both."""

    column_or_supercolumn: ColumnOrSuperColumn | None = None
    deletion: Deletion | None = None

    def validate(self):
        if (self.column_or_supercolumn is None) == (self.deletion is None):
            raise StructValidationError(
                "Mutation must set exactly one of column_or_supercolumn or deletion"
            )


@dataclass
class TokenRange:
    start_token: str
    end_token: str
    endpoints: list[str] = field(default_factory=list)


@dataclass
class AuthenticationRequest:
    credentials: dict[str, str] = field(default_factory=dict)


class ProtocolException(Exception):
    """Base class for exceptions raised across the transport boundary."""

    def __init__(self, why: str | None = None):
        super().__init__(why or self.__class__.__name__)
        self.why = why


class NotFoundException(ProtocolException):
    """A specific column was requested that does not exist."""


class InvalidRequestException(ProtocolException):
    """Invalid request, such as a missing keyspace or column family."""


class UnavailableException(ProtocolException):
    """Not all the replicas required could be created and/or read."""


class TimedOutException(ProtocolException):
    """The node responsible for the write or read did not respond in time."""


class AuthenticationException(ProtocolException):
    """Invalid authentication request (user does not exist or bad credentials)."""


class AuthorizationException(ProtocolException):
    """Invalid authorization request (user does not have access to keyspace)."""
