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
Turns selection intents into protocol requests.

- build_column_predicate maps a ColumnSelector to a SlicePredicate
- build_key_request maps a KeySelector to one request object per read
  shape: SliceRequest, MultigetRequest, KeyRangeRequest or TokenRangeRequest.
  Dispatch is on the selector type, so a new shape only needs a new
  registration.
- next_page derives the request for the following page of a range scan.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from functools import singledispatch
from typing import TYPE_CHECKING, Any, Callable, Union

from cassandra_records.exceptions import ValidationError
from cassandra_records.selectors import ColumnNames
from cassandra_records.selectors import ColumnSlice
from cassandra_records.selectors import KeyList
from cassandra_records.selectors import KeySpan
from cassandra_records.selectors import SingleKey
from cassandra_records.selectors import TokenSpan
from cassandra_records.types import ColumnParent
from cassandra_records.types import ColumnPath
from cassandra_records.types import ConsistencyLevel
from cassandra_records.types import KeyRange
from cassandra_records.types import SlicePredicate
from cassandra_records.types import SliceRange

if TYPE_CHECKING:
    from cassandra_records.selectors import ColumnSelector
    from cassandra_records.transport import Transport


def build_column_predicate(selector: ColumnSelector) -> SlicePredicate:
    """
    Convert a ColumnSelector into a SlicePredicate

    Explicit names produce a predicate with ``column_names`` only; a range
    produces a predicate with ``slice_range`` only, carrying every field so
    that the server never falls back to its own defaults.

    Raises:
      - ValidationError if the selector is an empty name set, or not a
        ColumnSelector at all
    """
    if isinstance(selector, ColumnNames):
        if not selector.names:
            raise ValidationError("column names must not be empty")
        return SlicePredicate(column_names=list(selector.names))
    if isinstance(selector, ColumnSlice):
        return SlicePredicate(
            slice_range=SliceRange(
                start=selector.start,
                finish=selector.finish,
                reversed=selector.reversed,
                count=selector.count,
            )
        )
    raise ValidationError(f"not a column selector: {selector!r}")


def build_column_parent(
    column_family: str, super_column: bytes | None = None
) -> ColumnParent:
    if not column_family:
        raise ValidationError("column_family must be set")
    return ColumnParent(column_family=column_family, super_column=super_column)


def build_column_path(
    column_family: str,
    column: bytes | None = None,
    super_column: bytes | None = None,
) -> ColumnPath:
    if not column_family:
        raise ValidationError("column_family must be set")
    return ColumnPath(
        column_family=column_family, super_column=super_column, column=column
    )


@dataclass
class ColumnRequest:
    """Fetch of exactly one column (or one super column) of one row."""

    key: bytes
    column_path: ColumnPath

    def execute(self, transport: Transport, consistency_level: ConsistencyLevel):
        return transport.get(self.key, self.column_path, consistency_level)


@dataclass
class SliceRequest:
    """Slice of one row."""

    key: bytes
    column_parent: ColumnParent
    predicate: SlicePredicate

    def execute(self, transport: Transport, consistency_level: ConsistencyLevel):
        return transport.get_slice(
            self.key, self.column_parent, self.predicate, consistency_level
        )

    def count(self, transport: Transport, consistency_level: ConsistencyLevel):
        return transport.get_count(
            self.key, self.column_parent, self.predicate, consistency_level
        )


@dataclass
class MultigetRequest:
    """The same slice of several rows, in one round trip."""

    keys: list[bytes]
    column_parent: ColumnParent
    predicate: SlicePredicate

    def execute(self, transport: Transport, consistency_level: ConsistencyLevel):
        return transport.multiget_slice(
            list(self.keys), self.column_parent, self.predicate, consistency_level
        )

    def count(self, transport: Transport, consistency_level: ConsistencyLevel):
        return transport.multiget_count(
            list(self.keys), self.column_parent, self.predicate, consistency_level
        )


@dataclass
class KeyRangeRequest:
    """
    One page of a scan between two keys.

    Both ends are inclusive, so a follow-up page starting at the last key of
    this page returns that key again.
    """

    column_parent: ColumnParent
    predicate: SlicePredicate
    key_range: KeyRange

    start_is_exclusive = False

    @property
    def end_bound(self) -> bytes | None:
        return self.key_range.end_key or None

    def execute(self, transport: Transport, consistency_level: ConsistencyLevel):
        return transport.get_range_slices(
            self.column_parent, self.predicate, self.key_range, consistency_level
        )


@dataclass
class TokenRangeRequest:
    """
    One page of a scan over ``(start_token, end_token]``.

    ``covers_full_ring`` is carried from the selector and never recomputed
    from the current page's tokens: after the first page the bounds differ
    even though the scan still spans the ring.
    """

    column_parent: ColumnParent
    predicate: SlicePredicate
    key_range: KeyRange
    covers_full_ring: bool = False

    start_is_exclusive = True

    @property
    def end_bound(self) -> str:
        return self.key_range.end_token

    def execute(self, transport: Transport, consistency_level: ConsistencyLevel):
        return transport.get_range_slices(
            self.column_parent, self.predicate, self.key_range, consistency_level
        )


ReadRequest = Union[SliceRequest, MultigetRequest, KeyRangeRequest, TokenRangeRequest]


@singledispatch
def build_key_request(
    selector: Any, column_parent: ColumnParent, predicate: SlicePredicate
) -> ReadRequest:
    """
    Convert a KeySelector into the matching read request

    Raises:
      - ValidationError for anything that is not a KeySelector
    """
    raise ValidationError(f"not a key selector: {selector!r}")


@build_key_request.register(SingleKey)
def _(selector: SingleKey, column_parent, predicate) -> SliceRequest:
    return SliceRequest(selector.key, column_parent, predicate)


@build_key_request.register(KeyList)
def _(selector: KeyList, column_parent, predicate) -> MultigetRequest:
    if not selector.keys:
        raise ValidationError("key list must not be empty")
    return MultigetRequest(list(selector.keys), column_parent, predicate)


@build_key_request.register(KeySpan)
def _(selector: KeySpan, column_parent, predicate) -> KeyRangeRequest:
    key_range = KeyRange(
        start_key=selector.start_key, end_key=selector.end_key, count=selector.count
    )
    key_range.validate()
    return KeyRangeRequest(column_parent, predicate, key_range)


@build_key_request.register(TokenSpan)
def _(selector: TokenSpan, column_parent, predicate) -> TokenRangeRequest:
    key_range = KeyRange(
        start_token=selector.start_token,
        end_token=selector.end_token,
        count=selector.count,
    )
    key_range.validate()
    return TokenRangeRequest(
        column_parent,
        predicate,
        key_range,
        covers_full_ring=selector.covers_full_ring,
    )


def next_page(
    request: KeyRangeRequest | TokenRangeRequest,
    last_key: bytes,
    token_for: Callable[[bytes], str],
) -> KeyRangeRequest | TokenRangeRequest:
    """
    Returns the request for the page following one that ended at ``last_key``

    Key scans restart at ``last_key`` itself; token scans restart at the
    token of ``last_key``, which the exclusive start then skips.
    """
    if isinstance(request, TokenRangeRequest):
        key_range = replace(request.key_range, start_token=token_for(last_key))
    else:
        key_range = replace(request.key_range, start_key=last_key)
    return replace(request, key_range=key_range)


def order_preserving_token(key: bytes) -> str:
    """
    Token of ``key`` under an order-preserving partitioner

    The token is the key itself. Bytes are mapped one to one onto code
    points, so tokens sort exactly like the keys they come from.
    """
    return key.decode("latin-1")
