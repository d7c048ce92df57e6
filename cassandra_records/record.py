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
"""Base class binding a column family and a row key to column operations."""
from __future__ import annotations

import logging
from typing import Any, TYPE_CHECKING

from cassandra_records import _helpers
from cassandra_records.batch import _as_column_value
from cassandra_records.exceptions import NotFound
from cassandra_records.exceptions import ValidationError
from cassandra_records.mutations import MutationSet
from cassandra_records.mutations import delete_mutation
from cassandra_records.mutations import insert_mutation
from cassandra_records.predicates import ColumnRequest
from cassandra_records.predicates import build_column_parent
from cassandra_records.predicates import build_column_path
from cassandra_records.predicates import build_column_predicate
from cassandra_records.predicates import build_key_request
from cassandra_records.row import ColumnValue
from cassandra_records.row import Row
from cassandra_records.selectors import ColumnNames
from cassandra_records.selectors import ColumnSlice
from cassandra_records.selectors import SingleKey
from cassandra_records.timestamps import MicrosecondClock
from cassandra_records.types import ConsistencyLevel

if TYPE_CHECKING:
    from cassandra_records.selectors import ColumnSelector
    from cassandra_records.transport import Transport

LOGGER = logging.getLogger(__name__)


class Record(object):
    """One logical row: a key within a column family, and optionally one
    super column within that row.

    Reads and writes go straight to the transport, one round trip each.
    A Record holds no connection of its own and keeps no row data between
    calls, so any number of records may share a transport.

    :type transport: :class:`~cassandra_records.transport.Transport`
    :param transport: The transport requests are sent through.

    :type column_family: str
    :param column_family: Name of the column family.

    :type key: bytes
    :param key: (Optional) The row key. Strings are utf-8 encoded.

    :type super_column: bytes
    :param super_column: (Optional) Scope every operation to the columns of
        this super column.

    :type read_consistency_level: :class:`~cassandra_records.types.ConsistencyLevel`
    :param read_consistency_level: (Optional) Level used when a read does
        not name one. Defaults to ``CASSANDRA_RECORDS_READ_CONSISTENCY``
        from the environment, or ONE.

    :type write_consistency_level: :class:`~cassandra_records.types.ConsistencyLevel`
    :param write_consistency_level: (Optional) Level used when a write does
        not name one. Defaults to ``CASSANDRA_RECORDS_WRITE_CONSISTENCY``
        from the environment, or ONE.

    :type clock: callable
    :param clock: (Optional) Source of write timestamps. Defaults to a new
        :class:`~cassandra_records.timestamps.MicrosecondClock`.
    """

    def __init__(
        self,
        transport: Transport,
        column_family: str,
        key: str | bytes | None = None,
        *,
        super_column: str | bytes | None = None,
        read_consistency_level: Any = None,
        write_consistency_level: Any = None,
        clock=None,
    ):
        if not column_family:
            raise ValidationError("column_family must be set")
        self._transport = transport
        self.column_family = column_family
        self.key = _helpers._to_key(key) if key is not None else None
        self.super_column = (
            _helpers._to_key(super_column, "super_column")
            if super_column is not None
            else None
        )
        self._read_consistency_level = (
            _helpers.validate_consistency_level(read_consistency_level)
            if read_consistency_level is not None
            else None
        )
        self._write_consistency_level = (
            _helpers.validate_consistency_level(write_consistency_level)
            if write_consistency_level is not None
            else None
        )
        self._clock = clock or MicrosecondClock()

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def read_consistency_level(self) -> ConsistencyLevel:
        return _helpers._resolve_consistency_level(
            None, self._read_consistency_level, _helpers.READ_CONSISTENCY_ENV
        )

    @property
    def write_consistency_level(self) -> ConsistencyLevel:
        return _helpers._resolve_consistency_level(
            None, self._write_consistency_level, _helpers.WRITE_CONSISTENCY_ENV
        )

    def _read_level(self, consistency_level: Any) -> ConsistencyLevel:
        return _helpers._resolve_consistency_level(
            consistency_level,
            self._read_consistency_level,
            _helpers.READ_CONSISTENCY_ENV,
        )

    def _write_level(self, consistency_level: Any) -> ConsistencyLevel:
        return _helpers._resolve_consistency_level(
            consistency_level,
            self._write_consistency_level,
            _helpers.WRITE_CONSISTENCY_ENV,
        )

    def _require_key(self) -> bytes:
        if self.key is None:
            raise ValidationError(
                f"{self.__class__.__name__} has no row key to operate on"
            )
        return self.key

    def _context(self, key, consistency_level) -> _helpers._RequestContext:
        return _helpers._RequestContext(
            column_family=self.column_family,
            key=key,
            consistency_level=consistency_level,
        )

    def _column_parent(self):
        return build_column_parent(self.column_family, self.super_column)

    def _next_timestamp(self) -> int:
        return self._clock()

    def get(
        self,
        selector: ColumnSelector | None = None,
        consistency_level: Any = None,
    ) -> Row:
        """
        Read columns of this row

        A selector naming exactly one column fails with NotFound when that
        column is absent. Inside a bound super column the name is read with
        a single-column lookup. Otherwise it is read as a one-name slice, so
        on a super column family it names a whole super column.

        Args:
          - selector: the columns to read. Defaults to the first 100 columns.
          - consistency_level: overrides the record's read level
        Returns:
          - the Row, empty when a slice matched nothing
        Raises:
          - NotFound if the selector named exactly one column and the row
            has no such column
          - ValidationError if the selector or consistency level is invalid
          - Unavailable, TimedOut, InvalidRequest, AuthenticationFailed,
            AuthorizationFailed as reported by the server
        """
        key = self._require_key()
        level = self._read_level(consistency_level)
        if selector is None:
            selector = ColumnSlice()
        context = self._context(key, level)
        single_name = isinstance(selector, ColumnNames) and len(selector.names) == 1
        if single_name and self.super_column is not None:
            return self._get_one(key, selector.names[0], level, context)
        predicate = build_column_predicate(selector)
        request = build_key_request(SingleKey(key), self._column_parent(), predicate)
        results = _helpers._call_transport(
            request.execute, self._transport, level, context=context
        ).unwrap()
        if single_name and not results:
            raise NotFound(
                f"column {selector.names[0]!r} not found",
                key=key,
                column_family=self.column_family,
                consistency_level=level,
            )
        return Row._from_column_or_super_columns(
            key, results, self.column_family, self.super_column
        )

    def _get_one(self, key, name, level, context) -> Row:
        column_path = build_column_path(
            self.column_family, column=name, super_column=self.super_column
        )
        request = ColumnRequest(key, column_path)
        result = _helpers._call_transport(
            request.execute, self._transport, level, context=context
        ).unwrap()
        return Row._from_column_or_super_columns(
            key, [result], self.column_family, self.super_column
        )

    def set(self, column: ColumnValue | tuple, consistency_level: Any = None):
        """
        Write one column immediately

        Args:
          - column: a ColumnValue, or a ``(name, value)`` pair. A missing
            timestamp is taken from the record's clock.
          - consistency_level: overrides the record's write level
        """
        key = self._require_key()
        column = self._prepare_column(column)
        mutations = MutationSet()
        mutations.add(key, self.column_family, insert_mutation(column))
        self._submit(mutations, key, self._write_level(consistency_level))
        return column

    def delete(
        self,
        selector: ColumnSelector | None = None,
        timestamp: int | None = None,
        consistency_level: Any = None,
    ):
        """
        Delete columns immediately

        With no selector the whole row is deleted (or the whole bound super
        column). Only columns written before ``timestamp`` are removed; it
        defaults to the record's clock.
        """
        key = self._require_key()
        if timestamp is None:
            timestamp = self._next_timestamp()
        mutations = MutationSet()
        mutations.add(
            key,
            self.column_family,
            delete_mutation(timestamp, selector, self.super_column),
        )
        self._submit(mutations, key, self._write_level(consistency_level))
        return timestamp

    def _prepare_column(self, column: ColumnValue | tuple) -> ColumnValue:
        column = _as_column_value(column)
        if column.super_column is None and self.super_column is not None:
            column = ColumnValue(
                column.name, column.value, column.timestamp, self.super_column
            )
        if column.timestamp is None:
            column = column.with_timestamp(self._next_timestamp())
        return column

    def _submit(self, mutations: MutationSet, key, level: ConsistencyLevel):
        LOGGER.debug(
            "submitting %d mutations to %s at %s",
            len(mutations),
            self.column_family,
            level.name,
        )
        _helpers._call_transport(
            self._transport.batch_mutate,
            mutations.to_mutation_map(),
            level,
            context=self._context(key, level),
        ).unwrap()

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(column_family={self.column_family!r}, "
            f"key={self.key!r}, super_column={self.super_column!r})"
        )
