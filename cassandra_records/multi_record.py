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
"""Reads and writes spanning an explicit list of row keys."""
from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Any, Iterable, TYPE_CHECKING

from cassandra_records import _helpers
from cassandra_records.exceptions import ValidationError
from cassandra_records.mutations import MutationSet
from cassandra_records.mutations import delete_mutation
from cassandra_records.mutations import insert_mutation
from cassandra_records.predicates import build_column_predicate
from cassandra_records.predicates import build_key_request
from cassandra_records.record import Record
from cassandra_records.row import ColumnValue
from cassandra_records.row import Row
from cassandra_records.selectors import ColumnSlice
from cassandra_records.selectors import KeyList

if TYPE_CHECKING:
    from cassandra_records.selectors import ColumnSelector
    from cassandra_records.transport import Transport

LOGGER = logging.getLogger(__name__)


class MultiRecord(Record):
    """
    The same columns across several rows, fetched in one round trip.

    Results always hold every requested key, in request order. A key with no
    matching columns maps to an empty :class:`~cassandra_records.row.Row`,
    whether the row is absent or merely has nothing in the selected range.

    :type keys: list
    :param keys: (Optional) Keys used when a call does not name its own.
    """

    def __init__(
        self,
        transport: Transport,
        column_family: str,
        keys: Iterable[str | bytes] | None = None,
        **kwargs,
    ):
        super().__init__(transport, column_family, None, **kwargs)
        self.keys = KeyList(keys).keys if keys is not None else ()

    def _key_list(self, keys) -> KeyList:
        key_list = KeyList(keys) if keys is not None else KeyList(self.keys)
        if not key_list.keys:
            raise ValidationError("MultiRecord needs at least one key")
        return key_list

    def get(
        self,
        keys: Iterable[str | bytes] | None = None,
        selector: ColumnSelector | None = None,
        consistency_level: Any = None,
    ) -> OrderedDict[bytes, Row]:
        """
        Read the same columns of every key

        Returns:
          - OrderedDict mapping each requested key to its Row
        """
        key_list = self._key_list(keys)
        level = self._read_level(consistency_level)
        predicate = build_column_predicate(selector or ColumnSlice())
        request = build_key_request(key_list, self._column_parent(), predicate)
        results = _helpers._call_transport(
            request.execute,
            self._transport,
            level,
            context=self._context(_helpers._context_key(key_list.keys), level),
        ).unwrap()
        rows: OrderedDict[bytes, Row] = OrderedDict()
        for key in key_list.keys:
            rows[key] = Row._from_column_or_super_columns(
                key, results.get(key, []), self.column_family, self.super_column
            )
        LOGGER.debug(
            "multiget of %d keys returned %d rows", len(key_list.keys), len(results)
        )
        return rows

    def count(
        self,
        keys: Iterable[str | bytes] | None = None,
        selector: ColumnSelector | None = None,
        consistency_level: Any = None,
    ) -> OrderedDict[bytes, int]:
        """
        Count matching columns per key; absent keys count 0
        """
        key_list = self._key_list(keys)
        level = self._read_level(consistency_level)
        predicate = build_column_predicate(selector or ColumnSlice())
        request = build_key_request(key_list, self._column_parent(), predicate)
        counts = _helpers._call_transport(
            request.count,
            self._transport,
            level,
            context=self._context(_helpers._context_key(key_list.keys), level),
        ).unwrap()
        return OrderedDict((key, counts.get(key, 0)) for key in key_list.keys)

    def set(
        self,
        column: ColumnValue | tuple,
        consistency_level: Any = None,
        keys: Iterable[str | bytes] | None = None,
    ):
        """
        Write the same column to every key, in one batch_mutate call

        All keys receive the same timestamp.
        """
        key_list = self._key_list(keys)
        column = self._prepare_column(column)
        mutations = MutationSet()
        for key in key_list.keys:
            mutations.add(key, self.column_family, insert_mutation(column))
        self._submit(
            mutations,
            _helpers._context_key(key_list.keys),
            self._write_level(consistency_level),
        )
        return column

    def delete(
        self,
        selector: ColumnSelector | None = None,
        timestamp: int | None = None,
        consistency_level: Any = None,
        keys: Iterable[str | bytes] | None = None,
    ):
        """
        Delete the same columns from every key, in one batch_mutate call
        """
        key_list = self._key_list(keys)
        if timestamp is None:
            timestamp = self._next_timestamp()
        mutations = MutationSet()
        for key in key_list.keys:
            mutations.add(
                key,
                self.column_family,
                delete_mutation(timestamp, selector, self.super_column),
            )
        self._submit(
            mutations,
            _helpers._context_key(key_list.keys),
            self._write_level(consistency_level),
        )
        return timestamp

    def __repr__(self):
        return (
            f"MultiRecord(column_family={self.column_family!r}, keys={list(self.keys)!r})"
        )
