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
from __future__ import annotations

import logging
from typing import Any, TYPE_CHECKING

from cassandra_records import _helpers
from cassandra_records.exceptions import ValidationError
from cassandra_records.mutations import MutationSet
from cassandra_records.mutations import delete_mutation
from cassandra_records.mutations import insert_mutation
from cassandra_records.row import ColumnValue
from cassandra_records.timestamps import MicrosecondClock

if TYPE_CHECKING:
    from cassandra_records.batch_record import BatchRecord
    from cassandra_records.selectors import ColumnSelector
    from cassandra_records.transport import Transport

LOGGER = logging.getLogger(__name__)


def _as_column_value(column: ColumnValue | tuple) -> ColumnValue:
    if isinstance(column, ColumnValue):
        return column
    try:
        name, value = column
    except (TypeError, ValueError):
        raise ValidationError(
            "column must be a ColumnValue or a (name, value) pair"
        ) from None
    return ColumnValue(name, value)


class Batch(object):
    """
    Accumulates inserts and deletions and submits them in one round trip.

    Nothing is sent until :meth:`commit`. Used as a context manager, the batch
    commits when the block exits cleanly and sends nothing when it raises::

        with Batch(transport) as batch:
            batch.add_insert(b"k1", "Users", (b"name", b"alice"))
            batch.add_delete(b"k2", "Users")

    Mutations are grouped by key; each key is applied atomically by the
    server, but a batch spanning several keys is not atomic as a whole.

    A Batch is not safe to fill from several threads at once. Give each
    thread its own batch, or synchronize access.

    :type transport: :class:`~cassandra_records.transport.Transport`
    :param transport: The transport mutations are submitted through.

    :type consistency_level: :class:`~cassandra_records.types.ConsistencyLevel`
    :param consistency_level: (Optional) Level used by :meth:`commit` when it
        is not given one. Defaults to ``CASSANDRA_RECORDS_WRITE_CONSISTENCY``
        from the environment, or ONE.

    :type clock: callable
    :param clock: (Optional) Source of timestamps for columns and deletions
        that do not carry one.
    """

    def __init__(self, transport: Transport, *, consistency_level: Any = None, clock=None):
        self._transport = transport
        self._consistency_level = (
            _helpers.validate_consistency_level(consistency_level)
            if consistency_level is not None
            else None
        )
        self._clock = clock or MicrosecondClock()
        self._mutations = MutationSet()

    @property
    def mutations(self) -> MutationSet:
        return self._mutations

    def add_insert(
        self, key: str | bytes, column_family: str, column: ColumnValue | tuple
    ) -> ColumnValue:
        """
        Queue the insertion of one column

        The timestamp is assigned now, when the column does not carry one,
        so that queue order and timestamp order agree.
        """
        column = _as_column_value(column)
        if column.timestamp is None:
            column = column.with_timestamp(self._clock())
        self._mutations.add(key, column_family, insert_mutation(column))
        return column

    def add_delete(
        self,
        key: str | bytes,
        column_family: str,
        selector: ColumnSelector | None = None,
        timestamp: int | None = None,
        super_column: str | bytes | None = None,
    ) -> int:
        """
        Queue a deletion

        With no selector the whole row is deleted, or the whole super column
        when ``super_column`` is given.
        """
        if timestamp is None:
            timestamp = self._clock()
        if super_column is not None:
            super_column = _helpers._to_key(super_column, "super_column")
        self._mutations.add(
            key, column_family, delete_mutation(timestamp, selector, super_column)
        )
        return timestamp

    def record(
        self,
        key: str | bytes,
        column_family: str,
        super_column: str | bytes | None = None,
    ) -> BatchRecord:
        """Returns a view of this batch bound to one row."""
        from cassandra_records.batch_record import BatchRecord

        return BatchRecord(self, column_family, key, super_column=super_column)

    def commit(self, consistency_level: Any = None):
        """
        Submit every queued mutation in one batch_mutate call

        The batch is emptied when the call succeeds. When it fails the
        mutations are kept, so the caller may commit again; keys the server
        already applied are then rewritten with the same timestamps, which
        leaves them unchanged.

        Committing an empty batch makes no call.

        Raises:
          - Unavailable, TimedOut, InvalidRequest, AuthenticationFailed,
            AuthorizationFailed as reported by the server
        """
        level = _helpers._resolve_consistency_level(
            consistency_level, self._consistency_level, _helpers.WRITE_CONSISTENCY_ENV
        )
        if not self._mutations:
            LOGGER.debug("empty batch, nothing to commit")
            return
        keys = self._mutations.keys()
        LOGGER.debug(
            "committing %d mutations for %d keys at %s",
            len(self._mutations),
            len(keys),
            level.name,
        )
        families = self._mutations.column_families()
        context = _helpers._RequestContext(
            column_family=families[0] if len(families) == 1 else None,
            key=_helpers._context_key(keys),
            consistency_level=level,
        )
        _helpers._call_transport(
            self._transport.batch_mutate,
            self._mutations.to_mutation_map(),
            level,
            context=context,
        ).unwrap()
        self._mutations.clear()

    def __len__(self):
        return len(self._mutations)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if exc_type is None:
            self.commit()

    def __repr__(self):
        return f"Batch(mutations={len(self._mutations)})"
