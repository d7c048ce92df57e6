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

from typing import Any, TYPE_CHECKING

from cassandra_records._helpers import _to_key
from cassandra_records.batch import _as_column_value
from cassandra_records.row import ColumnValue

if TYPE_CHECKING:
    from cassandra_records.batch import Batch
    from cassandra_records.selectors import ColumnSelector


class BatchRecord(object):
    """
    One row's view of a :class:`~cassandra_records.batch.Batch`.

    Writes are queued on the batch rather than sent, and return the record
    so they can be chained::

        batch.record(b"k1", "Users").set((b"name", b"alice")).delete(
            column_selector(names=[b"email"])
        )
    """

    def __init__(
        self,
        batch: Batch,
        column_family: str,
        key: str | bytes,
        super_column: str | bytes | None = None,
    ):
        self._batch = batch
        self.column_family = column_family
        self.key = _to_key(key)
        self.super_column = (
            _to_key(super_column, "super_column") if super_column is not None else None
        )

    @property
    def batch(self) -> Batch:
        return self._batch

    def set(self, column: ColumnValue | tuple) -> BatchRecord:
        if self.super_column is not None:
            column = _as_column_value(column)
            if column.super_column is None:
                column = ColumnValue(
                    column.name, column.value, column.timestamp, self.super_column
                )
        self._batch.add_insert(self.key, self.column_family, column)
        return self

    def delete(
        self, selector: ColumnSelector | None = None, timestamp: int | None = None
    ) -> BatchRecord:
        self._batch.add_delete(
            self.key,
            self.column_family,
            selector,
            timestamp=timestamp,
            super_column=self.super_column,
        )
        return self

    def commit(self, consistency_level: Any = None):
        """Commits the whole batch, including other rows' mutations."""
        self._batch.commit(consistency_level)
