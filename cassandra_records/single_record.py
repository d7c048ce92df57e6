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

from cassandra_records import _helpers
from cassandra_records.exceptions import NotFound
from cassandra_records.exceptions import ValidationError
from cassandra_records.predicates import build_column_predicate
from cassandra_records.predicates import build_key_request
from cassandra_records.record import Record
from cassandra_records.selectors import ColumnNames
from cassandra_records.selectors import ColumnSlice
from cassandra_records.selectors import SingleKey

if TYPE_CHECKING:
    from cassandra_records.selectors import ColumnSelector
    from cassandra_records.transport import Transport


class SingleRecord(Record):
    """
    A Record that always addresses exactly one row.

    :type transport: :class:`~cassandra_records.transport.Transport`
    :param transport: The transport requests are sent through.

    :type column_family: str
    :param column_family: Name of the column family.

    :type key: bytes
    :param key: The row key. Required.
    """

    def __init__(self, transport: Transport, column_family: str, key: str | bytes, **kwargs):
        if key is None:
            raise ValidationError("SingleRecord requires a row key")
        super().__init__(transport, column_family, key, **kwargs)

    def count(
        self,
        selector: ColumnSelector | None = None,
        consistency_level: Any = None,
    ) -> int:
        """
        Count the columns of this row matched by ``selector``

        The server counts at most ``selector.count`` columns of a slice.
        """
        level = self._read_level(consistency_level)
        predicate = build_column_predicate(selector or ColumnSlice())
        request = build_key_request(SingleKey(self.key), self._column_parent(), predicate)
        return _helpers._call_transport(
            request.count,
            self._transport,
            level,
            context=self._context(self.key, level),
        ).unwrap()

    def get_value(
        self, name: str | bytes, default: Any = None, consistency_level: Any = None
    ) -> Any:
        """
        Returns the value of column ``name``, or ``default`` if it is absent
        """
        try:
            row = self.get(ColumnNames([name]), consistency_level=consistency_level)
        except NotFound:
            return default
        return row[0].value if len(row) else default

    def exists(self, consistency_level: Any = None) -> bool:
        """Whether the row holds at least one column."""
        row = self.get(ColumnSlice(count=1), consistency_level=consistency_level)
        return len(row) > 0
