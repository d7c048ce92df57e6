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

from collections import OrderedDict
from typing import Any, NamedTuple, Sequence, overload

from cassandra_records._helpers import _to_key
from cassandra_records.types import Column
from cassandra_records.types import ColumnOrSuperColumn
from cassandra_records.types import SuperColumn

# Type aliases used internally for readability.
row_key = bytes
column_name = bytes
super_column_name = bytes


class ColumnKey(NamedTuple):
    """Where a value lives within a row."""

    column_family: str
    super_column: bytes | None = None
    column_name: bytes | None = None


class ColumnValue:
    """
    Model class for a single column.

    Columns read from the server always carry a timestamp. Columns built for
    a write may leave it unset; the writer assigns one before sending.
    """

    def __init__(
        self,
        name: column_name | str,
        value: bytes | str,
        timestamp: int | None = None,
        super_column: super_column_name | str | None = None,
    ):
        self.name = _to_key(name, "name")
        self.value = _to_key(value, "value")
        self.timestamp = timestamp
        self.super_column = (
            _to_key(super_column, "super_column") if super_column is not None else None
        )

    @classmethod
    def _from_column(cls, column: Column, super_column: bytes | None = None):
        return cls(column.name, column.value, column.timestamp, super_column)

    def _to_column(self, timestamp: int | None = None) -> Column:
        ts = self.timestamp if self.timestamp is not None else timestamp
        return Column(name=self.name, value=self.value, timestamp=ts)

    def with_timestamp(self, timestamp: int) -> ColumnValue:
        """Returns a copy of this column carrying ``timestamp``."""
        return ColumnValue(self.name, self.value, timestamp, self.super_column)

    def to_dict(self) -> dict[str, Any]:
        output: dict[str, Any] = {"name": self.name, "value": self.value}
        if self.timestamp is not None:
            output["timestamp"] = self.timestamp
        if self.super_column is not None:
            output["super_column"] = self.super_column
        return output

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self):
        return (
            f"ColumnValue(name={self.name!r}, value={self.value!r}, "
            f"timestamp={self.timestamp}, super_column={self.super_column!r})"
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, ColumnValue):
            return NotImplemented
        return (
            self.name == other.name
            and self.value == other.value
            and self.timestamp == other.timestamp
            and self.super_column == other.super_column
        )

    def __hash__(self):
        return hash((self.name, self.value, self.timestamp, self.super_column))


class Row(Sequence[ColumnValue]):
    """
    Model class for row data returned from the server

    Holds only the columns returned by a query, in the order the server
    returned them: column name order, or the reverse for reversed slices.
    Expected to be read-only to users, and written by the access layer from
    one complete response.

    Can be indexed:
    column = row[b"name"]
    column = row[b"super", b"name"]
    columns = row[0:2]

    A row read from inside one super column knows that super column, and
    looks bare names up within it.
    """

    def __init__(
        self,
        key: row_key,
        columns: list[ColumnValue] | None = None,
        column_family: str | None = None,
        super_column: super_column_name | None = None,
    ):
        self.key = key
        self.column_family = column_family
        self.super_column = super_column
        self._columns_list: list[ColumnValue] = list(columns or [])
        self._columns_map: dict[
            tuple[super_column_name | None, column_name], ColumnValue
        ] = OrderedDict()
        for column in self._columns_list:
            self._columns_map[(column.super_column, column.name)] = column

    @classmethod
    def _from_column_or_super_columns(
        cls,
        key: row_key,
        results: list[ColumnOrSuperColumn],
        column_family: str | None = None,
        super_column: bytes | None = None,
    ) -> Row:
        """
        Flattens a list of ColumnOrSuperColumn into a Row

        ``super_column`` is the parent the columns were read under, if the
        query targeted the inside of one super column.
        """
        columns: list[ColumnValue] = []
        for result in results:
            if result.super_column is not None:
                columns.extend(_flatten_super_column(result.super_column))
            elif result.column is not None:
                columns.append(ColumnValue._from_column(result.column, super_column))
        return cls(key, columns, column_family=column_family, super_column=super_column)

    def get_column(
        self, name: column_name | str, super_column: super_column_name | str | None = None
    ) -> ColumnValue:
        """
        Returns the column called ``name``

        Raises:
          - KeyError if the row holds no such column
        """
        name = _to_key(name, "name")
        if super_column is not None:
            super_column = _to_key(super_column, "super_column")
        else:
            super_column = self.super_column
        try:
            return self._columns_map[(super_column, name)]
        except KeyError:
            raise KeyError(
                f"Column {name!r} not found in row {self.key!r}"
            ) from None

    def get_columns(
        self, super_column: super_column_name | str | None = None
    ) -> list[ColumnValue]:
        """
        Returns every column, or only those under ``super_column``
        """
        if super_column is None:
            return list(self._columns_list)
        super_column = _to_key(super_column, "super_column")
        return [c for c in self._columns_list if c.super_column == super_column]

    def super_columns(self) -> list[super_column_name]:
        """
        Returns the names of the super columns present, in row order
        """
        names: list[bytes] = []
        for column in self._columns_list:
            if column.super_column is not None and column.super_column not in names:
                names.append(column.super_column)
        return names

    def get_column_components(self):
        """
        Returns a list of (super_column, name) pairs, usable for indexing
        """
        return list(self._columns_map.keys())

    def to_dict(self) -> dict[bytes, Any]:
        """
        Returns column values keyed by name

        Columns inside super columns are nested one level under the super
        column name.
        """
        output: dict[bytes, Any] = OrderedDict()
        for column in self._columns_list:
            if column.super_column is None:
                output[column.name] = column.value
            else:
                output.setdefault(column.super_column, OrderedDict())[
                    column.name
                ] = column.value
        return output

    def __iter__(self):
        for column in self._columns_list:
            yield column

    def __contains__(self, item):
        """
        Works for column names, (super_column, name) pairs and ColumnValues
        """
        if isinstance(item, (bytes, str)):
            return (self.super_column, _to_key(item, "name")) in self._columns_map
        if isinstance(item, tuple) and len(item) == 2:
            super_column, name = item
            if super_column is not None:
                super_column = _to_key(super_column, "super_column")
            return (super_column, _to_key(name, "name")) in self._columns_map
        return item in self._columns_list

    @overload
    def __getitem__(self, index: bytes | str | tuple) -> ColumnValue:
        # overload signature for type checking
        pass

    @overload
    def __getitem__(self, index: int) -> ColumnValue:
        # overload signature for type checking
        pass

    @overload
    def __getitem__(self, index: slice) -> list[ColumnValue]:
        # overload signature for type checking
        pass

    def __getitem__(self, index):
        if isinstance(index, (bytes, str)):
            return self.get_column(index)
        elif isinstance(index, tuple) and len(index) == 2:
            return self.get_column(index[1], super_column=index[0])
        elif isinstance(index, (int, slice)):
            return self._columns_list[index]
        raise TypeError("Index must be a column name, (super_column, name), int, or slice")

    def __len__(self):
        return len(self._columns_list)

    def __eq__(self, other):
        if not isinstance(other, Row):
            return False
        return self.key == other.key and self._columns_list == other._columns_list

    def __ne__(self, other) -> bool:
        return not self == other

    def __repr__(self):
        return (
            f"Row(key={self.key!r}, column_family={self.column_family!r}, "
            f"columns={[c.to_dict() for c in self._columns_list]})"
        )


def _flatten_super_column(super_column: SuperColumn) -> list[ColumnValue]:
    return [
        ColumnValue._from_column(column, super_column.name)
        for column in super_column.columns
    ]
