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
In-process Transport holding all data in dictionaries.

Storage layout:

data maps column family names to cf-dicts.

cf-dicts map row keys to row-dicts. A row stays in its cf-dict after all of
its columns are deleted, and keeps showing up in range scans with no columns,
like a real node does until compaction.

row-dicts map column names to Column objects in a standard column family, or
super column names to supercolumn-dicts in a super column family.

supercolumn-dicts map column names to Column objects.

The partitioner is order-preserving: a key's token is the key itself, so
key order and ring order agree. Column names compare as raw bytes.
"""
from __future__ import annotations

import logging
from typing import Callable

from cassandra_records.predicates import order_preserving_token
from cassandra_records.transport import Transport
from cassandra_records.types import Column
from cassandra_records.types import ColumnOrSuperColumn
from cassandra_records.types import ColumnParent
from cassandra_records.types import Deletion
from cassandra_records.types import InvalidRequestException
from cassandra_records.types import KeySlice
from cassandra_records.types import NotFoundException
from cassandra_records.types import SlicePredicate
from cassandra_records.types import SliceRange
from cassandra_records.types import StructValidationError
from cassandra_records.types import SuperColumn

LOGGER = logging.getLogger(__name__)

STANDARD = "Standard"
SUPER = "Super"


def _token_bytes(token: str) -> bytes:
    return token.encode("latin-1")


def _slice_predicate(slice_range: SliceRange) -> Callable[[bytes], bool]:
    start, end = slice_range.start, slice_range.finish
    if slice_range.reversed:
        start, end = end, start
    return lambda name: (not start or start <= name) and (not end or name <= end)


def _key_predicate_keys(start: bytes, end: bytes) -> Callable[[bytes], bool]:
    if not end:
        return lambda key: key >= start
    return lambda key: start <= key <= end


def _key_predicate_tokens(start: bytes, end: bytes) -> Callable[[bytes], bool]:
    if start >= end:
        # wraps around the ring; equal tokens select everything
        return lambda key: key > start or key <= end
    return lambda key: start < key <= end


class InMemoryTransport(Transport):
    """
    Single-node, in-process stand-in for a Cassandra node

    :type column_families: dict
    :param column_families: (Optional) Maps column family names to their
        type, ``"Standard"`` or ``"Super"``.
    """

    def __init__(self, column_families: dict[str, str] | None = None):
        self._column_types: dict[str, str] = {}
        self.data: dict[str, dict[bytes, dict]] = {}
        self._tombstones: dict[tuple, int] = {}
        for name, column_type in (column_families or {}).items():
            self.add_column_family(name, column_type)

    def add_column_family(self, name: str, column_type: str = STANDARD):
        if column_type not in (STANDARD, SUPER):
            raise ValueError(f"column_type must be {STANDARD!r} or {SUPER!r}")
        self._column_types[name] = column_type
        self.data.setdefault(name, {})

    @staticmethod
    def token_for(key: bytes) -> str:
        return order_preserving_token(key)

    # reads

    def get(self, key, column_path, consistency_level):
        is_super = self._is_super(column_path.column_family)
        if is_super and column_path.super_column is None:
            raise InvalidRequestException(
                why="column_path.super_column is required for a super column family"
            )
        if not is_super and column_path.super_column is not None:
            raise InvalidRequestException(
                why="Improper ColumnPath to standard ColumnFamily"
            )
        if not is_super and column_path.column is None:
            raise InvalidRequestException(why="column_path.column is required")
        row = self.data[column_path.column_family].get(key)
        if row is None:
            raise NotFoundException()
        if is_super:
            super_column = row.get(column_path.super_column)
            if not super_column:
                raise NotFoundException()
            if column_path.column is None:
                return ColumnOrSuperColumn(
                    super_column=self._pack_super_column(
                        column_path.super_column, super_column
                    )
                )
            column = super_column.get(column_path.column)
        else:
            column = row.get(column_path.column)
        if column is None:
            raise NotFoundException()
        return ColumnOrSuperColumn(column=column)

    def get_slice(self, key, column_parent, predicate, consistency_level):
        columns = self._lookup_column_parent(key, column_parent)
        names = self._filter_by_predicate(columns, predicate)
        if self._is_super(column_parent.column_family) and column_parent.super_column is None:
            return [
                ColumnOrSuperColumn(
                    super_column=self._pack_super_column(name, columns[name])
                )
                for name in names
            ]
        return [ColumnOrSuperColumn(column=columns[name]) for name in names]

    def get_count(self, key, column_parent, predicate, consistency_level):
        return len(self.get_slice(key, column_parent, predicate, consistency_level))

    def multiget_slice(self, keys, column_parent, predicate, consistency_level):
        result = {}
        for key in keys:
            columns = self.get_slice(key, column_parent, predicate, consistency_level)
            if columns:
                result[key] = columns
        return result

    def multiget_count(self, keys, column_parent, predicate, consistency_level):
        slices = self.multiget_slice(keys, column_parent, predicate, consistency_level)
        return {key: len(columns) for key, columns in slices.items()}

    def get_range_slices(self, column_parent, predicate, key_range, consistency_level):
        self._check_column_family(column_parent.column_family)
        try:
            key_range.validate()
        except StructValidationError as exc:
            raise InvalidRequestException(why=str(exc))
        keys = sorted(self.data[column_parent.column_family])
        if key_range.start_token is not None or key_range.end_token is not None:
            start = _token_bytes(key_range.start_token or "")
            end = _token_bytes(key_range.end_token or "")
            matches = _key_predicate_tokens(start, end)
            if start >= end:
                # ring order: everything after the start token, then the wrap
                keys = [k for k in keys if k > start] + [k for k in keys if k <= start]
        else:
            start = key_range.start_key or b""
            end = key_range.end_key or b""
            if end and start > end:
                raise InvalidRequestException(
                    why="start key must sort before (or equal to) finish key"
                )
            matches = _key_predicate_keys(start, end)
        out = []
        for key in keys:
            if len(out) >= key_range.count:
                break
            if matches(key):
                columns = self.get_slice(key, column_parent, predicate, consistency_level)
                out.append(KeySlice(key=key, columns=columns))
        return out

    # writes

    def batch_mutate(self, mutation_map, consistency_level):
        for key, by_family in mutation_map.items():
            # check every mutation of a key before applying any of them
            for column_family, mutations in by_family.items():
                self._check_column_family(column_family)
                for mutation in mutations:
                    try:
                        mutation.validate()
                    except StructValidationError as exc:
                        raise InvalidRequestException(why=str(exc))
                    if mutation.column_or_supercolumn is not None:
                        self._check_insert(column_family, mutation.column_or_supercolumn)
            for column_family, mutations in by_family.items():
                row = self.data[column_family].setdefault(key, {})
                for mutation in mutations:
                    if mutation.deletion is not None:
                        self._apply_delete(column_family, key, row, mutation.deletion)
                    else:
                        self._apply_insert(
                            column_family, key, row, mutation.column_or_supercolumn
                        )
        LOGGER.debug("applied mutations for %d keys", len(mutation_map))

    def _check_insert(self, column_family: str, cosc: ColumnOrSuperColumn):
        try:
            cosc.validate()
        except StructValidationError as exc:
            raise InvalidRequestException(why=str(exc))
        if self._is_super(column_family):
            if cosc.super_column is None:
                raise InvalidRequestException(
                    why="inserting Column into SuperColumnFamily"
                )
            columns = cosc.super_column.columns
        else:
            if cosc.super_column is not None:
                raise InvalidRequestException(
                    why="inserting SuperColumn into standard ColumnFamily"
                )
            columns = [cosc.column]
        for column in columns:
            if not 0 < len(column.name) < (1 << 16):
                raise InvalidRequestException(why="invalid column name")
            if column.timestamp is None:
                raise InvalidRequestException(why="Required field timestamp is unset!")

    def _apply_insert(self, column_family, key, row, cosc: ColumnOrSuperColumn):
        if cosc.super_column is not None:
            super_name = cosc.super_column.name
            target = row.setdefault(super_name, {})
            columns = cosc.super_column.columns
        else:
            super_name = None
            target = row
            columns = [cosc.column]
        for column in columns:
            if column.timestamp <= self._deleted_at(
                column_family, key, super_name, column.name
            ):
                continue
            existing = target.get(column.name)
            if existing is None or existing.timestamp <= column.timestamp:
                target[column.name] = column

    def _apply_delete(self, column_family, key, row, deletion: Deletion):
        if deletion.super_column is not None:
            target = row.get(deletion.super_column, {})
            tombstone_path = (column_family, key, deletion.super_column)
        else:
            target = row
            tombstone_path = (column_family, key)
        if deletion.predicate is None:
            names = list(target)
            self._mark_deleted(tombstone_path, deletion.timestamp)
        else:
            names = self._filter_by_predicate(target, deletion.predicate)
            if deletion.predicate.column_names is not None:
                for name in deletion.predicate.column_names:
                    self._mark_deleted(tombstone_path + (name,), deletion.timestamp)
        for name in names:
            value = target[name]
            if isinstance(value, dict):
                for sub_name in [
                    n for n, c in value.items() if c.timestamp <= deletion.timestamp
                ]:
                    del value[sub_name]
                if not value:
                    del target[name]
            elif value.timestamp <= deletion.timestamp:
                del target[name]

    def _mark_deleted(self, path: tuple, timestamp: int):
        self._tombstones[path] = max(self._tombstones.get(path, timestamp), timestamp)

    def _deleted_at(self, column_family, key, super_name, name) -> int:
        paths = [(column_family, key)]
        if super_name is not None:
            paths.append((column_family, key, super_name))
            paths.append((column_family, key, super_name, name))
        else:
            paths.append((column_family, key, name))
        return max(self._tombstones.get(path, -1) for path in paths)

    # lookups

    def _check_column_family(self, column_family: str):
        if column_family not in self._column_types:
            raise InvalidRequestException(
                why=f"unconfigured columnfamily {column_family}"
            )

    def _is_super(self, column_family: str) -> bool:
        self._check_column_family(column_family)
        return self._column_types[column_family] == SUPER

    def _lookup_column_parent(self, key: bytes, column_parent: ColumnParent) -> dict:
        is_super = self._is_super(column_parent.column_family)
        if not is_super and column_parent.super_column is not None:
            raise InvalidRequestException(
                why="Improper ColumnParent to standard ColumnFamily"
            )
        row = self.data[column_parent.column_family].get(key, {})
        if is_super and column_parent.super_column is not None:
            return row.get(column_parent.super_column, {})
        return row

    @staticmethod
    def _filter_by_predicate(columns: dict, predicate: SlicePredicate) -> list[bytes]:
        if predicate.column_names is not None:
            # slice_range is ignored whenever column names are given
            return sorted(n for n in set(predicate.column_names) if columns.get(n))
        slice_range = predicate.slice_range or SliceRange()
        if slice_range.count == 0:
            return []
        matches = _slice_predicate(slice_range)
        names = sorted(
            (n for n, value in columns.items() if value),
            reverse=bool(slice_range.reversed),
        )
        filtered = []
        for name in names:
            if matches(name):
                filtered.append(name)
                if len(filtered) >= slice_range.count:
                    break
        return filtered

    @staticmethod
    def _pack_super_column(name: bytes, columns: dict[bytes, Column]) -> SuperColumn:
        return SuperColumn(name=name, columns=[columns[n] for n in sorted(columns)])
