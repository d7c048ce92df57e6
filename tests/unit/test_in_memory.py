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

import pytest

from cassandra_records.types import Column
from cassandra_records.types import ColumnOrSuperColumn
from cassandra_records.types import ColumnParent
from cassandra_records.types import ColumnPath
from cassandra_records.types import ConsistencyLevel
from cassandra_records.types import Deletion
from cassandra_records.types import InvalidRequestException
from cassandra_records.types import KeyRange
from cassandra_records.types import Mutation
from cassandra_records.types import NotFoundException
from cassandra_records.types import SlicePredicate
from cassandra_records.types import SliceRange
from cassandra_records.types import SuperColumn

ONE = ConsistencyLevel.ONE
ALL_COLUMNS = SlicePredicate(slice_range=SliceRange())


def _insert(name, value, timestamp):
    return Mutation(
        column_or_supercolumn=ColumnOrSuperColumn(column=Column(name, value, timestamp))
    )


def _super_insert(super_name, name, value, timestamp):
    return Mutation(
        column_or_supercolumn=ColumnOrSuperColumn(
            super_column=SuperColumn(super_name, [Column(name, value, timestamp)])
        )
    )


def _delete(timestamp, predicate=None, super_column=None):
    return Mutation(
        deletion=Deletion(timestamp, super_column=super_column, predicate=predicate)
    )


def _names(results):
    return [cosc.column.name for cosc in results]


def _keys(key_slices):
    return [key_slice.key for key_slice in key_slices]


class TestInMemoryTransport:
    @staticmethod
    def _get_target_class():
        from cassandra_records.in_memory import InMemoryTransport

        return InMemoryTransport

    def _make_one(self, column_families=None):
        if column_families is None:
            column_families = {"Users": "Standard", "Addresses": "Super"}
        return self._get_target_class()(column_families)

    def _populated(self, keys=(b"k1", b"k2", b"k3", b"k4", b"k5")):
        transport = self._make_one()
        transport.batch_mutate(
            {key: {"Users": [_insert(b"name", key, 1)]} for key in keys}, ONE
        )
        return transport

    def test_unknown_column_family(self):
        transport = self._make_one()
        with pytest.raises(InvalidRequestException):
            transport.get_slice(b"k", ColumnParent("Nope"), ALL_COLUMNS, ONE)
        with pytest.raises(InvalidRequestException):
            transport.batch_mutate({b"k": {"Nope": [_delete(1)]}}, ONE)

    def test_add_column_family_rejects_unknown_type(self):
        with pytest.raises(ValueError):
            self._make_one().add_column_family("Things", "Wide")

    def test_token_for_is_order_preserving(self):
        assert self._get_target_class().token_for(b"abc") == "abc"

    def test_get(self):
        transport = self._make_one()
        transport.batch_mutate({b"k": {"Users": [_insert(b"a", b"1", 1)]}}, ONE)
        result = transport.get(b"k", ColumnPath("Users", column=b"a"), ONE)
        assert result.column == Column(b"a", b"1", 1)

    def test_get_missing(self):
        transport = self._make_one()
        transport.batch_mutate({b"k": {"Users": [_insert(b"a", b"1", 1)]}}, ONE)
        with pytest.raises(NotFoundException):
            transport.get(b"k", ColumnPath("Users", column=b"b"), ONE)
        with pytest.raises(NotFoundException):
            transport.get(b"other", ColumnPath("Users", column=b"a"), ONE)

    def test_get_super_column_path_on_standard_family(self):
        with pytest.raises(InvalidRequestException):
            self._make_one().get(
                b"k", ColumnPath("Users", super_column=b"s", column=b"a"), ONE
            )

    def test_get_slice_orders_by_name(self):
        transport = self._make_one()
        mutations = [_insert(name, b"v", 1) for name in (b"c", b"a", b"b")]
        transport.batch_mutate({b"k": {"Users": mutations}}, ONE)
        parent = ColumnParent("Users")
        assert _names(transport.get_slice(b"k", parent, ALL_COLUMNS, ONE)) == [
            b"a",
            b"b",
            b"c",
        ]
        reversed_slice = SlicePredicate(slice_range=SliceRange(reversed=True, count=2))
        assert _names(transport.get_slice(b"k", parent, reversed_slice, ONE)) == [
            b"c",
            b"b",
        ]
        bounded = SlicePredicate(slice_range=SliceRange(start=b"b", finish=b"c"))
        assert _names(transport.get_slice(b"k", parent, bounded, ONE)) == [b"b", b"c"]
        reversed_bounded = SlicePredicate(
            slice_range=SliceRange(start=b"b", finish=b"a", reversed=True)
        )
        assert _names(transport.get_slice(b"k", parent, reversed_bounded, ONE)) == [
            b"b",
            b"a",
        ]

    def test_column_names_take_precedence(self):
        transport = self._make_one()
        mutations = [_insert(name, b"v", 1) for name in (b"a", b"b", b"c")]
        transport.batch_mutate({b"k": {"Users": mutations}}, ONE)
        predicate = SlicePredicate(
            column_names=[b"c", b"missing"], slice_range=SliceRange(count=0)
        )
        results = transport.get_slice(b"k", ColumnParent("Users"), predicate, ONE)
        assert _names(results) == [b"c"]

    def test_get_count(self):
        transport = self._populated()
        assert transport.get_count(b"k1", ColumnParent("Users"), ALL_COLUMNS, ONE) == 1
        assert transport.get_count(b"zz", ColumnParent("Users"), ALL_COLUMNS, ONE) == 0

    def test_multiget_omits_empty_keys(self):
        transport = self._populated()
        result = transport.multiget_slice(
            [b"k2", b"missing", b"k1"], ColumnParent("Users"), ALL_COLUMNS, ONE
        )
        assert sorted(result) == [b"k1", b"k2"]
        counts = transport.multiget_count(
            [b"k2", b"missing"], ColumnParent("Users"), ALL_COLUMNS, ONE
        )
        assert counts == {b"k2": 1}

    def test_range_keys_inclusive(self):
        transport = self._populated()
        key_range = KeyRange(start_key=b"k2", end_key=b"k4")
        result = transport.get_range_slices(
            ColumnParent("Users"), ALL_COLUMNS, key_range, ONE
        )
        assert _keys(result) == [b"k2", b"k3", b"k4"]

    def test_range_keys_same_start_and_end(self):
        transport = self._populated()
        key_range = KeyRange(start_key=b"k3", end_key=b"k3")
        result = transport.get_range_slices(
            ColumnParent("Users"), ALL_COLUMNS, key_range, ONE
        )
        assert _keys(result) == [b"k3"]

    def test_range_keys_count(self):
        transport = self._populated()
        key_range = KeyRange(start_key=b"", end_key=b"", count=2)
        result = transport.get_range_slices(
            ColumnParent("Users"), ALL_COLUMNS, key_range, ONE
        )
        assert _keys(result) == [b"k1", b"k2"]

    def test_range_keys_start_after_end(self):
        transport = self._populated()
        with pytest.raises(InvalidRequestException):
            transport.get_range_slices(
                ColumnParent("Users"),
                ALL_COLUMNS,
                KeyRange(start_key=b"k4", end_key=b"k2"),
                ONE,
            )

    def test_range_mixed_bounds(self):
        with pytest.raises(InvalidRequestException):
            self._populated().get_range_slices(
                ColumnParent("Users"),
                ALL_COLUMNS,
                KeyRange(start_key=b"k1", end_token="k2"),
                ONE,
            )

    def test_range_tokens_start_exclusive(self):
        transport = self._populated()
        key_range = KeyRange(start_token="k2", end_token="k4")
        result = transport.get_range_slices(
            ColumnParent("Users"), ALL_COLUMNS, key_range, ONE
        )
        assert _keys(result) == [b"k3", b"k4"]

    def test_range_tokens_wrap(self):
        transport = self._populated()
        key_range = KeyRange(start_token="k3", end_token="k1")
        result = transport.get_range_slices(
            ColumnParent("Users"), ALL_COLUMNS, key_range, ONE
        )
        assert _keys(result) == [b"k4", b"k5", b"k1"]

    def test_range_tokens_full_ring(self):
        transport = self._populated()
        key_range = KeyRange(start_token="k3", end_token="k3")
        result = transport.get_range_slices(
            ColumnParent("Users"), ALL_COLUMNS, key_range, ONE
        )
        assert _keys(result) == [b"k4", b"k5", b"k1", b"k2", b"k3"]

    def test_last_write_wins(self):
        transport = self._make_one()
        path = ColumnPath("Users", column=b"a")
        transport.batch_mutate({b"k": {"Users": [_insert(b"a", b"new", 10)]}}, ONE)
        transport.batch_mutate({b"k": {"Users": [_insert(b"a", b"old", 5)]}}, ONE)
        assert transport.get(b"k", path, ONE).column.value == b"new"
        transport.batch_mutate({b"k": {"Users": [_insert(b"a", b"newer", 11)]}}, ONE)
        assert transport.get(b"k", path, ONE).column.value == b"newer"

    def test_delete_keeps_newer_columns(self):
        transport = self._make_one()
        transport.batch_mutate(
            {b"k": {"Users": [_insert(b"a", b"1", 5), _insert(b"b", b"2", 20)]}}, ONE
        )
        transport.batch_mutate({b"k": {"Users": [_delete(10)]}}, ONE)
        results = transport.get_slice(b"k", ColumnParent("Users"), ALL_COLUMNS, ONE)
        assert _names(results) == [b"b"]

    def test_tombstone_hides_older_insert(self):
        transport = self._make_one()
        transport.batch_mutate({b"k": {"Users": [_delete(10)]}}, ONE)
        transport.batch_mutate({b"k": {"Users": [_insert(b"a", b"1", 9)]}}, ONE)
        assert transport.get_slice(b"k", ColumnParent("Users"), ALL_COLUMNS, ONE) == []
        transport.batch_mutate({b"k": {"Users": [_insert(b"a", b"1", 11)]}}, ONE)
        results = transport.get_slice(b"k", ColumnParent("Users"), ALL_COLUMNS, ONE)
        assert _names(results) == [b"a"]

    def test_delete_named_columns(self):
        transport = self._make_one()
        transport.batch_mutate(
            {b"k": {"Users": [_insert(b"a", b"1", 1), _insert(b"b", b"2", 1)]}}, ONE
        )
        predicate = SlicePredicate(column_names=[b"a"])
        transport.batch_mutate({b"k": {"Users": [_delete(2, predicate)]}}, ONE)
        results = transport.get_slice(b"k", ColumnParent("Users"), ALL_COLUMNS, ONE)
        assert _names(results) == [b"b"]

    def test_deleted_rows_remain_in_range_scans(self):
        transport = self._populated()
        transport.batch_mutate({b"k2": {"Users": [_delete(2)]}}, ONE)
        result = transport.get_range_slices(
            ColumnParent("Users"), ALL_COLUMNS, KeyRange(start_key=b""), ONE
        )
        assert _keys(result) == [b"k1", b"k2", b"k3", b"k4", b"k5"]
        assert result[1].columns == []
        multiget = transport.multiget_slice(
            [b"k2"], ColumnParent("Users"), ALL_COLUMNS, ONE
        )
        assert multiget == {}

    def test_invalid_mutation_applies_nothing_for_key(self):
        transport = self._make_one()
        with pytest.raises(InvalidRequestException):
            transport.batch_mutate(
                {b"k": {"Users": [_insert(b"a", b"1", 1), _insert(b"b", b"2", None)]}},
                ONE,
            )
        assert transport.get_slice(b"k", ColumnParent("Users"), ALL_COLUMNS, ONE) == []

    def test_insert_super_column_into_standard_family(self):
        with pytest.raises(InvalidRequestException):
            self._make_one().batch_mutate(
                {b"k": {"Users": [_super_insert(b"s", b"a", b"1", 1)]}}, ONE
            )

    def test_super_column_family(self):
        transport = self._make_one()
        transport.batch_mutate(
            {
                b"k": {
                    "Addresses": [
                        _super_insert(b"work", b"city", b"Bergen", 1),
                        _super_insert(b"home", b"city", b"Oslo", 1),
                        _super_insert(b"home", b"zip", b"0150", 1),
                    ]
                }
            },
            ONE,
        )
        results = transport.get_slice(b"k", ColumnParent("Addresses"), ALL_COLUMNS, ONE)
        assert [cosc.super_column.name for cosc in results] == [b"home", b"work"]
        assert results[0].super_column.columns == [
            Column(b"city", b"Oslo", 1),
            Column(b"zip", b"0150", 1),
        ]
        inner = transport.get_slice(
            b"k", ColumnParent("Addresses", b"home"), ALL_COLUMNS, ONE
        )
        assert _names(inner) == [b"city", b"zip"]
        column = transport.get(
            b"k", ColumnPath("Addresses", super_column=b"home", column=b"zip"), ONE
        )
        assert column.column.value == b"0150"
        whole = transport.get(b"k", ColumnPath("Addresses", super_column=b"work"), ONE)
        assert whole.super_column.name == b"work"

    def test_delete_super_column(self):
        transport = self._make_one()
        transport.batch_mutate(
            {
                b"k": {
                    "Addresses": [
                        _super_insert(b"home", b"city", b"Oslo", 1),
                        _super_insert(b"work", b"city", b"Bergen", 1),
                    ]
                }
            },
            ONE,
        )
        transport.batch_mutate(
            {b"k": {"Addresses": [_delete(2, super_column=b"home")]}}, ONE
        )
        results = transport.get_slice(b"k", ColumnParent("Addresses"), ALL_COLUMNS, ONE)
        assert [cosc.super_column.name for cosc in results] == [b"work"]
