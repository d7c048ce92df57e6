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

from cassandra_records._helpers import _to_key
from cassandra_records.predicates import build_column_predicate
from cassandra_records.row import ColumnValue
from cassandra_records.selectors import ColumnSelector
from cassandra_records.types import ColumnOrSuperColumn
from cassandra_records.types import Deletion
from cassandra_records.types import Mutation
from cassandra_records.types import SuperColumn


def insert_mutation(column: ColumnValue) -> Mutation:
    """
    Build the Mutation inserting ``column``

    A column with a ``super_column`` is sent wrapped in a SuperColumn holding
    only that column. The column must already carry a timestamp.
    """
    if column.timestamp is None:
        raise ValueError("column timestamp must be set before building a mutation")
    if column.super_column is not None:
        cosc = ColumnOrSuperColumn(
            super_column=SuperColumn(
                name=column.super_column, columns=[column._to_column()]
            )
        )
    else:
        cosc = ColumnOrSuperColumn(column=column._to_column())
    return Mutation(column_or_supercolumn=cosc)


def delete_mutation(
    timestamp: int,
    selector: ColumnSelector | None = None,
    super_column: bytes | None = None,
) -> Mutation:
    """
    Build the Mutation deleting columns older than ``timestamp``

    With no selector the whole row is deleted, or the whole super column
    when ``super_column`` is given.
    """
    predicate = build_column_predicate(selector) if selector is not None else None
    return Mutation(
        deletion=Deletion(
            timestamp=timestamp, super_column=super_column, predicate=predicate
        )
    )


class MutationSet(object):
    """
    Mutations grouped by row key, then by column family.

    The server applies each key's mutations atomically. Mutations for
    different keys in the same set are NOT applied atomically with respect to
    each other; a failed submission may have applied some keys and not
    others.

    Not safe for concurrent use; callers sharing a set between threads must
    synchronize access themselves.
    """

    def __init__(self):
        self._mutations: OrderedDict[bytes, OrderedDict[str, list[Mutation]]] = (
            OrderedDict()
        )

    def add(self, key: str | bytes, column_family: str, mutation: Mutation):
        key = _to_key(key)
        mutation.validate()
        by_family = self._mutations.setdefault(key, OrderedDict())
        by_family.setdefault(column_family, []).append(mutation)

    def keys(self) -> list[bytes]:
        return list(self._mutations.keys())

    def column_families(self) -> list[str]:
        """
        Returns every column family touched, in first-use order
        """
        families: list[str] = []
        for by_family in self._mutations.values():
            for family in by_family:
                if family not in families:
                    families.append(family)
        return families

    def mutations_for(self, key: str | bytes, column_family: str) -> list[Mutation]:
        return list(self._mutations.get(_to_key(key), {}).get(column_family, []))

    def to_mutation_map(self) -> dict[bytes, dict[str, list[Mutation]]]:
        """
        Returns a copy in the shape expected by batch_mutate
        """
        return {
            key: {family: list(mutations) for family, mutations in by_family.items()}
            for key, by_family in self._mutations.items()
        }

    def clear(self):
        self._mutations.clear()

    def __len__(self):
        """
        Implements `len()` operator: the number of mutations held
        """
        return sum(
            len(mutations)
            for by_family in self._mutations.values()
            for mutations in by_family.values()
        )

    def __bool__(self):
        return bool(self._mutations)

    def __repr__(self):
        return f"MutationSet(keys={self.keys()}, mutations={len(self)})"
