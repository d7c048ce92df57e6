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

import abc

from cassandra_records.types import ColumnOrSuperColumn
from cassandra_records.types import ColumnParent
from cassandra_records.types import ColumnPath
from cassandra_records.types import ConsistencyLevel
from cassandra_records.types import KeyRange
from cassandra_records.types import KeySlice
from cassandra_records.types import Mutation
from cassandra_records.types import SlicePredicate


class Transport(abc.ABC):
    """
    Remote procedure interface of a Cassandra node

    Records and batches are handed a transport explicitly; they never look
    one up globally. The transport owns its connections (and any pooling),
    so several records may share one.

    Every method may raise one of the protocol exceptions from
    :mod:`cassandra_records.types`: ``InvalidRequestException``,
    ``UnavailableException``, ``TimedOutException``,
    ``AuthenticationException`` or ``AuthorizationException``. Timeouts are
    the transport's concern and surface as ``TimedOutException``.
    """

    @abc.abstractmethod
    def get(
        self,
        key: bytes,
        column_path: ColumnPath,
        consistency_level: ConsistencyLevel,
    ) -> ColumnOrSuperColumn:
        """
        Fetch one column, or one super column

        Raises:
          - NotFoundException if there is no such column
        """
        raise NotImplementedError

    @abc.abstractmethod
    def get_slice(
        self,
        key: bytes,
        column_parent: ColumnParent,
        predicate: SlicePredicate,
        consistency_level: ConsistencyLevel,
    ) -> list[ColumnOrSuperColumn]:
        raise NotImplementedError

    @abc.abstractmethod
    def get_count(
        self,
        key: bytes,
        column_parent: ColumnParent,
        predicate: SlicePredicate,
        consistency_level: ConsistencyLevel,
    ) -> int:
        raise NotImplementedError

    @abc.abstractmethod
    def multiget_slice(
        self,
        keys: list[bytes],
        column_parent: ColumnParent,
        predicate: SlicePredicate,
        consistency_level: ConsistencyLevel,
    ) -> dict[bytes, list[ColumnOrSuperColumn]]:
        """
        Slice several rows at once

        The server may leave out keys that have no matching columns.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def multiget_count(
        self,
        keys: list[bytes],
        column_parent: ColumnParent,
        predicate: SlicePredicate,
        consistency_level: ConsistencyLevel,
    ) -> dict[bytes, int]:
        raise NotImplementedError

    @abc.abstractmethod
    def get_range_slices(
        self,
        column_parent: ColumnParent,
        predicate: SlicePredicate,
        key_range: KeyRange,
        consistency_level: ConsistencyLevel,
    ) -> list[KeySlice]:
        """
        Slice at most ``key_range.count`` rows, in partitioner order
        """
        raise NotImplementedError

    @abc.abstractmethod
    def batch_mutate(
        self,
        mutation_map: dict[bytes, dict[str, list[Mutation]]],
        consistency_level: ConsistencyLevel,
    ) -> None:
        """
        Apply mutations keyed by row key and then column family

        Atomic per row key only.
        """
        raise NotImplementedError
