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
"""Row-oriented access to a Cassandra column family."""

from cassandra_records import version as package_version

from cassandra_records._helpers import validate_consistency_level
from cassandra_records.batch import Batch
from cassandra_records.batch_record import BatchRecord
from cassandra_records.exceptions import AuthenticationFailed
from cassandra_records.exceptions import AuthorizationFailed
from cassandra_records.exceptions import InvalidRequest
from cassandra_records.exceptions import NotFound
from cassandra_records.exceptions import RequestError
from cassandra_records.exceptions import TimedOut
from cassandra_records.exceptions import Unavailable
from cassandra_records.exceptions import ValidationError
from cassandra_records.in_memory import InMemoryTransport
from cassandra_records.logging import LoggingTransport
from cassandra_records.multi_record import MultiRecord
from cassandra_records.range_record import RangeRecord
from cassandra_records.record import Record
from cassandra_records.row import ColumnKey
from cassandra_records.row import ColumnValue
from cassandra_records.row import Row
from cassandra_records.selectors import ColumnNames
from cassandra_records.selectors import ColumnSlice
from cassandra_records.selectors import KeyList
from cassandra_records.selectors import KeySpan
from cassandra_records.selectors import SingleKey
from cassandra_records.selectors import TokenSpan
from cassandra_records.selectors import column_selector
from cassandra_records.single_record import SingleRecord
from cassandra_records.timestamps import MicrosecondClock
from cassandra_records.transport import Transport
from cassandra_records.types import ConsistencyLevel

__version__: str = package_version.__version__

__all__ = (
    "AuthenticationFailed",
    "AuthorizationFailed",
    "Batch",
    "BatchRecord",
    "ColumnKey",
    "ColumnNames",
    "ColumnSlice",
    "ColumnValue",
    "ConsistencyLevel",
    "InMemoryTransport",
    "InvalidRequest",
    "KeyList",
    "KeySpan",
    "LoggingTransport",
    "MicrosecondClock",
    "MultiRecord",
    "NotFound",
    "RangeRecord",
    "Record",
    "RequestError",
    "Row",
    "SingleKey",
    "SingleRecord",
    "TimedOut",
    "TokenSpan",
    "Transport",
    "Unavailable",
    "ValidationError",
    "column_selector",
    "validate_consistency_level",
)
