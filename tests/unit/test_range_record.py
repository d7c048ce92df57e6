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

import mock
import pytest

from cassandra_records.exceptions import ValidationError
from cassandra_records.selectors import ColumnNames
from cassandra_records.selectors import KeySpan
from cassandra_records.selectors import TokenSpan
from cassandra_records.types import ConsistencyLevel
from cassandra_records.types import KeySlice

KEYS = [b"k1", b"k2", b"k3", b"k4", b"k5"]


def _make_transport(keys=KEYS):
    from cassandra_records.in_memory import InMemoryTransport
    from cassandra_records.mutations import insert_mutation
    from cassandra_records.row import ColumnValue

    transport = InMemoryTransport({"Users": "Standard"})
    transport.batch_mutate(
        {
            key: {
                "Users": [
                    insert_mutation(ColumnValue(b"name", key, 1)),
                    insert_mutation(ColumnValue(b"age", b"30", 1)),
                ]
            }
            for key in keys
        },
        ConsistencyLevel.ONE,
    )
    return transport


def _spy(transport):
    return mock.Mock(wraps=transport)


def _page_keys(pages):
    return [[key for key, _ in page] for page in pages]


class TestRangeRecord:
    @staticmethod
    def _get_target_class():
        from cassandra_records.range_record import RangeRecord

        return RangeRecord

    def _make_one(self, *args, **kwargs):
        return self._get_target_class()(*args, **kwargs)

    def test_key_span_pages_repeat_last_key(self):
        record = self._make_one(_make_transport(), "Users", KeySpan(count=2))
        assert _page_keys(record.pages()) == [
            [b"k1", b"k2"],
            [b"k2", b"k3"],
            [b"k3", b"k4"],
            [b"k4", b"k5"],
            [b"k5"],
        ]

    def test_key_span_iteration_yields_each_row_once(self):
        record = self._make_one(_make_transport(), "Users", KeySpan(count=2))
        rows = list(record)
        assert [key for key, _ in rows] == KEYS
        assert rows[2][1][b"name"].value == b"k3"
        assert rows[2][1].key == b"k3"

    def test_key_span_stops_at_end_key(self):
        transport = _spy(_make_transport())
        record = self._make_one(transport, "Users", KeySpan(b"k1", b"k4", count=2))
        assert [key for key, _ in record] == [b"k1", b"k2", b"k3", b"k4"]
        # the page ending on k4 is full, but k4 is the end of the span
        assert transport.get_range_slices.call_count == 3

    def test_key_span_single_key(self):
        record = self._make_one(_make_transport(), "Users", KeySpan(b"k3", b"k3"))
        assert [key for key, _ in record] == [b"k3"]

    def test_key_span_page_size_must_make_progress(self):
        with pytest.raises(ValidationError):
            self._make_one(_make_transport(), "Users", KeySpan(count=1))

    def test_token_span_pages_do_not_repeat(self):
        record = self._make_one(_make_transport(), "Users", TokenSpan("", "", count=2))
        assert _page_keys(record.pages()) == [[b"k1", b"k2"], [b"k3", b"k4"], [b"k5"]]

    def test_token_span_page_size_one(self):
        record = self._make_one(_make_transport(), "Users", TokenSpan("", "", count=1))
        assert [key for key, _ in record] == KEYS

    def test_token_span_stops_at_end_token(self):
        transport = _spy(_make_transport())
        record = self._make_one(transport, "Users", TokenSpan("", "k4", count=2))
        assert [key for key, _ in record] == [b"k1", b"k2", b"k3", b"k4"]
        assert transport.get_range_slices.call_count == 2

    def test_token_span_start_is_exclusive(self):
        record = self._make_one(_make_transport(), "Users", TokenSpan("k2", "k4"))
        assert [key for key, _ in record] == [b"k3", b"k4"]

    def test_wrapping_token_span(self):
        record = self._make_one(
            _make_transport(), "Users", TokenSpan("k3", "k1", count=10)
        )
        assert [key for key, _ in record] == [b"k4", b"k5", b"k1"]

    def test_full_ring_token_span_is_not_empty(self):
        record = self._make_one(
            _make_transport(), "Users", TokenSpan("k3", "k3", count=2)
        )
        assert [key for key, _ in record] == [b"k4", b"k5", b"k1", b"k2", b"k3"]

    def test_custom_token_for(self):
        transport = _spy(_make_transport())
        token_for = mock.Mock(side_effect=lambda key: key.decode("latin-1"))
        record = self._make_one(
            transport, "Users", TokenSpan("", "", count=2), token_for=token_for
        )
        assert [key for key, _ in record] == KEYS
        token_for.assert_any_call(b"k2")
        token_for.assert_any_call(b"k4")

    def test_empty_page_ends_scan(self):
        transport = mock.Mock()
        transport.get_range_slices.return_value = []
        record = self._make_one(transport, "Users", KeySpan(count=2))
        assert list(record.pages()) == []
        assert list(record) == []
        assert transport.get_range_slices.call_count == 2

    def test_short_page_ends_scan(self):
        transport = mock.Mock()
        transport.get_range_slices.return_value = [KeySlice(b"a"), KeySlice(b"b")]
        record = self._make_one(transport, "Users", TokenSpan("", "", count=3))
        assert [key for key, _ in record] == [b"a", b"b"]
        transport.get_range_slices.assert_called_once()

    def test_iterating_twice_restarts_the_scan(self):
        transport = _spy(_make_transport())
        record = self._make_one(transport, "Users", KeySpan(count=10))
        assert [key for key, _ in record] == KEYS
        assert [key for key, _ in record] == KEYS
        assert transport.get_range_slices.call_count == 2

    def test_row_limit(self):
        transport = _spy(_make_transport())
        record = self._make_one(transport, "Users", KeySpan(count=2), row_limit=3)
        assert [key for key, _ in record] == [b"k1", b"k2", b"k3"]
        assert transport.get_range_slices.call_count == 2

    def test_row_limit_zero(self):
        transport = _spy(_make_transport())
        record = self._make_one(transport, "Users", KeySpan(), row_limit=0)
        assert list(record) == []
        transport.get_range_slices.assert_not_called()

    def test_negative_row_limit(self):
        with pytest.raises(ValidationError):
            self._make_one(_make_transport(), "Users", KeySpan(), row_limit=-1)

    def test_abandoned_iteration(self):
        transport = _spy(_make_transport())
        record = self._make_one(transport, "Users", KeySpan(count=2))
        iterator = iter(record)
        assert next(iterator)[0] == b"k1"
        del iterator
        assert transport.get_range_slices.call_count == 1

    def test_column_selector(self):
        record = self._make_one(
            _make_transport(), "Users", KeySpan(count=10), ColumnNames([b"age"])
        )
        for _, row in record:
            assert [c.name for c in row] == [b"age"]

    def test_get_with_selector_override(self):
        record = self._make_one(_make_transport(), "Users", KeySpan(b"k1", b"k2"))
        rows = record.get(ColumnNames([b"name"]))
        assert [(key, row.to_dict()) for key, row in rows] == [
            (b"k1", {b"name": b"k1"}),
            (b"k2", {b"name": b"k2"}),
        ]
        assert record.selector != ColumnNames([b"name"])

    def test_deleted_rows_are_returned_empty(self):
        from cassandra_records.record import Record

        transport = _make_transport()
        Record(transport, "Users", b"k2").delete()
        record = self._make_one(transport, "Users", KeySpan(count=10))
        rows = dict(record)
        assert list(rows) == KEYS
        assert len(rows[b"k2"]) == 0

    def test_error_mid_scan(self):
        from cassandra_records.exceptions import Unavailable
        from cassandra_records.types import UnavailableException

        transport = mock.Mock()
        transport.get_range_slices.side_effect = [
            [KeySlice(b"a"), KeySlice(b"b")],
            UnavailableException(),
        ]
        record = self._make_one(transport, "Users", TokenSpan("", "", count=2))
        seen = []
        with pytest.raises(Unavailable):
            for key, _ in record:
                seen.append(key)
        assert seen == [b"a", b"b"]

    def test_consistency_level(self):
        transport = mock.Mock()
        transport.get_range_slices.return_value = []
        record = self._make_one(
            transport, "Users", KeySpan(), consistency_level="QUORUM"
        )
        list(record)
        assert transport.get_range_slices.call_args[0][3] is ConsistencyLevel.QUORUM
        list(record.pages(consistency_level=ConsistencyLevel.ALL))
        assert transport.get_range_slices.call_args[0][3] is ConsistencyLevel.ALL

    @pytest.mark.parametrize("selector", [b"k1", None])
    def test_rejects_other_key_selectors(self, selector):
        with pytest.raises(ValidationError):
            self._make_one(_make_transport(), "Users", selector)

    def test_rejects_key_list(self):
        from cassandra_records.selectors import KeyList

        with pytest.raises(ValidationError):
            self._make_one(_make_transport(), "Users", KeyList([b"k1"]))
