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
from typing import Any, Callable, Generator, Iterator, TYPE_CHECKING

from cassandra_records import _helpers
from cassandra_records.exceptions import ValidationError
from cassandra_records.predicates import KeyRangeRequest
from cassandra_records.predicates import TokenRangeRequest
from cassandra_records.predicates import build_column_predicate
from cassandra_records.predicates import build_key_request
from cassandra_records.predicates import next_page
from cassandra_records.predicates import order_preserving_token
from cassandra_records.record import Record
from cassandra_records.row import Row
from cassandra_records.selectors import ColumnSlice
from cassandra_records.selectors import KeySpan
from cassandra_records.selectors import TokenSpan

if TYPE_CHECKING:
    from cassandra_records.selectors import ColumnSelector
    from cassandra_records.transport import Transport

LOGGER = logging.getLogger(__name__)


class RangeRecord(Record):
    """
    Scan of every row in a key span or token span, page by page.

    Each page is one get_range_slices call fetching ``count`` rows of the
    span. Key spans are inclusive at both ends, so each page after the first
    starts again at the last key already returned; iteration drops that
    repeated row. Token spans are exclusive at the start, so the next page
    starts at the token of the last key and nothing repeats.

    The scan stops after a page holding fewer rows than requested, after an
    empty page, or once the last row reaches the end of the span.

    Rows whose columns have all been deleted may still be returned, with no
    columns, until the server compacts them away.

    Iterating twice runs the scan twice. Abandoning an iteration part way
    needs no cleanup.

    :type key_selector: :class:`~cassandra_records.selectors.KeySpan` or
        :class:`~cassandra_records.selectors.TokenSpan`
    :param key_selector: The rows to scan.

    :type selector: :class:`~cassandra_records.selectors.ColumnSelector`
    :param selector: (Optional) The columns read from each row. Defaults to
        the first 100.

    :type token_for: callable
    :param token_for: (Optional) Maps a row key to its token, as computed by
        the cluster's partitioner. Defaults to the order-preserving
        partitioner, where a key is its own token.

    :type row_limit: int
    :param row_limit: (Optional) Stop after yielding this many rows.
    """

    def __init__(
        self,
        transport: Transport,
        column_family: str,
        key_selector: KeySpan | TokenSpan,
        selector: ColumnSelector | None = None,
        *,
        consistency_level: Any = None,
        token_for: Callable[[bytes], str] | None = None,
        row_limit: int | None = None,
        super_column: str | bytes | None = None,
        clock=None,
    ):
        super().__init__(
            transport,
            column_family,
            None,
            super_column=super_column,
            read_consistency_level=consistency_level,
            clock=clock,
        )
        if not isinstance(key_selector, (KeySpan, TokenSpan)):
            raise ValidationError(
                f"RangeRecord needs a KeySpan or TokenSpan, got {key_selector!r}"
            )
        if isinstance(key_selector, KeySpan) and key_selector.count < 2:
            # each key page repeats one row, so a single-row page never advances
            raise ValidationError("a key span must fetch at least 2 rows per page")
        if key_selector.count < 1:
            raise ValidationError("a token span must fetch at least 1 row per page")
        if row_limit is not None and row_limit < 0:
            raise ValidationError("row_limit must be >= 0")
        self.key_selector = key_selector
        self.selector = selector or ColumnSlice()
        self.token_for = token_for or order_preserving_token
        self.row_limit = row_limit

    def _first_request(self, selector=None) -> KeyRangeRequest | TokenRangeRequest:
        predicate = build_column_predicate(selector or self.selector)
        return build_key_request(self.key_selector, self._column_parent(), predicate)

    def _reached_end(self, request, last_key: bytes) -> bool:
        end = request.end_bound
        if end is None:
            return False
        if isinstance(request, TokenRangeRequest):
            return self.token_for(last_key) == end
        return last_key == end

    def pages(
        self, consistency_level: Any = None, selector: ColumnSelector | None = None
    ) -> Generator[list[tuple[bytes, Row]], None, None]:
        """
        Yield each page of the scan as a list of ``(key, Row)`` pairs

        Pages are returned as fetched: with a key span, every page after the
        first begins with the last row of the page before it.

        Raises:
          - Unavailable, TimedOut, InvalidRequest, AuthenticationFailed,
            AuthorizationFailed when fetching a page fails. Pages already
            yielded remain valid.
        """
        level = self._read_level(consistency_level)
        request = self._first_request(selector)
        page_number = 0
        while True:
            result = _helpers._call_transport(
                request.execute,
                self._transport,
                level,
                context=self._context(None, level),
            )
            slices = result.unwrap()
            page_number += 1
            LOGGER.debug(
                "range page %d of %s returned %d rows",
                page_number,
                self.column_family,
                len(slices),
            )
            if not slices:
                return
            yield [
                (
                    key_slice.key,
                    Row._from_column_or_super_columns(
                        key_slice.key,
                        key_slice.columns,
                        self.column_family,
                        self.super_column,
                    ),
                )
                for key_slice in slices
            ]
            if len(slices) < request.key_range.count:
                return
            last_key = slices[-1].key
            if self._reached_end(request, last_key):
                return
            request = next_page(request, last_key, self.token_for)

    def __iter__(self) -> Iterator[tuple[bytes, Row]]:
        """
        Yield ``(key, Row)`` for every row of the span, each exactly once
        """
        return self._iter_rows()

    def _iter_rows(self, consistency_level: Any = None, selector=None):
        if self.row_limit == 0:
            return
        yielded = 0
        last_key = None
        for page in self.pages(consistency_level, selector):
            for key, row in page:
                if key == last_key:
                    continue
                last_key = key
                yield key, row
                yielded += 1
                if self.row_limit is not None and yielded >= self.row_limit:
                    return

    def get(
        self, selector: ColumnSelector | None = None, consistency_level: Any = None
    ) -> list[tuple[bytes, Row]]:
        """
        Run the whole scan and return its rows

        ``selector`` replaces the record's column selector for this call only.
        """
        return list(self._iter_rows(consistency_level, selector))

    def __repr__(self):
        return (
            f"RangeRecord(column_family={self.column_family!r}, "
            f"key_selector={self.key_selector!r})"
        )
