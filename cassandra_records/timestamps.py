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
"""Write timestamps for column inserts and deletions."""
from __future__ import annotations

import datetime
import threading

from google.cloud._helpers import UTC
from google.cloud._helpers import _microseconds_from_datetime


def _now_micros() -> int:
    return _microseconds_from_datetime(datetime.datetime.now(tz=UTC))


class MicrosecondClock(object):
    """
    Monotonic source of write timestamps, in microseconds since the epoch.

    Follows the wall clock, but never returns a value lower than or equal to
    the previous one: two calls within the same microsecond, or a wall clock
    stepping backwards, yield ``previous + 1``. Ties are therefore broken by
    call order.

    Each Record and Batch owns one clock by default. Share a single instance
    between them to keep timestamps ordered across several writers.

    :type now: callable
    :param now: (Optional) Returns the current time in microseconds.
        Defaults to the UTC wall clock.
    """

    def __init__(self, now=None):
        self._now = now or _now_micros
        self._last = 0
        self._lock = threading.Lock()

    @property
    def last(self):
        """Last timestamp handed out, or 0."""
        return self._last

    def __call__(self) -> int:
        with self._lock:
            current = self._now()
            if current <= self._last:
                current = self._last + 1
            self._last = current
            return current
