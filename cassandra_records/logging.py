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

import logging
import time
import uuid

from cassandra_records.transport import Transport

LOGGER = logging.getLogger(__name__)


def log_usage(func, name=None, logger=LOGGER):
    def wrapper(*args, **kwargs):
        call_id = uuid.uuid4()
        fn_name = name or func.__name__
        start_time = time.monotonic()
        logger.debug(
            "Entering %s(args=%s, kwargs=%s). (call_id=%s)", fn_name, args, kwargs, call_id
        )
        try:
            result = func(*args, **kwargs)
            logger.debug(
                "Exiting %s with result=%s (call_id=%s, elapsed_time=%.6f)",
                fn_name,
                result,
                call_id,
                time.monotonic() - start_time,
            )
            return result
        except Exception as e:
            logger.debug(
                "Exiting %s with exception=%r (call_id=%s, elapsed_time=%.6f)",
                fn_name,
                e,
                call_id,
                time.monotonic() - start_time,
            )
            raise

    wrapper.__name__ = getattr(func, "__name__", "wrapper")
    wrapper.__doc__ = getattr(func, "__doc__", None)
    return wrapper


class LoggingTransport(Transport):
    """
    Transport that logs every call made through the wrapped transport.

    Results and exceptions are passed through unchanged.
    """

    def __init__(self, transport, logger=None):
        self._transport = transport
        self._logger = logger or LOGGER

    def _call(self, method_name, *args):
        method = getattr(self._transport, method_name)
        return log_usage(method, name=method_name, logger=self._logger)(*args)

    def get(self, key, column_path, consistency_level):
        return self._call("get", key, column_path, consistency_level)

    def get_slice(self, key, column_parent, predicate, consistency_level):
        return self._call("get_slice", key, column_parent, predicate, consistency_level)

    def get_count(self, key, column_parent, predicate, consistency_level):
        return self._call("get_count", key, column_parent, predicate, consistency_level)

    def multiget_slice(self, keys, column_parent, predicate, consistency_level):
        return self._call(
            "multiget_slice", keys, column_parent, predicate, consistency_level
        )

    def multiget_count(self, keys, column_parent, predicate, consistency_level):
        return self._call(
            "multiget_count", keys, column_parent, predicate, consistency_level
        )

    def get_range_slices(self, column_parent, predicate, key_range, consistency_level):
        return self._call(
            "get_range_slices", column_parent, predicate, key_range, consistency_level
        )

    def batch_mutate(self, mutation_map, consistency_level):
        return self._call("batch_mutate", mutation_map, consistency_level)

    def __getattr__(self, name):
        # anything beyond the Transport interface, like token_for
        return getattr(self._transport, name)
