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

import os
from dataclasses import dataclass
from typing import Any, Callable

from google.cloud._helpers import _to_bytes

from cassandra_records import exceptions
from cassandra_records import types
from cassandra_records.types import ConsistencyLevel
"""
Helper functions used in various places in the library.
"""

READ_CONSISTENCY_ENV = "CASSANDRA_RECORDS_READ_CONSISTENCY"
WRITE_CONSISTENCY_ENV = "CASSANDRA_RECORDS_WRITE_CONSISTENCY"

_PROTOCOL_TO_CLIENT_ERROR = {
    types.NotFoundException: exceptions.NotFound,
    types.InvalidRequestException: exceptions.InvalidRequest,
    types.UnavailableException: exceptions.Unavailable,
    types.TimedOutException: exceptions.TimedOut,
    types.AuthenticationException: exceptions.AuthenticationFailed,
    types.AuthorizationException: exceptions.AuthorizationFailed,
}


def _to_key(value: str | bytes, name: str = "key") -> bytes:
    """
    Coerce a row key or column name to bytes. Strings are utf-8 encoded.
    """
    try:
        return _to_bytes(value, encoding="utf-8")
    except TypeError:
        raise exceptions.ValidationError(
            f"{name} must be a string or bytes, got {type(value).__name__}"
        ) from None


def validate_consistency_level(level: Any) -> ConsistencyLevel:
    """
    Return ``level`` as a ConsistencyLevel.

    Accepts a ConsistencyLevel, its integer wire value or its name.

    Raises:
      - ValidationError if the value is not one of the enumerated levels
    """
    if isinstance(level, ConsistencyLevel):
        return level
    if isinstance(level, str):
        try:
            return ConsistencyLevel[level.upper()]
        except KeyError:
            pass
    elif isinstance(level, int) and not isinstance(level, bool):
        if level in types.VALID_VALUES:
            return ConsistencyLevel(level)
    raise exceptions.ValidationError(f"invalid consistency level: {level!r}")


def _default_consistency_level(env_name: str) -> ConsistencyLevel:
    """
    Resolve a process-wide default level from the environment, falling back
    to ONE.
    """
    return validate_consistency_level(os.getenv(env_name, "ONE"))


def _resolve_consistency_level(
    level: Any, fallback: ConsistencyLevel | None, env_name: str
) -> ConsistencyLevel:
    if level is not None:
        return validate_consistency_level(level)
    if fallback is not None:
        return fallback
    return _default_consistency_level(env_name)


@dataclass
class _RequestContext:
    """What was being attempted, attached to translated errors.

    ``key`` is a tuple when the request spanned several rows.
    """

    column_family: str | None = None
    key: bytes | tuple[bytes, ...] | None = None
    consistency_level: ConsistencyLevel | None = None


@dataclass
class _TransportResult:
    """
    Outcome of one transport call: either ``value`` or ``error`` is meaningful.

    Keeps remote failures as data until the caller decides how to surface
    them, so a paging loop can tell an exhausted scan from a failed page.
    """

    value: Any = None
    error: exceptions.RequestError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error from self.error.__cause__
        return self.value


def _translate_error(
    exc: types.ProtocolException, context: _RequestContext
) -> exceptions.RequestError:
    """
    Convert a protocol exception into the matching client error.
    """
    error_class = exceptions.RequestError
    for protocol_class, client_class in _PROTOCOL_TO_CLIENT_ERROR.items():
        if isinstance(exc, protocol_class):
            error_class = client_class
            break
    new_exc = error_class(
        str(exc),
        key=context.key,
        column_family=context.column_family,
        consistency_level=context.consistency_level,
    )
    new_exc.__cause__ = exc
    return new_exc


def _call_transport(
    method: Callable[..., Any], *args: Any, context: _RequestContext
) -> _TransportResult:
    """
    Invoke a transport method and capture its outcome.

    Only protocol exceptions are captured; anything else is a bug or a
    transport failure and propagates as is.
    """
    try:
        return _TransportResult(value=method(*args))
    except types.ProtocolException as exc:
        return _TransportResult(error=_translate_error(exc, context))


def _context_key(keys) -> bytes | tuple[bytes, ...] | None:
    """
    The key recorded in a request context for a call spanning ``keys``
    """
    keys = tuple(keys)
    if not keys:
        return None
    if len(keys) == 1:
        return keys[0]
    return keys
