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

from typing import Any

from google.api_core import exceptions as core_exceptions


class ValidationError(ValueError):
    """
    Raised when a selector, predicate or argument is malformed.

    Always raised locally, before any request reaches the transport.
    """


class RequestError(core_exceptions.GoogleAPICallError):
    """
    Base class for failures reported by the remote store.

    Carries the context of the attempted request so that a higher layer can
    log or retry it. ``key`` is a tuple of keys for multi-row requests. The protocol exception is kept as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        *,
        key: bytes | tuple[bytes, ...] | None = None,
        column_family: str | None = None,
        consistency_level: Any = None,
    ):
        super().__init__(message)
        self.key = key
        self.column_family = column_family
        self.consistency_level = consistency_level

    def __str__(self):
        context = []
        if self.column_family is not None:
            context.append(f"column_family={self.column_family!r}")
        if self.key is not None:
            context.append(f"key={self.key!r}")
        if self.consistency_level is not None:
            name = getattr(self.consistency_level, "name", self.consistency_level)
            context.append(f"consistency_level={name}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class NotFound(RequestError, core_exceptions.NotFound):
    """A single-column lookup found no column."""


class Unavailable(RequestError, core_exceptions.ServiceUnavailable):
    """Not enough replicas are alive to satisfy the consistency level."""


class TimedOut(RequestError, core_exceptions.DeadlineExceeded):
    """The server did not answer before its deadline."""


class AuthenticationFailed(RequestError, core_exceptions.Unauthenticated):
    pass


class AuthorizationFailed(RequestError, core_exceptions.PermissionDenied):
    pass


class InvalidRequest(RequestError, core_exceptions.InvalidArgument):
    """The server rejected the request: unknown keyspace, schema mismatch, bad argument."""
