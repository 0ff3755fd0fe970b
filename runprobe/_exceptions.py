# SPDX-FileCopyrightText: Copyright (c) 2023-2024, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
from __future__ import annotations

from typing import Any


class VerificationError(Exception):
    """Base class for all errors raised while verifying a run."""


class ContractError(VerificationError, ValueError):
    """The log volume contract is structurally invalid."""


class ConfigError(VerificationError, ValueError):
    """The runprobe configuration contains an invalid value."""


class ResourceCreationError(VerificationError):
    """The cluster rejected a resource we tried to create.

    Attributes:
        kind: The kind of the rejected resource
        name: The name of the rejected resource
        namespace: The namespace the resource was submitted to
    """

    def __init__(
        self,
        message: str,
        kind: str | None = None,
        name: str | None = None,
        namespace: str | None = None,
    ) -> None:
        self.kind = kind
        self.name = name
        self.namespace = namespace
        super().__init__(message)


class FetchError(VerificationError):
    """Reading the state of a resource failed. Retried while polling."""


class PredicateError(VerificationError):
    """A predicate decided the resource can never reach the awaited state.

    Attributes:
        label: The diagnostic label of the wait
        state: The resource state the predicate rejected
    """

    def __init__(
        self, message: str, label: str | None = None, state: Any = None
    ) -> None:
        self.label = label
        self.state = state
        super().__init__(message)


class WaitTimeoutError(VerificationError, TimeoutError):
    """The deadline passed before the predicate was satisfied.

    Attributes:
        label: The diagnostic label of the wait
        name: The name of the resource being waited on
        namespace: The namespace of the resource
        last_state: The last state fetched, or None if no fetch succeeded
        last_error: The last fetch error, or None
    """

    def __init__(
        self,
        message: str,
        label: str,
        name: str,
        namespace: str,
        last_state: Any = None,
        last_error: BaseException | None = None,
    ) -> None:
        self.label = label
        self.name = name
        self.namespace = namespace
        self.last_state = last_state
        self.last_error = last_error
        super().__init__(message)

    @property
    def phase(self) -> str | None:
        """Phase of the last observed state."""
        if self.last_state is None:
            return None
        from ._predicates import phase_of

        return phase_of(self.last_state)


class StreamError(VerificationError):
    """Reading the output of a pod failed.

    Attributes:
        pod_name: The pod whose output was being read
        namespace: The namespace of the pod
    """

    def __init__(self, message: str, pod_name: str, namespace: str) -> None:
        self.pod_name = pod_name
        self.namespace = namespace
        super().__init__(message)


class StreamOpenError(StreamError):
    """The log stream of a pod could not be opened."""


class StreamReadError(StreamError):
    """The log stream broke while it was being copied.

    Attributes:
        partial: Text that was copied before the stream broke
    """

    def __init__(
        self, message: str, pod_name: str, namespace: str, partial: str = ""
    ) -> None:
        self.partial = partial
        super().__init__(message, pod_name, namespace)
