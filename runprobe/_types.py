# SPDX-FileCopyrightText: Copyright (c) 2024, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
from os import PathLike
from typing import (
    Any,
    AsyncContextManager,
    AsyncIterator,
    Awaitable,
    Callable,
    Protocol,
    Union,
    runtime_checkable,
)

from box import Box

PathType = Union[str, "PathLike[str]"]

# Snapshot of a resource as returned by ClusterClient.get
ResourceState = Box

# Returns True once satisfied, False to keep waiting, raises on a definitive failure.
Predicate = Callable[[ResourceState], Union[bool, Awaitable[bool]]]


class SupportsToDict(Protocol):
    """An object that can be converted to a dictionary."""

    def to_dict(self) -> dict: ...


SpecType = Union[dict, SupportsToDict]


@runtime_checkable
class ClusterClient(Protocol):
    """The operations runprobe needs from a Kubernetes cluster.

    ``create`` raises :class:`runprobe.ResourceCreationError` when the cluster
    rejects the spec. ``stream_logs`` returns an async context manager that
    yields an async iterator of raw byte chunks and closes the stream on exit.
    """

    async def create(self, spec: SpecType) -> Any: ...

    async def get(self, name: str, namespace: str, kind: str = "pod") -> Box: ...

    async def delete(self, name: str, namespace: str, kind: str = "pod") -> None: ...

    def stream_logs(
        self, pod_name: str, namespace: str
    ) -> AsyncContextManager[AsyncIterator[bytes]]: ...
