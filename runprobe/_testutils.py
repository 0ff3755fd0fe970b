# SPDX-FileCopyrightText: Copyright (c) 2023-2024, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
from __future__ import annotations

import contextlib
from collections import defaultdict
from typing import Any, AsyncGenerator, AsyncIterator

from box import Box
from kr8s import NotFoundError

from ._data_utils import freeze
from ._exceptions import ResourceCreationError
from ._types import SpecType


class FakeCluster:
    """An in-memory :class:`runprobe.ClusterClient` for testing verification flows.

    The states a resource goes through are scripted up front. Every ``get``
    returns the next scripted state and the last one repeats forever. A
    scripted exception instance is raised instead of returned. A phase name
    is shorthand for a minimal resource in that phase.

    Examples:
        >>> cluster = FakeCluster()
        >>> cluster.script("my-pod", "default", "Pending", kr8s.ServerError("boom"), "Running")
        >>> cluster.set_logs("my-pod", "default", b"hello ", b"world")
        >>> await fetch_output(cluster, "my-pod", "default")
        'hello world'
    """

    def __init__(self) -> None:
        self.created: list[dict] = []
        self.deleted: list[tuple[str, str, str]] = []
        self.fetches: dict[tuple[str, str, str], int] = defaultdict(int)
        self.streams_opened = 0
        self.streams_closed = 0
        self._states: dict[tuple[str, str, str], list] = {}
        self._logs: dict[tuple[str, str], tuple] = {}
        self._rejections: dict[str, str] = {}

    def script(self, name: str, namespace: str, *states: Any, kind: str = "pod"):
        """Set the states ``get`` returns for a resource, in order."""
        self._states[(kind, namespace, name)] = [
            self._state(name, namespace, s) for s in states
        ]

    def set_logs(
        self,
        pod_name: str,
        namespace: str,
        *chunks: bytes,
        open_error: BaseException | None = None,
        read_error: BaseException | None = None,
    ):
        """Set the chunks streamed as a pod's output.

        ``open_error`` is raised when the stream is opened, ``read_error``
        after all chunks were streamed.
        """
        self._logs[(namespace, pod_name)] = (chunks, open_error, read_error)

    def reject(self, name: str, reason: str = "Invalid value") -> None:
        """Reject the creation of any resource called ``name``."""
        self._rejections[name] = reason

    @staticmethod
    def _state(name: str, namespace: str, state: Any) -> Any:
        if isinstance(state, str):
            return {
                "metadata": {"name": name, "namespace": namespace},
                "status": {"phase": state},
            }
        return state

    async def create(self, spec: SpecType) -> dict:
        manifest = spec.to_dict() if hasattr(spec, "to_dict") else dict(spec)
        kind = manifest.get("kind", "")
        name = manifest["metadata"]["name"]
        namespace = manifest["metadata"].get("namespace", "default")
        if name in self._rejections:
            raise ResourceCreationError(
                f"{kind} {name} is invalid: {self._rejections[name]}",
                kind=kind,
                name=name,
                namespace=namespace,
            )
        self.created.append(manifest)
        self._states.setdefault(
            (kind.lower(), namespace, name),
            [{**manifest, "status": {"phase": "Pending"}}],
        )
        return manifest

    async def get(self, name: str, namespace: str, kind: str = "pod") -> Box:
        key = (kind, namespace, name)
        self.fetches[key] += 1
        states = self._states.get(key)
        if not states:
            raise NotFoundError(f"Could not find {kind} {name} in namespace {namespace}.")
        state = states.pop(0) if len(states) > 1 else states[0]
        if isinstance(state, BaseException):
            raise state
        return freeze(state)

    async def delete(self, name: str, namespace: str, kind: str = "pod") -> None:
        if self._states.pop((kind, namespace, name), None) is None:
            raise NotFoundError(f"Object {name} does not exist in {namespace}")
        self.deleted.append((kind, namespace, name))

    @contextlib.asynccontextmanager
    async def stream_logs(
        self, pod_name: str, namespace: str
    ) -> AsyncGenerator[AsyncIterator[bytes]]:
        chunks, open_error, read_error = self._logs.get(
            (namespace, pod_name), ((), None, None)
        )
        if open_error is not None:
            raise open_error
        self.streams_opened += 1
        try:
            yield self._stream(chunks, read_error)
        finally:
            self.streams_closed += 1

    @staticmethod
    async def _stream(chunks, read_error) -> AsyncIterator[bytes]:
        for chunk in chunks:
            yield chunk
        if read_error is not None:
            raise read_error
