# SPDX-FileCopyrightText: Copyright (c) 2025, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
from __future__ import annotations

import contextlib
import io
import logging

import httpx
from kr8s import APITimeoutError, NotFoundError, ServerError

from ._exceptions import StreamOpenError, StreamReadError
from ._types import ClusterClient

logger = logging.getLogger(__name__)

STREAM_ERRORS = (
    NotFoundError,
    ServerError,
    APITimeoutError,
    httpx.HTTPError,
    OSError,
)


async def fetch_output(client: ClusterClient, pod_name: str, namespace: str) -> str:
    """Read the complete output of a pod.

    A new log stream is opened on every call and it is always closed before
    this returns or raises.

    Args:
        client: The cluster client used to stream the logs.
        pod_name: The pod to read.
        namespace: The namespace of the pod.

    Returns:
        The pod's output decoded as UTF-8, invalid bytes are replaced with
        U+FFFD as in the partial output of a broken stream.

    Raises:
        StreamOpenError: If the stream could not be opened.
        StreamReadError: If the stream broke while copying. The text copied
            so far is available on the ``partial`` attribute.
    """
    buf = io.BytesIO()
    async with contextlib.AsyncExitStack() as stack:
        try:
            stream = await stack.enter_async_context(
                client.stream_logs(pod_name, namespace)
            )
        except STREAM_ERRORS as e:
            raise StreamOpenError(
                f"Failed to open log stream of pod {namespace}/{pod_name}: {e}",
                pod_name=pod_name,
                namespace=namespace,
            ) from e
        try:
            async for chunk in stream:
                buf.write(chunk)
        except STREAM_ERRORS as e:
            raise StreamReadError(
                f"Log stream of pod {namespace}/{pod_name} broke after {buf.tell()} bytes: {e}",
                pod_name=pod_name,
                namespace=namespace,
                partial=buf.getvalue().decode(errors="replace"),
            ) from e
    logger.debug(f"Read {buf.tell()} bytes of output from pod {namespace}/{pod_name}")
    return buf.getvalue().decode(errors="replace")
