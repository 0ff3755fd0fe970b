# SPDX-FileCopyrightText: Copyright (c) 2025, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
from __future__ import annotations

import inspect
import logging

import anyio
import httpx
from kr8s import APITimeoutError, NotFoundError, ServerError

from ._constants import DEFAULT_POLL_INTERVAL, DEFAULT_TIMEOUT
from ._exceptions import FetchError, PredicateError, WaitTimeoutError
from ._predicates import phase_of
from ._types import ClusterClient, Predicate, ResourceState

logger = logging.getLogger(__name__)

# Errors from ClusterClient.get that are retried until the deadline
FETCH_ERRORS = (
    FetchError,
    NotFoundError,
    ServerError,
    APITimeoutError,
    httpx.HTTPError,
    TimeoutError,
    OSError,
)


async def _evaluate(predicate: Predicate, state: ResourceState, label: str) -> bool:
    try:
        result = predicate(state)
        if inspect.isawaitable(result):
            result = await result
    except PredicateError as e:
        if e.label is None:
            e.label = label
        if e.state is None:
            e.state = state
        raise
    except Exception as e:
        raise PredicateError(
            f"{label}: predicate failed with {e!r}", label=label, state=state
        ) from e
    return bool(result)


async def wait_for_state(
    client: ClusterClient,
    name: str,
    namespace: str,
    predicate: Predicate,
    label: str,
    timeout: float | None = None,
    interval: float | None = None,
    kind: str = "pod",
) -> ResourceState:
    """Wait until a resource satisfies a predicate.

    The resource is fetched once per ``interval``. Errors while fetching are
    assumed to be transient and are retried until the deadline. Errors raised
    by the predicate are not retried.

    The first fetch always happens, so a ``timeout`` of zero checks exactly once.

    Args:
        client: The cluster client used to fetch the resource.
        name: The name of the resource.
        namespace: The namespace of the resource.
        predicate: Called with every fetched state. Return True when satisfied,
            False to keep waiting, or raise if the state is unrecoverable.
        label: Name of the wait, used in logs and errors.
        timeout: Seconds to wait before giving up. Defaults to 600.
        interval: Seconds between fetches. Defaults to 1.
        kind: The kind of the resource. Defaults to ``"pod"``.

    Returns:
        The state that satisfied the predicate.

    Raises:
        PredicateError: If the predicate raised.
        WaitTimeoutError: If the deadline passed first.

    Example:
        >>> from runprobe.asyncio import wait_for_state
        >>> from runprobe import pod_running
        >>> await wait_for_state(client, "my-pod", "default", pod_running, "PodRunning")
    """
    timeout = DEFAULT_TIMEOUT if timeout is None else timeout
    interval = DEFAULT_POLL_INTERVAL if interval is None else interval
    if interval <= 0:
        raise ValueError(f"Poll interval must be positive, got {interval}")

    start = anyio.current_time()
    deadline = start + timeout
    last_state: ResourceState | None = None
    last_error: BaseException | None = None
    attempts = 0
    while True:
        attempts += 1
        try:
            # Bound a single hung fetch, but always give it at least one interval
            with anyio.fail_after(max(deadline - anyio.current_time(), interval)):
                state = await client.get(name, namespace, kind=kind)
        except FETCH_ERRORS as e:
            last_error = e
            logger.debug(f"{label}: fetching {kind} {namespace}/{name} failed: {e!r}")
        else:
            last_state = state
            if await _evaluate(predicate, state, label):
                logger.debug(
                    f"{label}: {kind} {namespace}/{name} satisfied after {attempts} fetches"
                )
                return state
            logger.debug(
                f"{label}: {kind} {namespace}/{name} is {phase_of(state)}, waiting"
            )

        remaining = deadline - anyio.current_time()
        if remaining <= 0:
            phase = phase_of(last_state) if last_state is not None else None
            raise WaitTimeoutError(
                f"{label}: timed out after {anyio.current_time() - start:.1f}s waiting for "
                f"{kind} {namespace}/{name} (last phase {phase}, last error {last_error!r})",
                label=label,
                name=name,
                namespace=namespace,
                last_state=last_state,
                last_error=last_error,
            )
        await anyio.sleep(min(interval, remaining))
