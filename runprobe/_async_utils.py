# SPDX-FileCopyrightText: Copyright (c) 2023-2024, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
#
# Utilities for running the async core of runprobe from blocking test code.
#
# Sync callers may themselves be running inside an event loop (pytest-asyncio, IPython),
# so the coroutines are dispatched to an anyio loop running in a dedicated thread and the
# caller blocks on the result.
from __future__ import annotations

import inspect
import threading
from functools import partial, wraps
from typing import Awaitable, Callable, ParamSpec, TypeVar

import anyio
import anyio.from_thread

T = TypeVar("T")
P = ParamSpec("P")


class Portal:
    """A singleton thread running an anyio loop, reached through a blocking portal.

    See https://anyio.readthedocs.io/en/stable/api.html#anyio.from_thread.start_blocking_portal for more info.
    """

    _instance: Portal
    _portal: anyio.from_thread.BlockingPortal
    _ready: threading.Event
    thread: threading.Thread

    def __new__(cls):
        if not hasattr(cls, "_instance"):
            cls._instance = super().__new__(cls)
            cls._instance._ready = threading.Event()
            cls._instance.thread = threading.Thread(
                target=anyio.run,
                args=[cls._instance._run],
                name="RunprobeSyncRunnerThread",
                daemon=True,
            )
            cls._instance.thread.start()
        return cls._instance

    async def _run(self):
        async with anyio.from_thread.BlockingPortal() as portal:
            self._portal = portal
            self._ready.set()
            await portal.sleep_until_stopped()

    def call(self, func: Callable[P, Awaitable[T]], *args, **kwargs) -> T:
        """Call a coroutine in the runner loop and block until it returns."""
        self._ready.wait()
        return self._portal.call(partial(func, *args, **kwargs))


def run_sync(coro: Callable[P, Awaitable[T]]) -> Callable[P, T]:
    """Wrap a coroutine function in a function that blocks until it has executed.

    Args:
        coro: A coroutine function.

    Returns:
        A sync function that executes the coroutine via the :class:`Portal`.
    """
    if not inspect.iscoroutinefunction(coro):
        raise TypeError(f"Expected coroutine function, got {coro.__class__.__name__}")

    @wraps(coro)
    def run_sync_inner(*args: P.args, **kwargs: P.kwargs) -> T:
        return Portal().call(coro, *args, **kwargs)

    return run_sync_inner
