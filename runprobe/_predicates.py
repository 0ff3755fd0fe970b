# SPDX-FileCopyrightText: Copyright (c) 2025, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
"""Predicates for :func:`runprobe.wait_for_state`.

A predicate receives the latest state of a resource and returns ``True`` once
it is satisfied or ``False`` to keep waiting. Raising means the resource can
never get there and stops the wait immediately.
"""
from __future__ import annotations

from typing import Any

import jsonpath
from kr8s._data_utils import list_dict_unpack

from ._exceptions import PredicateError
from ._types import Predicate

TERMINAL_FAILURE_PHASES = ("Failed",)


def phase_of(state: Any) -> str:
    """Return the ``status.phase`` of a resource, or ``"Unknown"``."""
    status = state.get("status") or {}
    return status.get("phase") or "Unknown"


def phase_is(*phases: str) -> Predicate:
    """Satisfied when the resource is in any of ``phases``."""

    def check(state) -> bool:
        return phase_of(state) in phases

    return check


def fail_on_phase(predicate: Predicate, *phases: str) -> Predicate:
    """Wrap ``predicate`` so reaching any of ``phases`` fails the wait.

    Defaults to failing on the ``Failed`` phase.
    """
    phases = phases or TERMINAL_FAILURE_PHASES

    def check(state):
        phase = phase_of(state)
        if phase in phases:
            name = state.get("metadata", {}).get("name", "resource")
            raise PredicateError(
                f"{name} reached phase {phase} and will not recover", state=state
            )
        return predicate(state)

    return check


def pod_running(state) -> bool:
    """Satisfied once the pod is Running.

    A pod that only dumps a file can finish before it is ever observed as
    Running. Prefer :func:`pod_started` unless the pod keeps running.
    """
    return phase_of(state) == "Running"


def pod_started(state) -> bool:
    """Satisfied once the pod is Running, or has Succeeded after its containers ran.

    Raises:
        PredicateError: If the pod Failed.
    """
    phase = phase_of(state)
    if phase == "Running":
        return True
    if phase == "Failed":
        raise PredicateError(
            f"Pod {state.get('metadata', {}).get('name')} failed", state=state
        )
    if phase != "Succeeded":
        return False
    statuses = (state.get("status") or {}).get("containerStatuses") or []
    return any(
        ((s.get("state") or {}).get("terminated") or {}).get("startedAt")
        for s in statuses
    )


def condition_is(condition: str, status: str = "True") -> Predicate:
    """Satisfied when the status condition ``condition`` has ``status``."""
    if status.lower() in ("true", "false"):
        status = status.title()

    def check(state) -> bool:
        conditions = list_dict_unpack(
            (state.get("status") or {}).get("conditions") or [],
            key="type",
            value="status",
        )
        return conditions.get(condition) == status

    return check


def jsonpath_equals(expression: str, value: Any) -> Predicate:
    """Satisfied when the JSONPath ``expression`` matches ``value``.

    Example:
        >>> wait_for_state(client, "my-pod", "default",
        ...                jsonpath_equals("$.status.phase", "Running"), "PodRunning")
    """

    def check(state) -> bool:
        data = state.to_dict() if hasattr(state, "to_dict") else state
        matches = jsonpath.findall(expression, data)
        return any(str(m) == str(value) for m in matches)

    return check
