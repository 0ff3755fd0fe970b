# SPDX-FileCopyrightText: Copyright (c) 2025, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
import pytest

from runprobe import (
    PredicateError,
    condition_is,
    fail_on_phase,
    jsonpath_equals,
    phase_is,
    phase_of,
    pod_running,
    pod_started,
)
from runprobe._data_utils import freeze


def pod(phase=None, **status):
    if phase:
        status["phase"] = phase
    return freeze({"metadata": {"name": "p", "namespace": "ns"}, "status": status})


def test_phase_of():
    assert phase_of(pod("Running")) == "Running"
    assert phase_of(pod()) == "Unknown"
    assert phase_of(freeze({"metadata": {"name": "p"}})) == "Unknown"


def test_phase_is():
    check = phase_is("Running", "Succeeded")
    assert check(pod("Running"))
    assert check(pod("Succeeded"))
    assert not check(pod("Pending"))


def test_pod_running():
    assert pod_running(pod("Running"))
    assert not pod_running(pod("Succeeded"))


def test_pod_started():
    assert pod_started(pod("Running"))
    assert not pod_started(pod("Pending"))
    assert not pod_started(pod("Succeeded"))
    assert pod_started(
        pod(
            "Succeeded",
            containerStatuses=[
                {"state": {"terminated": {"startedAt": "2024-01-01T00:00:00Z"}}}
            ],
        )
    )
    with pytest.raises(PredicateError):
        pod_started(pod("Failed"))


def test_fail_on_phase():
    check = fail_on_phase(pod_running)
    assert check(pod("Running"))
    assert not check(pod("Pending"))
    with pytest.raises(PredicateError) as excinfo:
        check(pod("Failed"))
    assert excinfo.value.state.status.phase == "Failed"

    check = fail_on_phase(pod_running, "Unknown", "Succeeded")
    assert not check(pod("Failed"))
    with pytest.raises(PredicateError):
        check(pod("Succeeded"))


def test_condition_is():
    ready = pod(
        "Running",
        conditions=[
            {"type": "Ready", "status": "True"},
            {"type": "ContainersReady", "status": "False"},
        ],
    )
    assert condition_is("Ready")(ready)
    assert condition_is("Ready", "true")(ready)
    assert condition_is("ContainersReady", "false")(ready)
    assert not condition_is("ContainersReady")(ready)
    assert not condition_is("Ready")(pod("Pending"))


def test_jsonpath_equals():
    assert jsonpath_equals("$.status.phase", "Running")(pod("Running"))
    assert not jsonpath_equals("$.status.phase", "Running")(pod("Pending"))
    assert not jsonpath_equals("$.spec.nodeName", "node-1")(pod("Running"))
