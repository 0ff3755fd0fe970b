# SPDX-FileCopyrightText: Copyright (c) 2023-2024, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
"""
This module contains `runprobe`, a helper for proving that a run in a Kubernetes
workload-orchestration system actually executed.

A run leaves a log file on its volume claim. `runprobe` starts a read-only verification
pod that mounts the same claim, waits for it, and returns the log file for assertion.

At the top level, `runprobe` provides a blocking API that wraps the asynchronous API
provided by `runprobe.asyncio`. Both APIs have the same signatures and return values.
"""
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _package_version

from . import asyncio
from ._async_utils import run_sync as _run_sync
from ._builders import (
    Pipeline,
    PipelineRun,
    PipelineTask,
    Step,
    Task,
    TaskRun,
    VerificationPodSpec,
    build_verification_pod,
    helloworld_pipeline,
    helloworld_pipeline_run,
    helloworld_task,
    helloworld_task_run,
    pipeline,
    pipeline_run,
    pipeline_task,
    step,
    task,
    task_run,
    verification_pod_for,
)
from ._client import Kr8sClient
from ._config import ProbeConfig
from ._constants import LOG_FILE, LOG_PATH
from ._contract import LogVolumeContract
from ._exceptions import (
    ConfigError,
    ContractError,
    FetchError,
    PredicateError,
    ResourceCreationError,
    StreamError,
    StreamOpenError,
    StreamReadError,
    VerificationError,
    WaitTimeoutError,
)
from ._predicates import (
    condition_is,
    fail_on_phase,
    jsonpath_equals,
    phase_is,
    phase_of,
    pod_running,
    pod_started,
)
from ._types import ClusterClient
from .asyncio import fetch_output as _fetch_output
from .asyncio import verify_output as _verify_output
from .asyncio import wait_for_state as _wait_for_state

try:
    __version__ = _package_version("runprobe")
except PackageNotFoundError:
    __version__ = "0.0.0"

wait_for_state = _run_sync(_wait_for_state)
fetch_output = _run_sync(_fetch_output)
verify_output = _run_sync(_verify_output)

__all__ = [
    "__version__",
    "asyncio",
    "build_verification_pod",
    "condition_is",
    "fail_on_phase",
    "fetch_output",
    "helloworld_pipeline",
    "helloworld_pipeline_run",
    "helloworld_task",
    "helloworld_task_run",
    "jsonpath_equals",
    "phase_is",
    "phase_of",
    "pipeline",
    "pipeline_run",
    "pipeline_task",
    "pod_running",
    "pod_started",
    "step",
    "task",
    "task_run",
    "verification_pod_for",
    "verify_output",
    "wait_for_state",
    "ClusterClient",
    "ConfigError",
    "ContractError",
    "FetchError",
    "Kr8sClient",
    "LogVolumeContract",
    "LOG_FILE",
    "LOG_PATH",
    "Pipeline",
    "PipelineRun",
    "PipelineTask",
    "PredicateError",
    "ProbeConfig",
    "ResourceCreationError",
    "Step",
    "StreamError",
    "StreamOpenError",
    "StreamReadError",
    "Task",
    "TaskRun",
    "VerificationError",
    "VerificationPodSpec",
    "WaitTimeoutError",
]
