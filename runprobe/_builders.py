# SPDX-FileCopyrightText: Copyright (c) 2025, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
"""Builders for the resources used to verify a run.

Everything in here is pure, building a spec never talks to the cluster.
Every spec has a ``to_dict`` method so it can be handed to anything that
accepts a Kubernetes manifest, including :func:`kr8s.objects.object_from_spec`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import yaml
from kr8s._data_utils import xdict

from ._constants import (
    DEFAULT_LABELS,
    HW_CONTAINER_NAME,
    HW_PIPELINE_NAME,
    HW_PIPELINE_RUN_NAME,
    HW_PIPELINE_TASK_NAMES,
    HW_TASK_NAME,
    HW_TASK_RUN_NAME,
    HW_VALIDATION_POD_NAME,
    LOG_FILE,
    LOG_PATH,
    PIPELINE_API_VERSION,
    VERIFY_IMAGE,
)
from ._contract import LogVolumeContract


class _Manifest:
    kind: str

    def to_dict(self) -> dict:
        raise NotImplementedError

    def to_yaml(self) -> str:
        """Render the manifest as a YAML document."""
        return yaml.safe_dump(self.to_dict(), sort_keys=False)


@dataclass(frozen=True)
class Step:
    """A single container step of a Task."""

    name: str
    image: str
    command: tuple[str, ...] = ()
    args: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return xdict(
            name=self.name,
            image=self.image,
            command=list(self.command) or None,
            args=list(self.args) or None,
        )


@dataclass(frozen=True)
class Task(_Manifest):
    name: str
    namespace: str
    steps: tuple[Step, ...]
    api_version: str = PIPELINE_API_VERSION
    kind = "Task"

    def to_dict(self) -> dict:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": {"name": self.name, "namespace": self.namespace},
            "spec": {"steps": [s.to_dict() for s in self.steps]},
        }


@dataclass(frozen=True)
class TaskRun(_Manifest):
    name: str
    namespace: str
    task_ref: str
    api_version: str = PIPELINE_API_VERSION
    kind = "TaskRun"

    def to_dict(self) -> dict:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": {"name": self.name, "namespace": self.namespace},
            "spec": {"taskRef": {"name": self.task_ref}},
        }


@dataclass(frozen=True)
class PipelineTask:
    """A named reference to a Task inside a Pipeline."""

    name: str
    task_ref: str

    def to_dict(self) -> dict:
        return {"name": self.name, "taskRef": {"name": self.task_ref}}


@dataclass(frozen=True)
class Pipeline(_Manifest):
    name: str
    namespace: str
    tasks: tuple[PipelineTask, ...]
    api_version: str = PIPELINE_API_VERSION
    kind = "Pipeline"

    def to_dict(self) -> dict:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": {"name": self.name, "namespace": self.namespace},
            "spec": {"tasks": [t.to_dict() for t in self.tasks]},
        }


@dataclass(frozen=True)
class PipelineRun(_Manifest):
    name: str
    namespace: str
    pipeline_ref: str
    api_version: str = PIPELINE_API_VERSION
    kind = "PipelineRun"

    def to_dict(self) -> dict:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": {"name": self.name, "namespace": self.namespace},
            "spec": {"pipelineRef": {"name": self.pipeline_ref}},
        }


@dataclass(frozen=True)
class VerificationPodSpec(_Manifest):
    """A read-only pod that mounts a run's volume claim and prints its log file.

    The pod's single container runs ``cat`` on the contract's file path, so
    the pod's logs are exactly the contents of that file.
    """

    name: str
    namespace: str
    contract: LogVolumeContract
    image: str = VERIFY_IMAGE
    container_name: str | None = None
    restart_policy: str = "Never"
    labels: dict = field(
        default_factory=lambda: dict(DEFAULT_LABELS), compare=False, hash=False
    )
    kind = "Pod"

    @property
    def volume_claim_name(self) -> str:
        return self.contract.claim_name

    @property
    def command(self) -> list[str]:
        return self.contract.read_command()[:1]

    @property
    def args(self) -> list[str]:
        return self.contract.read_command()[1:]

    def to_dict(self) -> dict:
        container = {
            "name": self.container_name or self.name,
            "image": self.image,
            "command": self.command,
            "args": self.args,
            "volumeMounts": [self.contract.volume_mount()],
        }
        return {
            "apiVersion": "v1",
            "kind": self.kind,
            "metadata": xdict(
                name=self.name,
                namespace=self.namespace,
                labels=dict(self.labels) or None,
            ),
            "spec": {
                "containers": [container],
                "volumes": [self.contract.volume()],
                "restartPolicy": self.restart_policy,
            },
        }


def build_verification_pod(
    namespace: str,
    volume_claim_name: str,
    *,
    name: str = HW_VALIDATION_POD_NAME,
    image: str = VERIFY_IMAGE,
    mount_path: str = LOG_PATH,
    file_name: str = LOG_FILE,
    restart_policy: str = "Never",
) -> VerificationPodSpec:
    """Build the pod that exposes the log file a run left on its volume claim.

    Args:
        namespace: The namespace the run lives in.
        volume_claim_name: The claim to mount, which is named after the run.
        name: The name of the verification pod.
        image: The image providing ``cat``.
        mount_path: Where the claim is mounted, must match the writer.
        file_name: The log file under ``mount_path``, must match the writer.
        restart_policy: Restart policy of the pod.

    Returns:
        A :class:`VerificationPodSpec`.

    Example:
        >>> pod = build_verification_pod("default", "helloworld-run")
        >>> pod.args
        ['/logs/process-log.txt']
    """
    contract = LogVolumeContract(
        claim_name=volume_claim_name, mount_path=mount_path, file_name=file_name
    )
    return verification_pod_for(
        contract, namespace, name=name, image=image, restart_policy=restart_policy
    )


def verification_pod_for(
    contract: LogVolumeContract,
    namespace: str,
    *,
    name: str = HW_VALIDATION_POD_NAME,
    image: str = VERIFY_IMAGE,
    restart_policy: str = "Never",
) -> VerificationPodSpec:
    """Build a verification pod from an existing log volume contract."""
    return VerificationPodSpec(
        name=name,
        namespace=namespace,
        contract=contract,
        image=image,
        restart_policy=restart_policy,
    )


def step(name: str, image: str, *command: str, args: Sequence[str] = ()) -> Step:
    return Step(name=name, image=image, command=tuple(command), args=tuple(args))


def task(
    name: str, namespace: str, *steps: Step, api_version: str = PIPELINE_API_VERSION
) -> Task:
    if not steps:
        raise ValueError(f"Task {name} needs at least one step")
    return Task(name=name, namespace=namespace, steps=steps, api_version=api_version)


def task_run(
    name: str, namespace: str, task_ref: str, api_version: str = PIPELINE_API_VERSION
) -> TaskRun:
    return TaskRun(
        name=name, namespace=namespace, task_ref=task_ref, api_version=api_version
    )


def pipeline_task(name: str, task_ref: str) -> PipelineTask:
    return PipelineTask(name=name, task_ref=task_ref)


def pipeline(
    name: str,
    namespace: str,
    *tasks: PipelineTask,
    api_version: str = PIPELINE_API_VERSION,
) -> Pipeline:
    if not tasks:
        raise ValueError(f"Pipeline {name} needs at least one task")
    return Pipeline(
        name=name, namespace=namespace, tasks=tasks, api_version=api_version
    )


def pipeline_run(
    name: str,
    namespace: str,
    pipeline_ref: str,
    api_version: str = PIPELINE_API_VERSION,
) -> PipelineRun:
    return PipelineRun(
        name=name,
        namespace=namespace,
        pipeline_ref=pipeline_ref,
        api_version=api_version,
    )


def helloworld_task(
    namespace: str, args: Sequence[str], api_version: str = PIPELINE_API_VERSION
) -> Task:
    """The hello world Task, a single busybox step running ``args``."""
    return task(
        HW_TASK_NAME,
        namespace,
        step(HW_CONTAINER_NAME, VERIFY_IMAGE, *args),
        api_version=api_version,
    )


def helloworld_task_run(
    namespace: str, api_version: str = PIPELINE_API_VERSION
) -> TaskRun:
    return task_run(HW_TASK_RUN_NAME, namespace, HW_TASK_NAME, api_version)


def helloworld_pipeline(
    namespace: str, api_version: str = PIPELINE_API_VERSION
) -> Pipeline:
    """A Pipeline running the hello world Task twice."""
    return pipeline(
        HW_PIPELINE_NAME,
        namespace,
        *[pipeline_task(n, HW_TASK_NAME) for n in HW_PIPELINE_TASK_NAMES],
        api_version=api_version,
    )


def helloworld_pipeline_run(
    namespace: str, api_version: str = PIPELINE_API_VERSION
) -> PipelineRun:
    return pipeline_run(
        HW_PIPELINE_RUN_NAME, namespace, HW_PIPELINE_NAME, api_version
    )
