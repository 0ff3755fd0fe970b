# SPDX-FileCopyrightText: Copyright (c) 2025, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
import pytest

from runprobe import (
    LogVolumeContract,
    ResourceCreationError,
    WaitTimeoutError,
    build_verification_pod,
    fail_on_phase,
    phase_is,
    pod_started,
)
from runprobe._constants import DEFAULT_LABELS, HW_TASK_OUTPUT
from runprobe.asyncio import fetch_output, verify_output, wait_for_state


def writer_pod(name, namespace, contract, message):
    return {
        "apiVersion": "v1",
        "kind": "Pod",
        "metadata": {"name": name, "namespace": namespace, "labels": DEFAULT_LABELS},
        "spec": {
            "containers": [
                {
                    "name": "writer",
                    "image": "busybox",
                    "command": contract.write_command(message),
                    "volumeMounts": [contract.volume_mount()],
                }
            ],
            "volumes": [contract.volume()],
            "restartPolicy": "Never",
        },
    }


async def write_log(kube, ns, pvc_spec, run, message):
    contract = LogVolumeContract.for_run(run)
    await kube.create(pvc_spec(run, ns))
    await kube.create(writer_pod(f"{run}-writer", ns, contract, message))
    await wait_for_state(
        kube,
        f"{run}-writer",
        ns,
        fail_on_phase(phase_is("Succeeded")),
        "WriterSucceeded",
        timeout=180,
    )


async def test_verify_output(kube, ns, pvc_spec):
    await write_log(kube, ns, pvc_spec, "helloworld-run", HW_TASK_OUTPUT)
    output = await verify_output(kube, ns, "helloworld-run", timeout=180, cleanup=True)
    assert output == HW_TASK_OUTPUT


async def test_pod_started_reads_completed_pod(kube, ns, pvc_spec):
    await write_log(kube, ns, pvc_spec, "short-run", "done")
    pod = build_verification_pod(ns, "short-run", name="short-run-reader")
    await kube.create(pod)
    await wait_for_state(kube, pod.name, ns, pod_started, "ReaderStarted", timeout=180)
    assert await fetch_output(kube, pod.name, ns) == "done"
    await kube.delete(pod.name, ns)


async def test_invalid_pod_name_rejected(kube, ns):
    pod = build_verification_pod(ns, "helloworld-run", name="Invalid_Name")
    with pytest.raises(ResourceCreationError) as exc_info:
        await kube.create(pod)
    assert exc_info.value.name == "Invalid_Name"


async def test_missing_pod_times_out(kube, ns):
    with pytest.raises(WaitTimeoutError) as exc_info:
        await wait_for_state(
            kube, "does-not-exist", ns, pod_started, "Missing", timeout=1, interval=0.2
        )
    assert exc_info.value.last_error is not None
