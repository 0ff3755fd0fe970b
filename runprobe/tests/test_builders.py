# SPDX-FileCopyrightText: Copyright (c) 2025, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
import dataclasses

import pytest
import yaml

from runprobe import (
    LogVolumeContract,
    build_verification_pod,
    helloworld_pipeline,
    helloworld_pipeline_run,
    helloworld_task,
    helloworld_task_run,
    pipeline,
    step,
    task,
    verification_pod_for,
)


def test_verification_pod_mounts_run_claim():
    pod = build_verification_pod("ns", "helloworld-run")
    assert pod.volume_claim_name == "helloworld-run"

    spec = pod.to_dict()
    assert spec["apiVersion"] == "v1"
    assert spec["kind"] == "Pod"
    assert spec["metadata"]["namespace"] == "ns"
    assert spec["metadata"]["name"] == "helloworld-validation-busybox"

    [volume] = spec["spec"]["volumes"]
    assert volume["persistentVolumeClaim"] == {"claimName": "helloworld-run"}

    [container] = spec["spec"]["containers"]
    assert container["image"] == "busybox"
    assert container["command"] == ["cat"]
    assert container["args"] == ["/logs/process-log.txt"]
    [mount] = container["volumeMounts"]
    assert mount == {"name": volume["name"], "mountPath": "/logs"}
    assert spec["spec"]["restartPolicy"] == "Never"


def test_verification_pod_is_immutable():
    pod = build_verification_pod("ns", "helloworld-run")
    with pytest.raises(dataclasses.FrozenInstanceError):
        pod.name = "other"  # type: ignore[misc]


def test_verification_pod_custom_location():
    pod = build_verification_pod(
        "ns",
        "build-run",
        name="reader",
        image="alpine:3",
        mount_path="/workspace/output",
        file_name="build.log",
    )
    container = pod.to_dict()["spec"]["containers"][0]
    assert container["name"] == "reader"
    assert container["image"] == "alpine:3"
    assert container["args"] == ["/workspace/output/build.log"]


def test_verification_pod_shares_contract_with_writer():
    contract = LogVolumeContract.for_run("helloworld-run")
    pod = verification_pod_for(contract, "ns")
    writer = contract.write_command("do you want to build a snowman")
    assert pod.args[0] in writer[-1]
    assert pod.to_dict()["spec"]["volumes"] == [contract.volume()]


def test_verification_pod_yaml():
    pod = build_verification_pod("ns", "helloworld-run")
    assert yaml.safe_load(pod.to_yaml()) == pod.to_dict()


def test_helloworld_task():
    t = helloworld_task("ns", ["echo", "do you want to build a snowman"])
    assert t.to_dict() == {
        "apiVersion": "tekton.dev/v1",
        "kind": "Task",
        "metadata": {"name": "helloworld", "namespace": "ns"},
        "spec": {
            "steps": [
                {
                    "name": "helloworld-busybox",
                    "image": "busybox",
                    "command": ["echo", "do you want to build a snowman"],
                }
            ]
        },
    }


def test_helloworld_task_run():
    run = helloworld_task_run("ns")
    spec = run.to_dict()
    assert spec["kind"] == "TaskRun"
    assert spec["metadata"] == {"name": "helloworld-run", "namespace": "ns"}
    assert spec["spec"] == {"taskRef": {"name": "helloworld"}}


def test_helloworld_pipeline():
    spec = helloworld_pipeline("ns").to_dict()
    assert spec["kind"] == "Pipeline"
    assert spec["metadata"]["name"] == "helloworld-pipeline"
    assert spec["spec"]["tasks"] == [
        {"name": "helloworld-task-1", "taskRef": {"name": "helloworld"}},
        {"name": "helloworld-task-2", "taskRef": {"name": "helloworld"}},
    ]

    run = helloworld_pipeline_run("ns").to_dict()
    assert run["metadata"]["name"] == "helloworld-pipelinerun"
    assert run["spec"] == {"pipelineRef": {"name": "helloworld-pipeline"}}


def test_task_steps_keep_order():
    t = task(
        "build",
        "ns",
        step("fetch", "alpine/git", "git", "clone", args=["https://example.com/repo"]),
        step("compile", "golang:1.22", "go", "build"),
        api_version="pipeline.knative.dev/v1alpha1",
    )
    spec = t.to_dict()
    assert spec["apiVersion"] == "pipeline.knative.dev/v1alpha1"
    assert [s["name"] for s in spec["spec"]["steps"]] == ["fetch", "compile"]
    assert spec["spec"]["steps"][0]["args"] == ["https://example.com/repo"]
    assert "args" not in spec["spec"]["steps"][1]


def test_empty_task_and_pipeline():
    with pytest.raises(ValueError):
        task("build", "ns")
    with pytest.raises(ValueError):
        pipeline("build", "ns")
