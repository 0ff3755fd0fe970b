# SPDX-FileCopyrightText: Copyright (c) 2023-2024, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
import uuid

import pytest

from runprobe._client import Kr8sClient
from runprobe._config import ProbeConfig
from runprobe._constants import DEFAULT_LABELS
from runprobe._testutils import FakeCluster


@pytest.fixture(scope="session")
def run_id():
    return uuid.uuid4().hex[:4]


@pytest.fixture
def ns(k8s_cluster, run_id):
    name = f"runprobe-pytest-{run_id}-{uuid.uuid4().hex[:4]}"
    k8s_cluster.kubectl("create", "namespace", name)
    yield name
    k8s_cluster.kubectl("delete", "namespace", name, "--wait=false")


@pytest.fixture
def kube(k8s_cluster):
    return Kr8sClient()


@pytest.fixture
def cluster():
    return FakeCluster()


@pytest.fixture
async def fast_config():
    return await ProbeConfig({"pollInterval": 0.01, "timeout": 2})


@pytest.fixture
def pvc_spec():
    def spec(name, namespace):
        return {
            "apiVersion": "v1",
            "kind": "PersistentVolumeClaim",
            "metadata": {
                "name": name,
                "namespace": namespace,
                "labels": DEFAULT_LABELS,
            },
            "spec": {
                "accessModes": ["ReadWriteOnce"],
                "resources": {"requests": {"storage": "16Mi"}},
            },
        }

    return spec


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in (
        "RUNPROBE_CONFIG",
        "RUNPROBE_POLL_INTERVAL",
        "RUNPROBE_TIMEOUT",
        "RUNPROBE_IMAGE",
        "RUNPROBE_PIPELINE_API_VERSION",
        "RUNPROBE_LOG_PATH",
        "RUNPROBE_LOG_FILE",
    ):
        monkeypatch.delenv(var, raising=False)
