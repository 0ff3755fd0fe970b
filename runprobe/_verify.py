# SPDX-FileCopyrightText: Copyright (c) 2025, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
from __future__ import annotations

import logging

from ._builders import verification_pod_for
from ._config import ProbeConfig
from ._constants import HW_VALIDATION_POD_NAME
from ._contract import LogVolumeContract
from ._exceptions import ContractError
from ._logs import fetch_output
from ._poll import FETCH_ERRORS, wait_for_state
from ._predicates import pod_started
from ._types import ClusterClient, Predicate

logger = logging.getLogger(__name__)

WAIT_LABEL = "ValidationPodCompleted"


async def verify_output(
    client: ClusterClient,
    namespace: str,
    run_name: str,
    *,
    pod_name: str = HW_VALIDATION_POD_NAME,
    predicate: Predicate = pod_started,
    contract: LogVolumeContract | None = None,
    config: ProbeConfig | None = None,
    timeout: float | None = None,
    interval: float | None = None,
    cleanup: bool = False,
) -> str:
    """Read the log file a run left on its volume claim.

    Creates a verification pod mounting the claim named after ``run_name``,
    waits for it with ``predicate`` and returns its output.

    Args:
        client: The cluster client.
        namespace: The namespace of the run.
        run_name: The run whose volume claim holds the log file.
        pod_name: The name of the verification pod.
        predicate: When the pod's output is ready to read. Defaults to
            :func:`runprobe.pod_started`.
        contract: Overrides the mount path and file name. Its claim name
            must be ``run_name``.
        config: Supplies the image, log location and wait defaults.
        timeout: Seconds to wait for the pod, overrides ``config``.
        interval: Seconds between polls, overrides ``config``.
        cleanup: Delete the verification pod once its output was read.

    Returns:
        The contents of the log file.

    Raises:
        ResourceCreationError: If the pod is rejected. No polling happens.
        PredicateError: If the pod can never become ready.
        WaitTimeoutError: If the pod does not become ready in time.
        StreamError: If the pod's output cannot be read.
        ContractError: If ``contract`` mounts a claim other than ``run_name``.
    """
    if config is None:
        config = await ProbeConfig()
    if contract is None:
        contract = LogVolumeContract.for_run(
            run_name, mount_path=config.log_path, file_name=config.log_file
        )
    elif contract.claim_name != run_name:
        raise ContractError(
            f"Contract mounts claim {contract.claim_name} but run is {run_name}"
        )
    pod = verification_pod_for(contract, namespace, name=pod_name, image=config.image)

    await client.create(pod)
    try:
        logger.info(
            f"Waiting for pod with test volume {run_name} to come up so we can read logs from it"
        )
        await wait_for_state(
            client,
            pod.name,
            namespace,
            predicate,
            WAIT_LABEL,
            timeout=config.timeout if timeout is None else timeout,
            interval=config.poll_interval if interval is None else interval,
        )
        output = await fetch_output(client, pod.name, namespace)
    except Exception:
        if cleanup:
            # Never mask the original failure
            try:
                await client.delete(pod.name, namespace)
            except FETCH_ERRORS as e:
                logger.warning(
                    f"Failed to delete pod {namespace}/{pod.name} after an error: {e!r}"
                )
        raise
    if cleanup:
        await client.delete(pod.name, namespace)
    return output
