# SPDX-FileCopyrightText: Copyright (c) 2025, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
from __future__ import annotations

import posixpath
import shlex
from dataclasses import dataclass

from ._constants import LOG_FILE, LOG_PATH, SCRATCH_VOLUME
from ._exceptions import ContractError


@dataclass(frozen=True)
class LogVolumeContract:
    """Where a workload leaves its log and where the verification pod reads it.

    The producing workload and the verification pod must agree on the claim
    name, the mount path and the file name. Both sides should derive them from
    the same contract object.

    The claim name is only checked for emptiness, whether it is a valid
    Kubernetes name is left for the API server to decide.

    Example:
        >>> contract = LogVolumeContract.for_run("helloworld-run")
        >>> contract.file_path
        '/logs/process-log.txt'
    """

    claim_name: str
    mount_path: str = LOG_PATH
    file_name: str = LOG_FILE
    volume_name: str = SCRATCH_VOLUME

    def __post_init__(self) -> None:
        if not self.claim_name:
            raise ContractError("Volume claim name must not be empty")
        if not self.mount_path.startswith("/"):
            raise ContractError(
                f"Mount path must be absolute, got '{self.mount_path}'"
            )
        if not self.file_name or "/" in self.file_name:
            raise ContractError(
                f"File name must be a plain file name, got '{self.file_name}'"
            )
        if not self.volume_name:
            raise ContractError("Volume name must not be empty")

    @classmethod
    def for_run(cls, run_name: str, **kwargs) -> LogVolumeContract:
        """Contract for the volume claim created for a run, which shares its name."""
        return cls(claim_name=run_name, **kwargs)

    @property
    def file_path(self) -> str:
        return posixpath.join(self.mount_path, self.file_name)

    def volume(self) -> dict:
        """Pod volume bound to the claim."""
        return {
            "name": self.volume_name,
            "persistentVolumeClaim": {"claimName": self.claim_name},
        }

    def volume_mount(self) -> dict:
        """Container volume mount placing the claim at the mount path."""
        return {"name": self.volume_name, "mountPath": self.mount_path}

    def read_command(self) -> list[str]:
        return ["cat", self.file_path]

    def write_command(self, message: str) -> list[str]:
        """Command for the producing workload that writes ``message`` verbatim."""
        return [
            "/bin/sh",
            "-c",
            f"printf %s {shlex.quote(message)} > {shlex.quote(self.file_path)}",
        ]
