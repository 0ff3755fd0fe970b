# SPDX-FileCopyrightText: Copyright (c) 2023-2024, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
"""The `runprobe` asynchronous API.

Use these from async tests, or to run independent verifications concurrently.
"""
from runprobe._client import Kr8sClient
from runprobe._config import ProbeConfig
from runprobe._logs import fetch_output
from runprobe._poll import wait_for_state
from runprobe._verify import verify_output

__all__ = [
    "fetch_output",
    "verify_output",
    "wait_for_state",
    "Kr8sClient",
    "ProbeConfig",
]
