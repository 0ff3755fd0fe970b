# SPDX-FileCopyrightText: Copyright (c) 2024, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
from __future__ import annotations

import os
import pathlib
from typing import Any, Dict, Optional, Union

import anyio
import jsonpath
import yaml

from ._constants import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_TIMEOUT,
    LOG_FILE,
    LOG_PATH,
    PIPELINE_API_VERSION,
    VERIFY_IMAGE,
)
from ._exceptions import ConfigError
from ._types import PathType

ENV_PREFIX = "RUNPROBE_"

# key -> (environment variable, default, type)
_SETTINGS = {
    "pollInterval": ("POLL_INTERVAL", DEFAULT_POLL_INTERVAL, float),
    "timeout": ("TIMEOUT", DEFAULT_TIMEOUT, float),
    "image": ("IMAGE", VERIFY_IMAGE, str),
    "pipelineApiVersion": ("PIPELINE_API_VERSION", PIPELINE_API_VERSION, str),
    "logPath": ("LOG_PATH", LOG_PATH, str),
    "logFile": ("LOG_FILE", LOG_FILE, str),
}


class ProbeConfig:
    """Settings for verification runs.

    Values come from, in order of priority, ``RUNPROBE_*`` environment
    variables, a YAML file or dict, and the built in defaults.

    Args:
        path_or_config: A YAML file, a dict, or None to use the file named
            by ``RUNPROBE_CONFIG`` if it is set.

    Example:
        >>> config = await ProbeConfig("runprobe.yaml")
        >>> config.timeout
        120.0
    """

    def __init__(self, path_or_config: Union[PathType, Dict, None] = None):
        self.path: Optional[pathlib.Path] = None
        self._raw: dict = {}

        if path_or_config is None:
            path_or_config = os.environ.get(f"{ENV_PREFIX}CONFIG")
        if isinstance(path_or_config, dict):
            self._raw = path_or_config
        elif path_or_config:
            self.path = pathlib.Path(path_or_config).expanduser()
            if not self.path.exists():
                raise ConfigError(f"File {self.path} does not exist")
            if self.path.is_dir():
                raise ConfigError(
                    f'Error loading config file "{self.path}": is a directory.'
                )

    def __await__(self):
        async def f():
            if self.path and not self._raw:
                async with await anyio.open_file(self.path) as fh:
                    self._raw = yaml.safe_load(await fh.read()) or {}
                if not isinstance(self._raw, dict):
                    raise ConfigError(f"Config file {self.path} must be a mapping")
            self._validate()
            return self

        return f().__await__()

    def _validate(self) -> None:
        for key in _SETTINGS:
            self.setting(key)
        if self.poll_interval <= 0:
            raise ConfigError(f"pollInterval must be positive, got {self.poll_interval}")
        if self.timeout < 0:
            raise ConfigError(f"timeout must not be negative, got {self.timeout}")

    @property
    def raw(self) -> Dict:
        return self._raw

    def get(self, pointer: str) -> Any:
        """Get a value from the config file using a JSON Pointer."""
        return jsonpath.pointer.resolve(pointer, self._raw)

    def setting(self, key: str) -> Any:
        """Resolve a setting from the environment, the config file or the default."""
        env, default, cast = _SETTINGS[key]
        value = os.environ.get(ENV_PREFIX + env)
        if value is None:
            value = self._raw.get(key, default)
        try:
            return cast(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid value for {key}: {value!r}") from e

    @property
    def poll_interval(self) -> float:
        return self.setting("pollInterval")

    @property
    def timeout(self) -> float:
        return self.setting("timeout")

    @property
    def image(self) -> str:
        return self.setting("image")

    @property
    def pipeline_api_version(self) -> str:
        return self.setting("pipelineApiVersion")

    @property
    def log_path(self) -> str:
        return self.setting("logPath")

    @property
    def log_file(self) -> str:
        return self.setting("logFile")
