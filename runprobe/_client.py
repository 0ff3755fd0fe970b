# SPDX-FileCopyrightText: Copyright (c) 2025, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
from __future__ import annotations

import contextlib
import logging
from typing import AsyncGenerator, AsyncIterator

import kr8s.asyncio
from box import Box
from kr8s import ServerError
from kr8s.asyncio.objects import APIObject, get_class, new_class, object_from_spec

from ._constants import PIPELINE_API_VERSION, PIPELINE_KINDS
from ._data_utils import freeze
from ._exceptions import FetchError, ResourceCreationError
from ._types import SpecType

logger = logging.getLogger(__name__)


class Kr8sClient:
    """A :class:`runprobe.ClusterClient` that talks to Kubernetes with kr8s.

    Args:
        api: An existing ``kr8s.asyncio.Api``. If not set one is created on first
            use from ``api_kwargs``.
        pipeline_api_version: The group/version used for Task, TaskRun,
            Pipeline and PipelineRun, which kr8s has no classes for.
        **api_kwargs: Passed to :func:`kr8s.asyncio.api`, e.g. ``kubeconfig``
            or ``context``.

    Example:
        >>> client = Kr8sClient()
        >>> await client.create(build_verification_pod("default", "helloworld-run"))
    """

    def __init__(
        self, api=None, pipeline_api_version: str = PIPELINE_API_VERSION, **api_kwargs
    ) -> None:
        self._api = api
        self._api_kwargs = api_kwargs
        self._pipeline_api_version = pipeline_api_version
        self._classes: dict[str, type[APIObject]] = {}

    async def async_api(self):
        if self._api is None:
            self._api = await kr8s.asyncio.api(**self._api_kwargs)
        return self._api

    def _class_for(self, kind: str) -> type[APIObject]:
        """Resolve a kind to a kr8s object class.

        The pipeline kinds always use ``pipeline_api_version``. Other kinds
        kr8s doesn't know are created on the fly when given in the
        ``kind.group/version`` form.

        Raises:
            FetchError: If the kind can't be resolved.
        """
        if kind in self._classes:
            return self._classes[kind]
        if kind.lower() in PIPELINE_KINDS:
            cls = new_class(
                PIPELINE_KINDS[kind.lower()], version=self._pipeline_api_version
            )
        else:
            try:
                cls = get_class(kind)
            except KeyError as e:
                if "." not in kind:
                    raise FetchError(
                        f"Unknown kind {kind}, use the kind.group/version form"
                    ) from e
                cls = new_class(kind)
        self._classes[kind] = cls
        return cls

    async def _object(self, name: str, namespace: str, kind: str) -> APIObject:
        api = await self.async_api()
        cls = self._class_for(kind)
        return cls(name, namespace=namespace, api=api)

    async def create(self, spec: SpecType) -> APIObject:
        """Submit a spec to the cluster.

        Raises:
            ResourceCreationError: If the cluster rejects the spec.
        """
        api = await self.async_api()
        manifest = spec.to_dict() if hasattr(spec, "to_dict") else dict(spec)
        kind = manifest.get("kind")
        metadata = manifest.get("metadata") or {}
        name, namespace = metadata.get("name"), metadata.get("namespace")
        try:
            obj = object_from_spec(manifest, api=api, allow_unknown_type=True)
            await obj.create()
        except (ServerError, ValueError, KeyError) as e:
            raise ResourceCreationError(
                f"Failed to create {kind} {namespace}/{name}: {e}",
                kind=kind,
                name=name,
                namespace=namespace,
            ) from e
        logger.info(f"Created {kind} {namespace}/{name}")
        return obj

    async def get(self, name: str, namespace: str, kind: str = "pod") -> Box:
        """Fetch a read-only snapshot of a resource.

        Raises:
            kr8s.NotFoundError: If the resource does not exist (yet).
        """
        obj = await self._object(name, namespace, kind)
        await obj.refresh()
        return freeze(obj.raw)

    async def delete(self, name: str, namespace: str, kind: str = "pod") -> None:
        obj = await self._object(name, namespace, kind)
        await obj.delete()
        logger.info(f"Deleted {kind} {namespace}/{name}")

    @contextlib.asynccontextmanager
    async def stream_logs(
        self, pod_name: str, namespace: str
    ) -> AsyncGenerator[AsyncIterator[bytes]]:
        """Open the log stream of a pod, yielding its raw byte chunks."""
        api = await self.async_api()
        async with api.call_api(
            "GET",
            version="v1",
            url=f"pods/{pod_name}/log",
            namespace=namespace,
            stream=True,
        ) as resp:
            yield resp.aiter_bytes()
