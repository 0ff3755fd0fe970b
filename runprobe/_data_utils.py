# SPDX-FileCopyrightText: Copyright (c) 2023-2024, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
from __future__ import annotations

from typing import Any

from box import Box


def freeze(resource: Any) -> Box:
    """Take a read-only snapshot of a resource manifest.

    Args:
        resource: A dict, a Box or anything with a ``to_dict`` method.

    Returns:
        A frozen Box, attribute access works but any mutation raises.
    """
    if hasattr(resource, "to_dict"):
        resource = resource.to_dict()
    return Box(resource, frozen_box=True, default_box=False)
