"""Synchronous entry point for callers without an event loop.

HTTP handlers built on sync frameworks, scripts and the CLI call
``run_sync(flow, data)``; the flow runs on a private event loop that is
closed afterwards.  Must not be called from inside a running loop; await
``Flow.run()`` there instead.
"""

from __future__ import annotations

import asyncio
from typing import Any, Mapping

from .base_flow import Flow


def run_sync(flow: Flow, data: Mapping[str, Any]) -> dict[str, Any]:
    """Run ``flow`` to completion and return its validated output.

    Raises:
        FlowError: Classified failure of the invocation.
        RuntimeError: Called while an event loop is running in this thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        pass
    else:
        raise RuntimeError("run_sync() cannot be used inside a running event loop; await flow.run()")

    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(flow.run(data))
    finally:
        try:
            # Connection pools are bound to this loop; close them with it.
            loop.run_until_complete(flow.aclose())
        finally:
            loop.close()
