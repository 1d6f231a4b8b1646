#
# sleepsort sorts numbers by putting one task to sleep per number and
# collecting them as they wake up. It runs on anyio, so either trio or
# asyncio will do.

import anyio
import greenback

from contextlib import asynccontextmanager

from . import config
from .sort import sleep_sort, sleep_sort_sync, open_sleep_sort, NegativeValueError

__all__ = [
    'setup', 'run', 'runner', 'per_task',
    'sleep_sort', 'sleep_sort_sync', 'open_sleep_sort', 'NegativeValueError',
]

_setup_done = False
def setup(backend='trio', unit=None):
    """
    Configure sleepsort's defaults.

    :param backend: The back-end `run` uses, may be 'trio' or 'asyncio'.
    :param unit: Default number of seconds to sleep per unit of value.

    The backend can only be chosen once per process.
    """

    global _setup_done
    if backend not in config.BACKENDS:
        raise RuntimeError("backend must be 'trio' or 'asyncio', not %r" % (backend,))
    if unit is not None and not unit > 0:
        raise ValueError("unit must be positive, not %r" % (unit,))
    if not _setup_done:
        _setup_done = backend
    elif _setup_done != backend:
        raise RuntimeError("You're trying to mix backends")

    config.backend = backend
    if unit is not None:
        config.unit = unit


async def per_task():
    """
    Call this once per task that wants to use `sleep_sort_sync`.

    This is done for you by `run` and `runner`.
    """
    await greenback.ensure_portal()


@asynccontextmanager
async def runner():
    """
    An async context that lets sync code inside it call `sleep_sort_sync`.

    Yields a task group; tasks you start in it need to call `per_task`
    themselves.
    """
    async with anyio.create_task_group() as tg:
        await per_task()
        yield tg


def run(proc, *args, backend=None, backend_options=None, **kwargs):
    """
    A replacement for anyio.run().

    Uses the backend chosen by `setup` unless you pass one, and runs
    `proc` within `runner`.
    """
    async def _run():
        async with runner():
            return await proc(*args, **kwargs)
    return anyio.run(_run, backend=backend or config.backend, backend_options=backend_options)
