#
# Sleep sort: every value sleeps for a time proportional to itself, then
# drops into a shared channel. Whatever comes out first is smallest.
#

import logging
from contextlib import asynccontextmanager

import anyio
import greenback
import sniffio

from . import config

logger = logging.getLogger(__name__)


class NegativeValueError(ValueError):
    """
    A value (or its key) would need a negative sleep.

    Raised before any task is started.
    """
    def __init__(self, index, value):
        super().__init__("Cannot sleep-sort a negative delay: item %d is %r" % (index, value))
        self.index = index
        self.value = value


def _delays(values, unit, key):
    res = []
    for i, v in enumerate(values):
        d = v if key is None else key(v)
        # also catches NaN
        if not d >= 0:
            raise NegativeValueError(i, d)
        res.append(d * unit)
    return res


def _collapse(exc):
    while isinstance(exc, BaseExceptionGroup) and len(exc.exceptions) == 1:
        exc = exc.exceptions[0]
    return exc


async def _produce(send, value, deadline):
    await anyio.sleep_until(deadline)
    await send.send(value)


async def _supervise(send, values, deadlines):
    # Sole owner of the send side. It is closed exactly once, after the
    # inner group has seen every producer finish or get cancelled.
    try:
        async with send:
            async with anyio.create_task_group() as tg:
                for i, (v, t) in enumerate(zip(values, deadlines)):
                    tg.start_soon(_produce, send, v, t, name="sleepsort.%d" % (i,))
    except anyio.get_cancelled_exc_class():
        logger.debug("Sort cancelled, channel closed")
        raise
    logger.debug("All %d producers done, channel closed", len(values))


@asynccontextmanager
async def open_sleep_sort(values, *, unit=None, key=None):
    """
    Start sleep-sorting `values` and yield the stream they arrive on.

    Iterate the stream with ``async for``; it ends once every value has
    been delivered. Leaving the block early cancels whatever is still
    asleep.

    :param values: non-negative numbers.
    :param unit: seconds per unit of value. Defaults to `config.unit`.
    :param key: if given, sleep for ``key(v)`` units instead of ``v``.
    :raises NegativeValueError: before anything starts.
    """
    values = list(values)
    if unit is None:
        unit = config.unit
    delays = _delays(values, unit, key)
    logger.debug("Sorting %d values, unit=%r, on %s",
            len(values), unit, sniffio.current_async_library())

    send, receive = anyio.create_memory_object_stream(len(values))
    start = anyio.current_time()
    deadlines = [start + d for d in delays]

    try:
        async with anyio.create_task_group() as tg:
            tg.start_soon(_supervise, send, values, deadlines, name="sleepsort.supervisor")
            try:
                yield receive
            finally:
                # Cancel before closing, so no producer sends into a closed stream.
                tg.cancel_scope.cancel()
                receive.close()
    except BaseExceptionGroup as eg:
        exc = _collapse(eg)
        if exc is eg:
            raise
        # Re-raising would chain `exc` onto the group; keep its own chain instead.
        cause, context, suppress = exc.__cause__, exc.__context__, exc.__suppress_context__
        try:
            raise exc
        finally:
            exc.__cause__ = cause
            exc.__context__ = context
            exc.__suppress_context__ = suppress


async def sleep_sort(values, *, unit=None, key=None):
    """
    Sort non-negative numbers by sleeping on them.

    Returns a new list, in the order the values woke up.
    Equal values come out adjacent, in no particular order.

    If a task fails, the others are cancelled and its exception is raised
    as-is, chain intact. Tasks that fail in the same scheduler step (e.g.
    for equal values) cannot be told apart, so you get an ExceptionGroup
    holding all of their errors instead.
    """
    res = []
    async with open_sleep_sort(values, unit=unit, key=key) as stream:
        async for v in stream:
            res.append(v)
    return res


def sleep_sort_sync(values, *, unit=None, key=None):
    """
    Synchronous version of `sleep_sort`.

    This must be called from sync code that runs within an async task that
    has a greenback portal, e.g. one started via `sleepsort.run`.
    """
    return greenback.await_(sleep_sort(values, unit=unit, key=key))
