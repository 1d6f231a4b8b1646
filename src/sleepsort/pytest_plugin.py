#
# pytest support for sleepsort.
#
# Async tests use anyio's own `anyio` marker. Sync tests that want to call
# `sleep_sort_sync` get the `sleepsort` marker instead, which runs them
# inside `sleepsort.run`.

import os
from inspect import iscoroutinefunction
from typing import Any, Dict, Optional

import pytest

import sleepsort
from sleepsort import config as sort_config


def backend_options(backend: str) -> Optional[Dict[str, Any]]:
    """
    Options for `anyio.run` under test.

    trio gets a clock that jumps ahead whenever every task is asleep, so
    sorting takes no real time at all.
    """
    if backend != 'trio':
        return None
    from trio.testing import MockClock
    return {'clock': MockClock(autojump_threshold=0)}


def virtual_time(backend: str) -> bool:
    return backend_options(backend) is not None


def pytest_addoption(parser):
    group = parser.getgroup('sleepsort')
    group.addoption('--sleepsort-backend', action='store', dest='sleepsort_backend',
            default=os.environ.get('SLEEPSORT_BACKEND', 'trio'),
            choices=sort_config.BACKENDS,
            help="anyio backend to sort on (default: $SLEEPSORT_BACKEND or trio)")
    group.addoption('--sleepsort-unit', action='store', dest='sleepsort_unit',
            type=float, default=os.environ.get('SLEEPSORT_UNIT'),
            help="seconds per unit of value for the sort_unit fixture")


def pytest_configure(config):
    config.addinivalue_line('markers', 'sleepsort: run a sync test within sleepsort.run.')
    sleepsort.setup(config.getoption('sleepsort_backend'))


@pytest.fixture
def sort_unit(request) -> float:
    """
    Seconds per unit of value for tests.

    A full second on trio's virtual clock, a short real one otherwise.
    """
    unit = request.config.getoption('sleepsort_unit')
    if unit is not None:
        return float(unit)
    if virtual_time(sort_config.backend):
        return 1.0
    return 0.02


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem):
    if pyfuncitem.get_closest_marker('sleepsort') is None:
        return None
    if iscoroutinefunction(pyfuncitem.obj):
        raise RuntimeError("Use the 'anyio' marker for async test %s" % (pyfuncitem.name,))

    funcargs = pyfuncitem.funcargs
    testargs = {arg: funcargs[arg] for arg in pyfuncitem._fixtureinfo.argnames}

    async def _main():
        pyfuncitem.obj(**testargs)

    sleepsort.run(_main, backend_options=backend_options(sort_config.backend))
    return True
