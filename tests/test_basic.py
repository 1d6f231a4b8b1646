#
# Setup, run, and the sync interface.
#

import anyio
import pytest

import sleepsort
from sleepsort import config, sleep_sort, sleep_sort_sync
from sleepsort.pytest_plugin import backend_options


def test_run(sort_unit):
    res = sleepsort.run(sleep_sort, [2, 0, 1], unit=sort_unit,
            backend_options=backend_options(config.backend))
    assert res == [0, 1, 2]


def test_mix_backends():
    other = 'asyncio' if config.backend == 'trio' else 'trio'
    with pytest.raises(RuntimeError):
        sleepsort.setup(other)


def test_unknown_backend():
    with pytest.raises(RuntimeError):
        sleepsort.setup('twisted')


def test_unit(monkeypatch):
    monkeypatch.setattr(config, 'unit', config.unit)
    sleepsort.setup(config.backend, unit=0.5)
    assert config.unit == 0.5
    with pytest.raises(ValueError):
        sleepsort.setup(config.backend, unit=0)


@pytest.mark.anyio
async def test_default_unit(monkeypatch, sort_unit):
    monkeypatch.setattr(config, 'unit', sort_unit)
    t1 = anyio.current_time()
    assert await sleep_sort([2, 1]) == [1, 2]
    assert anyio.current_time() - t1 >= 2 * sort_unit * 0.9


class TestSync:

    @pytest.mark.sleepsort
    def test_sync(self, sort_unit):
        assert sleep_sort_sync([3, 1, 2], unit=sort_unit) == [1, 2, 3]

    @pytest.mark.sleepsort
    def test_sync_nested(self, sort_unit):
        def helper(values):
            return sleep_sort_sync(values, unit=sort_unit)
        assert helper([1, 0]) + helper([5, 4]) == [0, 1, 4, 5]


def test_bad_unit_changes_nothing(monkeypatch):
    monkeypatch.setattr(sleepsort, '_setup_done', False)
    monkeypatch.setattr(config, 'unit', config.unit)
    backend = config.backend
    other = 'asyncio' if backend == 'trio' else 'trio'

    with pytest.raises(ValueError):
        sleepsort.setup(other, unit=0)
    assert sleepsort._setup_done is False
    assert config.backend == backend
