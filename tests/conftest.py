import pytest

from sleepsort import config
from sleepsort.pytest_plugin import backend_options

@pytest.fixture
def anyio_backend():
    opts = backend_options(config.backend)
    if opts is None:
        return config.backend
    return config.backend, opts
