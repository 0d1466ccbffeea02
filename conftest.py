# Make `import core.*`, `import api.*` etc. resolve from the repository root
# no matter which directory the tests are collected from.
import os
import sys

ROOT = os.path.dirname(__file__)
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import httpx  # noqa: E402
import pytest  # noqa: E402

from core.config import PrerenderSettings  # noqa: E402
from utils_tests.factories import RecordingLogger  # noqa: E402


@pytest.fixture
def settings():
    return PrerenderSettings(service_url="http://render.test/")


@pytest.fixture
def recording_logger():
    return RecordingLogger()


@pytest.fixture
def mock_client():
    """Return a factory for AsyncClients backed by an httpx.MockTransport."""

    def _create(handler):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=False)

    return _create
