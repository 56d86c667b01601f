from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterable

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fastapi.testclient import TestClient  # noqa: E402

from solar import settings  # noqa: E402


@pytest.fixture(scope="session")
def api_client() -> Iterable[TestClient]:
    settings.reset_settings()
    from sunrise_api import app

    with TestClient(app) as client:
        yield client
