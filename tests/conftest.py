import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import pytest

from core import swarfarm
from fakes import FakeSwarfarm


@pytest.fixture(autouse=True)
def clear_swarfarm_cache():
    swarfarm.clear_cache()
    yield
    swarfarm.clear_cache()


@pytest.fixture()
def fake_swarfarm(monkeypatch):
    fake = FakeSwarfarm()
    monkeypatch.setattr(swarfarm.requests, "get", fake)
    return fake
