import pytest

from tests.utils import FakeSession


@pytest.fixture(autouse=True)
def datapath(tmp_path, monkeypatch):
    path = tmp_path / "county-data"
    monkeypatch.setenv("DATAPATH", str(path))
    return path


@pytest.fixture
def fake_session():
    return FakeSession
