import pytest

from config import EngineConfig


@pytest.fixture
def engine_config():
    return EngineConfig(wallet_address="0x1111111111111111111111111111111111111111")
