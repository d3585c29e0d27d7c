import sys
import pytest
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from eth_account import Account

from tests.fixtures.common_fixtures import (
    UPDATER_KEY, OTHER_KEY, HOME_DOMAIN, HOME_ADDRESS, REPLICA_ADDRESS,
)


@pytest.fixture(scope="session")
def test_config():
    """Global test configuration."""
    return {
        "updater_private_key": UPDATER_KEY,
        "other_private_key": OTHER_KEY,
        "dial_uri": "http://127.0.0.1:8545",
        "home_domain": HOME_DOMAIN,
        "home_address": HOME_ADDRESS,
        "replica_address": REPLICA_ADDRESS,
    }


@pytest.fixture(scope="session")
def project_root_path():
    return project_root


@pytest.fixture
def updater_account():
    return Account.from_key(UPDATER_KEY)


@pytest.fixture
def other_account():
    return Account.from_key(OTHER_KEY)


@pytest.fixture
def sample_roots():
    return [bytes([i]) * 32 for i in range(4)]
