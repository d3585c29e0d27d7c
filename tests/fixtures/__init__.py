"""
Test fixtures for opticssdk unit tests.

This package contains reusable test data and builders:
- common_fixtures.py: keys, roots, fake receipts and Update event logs
"""

from .common_fixtures import (
    UPDATER_KEY,
    OTHER_KEY,
    HOME_DOMAIN,
    HOME_ADDRESS,
    REPLICA_ADDRESS,
    root,
    make_receipt,
    make_update_event,
    make_mock_web3,
)

__all__ = [
    'UPDATER_KEY',
    'OTHER_KEY',
    'HOME_DOMAIN',
    'HOME_ADDRESS',
    'REPLICA_ADDRESS',
    'root',
    'make_receipt',
    'make_update_event',
    'make_mock_web3',
]
