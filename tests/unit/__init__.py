"""
Unit tests for the Optics SDK.

- TestCommon binding (test_testcommon.py)
- Transaction dispatch and client (test_client.py)
- Revert decoding (test_errors.py)
- Signed updates (test_update.py)
- Agents and the watcher (test_agent.py, test_watcher.py)
- Configuration loading (test_config_loading.py)

To run all unit tests:
    python -m pytest tests/unit/ -v
"""
