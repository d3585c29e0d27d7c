# Import and expose main SDK classes
from sdk.config import Config, SDKError
from sdk.update import Update, SignedUpdate, DoubleUpdate, home_domain_hash
from sdk.agent import AgentCore, OpticsAgent, AgentError, DoubleUpdateError
from sdk.watcher import Watcher, UpdateWatcher, DoubleUpdateDetector
from private.ipc.client import (
    Client, TransactionFailedError, TransactionTimeoutError, DroppedTransactionError,
)
from private.ipc.contracts import (
    TestCommonFactory, TestCommonContract, TestCommonMetaData, States,
    new_test_common, deploy_test_common,
)


# Make SDKError appear under opticssdk in tracebacks
SDKError.__module__ = "opticssdk"

# Define what gets imported with "from opticssdk import *"
__all__ = ["Config", "SDKError", "Update", "SignedUpdate", "DoubleUpdate",
           "home_domain_hash", "AgentCore", "OpticsAgent", "AgentError",
           "DoubleUpdateError", "Watcher", "UpdateWatcher", "DoubleUpdateDetector",
           "Client", "TransactionFailedError", "TransactionTimeoutError",
           "DroppedTransactionError", "TestCommonFactory", "TestCommonContract",
           "TestCommonMetaData", "States", "new_test_common", "deploy_test_common"]
