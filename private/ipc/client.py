import logging
from typing import Any, Dict, Optional, Tuple

from web3 import Web3
from web3.exceptions import TimeExhausted
from web3.middleware import ExtraDataToPOAMiddleware
from eth_account import Account
from eth_account.signers.local import LocalAccount
from sdk.config import Config, SDKError, TX_CONFIRMATION_TIMEOUT

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class TransactionFailedError(Exception):
    """Raised when a transaction fails (receipt status is 0)."""
    pass


class TransactionTimeoutError(TimeoutError):
    """Raised when a dispatched transaction is not confirmed in time."""
    pass


class DroppedTransactionError(Exception):
    """Raised when a dispatched transaction disappears without a receipt."""

    def __init__(self, tx_hash: str):
        super().__init__(f"Transaction {tx_hash} was dropped")
        self.tx_hash = tx_hash


def get_raw_transaction(signed_tx):
    if hasattr(signed_tx, 'raw_transaction'):
        return signed_tx.raw_transaction  # web3 v7+
    elif hasattr(signed_tx, 'rawTransaction'):
        return signed_tx.rawTransaction   # web3 v6
    else:
        raise AttributeError("SignedTransaction has neither raw_transaction nor rawTransaction attribute")


def _hex_data(data: Any) -> str:
    if not data:
        return "0x"
    if isinstance(data, (bytes, bytearray)):
        return Web3.to_hex(data)
    return data if data.startswith("0x") else "0x" + data


def dispatch_transaction(web3: Web3, account: LocalAccount, tx: Dict[str, Any],
                         timeout: float = TX_CONFIRMATION_TIMEOUT, poll_latency: float = 0.5):
    """Signs and sends a transaction, logs its progress and waits for the receipt.

    Args:
        web3: Web3 instance
        account: Account that signs the transaction
        tx: Fully built transaction dict
        timeout: Seconds to wait for confirmation
        poll_latency: Seconds between receipt polls

    Returns:
        The transaction receipt

    Raises:
        TransactionTimeoutError: If no receipt arrives within `timeout`.
        DroppedTransactionError: If the node returns no receipt.
        TransactionFailedError: If the receipt status is 0.
    """
    to = tx.get('to') or ZERO_ADDRESS
    data = _hex_data(tx.get('data'))

    logger.info(f"Dispatching transaction to={to} data={data}")
    signed_tx = account.sign_transaction(tx)
    tx_hash = web3.eth.send_raw_transaction(get_raw_transaction(signed_tx))
    tx_hash_hex = Web3.to_hex(tx_hash)
    logger.info(f"Dispatched tx with tx_hash {tx_hash_hex} to={to} data={data}")

    try:
        receipt = web3.eth.wait_for_transaction_receipt(
            tx_hash, timeout=timeout, poll_latency=poll_latency
        )
    except TimeExhausted as e:
        raise TransactionTimeoutError(
            f"Waiting for dispatched tx confirmation timed out! Tx_hash: {tx_hash_hex}."
        ) from e

    if receipt is None:
        raise DroppedTransactionError(tx_hash_hex)
    if receipt["status"] == 0:
        raise TransactionFailedError(f"Transaction {tx_hash_hex} failed.")

    logger.info(f"confirmed transaction with tx_hash {Web3.to_hex(receipt['transactionHash'])}")
    return receipt


def _connect(config: Config) -> Tuple[Web3, LocalAccount]:
    web3 = Web3(Web3.HTTPProvider(config.dial_uri))
    if not web3.is_connected():
        raise ConnectionError(f"Failed to connect to Ethereum node at {config.dial_uri}")

    # Needed for POA chains whose blocks carry long extraData
    if config.poa:
        web3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

    try:
        account = Account.from_key(config.private_key)
    except ValueError as e:
        raise ValueError(f"Invalid private key: {e}") from e

    return web3, account


class Client:
    """Holds the web3 connection, the signer and the bound home and replica contracts."""
    def __init__(self, web3: Web3, auth: LocalAccount, home, replicas: Optional[Dict[str, Any]] = None,
                 tx_timeout: float = TX_CONFIRMATION_TIMEOUT):
        self.web3 = web3
        self.auth = auth
        self.home = home
        self.replicas = replicas or {}
        self.tx_timeout = tx_timeout

    @classmethod
    def dial(cls, config: Config) -> 'Client':
        """Creates a new client with the given configuration.

        Args:
            config: Client configuration

        Returns:
            A new client instance
        """
        from .contracts import new_test_common

        config.validate()
        web3, account = _connect(config)

        home = new_test_common(web3, config.home_address, account, config.tx_timeout)
        replicas = {
            name: new_test_common(web3, address, account, config.tx_timeout)
            for name, address in config.replicas.items()
        }
        logger.info(f"Dialed {config.dial_uri} as {account.address} with {len(replicas)} replicas")
        return cls(web3, account, home, replicas, config.tx_timeout)

    @classmethod
    def deploy_test_common(cls, config: Config, local_domain: int, updater: Optional[str] = None):
        """Deploys a TestCommon contract and returns a client using it as home.

        The signer from `config` becomes the updater unless `updater` is given.

        Returns:
            Tuple of (client, contract_address)
        """
        from .contracts import TestCommonFactory

        if not config.dial_uri:
            raise SDKError("dial_uri is required")
        web3, account = _connect(config)

        factory = TestCommonFactory(web3, account, config.tx_timeout)
        home = factory.deploy(local_domain, updater or account.address)
        logger.info(f"TestCommon deployed at {home.address} for domain {local_domain}")

        return cls(web3, account, home, {}, config.tx_timeout), home.address

    def replica(self, name: str):
        if name not in self.replicas:
            raise SDKError(f"unknown replica {name!r}")
        return self.replicas[name]

    def wait_for_tx(self, tx_hash, timeout: Optional[float] = None, poll_latency: float = 0.5):
        """Waits for a transaction to be mined.

        Raises:
            TransactionFailedError: If the transaction receipt indicates failure.
            TransactionTimeoutError: If the transaction is not mined within the timeout.
        """
        try:
            receipt = self.web3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=timeout or self.tx_timeout, poll_latency=poll_latency
            )
        except TimeExhausted as e:
            raise TransactionTimeoutError(f"Timeout waiting for transaction {Web3.to_hex(tx_hash)}") from e
        if receipt["status"] == 0:
            raise TransactionFailedError(f"Transaction {Web3.to_hex(tx_hash)} failed.")
        return receipt
