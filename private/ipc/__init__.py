from .client import (
    Client,
    TransactionFailedError,
    TransactionTimeoutError,
    DroppedTransactionError,
    dispatch_transaction,
)
from .errors import decode_revert_reason, error_hash_to_error, KNOWN_ERROR_STRINGS

__all__ = [
    'Client',
    'TransactionFailedError',
    'TransactionTimeoutError',
    'DroppedTransactionError',
    'dispatch_transaction',
    'decode_revert_reason',
    'error_hash_to_error',
    'KNOWN_ERROR_STRINGS'
]
