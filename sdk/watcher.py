import logging
import threading
from collections import OrderedDict
from typing import List, Optional, Set, Tuple

from private.ipc.client import Client
from private.ipc.contracts import States
from .agent import AgentCore, AgentError, DoubleUpdateError, OpticsAgent
from .config import Config, DEFAULT_BLOCK_CHUNK_SIZE, DEFAULT_POLL_INTERVAL
from .update import DoubleUpdate, SignedUpdate

logger = logging.getLogger(__name__)

DEFAULT_DETECTOR_HISTORY = 10000


class UpdateWatcher:
    """Follows the Update events of one contract, a block range at a time."""

    def __init__(self, contract, from_block: int = 0, chunk_size: int = DEFAULT_BLOCK_CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.contract = contract
        self.next_block = from_block
        self.chunk_size = chunk_size

    def poll(self) -> List[SignedUpdate]:
        """Return updates from blocks not seen yet, up to the current head.

        The cursor only moves once every chunk has been read, so a failed
        poll can be retried without skipping blocks.
        """
        head = self.contract.w3.eth.block_number
        updates: List[SignedUpdate] = []

        cursor = self.next_block
        while cursor <= head:
            to_block = min(cursor + self.chunk_size - 1, head)
            events = self.contract.get_update_events(from_block=cursor, to_block=to_block)
            updates.extend(SignedUpdate.from_event(event) for event in events)
            cursor = to_block + 1
        self.next_block = cursor

        if updates:
            logger.debug(f"Found {len(updates)} updates on {self.contract.address} up to block {head}")
        return updates


class DoubleUpdateDetector:
    """Remembers the first update seen for each previous root and flags conflicts.

    At most `max_history` roots are kept. The oldest are forgotten first, so a
    conflict on a root that old is no longer detected.
    """

    def __init__(self, updater: Optional[str] = None, max_history: int = DEFAULT_DETECTOR_HISTORY):
        if max_history <= 0:
            raise ValueError("max_history must be positive")
        self.updater = updater
        self.max_history = max_history
        self._lock = threading.Lock()
        self._seen: OrderedDict = OrderedDict()

    def observe(self, signed: SignedUpdate) -> Optional[DoubleUpdate]:
        if self.updater is not None and not signed.verify(self.updater):
            logger.warning(
                f"Ignoring update {signed.update.previous_root.hex()} -> {signed.update.new_root.hex()} "
                f"not signed by updater {self.updater}"
            )
            return None

        key = (signed.update.home_domain, signed.update.previous_root)
        with self._lock:
            first = self._seen.setdefault(key, signed)
            while len(self._seen) > self.max_history:
                self._seen.popitem(last=False)

        if first.update.new_root == signed.update.new_root:
            return None
        return DoubleUpdate(first, signed)

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)


class Watcher(OpticsAgent):
    """Watches the home and each replica for double updates and reports them everywhere."""

    def __init__(self, core: AgentCore, poll_interval: float = DEFAULT_POLL_INTERVAL,
                 from_block: int = 0, chunk_size: int = DEFAULT_BLOCK_CHUNK_SIZE,
                 updater: Optional[str] = None):
        super().__init__(core)
        self.poll_interval = poll_interval
        self.from_block = from_block
        self.chunk_size = chunk_size
        self.detector = DoubleUpdateDetector(updater)
        self._stop = threading.Event()
        self._report_lock = threading.Lock()
        self._reported: Set[Tuple[int, bytes]] = set()

    @classmethod
    def from_settings(cls, config: Config) -> 'Watcher':
        client = Client.dial(config)
        return cls(
            AgentCore(client.home, client.replicas),
            poll_interval=config.poll_interval,
            from_block=config.from_block,
            chunk_size=config.block_chunk_size,
            updater=client.home.updater(),
        )

    def stop(self) -> None:
        self._stop.set()

    def run(self, replica: str) -> None:
        contract = self.replica_by_name(replica)
        if contract is None:
            raise AgentError(f"Unknown replica {replica}")

        watched = [("home", self.home()), (replica, contract)]
        watchers = [UpdateWatcher(c, self.from_block, self.chunk_size) for _, c in watched]
        logger.info(f"Watching home {self.home().address} and replica {replica} at {contract.address}")

        while not self._stop.is_set():
            for name, c in watched:
                if c.state() == States.FAILED:
                    raise AgentError(f"{name} contract at {c.address} has failed")

            for watcher in watchers:
                for signed in watcher.poll():
                    double = self.detector.observe(signed)
                    if double is not None:
                        self.handle_double_update(double)
                        raise DoubleUpdateError(
                            f"Double update from root 0x{double.first.update.previous_root.hex()} "
                            f"on domain {double.first.update.home_domain}"
                        )

            self._stop.wait(self.poll_interval)

        logger.info(f"Stopped watching replica {replica}")

    def handle_double_update(self, double: DoubleUpdate) -> bool:
        """Submit `double` to the home and every replica, once per conflict.

        Returns:
            True if this call submitted the proof, False if it was already reported.
        """
        key = (double.first.update.home_domain, double.first.update.previous_root)
        with self._report_lock:
            if key in self._reported:
                return False
            self._reported.add(key)

        logger.warning(
            f"Double update detected on domain {key[0]}: 0x{key[1].hex()} -> "
            f"0x{double.first.update.new_root.hex()} / 0x{double.second.update.new_root.hex()}"
        )
        args = double.as_call_args()
        targets = [("home", self.home())] + list(self.replicas().items())
        for name, contract in targets:
            try:
                contract.double_update(*args)
                logger.info(f"Submitted double update to {name} at {contract.address}")
            except Exception as e:
                logger.error(f"Failed to submit double update to {name}: {e}")
        return True
