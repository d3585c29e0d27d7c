import concurrent.futures
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .config import Config, SDKError

logger = logging.getLogger(__name__)


class AgentError(SDKError):
    pass


class DoubleUpdateError(AgentError):
    """Raised once a double update has been observed and reported."""
    pass


@dataclass
class AgentCore:
    """Contracts shared across all agents: one home and the replicas by name."""
    home: object
    replicas: Dict[str, object] = field(default_factory=dict)


class OpticsAgent(ABC):
    """An application that runs against each replica and a reference to the home."""

    def __init__(self, core: AgentCore):
        self.core = core

    @classmethod
    @abstractmethod
    def from_settings(cls, config: Config) -> 'OpticsAgent':
        """Instantiate the agent from the standard config object."""

    def home(self):
        return self.core.home

    def replicas(self) -> Dict[str, object]:
        return self.core.replicas

    def replica_by_name(self, name: str):
        return self.replicas().get(name)

    @abstractmethod
    def run(self, replica: str) -> None:
        """Run the agent against the named replica."""

    def run_report_error(self, replica: str) -> None:
        """Run against `replica`, tagging any failure with the replica name."""
        try:
            self.run(replica)
        except Exception as e:
            logger.error(f"Replica named {replica} failed: {e}")
            raise AgentError(f"Replica named {replica} failed") from e

    def run_many(self, replicas: Sequence[str]) -> None:
        """Run one task per replica until every task has stopped.

        Failures are logged as they happen. This never returns normally.

        Raises:
            AgentError: Once all replicas have shut down.
        """
        names: List[str] = list(replicas)
        if not names:
            raise AgentError("No replicas to run")

        with concurrent.futures.ThreadPoolExecutor(max_workers=len(names)) as executor:
            futures = {executor.submit(self.run_report_error, name): name for name in names}

            for future in concurrent.futures.as_completed(futures):
                err: Optional[BaseException] = future.exception()
                if err is not None:
                    cause = err.__cause__ or err
                    logger.error(f"Replica shut down: {err}: {cause}")
                else:
                    logger.warning(f"Replica {futures[future]} stopped")

        raise AgentError("All replicas have shut down")

    def run_all(self) -> None:
        self.run_many(list(self.replicas().keys()))
