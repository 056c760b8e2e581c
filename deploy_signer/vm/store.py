"""
Disposable execution context for fee execution.
"""
import hashlib
import json
import logging
from typing import Any, Dict

import base58

from deploy_signer.exceptions import FeeExecutionError
from deploy_signer.network import NetworkProfile

logger = logging.getLogger(__name__)

STATE_ROOT_HRP = "sr1"


class ConsensusMemory:
    """
    Empty, in-memory state store with no prior history.

    The state is fixed at genesis: fee execution reads the state root but
    never writes to the store. One store is opened per invocation and
    closed afterwards; nothing in it outlives the invocation or touches
    persistent ledger state.
    """

    def __init__(self, network: NetworkProfile):
        """
        Initialize the store.

        Args:
            network: Network whose genesis state the store starts from
        """
        self.network = network
        self._state: Dict[str, Any] = {}
        self._closed = False

    @classmethod
    def open(cls, network: NetworkProfile) -> "ConsensusMemory":
        """Open a fresh store for network"""
        logger.debug("Opened ephemeral consensus store for %s", network.name)
        return cls(network)

    def _ensure_open(self):
        if self._closed:
            raise FeeExecutionError("Consensus store is closed")

    @property
    def is_empty(self) -> bool:
        return not self._state

    def global_state_root(self) -> str:
        """
        State root of the store's genesis state.

        Returns:
            Encoded state root ("sr1...")

        Raises:
            FeeExecutionError: If the store was closed
        """
        self._ensure_open()
        snapshot = json.dumps(self._state, sort_keys=True, separators=(",", ":"))
        digest = hashlib.sha256(
            self.network.domain + b"global_state_root:" + snapshot.encode("utf-8")
        ).digest()
        return STATE_ROOT_HRP + base58.b58encode(digest).decode("ascii")

    def close(self):
        """Discard the store"""
        self._state.clear()
        self._closed = True

    def __enter__(self) -> "ConsensusMemory":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
