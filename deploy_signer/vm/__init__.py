"""
Fee re-authorization.

Fees are authorized and executed by a VM running on a disposable
ConsensusMemory store; nothing here reads or writes persistent ledger state.
"""
from .fee import VM, FeeAuthorization, verify_fee
from .store import ConsensusMemory

__all__ = ['VM', 'FeeAuthorization', 'ConsensusMemory', 'verify_fee']
