"""Data types and dataclasses for chain-deployer library."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

ADDRESS_PATTERN = re.compile(r"0x[0-9a-fA-F]{40}")


def is_address(value: Any) -> bool:
    """Check that value is a 0x-prefixed, 20-byte hex address."""
    return isinstance(value, str) and ADDRESS_PATTERN.fullmatch(value) is not None


class ConfirmationStatus(Enum):
    """
    Result of the confirmation cascade.

    - CONFIRMED: a strategy completed and the transaction did not revert
    - REVERTED: the transaction was mined with receipt status 0
    - UNCONFIRMED: no strategy completed (unavailable, failed or timed out)
    """

    CONFIRMED = "confirmed"
    REVERTED = "reverted"
    UNCONFIRMED = "unconfirmed"


class DeploymentStatus(Enum):
    """Externally visible deployment status."""

    SUCCEEDED = "succeeded"
    UNCONFIRMED = "unconfirmed"
    FAILED = "failed"


@dataclass(frozen=True)
class Blueprint:
    """Compiled template used to submit a contract-creation request."""

    name: str  # e.g., "PatientRecordVerification"
    abi: List[Dict[str, Any]]
    bytecode: str  # 0x-prefixed creation bytecode
    source_path: Optional[str] = None  # Artifact file the blueprint was read from


@dataclass(frozen=True)
class TransactionReceipt:
    """Mined transaction receipt with hex quantities decoded."""

    transaction_hash: str
    block_number: int
    status: int  # 1 success, 0 reverted
    contract_address: Optional[str] = None


@dataclass(frozen=True)
class PendingDeployment:
    """
    Handle to an in-flight creation transaction.

    Clients from other library generations may return any object exposing a
    subset of: transaction_hash, address, deploy_transaction.wait(),
    wait_for_deployment(), deployed(), get_address().
    """

    transaction_hash: str
    address: Optional[str] = None
    deploy_transaction: Optional[Any] = None  # Handle with async wait()


@dataclass
class Confirmation:
    """Evidence (or lack of it) that a transaction was included on-chain."""

    status: ConfirmationStatus
    block: Optional[int] = None
    address: Optional[str] = None
    strategy: Optional[str] = None  # Name of the strategy that completed
    errors: Dict[str, str] = field(default_factory=dict)  # Demoted strategies

    @property
    def confirmed(self) -> bool:
        return self.status == ConfirmationStatus.CONFIRMED


@dataclass
class DeploymentOutcome:
    """Final status and resolved address returned to the caller."""

    contract_name: str
    address: str
    transaction_hash: str
    status: DeploymentStatus
    confirmation: Optional[Confirmation] = None

    @property
    def block(self) -> Optional[int]:
        return self.confirmation.block if self.confirmation else None
