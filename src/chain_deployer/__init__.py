"""
chain-deployer: Python library for deploying contracts and confirming them across client generations
"""

from importlib.metadata import PackageNotFoundError, version

from .artifacts import ContractFactory
from .exceptions import (
    AddressUnresolvedError,
    ArtifactsNotFoundError,
    DefectiveArtifactError,
    DeploymentError,
    DeploymentRevertedError,
    SubmissionFailedError,
    UnconfirmedDeploymentError,
    UnknownContractError,
)
from .orchestrator import Deployer, deploy_contract
from .rpc import RpcChainClient
from .types import (
    Blueprint,
    Confirmation,
    ConfirmationStatus,
    DeploymentOutcome,
    DeploymentStatus,
    PendingDeployment,
    TransactionReceipt,
)

try:
    __version__ = version("chain-deployer")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "Deployer",
    "deploy_contract",
    "ContractFactory",
    "RpcChainClient",
    "Blueprint",
    "PendingDeployment",
    "TransactionReceipt",
    "Confirmation",
    "ConfirmationStatus",
    "DeploymentOutcome",
    "DeploymentStatus",
    "DeploymentError",
    "SubmissionFailedError",
    "UnconfirmedDeploymentError",
    "DeploymentRevertedError",
    "AddressUnresolvedError",
    "UnknownContractError",
    "DefectiveArtifactError",
    "ArtifactsNotFoundError",
]
