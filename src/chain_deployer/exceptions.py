"""Custom exception classes for chain-deployer library."""


class DeploymentError(Exception):
    """Base exception for deployment-related errors."""

    pass


class SubmissionFailedError(DeploymentError, RuntimeError):
    """Raised when the chain client rejects a contract-creation request."""

    pass


class UnconfirmedDeploymentError(DeploymentError, TimeoutError):
    """Raised when confirmation is required but no strategy confirmed the deployment."""

    pass


class DeploymentRevertedError(DeploymentError, RuntimeError):
    """Raised when the creation transaction was mined but reverted."""

    pass


class AddressUnresolvedError(DeploymentError, LookupError):
    """Raised when no resolution strategy yields a contract address."""

    pass


class UnknownContractError(DeploymentError, ValueError):
    """Raised when requested contract has no compiled artifact."""

    pass


class DefectiveArtifactError(DeploymentError, ValueError):
    """Raised when a contract artifact has no deployable bytecode."""

    pass


class ArtifactsNotFoundError(DeploymentError, FileNotFoundError):
    """Raised when the artifacts directory is not found."""

    pass
