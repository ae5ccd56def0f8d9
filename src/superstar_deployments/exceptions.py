"""Custom exception classes for superstar-deployments library."""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .types import DeploymentResult


class DeploymentError(Exception):
    """Base exception for deployment-related errors."""

    pass


class UnknownNetworkError(DeploymentError, ValueError):
    """Raised when requested network is not in the registry."""

    pass


class ConfigurationError(DeploymentError, ValueError):
    """Raised when static or environment configuration is missing or malformed."""

    pass


class InvalidGasPriceError(DeploymentError, ValueError):
    """Raised when a gas price falls outside the network's gas price band."""

    pass


class InvalidFeeTokenError(DeploymentError, ValueError):
    """Raised when a monetary amount uses a denom the network does not accept."""

    pass


class InvalidParameterError(DeploymentError, ValueError):
    """Raised when instantiate or config parameters are malformed."""

    pass


class AuthError(DeploymentError, PermissionError):
    """Raised when a signing session cannot be opened."""

    pass


class ArtifactNotFoundError(DeploymentError, FileNotFoundError):
    """Raised when the compiled contract artifact is not found."""

    pass


class EmptyArtifactError(DeploymentError, ValueError):
    """Raised when the contract artifact has no bytes."""

    pass


class InvalidCodeIdError(DeploymentError, ValueError):
    """Raised when a code identifier is not a positive integer."""

    pass


class InvalidIntervalError(DeploymentError, ValueError):
    """Raised when a draw interval is not a positive number of seconds."""

    pass


class MissingTargetError(DeploymentError, ValueError):
    """Raised when a maintenance operation has no contract address or code id."""

    pass


class LifecycleStateError(DeploymentError, RuntimeError):
    """Raised on an illegal orchestrator transition or a reused run."""

    pass


class TransportError(DeploymentError, RuntimeError):
    """
    Raised when the signing/transport collaborator fails a submission.

    The collaborator's exception is chained as ``__cause__``. Whatever the run
    captured before failing (e.g. the code id of a successful upload) is kept
    in ``result``.
    """

    def __init__(
        self,
        message: str,
        network: Optional[str] = None,
        stage: Optional[str] = None,
        result: Optional["DeploymentResult"] = None,
    ):
        super().__init__(message)
        self.network = network
        self.stage = stage
        self.result = result
