"""
superstar-deployments: deploy and maintain the super_star lottery contract across cosmos networks
"""

from importlib.metadata import PackageNotFoundError, version

from .exceptions import (
    ArtifactNotFoundError,
    AuthError,
    ConfigurationError,
    DeploymentError,
    EmptyArtifactError,
    InvalidCodeIdError,
    InvalidFeeTokenError,
    InvalidGasPriceError,
    InvalidIntervalError,
    InvalidParameterError,
    LifecycleStateError,
    MissingTargetError,
    TransportError,
    UnknownNetworkError,
)
from .gas import parse_gas_price, resolve_gas_price
from .networks import network_names, resolve_aux_address, resolve_network
from .orchestrator import LifecycleOrchestrator
from .payloads import (
    build_execute_update,
    build_instantiate,
    build_migrate,
    build_update_config,
    build_upload,
)
from .session import SigningSession, Transport, create_session
from .types import (
    DeploymentResult,
    GasSpecification,
    InstantiateParams,
    LifecycleState,
    NetworkProfile,
)

try:
    __version__ = version("superstar-deployments")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "LifecycleOrchestrator",
    "resolve_network",
    "resolve_aux_address",
    "network_names",
    "resolve_gas_price",
    "parse_gas_price",
    "create_session",
    "build_upload",
    "build_instantiate",
    "build_execute_update",
    "build_update_config",
    "build_migrate",
    "NetworkProfile",
    "GasSpecification",
    "InstantiateParams",
    "DeploymentResult",
    "LifecycleState",
    "SigningSession",
    "Transport",
    "DeploymentError",
    "UnknownNetworkError",
    "ConfigurationError",
    "InvalidGasPriceError",
    "InvalidFeeTokenError",
    "InvalidParameterError",
    "AuthError",
    "ArtifactNotFoundError",
    "EmptyArtifactError",
    "InvalidCodeIdError",
    "InvalidIntervalError",
    "MissingTargetError",
    "LifecycleStateError",
    "TransportError",
]
