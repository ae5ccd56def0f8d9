"""
Signing sessions for superstar-deployments library.

Key derivation, signing and broadcasting belong to an external transport
(anything implementing Transport). This module decides how that transport is
parametrized for a network: address prefix, coin type, RPC endpoint and the
resolved gas price.
"""

from dataclasses import dataclass, field
from importlib import import_module
from typing import Any, Dict, Optional, Protocol

import requests

from .constants import ENDPOINT_TIMEOUT
from .exceptions import AuthError, ConfigurationError
from .gas import resolve_gas_price
from .types import (
    ExecutePayload,
    GasSpecification,
    InstantiatePayload,
    InstantiateResult,
    MigratePayload,
    NetworkProfile,
    TxResult,
    UploadRequest,
    UploadResult,
)


@dataclass(frozen=True)
class SigningIdentity:
    """Secret phrase plus the derivation parameters of the target network."""

    mnemonic: str = field(repr=False)
    bech32_prefix: str
    coin_type: int


class Transport(Protocol):
    """
    Signing/transport collaborator.

    connect() returns an opaque session handle exposing the derived signer
    address as ``handle.address``. Every other call may raise any exception;
    the orchestrator wraps it as TransportError.
    """

    def connect(self, rpc_url: str, identity: SigningIdentity, gas: GasSpecification) -> Any:
        ...

    def upload(self, session: Any, wasm_byte_code: bytes) -> UploadResult:
        ...

    def instantiate(
        self,
        session: Any,
        code_id: int,
        msg: Dict[str, Any],
        label: str,
        admin: Optional[str] = None,
    ) -> InstantiateResult:
        ...

    def execute(self, session: Any, contract_address: str, msg: Dict[str, Any]) -> TxResult:
        ...

    def migrate(
        self, session: Any, contract_address: str, code_id: int, msg: Dict[str, Any]
    ) -> TxResult:
        ...


@dataclass
class SigningSession:
    """One authenticated connection to one network, used for a single run."""

    address: str
    profile: NetworkProfile
    gas: GasSpecification
    transport: Transport = field(repr=False)
    handle: Any = field(repr=False)

    def upload(self, request: UploadRequest) -> UploadResult:
        return self.transport.upload(self.handle, request.wasm_byte_code)

    def instantiate(self, payload: InstantiatePayload) -> InstantiateResult:
        return self.transport.instantiate(
            self.handle,
            payload.code_id,
            payload.to_msg(),
            payload.label,
            admin=self.address if payload.admin else None,
        )

    def execute(self, payload: ExecutePayload) -> TxResult:
        return self.transport.execute(self.handle, payload.contract_address, payload.to_msg())

    def migrate(self, payload: MigratePayload) -> TxResult:
        return self.transport.migrate(
            self.handle, payload.contract_address, payload.code_id, payload.to_msg()
        )


def check_endpoint(profile: NetworkProfile, timeout: float = ENDPOINT_TIMEOUT) -> Dict[str, Any]:
    """
    Probe the profile's RPC endpoint before signing anything.

    Args:
        profile: Network whose rpc_url is queried (GET <rpc_url>/status)
        timeout: Request timeout in seconds

    Returns:
        node_info reported by the endpoint

    Raises:
        AuthError: If the endpoint is unreachable, answers with an error, or
            reports a chain id other than profile.chain_id
    """
    url = f"{profile.rpc_url.rstrip('/')}/status"
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise AuthError(f"RPC endpoint {profile.rpc_url} is unreachable: {e}") from e

    if response.status_code != 200:
        raise AuthError(
            f"RPC endpoint {profile.rpc_url} answered with status {response.status_code}"
        )

    try:
        node_info = response.json()["result"]["node_info"]
        network = node_info["network"]
    except (ValueError, KeyError, TypeError) as e:
        raise AuthError(f"RPC endpoint {profile.rpc_url} returned a malformed status") from e

    if network != profile.chain_id:
        raise AuthError(
            f"RPC endpoint {profile.rpc_url} serves chain '{network}', "
            f"expected '{profile.chain_id}'"
        )
    return node_info


def create_session(
    mnemonic: Optional[str],
    profile: NetworkProfile,
    transport: Transport,
    gas: Optional[GasSpecification] = None,
    verify_endpoint: bool = False,
    timeout: float = ENDPOINT_TIMEOUT,
) -> SigningSession:
    """
    Open a signing session bound to a network.

    Args:
        mnemonic: Secret phrase of the signer (never logged)
        profile: Target network
        transport: Signing/transport collaborator
        gas: Gas specification (defaults to resolve_gas_price(profile))
        verify_endpoint: Probe the RPC endpoint with check_endpoint() first
        timeout: Timeout for the endpoint probe, in seconds

    Returns:
        SigningSession

    Raises:
        AuthError: If the phrase is missing or rejected, the endpoint is
            unreachable, or the derived address has the wrong prefix
    """
    if not mnemonic or not mnemonic.strip():
        raise AuthError("Secret phrase is empty")

    if gas is None:
        gas = resolve_gas_price(profile)

    if verify_endpoint:
        check_endpoint(profile, timeout=timeout)

    identity = SigningIdentity(
        mnemonic=mnemonic.strip(),
        bech32_prefix=profile.bech32_prefix,
        coin_type=profile.coin_type,
    )
    try:
        handle = transport.connect(profile.rpc_url, identity, gas)
    except Exception as e:
        # Message of the collaborator is not included, it may echo the phrase
        raise AuthError(
            f"Could not open a signing session on {profile.name} ({profile.rpc_url}): "
            f"{type(e).__name__}"
        ) from e

    address = getattr(handle, "address", None)
    if not address or not str(address).startswith(f"{profile.bech32_prefix}1"):
        raise AuthError(
            f"Signer address {address!r} does not carry prefix '{profile.bech32_prefix}'"
        )

    return SigningSession(
        address=str(address), profile=profile, gas=gas, transport=transport, handle=handle
    )


def load_transport(path: str) -> Transport:
    """
    Instantiate a transport from a "package.module:factory" path.

    Raises:
        ConfigurationError: If the path is malformed, cannot be imported or
                            the factory fails
    """
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationError(
            f"Transport must be given as 'package.module:factory', got {path!r}"
        )

    try:
        module = import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import transport module '{module_name}': {e}") from e

    factory = getattr(module, attr, None)
    if factory is None or not callable(factory):
        raise ConfigurationError(f"'{attr}' in '{module_name}' is not a callable factory")

    try:
        return factory()
    except Exception as e:
        raise ConfigurationError(
            f"Transport factory '{path}' failed: {type(e).__name__}: {e}"
        ) from e
