"""Network profile registry for superstar-deployments library."""

from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from .constants import NETWORK_CONFIG, NOIS_PROXY_ADDRESSES
from .exceptions import ConfigurationError, UnknownNetworkError
from .types import FeeToken, GasPriceStep, NetworkProfile


def _to_decimal(value: Any, field_name: str, network: str) -> Decimal:
    try:
        result = Decimal(str(value))
    except InvalidOperation as e:
        raise ConfigurationError(
            f"Network '{network}': {field_name} is not a number: {value!r}"
        ) from e
    if not result.is_finite():
        raise ConfigurationError(f"Network '{network}': {field_name} must be finite")
    return result


def build_profile(name: str, config: Dict[str, Any]) -> NetworkProfile:
    """
    Build and validate a NetworkProfile from a raw configuration entry.

    Args:
        name: Registry key of the network
        config: Raw entry shaped like the values of NETWORK_CONFIG

    Returns:
        Immutable NetworkProfile

    Raises:
        ConfigurationError: If a field is missing or the profile breaks
            low <= average <= high, has a negative gas price, or its default
            fee token is not among its fee tokens
    """
    try:
        step_config = config["gas_price_step"]
        step = GasPriceStep(
            low=_to_decimal(step_config["low"], "gas_price_step.low", name),
            average=_to_decimal(step_config["average"], "gas_price_step.average", name),
            high=_to_decimal(step_config["high"], "gas_price_step.high", name),
        )
        profile = NetworkProfile(
            name=name,
            chain_id=config["chain_id"],
            chain_name=config["chain_name"],
            pretty_name=config["pretty_name"],
            bech32_prefix=config["bech32_prefix"],
            coin_type=int(config["coin_type"]),
            rpc_url=config["rpc_url"],
            rest_url=config["rest_url"],
            default_fee_token=config["default_fee_token"],
            fee_tokens=tuple(
                FeeToken(denom=t["denom"], coin_decimals=int(t["coin_decimals"]))
                for t in config["fee_tokens"]
            ),
            staking_token=config["staking_token"],
            default_gas_price=_to_decimal(config["default_gas_price"], "default_gas_price", name),
            gas_price_step=step,
        )
    except KeyError as e:
        raise ConfigurationError(f"Network '{name}' is missing field {e}") from e

    if step.low < 0:
        raise ConfigurationError(f"Network '{name}': gas prices must be non-negative")
    if not step.low <= step.average <= step.high:
        raise ConfigurationError(
            f"Network '{name}': gas price step must satisfy low <= average <= high "
            f"(got {step.low}, {step.average}, {step.high})"
        )
    if profile.default_fee_token not in profile.fee_denoms:
        raise ConfigurationError(
            f"Network '{name}': default fee token '{profile.default_fee_token}' "
            f"is not one of {list(profile.fee_denoms)}"
        )
    if profile.default_gas_price < 0:
        raise ConfigurationError(f"Network '{name}': default gas price must be non-negative")

    return profile


def load_registry(
    network_config: Optional[Mapping[str, Dict[str, Any]]] = None,
) -> Mapping[str, NetworkProfile]:
    """
    Load network profiles into a read-only mapping.

    Args:
        network_config: Raw profiles (defaults to the compiled-in NETWORK_CONFIG)

    Returns:
        Read-only mapping of network name to NetworkProfile
    """
    if network_config is None:
        network_config = NETWORK_CONFIG
    return MappingProxyType(
        {name: build_profile(name, config) for name, config in network_config.items()}
    )


# Loaded once at import; never mutated afterwards
REGISTRY: Mapping[str, NetworkProfile] = load_registry()


def network_names(registry: Optional[Mapping[str, NetworkProfile]] = None) -> List[str]:
    """Return the registered network names, sorted."""
    if registry is None:
        registry = REGISTRY
    return sorted(registry.keys())


def resolve_network(
    name: Optional[str], registry: Optional[Mapping[str, NetworkProfile]] = None
) -> NetworkProfile:
    """
    Look up a network profile by exact name.

    Args:
        name: Network name (e.g. "juno_testnet")
        registry: Profiles to search (defaults to the compiled-in registry)

    Returns:
        NetworkProfile for the network

    Raises:
        UnknownNetworkError: If the name is not registered
    """
    if registry is None:
        registry = REGISTRY

    if not name or name not in registry:
        raise UnknownNetworkError(
            f"Network '{name}' not found; expected one of {network_names(registry)}"
        )
    return registry[name]


def resolve_aux_address(
    name: str,
    override: Optional[str] = None,
    addresses: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Get the Nois proxy address a lottery on this network talks to.

    Args:
        name: Network name
        override: Address to use instead of the static table (e.g. $NOIS_PROXY)
        addresses: Static table (defaults to NOIS_PROXY_ADDRESSES)

    Returns:
        Proxy contract address

    Raises:
        ConfigurationError: If no address is known for the network
    """
    if override:
        return override

    if addresses is None:
        addresses = NOIS_PROXY_ADDRESSES

    address = addresses.get(name)
    if not address:
        raise ConfigurationError(f"No Nois proxy address configured for network '{name}'")
    return address
