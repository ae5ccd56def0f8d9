"""Gas price resolution for superstar-deployments library."""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from .exceptions import InvalidFeeTokenError, InvalidGasPriceError
from .types import GasSpecification, NetworkProfile

# "<decimal><denom>", e.g. "0.025uosmo" or "0.1ibc/27394FB0..."
_GAS_PRICE_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)([a-zA-Z][a-zA-Z0-9/:._-]{2,127})$")


def _as_rate(value: Union[str, int, float, Decimal]) -> Decimal:
    if isinstance(value, bool):
        raise InvalidGasPriceError(f"Gas price must be a number, got {value!r}")
    try:
        # float goes through str() so 0.04 becomes Decimal("0.04")
        rate = Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidGasPriceError(f"Gas price must be a number, got {value!r}") from e
    if not rate.is_finite():
        raise InvalidGasPriceError(f"Gas price must be finite, got {value!r}")
    return rate


def resolve_gas_price(
    profile: NetworkProfile,
    override_rate: Optional[Union[str, int, float, Decimal]] = None,
    override_denom: Optional[str] = None,
) -> GasSpecification:
    """
    Produce the gas specification every transaction of a run is signed with.

    Args:
        profile: Network the transactions go to
        override_rate: Rate to use instead of profile.default_gas_price
        override_denom: Fee token to use instead of profile.default_fee_token

    Returns:
        GasSpecification

    Raises:
        InvalidGasPriceError: If an override rate is negative, not a number, or
            outside [gas_price_step.low, gas_price_step.high]
        InvalidFeeTokenError: If an override denom is not a fee token of the profile
    """
    denom = profile.default_fee_token
    if override_denom is not None:
        if override_denom not in profile.fee_denoms:
            raise InvalidFeeTokenError(
                f"Denom '{override_denom}' is not a fee token of network '{profile.name}' "
                f"(expected one of {list(profile.fee_denoms)})"
            )
        denom = override_denom

    if override_rate is None:
        return GasSpecification(rate=profile.default_gas_price, denom=denom)

    rate = _as_rate(override_rate)
    step = profile.gas_price_step
    if rate < 0 or not step.low <= rate <= step.high:
        raise InvalidGasPriceError(
            f"Gas price {rate} is outside [{step.low}, {step.high}] "
            f"for network '{profile.name}'"
        )
    return GasSpecification(rate=rate, denom=denom)


def parse_gas_price(value: str) -> GasSpecification:
    """
    Parse a gas price string such as "0.025uosmo".

    Args:
        value: Rate immediately followed by a denom

    Returns:
        GasSpecification

    Raises:
        InvalidGasPriceError: If the string is not of that form
    """
    match = _GAS_PRICE_PATTERN.match(value.strip())
    if match is None:
        raise InvalidGasPriceError(
            f"Invalid gas price string {value!r}; expected e.g. '0.025uosmo'"
        )
    return GasSpecification(rate=Decimal(match.group(1)), denom=match.group(2))
