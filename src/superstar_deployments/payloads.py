"""
Lifecycle payload builders for superstar-deployments library.

Builders only construct and validate payloads. They never submit anything and
hold no hidden state, so identical inputs give equal payloads.
"""

import re
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Union

from .constants import (
    CONTRACT_LABEL,
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_MAX_TICKETS_PER_USER,
    DEFAULT_PERCENTAGE_PER_MATCH,
    DEFAULT_TICKET_PRICE,
    DEFAULT_TREASURY_FEE,
    MATCH_TIERS,
    UPDATE_CONFIG_FIELDS,
)
from .exceptions import (
    ConfigurationError,
    EmptyArtifactError,
    InvalidCodeIdError,
    InvalidFeeTokenError,
    InvalidIntervalError,
    InvalidParameterError,
    MissingTargetError,
)
from .types import (
    Coin,
    ExecutePayload,
    InstantiateParams,
    InstantiatePayload,
    MigratePayload,
    UploadRequest,
)

_AMOUNT_PATTERN = re.compile(r"^-?[0-9]+$")

DEFAULT_INSTANTIATE_PARAMS = InstantiateParams(
    interval_seconds=DEFAULT_INTERVAL_SECONDS,
    max_tickets_per_user=DEFAULT_MAX_TICKETS_PER_USER,
    percentage_per_match=DEFAULT_PERCENTAGE_PER_MATCH,
    ticket_price=DEFAULT_TICKET_PRICE,
    treasury_fee=DEFAULT_TREASURY_FEE,
)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def parse_code_id(value: Union[str, int]) -> int:
    """
    Convert a code id from the environment or command line to an int.

    Raises:
        InvalidCodeIdError: If the value is not a positive integer
    """
    if _is_int(value):
        code_id = value
    else:
        try:
            code_id = int(str(value).strip())
        except ValueError as e:
            raise InvalidCodeIdError(f"Code id must be a positive integer, got {value!r}") from e
    _check_code_id(code_id)
    return code_id


def _check_code_id(code_id: Any) -> None:
    if not _is_int(code_id) or code_id <= 0:
        raise InvalidCodeIdError(f"Code id must be a positive integer, got {code_id!r}")


def _check_interval(seconds: Any) -> None:
    if not _is_int(seconds) or seconds <= 0:
        raise InvalidIntervalError(
            f"Interval must be a positive number of seconds, got {seconds!r}"
        )


def _check_max_tickets(value: Any) -> None:
    if not _is_int(value) or value <= 0:
        raise InvalidParameterError(
            f"max_tickets_per_user must be a positive integer, got {value!r}"
        )


def _check_tiers(tiers: Any) -> None:
    if isinstance(tiers, (str, bytes)) or not isinstance(tiers, Sequence):
        raise InvalidParameterError(f"percentage_per_match must be a list, got {tiers!r}")
    if len(tiers) != MATCH_TIERS:
        raise InvalidParameterError(
            f"percentage_per_match needs {MATCH_TIERS} tiers, got {len(tiers)}"
        )
    if any(not _is_int(p) or not 0 <= p <= 100 for p in tiers):
        raise InvalidParameterError(
            f"percentage_per_match entries must be integers in [0, 100], got {list(tiers)}"
        )
    if sum(tiers) > 100:
        raise InvalidParameterError(
            f"percentage_per_match must not exceed 100 in total, got {sum(tiers)}"
        )


def validate_instantiate_params(params: InstantiateParams) -> None:
    """
    Check lottery parameters before anything is submitted.

    Raises:
        InvalidIntervalError: If interval_seconds is not positive
        InvalidParameterError: If caps or match tiers are malformed
    """
    _check_interval(params.interval_seconds)
    _check_max_tickets(params.max_tickets_per_user)
    _check_tiers(params.percentage_per_match)


def parse_coin(field: str, value: Any, fee_denoms: Optional[Iterable[str]] = None) -> Coin:
    """
    Parse a coin in message form ({"denom": ..., "amount": "..."}).

    Args:
        field: Config field name, for error messages
        value: Coin mapping; amount may be an int or a decimal string
        fee_denoms: Denoms the network accepts, checked when given

    Raises:
        InvalidParameterError: If the mapping is malformed or the amount is
                               not a non-negative integer
        InvalidFeeTokenError: If the denom is not one of fee_denoms
    """
    if not isinstance(value, Mapping) or set(value) != {"denom", "amount"}:
        raise InvalidParameterError(
            f"{field} must be a coin with 'denom' and 'amount', got {value!r}"
        )

    amount = value["amount"]
    if isinstance(amount, str) and _AMOUNT_PATTERN.match(amount.strip()):
        amount = int(amount.strip())
    coin = Coin(denom=value["denom"], amount=amount)

    if fee_denoms is not None:
        denoms = list(fee_denoms)
        if coin.denom not in denoms:
            raise InvalidFeeTokenError(
                f"{field} denom '{coin.denom}' is not a fee token (expected one of {denoms})"
            )
    return coin


def _check_duration(field: str, value: Any) -> None:
    if not isinstance(value, Mapping) or len(value) != 1 or not set(value) <= {"time", "height"}:
        raise InvalidParameterError(
            f"{field} must be {{'time': seconds}} or {{'height': blocks}}, got {value!r}"
        )
    if "time" in value:
        _check_interval(value["time"])
    elif not _is_int(value["height"]) or value["height"] <= 0:
        raise InvalidParameterError(
            f"{field} height must be a positive integer, got {value['height']!r}"
        )


def _check_address(field: str, value: Any) -> None:
    if not isinstance(value, str) or not value.strip():
        raise InvalidParameterError(f"{field} must be a non-empty address, got {value!r}")


def _normalize_config(
    new_config: Mapping[str, Any], fee_denoms: Optional[Iterable[str]]
) -> Dict[str, Any]:
    normalized: Dict[str, Any] = {}
    for field, value in new_config.items():
        if field in ("ticket_price", "treasury_fee"):
            value = parse_coin(field, value, fee_denoms).to_msg()
        elif field == "interval":
            if not isinstance(value, Mapping) or set(value) != {"time"}:
                raise InvalidIntervalError(f"interval must be {{'time': seconds}}, got {value!r}")
            _check_interval(value["time"])
        elif field == "request_timeout":
            _check_duration(field, value)
        elif field == "max_tickets_per_user":
            _check_max_tickets(value)
        elif field == "percentage_per_match":
            _check_tiers(value)
            value = list(value)
        elif field in ("owner", "nois_proxy"):
            _check_address(field, value)
            value = value.strip()
        normalized[field] = value
    return normalized


def build_upload(artifact_bytes: Union[bytes, bytearray, Iterable[int]]) -> UploadRequest:
    """
    Wrap the compiled contract for a store-code operation.

    Args:
        artifact_bytes: Compiled wasm, as bytes or a sequence of byte values

    Returns:
        UploadRequest holding exactly the input bytes

    Raises:
        EmptyArtifactError: If there are no bytes
    """
    data = bytes(artifact_bytes)
    if not data:
        raise EmptyArtifactError("Contract artifact is empty")
    return UploadRequest(wasm_byte_code=data)


def build_instantiate(
    code_id: int,
    nois_proxy: str,
    fee_token: str,
    params: Optional[InstantiateParams] = None,
    label: str = CONTRACT_LABEL,
    admin: bool = True,
) -> InstantiatePayload:
    """
    Build the instantiate operation for a freshly uploaded lottery.

    Ticket price and treasury fee are both denominated in fee_token.

    Args:
        code_id: Code id returned by the upload
        nois_proxy: Address of the Nois randomness proxy on the network
        fee_token: Denom the lottery charges in
        params: Business parameters (defaults to DEFAULT_INSTANTIATE_PARAMS)
        label: Human readable contract label
        admin: Whether the signer becomes contract admin

    Returns:
        InstantiatePayload

    Raises:
        InvalidCodeIdError: If code_id is not a positive integer
        InvalidIntervalError: If params.interval_seconds is not positive
        InvalidParameterError: If other params are malformed
        ConfigurationError: If nois_proxy is empty
        InvalidFeeTokenError: If fee_token is empty
    """
    _check_code_id(code_id)

    if params is None:
        params = DEFAULT_INSTANTIATE_PARAMS
    validate_instantiate_params(params)

    if not nois_proxy:
        raise ConfigurationError("Nois proxy address is required to instantiate")
    if not fee_token:
        raise InvalidFeeTokenError("Fee token denom is required to instantiate")

    return InstantiatePayload(
        code_id=code_id,
        interval_seconds=params.interval_seconds,
        max_tickets_per_user=params.max_tickets_per_user,
        percentage_per_match=tuple(params.percentage_per_match),
        nois_proxy=nois_proxy,
        ticket_price=Coin(denom=fee_token, amount=params.ticket_price),
        treasury_fee=Coin(denom=fee_token, amount=params.treasury_fee),
        label=label,
        admin=admin,
    )


def build_update_config(
    new_config: Mapping[str, Any],
    contract_address: str = "",
    fee_denoms: Optional[Iterable[str]] = None,
) -> ExecutePayload:
    """
    Build an update_config execute operation.

    Every field is checked the way instantiate checks it. Coin amounts are
    rendered as strings in the message.

    Args:
        new_config: Config fields to change, in message form
        contract_address: Target contract
        fee_denoms: Denoms allowed for ticket_price and treasury_fee

    Returns:
        ExecutePayload for the update_config action

    Raises:
        InvalidParameterError: If new_config is empty, names unknown fields
                               or holds a malformed value
        InvalidIntervalError: If interval is not a positive number of seconds
        InvalidFeeTokenError: If a coin denom is not one of fee_denoms
    """
    if not new_config:
        raise InvalidParameterError("update_config needs at least one field to change")

    unknown = sorted(set(new_config) - set(UPDATE_CONFIG_FIELDS))
    if unknown:
        raise InvalidParameterError(
            f"Unknown config fields {unknown}; expected some of {list(UPDATE_CONFIG_FIELDS)}"
        )

    return ExecutePayload(
        contract_address=contract_address,
        action="update_config",
        params={"new_config": _normalize_config(new_config, fee_denoms)},
    )


def build_execute_update(new_interval_seconds: int, contract_address: str = "") -> ExecutePayload:
    """
    Build the config update that changes the draw interval.

    Raises:
        InvalidIntervalError: If the interval is not a positive number of seconds
    """
    _check_interval(new_interval_seconds)
    return build_update_config(
        {"interval": {"time": new_interval_seconds}}, contract_address=contract_address
    )


def build_migrate(
    contract_address: Optional[str],
    code_id: Optional[int],
    params: Optional[Mapping[str, Any]] = None,
) -> MigratePayload:
    """
    Build a migrate operation.

    Args:
        contract_address: Contract to migrate
        code_id: Code id to migrate to
        params: Migrate message (defaults to empty)

    Returns:
        MigratePayload

    Raises:
        MissingTargetError: If contract_address or code_id is missing
        InvalidCodeIdError: If code_id is present but not a positive integer
    """
    if not contract_address or not contract_address.strip():
        raise MissingTargetError("Contract address is required to migrate")
    if code_id is None or code_id == "":
        raise MissingTargetError("Code id is required to migrate")
    _check_code_id(code_id)

    return MigratePayload(
        contract_address=contract_address.strip(),
        code_id=code_id,
        params=dict(params or {}),
    )


def require_contract_address(contract_address: Optional[str]) -> str:
    """
    Return the stripped contract address.

    Raises:
        MissingTargetError: If it is missing or blank
    """
    if not contract_address or not contract_address.strip():
        raise MissingTargetError("Contract address is required")
    return contract_address.strip()
