"""Data types and dataclasses for superstar-deployments library."""

from copy import deepcopy
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .exceptions import InvalidParameterError


class LifecycleStage(str, Enum):
    """Ledger operations the orchestrator can submit."""

    UPLOAD = "upload"
    INSTANTIATE = "instantiate"
    EXECUTE = "execute"
    MIGRATE = "migrate"


class LifecycleState(str, Enum):
    """Orchestrator run states."""

    IDLE = "idle"
    RESOLVING = "resolving"
    SIGNING = "signing"
    UPLOADING = "uploading"
    INSTANTIATING = "instantiating"
    EXECUTING = "executing"
    MIGRATING = "migrating"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class FeeToken:
    """A denom accepted for fees, with its decimal precision."""

    denom: str
    coin_decimals: int


@dataclass(frozen=True)
class GasPriceStep:
    """Gas price bounds of a network."""

    low: Decimal
    average: Decimal
    high: Decimal


@dataclass(frozen=True)
class NetworkProfile:
    """Connection and fee parameters of one target network."""

    name: str  # Registry key, e.g. "juno_testnet"
    chain_id: str  # e.g. "uni-5"
    chain_name: str
    pretty_name: str
    bech32_prefix: str
    coin_type: int
    rpc_url: str
    rest_url: str
    default_fee_token: str
    fee_tokens: Tuple[FeeToken, ...]
    staking_token: str
    default_gas_price: Decimal
    gas_price_step: GasPriceStep

    @property
    def fee_denoms(self) -> Tuple[str, ...]:
        return tuple(token.denom for token in self.fee_tokens)


@dataclass(frozen=True)
class GasSpecification:
    """Gas rate paired with the denom fees are paid in."""

    rate: Decimal
    denom: str

    def __str__(self) -> str:
        # Same "<rate><denom>" form cosmos signing clients parse, e.g. "0.025uosmo"
        return f"{self.rate}{self.denom}"


@dataclass(frozen=True)
class Coin:
    """Amount of a token in its smallest unit."""

    denom: str
    amount: int

    def __post_init__(self) -> None:
        if not self.denom:
            raise InvalidParameterError("Coin denom must not be empty")
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise InvalidParameterError(
                f"Coin amount must be an integer in the smallest unit, got {self.amount!r}"
            )
        if self.amount < 0:
            raise InvalidParameterError(f"Coin amount must be non-negative, got {self.amount}")

    def to_msg(self) -> Dict[str, str]:
        return {"denom": self.denom, "amount": str(self.amount)}


@dataclass(frozen=True)
class InstantiateParams:
    """Business parameters of a freshly instantiated lottery."""

    interval_seconds: int
    max_tickets_per_user: int
    percentage_per_match: Tuple[int, ...]
    ticket_price: int  # Smallest unit of the fee token
    treasury_fee: int


@dataclass(frozen=True)
class UploadRequest:
    """Store-code operation carrying the compiled artifact."""

    wasm_byte_code: bytes


@dataclass(frozen=True)
class InstantiatePayload:
    """Instantiate operation for an uploaded code id."""

    code_id: int
    interval_seconds: int
    max_tickets_per_user: int
    percentage_per_match: Tuple[int, ...]
    nois_proxy: str
    ticket_price: Coin
    treasury_fee: Coin
    label: str
    admin: bool = True  # Signer becomes contract admin, which migrate requires

    def to_msg(self) -> Dict[str, Any]:
        """Render the contract's instantiate message."""
        return {
            "lottery_interval": {"time": self.interval_seconds},
            "max_tickets_per_user": self.max_tickets_per_user,
            "nois_proxy": self.nois_proxy,
            "percentage_per_match": list(self.percentage_per_match),
            "ticket_price": self.ticket_price.to_msg(),
            "treasury_fee": self.treasury_fee.to_msg(),
        }


@dataclass(frozen=True)
class ExecutePayload:
    """Execute operation: one action variant and its parameters."""

    contract_address: str
    action: str  # e.g. "update_config"
    params: Dict[str, Any] = field(default_factory=dict)

    def to_msg(self) -> Dict[str, Any]:
        return {self.action: deepcopy(self.params)}


@dataclass(frozen=True)
class MigratePayload:
    """Migrate operation moving a contract to a new code id."""

    contract_address: str
    code_id: int
    params: Dict[str, Any] = field(default_factory=dict)

    def to_msg(self) -> Dict[str, Any]:
        return deepcopy(self.params)


@dataclass(frozen=True)
class TxResult:
    """Outcome of a confirmed transaction as reported by the transport."""

    transaction_hash: str
    height: Optional[int] = None
    gas_wanted: Optional[int] = None
    gas_used: Optional[int] = None


@dataclass(frozen=True)
class UploadResult:
    """Transport response to an upload."""

    code_id: int
    tx: Optional[TxResult] = None


@dataclass(frozen=True)
class InstantiateResult:
    """Transport response to an instantiate."""

    contract_address: str
    tx: Optional[TxResult] = None


@dataclass
class DeploymentResult:
    """
    What a lifecycle run produced.

    Filled in stage by stage, so after a failure it still holds everything
    obtained before the failing stage (e.g. the code id of an upload that
    preceded a failed instantiate).
    """

    network: str
    state: LifecycleState = LifecycleState.IDLE
    code_id: Optional[int] = None
    contract_address: Optional[str] = None
    tx: Optional[TxResult] = None
    failed_stage: Optional[LifecycleState] = None
    error: Optional[str] = None
