"""
Lifecycle orchestration for superstar-deployments library.

One LifecycleOrchestrator is one run against one network:

    idle -> resolving -> signing -> uploading -> instantiating -> done
                                 -> instantiating -> done
                                 -> executing -> done
                                 -> migrating -> done

Any state may move to failed. Payloads are built and validated while
resolving, so invalid input never reaches the transport. The run's
DeploymentResult is filled in as stages succeed and is kept on failure.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from .constants import CONTRACT_LABEL
from .exceptions import (
    DeploymentError,
    InvalidFeeTokenError,
    LifecycleStateError,
    TransportError,
)
from .gas import resolve_gas_price
from .log import get_logger
from .networks import resolve_aux_address, resolve_network
from .payloads import (
    DEFAULT_INSTANTIATE_PARAMS,
    build_execute_update,
    build_instantiate,
    build_migrate,
    build_update_config,
    build_upload,
    require_contract_address,
    validate_instantiate_params,
)
from .session import SigningSession, Transport, create_session
from .types import (
    DeploymentResult,
    ExecutePayload,
    InstantiateParams,
    LifecycleState,
    NetworkProfile,
)

logger = get_logger(__name__)

_TRANSITIONS = {
    LifecycleState.IDLE: {LifecycleState.RESOLVING},
    LifecycleState.RESOLVING: {LifecycleState.SIGNING},
    LifecycleState.SIGNING: {
        LifecycleState.UPLOADING,
        LifecycleState.INSTANTIATING,
        LifecycleState.EXECUTING,
        LifecycleState.MIGRATING,
    },
    LifecycleState.UPLOADING: {LifecycleState.INSTANTIATING, LifecycleState.DONE},
    LifecycleState.INSTANTIATING: {LifecycleState.DONE},
    LifecycleState.EXECUTING: {LifecycleState.DONE},
    LifecycleState.MIGRATING: {LifecycleState.DONE},
    LifecycleState.DONE: set(),
    LifecycleState.FAILED: set(),
}

_TERMINAL = (LifecycleState.DONE, LifecycleState.FAILED)


class LifecycleOrchestrator:
    """Runs one deploy or maintenance flow against one network."""

    def __init__(
        self,
        network: str,
        mnemonic: Optional[str],
        transport: Transport,
        gas_price: Optional[Union[str, float]] = None,
        nois_proxy: Optional[str] = None,
        fee_token: Optional[str] = None,
        verify_endpoint: bool = False,
        registry: Optional[Mapping[str, NetworkProfile]] = None,
        session_factory: Callable[..., SigningSession] = create_session,
    ):
        """
        Prepare a run.

        Args:
            network: Registry name of the target network
            mnemonic: Secret phrase of the signer
            transport: Signing/transport collaborator
            gas_price: Gas rate override, checked against the network's band
            nois_proxy: Nois proxy address override
            fee_token: Denom for ticket price and treasury fee
                       (defaults to the network's default fee token)
            verify_endpoint: Probe the RPC endpoint before signing
            registry: Network profiles (defaults to the compiled-in registry)
            session_factory: Opens the signing session
        """
        self.network = network
        self._mnemonic = mnemonic
        self._transport = transport
        self._gas_price = gas_price
        self._nois_proxy = nois_proxy
        self._fee_token = fee_token
        self._verify_endpoint = verify_endpoint
        self._registry = registry
        self._session_factory = session_factory

        self.state = LifecycleState.IDLE
        self.history: List[Tuple[LifecycleState, LifecycleState]] = []
        self.result = DeploymentResult(network=network)
        self.profile: Optional[NetworkProfile] = None
        self.session: Optional[SigningSession] = None
        self._log = logger.bind(network=network)

    # Flows

    def deploy(
        self,
        artifact: bytes,
        params: Optional[InstantiateParams] = None,
        label: str = CONTRACT_LABEL,
        admin: bool = True,
    ) -> DeploymentResult:
        """
        Upload the artifact, then instantiate the code id the upload returned.

        Raises:
            DeploymentError: Validation errors before any submission, or
                TransportError carrying the partial result
        """
        if params is None:
            params = DEFAULT_INSTANTIATE_PARAMS

        def flow() -> None:
            upload_request = build_upload(artifact)
            validate_instantiate_params(params)
            nois_proxy, fee_token = self._instantiate_inputs()

            session = self._open_session()

            self._advance(LifecycleState.UPLOADING)
            uploaded = self._submit(lambda: session.upload(upload_request))
            self.result.code_id = uploaded.code_id
            self.result.tx = uploaded.tx
            self._log.info("Code uploaded", code_id=uploaded.code_id)

            # Built from the code id just returned, never from input
            payload = build_instantiate(
                uploaded.code_id, nois_proxy, fee_token, params=params, label=label, admin=admin
            )
            self._advance(LifecycleState.INSTANTIATING)
            instantiated = self._submit(lambda: session.instantiate(payload))
            self.result.contract_address = instantiated.contract_address
            self.result.tx = instantiated.tx
            self._log.info(
                "Contract instantiated",
                code_id=payload.code_id,
                contract_address=instantiated.contract_address,
            )

        return self._run(flow)

    def upload(self, artifact: bytes) -> DeploymentResult:
        """Upload the artifact only."""

        def flow() -> None:
            upload_request = build_upload(artifact)
            session = self._open_session()

            self._advance(LifecycleState.UPLOADING)
            uploaded = self._submit(lambda: session.upload(upload_request))
            self.result.code_id = uploaded.code_id
            self.result.tx = uploaded.tx
            self._log.info("Code uploaded", code_id=uploaded.code_id)

        return self._run(flow)

    def instantiate(
        self,
        code_id: int,
        params: Optional[InstantiateParams] = None,
        label: str = CONTRACT_LABEL,
        admin: bool = True,
    ) -> DeploymentResult:
        """Instantiate an already uploaded code id."""

        def flow() -> None:
            nois_proxy, fee_token = self._instantiate_inputs()
            payload = build_instantiate(
                code_id, nois_proxy, fee_token, params=params, label=label, admin=admin
            )
            self.result.code_id = payload.code_id
            session = self._open_session()

            self._advance(LifecycleState.INSTANTIATING)
            instantiated = self._submit(lambda: session.instantiate(payload))
            self.result.contract_address = instantiated.contract_address
            self.result.tx = instantiated.tx
            self._log.info(
                "Contract instantiated",
                code_id=payload.code_id,
                contract_address=instantiated.contract_address,
            )

        return self._run(flow)

    def update(self, contract_address: str, interval_seconds: int) -> DeploymentResult:
        """Change the draw interval of a deployed contract."""
        return self._execute(
            lambda: build_execute_update(
                interval_seconds, contract_address=require_contract_address(contract_address)
            )
        )

    def update_config(
        self, contract_address: str, new_config: Mapping[str, Any]
    ) -> DeploymentResult:
        """Change arbitrary config fields of a deployed contract."""
        return self._execute(
            lambda: build_update_config(
                new_config,
                contract_address=require_contract_address(contract_address),
                fee_denoms=self._require_profile().fee_denoms,
            )
        )

    def migrate(
        self,
        contract_address: str,
        code_id: Optional[int],
        params: Optional[Dict[str, Any]] = None,
    ) -> DeploymentResult:
        """Migrate a deployed contract to another code id."""

        def flow() -> None:
            payload = build_migrate(contract_address, code_id, params)
            self.result.contract_address = payload.contract_address
            self.result.code_id = payload.code_id
            session = self._open_session()

            self._log.info(
                "Migrating contract",
                contract_address=payload.contract_address,
                code_id=payload.code_id,
            )
            self._advance(LifecycleState.MIGRATING)
            self.result.tx = self._submit(lambda: session.migrate(payload))
            self._log.info("Contract migrated", tx_hash=_tx_hash(self.result))

        return self._run(flow)

    # Internals

    def _execute(self, build: Callable[[], ExecutePayload]) -> DeploymentResult:
        def flow() -> None:
            payload = build()
            self.result.contract_address = payload.contract_address
            session = self._open_session()

            self._advance(LifecycleState.EXECUTING)
            self.result.tx = self._submit(lambda: session.execute(payload))
            self._log.info(
                "Contract executed",
                action=payload.action,
                contract_address=payload.contract_address,
                tx_hash=_tx_hash(self.result),
            )

        return self._run(flow)

    def _run(self, flow: Callable[[], None]) -> DeploymentResult:
        if self.state is not LifecycleState.IDLE:
            raise LifecycleStateError(
                f"Run on '{self.network}' already {self.state.value}; "
                "create a new orchestrator for another run"
            )

        try:
            self._advance(LifecycleState.RESOLVING)
            self.profile = resolve_network(self.network, self._registry)
            flow()
            self._advance(LifecycleState.DONE)
        except DeploymentError as e:
            self._fail(e)
            raise
        except Exception as e:
            stage = self.state.value
            error = TransportError(
                f"{stage} on '{self.network}' failed: {type(e).__name__}: {e}",
                network=self.network,
                stage=stage,
                result=self.result,
            )
            self._fail(error)
            raise error from e
        finally:
            self.session = None

        return self.result

    def _require_profile(self) -> NetworkProfile:
        if self.profile is None:
            raise LifecycleStateError(
                f"Network '{self.network}' is not resolved; start a flow instead"
            )
        return self.profile

    def _instantiate_inputs(self) -> Tuple[str, str]:
        profile = self._require_profile()
        fee_token = self._fee_token or profile.default_fee_token
        if fee_token not in profile.fee_denoms:
            raise InvalidFeeTokenError(
                f"Denom '{fee_token}' is not a fee token of network '{self.network}' "
                f"(expected one of {list(profile.fee_denoms)})"
            )
        nois_proxy = resolve_aux_address(self.network, override=self._nois_proxy)
        return nois_proxy, fee_token

    def _open_session(self) -> SigningSession:
        profile = self._require_profile()
        gas = resolve_gas_price(profile, self._gas_price)

        self._advance(LifecycleState.SIGNING)
        self.session = self._session_factory(
            self._mnemonic,
            profile,
            self._transport,
            gas=gas,
            verify_endpoint=self._verify_endpoint,
        )
        self._log.info("Signing session opened", address=self.session.address, gas_price=str(gas))
        return self.session

    def _submit(self, call: Callable[[], Any]) -> Any:
        stage = self.state.value
        try:
            return call()
        except DeploymentError:
            raise
        except Exception as e:
            raise TransportError(
                f"{stage} on '{self.network}' failed: {e}",
                network=self.network,
                stage=stage,
                result=self.result,
            ) from e

    def _advance(self, to_state: LifecycleState) -> None:
        if to_state not in _TRANSITIONS[self.state]:
            raise LifecycleStateError(
                f"Illegal transition {self.state.value} -> {to_state.value} on '{self.network}'"
            )
        self._log.debug("State transition", from_state=self.state.value, to_state=to_state.value)
        self.history.append((self.state, to_state))
        self.state = to_state
        self.result.state = to_state

    def _fail(self, error: DeploymentError) -> None:
        if self.state in _TERMINAL:
            return
        self.result.failed_stage = self.state
        self.result.error = str(error)
        self._log.error(
            "Run failed",
            stage=self.state.value,
            code_id=self.result.code_id,
            contract_address=self.result.contract_address,
            error=str(error),
        )
        self.history.append((self.state, LifecycleState.FAILED))
        self.state = LifecycleState.FAILED
        self.result.state = LifecycleState.FAILED


def _tx_hash(result: DeploymentResult) -> Optional[str]:
    return result.tx.transaction_hash if result.tx else None
