"""
Command line for deploying and maintaining the super_star lottery contract.

Settings come from the environment (optionally a .env file): MNEMONIC, CHAIN,
CODE_ID, CONTRACT_ADDR, GAS_PRICE, NOIS_PROXY, ARTIFACT_PATH and
SUPERSTAR_TRANSPORT. Flags override them.
"""

import argparse
import sys
from typing import List, Mapping, Optional

from dotenv import load_dotenv

from .artifacts import read_artifact
from .config import Settings, load_settings
from .constants import DEFAULT_UPDATE_INTERVAL_SECONDS
from .exceptions import (
    ConfigurationError,
    DeploymentError,
    InvalidCodeIdError,
    TransportError,
)
from .log import configure_logging, get_logger
from .networks import REGISTRY, network_names
from .orchestrator import LifecycleOrchestrator
from .payloads import parse_code_id
from .session import Transport, load_transport
from .types import DeploymentResult

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="superstar-deploy", description=__doc__)
    parser.add_argument("--network", help="Network name (overrides $CHAIN)")
    parser.add_argument("--gas-price", help="Gas price override (overrides $GAS_PRICE)")
    parser.add_argument("--nois-proxy", help="Nois proxy address (overrides $NOIS_PROXY)")
    parser.add_argument(
        "--transport",
        help="Signing transport as 'package.module:factory' (overrides $SUPERSTAR_TRANSPORT)",
    )
    parser.add_argument(
        "--check-endpoint",
        action="store_true",
        help="Verify the RPC endpoint serves the expected chain before signing",
    )
    parser.add_argument("--log-level", help="Logging level (overrides $LOG_LEVEL)")
    parser.add_argument("--log-json", action="store_true", help="Emit JSON log lines")

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("networks", help="List registered networks")

    upload = commands.add_parser("upload", help="Upload the contract artifact")
    upload.add_argument("--artifact", help="Path to the compiled wasm (overrides $ARTIFACT_PATH)")

    instantiate = commands.add_parser("instantiate", help="Instantiate an uploaded code id")
    instantiate.add_argument("--code-id", help="Code id (overrides $CODE_ID)")
    instantiate.add_argument("--no-admin", action="store_true", help="Instantiate without admin")

    deploy = commands.add_parser("deploy", help="Upload, then instantiate the new code id")
    deploy.add_argument("--artifact", help="Path to the compiled wasm (overrides $ARTIFACT_PATH)")
    deploy.add_argument("--no-admin", action="store_true", help="Instantiate without admin")

    update = commands.add_parser("update", help="Change the draw interval of a contract")
    update.add_argument("--contract", help="Contract address (overrides $CONTRACT_ADDR)")
    update.add_argument(
        "--interval",
        type=int,
        default=DEFAULT_UPDATE_INTERVAL_SECONDS,
        help="New draw interval in seconds (default: %(default)s)",
    )

    migrate = commands.add_parser("migrate", help="Migrate a contract to another code id")
    migrate.add_argument("--contract", help="Contract address (overrides $CONTRACT_ADDR)")
    migrate.add_argument("--code-id", help="Code id to migrate to (overrides $CODE_ID)")

    return parser


def _print_networks() -> None:
    for name in network_names():
        profile = REGISTRY[name]
        print(
            f"{name}\t{profile.chain_id}\t{profile.pretty_name}\t"
            f"{profile.default_gas_price}{profile.default_fee_token}\t{profile.rpc_url}"
        )


def _print_result(result: DeploymentResult) -> None:
    if result.code_id is not None:
        print(f"Code ID: {result.code_id}")
    if result.contract_address is not None:
        print(f"Contract Address: {result.contract_address}")
    if result.tx is not None:
        print(f"Transaction: {result.tx.transaction_hash}")


def _resolve_transport(args: argparse.Namespace, settings: Settings) -> Transport:
    path = args.transport or settings.transport
    if not path:
        raise ConfigurationError(
            "No signing transport configured; pass --transport or set $SUPERSTAR_TRANSPORT"
        )
    return load_transport(path)


def run_command(
    args: argparse.Namespace, settings: Settings, transport: Optional[Transport] = None
) -> DeploymentResult:
    """
    Run one submitting command.

    Raises:
        DeploymentError: On any validation, session or transport failure
    """
    if transport is None:
        transport = _resolve_transport(args, settings)

    orchestrator = LifecycleOrchestrator(
        network=args.network or settings.network,
        mnemonic=settings.mnemonic,
        transport=transport,
        gas_price=args.gas_price or settings.gas_price,
        nois_proxy=args.nois_proxy or settings.nois_proxy,
        verify_endpoint=args.check_endpoint,
    )

    if args.command in ("upload", "deploy"):
        artifact = read_artifact(args.artifact or settings.artifact_path)
        if args.command == "upload":
            return orchestrator.upload(artifact)
        return orchestrator.deploy(artifact, admin=not args.no_admin)

    if args.command == "instantiate":
        raw_code_id = args.code_id or settings.code_id
        if raw_code_id is None:
            raise InvalidCodeIdError("Code id is required; pass --code-id or set $CODE_ID")
        return orchestrator.instantiate(parse_code_id(raw_code_id), admin=not args.no_admin)

    contract = args.contract or settings.contract_address
    if args.command == "update":
        return orchestrator.update(contract, args.interval)

    raw_code_id = args.code_id or settings.code_id
    code_id = parse_code_id(raw_code_id) if raw_code_id is not None else None
    return orchestrator.migrate(contract, code_id)


def main(
    argv: Optional[List[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
    transport: Optional[Transport] = None,
) -> int:
    args = build_parser().parse_args(argv)

    if environ is None:
        load_dotenv()
    settings = load_settings(environ)

    format_json = args.log_json or settings.log_json
    try:
        configure_logging(level=args.log_level or settings.log_level, format_json=format_json)
    except ConfigurationError as e:
        configure_logging(format_json=format_json)
        logger.error("Command failed", command=args.command, error=str(e))
        return 1

    if args.command == "networks":
        _print_networks()
        return 0

    network = args.network or settings.network
    try:
        result = run_command(args, settings, transport=transport)
    except TransportError as e:
        partial = e.result
        logger.error(
            "Command failed",
            command=args.command,
            network=network,
            stage=e.stage,
            code_id=partial.code_id if partial else None,
            contract_address=partial.contract_address if partial else None,
            error=str(e),
        )
        if partial is not None:
            _print_result(partial)
        return 1
    except DeploymentError as e:
        logger.error(
            "Command failed",
            command=args.command,
            network=network,
            error_type=type(e).__name__,
            error=str(e),
        )
        return 1

    logger.info(
        "Command finished",
        command=args.command,
        network=network,
        code_id=result.code_id,
        contract_address=result.contract_address,
    )
    _print_result(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
