"""Shared pytest fixtures for superstar-deployments tests."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest
import structlog

from superstar_deployments.networks import resolve_network
from superstar_deployments.types import (
    InstantiateResult,
    NetworkProfile,
    TxResult,
    UploadResult,
)

MNEMONIC = (
    "abandon abandon abandon abandon abandon abandon "
    "abandon abandon abandon abandon abandon about"
)

# First bytes of every wasm module: "\0asm" followed by version 1
WASM_HEADER = bytes([0x00, 0x61, 0x73, 0x6D, 0x01, 0x00, 0x00, 0x00])


@dataclass
class StubHandle:
    """Session handle returned by RecordingTransport.connect()."""

    address: str
    rpc_url: str


class RecordingTransport:
    """
    Transport stand-in that records every call.

    fail_on names the operation ("connect", "upload", "instantiate", "execute",
    "migrate") that raises instead of answering.
    """

    def __init__(
        self,
        code_id: int = 42,
        contract_address: str = "juno14hj2tavq8fpesdwxxcu44rty3hh90vhujrvcmstl4zr3txmfvw9skjuwg8",
        fail_on: Optional[str] = None,
        address: Optional[str] = None,
    ):
        self.code_id = code_id
        self.contract_address = contract_address
        self.fail_on = fail_on
        self.address = address
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    def _maybe_fail(self, operation: str) -> None:
        if self.fail_on == operation:
            raise RuntimeError(f"{operation} rejected: out of gas")

    @property
    def operations(self) -> List[str]:
        return [name for name, _ in self.calls]

    def connect(self, rpc_url, identity, gas):
        self.calls.append(("connect", {"rpc_url": rpc_url, "identity": identity, "gas": gas}))
        self._maybe_fail("connect")
        address = self.address or f"{identity.bech32_prefix}1qypqxpq9qcrsszg2pvxq6rs0zqg3yyc5lzv7xu"
        return StubHandle(address=address, rpc_url=rpc_url)

    def upload(self, session, wasm_byte_code):
        self.calls.append(("upload", {"session": session, "wasm_byte_code": wasm_byte_code}))
        self._maybe_fail("upload")
        return UploadResult(code_id=self.code_id, tx=TxResult(transaction_hash="UPLOADTX", height=100))

    def instantiate(self, session, code_id, msg, label, admin=None):
        self.calls.append(
            (
                "instantiate",
                {"session": session, "code_id": code_id, "msg": msg, "label": label, "admin": admin},
            )
        )
        self._maybe_fail("instantiate")
        return InstantiateResult(
            contract_address=self.contract_address,
            tx=TxResult(transaction_hash="INSTANTIATETX", height=101),
        )

    def execute(self, session, contract_address, msg):
        self.calls.append(
            ("execute", {"session": session, "contract_address": contract_address, "msg": msg})
        )
        self._maybe_fail("execute")
        return TxResult(transaction_hash="EXECUTETX", height=102, gas_used=120000)

    def migrate(self, session, contract_address, code_id, msg):
        self.calls.append(
            (
                "migrate",
                {
                    "session": session,
                    "contract_address": contract_address,
                    "code_id": code_id,
                    "msg": msg,
                },
            )
        )
        self._maybe_fail("migrate")
        return TxResult(transaction_hash="MIGRATETX", height=103)


@pytest.fixture
def mnemonic() -> str:
    """Return a well-known test mnemonic."""
    return MNEMONIC


@pytest.fixture
def wasm_bytes() -> bytes:
    """Return a minimal wasm-looking artifact."""
    return WASM_HEADER


@pytest.fixture
def juno_profile() -> NetworkProfile:
    return resolve_network("juno_testnet")


@pytest.fixture
def osmosis_profile() -> NetworkProfile:
    return resolve_network("osmosis_testnet")


@pytest.fixture
def transport() -> RecordingTransport:
    """Return a transport that succeeds and uploads as code id 42."""
    return RecordingTransport()


@pytest.fixture
def artifact_file(tmp_path: Path, wasm_bytes: bytes) -> Path:
    """Write the wasm artifact to a temporary file."""
    path = tmp_path / "artifacts" / "super_star.wasm"
    path.parent.mkdir(parents=True)
    path.write_bytes(wasm_bytes)
    return path


@pytest.fixture
def transport_factory():
    """Return the RecordingTransport class for tests that need custom behaviour."""
    return RecordingTransport


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo logging setup done by the command line between tests."""
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    root.setLevel(logging.WARNING)
