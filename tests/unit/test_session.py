"""Unit tests for signing session creation."""

from dataclasses import replace
from decimal import Decimal

import pytest
import requests
import responses

from superstar_deployments.exceptions import AuthError, ConfigurationError
from superstar_deployments.gas import resolve_gas_price
from superstar_deployments.payloads import build_instantiate, build_migrate, build_upload
from superstar_deployments.session import (
    SigningIdentity,
    check_endpoint,
    create_session,
    load_transport,
)
from superstar_deployments.types import NetworkProfile

STATUS_URL = "https://rpc.test.example.com/status"


@pytest.fixture
def local_profile(juno_profile: NetworkProfile) -> NetworkProfile:
    """Juno testnet profile pointing at a mocked RPC endpoint."""
    return replace(juno_profile, rpc_url="https://rpc.test.example.com")


def _status(network: str) -> dict:
    return {
        "jsonrpc": "2.0",
        "id": -1,
        "result": {"node_info": {"network": network, "version": "0.34.21"}},
    }


class TestCreateSession:
    """Test the create_session function."""

    def test_binds_prefix_endpoint_and_gas(self, juno_profile: NetworkProfile, mnemonic, transport):
        session = create_session(mnemonic, juno_profile, transport)

        assert transport.operations == ["connect"]
        connect = transport.calls[0][1]
        assert connect["rpc_url"] == juno_profile.rpc_url
        assert connect["identity"].bech32_prefix == "juno"
        assert connect["identity"].coin_type == 118
        assert str(connect["gas"]) == "0.04ujunox"
        assert session.address.startswith("juno1")
        assert session.profile is juno_profile

    def test_uses_given_gas(self, osmosis_profile: NetworkProfile, mnemonic, transport):
        gas = resolve_gas_price(osmosis_profile, "0.03")
        session = create_session(mnemonic, osmosis_profile, transport, gas=gas)

        assert session.gas.rate == Decimal("0.03")
        assert transport.calls[0][1]["gas"] is gas

    @pytest.mark.parametrize("phrase", ["", "   ", None])
    def test_empty_phrase_rejected_before_connecting(self, juno_profile, transport, phrase):
        with pytest.raises(AuthError):
            create_session(phrase, juno_profile, transport)
        assert transport.calls == []

    def test_connect_failure_becomes_auth_error(self, juno_profile, mnemonic, transport_factory):
        transport = transport_factory(fail_on="connect")

        with pytest.raises(AuthError) as excinfo:
            create_session(mnemonic, juno_profile, transport)

        assert isinstance(excinfo.value.__cause__, RuntimeError)
        assert mnemonic not in str(excinfo.value)

    def test_address_with_wrong_prefix_rejected(self, juno_profile, mnemonic, transport_factory):
        transport = transport_factory(address="osmo1qypqxpq9qcrsszg2pvxq6rs0zqg3yyc5lzv7xu")

        with pytest.raises(AuthError, match="prefix"):
            create_session(mnemonic, juno_profile, transport)

    def test_identity_repr_hides_phrase(self, mnemonic):
        identity = SigningIdentity(mnemonic=mnemonic, bech32_prefix="juno", coin_type=118)
        assert mnemonic not in repr(identity)

    def test_session_translates_payloads(self, juno_profile, mnemonic, transport, wasm_bytes):
        session = create_session(mnemonic, juno_profile, transport)

        session.upload(build_upload(wasm_bytes))
        session.instantiate(build_instantiate(42, "juno1proxy", "ujunox"))
        session.instantiate(build_instantiate(42, "juno1proxy", "ujunox", admin=False))
        session.migrate(build_migrate("juno1contract", 43))

        _, upload = transport.calls[1]
        _, instantiate = transport.calls[2]
        _, no_admin = transport.calls[3]
        _, migrate = transport.calls[4]
        assert upload["wasm_byte_code"] == wasm_bytes
        assert instantiate["code_id"] == 42
        assert instantiate["label"] == "super_star.v1"
        assert instantiate["admin"] == session.address
        assert no_admin["admin"] is None
        assert migrate["msg"] == {}
        assert migrate["code_id"] == 43

    @responses.activate
    def test_verify_endpoint_runs_before_connect(self, local_profile, mnemonic, transport):
        responses.add(responses.GET, STATUS_URL, json=_status("uni-6"), status=200)

        with pytest.raises(AuthError, match="uni-6"):
            create_session(mnemonic, local_profile, transport, verify_endpoint=True)
        assert transport.calls == []


class TestCheckEndpoint:
    """Test the check_endpoint function."""

    @responses.activate
    def test_matching_chain(self, local_profile: NetworkProfile):
        responses.add(responses.GET, STATUS_URL, json=_status("uni-5"), status=200)

        node_info = check_endpoint(local_profile)
        assert node_info["network"] == "uni-5"

    @responses.activate
    def test_trailing_slash_in_rpc_url(self, osmosis_profile: NetworkProfile):
        responses.add(
            responses.GET,
            "https://testnet-rpc.osmosis.zone/status",
            json=_status("osmo-test-4"),
            status=200,
        )
        assert check_endpoint(osmosis_profile)["network"] == "osmo-test-4"

    @responses.activate
    def test_http_error(self, local_profile: NetworkProfile):
        responses.add(responses.GET, STATUS_URL, body="Bad gateway", status=502)

        with pytest.raises(AuthError, match="502"):
            check_endpoint(local_profile)

    @responses.activate
    def test_unreachable(self, local_profile: NetworkProfile):
        responses.add(
            responses.GET, STATUS_URL, body=requests.ConnectionError("connection refused")
        )

        with pytest.raises(AuthError, match="unreachable"):
            check_endpoint(local_profile)

    @responses.activate
    def test_malformed_status(self, local_profile: NetworkProfile):
        responses.add(responses.GET, STATUS_URL, json={"result": {}}, status=200)

        with pytest.raises(AuthError, match="malformed"):
            check_endpoint(local_profile)


class TestLoadTransport:
    """Test the load_transport function."""

    def test_loads_factory(self):
        transport = load_transport("collections:OrderedDict")
        assert transport == {}

    @pytest.mark.parametrize(
        "path",
        ["collections", "collections:", ":OrderedDict", "no_such_module_xyz:make", "collections:missing"],
    )
    def test_bad_paths_rejected(self, path: str):
        with pytest.raises(ConfigurationError):
            load_transport(path)

    def test_failing_factory_is_configuration_error(self, tmp_path, monkeypatch):
        (tmp_path / "keyring_transport.py").write_text(
            "def make():\n    raise RuntimeError('keyring locked')\n"
        )
        monkeypatch.syspath_prepend(str(tmp_path))

        with pytest.raises(ConfigurationError, match="keyring locked") as excinfo:
            load_transport("keyring_transport:make")
        assert isinstance(excinfo.value.__cause__, RuntimeError)
