"""Integration tests for the superstar-deploy command line."""

from pathlib import Path

import pytest

from superstar_deployments.cli import build_parser, main


@pytest.fixture
def environ(mnemonic, artifact_file: Path):
    return {
        "MNEMONIC": mnemonic,
        "CHAIN": "juno_testnet",
        "ARTIFACT_PATH": str(artifact_file),
    }


class TestParser:
    """Test argument parsing."""

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_update_interval_default(self):
        args = build_parser().parse_args(["update", "--contract", "juno1abc"])
        assert args.interval == 1800


class TestNetworksCommand:
    def test_lists_registry(self, capsys):
        assert main(["networks"], environ={}) == 0

        out = capsys.readouterr().out
        assert "juno_testnet\tuni-5" in out
        assert "osmosis_testnet\tosmo-test-4" in out
        assert "0.025uosmo" in out


class TestSubmittingCommands:
    def test_deploy(self, environ, transport, capsys):
        assert main(["deploy"], environ=environ, transport=transport) == 0

        assert transport.operations == ["connect", "upload", "instantiate"]
        out = capsys.readouterr().out
        assert "Code ID: 42" in out
        assert f"Contract Address: {transport.contract_address}" in out

    def test_flags_override_environment(self, environ, transport, wasm_bytes, tmp_path):
        other = tmp_path / "other.wasm"
        other.write_bytes(wasm_bytes + b"\x01")

        code = main(
            ["--network", "osmosis_testnet", "--gas-price", "0.03", "upload", "--artifact", str(other)],
            environ=environ,
            transport=transport,
        )

        assert code == 0
        connect = transport.calls[0][1]
        assert connect["identity"].bech32_prefix == "osmo"
        assert str(connect["gas"]) == "0.03uosmo"
        assert transport.calls[1][1]["wasm_byte_code"] == wasm_bytes + b"\x01"

    def test_instantiate_reads_code_id(self, environ, transport):
        environ["CODE_ID"] = "17"

        assert main(["instantiate", "--no-admin"], environ=environ, transport=transport) == 0

        instantiate = transport.calls[1][1]
        assert instantiate["code_id"] == 17
        assert instantiate["admin"] is None

    def test_instantiate_without_code_id(self, environ, transport):
        assert main(["instantiate"], environ=environ, transport=transport) == 1
        assert transport.calls == []

    def test_update(self, environ, transport):
        environ["CONTRACT_ADDR"] = "juno1contract"

        assert main(["update", "--interval", "900"], environ=environ, transport=transport) == 0
        assert transport.calls[1][1]["msg"] == {
            "update_config": {"new_config": {"interval": {"time": 900}}}
        }

    def test_migrate(self, environ, transport):
        code = main(
            ["migrate", "--contract", "juno1contract", "--code-id", "43"],
            environ=environ,
            transport=transport,
        )

        assert code == 0
        assert transport.operations == ["connect", "migrate"]

    def test_migrate_without_contract_fails_before_transport(self, environ, transport):
        assert main(["migrate", "--code-id", "43"], environ=environ, transport=transport) == 1
        assert transport.calls == []


class TestFailures:
    def test_unknown_network(self, environ, transport):
        environ["CHAIN"] = "cosmoshub"

        assert main(["deploy"], environ=environ, transport=transport) == 1
        assert transport.calls == []

    def test_missing_artifact(self, environ, transport, tmp_path):
        environ["ARTIFACT_PATH"] = str(tmp_path / "missing.wasm")

        assert main(["upload"], environ=environ, transport=transport) == 1
        assert transport.calls == []

    def test_missing_mnemonic(self, environ, transport):
        del environ["MNEMONIC"]

        assert main(["upload"], environ=environ, transport=transport) == 1
        assert transport.calls == []

    def test_no_transport_configured(self, environ):
        assert main(["upload"], environ=environ) == 1

    def test_partial_result_reported(self, environ, transport_factory, capsys):
        transport = transport_factory(fail_on="instantiate")

        assert main(["deploy"], environ=environ, transport=transport) == 1
        assert "Code ID: 42" in capsys.readouterr().out

    def test_mnemonic_never_logged(self, environ, transport_factory, mnemonic, capsys):
        transport = transport_factory(fail_on="connect")

        assert main(["--log-level", "DEBUG", "deploy"], environ=environ, transport=transport) == 1

        captured = capsys.readouterr()
        assert mnemonic not in captured.out
        assert mnemonic not in captured.err

    def test_unknown_log_level(self, environ, transport, capsys):
        assert main(["--log-level", "LOUD", "networks"], environ=environ, transport=transport) == 1

        assert "Unknown log level: LOUD" in capsys.readouterr().err
        assert transport.calls == []

    def test_unknown_log_level_from_environment(self, environ, transport):
        environ["LOG_LEVEL"] = "verbose"
        assert main(["upload"], environ=environ, transport=transport) == 1
        assert transport.calls == []

    def test_failing_transport_factory(self, environ, tmp_path, monkeypatch):
        (tmp_path / "offline_transport.py").write_text(
            "def make():\n    raise OSError('node unreachable')\n"
        )
        monkeypatch.syspath_prepend(str(tmp_path))

        assert main(["--transport", "offline_transport:make", "upload"], environ=environ) == 1
