"""Tests for the peercli command line.

Tests cover:
1. Argument parsing
2. Chaincode flag validation and settings fallback
3. Collection compile / inspect
4. Policy parsing
"""

from __future__ import annotations

import base64
import json
from unittest.mock import patch

import pytest

from peercli.cli.main import app, main
from peercli.collection_config import decode_collection_config_package
from peercli.policy import MAX_POLICY_DEPTH


@pytest.fixture(autouse=True)
def _no_logging_setup():
    """Keep main() from reconfiguring the root logger."""
    with patch("peercli.cli.main.configure_logging") as configure:
        yield configure


def _run(capsys, *argv: str) -> tuple[int, dict | None, str]:
    code = main(list(argv))
    captured = capsys.readouterr()
    data = json.loads(captured.out) if code == 0 and captured.out.strip().startswith("{") else None
    return code, data, captured.err


# ============================================================================
# Argument parsing
# ============================================================================


class TestAppParser:
    def test_chaincode_flags(self):
        args = app().parse_args(
            [
                "chaincode",
                "invoke",
                "-n",
                "mycc",
                "-c",
                '{"Args":["get"]}',
                "--peerAddresses",
                "peer0:7051",
                "--peerAddresses",
                "peer1:7051",
                "--tls",
            ]
        )
        assert args.chaincode_command == "invoke"
        assert args.peer_addresses == ["peer0:7051", "peer1:7051"]
        assert args.tls is True
        assert args.ctor == '{"Args":["get"]}'

    def test_defaults(self):
        args = app().parse_args(["chaincode", "query", "-n", "mycc"])
        assert args.ctor == "{}"
        assert args.tls is None
        assert args.peer_addresses is None
        assert args.output == "json"

    def test_command_required(self):
        with pytest.raises(SystemExit):
            app().parse_args([])

    def test_verbose_sets_debug(self, capsys, _no_logging_setup):
        main(["--verbose", "policy", "parse", "OR('A.member')"])
        _no_logging_setup.assert_called_once_with(level="DEBUG")

    def test_invalid_environment_reported(self, capsys, monkeypatch, _no_logging_setup):
        monkeypatch.setenv("CORE_PEER_TLS_ENABLED", "maybe")
        code, _, err = _run(capsys, "policy", "parse", "OR('A.member')")
        assert code == 1
        assert err.startswith("Error: Invalid environment configuration")
        assert "CORE_PEER_TLS_ENABLED" in err
        _no_logging_setup.assert_not_called()


# ============================================================================
# chaincode
# ============================================================================


class TestChaincodeCommand:
    def test_invoke_multi_target_tls(self, capsys):
        code, data, _ = _run(
            capsys,
            "chaincode",
            "invoke",
            "-n",
            "mycc",
            "-c",
            '{"Function":"move","Args":["a","b","10"]}',
            "--peerAddresses",
            "peer0:7051",
            "--tlsRootCertFiles",
            "peer0.pem",
            "--peerAddresses",
            "peer1:7051",
            "--tlsRootCertFiles",
            "peer1.pem",
            "--tls",
        )
        assert code == 0
        assert data["args"] == ["move", "a", "b", "10"]
        assert data["tls_root_cert_files"] == ["peer0.pem", "peer1.pem"]
        assert data["tls_enabled"] is True

    def test_cert_mismatch_reported(self, capsys):
        code, _, err = _run(
            capsys,
            "chaincode",
            "invoke",
            "-n",
            "mycc",
            "-c",
            '{"Args":["get"]}',
            "--peerAddresses",
            "peer0:7051",
            "--peerAddresses",
            "peer1:7051",
            "--tlsRootCertFiles",
            "peer0.pem",
            "--tls",
        )
        assert code == 1
        assert "number of peer addresses (2) does not match the number of TLS root cert files (1)" in err

    def test_query_too_many_targets(self, capsys):
        code, _, err = _run(
            capsys,
            "chaincode",
            "query",
            "-n",
            "mycc",
            "-c",
            '{"Args":["get"]}',
            "--peerAddresses",
            "peer0:7051",
            "--peerAddresses",
            "peer1:7051",
            "--no-tls",
        )
        assert code == 1
        assert err.startswith("Error: 'query' command can only be executed against one peer. received 2")

    def test_missing_name(self, capsys):
        code, _, err = _run(capsys, "chaincode", "query", "-c", '{"Args":["get"]}')
        assert code == 1
        assert "must supply value for chaincode name parameter" in err

    def test_instantiate_with_policy_and_collections(self, capsys, collections_file):
        code, data, _ = _run(
            capsys,
            "chaincode",
            "instantiate",
            "-n",
            "mycc",
            "-v",
            "1.0",
            "-c",
            '{"Args":["init"]}',
            "-P",
            "AND('Org1MSP.member','Org2MSP.member')",
            "--collections-config",
            str(collections_file),
        )
        assert code == 0
        assert data["policy"] == "AND('Org1MSP.member', 'Org2MSP.member')"
        assert data["escc"] == "escc"
        assert data["vscc"] == "vscc"
        package = decode_collection_config_package(base64.b64decode(data["collection_config"]))
        assert len(package) == 2

    def test_install_without_ctor(self, capsys):
        code, data, _ = _run(capsys, "chaincode", "install", "-n", "mycc", "-v", "1.0", "-p", "github.com/mycc")
        assert code == 0
        assert data["args"] == []
        assert data["path"] == "github.com/mycc"

    def test_settings_fallback(self, capsys, monkeypatch):
        monkeypatch.setenv("CORE_PEER_TLS_ENABLED", "true")
        monkeypatch.setenv("CORE_PEER_ADDRESS", "peer0.org1:7051")
        monkeypatch.setenv("CORE_PEER_TLS_ROOTCERT_FILE", "/etc/ca.crt")
        code, data, _ = _run(capsys, "chaincode", "query", "-n", "mycc", "-c", '{"Args":["get"]}')
        assert code == 0
        assert data["peer_addresses"] == ["peer0.org1:7051"]
        assert data["tls_root_cert_files"] == ["/etc/ca.crt"]
        assert data["tls_enabled"] is True

    def test_tls_flag_overrides_settings(self, capsys, monkeypatch):
        monkeypatch.setenv("CORE_PEER_TLS_ENABLED", "true")
        code, data, _ = _run(
            capsys,
            "chaincode",
            "query",
            "-n",
            "mycc",
            "-c",
            '{"Args":["get"]}',
            "--peerAddresses",
            "peer0:7051",
            "--tlsRootCertFiles",
            "peer0.pem",
            "--no-tls",
        )
        assert code == 0
        assert data["tls_enabled"] is False
        assert data["tls_root_cert_files"] == []


# ============================================================================
# collections
# ============================================================================


class TestCollectionsCommand:
    def test_compile_prints_package(self, capsys, collections_file):
        code, data, _ = _run(capsys, "collections", "compile", str(collections_file))
        assert code == 0
        assert data["collections"] == ["clientModelHashCollectionOrg1MSP", "globalModelHashCollection"]
        assert len(base64.b64decode(data["package"])) == data["size"]

    def test_compile_then_inspect(self, capsys, collections_file, tmp_path):
        out = tmp_path / "collections.pb"
        code, data, _ = _run(capsys, "collections", "compile", str(collections_file), "-o", str(out))
        assert code == 0
        assert data["out"] == str(out)

        code, data, _ = _run(capsys, "collections", "inspect", str(out))
        assert code == 0
        first = data["collections"][0]
        assert first["policy"] == "OR('Org1MSP.member', 'AdminMSP.member')"
        assert first["maxPeerCount"] == 3
        assert first["memberOnlyWrite"] is True

    def test_compile_bad_policy(self, capsys, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('[{"name": "foo", "policy": "barf"}]')
        code, _, err = _run(capsys, "collections", "compile", str(path))
        assert code == 1
        assert "invalid policy barf for collection 'foo'" in err

    def test_compile_deepest_policy(self, capsys, tmp_path):
        policy = "'A.member'"
        for _ in range(MAX_POLICY_DEPTH):
            policy = f"OR({policy})"
        path = tmp_path / "deep.json"
        path.write_text(json.dumps([{"name": "deep", "policy": policy}]))
        code, data, _ = _run(capsys, "collections", "compile", str(path))
        assert code == 0
        assert data["collections"] == ["deep"]

    def test_inspect_garbage(self, capsys, tmp_path):
        path = tmp_path / "garbage.pb"
        path.write_bytes(b"not a package")
        code, _, err = _run(capsys, "collections", "inspect", str(path))
        assert code == 1
        assert err.startswith("Error:")

    def test_inspect_missing_file(self, capsys, tmp_path):
        code, _, err = _run(capsys, "collections", "inspect", str(tmp_path / "missing.pb"))
        assert code == 1
        assert "could not read" in err


# ============================================================================
# policy
# ============================================================================


class TestPolicyCommand:
    def test_parse(self, capsys):
        code, data, _ = _run(capsys, "policy", "parse", "OR(AND('A.member', 'B.member'), 'C.admin')")
        assert code == 0
        assert data["depth"] == 2
        assert data["principals"] == ["'A.member'", "'B.member'", "'C.admin'"]
        assert data["tree"]["n_out_of"]["n"] == 1

    def test_parse_error(self, capsys):
        code, _, err = _run(capsys, "policy", "parse", "barf")
        assert code == 1
        assert err.startswith("Error:")

    def test_text_output(self, capsys):
        code = main(["--output", "text", "policy", "parse", "OR('A.member')"])
        out = capsys.readouterr().out
        assert code == 0
        assert "policy: OR('A.member')" in out
        assert "depth: 1" in out
