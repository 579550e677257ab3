"""
CLI Unit Tests
Tests for claimtree_cli/main.py, claimtree_cli/config.py and the commands.

Commands are driven through main(argv) in an isolated working directory.
"""
import json

import pytest

from claimtree.io import load_claims, load_distribution, save_claims
from claimtree.schemas.errors import ConfigurationError
from claimtree_cli.config import (
    CLIConfig,
    get_default_config_template,
    load_config,
    load_config_from_file,
)
from claimtree_cli.main import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    create_parser,
    main,
)

from fixtures.claim_fixtures import TOKEN_B, make_address, make_claims


@pytest.fixture
def built(isolated_env, capsys):
    """Input and distribution files for five claims."""
    input_path = save_claims(isolated_env / "input.json", make_claims(5))
    output_path = isolated_env / "distribution.json"

    assert main(["build", str(input_path), str(output_path)]) == EXIT_SUCCESS
    capsys.readouterr()
    return input_path, output_path


class TestParser:
    """Tests for argument parsing."""

    def test_no_command(self, isolated_env, capsys):
        assert main([]) == EXIT_RUNTIME_ERROR

    def test_proof_requires_lookup(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["proof", "dist.json"])

    def test_proof_index_and_account_exclusive(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(
                ["proof", "dist.json", "--index", "0", "--account", make_address(0)]
            )

    def test_build_defaults(self):
        args = create_parser().parse_args(["build", "in.json", "out.json"])

        assert args.workers is None
        assert args.json is False


class TestGenerateCommand:
    """Tests for `claimtree generate`."""

    def test_generate(self, isolated_env, capsys):
        out = isolated_env / "input.json"

        code = main(["generate", "--out", str(out), "--entries", "12", "--seed", "4"])

        assert code == EXIT_SUCCESS
        assert len(load_claims(out)) == 12
        assert "Generated 12 entries" in capsys.readouterr().out

    def test_generate_is_reproducible(self, isolated_env):
        a = isolated_env / "a.json"
        b = isolated_env / "b.json"

        main(["generate", "--out", str(a), "--entries", "6", "--seed", "99"])
        main(["generate", "--out", str(b), "--entries", "6", "--seed", "99"])

        assert a.read_text() == b.read_text()

    def test_generate_epoch_and_token(self, isolated_env):
        out = isolated_env / "input.json"

        main([
            "generate", "--out", str(out), "--entries", "4",
            "--epoch", "3", "--token", TOKEN_B,
        ])

        records = load_claims(out)
        assert {r.epoch for r in records} == {3}
        assert {r.token for r in records} == {TOKEN_B}

    def test_generate_entries_from_env(self, isolated_env, monkeypatch):
        monkeypatch.setenv("CLAIMTREE_ENTRIES", "3")
        out = isolated_env / "input.json"

        assert main(["generate", "--out", str(out)]) == EXIT_SUCCESS
        assert len(load_claims(out)) == 3

    def test_generate_json_summary(self, isolated_env, capsys):
        out = isolated_env / "input.json"

        main(["generate", "--out", str(out), "--entries", "2", "--json"])

        assert json.loads(capsys.readouterr().out) == {"path": str(out), "entries": 2}

    def test_generate_invalid_config(self, isolated_env, monkeypatch, capsys):
        monkeypatch.setenv("CLAIMTREE_CUMULATIVE_MIN", "10")
        monkeypatch.setenv("CLAIMTREE_CUMULATIVE_MAX", "1")

        code = main(["generate", "--out", str(isolated_env / "x.json"), "--entries", "1"])

        assert code == EXIT_RUNTIME_ERROR
        assert "cumulative_min" in capsys.readouterr().err


class TestBuildCommand:
    """Tests for `claimtree build`."""

    def test_build_writes_distribution(self, built, capsys):
        _, output_path = built

        dist = load_distribution(output_path)
        assert dist.total_claims == 5
        assert len(dist.values) == 5

    def test_build_human_output(self, isolated_env, capsys):
        input_path = save_claims(isolated_env / "input.json", make_claims(3))

        main(["build", str(input_path), str(isolated_env / "out.json")])

        out = capsys.readouterr().out
        assert "Merkle Root: 0x" in out
        assert "Total Number of Claims: 3" in out

    def test_build_json_output(self, isolated_env, capsys):
        input_path = save_claims(isolated_env / "input.json", make_claims(3))
        output_path = isolated_env / "out.json"

        main(["build", str(input_path), str(output_path), "--json", "--workers", "2"])

        summary = json.loads(capsys.readouterr().out)
        assert summary["root"] == load_distribution(output_path).root
        assert summary["totalClaims"] == 3

    def test_build_missing_input(self, isolated_env, capsys):
        code = main(["build", str(isolated_env / "none.json"), str(isolated_env / "out.json")])

        assert code == EXIT_RUNTIME_ERROR
        assert "File not found" in capsys.readouterr().err

    def test_build_malformed_record_writes_nothing(self, isolated_env, capsys):
        records = [c.to_json_dict() for c in make_claims(3)]
        records[1]["cumulativeAmount"] = "-1"
        input_path = isolated_env / "input.json"
        input_path.write_text(json.dumps(records))
        output_path = isolated_env / "out.json"

        code = main(["build", str(input_path), str(output_path)])

        assert code == EXIT_RUNTIME_ERROR
        assert not output_path.exists()
        assert "record 1" in capsys.readouterr().err

    def test_build_empty_input(self, isolated_env, capsys):
        input_path = isolated_env / "input.json"
        input_path.write_text("[]")

        assert main(["build", str(input_path), str(isolated_env / "out.json")]) == EXIT_RUNTIME_ERROR


class TestVerifyCommand:
    """Tests for `claimtree verify`."""

    def test_verify_valid(self, built, capsys):
        _, output_path = built

        assert main(["verify", str(output_path)]) == EXIT_SUCCESS
        assert "ok: true" in capsys.readouterr().out

    def test_verify_json(self, built, capsys):
        _, output_path = built

        main(["verify", str(output_path), "--json"])

        report = json.loads(capsys.readouterr().out)
        assert report["ok"] is True
        assert report["distribution"] == str(output_path)

    def test_verify_tampered(self, built, capsys):
        _, output_path = built
        data = json.loads(output_path.read_text())
        data["values"][2]["cumulativeAmount"] = "1"
        output_path.write_text(json.dumps(data))

        assert main(["verify", str(output_path)]) == EXIT_VERIFICATION_FAILED
        assert "ok: false" in capsys.readouterr().out

    def test_verify_not_a_distribution(self, built, capsys):
        input_path, _ = built

        assert main(["verify", str(input_path)]) == EXIT_RUNTIME_ERROR


class TestProofCommand:
    """Tests for `claimtree proof`."""

    def test_proof_by_index(self, built, capsys):
        _, output_path = built

        assert main(["proof", str(output_path), "--index", "4", "--json"]) == EXIT_SUCCESS

        report = json.loads(capsys.readouterr().out)
        assert report["root"] == load_distribution(output_path).root
        assert report["claims"][0]["index"] == 4

    def test_proof_by_account(self, built, capsys):
        _, output_path = built
        account = make_address(1).upper().replace("0X", "0x")

        assert main(["proof", str(output_path), "--account", account]) == EXIT_SUCCESS

        out = capsys.readouterr().out
        assert f"account: {make_address(1)}" in out
        assert "index: 1" in out

    def test_proof_reports_verified(self, built, capsys):
        _, output_path = built

        main(["proof", str(output_path), "--index", "2", "--json"])

        assert json.loads(capsys.readouterr().out)["claims"][0]["verified"] is True

    def test_proof_tampered_entry(self, built, capsys):
        _, output_path = built
        data = json.loads(output_path.read_text())
        data["values"][2]["cumulativeAmount"] = "7"
        output_path.write_text(json.dumps(data))

        code = main(["proof", str(output_path), "--index", "2"])

        assert code == EXIT_VERIFICATION_FAILED
        assert "verified: false" in capsys.readouterr().out

    def test_proof_untouched_entry_in_tampered_file(self, built, capsys):
        _, output_path = built
        data = json.loads(output_path.read_text())
        data["values"][2]["cumulativeAmount"] = "7"
        output_path.write_text(json.dumps(data))

        assert main(["proof", str(output_path), "--index", "0"]) == EXIT_SUCCESS

    def test_proof_index_out_of_range(self, built, capsys):
        _, output_path = built

        assert main(["proof", str(output_path), "--index", "5"]) == EXIT_RUNTIME_ERROR
        assert "out of range" in capsys.readouterr().err

    def test_proof_unknown_account(self, built, capsys):
        _, output_path = built

        assert main(["proof", str(output_path), "--account", "0x" + "ff" * 20]) == EXIT_RUNTIME_ERROR


class TestConfigCommand:
    """Tests for `claimtree config`."""

    def test_init_creates_file(self, isolated_env, capsys):
        assert main(["config", "--init"]) == EXIT_SUCCESS

        data = json.loads((isolated_env / "claimtree.json").read_text())
        assert data["workers"] == 1
        assert data["generator"]["entries"] == 100_000

    def test_init_refuses_overwrite(self, isolated_env, capsys):
        main(["config", "--init"])

        assert main(["config", "--init"]) == EXIT_RUNTIME_ERROR

    def test_show(self, isolated_env, capsys, monkeypatch):
        monkeypatch.setenv("CLAIMTREE_WORKERS", "8")

        assert main(["config", "--show"]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["workers"] == 8

    def test_explicit_config_file(self, isolated_env, capsys):
        path = isolated_env / "custom.json"
        path.write_text(json.dumps({"default_output_format": "json"}))

        main(["--config", str(path), "config", "--show"])

        assert json.loads(capsys.readouterr().out)["default_output_format"] == "json"

    def test_missing_config_file(self, isolated_env, capsys):
        code = main(["--config", str(isolated_env / "none.json"), "config", "--show"])

        assert code == EXIT_RUNTIME_ERROR
        assert "Error loading configuration" in capsys.readouterr().err


class TestConfigLoading:
    """Tests for claimtree_cli/config.py."""

    def test_defaults(self, isolated_env):
        config = load_config()

        assert config.workers == 1
        assert config.log_level == "INFO"
        assert config.generator.cumulative_max == 10**25

    def test_file_in_working_directory(self, isolated_env):
        (isolated_env / "claimtree.json").write_text(json.dumps({"workers": 3}))

        assert load_config().workers == 3

    def test_env_overrides_file(self, isolated_env, monkeypatch):
        (isolated_env / "claimtree.json").write_text(json.dumps({"workers": 3}))
        monkeypatch.setenv("CLAIMTREE_WORKERS", "6")

        assert load_config().workers == 6

    def test_token_addresses_from_env(self, isolated_env, monkeypatch):
        monkeypatch.setenv("CLAIMTREE_TOKEN_ADDRESSES", f"{TOKEN_B}, {make_address(0)} ,")

        assert load_config().generator.token_addresses == [TOKEN_B, make_address(0)]

    def test_large_amounts_as_strings(self, isolated_env):
        path = isolated_env / "config.json"
        path.write_text(json.dumps({"generator": {"cumulative_max": str(10**30)}}))

        assert load_config_from_file(path).generator.cumulative_max == 10**30

    def test_invalid_integer(self, isolated_env):
        path = isolated_env / "config.json"
        path.write_text(json.dumps({"workers": "many"}))

        with pytest.raises(ConfigurationError, match="workers"):
            load_config_from_file(path)

    def test_invalid_json(self, isolated_env):
        path = isolated_env / "config.json"
        path.write_text("{")

        with pytest.raises(ConfigurationError):
            load_config_from_file(path)

    def test_not_an_object(self, isolated_env):
        path = isolated_env / "config.json"
        path.write_text("[]")

        with pytest.raises(ConfigurationError):
            load_config_from_file(path)

    def test_unknown_output_format_in_file(self, isolated_env):
        path = isolated_env / "config.json"
        path.write_text(json.dumps({"default_output_format": "jsn"}))

        with pytest.raises(ConfigurationError, match="default_output_format"):
            load_config_from_file(path)

    def test_unknown_log_level_in_file(self, isolated_env):
        path = isolated_env / "config.json"
        path.write_text(json.dumps({"log_level": "VERBOSE"}))

        with pytest.raises(ConfigurationError, match="log_level"):
            load_config_from_file(path)

    def test_choices_are_case_folded(self, isolated_env):
        path = isolated_env / "config.json"
        path.write_text(json.dumps({"log_level": "debug", "default_output_format": "JSON"}))

        config = load_config_from_file(path)
        assert config.log_level == "DEBUG"
        assert config.default_output_format == "json"

    def test_unknown_output_format_in_env(self, isolated_env, monkeypatch):
        monkeypatch.setenv("CLAIMTREE_OUTPUT_FORMAT", "yaml")

        with pytest.raises(ConfigurationError, match="OUTPUT_FORMAT"):
            load_config()

    def test_unknown_log_level_in_env_fails_cli(self, isolated_env, monkeypatch, capsys):
        monkeypatch.setenv("CLAIMTREE_LOG_LEVEL", "LOUD")

        assert main(["config", "--show"]) == EXIT_RUNTIME_ERROR
        assert "LOG_LEVEL" in capsys.readouterr().err

    def test_template_round_trips(self, isolated_env):
        path = isolated_env / "config.json"
        path.write_text(get_default_config_template())

        assert load_config_from_file(path).to_dict() == CLIConfig().to_dict()
