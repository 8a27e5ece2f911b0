# tests/test_cli.py
import json
import logging

import pytest
import yaml

from utxo_gateway.cli import CLI, main
from utxo_gateway.cli import cli as cli_module


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "gateway.yaml"
    path.write_text(yaml.safe_dump({
        "server": {"port": 9100},
        "db": {"password": "secret"},
        "logging": {"logDir": str(tmp_path / "logs")},
    }))
    return str(path)


class TestCLI:
    def test_check_config_prints_masked_settings(self, config_file, capsys):
        main(["--config", config_file, "check-config"])

        printed = json.loads(capsys.readouterr().out)
        assert printed["port"] == 9100
        assert printed["db_password"] == "***"

    def test_host_and_port_flags_override_config(self, config_file):
        args = CLI().create_parser().parse_args(
            ["--config", config_file, "serve", "--host", "127.0.0.1", "--port", "9200"]
        )
        settings = CLI().load_settings(args)
        assert settings.host == "127.0.0.1"
        assert settings.port == 9200

    def test_serve_runs_uvicorn(self, config_file, mocker):
        run = mocker.patch.object(cli_module.uvicorn, "run")

        main(["--config", config_file, "serve", "--port", "9300"])

        run.assert_called_once()
        app = run.call_args.args[0]
        assert run.call_args.kwargs["host"] == "0.0.0.0"
        assert run.call_args.kwargs["port"] == 9300
        assert app.state.settings.port == 9300

    def test_no_command_prints_help(self, capsys):
        main([])
        assert "commands" in capsys.readouterr().out

    def test_serve_logs_startup(self, config_file, mocker, caplog):
        mocker.patch.object(cli_module.uvicorn, "run")

        with caplog.at_level(logging.INFO, logger="utxo_gateway.cli.cli"):
            main(["--config", config_file, "serve", "--port", "9400"])

        assert "Starting utxo-gateway on 0.0.0.0:9400" in caplog.text
