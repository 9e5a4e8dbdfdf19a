import json
import sys

import pytest

from computevm.main import main

CONFIG = """
project_id: my-project
zone: europe-west8-b
name: cli-vm
network_interfaces:
  - network: vpc
    subnetwork: subnet
firewall_rules: []
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "vm.yaml"
    path.write_text(CONFIG)
    return path


def test_main_table(mocker, config_file, capsys):
    mocker.patch.object(sys, "argv", ["computevm", str(config_file)])
    main()
    out = capsys.readouterr().out
    assert "cli-vm" in out
    assert "instance" in out


def test_main_json(mocker, config_file, capsys):
    mocker.patch.object(sys, "argv", ["computevm", str(config_file), "--json"])
    main()
    data = json.loads(capsys.readouterr().out)
    assert data["resource"]["kind"] == "instance"
    assert data["resource"]["name"] == "cli-vm"


def test_main_html(mocker, config_file, tmp_path):
    mock_report = mocker.patch("computevm.main.generate_report")
    output = tmp_path / "plan.html"
    mocker.patch.object(
        sys, "argv", ["computevm", str(config_file), "--html", str(output)]
    )
    main()
    mock_report.assert_called_once()
    assert mock_report.call_args[0][1] == str(output)


def test_main_resolution_error(mocker, tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text(
        CONFIG
        + "create_template: true\n"
        + "encryption:\n  disk_encryption_key_raw: abc\n"
    )
    mocker.patch.object(sys, "argv", ["computevm", str(path)])
    mock_logger = mocker.patch("computevm.main.logger")

    with pytest.raises(SystemExit) as exc:
        main()

    assert exc.value.code == 1
    mock_logger.error.assert_called_once()


def test_main_missing_file(mocker, tmp_path):
    mocker.patch.object(sys, "argv", ["computevm", str(tmp_path / "nope.yaml")])
    mocker.patch("computevm.main.logger")

    with pytest.raises(SystemExit) as exc:
        main()
    assert exc.value.code == 1


def test_main_json_hides_raw_key(mocker, tmp_path, capsys):
    path = tmp_path / "vm.yaml"
    path.write_text(
        CONFIG
        + "encryption:\n  encrypt_boot: true\n  disk_encryption_key_raw: c2VjcmV0\n"
    )
    mocker.patch.object(sys, "argv", ["computevm", str(path), "--json"])
    main()
    out = capsys.readouterr().out
    assert "c2VjcmV0" not in out
