import pytest
from pydantic import ValidationError

from dme_parser.commons.types import (
    DEFAULT_ENDPOINT,
    Settings,
    default_settings_path,
    load_settings,
    settings_from_dict,
)
from dme_parser.parsers.models import Order

SETTINGS_YAML = """
settings:
  input_folder: ./Input
  output_folder: ./Output
  text_input_file: physician_note.txt
  json_input_file: physician_note.json
  external_api:
    endpoint: http://localhost:8080/DrExtract
  paths:
    logs_root: ./var/logs
"""


def test_load_settings_from_yaml(tmp_path):
    p = tmp_path / "settings.yaml"
    p.write_text(SETTINGS_YAML, encoding="utf-8")
    s = load_settings(str(p))
    assert s.input_folder == "./Input"
    assert s.output_folder == "./Output"
    assert s.text_input_file == "physician_note.txt"
    assert s.json_input_file == "physician_note.json"
    assert s.output_file == "output.json"
    assert s.external_api.endpoint == "http://localhost:8080/DrExtract"
    assert s.paths.logs_root == "./var/logs"
    assert s.paths.archive == "./archive"


def test_missing_settings_file_gives_defaults(tmp_path):
    s = load_settings(str(tmp_path / "nope.yaml"))
    assert s == Settings()
    assert s.input_folder == ""
    assert s.text_input_file == ""
    assert s.output_file == "output.json"
    assert s.external_api.endpoint == DEFAULT_ENDPOINT


def test_env_var_points_to_settings(tmp_path, monkeypatch):
    p = tmp_path / "custom.yaml"
    p.write_text("settings:\n  output_file: order.json\n", encoding="utf-8")
    monkeypatch.setenv("DME_SETTINGS", str(p))
    assert load_settings().output_file == "order.json"


def test_note_and_output_paths():
    s = settings_from_dict({"input_folder": "in", "text_input_file": "a.txt",
                            "json_input_file": "a.json", "output_folder": "out"})
    assert s.note_path().as_posix() == "in/a.txt"
    assert s.note_path(from_json=True).as_posix() == "in/a.json"
    assert s.output_path().as_posix() == "out/output.json"


def test_endpoint_must_be_http():
    with pytest.raises(ValidationError):
        settings_from_dict({"external_api": {"endpoint": "ftp://example.org"}})


def test_order_serialization_uses_dob_and_omits_unset():
    order = Order(device="cpap", patient_dob="04/12/1952", add_ons=("heated humidifier",))
    assert order.to_json(indent=None) == (
        '{"device":"cpap","add_ons":["heated humidifier"],"dob":"04/12/1952"}'
    )


def test_default_settings_come_from_package_not_cwd(tmp_path, monkeypatch):
    monkeypatch.delenv("DME_SETTINGS", raising=False)
    monkeypatch.chdir(tmp_path)
    assert default_settings_path().is_file()
    s = load_settings()
    assert s.text_input_file == "physician_note.txt"
    assert s.json_input_file == "physician_note.json"
