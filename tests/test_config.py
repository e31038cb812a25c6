import json
import pytest
from wms_state.config.settings import EngineConfig, load_config

def test_default_config_is_valid():
    cfg = EngineConfig.default()
    cfg.validate()  # no debe lanzar
    assert cfg.fleet.charging_policy == "manual"
    assert cfg.fleet.trail_length == 10

def test_from_dict_partial_sections(tmp_path):
    p = tmp_path / "cfg.json"
    p.write_text(json.dumps({"fleet": {"tick_hz": 30, "seed": 4}, "polling": {"refresh_interval_s": 10}}), encoding="utf-8")
    cfg = EngineConfig.from_dict(load_config(p))
    assert cfg.fleet.tick_hz == 30 and cfg.fleet.seed == 4
    assert cfg.polling.refresh_interval_s == 10
    assert cfg.api.timeout_s == 15.0

def test_yaml_config(tmp_path):
    p = tmp_path / "cfg.yaml"
    p.write_text("fleet:\n  charging_policy: on_full\n  charge_rate_per_tick: 0.5\n", encoding="utf-8")
    cfg = EngineConfig.from_dict(load_config(p))
    cfg.validate()
    assert cfg.fleet.charging_policy == "on_full"

def test_unsupported_format(tmp_path):
    p = tmp_path / "cfg.toml"
    p.write_text("", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(p)

def test_on_full_requires_rate():
    cfg = EngineConfig.default()
    cfg.fleet.charging_policy = "on_full"
    with pytest.raises(AssertionError):
        cfg.validate()

def test_summary_contains_core_fields():
    txt = EngineConfig.default().summary()
    assert "CONFIGURACIÓN DEL MOTOR" in txt
    assert "Carga: manual" in txt
    assert "/api/inout/orders" in txt

def test_check_config_cli_reports_summary(capsys):
    from wms_state.cli.check_config import main
    assert main([]) == 0
    assert "CONFIGURACIÓN DEL MOTOR" in capsys.readouterr().out

def test_check_config_cli_rejects_bad_file(tmp_path):
    from wms_state.cli.check_config import main
    p = tmp_path / "cfg.json"
    p.write_text(json.dumps({"fleet": {"tick_hz": 0}}), encoding="utf-8")
    assert main(["--config", str(p)]) == 1
    p.write_text(json.dumps({"fleet": {"velocidad": 3}}), encoding="utf-8")
    assert main(["--config", str(p)]) == 1
