import json
import logging

from retry_policy import config


def test_load_config_returns_defaults_when_missing(tmp_path):
    result = config.load_config()

    assert result == config.default_config()
    assert result["workflows_root"] == "./workflows"
    assert result["count_mode"] == "attempts"
    assert result["skip_up_to_date"] is True


def test_load_config_reads_yaml_in_cwd(isolated_cwd):
    (isolated_cwd / ".retry-policy.yml").write_text(
        "workflows_root: flows\ncount_mode: retries\nprompt_coefficient: false\n",
        encoding="utf-8",
    )

    result = config.load_config()

    assert result["workflows_root"] == "flows"
    assert result["count_mode"] == "retries"
    assert result["prompt_coefficient"] is False
    assert result["skip_up_to_date"] is True  # default preserved


def test_load_config_falls_back_to_json_sibling(isolated_cwd):
    (isolated_cwd / ".retry-policy.json").write_text(
        json.dumps({"skip_up_to_date": False}), encoding="utf-8"
    )

    result = config.load_config()

    assert result["skip_up_to_date"] is False


def test_load_config_explicit_path(tmp_path):
    cfg = tmp_path / "custom.yml"
    cfg.write_text("log_level: DEBUG\n", encoding="utf-8")

    assert config.load_config(str(cfg))["log_level"] == "DEBUG"


def test_load_config_warns_for_missing_explicit_path(tmp_path, caplog):
    caplog.set_level(logging.WARNING)

    result = config.load_config(str(tmp_path / "nope.yml"))

    assert result == config.default_config()
    assert "not found" in caplog.text


def test_load_config_ignores_invalid_yaml(isolated_cwd, caplog):
    caplog.set_level(logging.WARNING)
    (isolated_cwd / ".retry-policy.yml").write_text("count_mode: [unclosed\n", encoding="utf-8")

    result = config.load_config()

    assert result == config.default_config()
    assert "Ignoring config file" in caplog.text


def test_load_config_rejects_non_mapping(isolated_cwd, caplog):
    caplog.set_level(logging.WARNING)
    (isolated_cwd / ".retry-policy.yml").write_text("- a\n- b\n", encoding="utf-8")

    assert config.load_config() == config.default_config()
    assert "top level must be a mapping" in caplog.text


def test_load_config_drops_unknown_keys_and_bad_count_mode(isolated_cwd, caplog):
    caplog.set_level(logging.WARNING)
    (isolated_cwd / ".retry-policy.yml").write_text(
        "count_mode: tries\ncolour: blue\n", encoding="utf-8"
    )

    result = config.load_config()

    assert "colour" not in result
    assert result["count_mode"] == "attempts"
    assert "Unknown config keys" in caplog.text
    assert "Unsupported count_mode" in caplog.text


def test_empty_config_file_means_defaults(isolated_cwd):
    (isolated_cwd / ".retry-policy.yml").write_text("", encoding="utf-8")
    assert config.load_config() == config.default_config()
