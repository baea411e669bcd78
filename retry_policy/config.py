"""Configuration loading for the retry policy updater.

Settings are read from ``.retry-policy.yml`` (or a ``.json`` sibling) in the
working directory and merged over the defaults below.  A missing file yields
the defaults; an unreadable or malformed file is reported and ignored.  CLI
flags override individual values afterwards.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".retry-policy.yml"
COUNT_MODES = ("attempts", "retries")


def default_config() -> Dict:
    return {
        "workflows_root": "./workflows",
        "count_mode": "attempts",
        "prompt_coefficient": True,
        "skip_up_to_date": True,
        "log_level": "WARNING",
    }


def _read_overrides(cfg_path: Path) -> Dict:
    text = cfg_path.read_text(encoding="utf-8")
    if cfg_path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = YAML(typ="safe").load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("top level must be a mapping")
    return data


def load_config(path: str | None = None) -> Dict:
    """Load configuration from *path* or from ``.retry-policy.yml``.

    When *path* is not given and the YAML file is absent, a ``.json`` file
    with the same stem is tried as well.
    """
    config = default_config()
    cfg_path = Path(path or DEFAULT_CONFIG_FILE)
    if not cfg_path.exists() and path is None:
        cfg_path = cfg_path.with_suffix(".json")
    if not cfg_path.exists():
        if path is not None:
            logger.warning("Config file %s not found; using defaults", cfg_path)
        return config
    try:
        overrides = _read_overrides(cfg_path)
    except (OSError, ValueError, YAMLError) as exc:
        logger.warning("Ignoring config file %s: %s", cfg_path, exc)
        return config

    unknown = sorted(set(overrides) - set(config))
    if unknown:
        logger.warning("Unknown config keys in %s: %s", cfg_path, ", ".join(unknown))
    config.update({k: v for k, v in overrides.items() if k in config})

    if config["count_mode"] not in COUNT_MODES:
        logger.warning(
            "Unsupported count_mode %r in %s; using 'attempts'",
            config["count_mode"],
            cfg_path,
        )
        config["count_mode"] = "attempts"
    return config
