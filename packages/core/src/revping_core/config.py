import os
from pathlib import Path

import yaml

DEFAULT_CONFIG: dict = {
    "repo": None,  # None = current working directory
    "diff_url": "",
    "sample_size": 9,
    "interval": 1740,  # 29 minutes between scans
    "timeout": 30,
    "username": "OhMyCodeReview",
    "icon_emoji": ":face_with_monocle:",
    "empty_messages": [
        "Aiyoh, nothing to review. Make more diffs lah :diya:",
        "Sial ah, everything has been reviewed :really_good_job:",
    ],
}

REQUIRED_KEYS = ("conduit_url", "slack_hook", "groups")


class ConfigError(ValueError):
    """The configuration file is missing, unreadable or incomplete."""


def load_config(config_path: str) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. The YAML (or JSON) config file
      3. Credentials from environment variables, when the file has none

    Raises ConfigError when the file can't be used.
    """
    path = Path(config_path)
    if not path.is_file():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(path) as f:
            file_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse {config_path}: {e}") from e

    if file_config is None:
        file_config = {}
    if not isinstance(file_config, dict):
        raise ConfigError(f"{config_path} must contain a mapping at the top level.")

    config = {**DEFAULT_CONFIG, "empty_messages": list(DEFAULT_CONFIG["empty_messages"])}
    config.update({k: v for k, v in file_config.items() if v is not None})

    if not config.get("conduit_token"):
        config["conduit_token"] = os.environ.get("CONDUIT_API_TOKEN")

    validate_config(config)
    return config


def validate_config(config: dict) -> None:
    missing = [key for key in REQUIRED_KEYS if not config.get(key)]
    if missing:
        raise ConfigError(f"Missing required config key(s): {', '.join(missing)}")

    groups = config["groups"]
    if not isinstance(groups, list):
        raise ConfigError("'groups' must be a list of {query, channel} entries.")
    for i, group in enumerate(groups):
        if not isinstance(group, dict) or not group.get("query") or not group.get("channel"):
            raise ConfigError(f"groups[{i}] needs both 'query' and 'channel'.")

    try:
        config["sample_size"] = int(config["sample_size"])
        config["interval"] = float(config["interval"])
        config["timeout"] = float(config["timeout"])
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid numeric setting: {e}") from e
