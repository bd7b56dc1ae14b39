from constants import *
import copy
import yaml
import os

import logging

# Retrieve main logger
logger = logging.getLogger("main")


# Cache variable
_cached_settings = None


def merge_settings(overrides):
    """Deep merge overrides section by section over DEFAULT_SETTINGS"""
    merged_settings = copy.deepcopy(DEFAULT_SETTINGS)
    for section, values in (overrides or {}).items():
        if isinstance(values, dict) and section in merged_settings and isinstance(merged_settings[section], dict):
            merged_settings[section].update(values)
        else:
            merged_settings[section] = values
    return merged_settings


def load_settings(force=False, config_file=CONFIG_FILE):
    global _cached_settings

    if _cached_settings and not force:
        return _cached_settings

    if os.path.exists(config_file):
        logger.debug(f"Reading configuration file: {config_file}")
        with open(config_file, "r") as yaml_file:
            settings = merge_settings(yaml.safe_load(yaml_file) or {})
    else:
        settings = copy.deepcopy(DEFAULT_SETTINGS)
        os.makedirs(os.path.dirname(config_file), exist_ok=True)
        with open(config_file, "w") as yaml_file:
            yaml.dump(settings, yaml_file)
        logger.info(f"Created default configuration file: {config_file}")

    success, errors = verify_settings(settings)
    if not success:
        for error in errors:
            logger.warning(f"Invalid setting {error['path']}: {error['error']}")

    _cached_settings = settings
    return settings


def verify_settings(settings):
    success = True
    errors = []

    replays = settings.get("replays", {})
    for key in ("clean_days", "weekly_upload_limit"):
        value = replays.get(key)
        if not isinstance(value, int) or value < 0:
            success = False
            errors.append({"path": f"replays/{key}", "error": f"{value!r} is not a non-negative integer."})

    interval = settings.get("scheduler", {}).get("cleanup_interval_hours")
    if not isinstance(interval, (int, float)) or interval <= 0:
        success = False
        errors.append({"path": "scheduler/cleanup_interval_hours", "error": f"{interval!r} is not a positive number."})

    if not settings.get("storage", {}).get("path"):
        success = False
        errors.append({"path": "storage/path", "error": "Storage path is not set."})

    return success, errors
