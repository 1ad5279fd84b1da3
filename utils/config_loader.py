#!/usr/bin/env python3
"""
Configuration Loader Module

Loads generation settings from YAML files in the project's `configs/`
directory. An environment specific file (`generation_<environment>.yaml`)
is tried first, then `generation.yaml`. Whichever file is found is merged
over DEFAULT_GENERATION_CONFIG, so missing keys always have a value.
"""

import os
import logging

import yaml

from utils.loggers.json_logger import get_project_root


DEFAULT_GENERATION_CONFIG = {
    "prefix_length": 2,
    "direction": "forward",
    "max_tokens": 50,
    "lowercase": False,
    "strip_urls": False,
    "strip_html": False,
    "random_seed": None,
    "csv_header": None,
    "log_file": None,
    "memory_limit_percentage": 85,
}


def get_config_dir():
    """
    Returns:
        str: The default `configs/` directory at the project root.
    """
    return os.path.join(get_project_root(), "configs")


def read_yaml_config(config_path):
    """
    Read a single YAML configuration file.

    Args:
        config_path (str): Path to the YAML file

    Returns:
        dict: The parsed mapping (empty for an empty file)

    Raises:
        ValueError: If the document is not a mapping
    """
    with open(config_path, "r") as f:
        config = yaml.safe_load(f)

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(
            f"Configuration file {config_path} must contain a mapping, got {type(config).__name__}")
    return config


def load_generation_config(environment="development", config_dir=None, logger=None):
    """
    Load the generation configuration for an environment.

    Args:
        environment (str): Environment name, e.g. 'development' or 'test'
        config_dir (str, optional): Directory holding the YAML files.
            Defaults to the project's `configs/` directory.
        logger (logging.Logger, optional): Logger for config resolution

    Returns:
        dict: Built-in defaults updated with the first config file found
    """
    logger = logger if logger is not None else logging.getLogger(__name__)
    config_dir = config_dir if config_dir is not None else get_config_dir()

    candidates = [
        os.path.join(config_dir, f"generation_{environment}.yaml"),
        os.path.join(config_dir, "generation.yaml"),
    ]

    config = dict(DEFAULT_GENERATION_CONFIG)
    for config_path in candidates:
        if not os.path.exists(config_path):
            continue

        config.update(read_yaml_config(config_path))
        logger.info("Generation config loaded", extra={
            "metrics": {"config_path": config_path, "environment": environment}
        })
        return config

    logger.warning("No generation config found, using defaults", extra={
        "metrics": {"config_dir": config_dir, "environment": environment}
    })
    return config
