"""Configuration loader for Interview Grader."""
import copy
import os
import logging
from typing import Optional

import yaml
from dotenv import load_dotenv


logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()

# Default configuration values
DEFAULT_CONFIG = {
    "server": {
        "host": "0.0.0.0",
        "port": 3000,
        "cors_origins": ["*"],
        "rate_limit": "30/minute",
        "max_pending_results": 100,
    },
    "storage": {
        "backend": "json",  # or "mongodb"
        "directory": "./interview_data",
        "mongodb_uri": "mongodb://localhost:27017/",
        "mongodb_database": "interview_grader",
        "results_collection": "interview_results",
    },
    "interview": {
        "question_bank": None,  # None means the packaged question bank
        "theory_count": 10,
        "coding_count": 10,
    },
    "reports": {
        "output_dir": "reports",
    },
    "logging": {
        "level": "INFO",
        "file": None,
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        "datefmt": "%Y-%m-%d %H:%M:%S",
    },
}

_ENV_OVERRIDES = {
    # env var: (section, key, cast)
    "SERVER_HOST": ("server", "host", str),
    "PORT": ("server", "port", int),
    "RATE_LIMIT": ("server", "rate_limit", str),
    "MAX_PENDING_RESULTS": ("server", "max_pending_results", int),
    "STORAGE_BACKEND": ("storage", "backend", str),
    "STORAGE_DIR": ("storage", "directory", str),
    "MONGODB_URI": ("storage", "mongodb_uri", str),
    "MONGODB_DATABASE": ("storage", "mongodb_database", str),
    "MONGODB_RESULTS_COLLECTION": ("storage", "results_collection", str),
    "QUESTION_BANK_PATH": ("interview", "question_bank", str),
    "THEORY_COUNT": ("interview", "theory_count", int),
    "CODING_COUNT": ("interview", "coding_count", int),
    "REPORTS_DIR": ("reports", "output_dir", str),
    "LOG_LEVEL": ("logging", "level", str),
    "LOG_FILE": ("logging", "file", str),
}


def _default_config_path() -> str:
    return os.environ.get(
        "INTERVIEW_GRADER_CONFIG",
        os.path.join(os.path.dirname(__file__), "..", "..", "config.yaml"),
    )


def load_config(config_path: Optional[str] = None) -> dict:
    """Load configuration from config.yaml or use defaults, then apply environment overrides."""
    config_path = config_path or _default_config_path()

    config = copy.deepcopy(DEFAULT_CONFIG)  # Start with defaults

    if os.path.exists(config_path):
        try:
            with open(config_path, "r") as f:
                yaml_config = yaml.safe_load(f)

            # Deep merge YAML config into defaults
            if yaml_config:
                for key, value in yaml_config.items():
                    if isinstance(value, dict) and isinstance(config.get(key), dict):
                        config[key].update(value)
                    else:
                        config[key] = value
            logger.info(f"Loaded configuration from {config_path}")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error loading {config_path}: {e}. Using default configuration.")
    else:
        logger.debug(f"{config_path} not found. Using default configuration.")

    # Override with environment variables where available
    for env_name, (section, key, cast) in _ENV_OVERRIDES.items():
        raw = os.environ.get(env_name)
        if raw is None or raw == "":
            continue
        try:
            config[section][key] = cast(raw)
        except ValueError:
            logger.warning(f"Invalid {env_name} in environment, using default.")

    config["logging"]["level"] = str(config["logging"]["level"]).upper()
    config["storage"]["backend"] = str(config["storage"]["backend"]).lower()

    return config


# Load configuration once
CONFIG = load_config()


def get_server_config() -> dict:
    """Get HTTP server configuration."""
    return CONFIG.get("server", {})


def get_storage_config() -> dict:
    """Get result storage configuration."""
    return CONFIG.get("storage", {})


def get_interview_config() -> dict:
    """Get interview composition configuration."""
    return CONFIG.get("interview", {})


def get_reports_config() -> dict:
    return CONFIG.get("reports", {})


def get_logging_config() -> dict:
    """Get logging configuration."""
    return CONFIG.get("logging", {})


def log_config(level: Optional[str] = None, print_config: bool = False):
    """Configure application-wide logging and optionally print the config."""
    from interview_grader.utils.logging_utils import setup_logging

    log_cfg = get_logging_config()
    log_level = (level or log_cfg.get("level", "INFO")).upper()

    setup_logging(
        log_level=log_level,
        log_file=log_cfg.get("file"),
        log_format=log_cfg.get("format"),
        datefmt=log_cfg.get("datefmt"),
    )

    if print_config:
        # Connection strings may carry credentials
        printable_config = copy.deepcopy(CONFIG)
        if "@" in str(printable_config.get("storage", {}).get("mongodb_uri", "")):
            printable_config["storage"]["mongodb_uri"] = "***REDACTED***"

        logger.info(f"Current configuration (redacted):\n{yaml.dump(printable_config, indent=2)}")


if __name__ == "__main__":
    log_config(print_config=True)
