import tomllib
import os
import logging
from typing import Dict, Any

CONFIG_FILE_PATH = "pyproject.toml"

DEFAULT_API_CLIENT_CONFIG = {
    "base_url": "https://public.purldb.io",
    "max_retries": 3,
    "backoff_factor": 0.5,
    "status_forcelist": [429, 500, 502, 503, 504],
    "timeout": 10.0,
    "logging_level": "INFO",
    "max_workers": None,  # If None, will be calculated as min(32, os.cpu_count() + 4)
    "default_rate_limit_retry_after": 5.0,
    "max_pages": 5,
    "viewer_base_url": "https://s-celles.github.io/package-url-viewer/",
}

def get_logging_level_from_string(level_str: str) -> int:
    """Converts a logging level string to its integer value."""
    return getattr(logging, level_str.upper(), logging.INFO)

def _positive_number(value: Any, key: str, default: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        return value
    logging.getLogger(__name__).warning(
        f"Invalid value for '{key}' in {CONFIG_FILE_PATH}: {value!r}. Using default {default!r}."
    )
    return default

def load_api_client_config(path: str = CONFIG_FILE_PATH) -> Dict[str, Any]:
    """
    Loads PurlDB client and viewer configuration from the [tool.purlviewer] table of pyproject.toml.
    Falls back to default values if the file or specific keys are not found.
    The `PURLDB_API` environment variable overrides the PurlDB base URL.
    """
    config = DEFAULT_API_CLIENT_CONFIG.copy()
    config["status_forcelist"] = tuple(DEFAULT_API_CLIENT_CONFIG["status_forcelist"])

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
            tool_config = data.get("tool", {}).get("purlviewer", {})

            api_client_settings = tool_config.get("api_client", {})
            if api_client_settings:
                config["base_url"] = api_client_settings.get("base_url", config["base_url"])
                config["max_retries"] = api_client_settings.get("max_retries", config["max_retries"])
                config["backoff_factor"] = api_client_settings.get("backoff_factor", config["backoff_factor"])

                status_forcelist_from_toml = api_client_settings.get("status_forcelist", config["status_forcelist"])
                if isinstance(status_forcelist_from_toml, (list, tuple)) and all(isinstance(x, int) for x in status_forcelist_from_toml):
                    config["status_forcelist"] = tuple(status_forcelist_from_toml)
                else:
                    logging.getLogger(__name__).warning(
                        f"Invalid format for 'status_forcelist' in {path}. Using default. "
                        f"Expected list of integers, got: {status_forcelist_from_toml}"
                    )

                if "timeout" in api_client_settings:
                    config["timeout"] = _positive_number(
                        api_client_settings["timeout"], "timeout", config["timeout"]
                    )
                if "max_pages" in api_client_settings:
                    config["max_pages"] = _positive_number(
                        api_client_settings["max_pages"], "max_pages", config["max_pages"]
                    )

                config["logging_level"] = api_client_settings.get("logging_level", config["logging_level"])
                config["max_workers"] = api_client_settings.get("max_workers", config["max_workers"])
                config["default_rate_limit_retry_after"] = api_client_settings.get("default_rate_limit_retry_after", config["default_rate_limit_retry_after"])

            viewer_settings = tool_config.get("viewer", {})
            if viewer_settings:
                config["viewer_base_url"] = viewer_settings.get("base_url", config["viewer_base_url"])

    except FileNotFoundError:
        logging.getLogger(__name__).info(f"{path} not found. Using default configurations.")
    except tomllib.TOMLDecodeError:
        logging.getLogger(__name__).error(f"Error decoding {path}. Using default configurations.")

    # Environment variable overrides pyproject.toml for the PurlDB endpoint.
    config["base_url"] = os.getenv("PURLDB_API", config["base_url"])

    config["logging_level_int"] = get_logging_level_from_string(str(config["logging_level"]))

    return config

# Load configuration once when the module is imported.
API_CONFIG = load_api_client_config()
