"""Optional YAML configuration for the podfeed command."""

import yaml

from podfeed.exceptions import ConfigError

DEFAULTS = {
    "strict_tags": False,
    "markdown": False,
    "output_file": "-",
}


def read_config(yaml_file_path):
    """Read podfeed settings from a YAML file.

    Args:
        yaml_file_path (str): Path to the YAML configuration file, or None.

    Returns:
        dict: DEFAULTS updated with the values found in the file.

    Raises:
        ConfigError: The file is missing, is not valid YAML, or holds
            unknown or mistyped settings.
    """
    config = dict(DEFAULTS)
    if yaml_file_path is None:
        return config

    try:
        with open(yaml_file_path, "r", encoding="utf-8") as file:
            loaded = yaml.safe_load(file)
    except FileNotFoundError:
        raise ConfigError(f"Config file '{yaml_file_path}' not found.")
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in '{yaml_file_path}': {e}") from e
    except OSError as e:
        raise ConfigError(f"Error reading config file '{yaml_file_path}': {e}") from e

    # An empty file loads as None
    if loaded is None:
        return config
    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file '{yaml_file_path}' must contain a mapping")

    errors = validate_config(loaded)
    if errors:
        raise ConfigError(
            f"Config validation failed for '{yaml_file_path}': " + "; ".join(errors)
        )

    config.update(loaded)
    return config


def validate_config(config):
    """Return a list of problems with the settings in config."""
    errors = []
    for key, value in config.items():
        if key not in DEFAULTS:
            errors.append(f"Unknown setting '{key}'")
        elif not isinstance(value, type(DEFAULTS[key])):
            errors.append(
                f"Setting '{key}' must be a {type(DEFAULTS[key]).__name__}"
            )
    return errors
