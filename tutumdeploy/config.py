"""Deploy configuration: project defaults plus optional YAML overrides."""

import logging
import os
from dataclasses import dataclass, field, fields

import yaml

from tutumdeploy.errors import DeployError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "tutumdeploy.yaml"


@dataclass
class DeployConfig:
    """Project-wide settings shared by every deploy."""

    stack_prefix: str = "yniche"
    domain: str = "yniche.com"
    production_branch: str = "production"
    template_dir: str = "."
    # Locked tag variable -> image whose registry must carry that tag
    locked_images: dict = field(default_factory=lambda: {"LOCKED_API_TAG": "tutum.co/yniche/api.yniche.com"})
    tutum_bin: str = "tutum"
    dns_flush_command: str = "sudo -n killall -HUP mDNSResponder"
    strict: bool = False
    probe: bool = True
    probe_timeout: float = 10.0


def _check_types(raw, config_path):
    for f in fields(DeployConfig):
        if f.name not in raw:
            continue
        value = raw[f.name]
        # ints are fine for float fields; bool (an int subclass) only for bool fields
        accepted = (int, float) if f.type is float else f.type
        if not isinstance(value, accepted) or (f.type is not bool and isinstance(value, bool)):
            raise DeployError(
                f"Config key '{f.name}' in {config_path} must be a {f.type.__name__}, got {type(value).__name__}."
            )
    for key, image in raw.get("locked_images", {}).items():
        if not isinstance(key, str) or not isinstance(image, str):
            raise DeployError(f"Config key 'locked_images' in {config_path} must map tag variables to image names.")


def load_config(config_path=None) -> DeployConfig:
    """Load a DeployConfig, overriding defaults from a YAML file.

    Without an explicit path, ``tutumdeploy.yaml`` in the working directory
    is used when present. An explicit path that does not exist is an error.
    """
    if config_path is None:
        if not os.path.isfile(DEFAULT_CONFIG_FILE):
            return DeployConfig()
        config_path = DEFAULT_CONFIG_FILE

    try:
        with open(config_path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise DeployError(f"Config file '{config_path}' not found.") from None
    except UnicodeDecodeError:
        raise DeployError(f"Config file {config_path} is not valid UTF-8.") from None
    except yaml.YAMLError as e:
        raise DeployError(f"Error parsing YAML config {config_path}: {e}") from None

    if not isinstance(raw, dict):
        raise DeployError(f"Config file {config_path} must contain a mapping.")

    known = {f.name for f in fields(DeployConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise DeployError(f"Unknown config keys in {config_path}: {', '.join(unknown)}")

    _check_types(raw, config_path)
    logger.debug(f"Loaded config overrides from {config_path}: {sorted(raw)}")
    return DeployConfig(**raw)
