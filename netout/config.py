"""Configuration loading from defaults, an optional YAML file, and env vars."""

import os
import logging
from dataclasses import dataclass, fields

import yaml

logger = logging.getLogger(__name__)

DEFAULT_POST_URL = "https://lc.llnl.gov"


@dataclass(frozen=True)
class Config:
    trigger: str = ""          # colon-separated attribute names
    formatstring: str = ""     # empty -> default template
    filename: str = "stdout"   # stdout | stderr | none | file path
    posturl: str = DEFAULT_POST_URL
    sink: str = "stream"       # stream | remote
    timeout: float = 5.0       # seconds per remote delivery

    @property
    def trigger_names(self) -> tuple[str, ...]:
        return parse_trigger_list(self.trigger)


def parse_trigger_list(value: str) -> tuple[str, ...]:
    """Split a colon-separated list, dropping empties and repeated names."""
    names: list[str] = []
    for part in value.split(":"):
        name = part.strip()
        if name and name not in names:
            names.append(name)
    return tuple(names)


def load_yaml_config(path: str | None = None) -> dict:
    """Load config keys from a YAML file. Returns empty dict if no path.

    The path falls back to the ``NETOUT_CONFIG`` environment variable.
    """
    path = path or os.environ.get("NETOUT_CONFIG")
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as e:
        logger.warning("Invalid YAML in %s, using defaults: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, ignoring it", path)
        return {}
    # Allow both a flat file and one nested under a "netout" section
    if isinstance(data.get("netout"), dict):
        data = data["netout"]
    logger.info("Loaded YAML config from %s", path)
    return data


def load_config(yaml_data: dict | None = None) -> Config:
    """Build Config from defaults <- YAML data <- NETOUT_* env vars."""
    known = {f.name for f in fields(Config)}
    kwargs: dict = {}

    for key, value in (yaml_data or {}).items():
        if key in known:
            kwargs[key] = value
        else:
            logger.warning("Ignoring unknown config key %r", key)

    for key in known:
        env_value = os.environ.get(f"NETOUT_{key.upper()}")
        if env_value is not None:
            kwargs[key] = env_value

    for key in ("trigger", "formatstring", "filename", "posturl", "sink"):
        if key in kwargs:
            kwargs[key] = "" if kwargs[key] is None else str(kwargs[key])
    if "sink" in kwargs:
        kwargs["sink"] = kwargs["sink"].strip().lower()
    if "timeout" in kwargs:
        try:
            timeout = float(kwargs["timeout"])
        except (TypeError, ValueError):
            timeout = -1.0
        if timeout > 0:
            kwargs["timeout"] = timeout
        else:
            logger.warning("Invalid timeout %r, using default %.1fs",
                           kwargs["timeout"], Config.timeout)
            del kwargs["timeout"]

    return Config(**kwargs)
