import logging
import os
from dataclasses import dataclass
from typing import Any, Dict

import yaml

from providers.openai import DEFAULT_BASE_URL

logger = logging.getLogger(__name__)


class MissingApiKeyError(RuntimeError):
    pass


@dataclass(frozen=True)
class Settings:
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    log_level: str = "INFO"

    def __repr__(self) -> str:
        return f"Settings(base_url={self.base_url!r}, log_level={self.log_level!r}, api_key='***')"

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from the optional YAML file, then the environment.

        Environment variables win over the file. The API key is only ever
        read from OPENAI_API_KEY.
        """
        file_cfg = _load_config_file()

        api_key = os.getenv("OPENAI_API_KEY", "").strip()
        if not api_key:
            raise MissingApiKeyError("OPENAI_API_KEY must be set in environment")

        base_url = os.getenv("OPENAI_BASE_URL", "").strip() or str(file_cfg.get("base_url") or DEFAULT_BASE_URL)
        log_level = os.getenv("LOG_LEVEL", "").strip() or str(file_cfg.get("log_level") or "INFO")
        return cls(api_key=api_key, base_url=base_url, log_level=log_level.upper())


def _load_config_file() -> Dict[str, Any]:
    path = os.getenv(
        "GATEWAY_CONFIG_PATH",
        os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "config", "gateway.yaml"),
    )
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.info("Gateway config not found at %s; using environment only", path)
        return {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load gateway config %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Gateway config %s is not a mapping; ignoring it", path)
        return {}
    return data
