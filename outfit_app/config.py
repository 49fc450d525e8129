"""Configuration helpers for the weather outfit service."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_OPENWEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"
DEFAULT_CWA_BASE_URL = "https://opendata.cwa.gov.tw/api/v1/rest/datastore"
DEFAULT_CITY = "台北市"


@dataclass
class AppConfig:
    """Configuration values for the weather outfit service.

    Provider selection is static per deployment. Credentials are opaque strings
    injected at process start; a missing credential only becomes an error when
    the provider path that needs it is exercised.
    """

    weather_provider: str = "openweather"
    openweather_api_key: Optional[str] = None
    openweather_base_url: str = DEFAULT_OPENWEATHER_BASE_URL
    cwa_api_key: Optional[str] = None
    cwa_base_url: str = DEFAULT_CWA_BASE_URL
    request_timeout_seconds: float = 5.0
    media_base_url: str = ""
    media_static_dir: Optional[str] = None
    media_preload_timeout_seconds: float = 5.0
    default_city: str = DEFAULT_CITY
    default_gender: str = "male"
    environment: str | None = None

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default and is merged with environment variables so that API keys can be
        injected by the runtime environment.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("APP_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        def get_float(key: str, default: float) -> float:
            raw = get_value(key)
            if raw in (None, ""):
                return default
            try:
                return float(raw)
            except ValueError as exc:
                raise ValueError(f"{key} must be numeric, got {raw!r}") from exc

        return cls(
            weather_provider=str(get_value("weather_provider", "openweather") or "openweather"),
            openweather_api_key=get_value("openweather_api_key") or None,
            openweather_base_url=str(
                get_value("openweather_base_url", DEFAULT_OPENWEATHER_BASE_URL) or DEFAULT_OPENWEATHER_BASE_URL
            ),
            cwa_api_key=get_value("cwa_api_key") or None,
            cwa_base_url=str(get_value("cwa_base_url", DEFAULT_CWA_BASE_URL) or DEFAULT_CWA_BASE_URL),
            request_timeout_seconds=get_float("request_timeout_seconds", 5.0),
            media_base_url=str(get_value("media_base_url", "") or ""),
            media_static_dir=get_value("media_static_dir") or None,
            media_preload_timeout_seconds=get_float("media_preload_timeout_seconds", 5.0),
            default_city=str(get_value("default_city", DEFAULT_CITY) or DEFAULT_CITY),
            default_gender=str(get_value("default_gender", "male") or "male"),
            environment=env_name,
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a minimal YAML/INI-style config without external dependencies."""

        config: dict[str, str] = {}
        for line in path.read_text(encoding="utf-8").splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config
