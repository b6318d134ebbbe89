"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar steps ni CLI.
- Dispatcher, accessor y CLI leen la misma configuración, resuelta una sola vez.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.agify.io"
DEFAULT_TIMEOUT_MS = 8000
# Fijo: la API pública limita por ráfaga, no es configurable por entorno.
MIN_REQUEST_INTERVAL_MS = 1000

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "agify-bdd"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "agify-bdd"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "agify-bdd"
    return Path.home() / ".config" / "agify-bdd"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# agify-bdd user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración inmutable del cliente de pruebas.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el dispatcher.
    - `frozen=True`: se crea una vez al arrancar y nadie la muta después.
    """

    model_config = SettingsConfigDict(
        env_prefix="AGIFY_",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        populate_by_name=True,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        min_length=8,
        description="Base URL de la API de estimación de edad.",
    )
    timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS,
        gt=0,
        validation_alias="AGIFY_TIMEOUT",
        description="Timeout por request (milisegundos).",
    )
    api_key: str = Field(
        default="",
        description="API key opcional; vacía significa omitir el header x-api-key.",
    )

    @field_validator("base_url", mode="before")
    @classmethod
    def _default_blank_base_url(cls, value: object) -> str:
        # `AGIFY_BASE_URL=` vacío equivale a no definirla.
        if value is None or not str(value).strip():
            return DEFAULT_BASE_URL
        return str(value).strip()

    @field_validator("timeout_ms", mode="before")
    @classmethod
    def _coerce_timeout(cls, value: object) -> int:
        # Entero inicial ("2500.7" -> 2500, "12abc" -> 12); sin dígitos se usa el default.
        match = _LEADING_INT.match(str(value))
        if match is None:
            logger.warning("AGIFY_TIMEOUT=%r is not an integer; using %d ms", value, DEFAULT_TIMEOUT_MS)
            return DEFAULT_TIMEOUT_MS
        parsed = int(match.group(1))
        if parsed <= 0:
            logger.warning("AGIFY_TIMEOUT=%r is not positive; using %d ms", value, DEFAULT_TIMEOUT_MS)
            return DEFAULT_TIMEOUT_MS
        return parsed

    @field_validator("api_key", mode="before")
    @classmethod
    def _strip_api_key(cls, value: object) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @property
    def min_request_interval_ms(self) -> int:
        return MIN_REQUEST_INTERVAL_MS

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    @property
    def min_request_interval_seconds(self) -> float:
        return self.min_request_interval_ms / 1000.0


@lru_cache(maxsize=1)
def load_settings() -> AppSettings:
    """Resuelve la configuración una sola vez por proceso."""

    settings = AppSettings()
    logger.debug(
        "Loaded settings: base_url=%s timeout_ms=%d api_key=%s",
        settings.base_url,
        settings.timeout_ms,
        "set" if settings.api_key else "unset",
    )
    return settings
