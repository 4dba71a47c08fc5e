"""Runtime settings model."""
import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, Field, field_validator

_FALSE_VALUES = {"0", "false", "no", "off"}


class TailerSettings(BaseModel):
    """Settings consumed by the log tailer, usually read from the environment."""

    docker_host: Optional[str] = Field(None, description="Docker host endpoint")
    cert_path: Optional[str] = Field(None, description="Directory holding ca.pem, cert.pem and key.pem")
    pretty_json: bool = Field(True, description="Pretty-print JSON embedded in log lines")
    prefix: str = Field("", description="Only tail containers whose name starts with this")
    retry_interval: float = Field(5.0, ge=0, description="Seconds between connection retries")
    log_level: str = Field("INFO", description="Log level for the tailer's own messages")

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def use_tls(self) -> bool:
        return bool(self.docker_host and self.cert_path)

    @property
    def tls_ca(self) -> Path:
        return Path(self.cert_path or "") / "ca.pem"

    @property
    def tls_cert(self) -> Path:
        return Path(self.cert_path or "") / "cert.pem"

    @property
    def tls_key(self) -> Path:
        return Path(self.cert_path or "") / "key.pem"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TailerSettings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from, defaults to `os.environ`.

        Returns:
            TailerSettings with unset variables left at their defaults.
        """
        env = os.environ if environ is None else environ
        values: dict = {
            "docker_host": env.get("DOCKER_HOST") or None,
            "cert_path": env.get("DOCKER_CERT_PATH") or None,
            "prefix": env.get("DOCKTAILS_PREFIX", ""),
            "log_level": env.get("LOG_LEVEL", "INFO"),
        }
        if "DOCKTAILS_JSON" in env:
            values["pretty_json"] = env["DOCKTAILS_JSON"].strip().lower() not in _FALSE_VALUES
        if env.get("DOCKTAILS_RETRY_INTERVAL"):
            values["retry_interval"] = env["DOCKTAILS_RETRY_INTERVAL"]
        return cls(**values)
