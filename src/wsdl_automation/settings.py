"""
Settings for the document-serving HTTP facade.

All values can be overridden via environment variables prefixed with
``WSDL_`` (``WSDL_NAMESPACE``, ``WSDL_SOURCE_FILES='["svc.php"]'``, ...).
"""

from __future__ import annotations

from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings


class WsdlServiceSettings(BaseSettings):
    """Settings for the WSDL facade.

    Order of precedence (highest → lowest):
        1. Environment variables (``WSDL_ENDPOINT``, etc.)
        2. ``.env`` file
        3. Defaults below

    ``namespace`` and ``endpoint`` are derived from the request URL when
    left unset.
    """

    # ── Server ───────────────────────────────────────────────────────────
    host: str = Field(default="127.0.0.1", description="Bind address")
    port: int = Field(default=8080, description="Bind port")
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Render log events as JSON")

    # ── Document ─────────────────────────────────────────────────────────
    namespace: str | None = Field(default=None, description="Target namespace")
    endpoint: str | None = Field(default=None, description="SOAP endpoint URI")
    service_name: str = Field(default="", description="Service name (or use @service)")
    source_files: list[str] = Field(default_factory=list, description="Annotated source files")
    config_file: str | None = Field(default=None, description="YAML generator configuration")
    include_desc: bool = Field(default=False, description="Embed descriptions in readable documents")
    cache_documents: bool = Field(default=True, description="Cache compact documents")
    cache_ttl_seconds: float | None = Field(default=3600, description="Lifetime of a cached document (None = no expiry)")

    # ── Auth ─────────────────────────────────────────────────────────────
    user: str | None = Field(default=None, description="HTTP basic auth user")
    password: str | None = Field(default=None, description="HTTP basic auth password")

    model_config: dict[str, Any] = {
        "env_prefix": "WSDL_",
        "env_file": ".env",
        "extra": "ignore",
    }
