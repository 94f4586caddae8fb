# healthdata_mcp/config.py
from __future__ import annotations

import os
from pathlib import Path
from functools import lru_cache
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field

ALL_TOOL_NAMES = [
    "search_icd10cm_codes",
    "search_npi_providers",
    "search_medicare_claims",
]


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class ToolLimit(BaseModel):
    max_results: int | None = Field(default=None, ge=0)
    timeout_s: float | None = Field(default=None, gt=0)


class Settings(BaseModel):
    model_config = ConfigDict(validate_default=True)

    # ── tool toggles ─────────────────────────────────────────────
    enabled: list[str] = Field(default_factory=lambda: list(ALL_TOOL_NAMES))

    # ── per-tool limits ─────────────────────────────────────────
    limits: dict[str, ToolLimit] = Field(default_factory=dict)

    # ── transport selection ─────────────────────────────────────
    use_http: bool = Field(default_factory=lambda: _env_flag("USE_HTTP"))
    host: str = Field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", "3000")))
    transport: Literal["stdio", "http", "sse"] = Field(
        default_factory=lambda: os.getenv("TRANSPORT", "stdio")
    )
    mcp_path: str = Field(default_factory=lambda: os.getenv("SSE_PATH", "/mcp"))

    log_level: Literal["error", "warn", "info", "debug"] = Field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "info").lower()
    )

    # ── upstream services ───────────────────────────────────────
    timeout_s: float = Field(
        default_factory=lambda: float(os.getenv("UPSTREAM_TIMEOUT_S", "30")), gt=0
    )
    icd10cm_base_url: str = Field(
        default_factory=lambda: os.getenv(
            "ICD10CM_BASE_URL", "https://clinicaltables.nlm.nih.gov/api/icd10cm/v3/search"
        )
    )
    npi_base_url: str = Field(
        default_factory=lambda: os.getenv(
            "NPI_BASE_URL", "https://clinicaltables.nlm.nih.gov/api/npi_idv/v3/search"
        )
    )
    cms_base_url: str = Field(
        default_factory=lambda: os.getenv("CMS_BASE_URL", "https://data.cms.gov/data-api/v1")
    )

    def timeout_for(self, tool_name: str) -> float:
        lim = self.limits.get(tool_name)
        if lim is not None and lim.timeout_s:
            return lim.timeout_s
        return self.timeout_s

    def max_results_for(self, tool_name: str) -> int | None:
        lim = self.limits.get(tool_name)
        return lim.max_results if lim is not None else None


def load_settings(yaml_path: Path | None = None) -> Settings:
    yaml_path = yaml_path or Path(__file__).with_name("tools.yaml")
    raw = yaml.safe_load(yaml_path.read_text()) if yaml_path.exists() else {}
    return Settings(**(raw or {}))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
