# healthdata_mcp/tools/__init__.py
from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping, NamedTuple

from pydantic import BaseModel

from ..config import Settings
from ..utils.http_client import UpstreamClient
from . import claims, icd10, npi

ToolHandler = Callable[[Mapping[str, Any], UpstreamClient, Settings], Awaitable[dict[str, Any]]]


class ToolEntry(NamedTuple):
    handler: ToolHandler
    request_model: type[BaseModel]


ALL: dict[str, ToolEntry] = {
    icd10.NAME: ToolEntry(icd10.search_icd10cm_codes, icd10.REQUEST_MODEL),
    npi.NAME: ToolEntry(npi.search_npi_providers, npi.REQUEST_MODEL),
    claims.NAME: ToolEntry(claims.search_medicare_claims, claims.REQUEST_MODEL),
}
