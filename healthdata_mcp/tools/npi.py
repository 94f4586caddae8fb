# healthdata_mcp/tools/npi.py
from __future__ import annotations

from typing import Any, Mapping

from ..config import Settings
from ..mappers import map_npi_providers
from ..models import NpiSearchRequest, parse_request
from ..utils.http_client import UpstreamClient
from ..utils.nlm_client import search_table

NAME = "search_npi_providers"
REQUEST_MODEL = NpiSearchRequest


async def search_npi_providers(
    args: Mapping[str, Any], client: UpstreamClient, settings: Settings
) -> dict[str, Any]:
    req = parse_request(NpiSearchRequest, args)
    table = await search_table(client, settings.npi_base_url, req, tool=NAME)
    result = map_npi_providers(table, req)

    lim = settings.max_results_for(NAME)
    if lim is not None:
        result["providers"] = result["providers"][:lim]
    return result
