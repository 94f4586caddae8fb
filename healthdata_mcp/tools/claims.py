# healthdata_mcp/tools/claims.py
from __future__ import annotations

from typing import Any, Mapping

from ..config import Settings
from ..mappers import map_claims
from ..models import ClaimsSearchRequest, parse_request
from ..utils.cms_client import search_dataset
from ..utils.http_client import UpstreamClient

NAME = "search_medicare_claims"
REQUEST_MODEL = ClaimsSearchRequest


async def search_medicare_claims(
    args: Mapping[str, Any], client: UpstreamClient, settings: Settings
) -> dict[str, Any]:
    req = parse_request(ClaimsSearchRequest, args)
    records = await search_dataset(client, settings.cms_base_url, req, tool=NAME)
    result = map_claims(records, req)

    lim = settings.max_results_for(NAME)
    if lim is not None:
        result["claims"] = result["claims"][:lim]
        result["total"] = len(result["claims"])
    return result
