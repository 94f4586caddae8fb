# healthdata_mcp/tools/icd10.py
from __future__ import annotations

from typing import Any, Mapping

from ..config import Settings
from ..mappers import map_icd10_codes
from ..models import Icd10SearchRequest, parse_request
from ..utils.http_client import UpstreamClient
from ..utils.nlm_client import search_table

NAME = "search_icd10cm_codes"
REQUEST_MODEL = Icd10SearchRequest


async def search_icd10cm_codes(
    args: Mapping[str, Any], client: UpstreamClient, settings: Settings
) -> dict[str, Any]:
    req = parse_request(Icd10SearchRequest, args)
    table = await search_table(client, settings.icd10cm_base_url, req, tool=NAME)
    result = map_icd10_codes(table, req)

    lim = settings.max_results_for(NAME)
    if lim is not None:
        result["codes"] = result["codes"][:lim]
    return result
