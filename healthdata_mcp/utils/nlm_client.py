# healthdata_mcp/utils/nlm_client.py
"""Helpers around the NLM Clinical Tables ``/search`` API.

Every table answers with the same positional array:
``[total, ids, extra_fields_or_null, display_rows]``.
"""
from __future__ import annotations

from ..models import PositionalTable, TableSearchRequest
from .http_client import UpstreamClient


def build_table_search_params(req: TableSearchRequest) -> list[tuple[str, str]]:
    params = [
        ("terms", req.terms),
        ("maxList", str(req.maxList)),
        ("count", str(req.count)),
        ("offset", str(req.offset)),
        ("df", req.df),
        ("sf", req.sf),
        ("cf", req.cf),
    ]
    # absent and empty mean different things upstream
    if req.q:
        params.append(("q", req.q))
    if req.ef:
        params.append(("ef", req.ef))
    return params


async def search_table(
    client: UpstreamClient, base_url: str, req: TableSearchRequest, *, tool: str
) -> PositionalTable:
    data = await client.get_json(base_url, build_table_search_params(req), tool=tool)
    return PositionalTable.from_payload(data)
