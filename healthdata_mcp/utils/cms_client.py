# healthdata_mcp/utils/cms_client.py
"""Query building for the CMS ``data-api/v1`` dataset endpoints.

Column filters use the JSONAPI-style grouped syntax::

    filter[filter-N][condition][path]=<column>
    filter[filter-N][condition][operator]==
    filter[filter-N][condition][value]=<value>

``N`` is a fixed slot per request field so that adding a field never
renumbers the others.
"""
from __future__ import annotations

from typing import NamedTuple

from ..mappers import upstream_column
from ..models import ClaimsSearchRequest, DatasetVariant, FlatRecordList
from .http_client import UpstreamClient

_GEO = DatasetVariant.GEOGRAPHY_AND_SERVICE
_PROV_SVC = DatasetVariant.PROVIDER_AND_SERVICE
_PROV = DatasetVariant.PROVIDER

# Medicare Physician & Other Practitioners datasets
DATASET_IDS: dict[DatasetVariant, str] = {
    _GEO: "6fea9d79-0129-4e4c-b1b8-23cd86a4f435",
    _PROV_SVC: "92396110-2aed-4d63-a6a2-5d6207d46a29",
    _PROV: "8889d81e-2ee7-448f-8713-f071038289b5",
}


class FilterSlot(NamedTuple):
    slot: int
    paths: dict[DatasetVariant, str]


FILTER_SLOTS: dict[str, FilterSlot] = {
    "hcpcs_code": FilterSlot(1, {_GEO: "HCPCS_Cd", _PROV_SVC: "HCPCS_Cd"}),
    "geo_level": FilterSlot(2, {_GEO: "Rndrng_Prvdr_Geo_Lvl"}),
    "geo_code": FilterSlot(
        3,
        {
            _GEO: "Rndrng_Prvdr_Geo_Cd",
            _PROV_SVC: "Rndrng_Prvdr_State_Abrvtn",
            _PROV: "Rndrng_Prvdr_State_Abrvtn",
        },
    ),
    "place_of_service": FilterSlot(4, {_GEO: "Place_Of_Srvc", _PROV_SVC: "Place_Of_Srvc"}),
    "npi": FilterSlot(5, {_PROV_SVC: "Rndrng_NPI", _PROV: "Rndrng_NPI"}),
    "provider_type": FilterSlot(6, {_PROV_SVC: "Rndrng_Prvdr_Type", _PROV: "Rndrng_Prvdr_Type"}),
}


def dataset_url(base_url: str, variant: DatasetVariant) -> str:
    return f"{base_url.rstrip('/')}/dataset/{DATASET_IDS[variant]}/data"


def build_filter_params(req: ClaimsSearchRequest) -> list[tuple[str, str]]:
    params: list[tuple[str, str]] = []
    for field, spec in FILTER_SLOTS.items():
        value = getattr(req, field)
        path = spec.paths.get(req.dataset_type)
        # fields that make no sense for this dataset are ignored
        if value is None or path is None:
            continue
        group = f"filter[filter-{spec.slot}][condition]"
        params += [
            (f"{group}[path]", path),
            (f"{group}[operator]", "="),
            (f"{group}[value]", str(value)),
        ]
    return params


def build_claims_params(req: ClaimsSearchRequest) -> list[tuple[str, str]]:
    params = [("size", str(req.size)), ("offset", str(req.offset))]
    if req.keyword:
        params.append(("keyword", req.keyword))
    params += build_filter_params(req)
    if req.sort is not None:
        column = upstream_column(req.dataset_type, req.sort.field)
        params.append(("sort", f"-{column}" if req.sort.direction == "desc" else column))
    return params


async def search_dataset(
    client: UpstreamClient, base_url: str, req: ClaimsSearchRequest, *, tool: str
) -> FlatRecordList:
    url = dataset_url(base_url, req.dataset_type)
    data = await client.get_json(url, build_claims_params(req), tool=tool)
    return FlatRecordList.from_payload(data)
