"""
Shared fixtures: a stub upstream behind httpx.MockTransport and the gateway
objects wired to it. Nothing here touches the network.
"""
from __future__ import annotations

from typing import Any

import httpx
import pytest
from starlette.testclient import TestClient

from healthdata_mcp.config import Settings
from healthdata_mcp.dispatch import ToolDispatcher
from healthdata_mcp.http_app import create_http_app
from healthdata_mcp.utils.cms_client import DATASET_IDS
from healthdata_mcp.models import DatasetVariant
from healthdata_mcp.utils.http_client import UpstreamClient

ICD10_URL = "https://clinicaltables.test/api/icd10cm/v3/search"
NPI_URL = "https://clinicaltables.test/api/npi_idv/v3/search"
CMS_URL = "https://data.cms.test/data-api/v1"

ICD10_PATH = "/api/icd10cm/v3/search"
NPI_PATH = "/api/npi_idv/v3/search"


def cms_path(variant: DatasetVariant) -> str:
    return f"/data-api/v1/dataset/{DATASET_IDS[variant]}/data"


TUBERC_PAYLOAD = [
    78,
    ["A15.0", "A15.4"],
    None,
    [["A15.0", "Tuberculosis of lung"], ["A15.4", "Tuberculosis of intrathoracic lymph nodes"]],
]

NPI_PAYLOAD = [
    2,
    ["1234567890", "1098765432"],
    None,
    [
        ["1234567890", "JOHN SMITH", "Family Medicine", "100 MAIN ST, SPRINGFIELD, IL 62701"],
        ["1098765432", "JOHN A SMITH", "Cardiology"],
    ],
]

PROVIDER_ROWS = [
    {
        "Rndrng_NPI": "1003000126",
        "Rndrng_Prvdr_Last_Org_Name": "Smith",
        "Rndrng_Prvdr_First_Name": "Jane",
        "Rndrng_Prvdr_MI": "A",
        "Rndrng_Prvdr_Crdntls": "M.D.",
        "Rndrng_Prvdr_Ent_Cd": "I",
        "Rndrng_Prvdr_City": "Los Angeles",
        "Rndrng_Prvdr_State_Abrvtn": "CA",
        "Rndrng_Prvdr_Zip5": "90001",
        "Rndrng_Prvdr_Type": "Cardiology",
        "Tot_HCPCS_Cds": "42",
        "Tot_Benes": "3120",
        "Tot_Srvcs": "10450.5",
        "Tot_Sbmtd_Chrg": "2500000.25",
        "Tot_Mdcr_Alowd_Amt": "800000",
        "Tot_Mdcr_Pymt_Amt": "640000.10",
        "Tot_Mdcr_Stdzd_Amt": "620000",
        "Bene_Avg_Age": "74",
        "Bene_Avg_Risk_Scre": "1.83",
    },
    {
        "Rndrng_NPI": "1003000134",
        "Rndrng_Prvdr_Last_Org_Name": "Doe",
        "Rndrng_Prvdr_First_Name": "John",
        "Rndrng_Prvdr_MI": "",
        "Rndrng_Prvdr_Type": "Cardiology",
        "Tot_HCPCS_Cds": "7",
    },
]

GEO_ROWS = [
    {
        "Rndrng_Prvdr_Geo_Lvl": "National",
        "Rndrng_Prvdr_Geo_Cd": "",
        "Rndrng_Prvdr_Geo_Desc": "National",
        "HCPCS_Cd": "99213",
        "HCPCS_Desc": "Established patient office or other outpatient visit, 20-29 minutes",
        "HCPCS_Drug_Ind": "N",
        "Place_Of_Srvc": "O",
        "Tot_Rndrng_Prvdrs": "402715",
        "Tot_Benes": "24530120",
        "Tot_Srvcs": "101354839",
        "Tot_Bene_Day_Srvcs": "100980211",
        "Avg_Sbmtd_Chrg": "174.91",
        "Avg_Mdcr_Alowd_Amt": "81.05",
        "Avg_Mdcr_Pymt_Amt": "63.27",
        "Avg_Mdcr_Stdzd_Amt": "62.11",
    }
]


class StubUpstream:
    """Routes requests by URL path to canned responses and records them."""

    def __init__(self):
        self.routes: dict[str, dict[str, Any]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path: str, json: Any = None, status: int = 200, text: str | None = None,
            exc: Exception | None = None) -> None:
        self.routes[path] = {"json": json, "status": status, "text": text, "exc": exc}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"error": f"no stub for {request.url.path}"})
        if route["exc"] is not None:
            raise route["exc"]
        if route["text"] is not None:
            return httpx.Response(route["status"], text=route["text"])
        return httpx.Response(route["status"], json=route["json"])

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last_params(self) -> list[tuple[str, str]]:
        return list(self.requests[-1].url.params.multi_items())


@pytest.fixture
def settings():
    return Settings(
        icd10cm_base_url=ICD10_URL,
        npi_base_url=NPI_URL,
        cms_base_url=CMS_URL,
        timeout_s=5,
        log_level="info",
        transport="stdio",
        use_http=False,
    )


@pytest.fixture
def upstream():
    stub = StubUpstream()
    stub.add(ICD10_PATH, json=TUBERC_PAYLOAD)
    stub.add(NPI_PATH, json=NPI_PAYLOAD)
    stub.add(cms_path(DatasetVariant.PROVIDER), json=PROVIDER_ROWS)
    stub.add(cms_path(DatasetVariant.GEOGRAPHY_AND_SERVICE), json=GEO_ROWS)
    stub.add(cms_path(DatasetVariant.PROVIDER_AND_SERVICE), json=[])
    return stub


@pytest.fixture
def upstream_client(settings, upstream):
    return UpstreamClient(settings, transport=upstream.transport)


@pytest.fixture
def dispatcher(settings, upstream_client):
    return ToolDispatcher(settings, upstream_client)


@pytest.fixture
def http(dispatcher):
    return TestClient(create_http_app(dispatcher))
