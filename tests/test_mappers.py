# Test cases for the response mappers
# Upstream payloads in, stable tool results out

import pytest

from healthdata_mcp.mappers import (
    CLAIMS_FIELDS,
    map_claims,
    map_icd10_codes,
    map_npi_providers,
    provider_name,
    upstream_column,
)
from healthdata_mcp.models import (
    ClaimsSearchRequest,
    DatasetVariant,
    FlatRecordList,
    Icd10SearchRequest,
    NpiSearchRequest,
    PositionalTable,
)
from tests.conftest import GEO_ROWS, NPI_PAYLOAD, PROVIDER_ROWS, TUBERC_PAYLOAD


def test_icd10_tuberc_scenario():
    """The documented "tuberc" example maps exactly."""
    table = PositionalTable.from_payload(TUBERC_PAYLOAD)
    result = map_icd10_codes(table, Icd10SearchRequest(terms="tuberc"))

    assert result == {
        "total": 78,
        "codes": [
            {"code": "A15.0", "name": "Tuberculosis of lung"},
            {"code": "A15.4", "name": "Tuberculosis of intrathoracic lymph nodes"},
        ],
    }


def test_icd10_one_item_per_id_even_when_display_rows_truncated():
    table = PositionalTable.from_payload([3, ["A", "B", "C"], None, [["A", "Alpha"]]])
    result = map_icd10_codes(table, Icd10SearchRequest(terms="x"))

    assert len(result["codes"]) == 3
    assert all("code" in item for item in result["codes"])
    assert result["codes"][0]["name"] == "Alpha"
    assert result["codes"][1]["name"] is None
    assert result["codes"][2]["name"] is None


def test_icd10_non_list_display_row_gives_none_name():
    table = PositionalTable.from_payload([1, ["A"], None, ["not-a-row"]])
    result = map_icd10_codes(table, Icd10SearchRequest(terms="x"))
    assert result["codes"] == [{"code": "A", "name": None}]


def test_extra_fields_attached_by_index():
    payload = [
        2,
        ["A15.0", "A15.4"],
        {"excludes": [["x1"], ["x2"]], "notes": ["n1", "n2"]},
        [["A15.0", "Tuberculosis of lung"], ["A15.4", "Tuberculosis of nodes"]],
    ]
    req = Icd10SearchRequest(terms="tuberc", ef="excludes,notes")
    result = map_icd10_codes(PositionalTable.from_payload(payload), req)

    for i, item in enumerate(result["codes"]):
        assert set(item) == {"code", "name", "excludes", "notes"}
        assert item["excludes"] == payload[2]["excludes"][i]
        assert item["notes"] == payload[2]["notes"][i]


@pytest.mark.parametrize("ef", [None, ""])
def test_extra_fields_ignored_without_ef(ef):
    payload = [1, ["A15.0"], {"notes": ["n1"]}, [["A15.0", "Tuberculosis of lung"]]]
    req = Icd10SearchRequest(terms="tuberc", ef=ef)
    result = map_icd10_codes(PositionalTable.from_payload(payload), req)
    assert set(result["codes"][0]) == {"code", "name"}


def test_extra_field_short_list_yields_none():
    payload = [2, ["A", "B"], {"notes": ["only-one"]}, [["A", "a"], ["B", "b"]]]
    req = Icd10SearchRequest(terms="x", ef="notes")
    result = map_icd10_codes(PositionalTable.from_payload(payload), req)
    assert [c["notes"] for c in result["codes"]] == ["only-one", None]


def test_npi_rows_default_missing_fields_to_empty_string():
    table = PositionalTable.from_payload(NPI_PAYLOAD)
    result = map_npi_providers(table, NpiSearchRequest(terms="john smith"))

    assert result["total"] == 2
    assert result["providers"][0] == {
        "npi": "1234567890",
        "name": "JOHN SMITH",
        "type": "Family Medicine",
        "address": "100 MAIN ST, SPRINGFIELD, IL 62701",
    }
    assert result["providers"][1]["address"] == ""


def test_npi_missing_display_row_keeps_code_from_ids():
    table = PositionalTable.from_payload([1, ["1234567890"], None, []])
    result = map_npi_providers(table, NpiSearchRequest(terms="x"))
    assert result["providers"] == [{"npi": "1234567890", "name": "", "type": "", "address": ""}]


def test_npi_blank_display_code_falls_back_to_ids():
    table = PositionalTable.from_payload([1, ["1003000126"], None, [[None, "JANE DOE"]]])
    result = map_npi_providers(table, NpiSearchRequest(terms="doe"))
    assert result["providers"][0]["npi"] == "1003000126"
    assert result["providers"][0]["name"] == "JANE DOE"


def test_npi_extra_fields():
    payload = [1, ["1"], {"addr_practice.phone": ["217-555-0100"]}, [["1", "A", "B", "C"]]]
    req = NpiSearchRequest(terms="x", ef="addr_practice.phone")
    result = map_npi_providers(PositionalTable.from_payload(payload), req)
    assert result["providers"][0]["addr_practice.phone"] == "217-555-0100"


def test_claims_provider_variant():
    req = ClaimsSearchRequest(dataset_type="provider")
    result = map_claims(FlatRecordList.from_payload(PROVIDER_ROWS), req)

    assert result["total"] == len(result["claims"]) == 2
    first = result["claims"][0]
    assert first["npi"] == "1003000126"
    assert first["provider_name"] == "Smith, Jane A"
    assert first["total_hcpcs_codes"] == 42
    assert isinstance(first["total_hcpcs_codes"], int)
    assert first["avg_risk_score"] == pytest.approx(1.83)
    for item in result["claims"]:
        assert "hcpcs_code" not in item
        assert "geo_level" not in item


def test_claims_middle_initial_omitted_when_blank():
    req = ClaimsSearchRequest(dataset_type="provider")
    result = map_claims(FlatRecordList.from_payload(PROVIDER_ROWS), req)
    assert result["claims"][1]["provider_name"] == "Doe, John"


def test_claims_geography_variant_types():
    req = ClaimsSearchRequest()
    result = map_claims(FlatRecordList.from_payload(GEO_ROWS), req)

    row = result["claims"][0]
    assert row["geo_level"] == "National"
    assert row["geo_code"] is None
    assert row["hcpcs_code"] == "99213"
    assert row["total_providers"] == 402715
    assert row["avg_medicare_payment"] == pytest.approx(63.27)
    assert "npi" not in row


def test_claims_total_is_rows_returned():
    req = ClaimsSearchRequest(dataset_type="provider_and_service")
    assert map_claims(FlatRecordList.from_payload([]), req) == {"total": 0, "claims": []}


def test_claims_rows_keep_stable_key_set():
    req = ClaimsSearchRequest(dataset_type="provider")
    result = map_claims(FlatRecordList.from_payload([{}, {"Rndrng_NPI": "1"}]), req)
    expected = {f.target for f in CLAIMS_FIELDS[DatasetVariant.PROVIDER]}
    assert all(set(item) == expected for item in result["claims"])
    assert result["claims"][0]["npi"] is None


@pytest.mark.parametrize(
    "row,expected",
    [
        ({"Rndrng_Prvdr_Last_Org_Name": "Mayo Clinic"}, "Mayo Clinic"),
        ({"Rndrng_Prvdr_Last_Org_Name": "Smith", "Rndrng_Prvdr_First_Name": "Jane"}, "Smith, Jane"),
        ({"Rndrng_Prvdr_First_Name": "Jane", "Rndrng_Prvdr_MI": "Q"}, "Jane Q"),
        ({}, None),
    ],
)
def test_provider_name(row, expected):
    assert provider_name(row) == expected


def test_unparsable_numbers_become_none():
    req = ClaimsSearchRequest(dataset_type="provider")
    result = map_claims(FlatRecordList.from_payload([{"Tot_HCPCS_Cds": "n/a", "Tot_Benes": "1,204"}]), req)
    assert result["claims"][0]["total_hcpcs_codes"] is None
    assert result["claims"][0]["total_beneficiaries"] == 1204


def test_upstream_column_lookup():
    assert upstream_column(DatasetVariant.PROVIDER, "total_beneficiaries") == "Tot_Benes"
    assert upstream_column(DatasetVariant.PROVIDER, "Tot_Benes") == "Tot_Benes"
