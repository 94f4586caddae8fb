# healthdata_mcp/mappers.py
"""Turn upstream payloads into the stable per-tool result shapes.

All functions here are pure: they take an already-decoded envelope plus the
validated request and return plain dicts ready for JSON encoding.
"""
from __future__ import annotations

from typing import Any, Callable, NamedTuple

from .models import (
    ClaimsSearchRequest,
    DatasetVariant,
    FlatRecordList,
    PositionalTable,
    TableSearchRequest,
)

NPI_FIELDS = ("npi", "name", "type", "address")


def _attach_extra_fields(item: dict[str, Any], table: PositionalTable, req: TableSearchRequest, index: int) -> None:
    if not req.ef or not table.extra_fields:
        return
    for field, values in table.extra_fields.items():
        item[field] = values[index] if index < len(values) else None


def _display_row(table: PositionalTable, index: int) -> list[Any] | None:
    if index < len(table.display_rows) and isinstance(table.display_rows[index], list):
        return table.display_rows[index]
    return None


# ─────────────────────────── ICD-10-CM ────────────────────────────
def map_icd10_codes(table: PositionalTable, req: TableSearchRequest) -> dict[str, Any]:
    codes = []
    for i, code in enumerate(table.ids):
        row = _display_row(table, i)
        item = {
            "code": code,
            "name": row[1] if row is not None and len(row) > 1 else None,
        }
        _attach_extra_fields(item, table, req, i)
        codes.append(item)
    return {"total": table.total, "codes": codes}


# ───────────────────────────── NPI ────────────────────────────────
def map_npi_providers(table: PositionalTable, req: TableSearchRequest) -> dict[str, Any]:
    providers = []
    for i, npi in enumerate(table.ids):
        row = _display_row(table, i) or []
        item = {
            key: (row[pos] if pos < len(row) and row[pos] is not None else "")
            for pos, key in enumerate(NPI_FIELDS)
        }
        if not item["npi"]:
            item["npi"] = npi if npi is not None else ""
        _attach_extra_fields(item, table, req, i)
        providers.append(item)
    return {"total": table.total, "providers": providers}


# ─────────────────────────── Medicare claims ──────────────────────
def _to_str(value: Any) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _to_int(value: Any) -> int | None:
    text = _to_str(value)
    if text is None:
        return None
    try:
        return int(text.replace(",", ""))
    except ValueError:
        try:
            return int(float(text.replace(",", "")))
        except ValueError:
            return None


def _to_float(value: Any) -> float | None:
    text = _to_str(value)
    if text is None:
        return None
    try:
        return float(text.replace(",", ""))
    except ValueError:
        return None


def provider_name(row: dict[str, Any]) -> str | None:
    """``"Last, First MI"``; organizations only carry ``Last_Org_Name``."""
    last = _to_str(row.get("Rndrng_Prvdr_Last_Org_Name"))
    first = _to_str(row.get("Rndrng_Prvdr_First_Name"))
    mi = _to_str(row.get("Rndrng_Prvdr_MI"))
    if last is None and first is None:
        return None
    name = last or ""
    if first:
        name = f"{name}, {first}" if name else first
        if mi:
            name = f"{name} {mi}"
    return name


class ClaimField(NamedTuple):
    target: str
    source: str
    extract: Callable[[dict[str, Any]], Any]


def _column(target: str, source: str, convert: Callable[[Any], Any] = _to_str) -> ClaimField:
    return ClaimField(target, source, lambda row: convert(row.get(source)))


_SERVICE_COLUMNS = [
    _column("hcpcs_code", "HCPCS_Cd"),
    _column("hcpcs_desc", "HCPCS_Desc"),
    _column("hcpcs_drug_ind", "HCPCS_Drug_Ind"),
    _column("place_of_service", "Place_Of_Srvc"),
]

_SERVICE_TOTALS = [
    _column("total_beneficiaries", "Tot_Benes", _to_int),
    _column("total_services", "Tot_Srvcs", _to_float),
    _column("total_beneficiary_day_services", "Tot_Bene_Day_Srvcs", _to_int),
    _column("avg_submitted_charge", "Avg_Sbmtd_Chrg", _to_float),
    _column("avg_medicare_allowed", "Avg_Mdcr_Alowd_Amt", _to_float),
    _column("avg_medicare_payment", "Avg_Mdcr_Pymt_Amt", _to_float),
    _column("avg_medicare_standardized", "Avg_Mdcr_Stdzd_Amt", _to_float),
]

_PROVIDER_IDENTITY = [
    _column("npi", "Rndrng_NPI"),
    ClaimField("provider_name", "Rndrng_Prvdr_Last_Org_Name", provider_name),
    _column("credentials", "Rndrng_Prvdr_Crdntls"),
    _column("entity_type", "Rndrng_Prvdr_Ent_Cd"),
]

CLAIMS_FIELDS: dict[DatasetVariant, list[ClaimField]] = {
    DatasetVariant.GEOGRAPHY_AND_SERVICE: [
        _column("geo_level", "Rndrng_Prvdr_Geo_Lvl"),
        _column("geo_code", "Rndrng_Prvdr_Geo_Cd"),
        _column("geo_desc", "Rndrng_Prvdr_Geo_Desc"),
        *_SERVICE_COLUMNS,
        _column("total_providers", "Tot_Rndrng_Prvdrs", _to_int),
        *_SERVICE_TOTALS,
    ],
    DatasetVariant.PROVIDER_AND_SERVICE: [
        *_PROVIDER_IDENTITY,
        _column("street", "Rndrng_Prvdr_St1"),
        _column("city", "Rndrng_Prvdr_City"),
        _column("state", "Rndrng_Prvdr_State_Abrvtn"),
        _column("zip", "Rndrng_Prvdr_Zip5"),
        _column("provider_type", "Rndrng_Prvdr_Type"),
        *_SERVICE_COLUMNS,
        *_SERVICE_TOTALS,
    ],
    DatasetVariant.PROVIDER: [
        *_PROVIDER_IDENTITY,
        _column("city", "Rndrng_Prvdr_City"),
        _column("state", "Rndrng_Prvdr_State_Abrvtn"),
        _column("zip", "Rndrng_Prvdr_Zip5"),
        _column("provider_type", "Rndrng_Prvdr_Type"),
        _column("total_hcpcs_codes", "Tot_HCPCS_Cds", _to_int),
        _column("total_beneficiaries", "Tot_Benes", _to_int),
        _column("total_services", "Tot_Srvcs", _to_float),
        _column("total_submitted_charge", "Tot_Sbmtd_Chrg", _to_float),
        _column("total_medicare_allowed", "Tot_Mdcr_Alowd_Amt", _to_float),
        _column("total_medicare_payment", "Tot_Mdcr_Pymt_Amt", _to_float),
        _column("total_medicare_standardized", "Tot_Mdcr_Stdzd_Amt", _to_float),
        _column("avg_beneficiary_age", "Bene_Avg_Age", _to_float),
        _column("avg_risk_score", "Bene_Avg_Risk_Scre", _to_float),
    ],
}


def upstream_column(variant: DatasetVariant, field: str) -> str:
    """Upstream column for an output field name; unknown names pass through."""
    for col in CLAIMS_FIELDS[variant]:
        if col.target == field:
            return col.source
    return field


def map_claims(records: FlatRecordList, req: ClaimsSearchRequest) -> dict[str, Any]:
    # The data API reports no match count, so total is the number of rows returned.
    fields = CLAIMS_FIELDS[req.dataset_type]
    claims = [{f.target: f.extract(row) for f in fields} for row in records.records]
    return {"total": len(claims), "claims": claims}
