# healthdata_mcp/tools/registry.py
"""Static descriptions of every tool, served by both list operations."""
from __future__ import annotations

import json
from typing import Any, Mapping

from pydantic import BaseModel, Field

from ..models import CMS_MAX_SIZE, NLM_MAX_LIST, DatasetVariant


class ToolExample(BaseModel):
    description: str
    input: dict[str, Any]
    output: dict[str, Any]


class ToolDescriptor(BaseModel):
    name: str
    description: str
    input_schema: dict[str, Any] = Field(serialization_alias="inputSchema")
    response_schema: dict[str, Any] = Field(serialization_alias="responseSchema")
    examples: list[ToolExample] = Field(default_factory=list)

    @property
    def parameters(self) -> dict[str, Any]:
        return self.input_schema.get("properties", {})

    @property
    def required(self) -> list[str]:
        return list(self.input_schema.get("required", []))

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)

    def render_description(self) -> str:
        """Long-form description for MCP clients: summary, args, examples."""
        lines = [self.description, "", "Args:"]
        for pname, schema in self.parameters.items():
            flag = " (required)" if pname in self.required else ""
            default = f" Default: {schema['default']!r}." if "default" in schema else ""
            lines.append(f"  {pname}{flag}: {schema.get('description', '')}{default}")
        if self.examples:
            lines += ["", "Examples:"]
            for ex in self.examples:
                lines.append(f"  {ex.description}")
                lines.append(f"    input:  {json.dumps(ex.input)}")
                lines.append(f"    output: {json.dumps(ex.output)}")
        return "\n".join(lines)


def _table_params(df: str, cf: str, what: str) -> dict[str, Any]:
    return {
        "terms": {
            "type": "string",
            "description": f"The search string for which to find matches in the list of {what}.",
        },
        "maxList": {
            "type": "integer",
            "default": NLM_MAX_LIST,
            "description": f"Number of results requested, up to the upper limit of {NLM_MAX_LIST}.",
        },
        "count": {
            "type": "integer",
            "default": NLM_MAX_LIST,
            "description": "The number of results to retrieve (page size).",
        },
        "offset": {
            "type": "integer",
            "default": 0,
            "description": "The starting result number (0-based) to retrieve.",
        },
        "q": {
            "type": "string",
            "description": "An optional, additional query string used to further constrain the results.",
        },
        "df": {"type": "string", "default": df, "description": "A comma-separated list of display fields."},
        "sf": {"type": "string", "default": df, "description": "A comma-separated list of fields to be searched."},
        "cf": {
            "type": "string",
            "default": cf,
            "description": "A field to regard as the 'code' for the returned item data.",
        },
        "ef": {
            "type": "string",
            "description": "A comma-separated list of additional fields to be returned for each retrieved list item.",
        },
    }


SEARCH_ICD10CM = ToolDescriptor(
    name="search_icd10cm_codes",
    description="Search for ICD-10-CM diagnosis codes using the NLM Clinical Tables API.",
    input_schema={
        "type": "object",
        "properties": _table_params("code,name", "code", "ICD-10-CM diagnoses"),
        "required": ["terms"],
    },
    response_schema={
        "type": "object",
        "properties": {
            "total": {"type": "integer", "description": "Total number of results available"},
            "codes": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "code": {"type": "string", "description": "ICD-10-CM code"},
                        "name": {"type": "string", "description": "Description of the diagnosis"},
                    },
                    "additionalProperties": True,
                },
            },
        },
    },
    examples=[
        ToolExample(
            description='Diagnoses matching "tuberc", with code and term',
            input={"terms": "tuberc"},
            output={
                "total": 78,
                "codes": [
                    {"code": "A15.0", "name": "Tuberculosis of lung"},
                    {"code": "A15.4", "name": "Tuberculosis of intrathoracic lymph nodes"},
                ],
            },
        ),
        ToolExample(
            description="Respiratory tuberculosis only, narrowed with q to codes starting with A15",
            input={"terms": "tuberc", "q": "code:A15*"},
            output={
                "total": 7,
                "codes": [
                    {"code": "A15.0", "name": "Tuberculosis of lung"},
                    {"code": "A15.6", "name": "Tuberculous pleurisy"},
                ],
            },
        ),
    ],
)

SEARCH_NPI = ToolDescriptor(
    name="search_npi_providers",
    description="Search the NPI registry for individual healthcare providers using the NLM Clinical Tables API.",
    input_schema={
        "type": "object",
        "properties": _table_params(
            "NPI,name.full,provider_type,addr_practice.full", "NPI", "NPI providers"
        ),
        "required": ["terms"],
    },
    response_schema={
        "type": "object",
        "properties": {
            "total": {"type": "integer", "description": "Total number of results available"},
            "providers": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "npi": {"type": "string", "description": "National Provider Identifier"},
                        "name": {"type": "string", "description": "Provider full name"},
                        "type": {"type": "string", "description": "Provider type / specialty"},
                        "address": {"type": "string", "description": "Practice address"},
                    },
                    "additionalProperties": True,
                },
            },
        },
    },
    examples=[
        ToolExample(
            description='Providers matching "john smith"',
            input={"terms": "john smith", "maxList": 2},
            output={
                "total": 312,
                "providers": [
                    {
                        "npi": "1234567890",
                        "name": "JOHN SMITH",
                        "type": "Family Medicine",
                        "address": "100 MAIN ST, SPRINGFIELD, IL 62701",
                    }
                ],
            },
        ),
        ToolExample(
            description="Same search, also returning the practice phone number",
            input={"terms": "john smith", "ef": "addr_practice.phone"},
            output={
                "total": 312,
                "providers": [
                    {
                        "npi": "1234567890",
                        "name": "JOHN SMITH",
                        "type": "Family Medicine",
                        "address": "100 MAIN ST, SPRINGFIELD, IL 62701",
                        "addr_practice.phone": "217-555-0100",
                    }
                ],
            },
        ),
    ],
)

SEARCH_CLAIMS = ToolDescriptor(
    name="search_medicare_claims",
    description=(
        "Search Medicare Physician & Other Practitioners data from the CMS data API, "
        "by geography and service, by provider and service, or by provider. "
        "total is the number of rows returned, not the size of the full match set."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "dataset_type": {
                "type": "string",
                "enum": [v.value for v in DatasetVariant],
                "default": DatasetVariant.GEOGRAPHY_AND_SERVICE.value,
                "description": "Which dataset to query.",
            },
            "hcpcs_code": {"type": "string", "description": "HCPCS procedure code, e.g. '99213'."},
            "geo_level": {
                "type": "string",
                "enum": ["National", "State"],
                "description": "Geography level (geography_and_service only).",
            },
            "geo_code": {
                "type": "string",
                "description": "State FIPS code (geography_and_service) or state abbreviation (provider datasets).",
            },
            "place_of_service": {
                "type": "string",
                "enum": ["F", "O"],
                "description": "F = facility, O = office (service datasets only).",
            },
            "npi": {"type": "string", "description": "Rendering provider NPI (provider datasets only)."},
            "provider_type": {
                "type": "string",
                "description": "Rendering provider type, e.g. 'Cardiology' (provider datasets only).",
            },
            "size": {
                "type": "integer",
                "default": 10,
                "description": f"Number of rows to return, up to {CMS_MAX_SIZE}.",
            },
            "offset": {"type": "integer", "default": 0, "description": "Number of rows to skip."},
            "keyword": {"type": "string", "description": "Full-text keyword search across the dataset."},
            "sort": {
                "type": "object",
                "properties": {
                    "field": {"type": "string", "description": "Output field to sort by."},
                    "direction": {"type": "string", "enum": ["asc", "desc"], "default": "asc"},
                },
                "required": ["field"],
                "description": "Sort order for the returned rows.",
            },
        },
        "required": [],
    },
    response_schema={
        "type": "object",
        "properties": {
            "total": {"type": "integer", "description": "Number of rows returned"},
            "claims": {
                "type": "array",
                "items": {"type": "object", "description": "Fields depend on dataset_type"},
            },
        },
    },
    examples=[
        ToolExample(
            description="National totals for office visit code 99213",
            input={"hcpcs_code": "99213", "geo_level": "National", "size": 1},
            output={
                "total": 1,
                "claims": [
                    {
                        "geo_level": "National",
                        "geo_code": None,
                        "geo_desc": "National",
                        "hcpcs_code": "99213",
                        "place_of_service": "O",
                        "total_providers": 402715,
                        "total_services": 101354839.0,
                        "avg_medicare_payment": 63.27,
                    }
                ],
            },
        ),
        ToolExample(
            description="Top California cardiologists by number of beneficiaries",
            input={
                "dataset_type": "provider",
                "geo_code": "CA",
                "provider_type": "Cardiology",
                "size": 1,
                "sort": {"field": "total_beneficiaries", "direction": "desc"},
            },
            output={
                "total": 1,
                "claims": [
                    {
                        "npi": "1003000126",
                        "provider_name": "Smith, Jane A",
                        "provider_type": "Cardiology",
                        "total_hcpcs_codes": 42,
                        "total_beneficiaries": 3120,
                    }
                ],
            },
        ),
    ],
)

TOOLS: tuple[ToolDescriptor, ...] = (SEARCH_ICD10CM, SEARCH_NPI, SEARCH_CLAIMS)


def get_descriptor(name: str) -> ToolDescriptor | None:
    return next((t for t in TOOLS if t.name == name), None)


def validate_registry(request_models: Mapping[str, type[BaseModel]]) -> None:
    """Fail fast when descriptors and handlers drift apart."""
    names = {t.name for t in TOOLS}
    missing = sorted(set(request_models) - names)
    if missing:
        raise RuntimeError(f"Tools without a descriptor: {missing}")

    unhandled = sorted(names - set(request_models))
    if unhandled:
        raise RuntimeError(f"Descriptors without a handler: {unhandled}")

    for tool in TOOLS:
        model = request_models[tool.name]
        fields = set(model.model_fields)
        for pname in tool.required:
            if pname not in tool.parameters:
                raise RuntimeError(f"{tool.name}: required parameter {pname!r} is not described")
            if pname not in fields:
                raise RuntimeError(f"{tool.name}: required parameter {pname!r} is never read")
        undocumented = sorted(fields - set(tool.parameters))
        if undocumented:
            raise RuntimeError(f"{tool.name}: parameters missing from inputSchema: {undocumented}")
        required_fields = sorted(n for n, f in model.model_fields.items() if f.is_required())
        if set(required_fields) != set(tool.required):
            raise RuntimeError(
                f"{tool.name}: inputSchema requires {tool.required}, handler requires {required_fields}"
            )
