# healthdata_mcp/models.py
"""Request models and the two upstream envelope shapes."""
from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Mapping, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import UpstreamShapeError, ValidationError

NLM_MAX_LIST = 500
CMS_MAX_SIZE = 5000

M = TypeVar("M", bound=BaseModel)


# ───────────────────────────── requests ─────────────────────────────
class _Request(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # null for an optional parameter means "use the default"
        if isinstance(data, Mapping):
            return {k: v for k, v in data.items() if v is not None}
        return data


class TableSearchRequest(_Request):
    """Parameters shared by the NLM Clinical Tables search APIs."""

    terms: str = Field(min_length=1)
    maxList: int = Field(default=NLM_MAX_LIST, ge=0)
    count: int = Field(default=NLM_MAX_LIST, ge=0)
    offset: int = Field(default=0, ge=0)
    q: str | None = None
    df: str
    sf: str
    cf: str
    ef: str | None = None

    @field_validator("maxList", "count")
    @classmethod
    def _clamp_page(cls, v: int) -> int:
        return min(v, NLM_MAX_LIST)

    @property
    def extra_field_names(self) -> list[str]:
        if not self.ef:
            return []
        return [f.strip() for f in self.ef.split(",") if f.strip()]


class Icd10SearchRequest(TableSearchRequest):
    df: str = "code,name"
    sf: str = "code,name"
    cf: str = "code"


class NpiSearchRequest(TableSearchRequest):
    df: str = "NPI,name.full,provider_type,addr_practice.full"
    sf: str = "NPI,name.full,provider_type,addr_practice.full"
    cf: str = "NPI"


class DatasetVariant(str, Enum):
    GEOGRAPHY_AND_SERVICE = "geography_and_service"
    PROVIDER_AND_SERVICE = "provider_and_service"
    PROVIDER = "provider"


class SortSpec(BaseModel):
    field: str = Field(min_length=1)
    direction: Literal["asc", "desc"] = "asc"

    @field_validator("direction", mode="before")
    @classmethod
    def _lower(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v


class ClaimsSearchRequest(_Request):
    dataset_type: DatasetVariant = DatasetVariant.GEOGRAPHY_AND_SERVICE
    hcpcs_code: str | None = None
    geo_level: Literal["National", "State"] | None = None
    geo_code: str | None = None
    place_of_service: Literal["F", "O"] | None = None
    npi: str | None = None
    provider_type: str | None = None
    size: int = Field(default=10, ge=0)
    offset: int = Field(default=0, ge=0)
    keyword: str | None = None
    sort: SortSpec | None = None

    @field_validator("size")
    @classmethod
    def _clamp_size(cls, v: int) -> int:
        return min(v, CMS_MAX_SIZE)


def parse_request(model: type[M], args: Mapping[str, Any]) -> M:
    """Validate ``args`` into ``model``, raising the gateway's ValidationError."""
    try:
        return model.model_validate(dict(args))
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'arguments'}: {err['msg']}"
            for err in e.errors()
        )
        raise ValidationError(f"Invalid arguments: {problems}") from e


# ───────────────────────────── envelopes ────────────────────────────
class PositionalTable(BaseModel):
    """``[total, ids, extra_fields?, display_rows]`` from the NLM table APIs."""

    total: int
    ids: list[Any]
    extra_fields: dict[str, list[Any]] = Field(default_factory=dict)
    display_rows: list[Any] = Field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "PositionalTable":
        if not isinstance(payload, list) or len(payload) < 2:
            raise UpstreamShapeError(
                f"Unexpected upstream response: expected a positional array, got {type(payload).__name__}"
            )
        total, ids = payload[0], payload[1]
        if isinstance(total, bool) or not isinstance(total, int) or total < 0:
            raise UpstreamShapeError(f"Unexpected upstream response: invalid total {total!r}")
        if not isinstance(ids, list):
            raise UpstreamShapeError(
                f"Unexpected upstream response: expected an id list, got {type(ids).__name__}"
            )

        extra = payload[2] if len(payload) > 2 else None
        extra_fields = (
            {str(k): (v if isinstance(v, list) else []) for k, v in extra.items()}
            if isinstance(extra, dict)
            else {}
        )
        rows = payload[3] if len(payload) > 3 and isinstance(payload[3], list) else []
        return cls(total=total, ids=ids, extra_fields=extra_fields, display_rows=rows)


class FlatRecordList(BaseModel):
    """Flat array of dataset rows from the CMS data API."""

    records: list[dict[str, Any]]

    @classmethod
    def from_payload(cls, payload: Any) -> "FlatRecordList":
        if not isinstance(payload, list):
            raise UpstreamShapeError(
                f"Unexpected upstream response: expected a list of records, got {type(payload).__name__}"
            )
        return cls(records=[row if isinstance(row, dict) else {} for row in payload])
