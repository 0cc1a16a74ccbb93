"""Pydantic models describing the ``requests.json`` document."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

RequestType = Literal["PP", "Client"]


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class RequestPayload(BaseModel):
    """One request entry. Keys not modelled here are kept in ``model_extra``."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    number: int | None = None
    client_name: str = Field(default="", alias="clientName")
    type: RequestType = "Client"
    date: str
    status: str = ""
    assigned_to: str | None = Field(default=None, alias="assignedTo")
    price: float = 0.0
    project_code: str | None = Field(default=None, alias="projectCode")
    client_email: str | None = Field(default=None, alias="clientEmail")

    _normalize_optional = field_validator(
        "assigned_to", "project_code", "client_email", mode="before"
    )(_blank_to_none)

    @field_validator("price", mode="before")
    @classmethod
    def _coerce_price(cls, value: object) -> object:
        if value is None or value == "":
            return 0.0
        return value

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        if isinstance(value, int):
            return str(value)
        return value


REQUEST_LIST_ADAPTER: TypeAdapter[list[RequestPayload]] = TypeAdapter(list[RequestPayload])
