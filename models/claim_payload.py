"""Request payloads for the occupational-accident claim form."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Group(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)


class WorkerInfo(_Group):
    """The injured worker (``trabajador``)."""

    last_name: Optional[str] = Field(default=None, alias="apellido")
    first_name: Optional[str] = Field(default=None, alias="nombre")
    dni: Optional[str] = None
    birth_date: Optional[str] = Field(default=None, alias="nacimiento", description="ISO date, YYYY-MM-DD")
    sex: Optional[str] = Field(default=None, alias="sexo", description="'M' or 'F'")
    street: Optional[str] = Field(default=None, alias="calle")
    number: Optional[str] = Field(default=None, alias="numero")
    floor: Optional[str] = Field(default=None, alias="piso")
    unit: Optional[str] = Field(default=None, alias="depto")
    city: Optional[str] = Field(default=None, alias="localidad")
    province: Optional[str] = Field(default=None, alias="provincia")
    postal_code: Optional[str] = Field(default=None, alias="cp")
    phone: Optional[str] = Field(default=None, alias="telefono")


class EmployerInfo(_Group):
    name: Optional[str] = Field(default=None, alias="nombre")
    tax_id: Optional[str] = Field(default=None, alias="cuit")


class InsurerInfo(_Group):
    name: Optional[str] = Field(default=None, alias="nombre")
    claim_number: Optional[str] = Field(default=None, alias="nroSiniestro")


class ConsultationInfo(_Group):
    kind: Optional[str] = Field(default=None, alias="tipo", description="AT, AIT, EP or INT")


class ProviderInfo(_Group):
    name: Optional[str] = Field(default=None, alias="nombre")
    tax_id: Optional[str] = Field(default=None, alias="cuit")
    street: Optional[str] = Field(default=None, alias="calle")
    number: Optional[str] = Field(default=None, alias="numero")
    floor: Optional[str] = Field(default=None, alias="piso")
    unit: Optional[str] = Field(default=None, alias="depto")
    city: Optional[str] = Field(default=None, alias="localidad")
    province: Optional[str] = Field(default=None, alias="provincia")
    postal_code: Optional[str] = Field(default=None, alias="cp")
    phone_area: Optional[str] = Field(default=None, alias="telDdn")
    phone: Optional[str] = Field(default=None, alias="tel")
    fax: Optional[str] = None
    mail: Optional[str] = None


class ClaimPayload(_Group):
    worker: WorkerInfo = Field(default_factory=WorkerInfo, alias="trabajador")
    employer: EmployerInfo = Field(default_factory=EmployerInfo, alias="empleador")
    insurer: InsurerInfo = Field(default_factory=InsurerInfo, alias="ART")
    consultation: ConsultationInfo = Field(default_factory=ConsultationInfo, alias="consulta")
    provider: Optional[ProviderInfo] = Field(default=None, alias="prestador")


class ClaimRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    payload: Optional[ClaimPayload] = None
    file_name: Optional[str] = Field(default=None, alias="fileName")


class FieldsRequest(BaseModel):
    """Flat field-name to value payload, injected as is."""

    model_config = ConfigDict(populate_by_name=True)

    fields: Optional[Dict[str, Any]] = None
    file_name: Optional[str] = Field(default=None, alias="fileName")


__all__ = [
    "ClaimPayload",
    "ClaimRequest",
    "ConsultationInfo",
    "EmployerInfo",
    "FieldsRequest",
    "InsurerInfo",
    "ProviderInfo",
    "WorkerInfo",
]
