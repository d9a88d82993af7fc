"""Map a nested claim payload onto the unified ART claim-form fields."""

from __future__ import annotations

import re
from typing import Dict, Optional, Tuple

from acrofill.models import FieldValue
from models.claim_payload import ClaimPayload, ProviderInfo

_NON_DIGITS = re.compile(r"\D")

# Consultation types mapped to their mutually exclusive checkboxes
_CONSULTATION_BOXES = {
    "motivo-trabajo": "AT",
    "motivo-in-itinere": "AIT",
    "motivo-enfermedad-profesional": "EP",
    "motivo-intercurrencia": "INT",
}

# Employer fields present on the form but not captured by the intake screen
_EMPTY_EMPLOYER_FIELDS = (
    "empleador-cuil",
    "empleador-calle",
    "empleador-nro",
    "empleador-piso",
    "empleador-depto",
    "empleador-localidad",
    "empleador-provincia",
    "empleador-cp",
    "empleador-celular",
    "empleador-mail",
)


def only_digits(value: Optional[str]) -> str:
    return _NON_DIGITS.sub("", value or "")


def clean(value: Optional[str]) -> str:
    return (value or "").strip()


def split_iso_date(value: Optional[str]) -> Tuple[str, str, str]:
    """Split ``YYYY-MM-DD`` into ``(day, month, year)``; missing parts are empty."""
    if not value:
        return "", "", ""
    parts = value.split("-")
    parts += [""] * (3 - len(parts))
    year, month, day = parts[0], parts[1], parts[2]
    return day, month, year


def build_claim_fields(
    payload: ClaimPayload,
    provider: ProviderInfo,
    place_and_date: str,
) -> Dict[str, FieldValue]:
    """Flatten a claim payload into template field names and normalised values.

    ``provider`` always replaces whatever the client sent.
    """
    worker = payload.worker
    employer = payload.employer
    insurer = payload.insurer
    full_name = f"{clean(worker.last_name)} {clean(worker.first_name)}".strip()
    day, month, year = split_iso_date(worker.birth_date)

    fields: Dict[str, FieldValue] = {
        "art": clean(insurer.name),
        "num-siniestro": clean(insurer.claim_number),
        "empleado-nombre": full_name,
        "empleado-dni": only_digits(worker.dni),
        "empleado-dia": day,
        "empleado-mes": month,
        "empleado-anio": year,
        "Sexo M": worker.sex == "M",
        "F": worker.sex == "F",
        "empleado-calle": clean(worker.street),
        "empleado-nro": clean(worker.number),
        "empleado-piso": clean(worker.floor),
        "empleado-depto": clean(worker.unit),
        "empleado-localidad": clean(worker.city),
        "empleado-provincia": clean(worker.province),
        "empleado-cp": only_digits(worker.postal_code),
        "empleado-celular": only_digits(worker.phone),
        "empleador-nombre": clean(employer.name),
        "empleador-cuit": only_digits(employer.tax_id),
    }
    fields.update({name: "" for name in _EMPTY_EMPLOYER_FIELDS})
    fields["prestador-nombre"] = clean(provider.name)
    for box, kind in _CONSULTATION_BOXES.items():
        fields[box] = payload.consultation.kind == kind
    fields["lugar-fecha"] = place_and_date
    return fields


__all__ = ["build_claim_fields", "clean", "only_digits", "split_iso_date"]
