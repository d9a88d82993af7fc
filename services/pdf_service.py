"""Claim-form PDF generation against a fixed template on disk."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from acrofill.config import Settings
from acrofill.injector import inject
from acrofill.models import FieldValue, InjectionResult
from acrofill.surveyor import list_field_names
from models.claim_payload import ClaimPayload, ProviderInfo
from services.art_form import build_claim_fields

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "FORMULARIO_ART.pdf"
_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def safe_filename(name: Optional[str], default: str = DEFAULT_FILENAME) -> str:
    return _UNSAFE_FILENAME_CHARS.sub("_", str(name or default))


def coerce_fields(fields: Mapping[str, Any]) -> Dict[str, FieldValue]:
    """Keep booleans and nulls, stringify everything else."""
    coerced: Dict[str, FieldValue] = {}
    for name, value in fields.items():
        if value is None or isinstance(value, (bool, str)):
            coerced[name] = value
        else:
            coerced[name] = str(value)
    return coerced


class PdfFormService:
    """Fill the configured template; the file is re-read on every call."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    @property
    def template_path(self) -> Path:
        return self._settings.template_path

    def _read_template(self) -> bytes:
        return self.template_path.read_bytes()

    def field_names(self) -> List[str]:
        return list_field_names(self._read_template())

    def fill_fields(self, fields: Mapping[str, Any]) -> InjectionResult:
        result = inject(self._read_template(), coerce_fields(fields))
        logger.info(
            "Generated PDF from %s (%d fields, %d missing)",
            self.template_path,
            len(fields),
            len(result.missing_fields),
        )
        return result

    def fill_claim(self, payload: ClaimPayload) -> InjectionResult:
        provider = ProviderInfo.model_validate(self._settings.provider)
        claim = payload.model_copy(update={"provider": provider})
        return self.fill_fields(build_claim_fields(claim, provider, self._settings.place_and_date))


__all__ = ["DEFAULT_FILENAME", "PdfFormService", "coerce_fields", "safe_filename"]
