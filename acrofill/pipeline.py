"""High level orchestration helpers for the survey and fill pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence, Union

from .catalog import catalog_kinds
from .injector import inject
from .models import FieldCatalog, FieldValue, FillPayload, InjectionResult
from .surveyor import survey_pdf
from .utils import canonical_index, expand_canonical_payload, suggest_field_names


@dataclass
class TemplateForm:
    pdf_bytes: bytes
    catalog: FieldCatalog = field(default_factory=dict)

    @property
    def field_names(self) -> list[str]:
        return list(self.catalog)


def parse_template(source: Union[bytes, str, Path]) -> TemplateForm:
    pdf_bytes = source if isinstance(source, bytes) else Path(source).read_bytes()
    return TemplateForm(pdf_bytes=pdf_bytes, catalog=survey_pdf(pdf_bytes).fields)


def fill_template(
    template: TemplateForm,
    payload: FillPayload,
    *,
    canonical: bool = False,
    aliases: Optional[Mapping[str, Sequence[str]]] = None,
    flatten: bool = True,
) -> InjectionResult:
    """Fill a surveyed template, dispatching on the catalogued field kinds.

    With ``canonical`` set, payload keys may use canonical names and are
    replicated onto every duplicated field they stand for.
    """
    fill_payload: Mapping[str, FieldValue] = payload
    if canonical:
        fill_payload = expand_canonical_payload(payload, canonical_index(template.catalog, aliases))
    return inject(template.pdf_bytes, fill_payload, kinds=catalog_kinds(template.catalog), flatten=flatten)


def missing_field_report(result: InjectionResult, template: TemplateForm) -> Dict[str, Optional[str]]:
    """Map each missing payload name to the closest template field, if any."""
    suggestions = suggest_field_names(result.missing_fields, template.field_names)
    return {name: suggestions.get(name) for name in result.missing_fields}


__all__ = ["TemplateForm", "fill_template", "missing_field_report", "parse_template"]
