"""Service-layer utilities for the claim-form PDF service."""

from .art_form import build_claim_fields
from .pdf_service import PdfFormService, coerce_fields, safe_filename

__all__ = [
	"build_claim_fields",
	"coerce_fields",
	"PdfFormService",
	"safe_filename",
]
