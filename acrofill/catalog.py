"""Multi-document surveys and the persisted field catalog."""

from __future__ import annotations

import json
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .errors import CatalogFormatError, DocumentUnreadableError
from .logging_utils import get_logger
from .models import CatalogBuild, FieldCatalog, FieldDescriptor, FieldKind, SkippedField, SurveyResult
from .surveyor import PdfSource, survey_pdf

logger = get_logger(__name__)

NamedSource = Tuple[str, PdfSource]


@dataclass(frozen=True)
class CatalogStats:
    unique_fields: int
    total_occurrences: int
    kinds: Dict[str, List[str]]


def merge_catalogs(fragments: Sequence[Tuple[str, FieldCatalog]]) -> FieldCatalog:
    """Merge per-document catalogs in input order.

    Every descriptor is tagged with its document id and occurrences are
    renumbered so they stay contiguous per name across documents.
    """
    merged: Dict[str, List[FieldDescriptor]] = defaultdict(list)
    for document_id, fragment in fragments:
        for name, entries in fragment.items():
            for entry in entries:
                merged[name].append(
                    replace(entry, occurrence=len(merged[name]) + 1, source_document=document_id)
                )
    return {name: merged[name] for name in sorted(merged)}


def _survey_one(named: NamedSource) -> Tuple[Optional[SurveyResult], Optional[str]]:
    document_id, source = named
    logger.info("Surveying %s", document_id)
    try:
        return survey_pdf(source), None
    except DocumentUnreadableError as exc:
        logger.error("Could not survey %s: %s", document_id, exc)
        return None, str(exc)


def survey_documents(sources: Sequence[NamedSource], *, max_workers: Optional[int] = None) -> CatalogBuild:
    """Survey several documents independently and merge the results.

    A document that cannot be parsed contributes no fields; its error is
    reported in ``CatalogBuild.errors``.
    """
    if not sources:
        return CatalogBuild(catalog={})
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        outcomes = list(pool.map(_survey_one, sources))

    fragments: List[Tuple[str, FieldCatalog]] = []
    errors: Dict[str, str] = {}
    skipped: Dict[str, List[SkippedField]] = {}
    for (document_id, _), (result, error) in zip(sources, outcomes):
        if result is None:
            errors[document_id] = error or "unknown error"
            continue
        fragments.append((document_id, result.fields))
        if result.skipped:
            skipped[document_id] = list(result.skipped)
    return CatalogBuild(catalog=merge_catalogs(fragments), errors=errors, skipped=skipped)


def survey_directory(directory: Union[str, Path], *, max_workers: Optional[int] = None) -> CatalogBuild:
    """Survey every ``*.pdf`` in a directory, ordered by file name."""
    root = Path(directory)
    if not root.is_dir():
        raise FileNotFoundError(f"Template directory not found: {root}")
    pdf_paths = sorted(p for p in root.iterdir() if p.is_file() and p.suffix.lower() == ".pdf")
    if not pdf_paths:
        logger.warning("No PDF files found in %s", root)
    return survey_documents([(p.name, p) for p in pdf_paths], max_workers=max_workers)


def catalog_to_dict(catalog: FieldCatalog) -> Dict[str, List[dict]]:
    return {name: [entry.to_dict() for entry in catalog[name]] for name in sorted(catalog)}


def catalog_to_json(catalog: FieldCatalog) -> str:
    return json.dumps(catalog_to_dict(catalog), indent=2, ensure_ascii=False)


def catalog_from_dict(data: object) -> FieldCatalog:
    if not isinstance(data, dict):
        raise CatalogFormatError("Catalog must be a JSON object keyed by field name")
    catalog: FieldCatalog = {}
    for name in sorted(data):
        entries = data[name]
        if not isinstance(entries, list):
            raise CatalogFormatError(f"Entries of '{name}' must be a list")
        try:
            catalog[name] = [FieldDescriptor.from_dict(name, entry) for entry in entries]
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise CatalogFormatError(f"Malformed entry for '{name}': {exc}") from exc
    return catalog


def save_catalog(catalog: FieldCatalog, path: Union[str, Path]) -> Path:
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(catalog_to_json(catalog), encoding="utf-8")
    logger.info("Saved catalog with %d fields to %s", len(catalog), destination)
    return destination


def load_catalog(path: Union[str, Path]) -> FieldCatalog:
    source = Path(path)
    try:
        data = json.loads(source.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise CatalogFormatError(f"Catalog {source} is not valid JSON: {exc}") from exc
    return catalog_from_dict(data)


def catalog_kinds(catalog: FieldCatalog) -> Dict[str, FieldKind]:
    return {name: entries[0].kind for name, entries in catalog.items() if entries}


def catalog_stats(catalog: FieldCatalog) -> CatalogStats:
    kinds = {
        name: sorted({entry.kind.symbol for entry in entries})
        for name, entries in catalog.items()
    }
    return CatalogStats(
        unique_fields=len(catalog),
        total_occurrences=sum(len(entries) for entries in catalog.values()),
        kinds=kinds,
    )


__all__ = [
    "CatalogStats",
    "NamedSource",
    "catalog_from_dict",
    "catalog_kinds",
    "catalog_stats",
    "catalog_to_dict",
    "catalog_to_json",
    "load_catalog",
    "merge_catalogs",
    "save_catalog",
    "survey_directory",
    "survey_documents",
]
