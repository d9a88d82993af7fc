"""Survey the AcroForm fields of a PDF into a catalog fragment.

Fields are read straight from the ``/AcroForm /Fields`` tree with pypdf so
that fields without widgets or without a name can be detected and reported
instead of silently disappearing.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Any, BinaryIO, Dict, Iterator, List, Optional, Sequence, Set, Tuple, Union

from pypdf import PasswordType, PdfReader
from pypdf.generic import DictionaryObject

from .errors import DocumentUnreadableError
from .geometry import geometry_from_rect
from .logging_utils import get_logger
from .models import FieldCatalog, FieldDescriptor, FieldKind, FieldValue, SkippedField, SurveyResult

logger = get_logger(__name__)

PdfSource = Union[str, Path, bytes, BinaryIO]

# Field flag bits for /Btn fields (PDF 32000-1, table 226)
_RADIO_FLAG = 1 << 15
_PUSHBUTTON_FLAG = 1 << 16
_OFF_STATES = frozenset({"", "/Off", "Off"})
_DEFAULT_PAGE = 1

SKIP_EMPTY_NAME = "empty name"
SKIP_NO_WIDGETS = "no widgets"


@dataclass
class _TerminalField:
    name: str
    node: DictionaryObject
    widgets: List[Tuple[Any, DictionaryObject]]


def _resolve(obj: Any) -> Any:
    if obj is not None and hasattr(obj, "get_object"):
        return obj.get_object()
    return obj


def _ref_key(obj: Any) -> Optional[int]:
    """Object number of an indirect reference, or of the object it resolved to."""
    idnum = getattr(obj, "idnum", None)
    if idnum is None:
        idnum = getattr(getattr(obj, "indirect_reference", None), "idnum", None)
    return idnum


def _open_reader(source: PdfSource, password: str) -> PdfReader:
    if isinstance(source, (bytes, bytearray)):
        stream: Union[str, BinaryIO] = BytesIO(source)
    elif isinstance(source, Path):
        stream = str(source)
    else:
        stream = source
    try:
        reader = PdfReader(stream)
        if reader.is_encrypted:
            # Owner-password-only documents open with an empty user password.
            if reader.decrypt(password) == PasswordType.NOT_DECRYPTED:
                raise DocumentUnreadableError("Document is encrypted and the user password was rejected")
            logger.info("Document is encrypted; opened with the user password")
        # Force the cross-reference table and page tree to load now.
        len(reader.pages)
    except DocumentUnreadableError:
        raise
    except Exception as exc:
        raise DocumentUnreadableError(f"Failed to parse PDF: {exc}") from exc
    return reader


def _inherited(node: DictionaryObject, key: str) -> Any:
    """Look up an inheritable field attribute on the node or its ancestors."""
    seen: Set[int] = set()
    current: Optional[DictionaryObject] = node
    while current is not None:
        if key in current:
            return _resolve(current[key])
        parent = current.get("/Parent")
        if parent is None:
            return None
        parent_key = _ref_key(parent)
        if parent_key is not None:
            if parent_key in seen:
                return None
            seen.add(parent_key)
        current = _resolve(parent)
    return None


def _qualify(prefix: str, partial: str) -> str:
    if prefix and partial:
        return f"{prefix}.{partial}"
    return partial or prefix


def _iter_terminal_fields(refs: Sequence[Any], prefix: str, seen: Set[int]) -> Iterator[_TerminalField]:
    for ref in refs:
        node = _resolve(ref)
        if not isinstance(node, DictionaryObject):
            continue
        key = _ref_key(ref)
        if key is not None:
            if key in seen:
                continue
            seen.add(key)

        partial = _resolve(node.get("/T"))
        name = _qualify(prefix, str(partial) if partial is not None else "")
        kids = list(_resolve(node.get("/Kids")) or [])
        named_kids = [kid for kid in kids if "/T" in _resolve(kid)]
        if named_kids:
            yield from _iter_terminal_fields(named_kids, name, seen)
            continue

        if kids:
            widgets = [(kid, _resolve(kid)) for kid in kids]
        elif "/Rect" in node:
            widgets = [(ref, node)]
        else:
            widgets = []
        widgets = [(wref, widget) for wref, widget in widgets if "/Rect" in widget]
        yield _TerminalField(name=name, node=node, widgets=widgets)


def _iter_form_fields(reader: PdfReader) -> Iterator[_TerminalField]:
    root = _resolve(reader.trailer["/Root"])
    acroform = _resolve(root.get("/AcroForm"))
    if not isinstance(acroform, DictionaryObject):
        return
    fields = _resolve(acroform.get("/Fields"))
    if not fields:
        return
    yield from _iter_terminal_fields(list(fields), "", set())


def _classify(node: DictionaryObject) -> FieldKind:
    field_type = _inherited(node, "/FT")
    if field_type == "/Tx":
        return FieldKind.TEXT
    if field_type == "/Ch":
        return FieldKind.CHOICE
    if field_type == "/Btn":
        flags = int(_inherited(node, "/Ff") or 0)
        if flags & (_RADIO_FLAG | _PUSHBUTTON_FLAG):
            return FieldKind.TEXT
        return FieldKind.CHECKBOX
    return FieldKind.TEXT


def _read_value(field: _TerminalField, kind: FieldKind) -> FieldValue:
    value = _inherited(field.node, "/V")
    if kind is FieldKind.CHECKBOX:
        state = value
        if state is None:
            state = _resolve(field.widgets[0][1].get("/AS"))
        return state is not None and str(state) not in _OFF_STATES
    if kind is FieldKind.CHOICE:
        if isinstance(value, list):
            return str(value[0]) if len(value) == 1 else None
        return str(value) if value is not None else None
    # Radio groups and push buttons are catalogued as text but carry no text value.
    if _inherited(field.node, "/FT") != "/Tx" or value is None:
        return None
    return str(value)


class _PageLocator:
    """Map widget annotations to 1-based page numbers."""

    def __init__(self, reader: PdfReader) -> None:
        self._by_page: Dict[int, int] = {}
        self._by_annot: Dict[int, int] = {}
        for index, page in enumerate(reader.pages):
            page_key = _ref_key(page)
            if page_key is not None:
                self._by_page[page_key] = index + 1
            annots = _resolve(page.get("/Annots"))
            if not isinstance(annots, list):
                continue
            for annot in annots:
                annot_key = _ref_key(annot)
                if annot_key is not None:
                    self._by_annot.setdefault(annot_key, index + 1)

    def page_of(self, widget_ref: Any, widget: DictionaryObject) -> int:
        page_key = _ref_key(widget.get("/P"))
        if page_key is not None and page_key in self._by_page:
            return self._by_page[page_key]
        widget_key = _ref_key(widget_ref)
        if widget_key is not None and widget_key in self._by_annot:
            return self._by_annot[widget_key]
        return _DEFAULT_PAGE


def survey_pdf(source: PdfSource, *, password: str = "") -> SurveyResult:
    """Build the catalog fragment of a single document.

    Raises
    ------
    DocumentUnreadableError
        If the document cannot be parsed or decrypted.
    """
    reader = _open_reader(source, password)
    try:
        locator = _PageLocator(reader)
    except Exception as exc:
        raise DocumentUnreadableError(f"Failed to read page tree: {exc}") from exc
    grouped: Dict[str, List[FieldDescriptor]] = defaultdict(list)
    skipped: List[SkippedField] = []

    try:
        terminal_fields = list(_iter_form_fields(reader))
    except Exception as exc:
        raise DocumentUnreadableError(f"Failed to read form structure: {exc}") from exc
    logger.debug("Found %d terminal fields", len(terminal_fields))

    for index, field in enumerate(terminal_fields, start=1):
        if not field.name.strip():
            logger.warning("Field %d has no name; skipping", index)
            skipped.append(SkippedField(name=field.name, reason=SKIP_EMPTY_NAME))
            continue
        if not field.widgets:
            logger.warning("Field '%s' has no widgets; skipping", field.name)
            skipped.append(SkippedField(name=field.name, reason=SKIP_NO_WIDGETS))
            continue
        try:
            kind = _classify(field.node)
            widget_ref, widget = field.widgets[0]
            rect = [float(v) for v in _resolve(widget["/Rect"])]
            geometry = geometry_from_rect(rect)
            page = locator.page_of(widget_ref, widget)
        except Exception as exc:
            logger.warning("Field '%s' could not be placed: %s", field.name, exc)
            skipped.append(SkippedField(name=field.name, reason=f"unreadable widget: {exc}"))
            continue
        try:
            value = _read_value(field, kind)
        except Exception as exc:
            logger.debug("Value of '%s' unreadable: %s", field.name, exc)
            value = None

        grouped[field.name].append(
            FieldDescriptor(
                name=field.name,
                occurrence=len(grouped[field.name]) + 1,
                kind=kind,
                page=page,
                value=value,
                geometry=geometry,
            )
        )
        logger.debug("Field '%s' kind=%s page=%d rect=%s", field.name, kind.value, page, geometry.rect_pt)

    catalog: FieldCatalog = {name: grouped[name] for name in sorted(grouped)}
    logger.info(
        "Surveyed %d occurrences of %d fields (%d skipped)",
        sum(len(v) for v in catalog.values()),
        len(catalog),
        len(skipped),
    )
    return SurveyResult(fields=catalog, skipped=skipped)


def list_field_names(source: PdfSource, *, password: str = "") -> List[str]:
    """Return every named field of the document in discovery order, without duplicates."""
    reader = _open_reader(source, password)
    names: List[str] = []
    try:
        for field in _iter_form_fields(reader):
            if field.name.strip() and field.name not in names:
                names.append(field.name)
    except Exception as exc:
        raise DocumentUnreadableError(f"Failed to read form structure: {exc}") from exc
    return names


__all__ = ["PdfSource", "SKIP_EMPTY_NAME", "SKIP_NO_WIDGETS", "list_field_names", "survey_pdf"]
