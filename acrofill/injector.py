"""Write payload values into a PDF template and flatten the result."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional

import fitz

from .errors import DocumentFlattenedError, DocumentUnreadableError, SerializationError
from .logging_utils import get_logger
from .models import FieldKind, FieldValue, FillPayload, InjectionResult
from .surveyor import PdfSource

logger = get_logger(__name__)

_TEXT_TYPES: FrozenSet[int] = frozenset({fitz.PDF_WIDGET_TYPE_TEXT})
_CHECKBOX_TYPES: FrozenSet[int] = frozenset({fitz.PDF_WIDGET_TYPE_CHECKBOX})
_CHOICE_TYPES: FrozenSet[int] = frozenset({fitz.PDF_WIDGET_TYPE_COMBOBOX, fitz.PDF_WIDGET_TYPE_LISTBOX})
_OFF_VALUES = frozenset({"", "Off", "/Off"})


def text_form(value: FieldValue) -> str:
    """String written into a text field for a payload value."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _kind_of_widget_type(field_type: int) -> FieldKind:
    if field_type in _CHECKBOX_TYPES:
        return FieldKind.CHECKBOX
    if field_type in _CHOICE_TYPES:
        return FieldKind.CHOICE
    return FieldKind.TEXT


@dataclass(frozen=True)
class _WidgetRef:
    page_number: int
    xref: int
    field_type: int


class FormDocument:
    """An AcroForm document that is either editable or flattened.

    Flattening is terminal: once called, every field operation raises
    ``DocumentFlattenedError``.
    """

    def __init__(self, handle: fitz.Document) -> None:
        self._doc = handle
        self._flattened = False
        self._index: Optional[Dict[str, List[_WidgetRef]]] = None

    @classmethod
    def open(cls, source: PdfSource, *, password: str = "") -> "FormDocument":
        try:
            if isinstance(source, (bytes, bytearray)):
                doc = fitz.open(stream=bytes(source), filetype="pdf")
            elif isinstance(source, (str, Path)):
                doc = fitz.open(str(source))
            else:
                doc = fitz.open(stream=source.read(), filetype="pdf")
        except Exception as exc:
            raise DocumentUnreadableError(f"Failed to open template: {exc}") from exc
        if not doc.is_pdf:
            doc.close()
            raise DocumentUnreadableError("Template is not a PDF document")
        if doc.needs_pass and not doc.authenticate(password):
            doc.close()
            raise DocumentUnreadableError("Template is encrypted and the user password was rejected")
        logger.debug("Opened template with %d pages", doc.page_count)
        return cls(doc)

    def __enter__(self) -> "FormDocument":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if not self._doc.is_closed:
            self._doc.close()

    @property
    def is_flattened(self) -> bool:
        return self._flattened

    def _ensure_editable(self) -> None:
        if self._flattened:
            raise DocumentFlattenedError("Document has been flattened; its fields can no longer be edited")

    def _widget_index(self) -> Dict[str, List[_WidgetRef]]:
        if self._index is None:
            index: Dict[str, List[_WidgetRef]] = {}
            for page in self._doc:
                for widget in page.widgets():
                    name = widget.field_name
                    if not name:
                        continue
                    index.setdefault(name, []).append(
                        _WidgetRef(page_number=page.number, xref=widget.xref, field_type=widget.field_type)
                    )
            self._index = index
        return self._index

    def field_names(self) -> List[str]:
        self._ensure_editable()
        return list(self._widget_index())

    def field_kinds(self) -> Dict[str, FieldKind]:
        self._ensure_editable()
        return {name: _kind_of_widget_type(refs[0].field_type) for name, refs in self._widget_index().items()}

    def _apply(self, name: str, widget_types: FrozenSet[int], setter: Callable[[fitz.Widget], None]) -> bool:
        """Run ``setter`` on every widget of ``name`` with a matching type.

        Returns True when at least one widget was written.
        """
        self._ensure_editable()
        refs = [ref for ref in self._widget_index().get(name, []) if ref.field_type in widget_types]
        written = 0
        for ref in refs:
            # Load a fresh widget per write; widgets outlive neither their page nor an update.
            page = self._doc[ref.page_number]
            widget = page.load_widget(ref.xref)
            try:
                setter(widget)
            except Exception as exc:
                logger.warning("Could not write field '%s' on page %d: %s", name, ref.page_number + 1, exc)
                continue
            written += 1
        if written and written < len(refs):
            logger.warning("Field '%s' written on %d of %d widgets", name, written, len(refs))
        return written > 0

    def _clear_text(self, widget: fitz.Widget) -> None:
        # An empty field_value is ignored by Widget.update(); blank /V and drop the stale appearance.
        xref = widget.xref
        self._doc.xref_set_key(xref, "V", "()")
        self._doc.xref_set_key(xref, "AP", "null")
        kind, parent = self._doc.xref_get_key(xref, "Parent")
        if kind == "xref" and self._doc.xref_get_key(xref, "T")[0] == "null":
            self._doc.xref_set_key(int(parent.split()[0]), "V", "()")

    def set_text(self, name: str, value: str) -> bool:
        if not value:
            return self._apply(name, _TEXT_TYPES, self._clear_text)

        def _set(widget: fitz.Widget) -> None:
            widget.field_value = value
            widget.update()

        return self._apply(name, _TEXT_TYPES, _set)

    def set_checkbox(self, name: str, checked: bool) -> bool:
        def _set(widget: fitz.Widget) -> None:
            widget.field_value = widget.on_state() if checked else "Off"
            widget.update()

        return self._apply(name, _CHECKBOX_TYPES, _set)

    def set_choice(self, name: str, value: str) -> bool:
        def _set(widget: fitz.Widget) -> None:
            widget.field_value = value
            widget.update()

        return self._apply(name, _CHOICE_TYPES, _set)

    def read_value(self, name: str) -> FieldValue:
        self._ensure_editable()
        refs = self._widget_index().get(name)
        if not refs:
            return None
        ref = refs[0]
        widget = self._doc[ref.page_number].load_widget(ref.xref)
        value = widget.field_value
        kind = _kind_of_widget_type(ref.field_type)
        if kind is FieldKind.CHECKBOX:
            if isinstance(value, bool):
                return value
            return value is not None and str(value) not in _OFF_VALUES
        if value is None:
            return None
        return str(value)

    def _dispatch(self, name: str, kind: FieldKind, value: FieldValue) -> bool:
        if kind is FieldKind.CHECKBOX:
            return self.set_checkbox(name, value is True)
        if kind is FieldKind.CHOICE:
            return self.set_choice(name, text_form(value))
        return self.set_text(name, text_form(value))

    def fill(self, payload: FillPayload, kinds: Optional[Mapping[str, FieldKind]] = None) -> List[str]:
        """Write every payload entry and return the names that could not be placed.

        Names with a known kind are written with the matching setter. Other
        names are tried as text fields first, then as checkboxes.
        """
        self._ensure_editable()
        missing: List[str] = []
        for name, value in payload.items():
            kind = kinds.get(name) if kinds else None
            if kind is not None:
                placed = self._dispatch(name, kind, value)
            else:
                placed = self.set_text(name, text_form(value)) or self.set_checkbox(name, value is True)
            if placed:
                logger.debug("Filled field '%s'", name)
            else:
                missing.append(name)
        return missing

    def flatten(self) -> None:
        """Bake every widget into page content and drop the interactive form."""
        self._ensure_editable()
        try:
            self._doc.bake(annots=False, widgets=True)
            catalog_xref = self._doc.pdf_catalog()
            if self._doc.xref_get_key(catalog_xref, "AcroForm")[0] != "null":
                self._doc.xref_set_key(catalog_xref, "AcroForm", "null")
        except Exception as exc:
            raise SerializationError(f"Failed to flatten document: {exc}") from exc
        self._flattened = True
        self._index = None
        logger.debug("Flattened document")

    def to_bytes(self) -> bytes:
        try:
            return self._doc.tobytes(garbage=3, deflate=True, no_new_id=True)
        except Exception as exc:
            raise SerializationError(f"Failed to serialise document: {exc}") from exc


def inject(
    template: PdfSource,
    payload: FillPayload,
    *,
    kinds: Optional[Mapping[str, FieldKind]] = None,
    flatten: bool = True,
) -> InjectionResult:
    """Fill a fresh copy of ``template`` with ``payload``.

    Parameters
    ----------
    template:
        Path, bytes or stream of the template PDF. It is parsed anew on every
        call and never modified.
    payload:
        Flat mapping of field names to values. Booleans drive checkboxes; only
        ``True`` checks a box.
    kinds:
        Optional field kinds, typically from a catalog, used instead of probing.
    flatten:
        When True (the default) the output has no interactive fields left.

    Returns
    -------
    InjectionResult
        The output bytes and the payload names absent from the template.
    """
    logger.info("Injecting %d payload entries", len(payload))
    with FormDocument.open(template) as document:
        missing = document.fill(payload, kinds=kinds)
        if flatten:
            document.flatten()
        content = document.to_bytes()
    if missing:
        logger.warning("Payload fields not found in template: %s", ", ".join(missing))
    return InjectionResult(content=content, missing_fields=missing)


__all__ = ["FormDocument", "inject", "text_form"]
