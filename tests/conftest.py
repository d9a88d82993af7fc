"""Fixtures that build AcroForm PDFs on the fly."""

from __future__ import annotations

from io import BytesIO
from typing import Dict, Iterable, List, Optional, Sequence

import fitz
import pytest
from pypdf import PdfWriter
from pypdf.generic import (
    ArrayObject,
    DictionaryObject,
    FloatObject,
    IndirectObject,
    NameObject,
    NumberObject,
    TextStringObject,
)

TEXT = fitz.PDF_WIDGET_TYPE_TEXT
CHECKBOX = fitz.PDF_WIDGET_TYPE_CHECKBOX
COMBOBOX = fitz.PDF_WIDGET_TYPE_COMBOBOX


def make_form(entries: Iterable[Dict], pages: int = 1) -> bytes:
    """Create a form with PyMuPDF.

    Each entry holds ``name``, ``type`` (a ``fitz.PDF_WIDGET_TYPE_*``), ``rect``
    in top-left page coordinates and optionally ``page``, ``value`` and
    ``choices``.
    """
    doc = fitz.open()
    for _ in range(pages):
        doc.new_page(width=595, height=842)
    for entry in entries:
        page = doc[entry.get("page", 0)]
        widget = fitz.Widget()
        widget.field_name = entry["name"]
        widget.field_type = entry["type"]
        widget.rect = fitz.Rect(*entry["rect"])
        if entry["type"] == COMBOBOX:
            widget.choice_values = entry.get("choices", [])
            widget.field_value = entry.get("value", widget.choice_values[0] if widget.choice_values else "")
        elif entry["type"] == CHECKBOX:
            widget.field_value = entry.get("value", False)
        else:
            widget.field_value = entry.get("value", "")
        page.add_widget(widget)
    data = doc.tobytes()
    doc.close()
    return data


class RawFormBuilder:
    """Assemble AcroForm dictionaries by hand to reach malformed or unusual shapes."""

    def __init__(self, pages: int = 1) -> None:
        self.writer = PdfWriter()
        for _ in range(pages):
            self.writer.add_blank_page(width=612, height=792)
        self.fields = ArrayObject()

    def _page(self, index: int):
        return self.writer.pages[index]

    def _attach(self, ref: IndirectObject, page_index: int) -> None:
        page = self._page(page_index)
        annots = page.get("/Annots")
        if annots is None:
            page[NameObject("/Annots")] = ArrayObject([ref])
        else:
            annots.get_object().append(ref)

    def _widget_dict(self, rect: Sequence[float], page_index: int, with_page_ref: bool) -> DictionaryObject:
        widget = DictionaryObject(
            {
                NameObject("/Type"): NameObject("/Annot"),
                NameObject("/Subtype"): NameObject("/Widget"),
                NameObject("/Rect"): ArrayObject([FloatObject(v) for v in rect]),
            }
        )
        if with_page_ref:
            widget[NameObject("/P")] = self._page(page_index).indirect_reference
        return widget

    def add_field(
        self,
        name: Optional[str],
        field_type: str = "/Tx",
        rect: Sequence[float] = (10, 10, 110, 30),
        page: int = 0,
        value: Optional[object] = None,
        flags: Optional[int] = None,
        with_page_ref: bool = True,
        in_annots: bool = True,
    ) -> IndirectObject:
        field = self._widget_dict(rect, page, with_page_ref)
        field[NameObject("/FT")] = NameObject(field_type)
        if name is not None:
            field[NameObject("/T")] = TextStringObject(name)
        if value is not None:
            field[NameObject("/V")] = value
        if flags is not None:
            field[NameObject("/Ff")] = NumberObject(flags)
        ref = self.writer._add_object(field)
        if in_annots:
            self._attach(ref, page)
        self.fields.append(ref)
        return ref

    def add_field_without_widgets(self, name: str, field_type: str = "/Tx") -> IndirectObject:
        field = DictionaryObject(
            {
                NameObject("/FT"): NameObject(field_type),
                NameObject("/T"): TextStringObject(name),
            }
        )
        ref = self.writer._add_object(field)
        self.fields.append(ref)
        return ref

    def add_multi_widget_field(self, name: str, placements: List[Dict], field_type: str = "/Tx") -> IndirectObject:
        parent = DictionaryObject(
            {
                NameObject("/FT"): NameObject(field_type),
                NameObject("/T"): TextStringObject(name),
            }
        )
        parent_ref = self.writer._add_object(parent)
        kids = ArrayObject()
        for placement in placements:
            widget = self._widget_dict(placement["rect"], placement.get("page", 0), True)
            widget[NameObject("/Parent")] = parent_ref
            kid_ref = self.writer._add_object(widget)
            self._attach(kid_ref, placement.get("page", 0))
            kids.append(kid_ref)
        parent[NameObject("/Kids")] = kids
        self.fields.append(parent_ref)
        return parent_ref

    def add_group(self, name: str, child_names: Sequence[str], rect: Sequence[float] = (10, 40, 110, 60)) -> IndirectObject:
        group = DictionaryObject({NameObject("/T"): TextStringObject(name)})
        group_ref = self.writer._add_object(group)
        kids = ArrayObject()
        for child_name in child_names:
            child = self._widget_dict(rect, 0, True)
            child[NameObject("/FT")] = NameObject("/Tx")
            child[NameObject("/T")] = TextStringObject(child_name)
            child[NameObject("/Parent")] = group_ref
            child_ref = self.writer._add_object(child)
            self._attach(child_ref, 0)
            kids.append(child_ref)
        group[NameObject("/Kids")] = kids
        self.fields.append(group_ref)
        return group_ref

    def to_bytes(self, owner_password: Optional[str] = None) -> bytes:
        self.writer._root_object[NameObject("/AcroForm")] = DictionaryObject({NameObject("/Fields"): self.fields})
        if owner_password is not None:
            self.writer.encrypt(user_password="", owner_password=owner_password, algorithm="AES-128")
        buffer = BytesIO()
        self.writer.write(buffer)
        return buffer.getvalue()


@pytest.fixture
def raw_form() -> RawFormBuilder:
    return RawFormBuilder(pages=2)


@pytest.fixture
def simple_form() -> bytes:
    return make_form(
        [
            {"name": "dni", "type": TEXT, "rect": (50, 50, 200, 70)},
            {"name": "nombre", "type": TEXT, "rect": (50, 90, 300, 110), "value": "Ana"},
            {"name": "acepta", "type": CHECKBOX, "rect": (50, 130, 64, 144)},
            {"name": "provincia", "type": COMBOBOX, "rect": (50, 160, 200, 180), "choices": ["ER", "BA"]},
        ]
    )


@pytest.fixture
def claim_template() -> bytes:
    return make_form(
        [
            {"name": "art", "type": TEXT, "rect": (50, 40, 300, 60)},
            {"name": "empleado-dni", "type": TEXT, "rect": (50, 80, 300, 100)},
            {"name": "lugar-fecha", "type": TEXT, "rect": (50, 120, 300, 140)},
            {"name": "Sexo M", "type": CHECKBOX, "rect": (50, 160, 64, 174)},
            {"name": "F", "type": CHECKBOX, "rect": (80, 160, 94, 174)},
            {"name": "motivo-trabajo", "type": CHECKBOX, "rect": (50, 200, 64, 214)},
        ]
    )
