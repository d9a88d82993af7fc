"""Data models for acrofill."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

FieldValue = Union[str, bool, None]
FillPayload = Mapping[str, FieldValue]
Rect = Tuple[float, float, float, float]


class FieldKind(str, Enum):
    """Closed set of field kinds a catalog entry can carry."""

    TEXT = "text"
    CHECKBOX = "checkbox"
    CHOICE = "choice"

    @property
    def symbol(self) -> str:
        return _KIND_SYMBOLS[self]

    @classmethod
    def from_symbol(cls, symbol: str) -> "FieldKind":
        for kind, kind_symbol in _KIND_SYMBOLS.items():
            if kind_symbol == symbol:
                return kind
        return cls.TEXT


_KIND_SYMBOLS = {
    FieldKind.TEXT: "/Tx",
    FieldKind.CHECKBOX: "/Btn",
    FieldKind.CHOICE: "/Ch",
}


@dataclass(frozen=True)
class FieldGeometry:
    """Bounding box of a widget in points and millimetres, rounded to 2 decimals."""

    x_pt: float
    y_pt: float
    w_pt: float
    h_pt: float
    rect_pt: Rect
    x_mm: float
    y_mm: float
    w_mm: float
    h_mm: float


@dataclass(frozen=True)
class FieldDescriptor:
    """One occurrence of a named form field."""

    name: str
    occurrence: int
    kind: FieldKind
    page: int
    value: FieldValue
    geometry: FieldGeometry
    source_document: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        g = self.geometry
        entry: Dict[str, Any] = {
            "occurrence": self.occurrence,
            "page": self.page,
            "field_type": self.kind.symbol,
            "value": self.value,
            "rect_pt": list(g.rect_pt),
            "x_pt": g.x_pt,
            "y_pt": g.y_pt,
            "w_pt": g.w_pt,
            "h_pt": g.h_pt,
            "x_mm": g.x_mm,
            "y_mm": g.y_mm,
            "w_mm": g.w_mm,
            "h_mm": g.h_mm,
        }
        if self.source_document is not None:
            entry["source_pdf"] = self.source_document
        return entry

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> "FieldDescriptor":
        rect = data["rect_pt"]
        if len(rect) != 4:
            raise ValueError(f"rect_pt of '{name}' must have 4 elements")
        geometry = FieldGeometry(
            x_pt=float(data["x_pt"]),
            y_pt=float(data["y_pt"]),
            w_pt=float(data["w_pt"]),
            h_pt=float(data["h_pt"]),
            rect_pt=(float(rect[0]), float(rect[1]), float(rect[2]), float(rect[3])),
            x_mm=float(data["x_mm"]),
            y_mm=float(data["y_mm"]),
            w_mm=float(data["w_mm"]),
            h_mm=float(data["h_mm"]),
        )
        return cls(
            name=name,
            occurrence=int(data["occurrence"]),
            kind=FieldKind.from_symbol(str(data["field_type"])),
            page=int(data["page"]),
            value=data.get("value"),
            geometry=geometry,
            source_document=data.get("source_pdf"),
        )


FieldCatalog = Dict[str, List[FieldDescriptor]]


@dataclass(frozen=True)
class SkippedField:
    """A field the surveyor could not place in the catalog."""

    name: str
    reason: str


@dataclass(frozen=True)
class SurveyResult:
    fields: FieldCatalog
    skipped: List[SkippedField] = field(default_factory=list)

    @property
    def occurrence_count(self) -> int:
        return sum(len(entries) for entries in self.fields.values())


@dataclass(frozen=True)
class CatalogBuild:
    """Merged catalog of a multi-document survey plus per-document diagnostics."""

    catalog: FieldCatalog
    errors: Dict[str, str] = field(default_factory=dict)
    skipped: Dict[str, List[SkippedField]] = field(default_factory=dict)


@dataclass(frozen=True)
class InjectionResult:
    content: bytes
    missing_fields: List[str] = field(default_factory=list)


__all__ = [
    "CatalogBuild",
    "FieldCatalog",
    "FieldDescriptor",
    "FieldGeometry",
    "FieldKind",
    "FieldValue",
    "FillPayload",
    "InjectionResult",
    "Rect",
    "SkippedField",
    "SurveyResult",
]
