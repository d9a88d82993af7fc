"""acrofill package."""

from .catalog import (
	catalog_kinds,
	load_catalog,
	merge_catalogs,
	save_catalog,
	survey_directory,
	survey_documents,
)
from .errors import (
	AcroFillError,
	CatalogFormatError,
	DocumentFlattenedError,
	DocumentUnreadableError,
	SerializationError,
)
from .injector import FormDocument, inject
from .models import (
	CatalogBuild,
	FieldCatalog,
	FieldDescriptor,
	FieldGeometry,
	FieldKind,
	InjectionResult,
	SkippedField,
	SurveyResult,
)
from .surveyor import list_field_names, survey_pdf

__all__ = [
	"AcroFillError",
	"CatalogBuild",
	"CatalogFormatError",
	"DocumentFlattenedError",
	"DocumentUnreadableError",
	"FieldCatalog",
	"FieldDescriptor",
	"FieldGeometry",
	"FieldKind",
	"FormDocument",
	"InjectionResult",
	"SerializationError",
	"SkippedField",
	"SurveyResult",
	"catalog_kinds",
	"inject",
	"list_field_names",
	"load_catalog",
	"merge_catalogs",
	"save_catalog",
	"survey_directory",
	"survey_documents",
	"survey_pdf",
]
