"""HTTP API for the claim-form PDF generator."""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.responses import JSONResponse, Response

from acrofill.config import Settings, load_settings
from acrofill.errors import AcroFillError
from acrofill.models import InjectionResult
from models.claim_payload import ClaimRequest, FieldsRequest
from services.pdf_service import PdfFormService, safe_filename

load_dotenv()

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


def _pdf_response(result: InjectionResult, file_name: Optional[str]) -> Response:
    return Response(
        content=result.content,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'inline; filename="{safe_filename(file_name)}"',
            "Cache-Control": "no-store",
            "X-Missing-Fields": quote(",".join(result.missing_fields), safe=",- "),
        },
    )


def _failure(message: str, exc: Exception) -> JSONResponse:
    logger.error("%s: %s", message, exc)
    return JSONResponse(status_code=500, content={"error": message, "detail": str(exc)})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    service = PdfFormService(settings or load_settings())
    app = FastAPI(
        title="Claim Form PDF API",
        description="Fills the unified ART claim form template and returns a flattened PDF.",
        version="0.1.0",
    )

    @app.get("/api/pdf")
    def template_status(debug: Optional[str] = None):
        """Health check; with ``debug=1`` also lists the template's field names."""
        template = str(service.template_path)
        if debug != "1":
            return {"ok": True, "template": template}
        try:
            names = service.field_names()
        except (AcroFillError, OSError) as exc:
            logger.error("Template could not be read: %s", exc)
            return JSONResponse(
                status_code=500,
                content={"ok": False, "error": "Template could not be read", "detail": str(exc)},
            )
        return {"ok": True, "template": template, "fieldsCount": len(names), "fieldNames": names}

    @app.post("/api/pdf")
    def generate_claim_pdf(request: ClaimRequest):
        if request.payload is None:
            return JSONResponse(status_code=400, content={"error": "Missing payload"})
        try:
            result = service.fill_claim(request.payload)
        except (AcroFillError, OSError) as exc:
            return _failure("PDF could not be generated", exc)
        return _pdf_response(result, request.file_name)

    @app.post("/api/pdf/fill")
    def fill_pdf_fields(request: FieldsRequest):
        if request.fields is None:
            return JSONResponse(status_code=400, content={"error": "Missing fields"})
        try:
            result = service.fill_fields(request.fields)
        except (AcroFillError, OSError) as exc:
            return _failure("PDF could not be generated", exc)
        return _pdf_response(result, request.file_name)

    return app


app = create_app()


if __name__ == "__main__":
    import os

    import uvicorn

    uvicorn.run(app, host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "8000")))
