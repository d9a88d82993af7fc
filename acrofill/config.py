"""Environment-driven settings.

Entry points call ``load_dotenv()`` before reading settings, so values may
come from a ``.env`` file as well as the process environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

DEFAULT_TEMPLATE = Path("templates") / "FORMULARIO-ART-UNIFICADO.pdf"

# Provider shown on every claim form; never taken from the request.
_PROVIDER_DEFAULTS: Dict[str, str] = {
    "nombre": "CLINICA DE LA UNION S.A",
    "cuit": "30-70754530-1",
    "calle": "AV. SIBURU",
    "numero": "1085",
    "piso": "-",
    "depto": "-",
    "localidad": "CHAJARI",
    "provincia": "ENTRE RIOS",
    "cp": "3228",
    "telDdn": "3456",
    "tel": "441580",
    "fax": "-",
    "mail": "CLINICADELAUNIONART@GMAIL.COM",
}

_PROVIDER_ENV = {
    "nombre": "PRESTADOR_NOMBRE",
    "cuit": "PRESTADOR_CUIT",
    "calle": "PRESTADOR_CALLE",
    "numero": "PRESTADOR_NUMERO",
    "piso": "PRESTADOR_PISO",
    "depto": "PRESTADOR_DEPTO",
    "localidad": "PRESTADOR_LOCALIDAD",
    "provincia": "PRESTADOR_PROVINCIA",
    "cp": "PRESTADOR_CP",
    "telDdn": "PRESTADOR_TEL_DDN",
    "tel": "PRESTADOR_TEL",
    "fax": "PRESTADOR_FAX",
    "mail": "PRESTADOR_MAIL",
}


@dataclass(frozen=True)
class Settings:
    template_path: Path
    provider: Dict[str, str]
    place_and_date: str = "Chajari, Entre Rios"


def load_settings() -> Settings:
    template = os.getenv("ACROFILL_TEMPLATE")
    provider = {key: os.getenv(env_name) or _PROVIDER_DEFAULTS[key] for key, env_name in _PROVIDER_ENV.items()}
    return Settings(
        template_path=Path(template) if template else DEFAULT_TEMPLATE,
        provider=provider,
        place_and_date=os.getenv("ACROFILL_PLACE_DATE") or "Chajari, Entre Rios",
    )


__all__ = ["DEFAULT_TEMPLATE", "Settings", "load_settings"]
