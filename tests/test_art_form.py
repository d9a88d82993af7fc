from acrofill.config import load_settings
from models.claim_payload import ClaimPayload, ProviderInfo
from services.art_form import build_claim_fields, only_digits, split_iso_date
from services.pdf_service import coerce_fields, safe_filename

PAYLOAD = {
    "trabajador": {
        "apellido": " Perez ",
        "nombre": "Juan",
        "dni": 30111222,
        "nacimiento": "1990-04-07",
        "sexo": "M",
        "calle": "San Martin",
        "numero": "123",
        "localidad": "Chajari",
        "provincia": "Entre Rios",
        "cp": "E3228",
        "telefono": "(3456) 15-123456",
    },
    "empleador": {"nombre": "ACME SA", "cuit": "30-70754530-1"},
    "ART": {"nombre": "La Segunda", "nroSiniestro": "A-99"},
    "consulta": {"tipo": "AIT"},
    "prestador": {"nombre": "Spoofed clinic"},
}


def _fields(payload=PAYLOAD):
    provider = ProviderInfo.model_validate(load_settings().provider)
    return build_claim_fields(ClaimPayload.model_validate(payload), provider, "Chajari, 01/02/2026")


def test_worker_fields():
    fields = _fields()

    assert fields["empleado-nombre"] == "Perez Juan"
    assert fields["empleado-dni"] == "30111222"
    assert (fields["empleado-dia"], fields["empleado-mes"], fields["empleado-anio"]) == ("07", "04", "1990")
    assert fields["empleado-cp"] == "3228"
    assert fields["empleado-celular"] == "345615123456"
    assert fields["empleado-piso"] == ""
    assert fields["Sexo M"] is True
    assert fields["F"] is False


def test_employer_insurer_and_consultation():
    fields = _fields()

    assert fields["art"] == "La Segunda"
    assert fields["num-siniestro"] == "A-99"
    assert fields["empleador-nombre"] == "ACME SA"
    assert fields["empleador-cuit"] == "30707545301"
    assert fields["empleador-mail"] == ""
    assert fields["motivo-in-itinere"] is True
    assert fields["motivo-trabajo"] is False
    assert fields["motivo-enfermedad-profesional"] is False
    assert fields["motivo-intercurrencia"] is False
    assert fields["lugar-fecha"] == "Chajari, 01/02/2026"


def test_provider_comes_from_settings(monkeypatch):
    monkeypatch.setenv("PRESTADOR_NOMBRE", "Clinica Test")

    assert _fields()["prestador-nombre"] == "Clinica Test"


def test_empty_payload_produces_blank_fields():
    fields = _fields({})

    assert fields["empleado-nombre"] == ""
    assert fields["empleado-dia"] == ""
    assert fields["Sexo M"] is False
    assert not any(fields[box] for box in ("motivo-trabajo", "motivo-in-itinere"))


def test_helpers():
    assert only_digits("30-70754530-1") == "30707545301"
    assert only_digits(None) == ""
    assert split_iso_date("1990-04-07") == ("07", "04", "1990")
    assert split_iso_date("1990-04") == ("", "04", "1990")
    assert split_iso_date(None) == ("", "", "")


def test_coerce_fields():
    assert coerce_fields({"a": 1, "b": True, "c": None, "d": "x"}) == {"a": "1", "b": True, "c": None, "d": "x"}


def test_safe_filename():
    assert safe_filename("mi archivo.pdf") == "mi_archivo.pdf"
    assert safe_filename(None) == "FORMULARIO_ART.pdf"
    assert safe_filename("../x.pdf") == ".._x.pdf"
