from acrofill.utils import canonical_index, expand_canonical_payload, normalize_name, suggest_field_names


def test_normalize_name():
    assert normalize_name("DNI Paciente-2") == "dni-paciente"
    assert normalize_name("edad__1") == "edad"
    assert normalize_name("Nombre (Dr)") == "nombre-dr"
    assert normalize_name("  fecha  ") == "fecha"
    assert normalize_name("") == ""


def test_canonical_index_groups_duplicates():
    index = canonical_index(["dni-paciente", "dni-paciente-2", "edad__1", "edad"])

    assert index == {"dni-paciente": ["dni-paciente", "dni-paciente-2"], "edad": ["edad", "edad__1"]}


def test_aliases_take_precedence():
    index = canonical_index(["Sexo M", "F", "edad"], aliases={"sexo-f": ["F"]})

    assert index["sexo-f"] == ["F"]
    assert "f" not in index
    assert index["sexo-m"] == ["Sexo M"]


def test_expand_canonical_payload():
    index = {"dni-paciente": ["dni-paciente", "dni-paciente-2"]}

    expanded = expand_canonical_payload({"dni-paciente": "123", "other": True}, index)

    assert expanded == {"dni-paciente": "123", "dni-paciente-2": "123", "other": True}


def test_suggest_field_names():
    available = ["empleado-dni", "empleado-nombre", "lugar-fecha"]

    suggestions = suggest_field_names(["empleado-dni-2", "zzz"], available)

    assert suggestions == {"empleado-dni-2": "empleado-dni"}
