import pytest

from epiphyte.operations import MODEL_OPERATIONS, Opcode, opcode, opcode_name


def test_codes_fixed_by_format():
    assert opcode("OP") == 1
    assert opcode("ADD") == 4
    assert opcode("MUL") == 6
    assert opcode("CMIN") == 34


@pytest.mark.parametrize("op", list(Opcode))
def test_name_round_trip(op):
    assert opcode(opcode_name(op)) is op
    assert Opcode.from_name(op.name) is op
    assert opcode_name(int(op)) == op.name


def test_codes_are_contiguous():
    for code in range(1, 35):
        assert opcode_name(code) != "???"
        assert int(opcode(opcode_name(code))) == code
    assert opcode_name(35) == "???"


def test_unknown_name_raises():
    with pytest.raises(ValueError):
        opcode("XYZ")
    with pytest.raises(ValueError):
        Opcode.from_name("")


def test_names_are_case_sensitive():
    with pytest.raises(ValueError):
        opcode("add")


@pytest.mark.parametrize("code", [0, -1, 35, 1000])
def test_unknown_code_name(code):
    assert opcode_name(code) == "???"


def test_model_operations_subset():
    names = [
        "OP", "ADD", "SUB", "MUL", "DIV", "POW", "SQR", "SIN", "ARCS", "COS",
        "ARCC", "TAN", "ARCT", "EXP", "LOG", "ABS", "SGN", "MAX", "MIN",
    ]
    assert {opcode(name) for name in names} == set(MODEL_OPERATIONS)
    assert opcode("IOP") not in MODEL_OPERATIONS
    assert Opcode.from_name("LG") not in MODEL_OPERATIONS