import io

import pytest

from epiphyte.rotation import read_constraints, read_variables
from epiphyte.rotator import OUTPUT_FILE, RotationNotFound, main, search


def _load(tmp_path, var_text, cons_text):
    vfile = tmp_path / "vars.txt"
    cfile = tmp_path / "cons.txt"
    vfile.write_text(var_text)
    cfile.write_text(cons_text)
    variables, root = read_variables(vfile, io.StringIO())
    constraints = read_constraints(cfile, variables)
    return variables, constraints, root


def _vars(*names, root):
    lines = [f"{n} 1 0 , 10 1" for n in names]
    lines.append(f"f{root}")
    return "\n".join(lines) + "\n"


def test_single_constraint_rotation(tmp_path):
    variables, constraints, root = _load(
        tmp_path, _vars("x", "y", "z1", root="x"), "x = y ADD z1\n"
    )
    stack = search(variables, constraints, root, 600)
    assert len(stack) == 1
    choice = stack[0]
    assert choice.constraint is constraints[0]
    assert choice.searched
    assert choice.rotation == 0
    assert all(v.level != 0 for v in variables)
    assert constraints[0].cap == 3 and constraints[0].ok


def test_chain_is_traversed_in_order(tmp_path):
    variables, constraints, root = _load(
        tmp_path,
        _vars("x", "y", "w", "a", "b", root="x"),
        "x = y ADD w\ny = a MUL b\n",
    )
    stack = search(variables, constraints, root, 600)
    assert [c.constraint for c in stack] == constraints
    assert all(c.searched for c in stack)
    assert all(c.cap == 3 and c.ok for c in constraints)


def test_inference_rotates_to_second_operand(tmp_path):
    variables, constraints, root = _load(
        tmp_path,
        _vars("x", "a", "b", "w", root="x"),
        "x = a ADD b\na = w MUL b\n",
    )
    stack = search(variables, constraints, root, 600)
    inferred = [c for c in stack if c.constraint is constraints[1]]
    assert len(inferred) == 1
    assert inferred[0].rotation == 1
    assert inferred[0].searched
    w = next(v for v in variables if v.name == "w")
    assert w.non_aux_arc_head
    assert w.level > 0


def test_conflict_exhausts_search(tmp_path):
    variables, constraints, root = _load(
        tmp_path,
        _vars("x", "y", "z", root="x"),
        "x = y ADD z\nx = y MUL z\n",
    )
    with pytest.raises(RotationNotFound):
        search(variables, constraints, root, 600)


def test_negative_timeout_returns_none(tmp_path):
    variables, constraints, root = _load(
        tmp_path, _vars("x", "y", "z", root="x"), "x = y ADD z\n"
    )
    assert search(variables, constraints, root, -1) is None


def test_unknown_root_raises(tmp_path):
    variables, constraints, _ = _load(
        tmp_path, _vars("x", "y", "z", root="x"), "x = y ADD z\n"
    )
    with pytest.raises(ValueError):
        search(variables, constraints, "nope", 600)


def test_missing_root_record_raises(tmp_path):
    variables, constraints, root = _load(
        tmp_path, "x 1 0 , 10 1\ny 1 0 , 10 1\nz 1 0 , 10 1\n", "x = y ADD z\n"
    )
    assert root is None
    with pytest.raises(ValueError):
        search(variables, constraints, root, 600)


def test_main_usage(capsys):
    assert main([]) == 1
    assert "Usage" in capsys.readouterr().out


def test_main_writes_rotation(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "v.txt").write_text(_vars("x", "y", "z1", root="x"))
    (tmp_path / "c.txt").write_text("x = y ADD z1\n")
    assert main(["v.txt", "c.txt"]) == 0
    lines = (tmp_path / OUTPUT_FILE).read_text().splitlines()
    assert lines[0] == "v x [ 0.000000 , 10.000000 ]"
    assert lines[-2] == "c 2 x = y ADD z1"
    assert lines[-1] == "f"


def test_main_graph_mode_omits_final_line(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "v.txt").write_text(_vars("x", "y", "z1", root="x"))
    (tmp_path / "c.txt").write_text("x = y ADD z1\n")
    assert main(["v.txt", "c.txt", "600", "--creates-hypergraph"]) == 0
    lines = (tmp_path / OUTPUT_FILE).read_text().splitlines()
    assert "f" not in lines
    assert lines[-1].startswith("c ")


def test_main_reports_failed_backtrack(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "v.txt").write_text(_vars("x", "y", "z", root="x"))
    (tmp_path / "c.txt").write_text("x = y ADD z\nx = y MUL z\n")
    assert main(["v.txt", "c.txt"]) == 1
    assert "backtracking failed" in capsys.readouterr().out


def test_main_timeout(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "v.txt").write_text(_vars("x", "y", "z", root="x"))
    (tmp_path / "c.txt").write_text("x = y ADD z\n")
    assert main(["v.txt", "c.txt", "-1"]) == 0
    assert "TIMEOUT: v.txt" in capsys.readouterr().out
    assert not any(
        line.startswith("c ")
        for line in (tmp_path / OUTPUT_FILE).read_text().splitlines()
    )


def test_main_missing_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main(["absent_vars.txt", "absent_cons.txt"]) == 1