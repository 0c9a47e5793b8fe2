# epiphyte

Building blocks for relaxed global optimization over networks of ternary
constraints `X = Y op Z`.

## Modules

- `epiphyte.extended_real` — arithmetic and tolerant comparison on the
  extended reals. `compare(x, op, y, tolerance)` accepts `<`, `<=`, `==`,
  `>=`, `>` and `!=`; finite values are equal when they differ by at most the
  absolute epsilon or, optionally, the relative epsilon of a `Tolerance`
  (`DEFAULT_TOLERANCE` uses the machine epsilon for both). Infinities compare
  exactly. `add`, `sub`, `mul`, `div`, `power`, `root`, `exp_base`,
  `log_base`, `sine`, `cosine` and `tangent` never raise on infinite or
  degenerate operands: indeterminate forms get fixed values, for example
  `inf - inf == 0`, `inf * 0 == 0`, `0 / 0 == 0` and `inf / inf == 0`, and
  the trigonometric functions return 0 for infinite arguments.
- `epiphyte.operations` — the `Opcode` enumeration of constraint operations
  (`OP`, `ADD`, `SUB`, `MUL`, `DIV`, `POW`, `SQR`, `SIN`, `ARCS`, ... with
  their inverse and complement forms), `MODEL_OPERATIONS` (the ones allowed
  in a model), `opcode(name)` which raises `ValueError` for an unknown name,
  and `opcode_name(op)` which returns `"???"` for an unknown code.
- `epiphyte.strategy` — success-history adaptation of the differential
  evolution parameters F and CR:
  - `Box` (with `Box.create(size)`) and `Interval` describe an individual;
  - `EpsilonLevel` holds the epsilon-constraint level: `initialize` from a
    box's violation, `update` to shrink it as evaluations are spent, and
    `better` to compare two solutions;
  - `Strategy` keeps a five-slot memory of F and CR; `generate_params`
    samples them for an individual from a `random.Random`,
    `record_improvement` remembers successful values and `update_memory`
    folds them in with a weighted Lehmer mean;
  - `update_selection_rates` sets the selection rate of three strategies
    from their recent wins;
  - `allocate_all` creates all working populations and three strategies as a
    `Populations` object.
- `epiphyte.rotation` — reading the variable and constraint files
  (`read_variables`, `read_constraints`), the `Variable`, `Constraint` and
  `Choice` records of the search, pruning (`prune`), bookkeeping
  (`update_cap`) and writing rotated constraints (`rotated_line`,
  `write_rotation`).
- `epiphyte.rotator` — the rotation search itself (`search`) and its command.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Rotating a constraint network

A rotation chooses, for every constraint `X = Y op Z`, which of its three
variables becomes the head, so that the network forms an epiphytic tree.

```
epiphyte-rotate VARIABLES_FILE CONSTRAINTS_FILE [TIMEOUT [--creates-hypergraph]]
```

The variables file holds, for each variable, its name, the closedness of the
lower bound (`1` closed, `0` open), the lower bound, a `,`, the upper bound
and the closedness of the upper bound. A token starting with `f` names the
root variable and ends the file, so variable names must not start with `f`:

```
$x1 1 0.0 , 10.0 1
$x2 1 -5.0 , 5.0 0
z1 0 -inf , inf 0
fz1
```

The constraints file lists constraints as `X = Y OP Z`:

```
z1 = $x1 ADD $x2
```

`TIMEOUT` bounds the search in seconds (600 by default). Any fourth argument
leaves out the closing `f` line. The output goes to
`instancia_rotacionada.txt` in the current directory: the variable lines are
written as they are read, followed by the rotated constraints
(`c kind head = left OP right`, where kind is 1 for an inferred head and 2
for a branching choice) and `f`. For the example above:

```
v $x1 [ 0.000000 , 10.000000 ]
v $x2 [ -5.000000 , 5.000000 )
v z1 ( -inf , inf )
c 2 z1 = $x1 ADD $x2
f
```

The command exits with status 1 on bad arguments, unreadable or malformed
files, an unknown root, or when the search runs out of alternatives
(`backtracking failed`). On timeout it prints `TIMEOUT: VARIABLES_FILE` and
writes no constraints.

From Python, `epiphyte.rotator.search(variables, constraints, root, timeout)`
returns the stack of choices, `None` on timeout, and raises
`RotationNotFound` when no rotation exists.

## What the package does not do

It does not build or solve the epiphytic decomposition: there is no interval
or multi-interval arithmetic, no consistency propagation, no branch and bound
and no differential evolution main loop. `epiphyte.strategy` provides only the
parameter adaptation and population structures such a loop would use, and
the rotator only produces the rotated instance file.