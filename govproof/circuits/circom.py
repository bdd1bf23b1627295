"""
Circom Source Rendering
=======================

Renders the registered circuit definitions as circom 2 source for the
external compiler. Signal names, widths and constraint structure match
the Python definitions so that witnesses computed locally and by the
compiled witness calculator agree on public signals.

Usage:
    from govproof.circuits.circom import render_circom
    from govproof.circuits.registry import COMPUTE_THRESHOLD

    source = render_circom(COMPUTE_THRESHOLD)

Version: 0.1.0
"""

from govproof.circuits.aggregation import FlagAggregationCircuit
from govproof.circuits.base import CircuitDefinition
from govproof.circuits.threshold import ThresholdCircuit


PRAGMA = "pragma circom 2.1.6;"

COMPARATOR_TEMPLATES = """\
template Num2Bits(n) {
    signal input in;
    signal output out[n];
    var lc = 0;
    var e2 = 1;
    for (var i = 0; i < n; i++) {
        out[i] <-- (in >> i) & 1;
        out[i] * (out[i] - 1) === 0;
        lc += out[i] * e2;
        e2 = e2 + e2;
    }
    lc === in;
}

template LessThan(n) {
    assert(n <= 252);
    signal input in[2];
    signal output out;
    component n2b = Num2Bits(n + 1);
    n2b.in <== in[0] + (1 << n) - in[1];
    out <== 1 - n2b.out[n];
}

template GreaterEqThan(n) {
    signal input in[2];
    signal output out;
    component lt = LessThan(n);
    lt.in[0] <== in[0];
    lt.in[1] <== in[1];
    out <== 1 - lt.out;
}
"""


def _pascal(name: str) -> str:
    return "".join(part.capitalize() for part in name.split("_"))


def _render_threshold(circuit: ThresholdCircuit) -> str:
    template = _pascal(circuit.name)
    return f"""\
template {template}(n) {{
    signal input {circuit.value_input};
    signal input {circuit.bound_input};
    signal output valid;

    component lt = LessThan(n);
    lt.in[0] <== {circuit.value_input};
    lt.in[1] <== {circuit.bound_input};

    valid <== lt.out;
    valid === 1;
}}

component main {{public [{circuit.bound_input}]}} = {template}({circuit.bits});
"""


def _render_aggregation(circuit: FlagAggregationCircuit) -> str:
    template = _pascal(circuit.name)
    flags = circuit.flags_input
    return f"""\
template {template}(N) {{
    signal input {flags}[N];
    signal input {circuit.minimum_input};
    signal output valid;

    signal sum[N];
    for (var i = 0; i < N; i++) {{
        {flags}[i] * ({flags}[i] - 1) === 0;
    }}
    sum[0] <== {flags}[0];
    for (var i = 1; i < N; i++) {{
        sum[i] <== sum[i - 1] + {flags}[i];
    }}

    component gte = GreaterEqThan({circuit.bits});
    gte.in[0] <== sum[N - 1];
    gte.in[1] <== {circuit.minimum_input};

    valid <== gte.out;
    valid === 1;
}}

component main {{public [{circuit.minimum_input}]}} = {template}({circuit.n_flags});
"""


def render_circom(circuit: CircuitDefinition) -> str:
    """
    Render a circuit definition as a standalone circom file.

    Raises:
        TypeError: If the circuit family has no circom rendering.
    """
    if isinstance(circuit, ThresholdCircuit):
        body = _render_threshold(circuit)
    elif isinstance(circuit, FlagAggregationCircuit):
        body = _render_aggregation(circuit)
    else:
        raise TypeError(f"No circom rendering for {type(circuit).__name__}")

    return "\n".join([PRAGMA, "", COMPARATOR_TEMPLATES, body])
