"""
GLSL function signature parser.

Used to turn pasted GLSL into a customFn node: every top-level function
definition is found, and the chosen one becomes the node's sockets and
body while the full source is kept as the node's helper code.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List

# returnType name ( params ) {
SIG_RE = re.compile(r"\b(float|vec[234]|int|bool|mat[234])\s+(\w+)\s*\(([^)]*)\)\s*\{")

QUALIFIERS = {"in", "out", "inout", "const", "highp", "mediump", "lowp"}
CONTROL_KEYWORDS = {"if", "for", "while", "do", "switch", "return"}

# Types a customFn socket can carry
SOCKET_TYPES = {"float", "vec2", "vec3", "vec4"}


@dataclass
class GlslParam:
    type: str
    name: str


@dataclass
class GlslFunction:
    return_type: str
    name: str
    params: List[GlslParam] = field(default_factory=list)


def strip_comments(code: str) -> str:
    code = re.sub(r"/\*.*?\*/", " ", code, flags=re.DOTALL)
    return re.sub(r"//[^\n]*", "", code)


def parse_glsl_functions(code: str) -> List[GlslFunction]:
    """All function definitions in ``code``, in source order."""
    results = []
    for match in SIG_RE.finditer(strip_comments(code)):
        return_type, name, param_text = match.groups()
        if name in CONTROL_KEYWORDS:
            continue
        params: List[GlslParam] = []
        for part in param_text.split(","):
            tokens = [t for t in part.split() if t not in QUALIFIERS]
            if not tokens or tokens == ["void"]:
                continue
            ptype = tokens[0]
            pname = tokens[1] if len(tokens) > 1 else f"p{len(params)}"
            # float weights[4]
            pname = pname.split("[", 1)[0]
            params.append(GlslParam(ptype, pname))
        results.append(GlslFunction(return_type, name, params))
    return results


def build_custom_fn_params(fn: GlslFunction, full_code: str) -> Dict[str, Any]:
    """
    customFn params calling ``fn`` with one socket per parameter.

    Parameter and return types a socket cannot carry fall back to float.
    """
    inputs = [{"name": p.name, "type": p.type if p.type in SOCKET_TYPES else "float"} for p in fn.params]
    # int/bool parameters are fed from float sockets
    args = [f"{p.type}({p.name})" if p.type in ("int", "bool") else p.name for p in fn.params]
    return {
        "label": fn.name,
        "inputs": inputs,
        "outputType": fn.return_type if fn.return_type in SOCKET_TYPES else "float",
        "body": f"{fn.name}({', '.join(args)})",
        "glslFunctions": full_code.strip(),
    }
