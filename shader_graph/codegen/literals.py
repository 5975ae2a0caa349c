# Literal formatting and type conversion for GLSL code generation

import math
from numbers import Real
from typing import Any, Optional, Sequence

from ..ir.types import DataType


def format_float(value) -> str:
    """Format a number as a GLSL float literal (5 -> '5.0', 0.25 -> '0.25')."""
    number = float(value)
    if not math.isfinite(number):
        return "0.0"
    if number == int(number) and abs(number) < 1e15:
        return f"{int(number)}.0"
    return repr(number)


def format_fixed(value, digits: int) -> str:
    """Fixed-point float literal, e.g. format_fixed(3, 3) -> '3.000'."""
    return f"{float(value):.{digits}f}"


def vec_literal(values: Sequence[float], digits: int = 2) -> str:
    dtype = DataType.for_components(len(values))
    if dtype is DataType.FLOAT:
        return format_fixed(values[0], digits)
    return f"{dtype.glsl}({', '.join(format_fixed(v, digits) for v in values)})"


def is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def is_vector_value(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and 1 <= len(value) <= 4 and all(is_number(v) for v in value)


def format_literal(value: Any, dtype: DataType) -> Optional[str]:
    """
    Format a socket default or slider value as a literal of ``dtype``.

    Numbers broadcast to vectors; lists keep full precision per component.
    Returns None when the value cannot represent the type.
    """
    if is_number(value):
        literal = format_float(value)
        if dtype is DataType.FLOAT:
            return literal
        return f"{dtype.glsl}({literal})"
    if is_vector_value(value):
        count = dtype.component_count()
        if dtype is DataType.FLOAT:
            return format_float(value[0])
        if len(value) < count:
            return None
        comps = ", ".join(format_float(v) for v in value[:count])
        return f"{dtype.glsl}({comps})"
    return None


def is_zero_literal(expr: str) -> bool:
    try:
        return float(expr) == 0.0
    except (TypeError, ValueError):
        return False


def can_coerce(src: DataType, dst: DataType) -> bool:
    """Implicit conversions applied to connected inputs."""
    return src is dst or (src is DataType.FLOAT and dst.is_vector())


def coerce_expr(expr: str, src: DataType, dst: DataType) -> str:
    if src is dst:
        return expr
    if src is DataType.FLOAT and dst.is_vector():
        return f"{dst.glsl}({expr})"
    raise ValueError(f"No implicit conversion from {src} to {dst}")


def cast_expr(expr: str, src: DataType, dst: DataType) -> str:
    """Explicit conversion between any two socket types."""
    if src is dst:
        return expr

    # Vector -> Float : first component, colors by average
    if dst is DataType.FLOAT:
        if src is DataType.VEC3:
            return f"dot({expr}, vec3(0.33333333))"
        if src is DataType.VEC4:
            return f"dot({expr}.rgb, vec3(0.2126, 0.7152, 0.0722))"
        return f"{expr}.x"

    # Float -> Vector : replicate
    if src is DataType.FLOAT:
        if dst is DataType.VEC4:
            return f"vec4(vec3({expr}), 1.0)"
        return f"{dst.glsl}({expr})"

    # Vector widening pads with 0.0, alpha with 1.0
    if src is DataType.VEC2 and dst is DataType.VEC3:
        return f"vec3({expr}, 0.0)"
    if src is DataType.VEC2 and dst is DataType.VEC4:
        return f"vec4({expr}, 0.0, 1.0)"
    if src is DataType.VEC3 and dst is DataType.VEC4:
        return f"vec4({expr}, 1.0)"

    # Narrowing swizzles
    if dst is DataType.VEC2:
        return f"{expr}.xy"
    return f"{expr}.rgb"
