import math
from struct import pack, unpack
from typing import Iterable, Tuple


def to_f32(value: float) -> float:
    """
    Round a Python float to the nearest IEEE-754 single precision value.
    Values too large for single precision become infinite, like a C float
    cast.
    """

    try:
        return unpack("<f", pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def to_vec3_f32(values: Iterable[float]) -> Tuple[float, float, float]:
    x, y, z = values

    return to_f32(x), to_f32(y), to_f32(z)
