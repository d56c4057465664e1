"""Param value model: the tagged node type and its two composite variants.

A document is a single tree of `ParamNode` values. Terminal kinds carry a
Python scalar (`bool`, `int`, `float`, `Hash40`, `str`); the two composite
kinds carry their children:

- `list`:   `list[ParamNode]`
- `struct`: `list[tuple[Hash40, ParamNode]]` (keys are matched by position)

A composite exclusively owns its children; nothing is shared between slots.
"""

from __future__ import annotations

import copy
import math
import struct
from dataclasses import dataclass
from typing import Any, Callable

from prickly.core.domain_impl.param.hash40_core import Hash40
from prickly.core.exceptions import StructuralViolation


KIND_BOOL = "bool"
KIND_I8 = "i8"
KIND_U8 = "u8"
KIND_I16 = "i16"
KIND_U16 = "u16"
KIND_I32 = "i32"
KIND_U32 = "u32"
KIND_FLOAT = "f32"
KIND_HASH = "hash"
KIND_STR = "string"
KIND_LIST = "list"
KIND_STRUCT = "struct"

INT_KINDS = (KIND_I8, KIND_U8, KIND_I16, KIND_U16, KIND_I32, KIND_U32)
TERMINAL_KINDS = (KIND_BOOL,) + INT_KINDS + (KIND_FLOAT, KIND_HASH, KIND_STR)
COMPOSITE_KINDS = (KIND_LIST, KIND_STRUCT)
PARAM_KINDS = TERMINAL_KINDS + COMPOSITE_KINDS


@dataclass(slots=True)
class ParamNode:
    kind: str
    value: Any

    def __post_init__(self) -> None:
        if self.kind not in PARAM_KINDS:
            raise StructuralViolation(f"unknown param kind: {self.kind!r}")


def param_bool(value: bool) -> ParamNode:
    return ParamNode(KIND_BOOL, bool(value))


def param_int(kind: str, value: int) -> ParamNode:
    if kind not in INT_KINDS:
        raise StructuralViolation(f"{kind!r} is not an integer kind")
    return ParamNode(kind, int(value))


def param_float(value: float) -> ParamNode:
    return ParamNode(KIND_FLOAT, float(value))


def param_hash(value: Hash40) -> ParamNode:
    return ParamNode(KIND_HASH, value)


def param_str(value: str) -> ParamNode:
    return ParamNode(KIND_STR, str(value))


def param_list(children: Any = ()) -> ParamNode:
    return ParamNode(KIND_LIST, list(children))


def param_struct(pairs: Any = ()) -> ParamNode:
    return ParamNode(KIND_STRUCT, [(key, child) for key, child in pairs])


def is_composite(node: ParamNode) -> bool:
    return node.kind in COMPOSITE_KINDS


def is_terminal(node: ParamNode) -> bool:
    return node.kind in TERMINAL_KINDS


def type_tag(node: ParamNode) -> str:
    return node.kind


def child_count(node: ParamNode) -> int:
    _require_composite(node)
    return len(node.value)


def composite_summary(node: ParamNode) -> str:
    return f"({child_count(node)} children)"


def to_f32(value: float) -> float:
    """Round to IEEE single precision; raises OverflowError past the f32 range."""
    return struct.unpack("<f", struct.pack("<f", float(value)))[0]


def format_f32(value: float) -> str:
    """Shortest text that re-parses to the same single-precision value."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    target = to_f32(value)
    for precision in range(1, 10):
        text = f"{target:.{precision}g}"
        if to_f32(float(text)) == target:
            return repr(float(text))
    return repr(target)


def format_node(node: ParamNode, hash_display: Callable[[Hash40], str] | None = None) -> str:
    """Canonical text of a node; composites render as their child count."""
    match node.kind:
        case "bool":
            return "true" if node.value else "false"
        case "i8" | "u8" | "i16" | "u16" | "i32" | "u32":
            return str(node.value)
        case "f32":
            return format_f32(node.value)
        case "hash":
            if hash_display is not None:
                return hash_display(node.value)
            return node.value.to_hex()
        case "string":
            return node.value
        case "list" | "struct":
            return composite_summary(node)
        case _:
            raise StructuralViolation(f"unknown param kind: {node.kind!r}")


def _require_composite(node: ParamNode) -> None:
    if not is_composite(node):
        raise StructuralViolation(f"{node.kind} param has no children")


def _require_index(node: ParamNode, index: int) -> None:
    _require_composite(node)
    if not isinstance(index, int) or index < 0 or index >= len(node.value):
        raise StructuralViolation(f"child index {index!r} out of range for {len(node.value)} children")


def child_at(node: ParamNode, index: int) -> ParamNode:
    _require_index(node, index)
    if node.kind == KIND_STRUCT:
        return node.value[index][1]
    return node.value[index]


def child_key(node: ParamNode, index: int) -> Hash40 | int:
    """Struct children are keyed by hash, list children by position."""
    _require_index(node, index)
    if node.kind == KIND_STRUCT:
        return node.value[index][0]
    return index


def iter_children(node: ParamNode) -> list[tuple[Hash40 | int, ParamNode]]:
    _require_composite(node)
    if node.kind == KIND_STRUCT:
        return [(key, child) for key, child in node.value]
    return list(enumerate(node.value))


def set_child(node: ParamNode, index: int, child: ParamNode) -> None:
    """Replace the child at `index`, keeping a struct slot's key."""
    _require_index(node, index)
    if node.kind == KIND_STRUCT:
        key = node.value[index][0]
        node.value[index] = (key, child)
    else:
        node.value[index] = child


def empty_like(node: ParamNode) -> ParamNode:
    """An empty composite of the same kind, used as a slot placeholder."""
    _require_composite(node)
    return ParamNode(node.kind, [])


def take_child(node: ParamNode, index: int) -> ParamNode:
    """Move a composite child out of its slot.

    The slot keeps an empty composite of the same kind until `set_child`
    puts the (possibly edited) payload back.
    """
    child = child_at(node, index)
    _require_composite(child)
    set_child(node, index, empty_like(child))
    return child


def clone_param(node: ParamNode) -> ParamNode:
    return copy.deepcopy(node)
