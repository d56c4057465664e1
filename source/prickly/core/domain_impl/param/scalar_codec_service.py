"""Type-directed parsing, formatting and stepping of terminal param values."""

from __future__ import annotations

import math
import re
from typing import Any

from prickly.core.domain_impl.param.hash_resolver_service import resolve_or_raise
from prickly.core.domain_impl.param.label_corpus_service import LabelCorpus
from prickly.core.domain_impl.param.param_model_core import (
    INT_KINDS,
    KIND_BOOL,
    ParamNode,
    format_node,
    to_f32,
)
from prickly.core.exceptions import ParamParseError, StructuralViolation


INT_BOUNDS: dict[str, tuple[int, int]] = {
    "i8": (-(2 ** 7), 2 ** 7 - 1),
    "u8": (0, 2 ** 8 - 1),
    "i16": (-(2 ** 15), 2 ** 15 - 1),
    "u16": (0, 2 ** 16 - 1),
    "i32": (-(2 ** 31), 2 ** 31 - 1),
    "u32": (0, 2 ** 32 - 1),
}
STEPPABLE_KINDS = (KIND_BOOL,) + INT_KINDS

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_bool(text: str) -> bool:
    token = str(text).strip().lower()
    if token == "true":
        return True
    if token == "false":
        return False
    raise ParamParseError(f"expected true or false, got {text!r}")


def parse_int(kind: str, text: str) -> int:
    lo, hi = INT_BOUNDS[kind]
    token = str(text).strip()
    if not _INT_PATTERN.fullmatch(token):
        raise ParamParseError(f"{text!r} is not a whole number")
    value = int(token)
    if value < lo or value > hi:
        raise ParamParseError(f"{value} is out of range for {kind} ({lo}..{hi})")
    return value


def parse_f32(text: str) -> float:
    token = str(text).strip()
    try:
        value = float(token)
    except ValueError as exc:
        raise ParamParseError(f"{text!r} is not a number") from exc
    try:
        rounded = to_f32(value)
    except OverflowError as exc:
        raise ParamParseError(f"{text!r} is out of range for f32") from exc
    if math.isinf(rounded) and not math.isinf(value):
        raise ParamParseError(f"{text!r} is out of range for f32")
    return rounded


def parse_terminal(kind: str, text: str, corpus: LabelCorpus | None = None) -> Any:
    """Parse edit text into a value of `kind`; raises ParamParseError on failure."""
    match kind:
        case "bool":
            return parse_bool(text)
        case "i8" | "u8" | "i16" | "u16" | "i32" | "u32":
            return parse_int(kind, text)
        case "f32":
            return parse_f32(text)
        case "hash":
            if corpus is None:
                corpus = LabelCorpus.from_rows(())
            return resolve_or_raise(text, corpus)
        case "string":
            return str(text)
        case _:
            raise StructuralViolation(f"{kind} params are not edited as text")


def format_terminal(node: ParamNode, corpus: LabelCorpus | None = None) -> str:
    """Seed text for an edit buffer; hashes show their label when known."""
    hash_display = corpus.display_hash if corpus is not None else None
    return format_node(node, hash_display)


def is_steppable(node: ParamNode) -> bool:
    return node.kind in STEPPABLE_KINDS


def step_value(node: ParamNode, delta: int) -> ParamNode:
    """Increment/decrement with wrap-around at the type bounds; bools toggle."""
    match node.kind:
        case "bool":
            return ParamNode(node.kind, (not node.value) if delta % 2 else node.value)
        case "i8" | "u8" | "i16" | "u16" | "i32" | "u32":
            lo, hi = INT_BOUNDS[node.kind]
            span = hi - lo + 1
            return ParamNode(node.kind, lo + (node.value - lo + int(delta)) % span)
        case _:
            raise StructuralViolation(f"{node.kind} params cannot be stepped")
