import math

import pytest

from prickly.core.domain_impl.param.hash40_core import Hash40, hash40
from prickly.core.domain_impl.param.param_model_core import (
    ParamNode,
    param_bool,
    param_float,
    param_hash,
    param_int,
    param_list,
    param_str,
    to_f32,
)
from prickly.core.domain_impl.param.scalar_codec_service import (
    INT_BOUNDS,
    format_terminal,
    is_steppable,
    parse_f32,
    parse_int,
    parse_terminal,
    step_value,
)
from prickly.core.exceptions import InvalidHashLiteral, ParamParseError, StructuralViolation


def _round_trip_nodes():
    nodes = [param_bool(True), param_bool(False), param_str(""), param_str("with spaces")]
    for kind, (lo, hi) in INT_BOUNDS.items():
        nodes.extend(param_int(kind, value) for value in (lo, hi, (lo + hi) // 2))
    for value in (0.0, -0.0, 0.1, 1.5, -123.456, 3.4028234663852886e38, 1e-45, float("inf")):
        nodes.append(param_float(to_f32(value)))
    nodes.extend([param_hash(hash40("alpha")), param_hash(hash40("gamma")), param_hash(Hash40(0))])
    return nodes


@pytest.mark.parametrize("node", _round_trip_nodes(), ids=lambda node: f"{node.kind}:{node.value!r}")
def test_parse_of_format_round_trips(node, corpus):
    assert parse_terminal(node.kind, format_terminal(node, corpus), corpus) == node.value


def test_nan_round_trips_to_nan(corpus):
    text = format_terminal(param_float(float("nan")), corpus)
    assert math.isnan(parse_terminal("f32", text, corpus))


@pytest.mark.parametrize(
    "kind, text",
    [
        ("u8", "256"),
        ("u8", "-1"),
        ("i8", "128"),
        ("i8", "-129"),
        ("i16", "40000"),
        ("u32", "4294967296"),
        ("i32", "1.5"),
        ("i32", "ten"),
        ("i32", ""),
        ("bool", "yes"),
        ("f32", "abc"),
        ("f32", "1e39"),
    ],
)
def test_malformed_or_out_of_range_text_is_a_parse_error(kind, text):
    with pytest.raises(ParamParseError):
        parse_terminal(kind, text)


def test_parse_accepts_surrounding_whitespace_and_signs():
    assert parse_int("i8", " -12 ") == -12
    assert parse_int("u8", "+7") == 7
    assert parse_terminal("bool", "TRUE") is True


def test_parse_f32_rounds_to_single_precision():
    assert parse_f32("0.1") == to_f32(0.1)


def test_parse_hash_rejects_bad_literal():
    with pytest.raises(InvalidHashLiteral):
        parse_terminal("hash", "0xqq")


def test_parse_hash_without_corpus_derives_hash():
    assert parse_terminal("hash", "alpha") == hash40("alpha")


def test_composites_are_not_parsed():
    with pytest.raises(StructuralViolation):
        parse_terminal("list", "")


def test_format_terminal_shows_label_or_hex(corpus):
    assert format_terminal(param_hash(hash40("alpha")), corpus) == "alpha"
    assert format_terminal(param_hash(hash40("gamma")), corpus) == hash40("gamma").to_hex()


def test_step_wraps_at_bounds():
    assert step_value(param_int("u8", 255), 1) == param_int("u8", 0)
    assert step_value(param_int("u8", 0), -1) == param_int("u8", 255)
    assert step_value(param_int("i8", 127), 1) == param_int("i8", -128)
    assert step_value(param_int("i32", 5), -1) == param_int("i32", 4)


def test_step_toggles_bools():
    assert step_value(param_bool(True), 1) == param_bool(False)
    assert step_value(param_bool(False), -1) == param_bool(True)
    assert step_value(param_bool(True), 2) == param_bool(True)


def test_only_bools_and_ints_step():
    assert is_steppable(param_int("u16", 1))
    assert not is_steppable(param_str("x"))
    assert not is_steppable(param_list())
    with pytest.raises(StructuralViolation):
        step_value(ParamNode("f32", 1.0), 1)
