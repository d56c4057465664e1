"""Shared fixtures for the param engine tests."""

import pytest

from prickly.core.domain_impl.param.hash40_core import hash40
from prickly.core.domain_impl.param.label_corpus_service import LabelCorpus
from prickly.core.domain_impl.param.param_model_core import (
    param_bool,
    param_float,
    param_hash,
    param_int,
    param_list,
    param_str,
    param_struct,
)

SAMPLE_LABELS = ("alpha", "alphabet", "beta", "size", "items")


@pytest.fixture
def corpus():
    """Populated corpus holding the sample labels."""
    return LabelCorpus.from_rows([(hash40(label), label) for label in SAMPLE_LABELS])


@pytest.fixture
def empty_corpus():
    return LabelCorpus.from_rows(())


@pytest.fixture
def size_items_document():
    return param_struct(
        [
            (hash40("size"), param_int("u32", 10)),
            (hash40("items"), param_list([param_bool(True), param_bool(False)])),
        ]
    )


@pytest.fixture
def mixed_document():
    return param_struct(
        [
            (hash40("alpha"), param_int("i8", -5)),
            (hash40("beta"), param_float(1.5)),
            (hash40("gamma"), param_str("hello")),
            (hash40("alphabet"), param_hash(hash40("beta"))),
            (hash40("items"), param_list([param_int("u8", 1), param_int("u8", 2), param_int("u8", 3)])),
            (hash40("size"), param_struct([])),
        ]
    )
