import time

import pytest

from prickly.core.domain_impl.param.hash40_core import hash40
from prickly.core.domain_impl.param.label_corpus_service import (
    LabelCorpus,
    default_label_paths,
    load_label_corpus,
    read_label_rows,
)
from prickly.core.exceptions import AppRuntimeError, LabelCorpusUnavailable


def test_matches_prefix_returns_sorted_labels(corpus):
    assert corpus.matches_prefix("alph") == ["alpha", "alphabet"]
    assert corpus.matches_prefix("alpha") == ["alpha", "alphabet"]
    assert corpus.matches_prefix("b") == ["beta"]
    assert corpus.matches_prefix("zzz") == []


def test_matches_prefix_honors_limit(corpus):
    assert corpus.matches_prefix("alph", limit=1) == ["alpha"]
    assert corpus.matches_prefix("alph", limit=0) == []


def test_empty_prefix_matches_nothing(corpus):
    assert corpus.matches_prefix("") == []


def test_label_and_hash_lookup(corpus):
    assert corpus.hash_of("beta") == hash40("beta")
    assert corpus.hash_of("gamma") is None
    assert corpus.label_of(hash40("alpha")) == "alpha"
    assert corpus.display_hash(hash40("gamma")) == hash40("gamma").to_hex()
    assert len(corpus) == 5


def test_populate_only_once(corpus):
    with pytest.raises(AppRuntimeError):
        corpus.populate([(hash40("x"), "x")])


def test_unpopulated_corpus_is_unavailable():
    corpus = LabelCorpus()
    assert not corpus.is_populated()
    with pytest.raises(LabelCorpusUnavailable):
        corpus.matches_prefix("a")
    assert corpus.label_of(hash40("a")) is None
    assert len(corpus) == 0


def test_busy_corpus_degrades_instead_of_blocking():
    corpus = LabelCorpus.from_rows([(hash40("alpha"), "alpha")], lock_timeout=0.01)
    corpus._lock.acquire()
    try:
        with pytest.raises(LabelCorpusUnavailable):
            corpus.hash_of("alpha")
        assert corpus.display_hash(hash40("alpha")) == hash40("alpha").to_hex()
    finally:
        corpus._lock.release()
    assert corpus.hash_of("alpha") == hash40("alpha")


def test_read_label_rows_skips_malformed_lines(tmp_path):
    path = tmp_path / "ParamLabels.csv"
    path.write_text(
        "\n".join(
            [
                f"{hash40('alpha').to_hex()},alpha",
                "not-a-hash,beta",
                "0x12",
                f"{hash40('a,b').to_hex()},a,b",
                "0x00000000ff,",
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    assert read_label_rows(path) == [(hash40("alpha"), "alpha"), (hash40("a,b"), "a,b")]


def test_load_label_corpus_uses_first_readable_file(tmp_path):
    second = tmp_path / "second.csv"
    second.write_text(f"{hash40('beta').to_hex()},beta\n", encoding="utf-8")
    corpus = LabelCorpus()
    loaded = load_label_corpus(corpus, [str(tmp_path / "missing.csv"), str(second)])
    assert loaded == str(second)
    assert corpus.matches_prefix("be") == ["beta"]


def test_load_label_corpus_without_files_populates_empty(tmp_path):
    corpus = LabelCorpus()
    assert load_label_corpus(corpus, [str(tmp_path / "missing.csv")]) is None
    assert corpus.is_populated()
    assert corpus.matches_prefix("a") == []


def test_default_label_paths_order_and_dedup(tmp_path):
    explicit = str(tmp_path / "labels.csv")
    paths = default_label_paths(explicit, explicit)
    assert paths[0] == explicit
    assert paths.count(explicit) == 1
    assert paths[1].endswith("ParamLabels.csv")


def test_label_shared_by_two_hashes_is_dropped():
    corpus = LabelCorpus.from_rows([(hash40("x1"), "foo"), (hash40("x2"), "foo"), (hash40("bar"), "bar")])
    assert corpus.hash_of("foo") is None
    assert corpus.label_of(hash40("x1")) is None
    assert corpus.label_of(hash40("x2")) is None
    assert corpus.matches_prefix("f") == []
    assert corpus.hash_of("bar") == hash40("bar")


def test_repeated_identical_rows_keep_the_label():
    corpus = LabelCorpus.from_rows([(hash40("foo"), "foo"), (hash40("foo"), "foo")])
    assert corpus.hash_of("foo") == hash40("foo")


def test_unpopulated_corpus_fails_without_waiting_for_the_lock():
    corpus = LabelCorpus(lock_timeout=5.0)
    corpus._lock.acquire()
    try:
        started = time.monotonic()
        with pytest.raises(LabelCorpusUnavailable):
            corpus.hash_of("alpha")
        assert time.monotonic() - started < 1.0
    finally:
        corpus._lock.release()
