import pytest

from prickly.core.domain_impl.param.hash40_core import Hash40, hash40
from prickly.core.domain_impl.param.hash_resolver_service import (
    STATUS_HASH,
    STATUS_INVALID_HEX,
    STATUS_LABEL_EXISTS,
    STATUS_LABEL_NOT_EXISTS,
    STATUS_LABELS_UNAVAILABLE,
    HashCandidates,
    resolve,
    resolve_or_raise,
)
from prickly.core.domain_impl.param.label_corpus_service import LabelCorpus
from prickly.core.exceptions import InvalidHashLiteral



def test_resolve_hex_literal(corpus):
    resolution = resolve("0x0a", corpus)
    assert resolution.status == STATUS_HASH
    assert resolution.hash == Hash40(10)


def test_resolve_invalid_hex(corpus):
    resolution = resolve("0xnope", corpus)
    assert resolution.status == STATUS_INVALID_HEX
    assert not resolution.is_valid()
    assert resolution.error
    with pytest.raises(InvalidHashLiteral):
        resolve_or_raise("0xnope", corpus)


def test_resolve_known_and_unknown_labels(corpus):
    assert resolve("alpha", corpus).status == STATUS_LABEL_EXISTS
    unknown = resolve("gamma", corpus)
    assert unknown.status == STATUS_LABEL_NOT_EXISTS
    assert unknown.hash == hash40("gamma")


def test_resolve_while_labels_unavailable_still_derives_hash():
    corpus = LabelCorpus()
    resolution = resolve("alpha", corpus)
    assert resolution.status == STATUS_LABELS_UNAVAILABLE
    assert resolution.hash == hash40("alpha")


def test_candidates_cycle_and_clamp(corpus):
    candidates = HashCandidates()
    candidates.set_text(corpus, "alph")
    assert candidates.matches == ["alpha", "alphabet"]
    assert candidates.cursor is None
    assert candidates.previous() is None
    assert candidates.next() == "alpha"
    assert candidates.next() == "alphabet"
    assert candidates.next() == "alphabet"
    assert candidates.previous() == "alpha"
    assert candidates.previous() == "alpha"
    assert candidates.cursor == 0


def test_candidates_cursor_resets_on_text_change(corpus):
    candidates = HashCandidates()
    candidates.set_text(corpus, "alph")
    candidates.next()
    candidates.next()
    candidates.set_text(corpus, "alpha")
    assert candidates.cursor is None
    assert candidates.matches == ["alpha", "alphabet"]


def test_accept_first_candidate_resolves_to_its_hash(corpus):
    candidates = HashCandidates()
    candidates.set_text(corpus, "alph")
    candidates.next()
    assert candidates.accept(corpus) == "alpha"
    assert candidates.text == "alpha"
    assert candidates.cursor is None
    assert candidates.matches == ["alpha", "alphabet"]
    assert resolve(candidates.text, corpus).hash == hash40("alpha")


def test_accept_without_cursor_takes_first_match(corpus):
    candidates = HashCandidates()
    candidates.set_text(corpus, "b")
    assert candidates.accept(corpus) == "beta"


def test_accept_without_matches_is_a_no_op(corpus):
    candidates = HashCandidates()
    candidates.set_text(corpus, "zzz")
    assert candidates.accept(corpus) is None
    assert candidates.text == "zzz"


def test_hex_text_has_no_candidates(corpus):
    candidates = HashCandidates()
    candidates.set_text(corpus, "0xab")
    assert candidates.matches == []


def test_candidates_retry_after_labels_arrive():
    corpus = LabelCorpus()
    candidates = HashCandidates()
    candidates.set_text(corpus, "alph")
    assert not candidates.labels_available
    corpus.populate([(hash40("alpha"), "alpha")])
    candidates.set_text(corpus, "alph")
    assert candidates.labels_available
    assert candidates.matches == ["alpha"]
