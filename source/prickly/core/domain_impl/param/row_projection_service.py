"""Flatten one composite level into display rows, honoring an optional name filter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from prickly.core.domain_impl.param.hash40_core import Hash40
from prickly.core.domain_impl.param.label_corpus_service import LabelCorpus
from prickly.core.domain_impl.param.param_model_core import (
    ParamNode,
    format_node,
    is_composite,
    iter_children,
    type_tag,
)


NamePredicate = Callable[[str], bool]


@dataclass(frozen=True, slots=True)
class RowView:
    display_name: str
    type_tag: str
    display_value: str
    source_index: int
    is_composite: bool


def label_lookup(corpus: LabelCorpus | None) -> dict[Hash40, str]:
    """One corpus read per render pass; empty while labels are unavailable."""
    labels = corpus.labels_by_hash() if corpus is not None else None
    return labels if labels is not None else {}


def display_hash_with(labels: dict[Hash40, str], key: Hash40) -> str:
    return labels.get(key) or key.to_hex()


def display_name_for_key(key: Hash40 | int, labels: dict[Hash40, str]) -> str:
    if isinstance(key, Hash40):
        return display_hash_with(labels, key)
    return str(key)


def project_rows(
    param: ParamNode,
    corpus: LabelCorpus | None = None,
    name_filter: NamePredicate | None = None,
) -> list[RowView]:
    """Rows for the children of `param`; `source_index` is the unfiltered position."""
    labels = label_lookup(corpus)

    def hash_display(key: Hash40) -> str:
        return display_hash_with(labels, key)

    rows: list[RowView] = []
    for index, (key, child) in enumerate(iter_children(param)):
        name = display_name_for_key(key, labels)
        if name_filter is not None and not name_filter(name):
            continue
        rows.append(
            RowView(
                display_name=name,
                type_tag=type_tag(child),
                display_value=format_node(child, hash_display),
                source_index=index,
                is_composite=is_composite(child),
            )
        )
    return rows


def row_position_for_source_index(rows: list[RowView], source_index: int | None) -> int | None:
    """Row position showing `source_index`; falls back to 0, or None for no rows."""
    if not rows:
        return None
    if source_index is not None:
        for position, row in enumerate(rows):
            if row.source_index == source_index:
                return position
    return 0
