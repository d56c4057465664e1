"""Param domain package exports."""

from __future__ import annotations

from . import edit_session_service
from . import hash40_core
from . import hash_resolver_service
from . import label_corpus_service
from . import name_filter_service
from . import param_engine_core
from . import param_level_core
from . import param_model_core
from . import row_projection_service
from . import scalar_codec_service

from .hash40_core import Hash40, hash40
from .label_corpus_service import LabelCorpus
from .param_engine_core import ParamEngine
from .param_model_core import ParamNode

__all__ = [
    "Hash40",
    "LabelCorpus",
    "ParamEngine",
    "ParamNode",
    "edit_session_service",
    "hash40",
    "hash40_core",
    "hash_resolver_service",
    "label_corpus_service",
    "name_filter_service",
    "param_engine_core",
    "param_level_core",
    "param_model_core",
    "row_projection_service",
    "scalar_codec_service",
]
