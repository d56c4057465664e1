"""Document I/O for param trees stored as type-tagged JSON (optionally gzip)."""

from __future__ import annotations

import gzip
import json
import math
from typing import Any

from prickly.core import constants as app_constants
from prickly.core.domain_impl.infra.file_write_service import write_bytes_atomic
from prickly.core.domain_impl.param.hash40_core import Hash40, hash40, is_hex_literal, parse_hex_literal
from prickly.core.domain_impl.param.param_model_core import (
    PARAM_KINDS,
    ParamNode,
    is_composite,
    to_f32,
)
from prickly.core.domain_impl.param.scalar_codec_service import INT_BOUNDS
from prickly.core.exceptions import DocumentFormatError, InvalidHashLiteral, StructuralViolation


def _is_gzip_path(path: Any) -> bool:
    return str(path or "").lower().endswith(app_constants.DOCUMENT_GZIP_SUFFIX)


def _key_from_payload(raw: Any) -> Hash40:
    if not isinstance(raw, str) or not raw:
        raise DocumentFormatError(f"struct key must be a non-empty string, got {raw!r}")
    if is_hex_literal(raw):
        try:
            return parse_hex_literal(raw)
        except InvalidHashLiteral as exc:
            raise DocumentFormatError(str(exc)) from exc
    return hash40(raw)


def _float_to_payload(value: float) -> Any:
    # JSON has no inf/nan literals; keep them as strings.
    if math.isnan(value) or math.isinf(value):
        return str(value)
    return value


def node_to_payload(node: ParamNode) -> dict[str, Any]:
    match node.kind:
        case "list":
            return {"type": node.kind, "value": [node_to_payload(child) for child in node.value]}
        case "struct":
            return {
                "type": node.kind,
                "value": [[key.to_hex(), node_to_payload(child)] for key, child in node.value],
            }
        case "hash":
            return {"type": node.kind, "value": node.value.to_hex()}
        case "f32":
            return {"type": node.kind, "value": _float_to_payload(node.value)}
        case _:
            return {"type": node.kind, "value": node.value}


def node_from_payload(payload: Any, path: str = "$") -> ParamNode:
    """Decode one type-tagged node; raises DocumentFormatError with the JSON path."""
    if not isinstance(payload, dict) or "type" not in payload or "value" not in payload:
        raise DocumentFormatError(f"{path}: expected an object with 'type' and 'value'")
    kind = payload["type"]
    raw = payload["value"]
    if kind not in PARAM_KINDS:
        raise DocumentFormatError(f"{path}: unknown param type {kind!r}")
    match kind:
        case "bool":
            if not isinstance(raw, bool):
                raise DocumentFormatError(f"{path}: bool value expected")
            return ParamNode(kind, raw)
        case "i8" | "u8" | "i16" | "u16" | "i32" | "u32":
            lo, hi = INT_BOUNDS[kind]
            if isinstance(raw, bool) or not isinstance(raw, int) or not lo <= raw <= hi:
                raise DocumentFormatError(f"{path}: {kind} value out of range: {raw!r}")
            return ParamNode(kind, raw)
        case "f32":
            try:
                value = to_f32(float(raw))
            except (TypeError, ValueError, OverflowError) as exc:
                raise DocumentFormatError(f"{path}: f32 value expected, got {raw!r}") from exc
            return ParamNode(kind, value)
        case "hash":
            return ParamNode(kind, _key_from_payload(raw))
        case "string":
            if not isinstance(raw, str):
                raise DocumentFormatError(f"{path}: string value expected")
            return ParamNode(kind, raw)
        case "list":
            if not isinstance(raw, list):
                raise DocumentFormatError(f"{path}: list value expected")
            return ParamNode(kind, [node_from_payload(child, f"{path}[{idx}]") for idx, child in enumerate(raw)])
        case _:
            if not isinstance(raw, list):
                raise DocumentFormatError(f"{path}: struct value expected")
            pairs = []
            for idx, entry in enumerate(raw):
                if not isinstance(entry, list) or len(entry) != 2:
                    raise DocumentFormatError(f"{path}[{idx}]: expected [key, node]")
                pairs.append((_key_from_payload(entry[0]), node_from_payload(entry[1], f"{path}[{idx}]")))
            return ParamNode(kind, pairs)


def document_to_payload(root: ParamNode) -> dict[str, Any]:
    if not is_composite(root):
        raise StructuralViolation(f"document root must be a struct or list, got {root.kind}")
    return {
        "format": app_constants.DOCUMENT_FORMAT_NAME,
        "version": app_constants.DOCUMENT_FORMAT_VERSION,
        "root": node_to_payload(root),
    }


def document_from_payload(data: Any) -> ParamNode:
    if not isinstance(data, dict) or data.get("format") != app_constants.DOCUMENT_FORMAT_NAME:
        raise DocumentFormatError("not a prickly param document")
    version = data.get("version")
    if version != app_constants.DOCUMENT_FORMAT_VERSION:
        raise DocumentFormatError(f"unsupported document version: {version!r}")
    root = node_from_payload(data.get("root"), "$.root")
    if not is_composite(root):
        raise DocumentFormatError("document root must be a struct or list")
    return root


def build_document_bytes(root: ParamNode, compress: bool = False) -> bytes:
    text = json.dumps(document_to_payload(root), indent=None if compress else 2, ensure_ascii=False)
    payload = (text + "\n").encode("utf-8")
    if compress:
        return gzip.compress(payload, compresslevel=9, mtime=0)
    return payload


def load_document(path: Any) -> ParamNode:
    """Load a param tree from `.json` or gzip `.gz` path."""
    use_path = str(path or "")
    try:
        if _is_gzip_path(use_path):
            with gzip.open(use_path, "rb") as handle:
                raw = handle.read().decode("utf-8")
            data = json.loads(raw)
        else:
            with open(use_path, "r", encoding="utf-8") as handle:
                data = json.load(handle)
    except (UnicodeDecodeError, json.JSONDecodeError, gzip.BadGzipFile) as exc:
        raise DocumentFormatError(f"{use_path}: {exc}") from exc
    return document_from_payload(data)


def save_document(path: Any, root: ParamNode) -> None:
    use_path = str(path or "")
    if not use_path:
        raise ValueError("Save destination path is required.")
    write_bytes_atomic(use_path, build_document_bytes(root, compress=_is_gzip_path(use_path)))
