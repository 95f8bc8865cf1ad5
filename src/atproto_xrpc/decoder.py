"""Generic response decoding on top of pydantic type adapters."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from .errors import DecodingError

_adapter_cache: dict[Any, TypeAdapter[Any]] = {}
_MAX_SAMPLE_DEPTH = 2
_MAX_SAMPLE_ITEMS = 5
_MAX_SAMPLE_STRING = 200


class XrpcErrorBody(BaseModel):
    model_config = ConfigDict(extra="ignore", strict=True)

    error: str
    message: str | None = None


def _model_name(model_type: Any) -> str:
    return getattr(model_type, "__name__", repr(model_type))


def _adapter_for(model_type: Any) -> TypeAdapter[Any]:
    try:
        adapter = _adapter_cache.get(model_type)
    except TypeError:
        return TypeAdapter(model_type)

    if adapter is None:
        adapter = TypeAdapter(model_type)
        _adapter_cache[model_type] = adapter
    return adapter


def _sample_payload(value: Any, depth: int = 0) -> Any:
    if depth > _MAX_SAMPLE_DEPTH:
        return "<trimmed>"

    if isinstance(value, dict):
        sampled: dict[str, Any] = {}
        for index, (key, nested) in enumerate(value.items()):
            if index >= _MAX_SAMPLE_ITEMS:
                sampled["..."] = "<trimmed>"
                break
            sampled[str(key)] = _sample_payload(nested, depth + 1)
        return sampled

    if isinstance(value, list):
        sampled_items = [_sample_payload(item, depth + 1) for item in value[:_MAX_SAMPLE_ITEMS]]
        if len(value) > _MAX_SAMPLE_ITEMS:
            sampled_items.append("<trimmed>")
        return sampled_items

    if isinstance(value, str):
        return value if len(value) <= _MAX_SAMPLE_STRING else f"{value[:_MAX_SAMPLE_STRING]}..."

    if isinstance(value, (int, float, bool)) or value is None:
        return value

    return repr(value)


def _sample_content(content: bytes) -> Any:
    try:
        return _sample_payload(json.loads(content))
    except (ValueError, UnicodeDecodeError):
        return _sample_payload(content.decode("utf-8", errors="replace"))


def decode_response(
    content: bytes,
    shape: Any,
    *,
    method_id: str,
    status_code: int | None = None,
) -> Any:
    """Decode a JSON response body into ``shape``.

    Unknown fields are ignored by the models; present fields of the wrong
    type fail instead of being coerced.
    """

    adapter = _adapter_for(shape)
    try:
        return adapter.validate_json(content, strict=True)
    except ValidationError as error:
        raise DecodingError(
            method_id=method_id,
            model_name=_model_name(shape),
            errors=error.errors(include_url=False),
            status_code=status_code,
            raw_sample=_sample_content(content),
        ) from error


def parse_error_body(content: bytes) -> XrpcErrorBody | None:
    if not content:
        return None
    try:
        return XrpcErrorBody.model_validate_json(content)
    except ValidationError:
        return None
