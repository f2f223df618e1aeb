"""Serialization — JSON round-trip for scan output.

Converts ParseOutput (segments, directives, markers, diagnostics) to/from
JSON-compatible dicts. Useful for:
- Caching scanned command templates
- Handing scan results to tooling in another process
- Debugging and inspection

All output is deterministic (sorted keys) for cache-key stability.

Example:
    from llaves import parse
    from llaves.serialization import to_json, from_json

    output = parse("Review @{src/main.py}")
    json_str = to_json(output)
    restored = from_json(json_str)
    assert output == restored

Thread Safety:
    All functions are pure and safe to call from any thread.

"""

import json
from dataclasses import fields
from typing import Any

from llaves.markers import Marker, MarkerKind
from llaves.segments import Diagnostic, Directive, InjectionDirective, Literal, ParseOutput

# Registry of record type names to classes for deserialization
_RECORD_TYPES: dict[str, type] = {
    "ParseOutput": ParseOutput,
    "Literal": Literal,
    "Directive": Directive,
    "InjectionDirective": InjectionDirective,
    "Diagnostic": Diagnostic,
}


def to_dict(record: Any) -> dict[str, Any]:
    """Convert a scan record to a JSON-compatible dict.

    Includes a ``_type`` discriminator field for deserialization.

    Args:
        record: ParseOutput or any segment, directive or diagnostic.

    Returns:
        Dict with ``_type`` and all record fields.

    """
    result: dict[str, Any] = {"_type": type(record).__name__}

    for f in fields(record):
        result[f.name] = _serialize_value(getattr(record, f.name))

    return result


def _serialize_value(value: Any) -> Any:
    """Serialize a single field value."""
    if isinstance(value, Marker):
        return {"_type": "Marker", "kind": value.kind.name, "name": value.name}
    if type(value).__name__ in _RECORD_TYPES:
        return to_dict(value)
    if isinstance(value, tuple):
        return [_serialize_value(item) for item in value]
    # Primitives: str, int, None
    return value


def from_dict(data: dict[str, Any]) -> Any:
    """Reconstruct a scan record from a dict.

    Args:
        data: Dict with ``_type`` and fields (as produced by to_dict).

    Returns:
        Frozen record instance.

    Raises:
        ValueError: If ``_type`` is missing or unknown.

    """
    type_name = data.get("_type")
    if type_name is None:
        msg = "Missing '_type' field in serialized record"
        raise ValueError(msg)

    if type_name == "Marker":
        return Marker(MarkerKind[data["kind"]], data["name"])

    record_cls = _RECORD_TYPES.get(type_name)
    if record_cls is None:
        msg = f"Unknown record type: {type_name!r}"
        raise ValueError(msg)

    kwargs: dict[str, Any] = {}
    for f in fields(record_cls):
        if f.name not in data:
            continue
        kwargs[f.name] = _deserialize_value(data[f.name])

    return record_cls(**kwargs)


def _deserialize_value(value: Any) -> Any:
    """Deserialize a single field value."""
    if isinstance(value, dict):
        if value.get("_type") is not None:
            return from_dict(value)
        return value
    if isinstance(value, list):
        return tuple(_deserialize_value(item) for item in value)
    return value


def to_json(output: ParseOutput, *, indent: int | None = None) -> str:
    """Serialize a ParseOutput to a JSON string.

    Output is deterministic (sorted keys) for cache-key stability.

    Args:
        output: Scan output to serialize.
        indent: JSON indentation level (None for compact).

    Returns:
        JSON string.

    """
    return json.dumps(to_dict(output), sort_keys=True, indent=indent)


def from_json(data: str) -> ParseOutput:
    """Deserialize a ParseOutput from a JSON string.

    Args:
        data: JSON string (as produced by to_json).

    Returns:
        ParseOutput.

    Raises:
        ValueError: If the JSON doesn't represent a ParseOutput.

    """
    raw = json.loads(data)
    output = from_dict(raw)
    if not isinstance(output, ParseOutput):
        msg = f"Expected ParseOutput, got {type(output).__name__}"
        raise ValueError(msg)
    return output
