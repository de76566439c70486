"""
Generic reshaping of SDK responses into the console's JSON shape.

Each resource type declares a field table mapping the camelCase output
name to either the PascalCase key in the SDK response or a callable that
receives the whole source dict. Values absent from the source are left
out of the result rather than emitted as ``null``.

Usage::

    BUCKET_FIELDS = {"name": "Name", "creationDate": "CreationDate"}
    reshape({"Name": "b", "CreationDate": dt}, BUCKET_FIELDS)
    # => {"name": "b", "creationDate": dt}
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Union

FieldSpec = Union[str, Callable[[Mapping[str, Any]], Any]]


def reshape(source: Mapping[str, Any] | None, fields: Mapping[str, FieldSpec]) -> dict[str, Any]:
    """Project *source* through a field table.

    Args:
        source: An SDK response dict (or ``None``).
        fields: Output name -> source key or extractor callable.

    Returns:
        A new dict holding only the fields that resolved to a value.
    """
    if not source:
        return {}
    out: dict[str, Any] = {}
    for name, spec in fields.items():
        value = spec(source) if callable(spec) else source.get(spec)
        if value is not None:
            out[name] = value
    return out


def reshape_all(
    items: Iterable[Mapping[str, Any]] | None, fields: Mapping[str, FieldSpec]
) -> list[dict[str, Any]]:
    """Apply :func:`reshape` to each element of *items*."""
    return [reshape(item, fields) for item in items or []]


def tags_to_dict(tags: Iterable[Mapping[str, Any]] | None) -> dict[str, Any]:
    """``[{"Key": k, "Value": v}]`` -> ``{k: v}``."""
    return {tag["Key"]: tag.get("Value") for tag in tags or [] if "Key" in tag}


def tags_to_pairs(tags: Iterable[Mapping[str, Any]] | None) -> list[dict[str, Any]]:
    """``[{"Key": k, "Value": v}]`` -> ``[{"key": k, "value": v}]``."""
    return [{"key": tag.get("Key"), "value": tag.get("Value")} for tag in tags or []]


def dict_to_tags(tags: Mapping[str, Any] | None) -> list[dict[str, str]]:
    """``{k: v}`` -> ``[{"Key": k, "Value": v}]`` for SDK input."""
    return [{"Key": str(k), "Value": str(v)} for k, v in (tags or {}).items()]


def pairs_to_tags(tags: Iterable[Mapping[str, Any]] | None) -> list[dict[str, Any]]:
    """``[{"key": k, "value": v}]`` -> ``[{"Key": k, "Value": v}]``."""
    return [{"Key": tag.get("key"), "Value": tag.get("value")} for tag in tags or []]


def tags_in(tags: Any) -> list[dict[str, Any]] | None:
    """Accept tags as ``{k: v}``, ``[{"key", "value"}]`` or SDK-shaped pairs."""
    if not tags:
        return None
    if isinstance(tags, Mapping):
        return dict_to_tags(tags)
    return [
        {"Key": tag.get("Key", tag.get("key")), "Value": tag.get("Value", tag.get("value"))}
        for tag in tags
    ]


def pascal_keys(data: Any, deep: bool = True) -> Any:
    """Convert camelCase dict keys to PascalCase for SDK input.

    With ``deep=False`` only the top level is renamed, leaving nested
    user-defined keys untouched.
    """
    if isinstance(data, dict):
        return {_to_pascal(k): pascal_keys(v) if deep else v for k, v in data.items()}
    if isinstance(data, list):
        return [pascal_keys(v, deep) for v in data]
    return data


def _to_pascal(key: Any) -> Any:
    if not isinstance(key, str) or not key:
        return key
    return key[0].upper() + key[1:]

