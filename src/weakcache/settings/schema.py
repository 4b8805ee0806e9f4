"""Schema helpers for the ``WeakCache.from_options`` mapping."""

from __future__ import annotations

from typing import Any, Mapping

from jsonschema import Draft202012Validator, ValidationError

from ..config import DEFAULT_CACHE_NAME
from ..errors import OptionsValidationError

OPTIONS_SCHEMA: dict[str, Any] = {
    "$id": "weakcache/options.schema.json",
    "type": "object",
    "properties": {
        "name": {"type": "string", "minLength": 1},
        # Callables have no JSON type; ``WeakCache`` checks them itself.
        "on_evict": {},
        "onEvict": {},
    },
    "not": {"required": ["on_evict", "onEvict"]},
    "additionalProperties": False,
}

DEFAULT_OPTIONS: dict[str, Any] = {
    "name": DEFAULT_CACHE_NAME,
    "on_evict": None,
}

_validator = Draft202012Validator(OPTIONS_SCHEMA)


def merge_with_defaults(options: Mapping[str, Any] | None) -> dict[str, Any]:
    """Validate *options* and merge them over :data:`DEFAULT_OPTIONS`.

    ``onEvict`` is accepted as an alias and folded into ``on_evict``.
    """

    data = dict(options or {})
    try:
        _validator.validate(data)
    except ValidationError as exc:
        if exc.validator == "not":
            raise OptionsValidationError("Pass either 'on_evict' or 'onEvict', not both") from exc
        raise OptionsValidationError(exc.message) from exc

    merged = dict(DEFAULT_OPTIONS)
    if "onEvict" in data:
        data["on_evict"] = data.pop("onEvict")
    merged.update(data)
    return merged


__all__ = ["DEFAULT_OPTIONS", "OPTIONS_SCHEMA", "merge_with_defaults"]
