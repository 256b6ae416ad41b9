"""Meta block decoding for JSON and YAML."""

from __future__ import annotations

import json
from typing import Any

import yaml

from pagekit.exceptions import MetaError

SUPPORTED_LANGUAGES = ("json", "yaml")


class _MetaLoader(yaml.SafeLoader):
    """SafeLoader that keeps scalar mapping keys as written.

    Keys such as ``1``, ``true`` and ``2016-01-02`` stay strings, so distinct
    keys never collapse into one Python key.
    """

    def construct_mapping(self, node, deep=False):
        self.flatten_mapping(node)
        mapping = {}
        for key_node, value_node in node.value:
            if isinstance(key_node, yaml.ScalarNode):
                key = key_node.value
            else:
                key = str(self.construct_object(key_node, deep=deep))
            mapping[key] = self.construct_object(value_node, deep=deep)
        return mapping


def decode_meta(data: str | bytes, lang: str = "") -> dict[str, Any]:
    """Decode a meta block into a string-keyed mapping.

    With no declared *lang*, JSON is tried first and kept only if it
    decodes to an object; anything else is treated as YAML. Empty input
    yields an empty mapping.

    Raises:
        MetaError: If decoding fails, the block is not a mapping, or
            *lang* is not a supported language.
    """
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")
    if not data.strip():
        return {}

    if lang == "":
        try:
            decoded = json.loads(data)
        except ValueError:
            decoded = None
        if isinstance(decoded, dict):
            return decoded
        lang = "yaml"

    if lang == "json":
        try:
            decoded = json.loads(data)
        except ValueError as exc:
            raise MetaError(f"json: {exc}") from exc
    elif lang == "yaml":
        try:
            decoded = yaml.load(data, Loader=_MetaLoader)
        except yaml.YAMLError as exc:
            raise MetaError(f"yaml: {exc}") from exc
    else:
        raise MetaError(f"Unsupported language for meta block: {lang}")

    if decoded is None:
        return {}
    if not isinstance(decoded, dict):
        raise MetaError(
            f"{lang}: meta block must be a mapping, got {type(decoded).__name__}"
        )
    return {str(k): v for k, v in decoded.items()}
