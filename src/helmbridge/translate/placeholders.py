#!/usr/bin/env python3
"""
HELMBRIDGE PLACEHOLDER ENGINE
-----------------------------
Rewrites `{{ bridge.<resource>.<field> }}` markers in a values document
with the values the Bridge service holds for <resource>.

Translation is all or nothing: any lookup failure raises TranslationError
and the caller keeps the original document.
"""

import json
import logging
from typing import Any, Dict, List

import requests

from helmbridge.bridge.client import BridgeClient
from helmbridge.core.errors import TranslationError
from helmbridge.core.models import PlaceholderToken

logger = logging.getLogger("helmbridge.translate")

OPEN_MARKER = "{{ bridge."
CLOSE_MARKER = " }}"


def extract_placeholders(content: str) -> List[str]:
    """
    Returns the dotted path of every `{{ bridge.` marker, in document order,
    `bridge.` prefix included. A marker without a closing ` }}` later on
    the same line is skipped.
    """
    placeholders = []
    for line in content.split("\n"):
        pos = line.find(OPEN_MARKER)
        while pos != -1:
            start = pos + len("{{ ")
            end = line.find(CLOSE_MARKER, start)
            if end == -1:
                break
            placeholders.append(line[start:end])
            pos = line.find(OPEN_MARKER, end + len(CLOSE_MARKER))
    return placeholders


def count_placeholders(content: str) -> int:
    """Number of well-formed `bridge.<resource>.<field>` markers."""
    return sum(1 for path in extract_placeholders(content)
               if PlaceholderToken.from_path(path) is not None)


def render_value(value: Any) -> str:
    """Renders a JSON value the way it should read inside a YAML document."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


class PlaceholderEngine:

    def __init__(self, bridge: BridgeClient):
        self.bridge = bridge

    def translate(self, document: str) -> str:
        # One GET per distinct resource for the duration of this call
        fetched: Dict[str, Dict[str, Any]] = {}

        for path in extract_placeholders(document):
            token = PlaceholderToken.from_path(path)
            if token is None:
                logger.debug(f"Ignoring malformed placeholder '{path}'")
                continue

            if token.resource not in fetched:
                fetched[token.resource] = self.fetch_resource(token.resource)
            record = fetched[token.resource]

            if token.field not in record:
                raise TranslationError(
                    f"Failed to fetch value for {path}: "
                    f"field {token.field} not found in resource {token.resource}"
                )
            document = document.replace(token.marker, render_value(record[token.field]))

        return document

    def fetch_resource(self, resource: str) -> Dict[str, Any]:
        try:
            response = self.bridge.get_resource(resource)
        except requests.RequestException as e:
            raise TranslationError(f"Failed to fetch resource {resource}: {e}")

        if response.status_code != 200:
            raise TranslationError(
                f"Error fetching resource {resource}: "
                f"{response.status_code} {response.reason or ''}".rstrip()
            )

        try:
            body = response.json()
        except ValueError as e:
            raise TranslationError(f"Malformed response for resource {resource}: {e}")
        if not isinstance(body, dict):
            raise TranslationError(
                f"Malformed response for resource {resource}: expected a JSON object"
            )
        return body
