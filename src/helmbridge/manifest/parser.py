#!/usr/bin/env python3
"""
HELMBRIDGE MANIFEST PARSER
--------------------------
Splits the rendered output of `helm get manifest` into ResourceDescriptors.
The parse is line oriented: only `kind:`, `name:`, `namespace:`, the
`---` separator and the `bridgeRegister: true` marker are recognised.
"""

import logging
from typing import List, Optional

from helmbridge.core.models import ResourceDescriptor

logger = logging.getLogger("helmbridge.parser")


class ManifestParser:
    """
    Single pass scanner holding at most one open descriptor at a time.
    A new kind line or a document separator closes the open descriptor.
    """

    DOCUMENT_SEPARATOR = "---"
    REGISTER_MARKER = "bridgeRegister: true"

    def __init__(self):
        self.current: Optional[ResourceDescriptor] = None
        self.found: List[ResourceDescriptor] = []

    def parse(self, manifest_text: str) -> List[ResourceDescriptor]:
        # Reset so one parser can be reused across releases
        self.current = None
        self.found = []

        for line in manifest_text.splitlines():
            stripped = line.strip()

            if stripped.startswith("kind:"):
                self._finalize()
                self.current = ResourceDescriptor(kind=self._value(stripped, "kind:"))
            elif stripped == self.DOCUMENT_SEPARATOR:
                self._finalize()
            elif self.current is not None:
                self._apply(stripped)

        self._finalize()
        logger.debug(f"Parsed {len(self.found)} resources from manifest")
        return self.found

    def _apply(self, stripped: str):
        if stripped.startswith("name:"):
            self.current.name = self._value(stripped, "name:")
        elif stripped.startswith("namespace:"):
            self.current.namespace = self._value(stripped, "namespace:")
        elif self.REGISTER_MARKER in stripped:
            self.current.register_flag = True

    def _finalize(self):
        if self.current is not None:
            self.found.append(self.current)
        self.current = None

    def _value(self, stripped: str, prefix: str) -> str:
        """Strips the key and any quotes Helm left around the scalar."""
        return stripped[len(prefix):].strip().strip("'").strip('"')


def parse_manifest(manifest_text: str) -> List[ResourceDescriptor]:
    return ManifestParser().parse(manifest_text)
