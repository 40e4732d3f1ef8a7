#!/usr/bin/env python3
"""
HELMBRIDGE CORE MODELS
----------------------
Defines the data structures shared by the parser, resolver, registrar
and placeholder engine.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class ResourceKind(str, Enum):
    """The closed set of Kubernetes kinds the bridge knows how to describe."""
    POD = "Pod"
    SERVICE = "Service"
    INGRESS = "Ingress"
    DEPLOYMENT = "Deployment"
    STATEFULSET = "StatefulSet"
    CONFIGMAP = "ConfigMap"
    SECRET = "Secret"

    @classmethod
    def lookup(cls, kind: str) -> Optional["ResourceKind"]:
        for member in cls:
            if member.value == kind:
                return member
        return None


@dataclass
class ResourceDescriptor:
    """
    One Kubernetes object found in a rendered Helm manifest.

    Created by the ManifestParser on a `kind:` line and enriched once by
    the DetailResolver before registration.
    """
    kind: str                               # Always set, taken from the kind: line
    name: str = ""                          # Empty when the segment has no name: line
    namespace: str = ""                     # Namespace as written in the manifest
    register_flag: bool = False             # True when `bridgeRegister: true` was seen
    details: Optional[Dict[str, str]] = None

    @property
    def identity(self) -> str:
        """Human readable kind/namespace/name triple used in logs and errors."""
        return f"{self.kind} {self.namespace}/{self.name}"

    def attach_details(self, details: Dict[str, str]):
        if self.details is not None:
            raise ValueError(f"Details already attached to {self.identity}")
        self.details = dict(details)

    def to_record(self) -> Dict[str, object]:
        """The JSON body the Bridge service expects on registration."""
        return {
            "name": self.name,
            "resource_type": self.kind,
            "details": self.details,
        }


@dataclass(frozen=True)
class PlaceholderToken:
    """A `bridge.<resource>.<field>` reference found in a values document."""
    resource: str
    field: str

    PREFIX = "bridge"

    @property
    def path(self) -> str:
        return f"{self.PREFIX}.{self.resource}.{self.field}"

    @property
    def marker(self) -> str:
        """The literal text replaced in the document."""
        return "{{ " + self.path + " }}"

    @classmethod
    def from_path(cls, path: str) -> Optional["PlaceholderToken"]:
        parts = path.split(".")
        if len(parts) != 3 or parts[0] != cls.PREFIX:
            return None
        return cls(resource=parts[1], field=parts[2])
