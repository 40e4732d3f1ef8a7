#!/usr/bin/env python3
"""
HELMBRIDGE ENGINE - The Orchestrator
------------------------------------
Wires the manifest source, parser, resolver, registrar and placeholder
engine together for the three commands:

1. register  - manifest -> descriptors -> details -> Bridge service
2. translate - values document -> placeholders resolved -> written back
3. deploy    - translate, then register

Per-resource failures during register are logged and reported; every
other failure propagates to the caller.
"""

import os
import time
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from helmbridge.bridge.client import BridgeClient
from helmbridge.bridge.registrar import Registrar
from helmbridge.cluster.client import ClusterClient
from helmbridge.cluster.resolver import DetailResolver
from helmbridge.core.config import BridgeConfig
from helmbridge.core.errors import (
    RegistrationError, ResourceError, UnsupportedKindError, ValuesFileError,
)
from helmbridge.core.models import ResourceDescriptor
from helmbridge.manifest.parser import ManifestParser
from helmbridge.manifest.source import HelmManifestSource
from helmbridge.translate.placeholders import PlaceholderEngine, count_placeholders

# Setup standardized logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("helmbridge.engine")


class BridgeEngine:
    """
    Holds the collaborators for one run. The cluster client is created
    lazily so translate never needs Kubernetes credentials.
    """

    def __init__(self, config: BridgeConfig, cluster=None,
                 bridge: Optional[BridgeClient] = None,
                 source: Optional[HelmManifestSource] = None):
        self.config = config
        self._cluster = cluster
        self.bridge = bridge or BridgeClient(config.api_url, timeout=config.timeout)
        self.source = source or HelmManifestSource(config.helm_bin, timeout=config.timeout)
        self.parser = ManifestParser()
        self.registrar = Registrar(self.bridge)
        self.placeholders = PlaceholderEngine(self.bridge)

    @property
    def cluster(self):
        if self._cluster is None:
            self._cluster = ClusterClient(config_file=self.config.kubeconfig, timeout=self.config.timeout)
        return self._cluster

    def register(self) -> List[Dict[str, Any]]:
        """Registers every flagged resource of the release, one at a time."""
        self.config.require_release()
        manifest = self.source.fetch(self.config.release_name, self.config.namespace)
        descriptors = self.parser.parse(manifest)
        flagged = [d for d in descriptors if d.register_flag]
        logger.info(
            f"Found {len(descriptors)} resources in release {self.config.release_name}, "
            f"{len(flagged)} marked for registration"
        )

        # No cluster connection when nothing needs resolving
        resolver = DetailResolver(self.cluster) if flagged else None

        reports = []
        for descriptor in descriptors:
            if not descriptor.register_flag:
                reports.append(self._report(descriptor, "SKIPPED", success=True))
                continue
            reports.append(self._register_one(resolver, descriptor))
        return reports

    def _register_one(self, resolver: DetailResolver, descriptor: ResourceDescriptor) -> Dict[str, Any]:
        try:
            descriptor.attach_details(resolver.resolve(descriptor))
            self.registrar.register(descriptor)
        except ResourceError as e:
            logger.error(f"Failed to register resource {descriptor.name}: {e}")
            return self._report(descriptor, self._failure_status(e), success=False, error=str(e))
        return self._report(descriptor, "REGISTERED", success=True, details=descriptor.details)

    def translate(self, dry_run: bool = False) -> Dict[str, Any]:
        """
        Resolves all placeholders of the values document. The file is only
        rewritten once every placeholder resolved and when not in dry run.
        """
        values_path = Path(self.config.values_file)
        try:
            original = values_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ValuesFileError(f"Failed to read {values_path}: {e}")

        translated = self.placeholders.translate(original)
        modified = translated != original

        result = {
            "file_path": str(values_path),
            "placeholders": count_placeholders(original),
            "status": "UNCHANGED",
            "written": False,
            "original_content": original,
            "translated_content": translated,
            "timestamp": time.time(),
        }
        if not modified:
            return result
        if dry_run:
            result["status"] = "PREVIEW"
            return result

        self._atomic_write(values_path, translated)
        result["status"] = "TRANSLATED"
        result["written"] = True
        logger.info(f"Translated placeholders in {values_path}")
        return result

    def deploy(self, dry_run: bool = False) -> Dict[str, Any]:
        translation = self.translate(dry_run=dry_run)
        return {"translation": translation, "registrations": self.register()}

    def generate_summary(self, reports: List[Dict[str, Any]]) -> Dict[str, Any]:
        total = len(reports)
        registered = sum(1 for r in reports if r.get("status") == "REGISTERED")
        skipped = sum(1 for r in reports if r.get("status") == "SKIPPED")
        failed = sum(1 for r in reports if not r.get("success", False))
        attempted = registered + failed
        return {
            "total_resources": total,
            "registered": registered,
            "skipped": skipped,
            "failed": failed,
            "success_rate": (registered / attempted) if attempted > 0 else 0,
            "summary_timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
        }

    def _failure_status(self, error: ResourceError) -> str:
        if isinstance(error, UnsupportedKindError):
            return "UNSUPPORTED"
        if isinstance(error, RegistrationError):
            return "REGISTER_FAILED"
        return "LOOKUP_FAILED"

    def _report(self, descriptor: ResourceDescriptor, status: str, success: bool,
                error: Optional[str] = None, details: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        return {
            "name": descriptor.name,
            "kind": descriptor.kind,
            "namespace": descriptor.namespace,
            "status": status,
            "success": success,
            "error": error,
            "details": details,
        }

    def _atomic_write(self, target_path: Path, content: str):
        temp_file = target_path.with_name(target_path.name + ".helmbridge.tmp")
        try:
            temp_file.write_text(content, encoding="utf-8")
            os.replace(temp_file, target_path)
        except OSError as e:
            if temp_file.exists():
                temp_file.unlink()
            raise ValuesFileError(f"Failed to write {target_path}: {e}")
