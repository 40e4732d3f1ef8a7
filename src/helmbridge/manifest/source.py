"""
Fetches the rendered manifest of a deployed release from Helm.
"""

import logging
import subprocess
from typing import List

from helmbridge.core.errors import ManifestSourceError

logger = logging.getLogger("helmbridge.source")


class HelmManifestSource:

    def __init__(self, helm_bin: str = "helm", timeout: float = 30.0):
        self.helm_bin = helm_bin
        self.timeout = timeout

    def command(self, release_name: str, namespace: str) -> List[str]:
        return [self.helm_bin, "get", "manifest", release_name, "-n", namespace]

    def fetch(self, release_name: str, namespace: str) -> str:
        """Returns helm's stdout; any failure to produce it is fatal."""
        cmd = self.command(release_name, namespace)
        logger.info(f"Fetching manifest for release {release_name} in {namespace}")
        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, timeout=self.timeout, check=False
            )
        except FileNotFoundError:
            raise ManifestSourceError(f"Helm executable not found: {self.helm_bin}")
        except subprocess.TimeoutExpired:
            raise ManifestSourceError(
                f"Timed out after {self.timeout}s fetching manifest for {release_name}"
            )

        if result.returncode != 0:
            detail = (result.stderr or result.stdout).strip()
            raise ManifestSourceError(
                f"Failed to get Helm manifest for {release_name}: "
                f"exit status {result.returncode}: {detail}"
            )
        return result.stdout
