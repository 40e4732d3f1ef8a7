#!/usr/bin/env python3
"""
HELMBRIDGE REGISTRAR
--------------------
Publishes a resolved ResourceDescriptor to the Bridge service. Only a
201 Created counts as success.
"""

import logging

import requests

from helmbridge.bridge.client import BridgeClient
from helmbridge.core.errors import RegistrationError
from helmbridge.core.models import ResourceDescriptor

logger = logging.getLogger("helmbridge.registrar")


class Registrar:

    def __init__(self, bridge: BridgeClient):
        self.bridge = bridge

    def register(self, descriptor: ResourceDescriptor) -> bool:
        """
        Returns False when the descriptor is not flagged for registration
        (no request is made) and True once the service answered 201.
        Raises RegistrationError for any other outcome.
        """
        if not descriptor.register_flag:
            logger.debug(f"Skipping {descriptor.identity}: not marked bridgeRegister")
            return False

        try:
            response = self.bridge.post_resource(
                descriptor.namespace, descriptor.name, descriptor.to_record()
            )
        except requests.RequestException as e:
            raise RegistrationError(
                f"Failed to send registration for {descriptor.identity}: {e}",
                identity=descriptor.identity,
            )

        if response.status_code != 201:
            raise RegistrationError(
                f"Failed to register resource {descriptor.identity}: "
                f"{response.status_code} {response.reason or ''}".rstrip(),
                identity=descriptor.identity,
            )

        logger.info(f"Registered {descriptor.identity}")
        return True
