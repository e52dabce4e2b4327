"""
TLS secrets for certificate material carried inline by a Route.
"""

import base64
import logging
from typing import Any

from ocp_translate.models.openshift import Route

logger = logging.getLogger(__name__)

DEFAULT_SECRET_PREFIX = "hpsecret-"
TLS_SECRET_TYPE = "kubernetes.io/tls"


def _b64(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def has_inline_certificate(route: Route) -> bool:
    """Return True if the route carries both a certificate and a key."""
    tls = route.spec.tls
    return tls is not None and bool(tls.certificate) and bool(tls.key)


def build_tls_secret(route: Route, prefix: str = DEFAULT_SECRET_PREFIX) -> dict[str, Any]:
    """
    Build a ``kubernetes.io/tls`` Secret from the route's certificate and key.

    The secret lives in the route's namespace and is named ``<prefix><route name>``.
    ``data`` values are base64-encoded as the Secret API requires.

    Args:
        route: Route with inline TLS certificate and key
        prefix: Secret name prefix

    Returns:
        Secret manifest dict
    """
    tls = route.spec.tls
    secret = {
        "apiVersion": "v1",
        "kind": "Secret",
        "metadata": {"name": f"{prefix}{route.name}", "namespace": route.namespace},
        "type": TLS_SECRET_TYPE,
        "data": {
            "tls.crt": _b64(tls.certificate),
            "tls.key": _b64(tls.key),
        },
    }
    logger.debug(f"Built TLS secret {secret['metadata']['name']} for route {route.name}")
    return secret
