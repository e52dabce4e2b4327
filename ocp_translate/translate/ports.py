"""
Resolution of a Route port reference against the ports of its Service.
"""

import logging
from collections.abc import Sequence

from ocp_translate.exceptions import PortResolutionError
from ocp_translate.models.kubernetes import ServicePort
from ocp_translate.models.openshift import RoutePort

logger = logging.getLogger(__name__)


def resolve_port(
    route_port: RoutePort | None,
    service_ports: Sequence[ServicePort],
    log: logging.Logger | logging.LoggerAdapter | None = None,
) -> int:
    """
    Resolve the service port a Route sends traffic to.

    Without an explicit reference the first service port wins. A numeric
    reference is matched against each port's targetPort, a named reference
    against each port's name. The first match in service order is used.

    Args:
        route_port: Route.spec.port, or None when the route leaves it out
        service_ports: Service.spec.ports in source order
        log: Diagnostic sink

    Returns:
        The matched ``port`` value (never 0)

    Raises:
        PortResolutionError: No port matches, or the match has no usable port

    Example:
        >>> ports = [ServicePort(name="http", port=8080, target_port=80)]
        >>> resolve_port(RoutePort("http"), ports)
        8080
        >>> resolve_port(RoutePort(80), ports)
        8080
    """
    log = log or logger
    candidates = [p.to_dict() for p in service_ports]
    requested = None if route_port is None else route_port.target_port

    matched = None
    if route_port is None:
        if service_ports:
            matched = service_ports[0]
            log.debug(f"Route has no port reference, using first service port {matched.port}")
    elif isinstance(requested, int):
        matched = next((p for p in service_ports if p.target_port == requested), None)
    else:
        matched = next((p for p in service_ports if p.name and p.name == requested), None)

    if matched is None or not matched.port:
        raise PortResolutionError(requested, candidates)

    log.debug(f"Resolved route port {requested!r} to service port {matched.port}")
    return matched.port
