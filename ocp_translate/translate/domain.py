"""
Rehosting of route and ingress hosts under a new wildcard domain.
"""

from ocp_translate.exceptions import ValidationError


def normalize_domain(domain: str) -> str:
    """
    Strip a leading ``*.`` or ``.`` from a wildcard domain.

    Example:
        >>> normalize_domain("*.apps.example.com")
        'apps.example.com'
        >>> normalize_domain(".apps.example.com")
        'apps.example.com'
    """
    if domain.startswith("*."):
        return domain[2:]
    if domain.startswith("."):
        return domain[1:]
    return domain


def rehost(host: str, domain: str) -> str:
    """
    Move *host* under *domain*, keeping its first label.

    An empty *domain* keeps the host unchanged.

    Example:
        >>> rehost("shop.apps.ocp.example.com", "*.k8s.example.com")
        'shop.k8s.example.com'
    """
    if not host:
        raise ValidationError(
            "Source has no host to build the virtual host FQDN from",
            "Set spec.host on the route (or a host on the first ingress rule).",
        )
    if not domain:
        return host
    first_label = host.split(".", 1)[0]
    return f"{first_label}.{normalize_domain(domain)}"
