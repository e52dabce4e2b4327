"""
Translate an OpenShift Route into a Contour HTTPProxy.

The Route is translated together with the Service it targets: the Service is
needed to turn the route's port reference into the numeric port HTTPProxy
requires. Routes that terminate TLS with inline certificate material also
produce a TLS Secret referenced by the proxy.
"""

import logging
from dataclasses import dataclass
from typing import Any

from ocp_translate.exceptions import MismatchError
from ocp_translate.models.kubernetes import Service
from ocp_translate.models.openshift import Route
from ocp_translate.translate.annotations import FieldFact
from ocp_translate.translate.base import DEFAULT_NAME, BaseTranslator
from ocp_translate.translate.domain import rehost
from ocp_translate.translate.enums import ROUTE_TERMINATION, EnumTable, RemapOutcome, TLSMode
from ocp_translate.translate.ports import resolve_port
from ocp_translate.translate.secrets import (
    DEFAULT_SECRET_PREFIX,
    build_tls_secret,
    has_inline_certificate,
)

logger = logging.getLogger(__name__)

HTTPPROXY_API_VERSION = "projectcontour.io/v1"
HTTPPROXY_KIND = "HTTPProxy"


def _tls_field(attr: str):
    return lambda route: route.spec.tls is not None and bool(getattr(route.spec.tls, attr))


ROUTE_FIELD_FACTS = (
    FieldFact("Spec.WildCardPolicy", lambda r: r.spec.wildcard_policy not in ("", "None")),
    FieldFact("Spec.Weight", lambda r: r.spec.to.weight is not None),
    FieldFact("Spec.AlternateBackends", lambda r: bool(r.spec.alternate_backends)),
    # Redirect matches what HTTPProxy does on TLS virtual hosts
    FieldFact(
        "Spec.InsecureEdgeTerminationPolicy",
        lambda r: _tls_field("insecure_edge_termination_policy")(r)
        and r.spec.tls.insecure_edge_termination_policy != "Redirect",
    ),
    FieldFact("Spec.DestinationCACertificate", _tls_field("destination_ca_certificate")),
    FieldFact("Spec.CACertificate", _tls_field("ca_certificate")),
)


@dataclass
class RouteTranslation:
    """Output of a Route translation: the proxy and, optionally, its TLS secret."""

    http_proxy: dict[str, Any]
    secret: dict[str, Any] | None = None

    def resources(self) -> list[dict[str, Any]]:
        resources = [self.http_proxy]
        if self.secret is not None:
            resources.append(self.secret)
        return resources


class RouteTranslator(BaseTranslator):
    """
    Translates Route + Service pairs into HTTPProxy (+ Secret).

    Args:
        name: Caller name for annotation keys and log messages
        log: Diagnostic sink
        facts: Replacement unsupported-field table
        domain: Wildcard domain to rehost the route under ("", "apps.x",
            ".apps.x" or "*.apps.x"); empty keeps the route's host
        secret_prefix: Name prefix for generated TLS secrets
        termination_table: Route termination to TLS mode table

    Example:
        >>> translator = RouteTranslator("migrator", domain="*.k8s.example.com")
        >>> result = translator.translate(route, service)  # doctest: +SKIP
        >>> result.http_proxy["spec"]["virtualhost"]["fqdn"]  # doctest: +SKIP
        'shop.k8s.example.com'
    """

    source_kind = Route.KIND

    def __init__(
        self,
        name: str = DEFAULT_NAME,
        log: logging.Logger | logging.LoggerAdapter | None = None,
        facts=None,
        domain: str = "",
        secret_prefix: str = DEFAULT_SECRET_PREFIX,
        termination_table: EnumTable = ROUTE_TERMINATION,
    ):
        super().__init__(name, log, facts)
        self.domain = domain
        self.secret_prefix = secret_prefix
        self.termination_table = termination_table

    @classmethod
    def default_facts(cls) -> tuple[FieldFact, ...]:
        return ROUTE_FIELD_FACTS

    def translate(self, route: Route, service: Service) -> RouteTranslation:
        """
        Translate *route*, resolving its backend port against *service*.

        Args:
            route: Source Route
            service: The Service named by ``route.spec.to``

        Returns:
            RouteTranslation with the HTTPProxy and an optional Secret

        Raises:
            MismatchError: Service is not the route's target or lives elsewhere
            PortResolutionError: The route port matches no service port
            ValidationError: The route has no host
        """
        self.log.debug(f"[{self.name}] Translating route {route.namespace}/{route.name}")
        self._validate(route, service)
        self._warn_ignored(route)

        port = resolve_port(route.spec.port, service.ports, self.log)
        fqdn = rehost(route.spec.host, self.domain)
        if not self.domain:
            self.log.warning(
                f"[{self.name}] No new wildcard DNS domain specified, keeping the route host {fqdn}"
            )
        self.log.debug(f"[{self.name}] FQDN of the HTTPProxy will be {fqdn}")

        tls, secret = self._build_tls(route)

        virtual_host: dict[str, Any] = {"fqdn": fqdn}
        if tls is not None:
            virtual_host["tls"] = tls

        proxy_route: dict[str, Any] = {}
        if route.spec.path:
            proxy_route["conditions"] = [{"prefix": route.spec.path}]
        proxy_route["services"] = [{"name": service.name, "port": port}]

        http_proxy = {
            "apiVersion": HTTPPROXY_API_VERSION,
            "kind": HTTPPROXY_KIND,
            "metadata": self.build_metadata(
                route.metadata, annotations=self.recorder.annotate(route)
            ),
            "spec": {"virtualhost": virtual_host, "routes": [proxy_route]},
        }
        self.log.debug(f"[{self.name}] Translated HTTPProxy {http_proxy}")
        return RouteTranslation(http_proxy=http_proxy, secret=secret)

    def _validate(self, route: Route, service: Service) -> None:
        if service.namespace != route.namespace:
            raise MismatchError("Service namespace", route.namespace, service.namespace)
        if service.name != route.spec.to.name:
            raise MismatchError("Route.spec.to.name", service.name, route.spec.to.name)
        if route.spec.to.kind != Service.KIND:
            raise MismatchError(
                "Route.spec.to.kind",
                Service.KIND,
                route.spec.to.kind,
                "Only routes that target a Service can be translated.",
            )

    def _warn_ignored(self, route: Route) -> None:
        if route.spec.alternate_backends:
            self.log.warning(
                f"[{self.name}] Route {route.name} has alternateBackends, they will be ignored"
            )
        if route.spec.to.weight is not None:
            self.log.debug(f"[{self.name}] Route {route.name} has weights, they will be ignored")
        tls = route.spec.tls
        if tls is not None and tls.insecure_edge_termination_policy == "Allow":
            self.log.warning(
                f"[{self.name}] Route {route.name} allows insecure traffic, "
                "the HTTPProxy will redirect to HTTPS instead"
            )

    def _build_tls(self, route: Route) -> tuple[dict[str, Any] | None, dict[str, Any] | None]:
        """Return the virtual host TLS block and the Secret it references, if any."""
        if route.spec.tls is None:
            return None, None

        termination = route.spec.tls.termination
        self.log.debug(f"[{self.name}] Route TLS termination is {termination!r}")
        mode = self.termination_table.remap(termination)

        if mode.outcome is not RemapOutcome.MAPPED:
            self.log.warning(
                f"[{self.name}] Route {route.name} has unknown TLS termination "
                f"{termination!r}, no TLS will be configured"
            )
            return None, None

        if mode.value is TLSMode.PASSTHROUGH:
            return {"passthrough": True}, None

        if not has_inline_certificate(route):
            self.log.warning(
                f"[{self.name}] Route {route.name} terminates TLS ({termination}) without "
                "inline certificate and key, no TLS will be configured"
            )
            return None, None

        secret = build_tls_secret(route, self.secret_prefix)
        return {"secretName": secret["metadata"]["name"]}, secret
