"""
Translate an Ingress into a Contour HTTPProxy.

HTTPProxy has one virtual host per object, so only the first Ingress rule is
translated; the hosts of any further rules are listed in an annotation.
"""

import logging
from dataclasses import dataclass
from typing import Any

from ocp_translate.exceptions import PortResolutionError, ValidationError
from ocp_translate.models.kubernetes import Ingress, IngressPath
from ocp_translate.translate.annotations import merge_annotations
from ocp_translate.translate.base import DEFAULT_NAME, BaseTranslator
from ocp_translate.translate.domain import rehost
from ocp_translate.translate.route import HTTPPROXY_API_VERSION, HTTPPROXY_KIND

logger = logging.getLogger(__name__)

UNSUPPORTED_HOSTS = "unsupported-hosts"


@dataclass
class IngressTranslation:
    http_proxy: dict[str, Any]

    def resources(self) -> list[dict[str, Any]]:
        return [self.http_proxy]


class IngressTranslator(BaseTranslator):
    """Translates an Ingress's first rule into an HTTPProxy."""

    source_kind = Ingress.KIND

    def __init__(
        self,
        name: str = DEFAULT_NAME,
        log: logging.Logger | logging.LoggerAdapter | None = None,
        facts=None,
        domain: str = "",
    ):
        super().__init__(name, log, facts)
        self.domain = domain

    def translate(self, ingress: Ingress) -> IngressTranslation:
        """
        Translate *ingress*.

        Raises:
            ValidationError: The ingress has no rules
            PortResolutionError: A backend uses a named service port
        """
        if not ingress.rules:
            raise ValidationError(
                f"Ingress {ingress.name} has no rules to translate",
                "Only host rules can be expressed as an HTTPProxy; default backends are not.",
            )

        rule = ingress.rules[0]
        routes = [self._build_route(path) for path in rule.paths]

        fqdn = rehost(rule.host, self.domain)
        if not self.domain:
            self.log.warning(
                f"[{self.name}] No new wildcard DNS domain specified, keeping the ingress host {fqdn}"
            )

        diagnostics = dict(self.recorder.record(ingress))
        if len(ingress.rules) > 1:
            hosts = ", ".join(r.host for r in ingress.rules[1:])
            self.log.info(f"[{self.name}] unsupported hosts: {hosts}")
            diagnostics[f"{self.name}/{UNSUPPORTED_HOSTS}"] = hosts

        virtual_host: dict[str, Any] = {"fqdn": fqdn}
        if ingress.tls and ingress.tls[0].secret_name:
            virtual_host["tls"] = {"secretName": ingress.tls[0].secret_name}

        http_proxy = {
            "apiVersion": HTTPPROXY_API_VERSION,
            "kind": HTTPPROXY_KIND,
            "metadata": self.build_metadata(
                ingress.metadata,
                annotations=merge_annotations(ingress.metadata.annotations, diagnostics),
            ),
            "spec": {"virtualhost": virtual_host, "routes": routes},
        }
        self.log.debug(f"[{self.name}] Translated HTTPProxy {http_proxy}")
        return IngressTranslation(http_proxy=http_proxy)

    def _build_route(self, path: IngressPath) -> dict[str, Any]:
        if path.service_port is None:
            raise ValidationError(f"Ingress backend {path.service_name} has no service port")
        # HTTPProxy services need a number; a port name cannot be looked up here
        if not isinstance(path.service_port, int) or not path.service_port:
            raise PortResolutionError(path.service_port, [])
        route: dict[str, Any] = {}
        if path.path:
            route["conditions"] = [{"prefix": path.path}]
        route["services"] = [{"name": path.service_name, "port": path.service_port}]
        return route
