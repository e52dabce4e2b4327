"""
Translation rule engine.

Translators turn typed source resources into Kubernetes-shaped manifest dicts.
They are pure: same input, same output, and a failure raises before any output
exists. Unsupported source fields are recorded as annotations instead of
failing the translation.

Modules:
- annotations: unsupported-field diagnostics
- enums: remapping tables between source and target enumerations
- ports: Route port reference resolution against a Service
- subjects: SCC user/group classification into RBAC subjects
- secrets: TLS Secret built from inline route certificates
- domain: host rehosting under a new wildcard domain
- route, scc, deploymentconfig, ingress: the translators
"""

from ocp_translate.translate.deploymentconfig import (
    DeploymentConfigTranslator,
    DeploymentTranslation,
)
from ocp_translate.translate.ingress import IngressTranslation, IngressTranslator
from ocp_translate.translate.route import RouteTranslation, RouteTranslator
from ocp_translate.translate.scc import SecurityPolicyTranslation, SecurityPolicyTranslator

__all__ = [
    "DeploymentConfigTranslator",
    "DeploymentTranslation",
    "IngressTranslation",
    "IngressTranslator",
    "RouteTranslation",
    "RouteTranslator",
    "SecurityPolicyTranslation",
    "SecurityPolicyTranslator",
]
