"""
ocp-translate: OpenShift resource translation toolkit.

Translates OpenShift-specific resources into vanilla Kubernetes resources and
Contour HTTPProxy objects, flagging every source field that cannot be carried
over with an ``unsupported`` annotation on the generated resource.

Main features:
- Route + Service to HTTPProxy, with TLS Secret materialization
- SecurityContextConstraints to PodSecurityPolicy, ClusterRole and ClusterRoleBinding
- DeploymentConfig to Deployment
- Ingress to HTTPProxy
- Domain rehosting for route and ingress hosts
"""

__version__ = "0.1.0"
