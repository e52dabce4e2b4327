"""
Data models for source resources.

This package contains typed, immutable views of the manifests the translators
read, plus the RBAC subject record the SCC translator produces.

Modules:
- kubernetes: Service, Ingress and shared ObjectMeta
- openshift: Route, SecurityContextConstraints, DeploymentConfig
- rbac: Subject and SubjectKind
"""
