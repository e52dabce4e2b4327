"""
RBAC subjects produced by classifying SCC users and groups.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

RBAC_API_GROUP = "rbac.authorization.k8s.io"


class SubjectKind(Enum):
    """Kinds of identity an access binding can name."""

    SERVICE_ACCOUNT = "ServiceAccount"
    USER = "User"
    GROUP = "Group"

    def __str__(self) -> str:
        """Return the string value for display."""
        return self.value


@dataclass(frozen=True)
class Subject:
    """
    A classified identity reference.

    Service accounts carry a namespace and no API group; users and groups
    carry the RBAC API group and no namespace.

    Example:
        >>> Subject.service_account("default", "builder").to_dict()
        {'kind': 'ServiceAccount', 'name': 'builder', 'namespace': 'default'}
    """

    kind: SubjectKind
    name: str
    namespace: str = ""
    api_group: str = ""

    @classmethod
    def service_account(cls, namespace: str, name: str) -> "Subject":
        return cls(kind=SubjectKind.SERVICE_ACCOUNT, name=name, namespace=namespace)

    @classmethod
    def user(cls, name: str) -> "Subject":
        return cls(kind=SubjectKind.USER, name=name, api_group=RBAC_API_GROUP)

    @classmethod
    def group(cls, name: str) -> "Subject":
        return cls(kind=SubjectKind.GROUP, name=name, api_group=RBAC_API_GROUP)

    def to_dict(self) -> dict[str, Any]:
        """Render as an entry of ``ClusterRoleBinding.subjects``."""
        data: dict[str, Any] = {"kind": self.kind.value, "name": self.name}
        if self.api_group:
            data["apiGroup"] = self.api_group
        if self.namespace:
            data["namespace"] = self.namespace
        return data
