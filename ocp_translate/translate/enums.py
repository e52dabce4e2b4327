"""
Remapping of closed source enumerations onto target enumerations.

OpenShift and Kubernetes use different, unrelated value sets for the same
concepts (deployment strategy, TLS termination, SCC/PSP strategies). Each
pair is described by an EnumTable, and every lookup returns the target value
together with how it was obtained, so callers can tell a real mapping from a
default or a pass-through of an unknown value.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple


class RemapOutcome(Enum):
    """
    How a remapped value was obtained.

    Outcomes:
        MAPPED: The source value is a key of the table
        DEFAULTED: The source value was empty and the table default applied
        UNMAPPED: The source value is not in the table
    """

    MAPPED = "mapped"
    DEFAULTED = "defaulted"
    UNMAPPED = "unmapped"

    def __str__(self) -> str:
        """Return the string value for display."""
        return self.value


class Remapped(NamedTuple):
    """Result of a remap: the target value (None means leave unset) and its outcome."""

    value: Any
    outcome: RemapOutcome

    @property
    def mapped(self) -> bool:
        return self.outcome is RemapOutcome.MAPPED


class TLSMode(Enum):
    """What the proxy does with TLS for a given Route termination."""

    PASSTHROUGH = "passthrough"
    TERMINATE = "terminate"

    def __str__(self) -> str:
        """Return the string value for display."""
        return self.value


def remap(
    value: str, table: Mapping[str, Any], default: Any = None, passthrough: bool = False
) -> Remapped:
    """
    Map *value* through *table*.

    Args:
        value: Source enumeration value ("" when the source field is unset)
        table: Closed mapping of source values to target values
        default: Target value used when *value* is empty
        passthrough: Keep unknown non-empty values unchanged instead of
            replacing them with *default*

    Returns:
        Remapped value and outcome

    Example:
        >>> remap("Custom", {"Rolling": "RollingUpdate", "Custom": "RollingUpdate"})
        Remapped(value='RollingUpdate', outcome=<RemapOutcome.MAPPED: 'mapped'>)
        >>> remap("", {"Rolling": "RollingUpdate"}).value is None
        True
    """
    if value in table:
        return Remapped(table[value], RemapOutcome.MAPPED)
    if not value:
        return Remapped(default, RemapOutcome.DEFAULTED)
    return Remapped(value if passthrough else default, RemapOutcome.UNMAPPED)


@dataclass(frozen=True)
class EnumTable:
    """A named remapping table with its defaulting policy."""

    name: str
    mapping: Mapping[str, Any] = field(default_factory=dict)
    default: Any = None
    passthrough: bool = False

    def remap(self, value: str) -> Remapped:
        return remap(value, self.mapping, self.default, self.passthrough)

    def with_overrides(self, overrides: Mapping[str, Any] | None) -> "EnumTable":
        """Return a copy of this table with *overrides* merged over its mapping."""
        if not overrides:
            return self
        return EnumTable(
            name=self.name,
            mapping={**self.mapping, **overrides},
            default=self.default,
            passthrough=self.passthrough,
        )


ROLLING_UPDATE = "RollingUpdate"

# Custom maps to a rolling update but never carries rolling parameters.
DEPLOYMENT_STRATEGY = EnumTable(
    name="DeploymentConfig.Spec.Strategy.Type",
    mapping={"Rolling": ROLLING_UPDATE, "Custom": ROLLING_UPDATE, "Recreate": "Recreate"},
    passthrough=True,
)

ROUTE_TERMINATION = EnumTable(
    name="Route.Spec.TLS.Termination",
    mapping={
        "passthrough": TLSMode.PASSTHROUGH,
        "edge": TLSMode.TERMINATE,
        "reencrypt": TLSMode.TERMINATE,
    },
)

# MustRunAsRange relaxes to RunAsAny; the uid range is still copied.
RUN_AS_USER_STRATEGY = EnumTable(
    name="SecurityContextConstraints.RunAsUser.Type",
    mapping={
        "MustRunAs": "MustRunAs",
        "MustRunAsNonRoot": "MustRunAsNonRoot",
        "RunAsAny": "RunAsAny",
        "MustRunAsRange": "RunAsAny",
    },
    default="RunAsAny",
    passthrough=True,
)

SELINUX_STRATEGY = EnumTable(
    name="SecurityContextConstraints.SELinuxContext.Type",
    mapping={"MustRunAs": "MustRunAs", "RunAsAny": "RunAsAny"},
    passthrough=True,
)

SUPPLEMENTAL_GROUPS_STRATEGY = EnumTable(
    name="SecurityContextConstraints.SupplementalGroups.Type",
    mapping={"MustRunAs": "MustRunAs", "RunAsAny": "RunAsAny"},
    passthrough=True,
)

FS_GROUP_STRATEGY = EnumTable(
    name="SecurityContextConstraints.FSGroup.Type",
    mapping={"MustRunAs": "MustRunAs", "RunAsAny": "RunAsAny"},
    passthrough=True,
)
