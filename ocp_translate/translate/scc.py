"""
Translate SecurityContextConstraints into PodSecurityPolicy and RBAC.

An SCC both defines a policy and says who may use it. The policy part maps to
a PodSecurityPolicy; the "who" part becomes a ClusterRole allowing ``use`` of
that policy and a ClusterRoleBinding to the SCC's users and groups.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ocp_translate.models.openshift import GroupStrategy, SecurityContextConstraints
from ocp_translate.models.rbac import RBAC_API_GROUP
from ocp_translate.translate.annotations import FieldFact
from ocp_translate.translate.base import DEFAULT_NAME, BaseTranslator
from ocp_translate.translate.enums import (
    FS_GROUP_STRATEGY,
    RUN_AS_USER_STRATEGY,
    SELINUX_STRATEGY,
    SUPPLEMENTAL_GROUPS_STRATEGY,
    EnumTable,
    RemapOutcome,
)
from ocp_translate.translate.subjects import (
    DEFAULT_EXCLUSION_PATTERN,
    DEFAULT_SERVICE_ACCOUNT_PATTERN,
    SERVICE_ACCOUNT_SEGMENTS,
    SubjectClassifier,
)

logger = logging.getLogger(__name__)

PSP_API_VERSION = "policy/v1beta1"
PSP_KIND = "PodSecurityPolicy"
RBAC_API_VERSION = f"{RBAC_API_GROUP}/v1"
DEFAULT_ROLE_PREFIX = "vmware-psp:"

SCC_FIELD_FACTS = (
    FieldFact("Priority", lambda scc: scc.priority is not None),
    FieldFact("RunAsUser.UID", lambda scc: scc.run_as_user.uid is not None),
    FieldFact("SeccompProfiles", lambda scc: scc.seccomp_profiles is not None),
    FieldFact("AllowHostDirVolumePlugin", lambda scc: scc.allow_host_dir_volume_plugin),
    FieldFact("AllowHostPorts", lambda scc: scc.allow_host_ports),
)


@dataclass
class SecurityPolicyTranslation:
    """Output of an SCC translation; the binding is None when nobody is bound."""

    pod_security_policy: dict[str, Any]
    cluster_role: dict[str, Any]
    cluster_role_binding: dict[str, Any] | None = None

    def resources(self) -> list[dict[str, Any]]:
        resources = [self.pod_security_policy, self.cluster_role]
        if self.cluster_role_binding is not None:
            resources.append(self.cluster_role_binding)
        return resources


class SecurityPolicyTranslator(BaseTranslator):
    """
    Translates SecurityContextConstraints into PSP, ClusterRole and ClusterRoleBinding.

    Args:
        name: Caller name for annotation keys and log messages
        log: Diagnostic sink
        facts: Replacement unsupported-field table
        role_prefix: Prefix of the generated ClusterRole/ClusterRoleBinding names
        user_exclusion_pattern: Regex of users and groups never bound
        service_account_pattern: Regex identifying service-account users
        service_account_segments: Number of ':'-separated segments in a service-account
            identity; the last two are the namespace and the name
        run_as_user_overrides: Entries merged over the run-as-user strategy table
    """

    source_kind = SecurityContextConstraints.KIND

    def __init__(
        self,
        name: str = DEFAULT_NAME,
        log: logging.Logger | logging.LoggerAdapter | None = None,
        facts=None,
        role_prefix: str = DEFAULT_ROLE_PREFIX,
        user_exclusion_pattern: str = DEFAULT_EXCLUSION_PATTERN,
        service_account_pattern: str = DEFAULT_SERVICE_ACCOUNT_PATTERN,
        run_as_user_overrides: Mapping[str, str] | None = None,
        service_account_segments: int = SERVICE_ACCOUNT_SEGMENTS,
    ):
        super().__init__(name, log, facts)
        self.role_prefix = role_prefix
        self.classifier = SubjectClassifier(
            user_exclusion_pattern,
            service_account_pattern,
            log=self.log,
            name=name,
            service_account_segments=service_account_segments,
        )
        self.run_as_user_table = RUN_AS_USER_STRATEGY.with_overrides(run_as_user_overrides)
        self.selinux_table = SELINUX_STRATEGY
        self.supplemental_groups_table = SUPPLEMENTAL_GROUPS_STRATEGY
        self.fs_group_table = FS_GROUP_STRATEGY

    @classmethod
    def default_facts(cls) -> tuple[FieldFact, ...]:
        return SCC_FIELD_FACTS

    def role_name(self, scc: SecurityContextConstraints) -> str:
        return f"{self.role_prefix}{scc.name}"

    def translate(self, scc: SecurityContextConstraints) -> SecurityPolicyTranslation:
        """
        Translate *scc* into its policy and RBAC resources.

        Args:
            scc: Source SecurityContextConstraints

        Returns:
            SecurityPolicyTranslation; ``cluster_role_binding`` is None when no
            user or group survives classification
        """
        self.log.debug(f"[{self.name}] Translating SCC {scc.name}")
        return SecurityPolicyTranslation(
            pod_security_policy=self.build_pod_security_policy(scc),
            cluster_role=self.build_cluster_role(scc),
            cluster_role_binding=self.build_cluster_role_binding(scc),
        )

    def build_pod_security_policy(self, scc: SecurityContextConstraints) -> dict[str, Any]:
        spec: dict[str, Any] = {"privileged": scc.allow_privileged_container}

        for key, value in (
            ("defaultAddCapabilities", scc.default_add_capabilities),
            ("requiredDropCapabilities", scc.required_drop_capabilities),
            ("allowedCapabilities", scc.allowed_capabilities),
            ("volumes", scc.volumes),
        ):
            if value is not None:
                spec[key] = list(value)

        if scc.allowed_flex_volumes is not None:
            spec["allowedFlexVolumes"] = [{"driver": d} for d in scc.allowed_flex_volumes]

        spec["hostNetwork"] = scc.allow_host_network
        spec["hostPID"] = scc.allow_host_pid
        spec["hostIPC"] = scc.allow_host_ipc

        if scc.default_allow_privilege_escalation is not None:
            spec["defaultAllowPrivilegeEscalation"] = scc.default_allow_privilege_escalation
        if scc.allow_privilege_escalation is not None:
            spec["allowPrivilegeEscalation"] = scc.allow_privilege_escalation

        se_linux: dict[str, Any] = {}
        rule = self._remap(self.selinux_table, scc.se_linux_context.type)
        if rule is not None:
            se_linux["rule"] = rule
        if scc.se_linux_context.options is not None:
            se_linux["seLinuxOptions"] = scc.se_linux_context.options.to_dict()
        spec["seLinux"] = se_linux

        run_as_user: dict[str, Any] = {}
        rule = self._remap(self.run_as_user_table, scc.run_as_user.type)
        if rule is not None:
            run_as_user["rule"] = rule
        # A range needs both bounds; a single bound yields no range at all
        if scc.run_as_user.uid_range_min is not None and scc.run_as_user.uid_range_max is not None:
            run_as_user["ranges"] = [
                {"min": scc.run_as_user.uid_range_min, "max": scc.run_as_user.uid_range_max}
            ]
        spec["runAsUser"] = run_as_user

        spec["supplementalGroups"] = self._group_strategy(
            self.supplemental_groups_table, scc.supplemental_groups
        )
        spec["fsGroup"] = self._group_strategy(self.fs_group_table, scc.fs_group)
        spec["readOnlyRootFilesystem"] = scc.read_only_root_filesystem

        if scc.allowed_unsafe_sysctls is not None:
            spec["allowedUnsafeSysctls"] = list(scc.allowed_unsafe_sysctls)
        if scc.forbidden_sysctls is not None:
            spec["forbiddenSysctls"] = list(scc.forbidden_sysctls)

        psp = {
            "apiVersion": PSP_API_VERSION,
            "kind": PSP_KIND,
            "metadata": self.build_metadata(scc.metadata, annotations=self.recorder.annotate(scc)),
            "spec": spec,
        }
        self.log.debug(f"[{self.name}] Translated PodSecurityPolicy {psp}")
        return psp

    def build_cluster_role(self, scc: SecurityContextConstraints) -> dict[str, Any]:
        """Build the ClusterRole granting ``use`` of the translated policy."""
        role = {
            "apiVersion": RBAC_API_VERSION,
            "kind": "ClusterRole",
            "metadata": {"name": self.role_name(scc)},
            "rules": [
                {
                    "apiGroups": ["policy"],
                    "resources": ["podsecuritypolicies"],
                    "resourceNames": [scc.name],
                    "verbs": ["use"],
                }
            ],
        }
        self.log.debug(f"[{self.name}] Translated ClusterRole rules {role['rules']}")
        return role

    def build_cluster_role_binding(self, scc: SecurityContextConstraints) -> dict[str, Any] | None:
        """Bind the ClusterRole to the SCC's users and groups, or return None if none remain."""
        subjects = self.classifier.classify(scc.users, scc.groups)
        if not subjects:
            self.log.debug(
                f"[{self.name}] No ClusterRoleBinding for SCC {scc.name}: no users or groups to bind"
            )
            return None

        binding = {
            "apiVersion": RBAC_API_VERSION,
            "kind": "ClusterRoleBinding",
            "metadata": {"name": self.role_name(scc)},
            "roleRef": {
                "apiGroup": RBAC_API_GROUP,
                "kind": "ClusterRole",
                "name": self.role_name(scc),
            },
            "subjects": [subject.to_dict() for subject in subjects],
        }
        self.log.debug(f"[{self.name}] Translated ClusterRoleBinding {binding}")
        return binding

    def _group_strategy(self, table: EnumTable, strategy: GroupStrategy) -> dict[str, Any]:
        result: dict[str, Any] = {}
        rule = self._remap(table, strategy.type)
        if rule is not None:
            result["rule"] = rule
        if strategy.ranges is not None:
            result["ranges"] = [r.to_dict() for r in strategy.ranges]
        return result

    def _remap(self, table: EnumTable, value: str) -> str | None:
        remapped = table.remap(value)
        if remapped.outcome is RemapOutcome.UNMAPPED:
            self.log.warning(
                f"[{self.name}] {table.name} {value!r} has no known counterpart, copied as is"
            )
        return remapped.value
