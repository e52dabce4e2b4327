"""
OpenShift source resources: Route, SecurityContextConstraints, DeploymentConfig.

Field names follow the OpenShift API JSON. Optional fields stay None when the
manifest omits them so translators can tell "absent" from "zero".
"""

import copy
from dataclasses import dataclass, field
from typing import Any

from ocp_translate.exceptions import SourceFormatError
from ocp_translate.models.kubernetes import (
    ObjectMeta,
    check_kind,
    get_bool,
    get_int,
    get_int_or_str,
    get_list,
    get_mapping,
    get_str,
    get_str_list,
)

# Route


@dataclass(frozen=True)
class RouteTargetReference:
    """Route.spec.to or one of Route.spec.alternateBackends."""

    name: str
    kind: str = "Service"
    weight: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RouteTargetReference":
        return cls(
            name=get_str(data, "name", Route.KIND),
            # The API server defaults an omitted kind to Service
            kind=get_str(data, "kind", Route.KIND) or "Service",
            weight=get_int(data, "weight", Route.KIND),
        )


@dataclass(frozen=True)
class RoutePort:
    """Route.spec.port; target_port is a port name (str) or a number (int)."""

    target_port: int | str


@dataclass(frozen=True)
class TLSConfig:
    termination: str = ""
    certificate: str = ""
    key: str = ""
    ca_certificate: str = ""
    destination_ca_certificate: str = ""
    insecure_edge_termination_policy: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TLSConfig":
        kind = Route.KIND
        return cls(
            termination=get_str(data, "termination", kind),
            certificate=get_str(data, "certificate", kind),
            key=get_str(data, "key", kind),
            ca_certificate=get_str(data, "caCertificate", kind),
            destination_ca_certificate=get_str(data, "destinationCACertificate", kind),
            insecure_edge_termination_policy=get_str(data, "insecureEdgeTerminationPolicy", kind),
        )


@dataclass(frozen=True)
class RouteSpec:
    to: RouteTargetReference
    host: str = ""
    path: str = ""
    port: RoutePort | None = None
    tls: TLSConfig | None = None
    alternate_backends: tuple[RouteTargetReference, ...] | None = None
    wildcard_policy: str = ""


@dataclass(frozen=True)
class Route:
    """An OpenShift Route (route.openshift.io/v1)."""

    metadata: ObjectMeta
    spec: RouteSpec

    KIND = "Route"

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Route":
        check_kind(data, cls.KIND)
        spec = get_mapping(data, "spec", cls.KIND)

        to = get_mapping(spec, "to", cls.KIND)
        if not get_str(to, "name", cls.KIND):
            raise SourceFormatError(cls.KIND, "spec.to.name is required")

        port = None
        if spec.get("port") is not None:
            target_port = get_int_or_str(get_mapping(spec, "port", cls.KIND), "targetPort", cls.KIND)
            if target_port is None:
                raise SourceFormatError(cls.KIND, "spec.port.targetPort is required")
            port = RoutePort(target_port=target_port)

        tls = None
        if spec.get("tls") is not None:
            tls = TLSConfig.from_dict(get_mapping(spec, "tls", cls.KIND))

        alternate_backends = None
        backends = get_list(spec, "alternateBackends", cls.KIND)
        if backends is not None:
            alternate_backends = tuple(
                RouteTargetReference.from_dict(b) for b in backends if isinstance(b, dict)
            )

        return cls(
            metadata=ObjectMeta.from_dict(data, cls.KIND),
            spec=RouteSpec(
                to=RouteTargetReference.from_dict(to),
                host=get_str(spec, "host", cls.KIND),
                path=get_str(spec, "path", cls.KIND),
                port=port,
                tls=tls,
                alternate_backends=alternate_backends,
                wildcard_policy=get_str(spec, "wildcardPolicy", cls.KIND),
            ),
        )


# SecurityContextConstraints


@dataclass(frozen=True)
class IDRange:
    """A closed interval [min, max] of user or group IDs."""

    min: int
    max: int

    def to_dict(self) -> dict[str, int]:
        return {"min": self.min, "max": self.max}


@dataclass(frozen=True)
class SELinuxOptions:
    user: str = ""
    role: str = ""
    type: str = ""
    level: str = ""

    def to_dict(self) -> dict[str, str]:
        data = {"user": self.user, "role": self.role, "type": self.type, "level": self.level}
        return {k: v for k, v in data.items() if v}


@dataclass(frozen=True)
class SELinuxContextStrategy:
    type: str = ""
    options: SELinuxOptions | None = None


@dataclass(frozen=True)
class RunAsUserStrategy:
    type: str = ""
    uid: int | None = None
    uid_range_min: int | None = None
    uid_range_max: int | None = None


@dataclass(frozen=True)
class GroupStrategy:
    """Strategy shared by supplementalGroups and fsGroup."""

    type: str = ""
    ranges: tuple[IDRange, ...] | None = None


def _group_strategy(data: dict[str, Any], key: str) -> GroupStrategy:
    kind = SecurityContextConstraints.KIND
    strategy = get_mapping(data, key, kind)
    ranges = get_list(strategy, "ranges", kind)
    return GroupStrategy(
        type=get_str(strategy, "type", kind),
        ranges=None if ranges is None else tuple(_id_range(r, key) for r in ranges),
    )


def _id_range(data: Any, key: str) -> IDRange:
    kind = SecurityContextConstraints.KIND
    if not isinstance(data, dict):
        raise SourceFormatError(kind, f"{key}.ranges entries must be mappings")
    low = get_int(data, "min", kind)
    high = get_int(data, "max", kind)
    if low is None or high is None:
        raise SourceFormatError(kind, f"{key}.ranges entries need both min and max")
    return IDRange(min=low, max=high)


@dataclass(frozen=True)
class SecurityContextConstraints:
    """An OpenShift SecurityContextConstraints (security.openshift.io/v1).

    SCCs carry their settings at the top level of the document, there is no
    ``spec`` block.
    """

    metadata: ObjectMeta
    priority: int | None = None
    allow_privileged_container: bool = False
    default_add_capabilities: tuple[str, ...] | None = None
    required_drop_capabilities: tuple[str, ...] | None = None
    allowed_capabilities: tuple[str, ...] | None = None
    allow_host_dir_volume_plugin: bool = False
    volumes: tuple[str, ...] | None = None
    allowed_flex_volumes: tuple[str, ...] | None = None
    allow_host_network: bool = False
    allow_host_ports: bool = False
    allow_host_pid: bool = False
    allow_host_ipc: bool = False
    default_allow_privilege_escalation: bool | None = None
    allow_privilege_escalation: bool | None = None
    se_linux_context: SELinuxContextStrategy = field(default_factory=SELinuxContextStrategy)
    run_as_user: RunAsUserStrategy = field(default_factory=RunAsUserStrategy)
    supplemental_groups: GroupStrategy = field(default_factory=GroupStrategy)
    fs_group: GroupStrategy = field(default_factory=GroupStrategy)
    read_only_root_filesystem: bool = False
    users: tuple[str, ...] = ()
    groups: tuple[str, ...] = ()
    seccomp_profiles: tuple[str, ...] | None = None
    allowed_unsafe_sysctls: tuple[str, ...] | None = None
    forbidden_sysctls: tuple[str, ...] | None = None

    KIND = "SecurityContextConstraints"

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SecurityContextConstraints":
        kind = cls.KIND
        check_kind(data, kind)

        se_linux = get_mapping(data, "seLinuxContext", kind)
        options = None
        if se_linux.get("seLinuxOptions") is not None:
            raw = get_mapping(se_linux, "seLinuxOptions", kind)
            options = SELinuxOptions(
                user=get_str(raw, "user", kind),
                role=get_str(raw, "role", kind),
                type=get_str(raw, "type", kind),
                level=get_str(raw, "level", kind),
            )

        run_as_user = get_mapping(data, "runAsUser", kind)

        flex = get_list(data, "allowedFlexVolumes", kind)
        flex_drivers = None
        if flex is not None:
            flex_drivers = tuple(
                get_str(entry, "driver", kind) for entry in flex if isinstance(entry, dict)
            )

        return cls(
            metadata=ObjectMeta.from_dict(data, kind),
            priority=get_int(data, "priority", kind),
            allow_privileged_container=bool(get_bool(data, "allowPrivilegedContainer", kind)),
            default_add_capabilities=get_str_list(data, "defaultAddCapabilities", kind),
            required_drop_capabilities=get_str_list(data, "requiredDropCapabilities", kind),
            allowed_capabilities=get_str_list(data, "allowedCapabilities", kind),
            allow_host_dir_volume_plugin=bool(get_bool(data, "allowHostDirVolumePlugin", kind)),
            volumes=get_str_list(data, "volumes", kind),
            allowed_flex_volumes=flex_drivers,
            allow_host_network=bool(get_bool(data, "allowHostNetwork", kind)),
            allow_host_ports=bool(get_bool(data, "allowHostPorts", kind)),
            allow_host_pid=bool(get_bool(data, "allowHostPID", kind)),
            allow_host_ipc=bool(get_bool(data, "allowHostIPC", kind)),
            default_allow_privilege_escalation=get_bool(
                data, "defaultAllowPrivilegeEscalation", kind
            ),
            allow_privilege_escalation=get_bool(data, "allowPrivilegeEscalation", kind),
            se_linux_context=SELinuxContextStrategy(
                type=get_str(se_linux, "type", kind), options=options
            ),
            run_as_user=RunAsUserStrategy(
                type=get_str(run_as_user, "type", kind),
                uid=get_int(run_as_user, "uid", kind),
                uid_range_min=get_int(run_as_user, "uidRangeMin", kind),
                uid_range_max=get_int(run_as_user, "uidRangeMax", kind),
            ),
            supplemental_groups=_group_strategy(data, "supplementalGroups"),
            fs_group=_group_strategy(data, "fsGroup"),
            read_only_root_filesystem=bool(get_bool(data, "readOnlyRootFilesystem", kind)),
            users=get_str_list(data, "users", kind) or (),
            groups=get_str_list(data, "groups", kind) or (),
            seccomp_profiles=get_str_list(data, "seccompProfiles", kind),
            allowed_unsafe_sysctls=get_str_list(data, "allowedUnsafeSysctls", kind),
            forbidden_sysctls=get_str_list(data, "forbiddenSysctls", kind),
        )


# DeploymentConfig


@dataclass(frozen=True)
class DeploymentStrategy:
    """DeploymentConfig.spec.strategy; rolling_params keeps the raw mapping."""

    type: str = ""
    rolling_params: dict[str, Any] | None = None
    active_deadline_seconds: int | None = None


@dataclass(frozen=True)
class DeploymentConfig:
    """An OpenShift DeploymentConfig (apps.openshift.io/v1)."""

    metadata: ObjectMeta
    replicas: int | None = None
    selector: dict[str, str] | None = None
    template: dict[str, Any] | None = None
    strategy: DeploymentStrategy = field(default_factory=DeploymentStrategy)
    triggers: tuple[dict[str, Any], ...] | None = None
    test: bool = False
    paused: bool = False
    revision_history_limit: int | None = None
    min_ready_seconds: int | None = None

    KIND = "DeploymentConfig"

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DeploymentConfig":
        kind = cls.KIND
        check_kind(data, kind)
        spec = get_mapping(data, "spec", kind)
        strategy = get_mapping(spec, "strategy", kind)

        rolling_params = None
        if strategy.get("rollingParams") is not None:
            rolling_params = copy.deepcopy(get_mapping(strategy, "rollingParams", kind))
            for key in ("maxSurge", "maxUnavailable"):
                get_int_or_str(rolling_params, key, kind)

        selector = None
        if spec.get("selector") is not None:
            selector = dict(get_mapping(spec, "selector", kind))

        template = None
        if spec.get("template") is not None:
            template = copy.deepcopy(get_mapping(spec, "template", kind))

        triggers = get_list(spec, "triggers", kind)

        return cls(
            metadata=ObjectMeta.from_dict(data, kind),
            replicas=get_int(spec, "replicas", kind),
            selector=selector,
            template=template,
            strategy=DeploymentStrategy(
                type=get_str(strategy, "type", kind),
                rolling_params=rolling_params,
                active_deadline_seconds=get_int(strategy, "activeDeadlineSeconds", kind),
            ),
            triggers=None if triggers is None else tuple(copy.deepcopy(triggers)),
            test=bool(get_bool(spec, "test", kind)),
            paused=bool(get_bool(spec, "paused", kind)),
            revision_history_limit=get_int(spec, "revisionHistoryLimit", kind),
            min_ready_seconds=get_int(spec, "minReadySeconds", kind),
        )
