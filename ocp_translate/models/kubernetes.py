"""
Kubernetes source resources consumed by the translators.

Only the fields the translators read are modelled. Every model is built from
the decoded manifest dict with ``from_dict`` and is immutable afterwards.
Field helpers raise SourceFormatError so a malformed document is rejected
before any translation starts.
"""

from dataclasses import dataclass, field
from typing import Any

from ocp_translate.exceptions import SourceFormatError

_MISSING = object()


def get_mapping(data: dict[str, Any], key: str, kind: str) -> dict[str, Any]:
    """Return ``data[key]`` as a dict, treating absent or null as empty."""
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise SourceFormatError(kind, f"'{key}' must be a mapping, got {type(value).__name__}")
    return value


def get_list(data: dict[str, Any], key: str, kind: str) -> list[Any] | None:
    """Return ``data[key]`` as a list, or None when absent."""
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise SourceFormatError(kind, f"'{key}' must be a list, got {type(value).__name__}")
    return value


def get_str(data: dict[str, Any], key: str, kind: str, default: str = "") -> str:
    value = data.get(key, _MISSING)
    if value is _MISSING or value is None:
        return default
    if not isinstance(value, str):
        raise SourceFormatError(kind, f"'{key}' must be a string, got {type(value).__name__}")
    return value


def get_int(data: dict[str, Any], key: str, kind: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    # bool is an int subclass but never a valid count or port
    if isinstance(value, bool) or not isinstance(value, int):
        raise SourceFormatError(kind, f"'{key}' must be an integer, got {type(value).__name__}")
    return value


def get_bool(data: dict[str, Any], key: str, kind: str) -> bool | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise SourceFormatError(kind, f"'{key}' must be a boolean, got {type(value).__name__}")
    return value


def get_int_or_str(data: dict[str, Any], key: str, kind: str) -> int | str | None:
    """Read a Kubernetes IntOrString field."""
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise SourceFormatError(
            kind, f"'{key}' must be an integer or a string, got {type(value).__name__}"
        )
    return value


def get_str_list(data: dict[str, Any], key: str, kind: str) -> tuple[str, ...] | None:
    items = get_list(data, key, kind)
    if items is None:
        return None
    for item in items:
        if not isinstance(item, str):
            raise SourceFormatError(kind, f"'{key}' must contain only strings")
    return tuple(items)


def check_kind(data: dict[str, Any], kind: str) -> None:
    """Reject documents whose declared kind differs from the expected one."""
    if not isinstance(data, dict):
        raise SourceFormatError(kind, f"expected a mapping, got {type(data).__name__}")
    declared = data.get("kind")
    if declared is not None and declared != kind:
        raise SourceFormatError(kind, f"document kind is '{declared}'")


@dataclass(frozen=True)
class ObjectMeta:
    """Identity and metadata of a source resource."""

    name: str
    namespace: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any], kind: str) -> "ObjectMeta":
        meta = get_mapping(data, "metadata", kind)
        name = get_str(meta, "name", kind)
        if not name:
            raise SourceFormatError(kind, "metadata.name is required")
        return cls(
            name=name,
            namespace=get_str(meta, "namespace", kind),
            labels=dict(get_mapping(meta, "labels", kind)),
            annotations=dict(get_mapping(meta, "annotations", kind)),
        )


@dataclass(frozen=True)
class ServicePort:
    """One entry of ``Service.spec.ports``."""

    port: int
    name: str = ""
    target_port: int | str | None = None
    protocol: str = "TCP"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"port": self.port}
        if self.name:
            data["name"] = self.name
        if self.target_port is not None:
            data["targetPort"] = self.target_port
        return data


@dataclass(frozen=True)
class Service:
    """A Service, used to resolve the port a Route points at."""

    metadata: ObjectMeta
    ports: tuple[ServicePort, ...] = ()

    KIND = "Service"

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Service":
        check_kind(data, cls.KIND)
        spec = get_mapping(data, "spec", cls.KIND)
        ports = []
        for entry in get_list(spec, "ports", cls.KIND) or []:
            if not isinstance(entry, dict):
                raise SourceFormatError(cls.KIND, "spec.ports entries must be mappings")
            port = get_int(entry, "port", cls.KIND)
            if port is None:
                raise SourceFormatError(cls.KIND, "spec.ports[].port is required")
            target_port = get_int_or_str(entry, "targetPort", cls.KIND)
            # The API server defaults an omitted targetPort to port
            if target_port is None:
                target_port = port
            ports.append(
                ServicePort(
                    port=port,
                    name=get_str(entry, "name", cls.KIND),
                    target_port=target_port,
                    protocol=get_str(entry, "protocol", cls.KIND, default="TCP"),
                )
            )
        return cls(metadata=ObjectMeta.from_dict(data, cls.KIND), ports=tuple(ports))


@dataclass(frozen=True)
class IngressPath:
    """A path of an Ingress rule and the backend it forwards to."""

    path: str
    service_name: str
    service_port: int | str | None


@dataclass(frozen=True)
class IngressRule:
    host: str
    paths: tuple[IngressPath, ...] = ()


@dataclass(frozen=True)
class IngressTLS:
    hosts: tuple[str, ...] = ()
    secret_name: str = ""


@dataclass(frozen=True)
class Ingress:
    """An Ingress (networking.k8s.io v1beta1 or v1 backend layout)."""

    metadata: ObjectMeta
    rules: tuple[IngressRule, ...] = ()
    tls: tuple[IngressTLS, ...] = ()

    KIND = "Ingress"

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Ingress":
        check_kind(data, cls.KIND)
        spec = get_mapping(data, "spec", cls.KIND)

        rules = []
        for rule in get_list(spec, "rules", cls.KIND) or []:
            if not isinstance(rule, dict):
                raise SourceFormatError(cls.KIND, "spec.rules entries must be mappings")
            http = get_mapping(rule, "http", cls.KIND)
            paths = tuple(
                _ingress_path(entry, cls.KIND) for entry in get_list(http, "paths", cls.KIND) or []
            )
            rules.append(IngressRule(host=get_str(rule, "host", cls.KIND), paths=paths))

        tls = []
        for entry in get_list(spec, "tls", cls.KIND) or []:
            if not isinstance(entry, dict):
                raise SourceFormatError(cls.KIND, "spec.tls entries must be mappings")
            tls.append(
                IngressTLS(
                    hosts=get_str_list(entry, "hosts", cls.KIND) or (),
                    secret_name=get_str(entry, "secretName", cls.KIND),
                )
            )

        return cls(
            metadata=ObjectMeta.from_dict(data, cls.KIND), rules=tuple(rules), tls=tuple(tls)
        )


def _ingress_path(entry: Any, kind: str) -> IngressPath:
    """Parse one HTTP path, accepting both the v1beta1 and v1 backend formats."""
    if not isinstance(entry, dict):
        raise SourceFormatError(kind, "spec.rules[].http.paths entries must be mappings")
    backend = get_mapping(entry, "backend", kind)
    if "service" in backend:
        service = get_mapping(backend, "service", kind)
        port = get_mapping(service, "port", kind)
        service_port = get_int(port, "number", kind)
        if service_port is None:
            service_port = get_str(port, "name", kind) or None
        service_name = get_str(service, "name", kind)
    else:
        service_name = get_str(backend, "serviceName", kind)
        service_port = get_int_or_str(backend, "servicePort", kind)
    return IngressPath(
        path=get_str(entry, "path", kind),
        service_name=service_name,
        service_port=service_port,
    )
