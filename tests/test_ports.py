"""
Tests for Route port resolution.
"""

import pytest

from ocp_translate.exceptions import PortResolutionError
from ocp_translate.models.kubernetes import Service, ServicePort
from ocp_translate.models.openshift import RoutePort
from ocp_translate.translate.ports import resolve_port


class TestResolvePort:
    """Tests for resolve_port against the three-port fixture service."""

    def test_no_reference_uses_first_port(self, service):
        assert resolve_port(None, service.ports) == 8080

    def test_named_reference(self, service):
        assert resolve_port(RoutePort("https"), service.ports) == 8443

    def test_numeric_reference_matches_target_port(self, service):
        """Test that numbers are matched against targetPort, not port."""
        assert resolve_port(RoutePort(9100), service.ports) == 9090

    def test_numeric_reference_does_not_match_port(self, service):
        with pytest.raises(PortResolutionError):
            resolve_port(RoutePort(9090), service.ports)

    def test_unknown_name(self, service):
        with pytest.raises(PortResolutionError) as exc_info:
            resolve_port(RoutePort("grpc"), service.ports)

        error = exc_info.value
        assert error.requested == "grpc"
        assert [c["name"] for c in error.candidates] == ["web", "https", "metrics"]
        assert "'grpc'" in error.message

    def test_first_match_wins(self):
        ports = [
            ServicePort(port=80, name="a", target_port=8080),
            ServicePort(port=81, name="b", target_port=8080),
        ]
        assert resolve_port(RoutePort(8080), ports) == 80

    def test_empty_name_never_matches(self):
        ports = [ServicePort(port=80)]
        with pytest.raises(PortResolutionError):
            resolve_port(RoutePort(""), ports)

    def test_no_ports_and_no_reference(self):
        with pytest.raises(PortResolutionError) as exc_info:
            resolve_port(None, [])

        assert exc_info.value.requested is None
        assert "no ports" in exc_info.value.message

    def test_omitted_target_port_matches_port(self):
        service = Service.from_dict(
            {"metadata": {"name": "s"}, "spec": {"ports": [{"name": "http", "port": 8080}]}}
        )
        assert resolve_port(RoutePort(8080), service.ports) == 8080

    def test_zero_port_is_not_a_result(self):
        with pytest.raises(PortResolutionError):
            resolve_port(RoutePort("web"), [ServicePort(port=0, name="web")])
