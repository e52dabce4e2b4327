"""
Pytest configuration and shared fixtures.
"""

import json
import logging
from pathlib import Path

import pytest

from ocp_translate.loaders import load_resource
from ocp_translate.models.kubernetes import Ingress, Service
from ocp_translate.models.openshift import DeploymentConfig, Route, SecurityContextConstraints


@pytest.fixture
def fixtures_dir():
    """Return path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def load_fixture(fixtures_dir):
    """Return a function reading a JSON fixture as a dict, for tests that tweak documents."""

    def _load(name):
        return json.loads((fixtures_dir / name).read_text())

    return _load


@pytest.fixture
def route_with_tls(fixtures_dir):
    """Edge-terminated route with inline certificate, port referenced by name."""
    return load_resource(fixtures_dir / "route_with_tls.json", Route.KIND)


@pytest.fixture
def route_without_tls(fixtures_dir):
    """Plain HTTP route, port referenced by number."""
    return load_resource(fixtures_dir / "route_without_tls.json", Route.KIND)


@pytest.fixture
def service(fixtures_dir):
    """Service with three ports: web 8080->8080, https 8443->443, metrics 9090->9100."""
    return load_resource(fixtures_dir / "service.json", Service.KIND)


@pytest.fixture
def scc(fixtures_dir):
    return load_resource(fixtures_dir / "scc_full.json", SecurityContextConstraints.KIND)


@pytest.fixture
def deployment_config(fixtures_dir):
    return load_resource(fixtures_dir / "deploymentconfig.json", DeploymentConfig.KIND)


@pytest.fixture
def ingress(fixtures_dir):
    return load_resource(fixtures_dir / "ingress.yaml", Ingress.KIND)


@pytest.fixture
def test_logger():
    """A dedicated logger so caplog can tell translator output from anything else."""
    log = logging.getLogger("ocp_translate.tests")
    log.setLevel(logging.DEBUG)
    return log
