"""
Tests for CLI commands.
"""

import yaml
from typer.testing import CliRunner

from ocp_translate.cli import app

runner = CliRunner()


def manifests(result):
    return list(yaml.safe_load_all(result.stdout))


class TestRoute:
    """Tests for the route command."""

    def test_route_to_stdout(self, fixtures_dir):
        result = runner.invoke(
            app,
            [
                "--quiet",
                "route",
                str(fixtures_dir / "route_with_tls.json"),
                "--service",
                str(fixtures_dir / "service.json"),
                "--domain",
                "*.k8s.example.com",
            ],
        )

        assert result.exit_code == 0
        proxy, secret = manifests(result)
        assert proxy["kind"] == "HTTPProxy"
        assert proxy["spec"]["virtualhost"]["fqdn"] == "nginx-example-migrator.k8s.example.com"
        assert secret["kind"] == "Secret"

    def test_name_option_prefixes_annotations(self, fixtures_dir):
        result = runner.invoke(
            app,
            [
                "--name",
                "migrator",
                "-q",
                "route",
                str(fixtures_dir / "route_with_tls.json"),
                "--service",
                str(fixtures_dir / "service.json"),
            ],
        )

        assert result.exit_code == 0
        proxy = manifests(result)[0]
        assert "migrator/Route.Spec.Weight" in proxy["metadata"]["annotations"]

    def test_route_to_directory(self, fixtures_dir, tmp_path):
        out = tmp_path / "out"

        result = runner.invoke(
            app,
            [
                "route",
                str(fixtures_dir / "route_with_tls.json"),
                "--service",
                str(fixtures_dir / "service.json"),
                "--out",
                str(out),
            ],
        )

        assert result.exit_code == 0
        assert (out / "httpproxy-nginx-example.yaml").exists()
        assert (out / "secret-hpsecret-nginx-example.yaml").exists()
        assert "Wrote" in result.stdout

    def test_service_picked_by_route_target(self, fixtures_dir, load_fixture, tmp_path):
        """Test that the route's target is chosen when the file holds several services."""
        other = load_fixture("service.json")
        other["metadata"]["name"] = "unrelated"
        services = tmp_path / "services.yaml"
        services.write_text(yaml.safe_dump_all([other, load_fixture("service.json")]))

        result = runner.invoke(
            app,
            [
                "-q",
                "route",
                str(fixtures_dir / "route_without_tls.json"),
                "--service",
                str(services),
            ],
        )

        assert result.exit_code == 0
        assert manifests(result)[0]["spec"]["routes"][0]["services"][0]["name"] == "nginx-example"

    def test_mismatched_service_fails(self, fixtures_dir, load_fixture, tmp_path):
        service = load_fixture("service.json")
        service["metadata"]["namespace"] = "elsewhere"
        service_file = tmp_path / "service.yaml"
        service_file.write_text(yaml.safe_dump(service))

        result = runner.invoke(
            app,
            [
                "route",
                str(fixtures_dir / "route_with_tls.json"),
                "--service",
                str(service_file),
            ],
        )

        assert result.exit_code == 1
        assert "mismatch" in result.stdout

    def test_missing_file_fails(self, fixtures_dir, tmp_path):
        result = runner.invoke(
            app,
            [
                "route",
                str(tmp_path / "missing.yaml"),
                "--service",
                str(fixtures_dir / "service.json"),
            ],
        )

        assert result.exit_code == 1
        assert "Cannot load" in result.stdout


class TestScc:
    """Tests for the scc command."""

    def test_scc(self, fixtures_dir):
        result = runner.invoke(app, ["-q", "scc", str(fixtures_dir / "scc_full.json")])

        assert result.exit_code == 0
        assert [m["kind"] for m in manifests(result)] == [
            "PodSecurityPolicy",
            "ClusterRole",
            "ClusterRoleBinding",
        ]

    def test_config_file(self, fixtures_dir, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text(yaml.safe_dump({"role_prefix": "psp-"}))

        result = runner.invoke(
            app, ["--config", str(config), "-q", "scc", str(fixtures_dir / "scc_full.json")]
        )

        assert result.exit_code == 0
        assert manifests(result)[1]["metadata"]["name"] == "psp-restricted-plus"

    def test_invalid_config_file(self, fixtures_dir, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text(yaml.safe_dump({"unknown": True}))

        result = runner.invoke(
            app, ["--config", str(config), "scc", str(fixtures_dir / "scc_full.json")]
        )

        assert result.exit_code == 1
        assert "Invalid configuration file" in result.stdout

    def test_wrong_kind(self, fixtures_dir):
        result = runner.invoke(app, ["scc", str(fixtures_dir / "service.json")])

        assert result.exit_code == 1
        assert "SecurityContextConstraints" in result.stdout


class TestDeploymentConfigAndIngress:
    """Tests for the dc and ingress commands."""

    def test_dc(self, fixtures_dir):
        result = runner.invoke(app, ["-q", "dc", str(fixtures_dir / "deploymentconfig.json")])

        assert result.exit_code == 0
        (deployment,) = manifests(result)
        assert deployment["kind"] == "Deployment"
        assert deployment["spec"]["strategy"]["type"] == "RollingUpdate"

    def test_ingress(self, fixtures_dir):
        result = runner.invoke(
            app,
            ["-q", "ingress", str(fixtures_dir / "ingress.yaml"), "--domain", "k8s.example.com"],
        )

        assert result.exit_code == 0
        (proxy,) = manifests(result)
        assert proxy["spec"]["virtualhost"]["fqdn"] == "storefront.k8s.example.com"


class TestHelp:
    def test_help_lists_commands(self):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("route", "scc", "dc", "ingress"):
            assert command in result.stdout
