"""
Tests for the skiff command line.
"""

import json
from unittest.mock import patch

import pytest
import yaml
from click.testing import CliRunner

from skiff.cli.main import main
from skiff.store import LocalStore, Workload


@pytest.fixture
def project(tmp_path, monkeypatch):
    home = tmp_path / "home"
    root = tmp_path / "project"
    (root / "frontend").mkdir(parents=True)
    (root / "frontend" / "Dockerfile").write_text(
        "FROM nginx\nEXPOSE 80\nHEALTHCHECK --interval=30s CMD curl -f http://localhost/ || exit 1\n"
    )
    monkeypatch.setenv("SKIFF_HOME", str(home))
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def runner():
    return CliRunner()


def init_app(runner, name="phonetool"):
    with patch("skiff.cli.main.caller_account_id", return_value="123456789012"):
        return runner.invoke(main, ["app", "init", name])


class TestAppInit:

    def test_app_init(self, runner, project):
        result = init_app(runner)

        assert result.exit_code == 0, result.output
        assert "phonetool" in result.output
        app = LocalStore().get_application("phonetool")
        assert app.account_id == "123456789012"
        assert (project / "skiff" / ".workspace").exists()

    def test_app_init_invalid_name(self, runner, project):
        result = init_app(runner, "Bad_Name")
        assert result.exit_code == 1
        assert "application name Bad_Name is invalid" in result.output


class TestSvcInit:

    def test_svc_init_with_flags(self, runner, project):
        init_app(runner)

        with patch("skiff.cli.main.AppDeployer") as deployer_cls:
            result = runner.invoke(main, [
                "svc", "init",
                "--name", "frontend",
                "--svc-type", "Load Balanced Web Service",
                "--dockerfile", "./frontend/Dockerfile",
            ])

        assert result.exit_code == 0, result.output
        manifest_path = project / "skiff" / "frontend" / "manifest.yml"
        assert "Wrote the manifest for service frontend" in result.output
        data = yaml.safe_load(manifest_path.read_text())
        assert data["http"] == {"path": "/"}
        assert data["image"]["port"] == 80
        assert data["image"]["build"] == {"dockerfile": "frontend/Dockerfile", "context": "frontend"}
        assert data["image"]["healthcheck"]["interval"] == "30s"
        assert LocalStore().list_services("phonetool") == [
            Workload(name="frontend", app="phonetool", type="Load Balanced Web Service"),
        ]
        app, name = deployer_cls.return_value.add_service_to_app.call_args[0]
        assert (app.name, name) == ("phonetool", "frontend")

    def test_second_web_service_gets_own_path(self, runner, project):
        init_app(runner)
        with patch("skiff.cli.main.AppDeployer"):
            runner.invoke(main, ["svc", "init", "-n", "frontend", "-t", "Load Balanced Web Service",
                                 "-d", "frontend/Dockerfile"])
            result = runner.invoke(main, ["svc", "init", "-n", "admin", "-t", "Load Balanced Web Service",
                                          "-i", "nginx", "--port", "8080"])

        assert result.exit_code == 0, result.output
        data = yaml.safe_load((project / "skiff" / "admin" / "manifest.yml").read_text())
        assert data["http"] == {"path": "admin"}
        assert data["image"] == {"location": "nginx", "port": 8080}

    def test_svc_init_interactive(self, runner, project):
        init_app(runner)

        # Backend Service, then name, then the existing image option (3rd entry).
        answers = "2\napi\n3\nnginx:latest\n"
        with patch("skiff.cli.main.AppDeployer"):
            result = runner.invoke(main, ["svc", "init"], input=answers)

        assert result.exit_code == 0, result.output
        data = yaml.safe_load((project / "skiff" / "api" / "manifest.yml").read_text())
        assert data["type"] == "Backend Service"
        assert data["image"] == {"location": "nginx:latest"}

    def test_svc_init_invalid_type(self, runner, project):
        init_app(runner)
        result = runner.invoke(main, ["svc", "init", "--svc-type", "Bogus"])
        assert result.exit_code == 1
        assert "invalid service type Bogus" in result.output

    def test_svc_init_outside_workspace(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv("SKIFF_HOME", str(tmp_path / "home"))
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(main, ["svc", "init", "--name", "api"])
        assert result.exit_code == 1
        assert "please run `app init` first" in result.output

    def test_svc_init_corrupt_workspace(self, runner, project):
        init_app(runner)
        (project / "skiff" / ".workspace").write_text("application: [\n")

        result = runner.invoke(main, ["svc", "init", "--name", "api"])

        assert result.exit_code == 1
        assert "read workspace summary" in result.output


def test_svc_ls_json(runner, project):
    init_app(runner)
    with patch("skiff.cli.main.AppDeployer"):
        runner.invoke(main, ["svc", "init", "-n", "api", "-t", "Backend Service", "-i", "nginx"])

    result = runner.invoke(main, ["svc", "ls", "--json"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {
        "services": [{"name": "api", "app": "phonetool", "type": "Backend Service"}]
    }
