"""
Tests for manifest synthesis and the Execute phase of svc init.
"""

from datetime import timedelta
from unittest.mock import Mock, call

import pytest

from skiff.dockerfile import HealthCheck
from skiff.errors import (
    AddServiceToAppFailed,
    GetApplicationFailed,
    ListServicesFailed,
    SaveServiceFailed,
)
from skiff.interfaces import AppDeployerBase, ManifestWriterBase, ProgressBase, StoreBase
from skiff.manifest import BackendService, ContainerHealthCheck, LoadBalancedWebService
from skiff.store import Application, Workload
from skiff.svcinit import ServiceInitDeps, ServiceInitRequest, build_manifest, execute, routing_path
from skiff.svcinit.execute import (
    FMT_ADD_SVC_TO_APP_COMPLETE,
    FMT_ADD_SVC_TO_APP_FAILED,
    FMT_ADD_SVC_TO_APP_START,
)
from skiff.term.log import error_msg, success_msg

LBWS = "Load Balanced Web Service"
BACKEND = "Backend Service"


def make_deps(services=None):
    store = Mock(spec=StoreBase)
    store.list_services.return_value = services or []
    store.get_application.return_value = Application(name="app", account_id="1234")
    writer = Mock(spec=ManifestWriterBase)
    writer.root_path.return_value = "/skiff"
    writer.write_service_manifest.return_value = "/skiff/frontend/manifest.yml"
    return ServiceInitDeps(
        store=store,
        deployer=Mock(spec=AppDeployerBase),
        manifest_writer=writer,
        progress=Mock(spec=ProgressBase),
    )


def lb_request(**kw):
    base = dict(
        app_name="app",
        service_type=LBWS,
        name="frontend",
        dockerfile_path="frontend/Dockerfile",
        port=80,
    )
    base.update(kw)
    return ServiceInitRequest(**base)


def written_manifest(deps):
    return deps.manifest_writer.write_service_manifest.call_args[0][0]


class TestRoutingPath:
    """Test which path a new Load Balanced Web Service claims."""

    @pytest.mark.parametrize("existing, wanted", [
        ([], "/"),
        ([Workload(name="frontend", app="app", type=LBWS)], "/"),
        ([Workload(name="another-app", app="app", type=BACKEND)], "/"),
        ([Workload(name="another-app", app="app", type=LBWS)], "frontend"),
    ])
    def test_routing_path(self, existing, wanted):
        store = Mock(spec=StoreBase)
        store.list_services.return_value = existing

        assert routing_path("app", "frontend", store) == wanted
        store.list_services.assert_called_once_with("app")

    def test_list_services_error(self):
        store = Mock(spec=StoreBase)
        store.list_services.side_effect = Exception("some error")

        with pytest.raises(ListServicesFailed) as exc:
            routing_path("app", "frontend", store)
        assert str(exc.value) == "list services for application app: some error"


class TestBuildManifest:
    """Test the manifest variants built for each service type."""

    def test_load_balanced_web_service(self):
        store = Mock(spec=StoreBase)
        store.list_services.return_value = []

        manifest = build_manifest(lb_request(dockerfile_path="/Dockerfile"), store)

        assert isinstance(manifest, LoadBalancedWebService)
        assert manifest.name == "frontend"
        assert manifest.http.path == "/"
        assert manifest.image.port == 80
        assert manifest.image.build.dockerfile == "/Dockerfile"
        assert manifest.image.build.context == "/"
        assert manifest.image.location is None

    def test_backend_service_does_not_query_store(self):
        store = Mock(spec=StoreBase)
        req = lb_request(service_type=BACKEND, name="api", dockerfile_path="", image="nginx", port=0)

        manifest = build_manifest(req, store)

        assert isinstance(manifest, BackendService)
        assert not hasattr(manifest, "http")
        assert manifest.image.location == "nginx"
        assert manifest.image.build is None
        assert manifest.image.port is None
        store.list_services.assert_not_called()

    def test_dockerfile_at_project_root_uses_current_context(self):
        req = lb_request(service_type=BACKEND, dockerfile_path="Dockerfile")
        manifest = build_manifest(req, Mock(spec=StoreBase))
        assert manifest.image.build.context == "."


class TestExecute:
    """Test the write, register and link sequence."""

    def test_load_balanced_web_service_success(self):
        deps = make_deps()

        path = execute(lb_request(), deps)

        assert path == "/skiff/frontend/manifest.yml"
        deps.manifest_writer.root_path.assert_called_once_with()
        assert deps.manifest_writer.write_service_manifest.call_args[0][1] == "frontend"
        assert written_manifest(deps).http.path == "/"
        deps.store.create_service.assert_called_once_with(
            Workload(name="frontend", app="app", type=LBWS)
        )
        deps.store.get_application.assert_called_once_with("app")
        deps.deployer.add_service_to_app.assert_called_once_with(
            Application(name="app", account_id="1234"), "frontend"
        )
        assert deps.progress.mock_calls == [
            call.start(FMT_ADD_SVC_TO_APP_START.format("frontend")),
            call.stop(success_msg(FMT_ADD_SVC_TO_APP_COMPLETE.format("frontend"))),
        ]

    def test_write_manifest_error_returned_unchanged(self):
        deps = make_deps()
        err = OSError("some error")
        deps.manifest_writer.write_service_manifest.side_effect = err

        with pytest.raises(OSError) as exc:
            execute(lb_request(), deps)

        assert exc.value is err
        assert str(exc.value) == "some error"
        deps.store.create_service.assert_not_called()
        deps.store.get_application.assert_not_called()
        deps.deployer.add_service_to_app.assert_not_called()
        deps.progress.start.assert_not_called()

    def test_get_application_error(self):
        deps = make_deps()
        deps.store.get_application.side_effect = Exception("some error")

        with pytest.raises(GetApplicationFailed) as exc:
            execute(lb_request(), deps)

        assert str(exc.value) == "get application app: some error"
        deps.store.create_service.assert_not_called()
        deps.deployer.add_service_to_app.assert_not_called()

    def test_save_service_error_keeps_manifest(self):
        deps = make_deps()
        deps.store.create_service.side_effect = Exception("oops")

        with pytest.raises(SaveServiceFailed) as exc:
            execute(lb_request(), deps)

        assert str(exc.value) == "saving service frontend: oops"
        deps.manifest_writer.write_service_manifest.assert_called_once()
        deps.deployer.add_service_to_app.assert_not_called()
        deps.progress.start.assert_not_called()

    def test_add_service_to_app_error(self):
        deps = make_deps()
        deps.deployer.add_service_to_app.side_effect = Exception("some error")

        with pytest.raises(AddServiceToAppFailed) as exc:
            execute(lb_request(), deps)

        assert str(exc.value) == "add service frontend to application app: some error"
        assert deps.progress.mock_calls == [
            call.start(FMT_ADD_SVC_TO_APP_START.format("frontend")),
            call.stop(error_msg(FMT_ADD_SVC_TO_APP_FAILED.format("frontend"))),
        ]
        deps.store.create_service.assert_called_once()

    def test_using_existing_image(self):
        deps = make_deps()
        req = ServiceInitRequest(app_name="app", service_type=BACKEND, name="backend", image="mockImage", port=80)

        execute(req, deps)

        manifest = written_manifest(deps)
        assert isinstance(manifest, BackendService)
        assert manifest.image.location == "mockImage"
        assert manifest.image.healthcheck is None
        deps.store.create_service.assert_called_once_with(
            Workload(name="backend", app="app", type=BACKEND)
        )

    def test_no_health_check(self):
        deps = make_deps()
        req = ServiceInitRequest(app_name="app", service_type=BACKEND, name="backend",
                                 dockerfile_path="backend/Dockerfile", port=80)

        execute(req, deps)

        assert written_manifest(deps).image.healthcheck is None

    def test_health_check_from_dockerfile(self):
        deps = make_deps()
        req = ServiceInitRequest(
            app_name="app", service_type=BACKEND, name="backend",
            dockerfile_path="backend/Dockerfile", port=80,
            health_check=HealthCheck(
                cmd=["CMD-SHELL", "curl -f http://localhost/ || exit 1"],
                interval=timedelta(seconds=10),
                retries=2,
                timeout=timedelta(seconds=5),
                start_period=timedelta(0),
            ),
        )

        execute(req, deps)

        assert written_manifest(deps).image.healthcheck == ContainerHealthCheck(
            command=["CMD-SHELL", "curl -f http://localhost/ || exit 1"],
            interval=timedelta(seconds=10),
            retries=2,
            timeout=timedelta(seconds=5),
            start_period=timedelta(0),
        )
