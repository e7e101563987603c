"""Unit tests for the built-in resource converters."""

import base64

from kubetranslate.apiresource import (
    BuildConfigAPIResource,
    DeploymentAPIResource,
    KnativeServiceAPIResource,
    ServiceAPIResource,
    StorageAPIResource,
    TektonAPIResource,
)
from kubetranslate.apiresource.buildconfig import image_short_name, image_tag
from kubetranslate.ir.models import (
    IR,
    Container,
    ContainerBuild,
    EnhancedIR,
    KubernetesOptions,
    Service,
    ServicePort,
    Storage,
    StorageKind,
)
from kubetranslate.k8sschema.cluster import get_builtin_cluster
from kubetranslate.models.objects import new_object


def _ir(cluster: str = "kubernetes", **kwargs) -> EnhancedIR:
    options = KubernetesOptions(
        cluster=get_builtin_cluster(cluster).spec,
        registry_url="quay.io",
        registry_namespace="team",
    )
    defaults = {
        "name": "shop",
        "services": [
            Service(
                name="web",
                image="web:1",
                ports=[ServicePort(port=80, target_port=8080)],
                expose=True,
                volumes=["cfg", "data"],
            ),
            Service(name="worker", image="worker:1"),
        ],
        "storages": [
            Storage(name="cfg", kind=StorageKind.CONFIGMAP, content={"a": "1"}),
            Storage(name="data", kind=StorageKind.PVC, mount_path="/var/data"),
        ],
        "containers": [
            Container(
                image_names=["registry.example.com/web:1.2"],
                new=True,
                build=ContainerBuild(git_repo_url="https://git.example.com/web.git"),
            )
        ],
        "kubernetes": options,
    }
    defaults.update(kwargs)
    return EnhancedIR.from_ir(IR(**defaults))


class TestDeploymentAPIResource:
    def test_one_deployment_per_service(self) -> None:
        objs, ignored = DeploymentAPIResource().convert_ir_to_objects(_ir())
        assert [o.get_name() for o in objs] == ["web", "worker"]
        assert ignored == []
        web = objs[0]
        pod = web.body["spec"]["template"]["spec"]
        container = pod["containers"][0]
        assert container["ports"] == [{"containerPort": 8080, "protocol": "TCP"}]
        assert pod["volumes"] == [
            {"name": "cfg", "configMap": {"name": "cfg"}},
            {"name": "data", "persistentVolumeClaim": {"claimName": "data"}},
        ]
        assert container["volumeMounts"] == [
            {"name": "cfg", "mountPath": "/cfg"},
            {"name": "data", "mountPath": "/var/data"},
        ]
        assert web.body["spec"]["selector"] == {
            "matchLabels": {"kubetranslate.io/service": "web"}
        }

    def test_cached_workload_overrides_generated_one(self) -> None:
        cached = new_object("apps/v1", "Deployment", "web", spec={"replicas": 5})
        objs, ignored = DeploymentAPIResource().convert_ir_to_objects(
            _ir(cached_objects=[cached])
        )
        assert objs[0] == cached
        assert [o.get_name() for o in objs] == ["web", "worker"]
        assert ignored == []

    def test_declines_other_kinds(self) -> None:
        cm = new_object("v1", "ConfigMap", "extra")
        _, ignored = DeploymentAPIResource().convert_ir_to_objects(
            _ir(cached_objects=[cm])
        )
        assert ignored == [cm]


class TestServiceAPIResource:
    def test_services_and_ingress(self) -> None:
        objs, _ = ServiceAPIResource().convert_ir_to_objects(_ir())
        assert [(o.kind, o.get_name()) for o in objs] == [
            ("Service", "web"),
            ("Ingress", "shop"),
        ]
        assert objs[0].body["spec"]["ports"] == [
            {"port": 80, "protocol": "TCP", "targetPort": 8080}
        ]
        path = objs[1].body["spec"]["rules"][0]["http"]["paths"][0]
        assert path["backend"]["service"] == {"name": "web", "port": {"number": 80}}

    def test_knative_service_not_claimed(self) -> None:
        ksvc = new_object("serving.knative.dev/v1", "Service", "fn")
        _, ignored = ServiceAPIResource().convert_ir_to_objects(
            _ir(cached_objects=[ksvc])
        )
        assert ignored == [ksvc]


class TestStorageAPIResource:
    def test_storage_objects(self) -> None:
        ir = _ir(
            cluster="openshift",
            storages=[
                Storage(name="cfg", kind=StorageKind.CONFIGMAP, content={"a": "1"}),
                Storage(name="creds", kind=StorageKind.SECRET, content={"pw": "s3"}),
                Storage(name="data", kind=StorageKind.PVC, size="5Gi"),
            ],
            services=[],
        )
        objs, _ = StorageAPIResource().convert_ir_to_objects(ir)
        cfg, secret, pvc = objs
        assert cfg.body == {"data": {"a": "1"}}
        assert secret.body["type"] == "Opaque"
        assert base64.b64decode(secret.body["data"]["pw"]) == b"s3"
        assert pvc.body["spec"]["storageClassName"] == "gp2"
        assert pvc.body["spec"]["resources"]["requests"]["storage"] == "5Gi"


class TestKnativeServiceAPIResource:
    def test_nothing_on_plain_kubernetes(self) -> None:
        objs, _ = KnativeServiceAPIResource().convert_ir_to_objects(_ir())
        assert objs == []

    def test_single_port_and_no_volumes(self) -> None:
        objs, _ = KnativeServiceAPIResource().convert_ir_to_objects(_ir("openshift"))
        web = objs[0]
        assert web.api_version == "serving.knative.dev/v1"
        spec = web.body["spec"]["template"]["spec"]
        assert "volumes" not in spec
        assert spec["containers"][0]["ports"] == [
            {"containerPort": 8080, "protocol": "TCP"}
        ]
        assert "ports" not in objs[1].body["spec"]["template"]["spec"]["containers"][0]


class TestBuildConfigAPIResource:
    def test_image_name_helpers(self) -> None:
        assert image_short_name("registry.example.com/team/web:1.2") == "web"
        assert image_short_name("web@sha256:abc") == "web"
        assert image_tag("registry.example.com:5000/web:1.2") == "1.2"
        assert image_tag("registry.example.com:5000/web") == "latest"

    def test_imagestream_and_buildconfig(self) -> None:
        objs, _ = BuildConfigAPIResource().convert_ir_to_objects(_ir("openshift"))
        assert [(o.kind, o.get_name()) for o in objs] == [
            ("ImageStream", "web"),
            ("BuildConfig", "web"),
        ]
        spec = objs[1].body["spec"]
        assert spec["source"]["git"] == {
            "uri": "https://git.example.com/web.git",
            "ref": "main",
        }
        assert spec["output"]["to"]["name"] == "web:1.2"

    def test_nothing_on_plain_kubernetes(self) -> None:
        objs, _ = BuildConfigAPIResource().convert_ir_to_objects(_ir())
        assert objs == []


class TestTektonAPIResource:
    def test_pipeline_objects(self) -> None:
        objs, _ = TektonAPIResource().convert_ir_to_objects(_ir("openshift"))
        assert [(o.kind, o.get_name()) for o in objs] == [
            ("ServiceAccount", "shop-pipeline"),
            ("Pipeline", "shop-clone-build-push"),
            ("PipelineRun", "shop-clone-build-push-run"),
        ]
        tasks = objs[1].body["spec"]["tasks"]
        assert [t["name"] for t in tasks] == ["clone-web", "build-push-web"]
        image = next(p for p in tasks[1]["params"] if p["name"] == "IMAGE")
        assert image["value"] == "quay.io/team/registry.example.com/web:1.2"

    def test_only_pipeline_service_accounts_claimed(self) -> None:
        plain = new_object("v1", "ServiceAccount", "default")
        _, ignored = TektonAPIResource().convert_ir_to_objects(
            _ir("openshift", cached_objects=[plain])
        )
        assert ignored == [plain]

    def test_no_build_sources(self) -> None:
        objs, _ = TektonAPIResource().convert_ir_to_objects(
            _ir("openshift", containers=[])
        )
        assert objs == []
