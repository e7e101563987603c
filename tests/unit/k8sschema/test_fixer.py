"""Unit tests for the schema fixer."""

import pytest

from kubetranslate.k8sschema.fixer import fix, get_fixers, normalize_name
from kubetranslate.models.objects import K8sObject, new_object

SAMPLES = [
    new_object(
        "apps/v1",
        "Deployment",
        "My_App",
        spec={"template": {"metadata": {"labels": {"app": "web"}}, "spec": {}}},
    ),
    new_object(
        "v1",
        "Service",
        "web",
        spec={"ports": [{"port": 80}, {"port": 443, "targetPort": 8443}]},
    ),
    new_object(
        "networking.k8s.io/v1",
        "Ingress",
        "web",
        spec={"rules": [{"http": {"paths": [{"path": "/", "backend": {}}]}}]},
    ),
    new_object("v1", "ConfigMap", "cfg", data={"a": "b"}),
    new_object("serving.knative.dev/v1", "Service", "web", spec={"ports": [{"port": 1}]}),
]


class TestNormalizeName:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("web", "web"),
            ("My_App", "my-app"),
            ("a..b", "a..b"),
            ("-edge-", "edge"),
            ("x" * 80, "x" * 63),
        ],
    )
    def test_normalizes(self, name: str, expected: str) -> None:
        assert normalize_name(name) == expected

    def test_falls_back_to_original_when_nothing_is_left(self) -> None:
        assert normalize_name("___") == "___"


class TestFix:
    @pytest.mark.parametrize("obj", SAMPLES, ids=lambda o: f"{o.kind}-{o.api_version}")
    def test_idempotent(self, obj: K8sObject) -> None:
        once = fix(obj)
        assert fix(once) == once

    def test_unchanged_object_is_returned_as_is(self) -> None:
        obj = new_object("v1", "ConfigMap", "cfg", data={"a": "b"})
        assert fix(obj) is obj

    def test_input_is_not_mutated(self) -> None:
        obj = SAMPLES[1]
        before = obj.to_dict()
        fix(obj)
        assert obj.to_dict() == before

    def test_workload_selector_defaults_to_template_labels(self) -> None:
        fixed = fix(SAMPLES[0])
        assert fixed.get_name() == "my-app"
        assert fixed.body["spec"]["selector"] == {"matchLabels": {"app": "web"}}

    def test_service_ports_defaulted(self) -> None:
        ports = fix(SAMPLES[1]).body["spec"]["ports"]
        assert ports == [
            {"port": 80, "protocol": "TCP", "targetPort": 80, "name": "port-80"},
            {"port": 443, "targetPort": 8443, "protocol": "TCP", "name": "port-443"},
        ]

    def test_same_port_number_over_two_protocols_gets_unique_names(self) -> None:
        dns = new_object(
            "v1",
            "Service",
            "dns",
            spec={
                "ports": [
                    {"port": 53},
                    {"port": 53, "protocol": "UDP"},
                    {"port": 9153},
                ]
            },
        )
        fixed = fix(dns)
        names = [p["name"] for p in fixed.body["spec"]["ports"]]
        assert names == ["port-53-tcp", "port-53-udp", "port-9153"]
        assert fix(fixed) == fixed

    def test_knative_service_is_left_alone(self) -> None:
        assert fix(SAMPLES[4]) is SAMPLES[4]

    def test_ingress_path_type_defaulted(self) -> None:
        fixed = fix(SAMPLES[2])
        path = fixed.body["spec"]["rules"][0]["http"]["paths"][0]
        assert path["pathType"] == "ImplementationSpecific"

    def test_malformed_body_is_tolerated(self) -> None:
        obj = new_object("apps/v1", "Deployment", "web", spec="not-a-mapping")
        assert fix(obj) is obj

    def test_no_fixers_for_unknown_kind(self) -> None:
        assert get_fixers("Whatever") == []
