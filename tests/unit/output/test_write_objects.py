"""Unit tests for writing transformed objects."""

import logging
from pathlib import Path

import pytest

from kubetranslate.core.exceptions import RuleSetLoadError, UnsupportedKindError
from kubetranslate.k8sschema.cluster import get_builtin_cluster
from kubetranslate.models.objects import new_object
from kubetranslate.models.yaml_io import parse_resources_from_yaml
from kubetranslate.output.objects import write_resources, write_transformed_objects
from kubetranslate.scripting.questions import QuestionResolvers

CLUSTER = get_builtin_cluster("kubernetes").spec


def _resolvers() -> QuestionResolvers:
    return QuestionResolvers(
        answer_fn=lambda q: None,
        ask_static=lambda q: q.default,
        ask_dynamic=lambda q, r: q.default,
    )


def _objects():
    return [
        new_object(
            "extensions/v1beta1",
            "Deployment",
            "Web_App",
            spec={"template": {"metadata": {"labels": {"app": "web"}}}},
        ),
        new_object("v1", "Service", "web", spec={"ports": [{"port": 80}]}),
        new_object("example.com/v1", "Widget", "gadget"),
    ]


def _snapshot(directory: Path) -> dict[str, str]:
    return {p.name: p.read_text() for p in sorted(directory.iterdir())}


class TestWriteTransformedObjects:
    def test_fixes_converts_and_writes(self, tmp_path: Path) -> None:
        result = write_transformed_objects(
            tmp_path, _objects()[:2], CLUSTER, False, [], _resolvers()
        )
        assert [p.name for p in result.paths] == [
            "web-app-deployment.yaml",
            "web-service.yaml",
        ]
        deployment = (tmp_path / "web-app-deployment.yaml").read_text()
        assert "apiVersion: apps/v1" in deployment
        assert "matchLabels" in deployment
        assert "targetPort: 80" in (tmp_path / "web-service.yaml").read_text()

    def test_unsupported_kind_ignored(self, tmp_path: Path) -> None:
        result = write_transformed_objects(
            tmp_path, _objects(), CLUSTER, True, [], _resolvers()
        )
        assert not (tmp_path / "gadget-widget.yaml").exists()
        assert [o.get_name() for o in result.dropped] == ["gadget"]
        assert result.skipped == []
        assert len(result.paths) == 2

    def test_unsupported_kind_skipped_with_warning(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.WARNING)
        result = write_transformed_objects(
            tmp_path, _objects(), CLUSTER, False, [], _resolvers()
        )
        assert not (tmp_path / "gadget-widget.yaml").exists()
        ((obj, error),) = result.skipped
        assert obj.get_name() == "gadget"
        assert isinstance(error, UnsupportedKindError)
        assert len(result.paths) == 2
        (record,) = [
            r for r in caplog.records if "Skipping Widget 'gadget'" in r.message
        ]
        assert record.levelno == logging.WARNING

    def test_rule_sets_applied_in_order(self, tmp_path: Path) -> None:
        rules = tmp_path / "rules"
        rules.mkdir()
        (rules / "10_label.py").write_text(
            "def label(resources, ctx):\n"
            "    for r in resources:\n"
            "        r['metadata'].setdefault('labels', {})['env'] = 'prod'\n"
            "    return resources\n"
            "RULES = [label]\n"
        )
        (rules / "20_prune.py").write_text(
            "RULES = [lambda rs, ctx: [r for r in rs if r['kind'] != 'Service']]\n"
        )
        out = tmp_path / "out"
        result = write_transformed_objects(
            out, _objects()[:2], CLUSTER, False, [rules], _resolvers()
        )
        assert [p.name for p in result.paths] == ["web-app-deployment.yaml"]
        assert "env: prod" in result.paths[0].read_text()

    def test_rule_set_load_failure_is_fatal(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.py"
        bad.write_text("RULES = None\n")
        out = tmp_path / "out"
        with pytest.raises(RuleSetLoadError):
            write_transformed_objects(
                out, _objects()[:2], CLUSTER, False, [bad], _resolvers()
            )
        assert not out.exists()

    def test_yaml11_boolean_strings_are_quoted(self, tmp_path: Path) -> None:
        config_map = new_object(
            "v1", "ConfigMap", "cfg", data={"A": "yes", "B": "on", "C": "no"}
        )
        result = write_transformed_objects(
            tmp_path, [config_map], CLUSTER, False, [], _resolvers()
        )
        text = result.paths[0].read_text()
        assert 'A: "yes"' in text
        assert 'B: "on"' in text
        assert 'C: "no"' in text
        (resource,) = parse_resources_from_yaml(text)
        assert resource["data"] == {"A": "yes", "B": "on", "C": "no"}

    def test_deterministic_output(self, tmp_path: Path) -> None:
        for run in ("one", "two"):
            write_transformed_objects(
                tmp_path / run, _objects(), CLUSTER, True, [], _resolvers()
            )
        assert _snapshot(tmp_path / "one") == _snapshot(tmp_path / "two")


class TestWriteResources:
    def test_name_collisions_get_suffixes(self, tmp_path: Path) -> None:
        resources = [
            {"apiVersion": "v1", "kind": "ConfigMap", "metadata": {"name": "cfg"}},
            {"apiVersion": "v1", "kind": "ConfigMap", "metadata": {"name": "cfg"}},
            {"apiVersion": "v1", "kind": "ConfigMap"},
        ]
        paths = write_resources(resources, tmp_path / "out")
        assert [p.name for p in paths] == [
            "cfg-configmap.yaml",
            "cfg-2-configmap.yaml",
            "unnamed-configmap.yaml",
        ]
        assert all(p.is_file() for p in paths)
