"""
Building blocks for rule-set authors.

A rule-set is a Python file defining ``RULES``, a sequence applied in order.
Each entry is either a plain callable taking ``(resources, ctx)`` and returning
the new resource list, or a :class:`Rule` that applies a function to every
matching resource::

    from kubetranslate.scripting import Rule

    def add_team_label(resource, ctx):
        team = ctx.ask_static("team", "Which team owns the app?", default="web")
        resource["metadata"].setdefault("labels", {})["team"] = team
        return resource

    RULES = [Rule(add_team_label)]
"""

import copy
import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from kubetranslate.models.yaml_io import K8sResource, get_resource_kind

from .questions import Question, QuestionEngine, QuestionKind

logger = logging.getLogger(__name__)

ResourceFn = Callable[[K8sResource, "RuleContext"], Any]


class RuleContext:
    """What a rule can see and do besides transforming resources."""

    def __init__(
        self,
        engine: QuestionEngine,
        resources: list[K8sResource],
        path: Path | None = None,
    ):
        self._engine = engine
        self._resources = resources
        self.path = path
        self.logger = logger.getChild(path.stem if path else "rule")

    def ask(self, question: Question) -> str:
        return self._engine.resolve(question, self._resources)

    def ask_static(
        self,
        question_id: str,
        description: str = "",
        default: str = "",
        hints: list[str] | None = None,
    ) -> str:
        return self.ask(
            Question(
                id=question_id,
                kind=QuestionKind.STATIC,
                description=description,
                default=default,
                hints=hints or [],
            )
        )

    def ask_dynamic(
        self,
        question_id: str,
        description: str = "",
        default: str = "",
        hints: list[str] | None = None,
        compute: Callable[[list[K8sResource]], str] | None = None,
    ) -> str:
        return self.ask(
            Question(
                id=question_id,
                kind=QuestionKind.DYNAMIC,
                description=description,
                default=default,
                hints=hints or [],
                compute=compute,
            )
        )


class Rule:
    """Applies a function to each resource matching a kind/apiVersion filter."""

    def __init__(
        self,
        fn: ResourceFn,
        kinds: Iterable[str] | None = None,
        api_versions: Iterable[str] | None = None,
        name: str | None = None,
    ):
        self.fn = fn
        self.kinds = set(kinds) if kinds is not None else None
        self.api_versions = set(api_versions) if api_versions is not None else None
        self.name = name or getattr(fn, "__name__", "rule")

    def __repr__(self) -> str:
        return f"Rule({self.name})"

    def matches(self, resource: K8sResource) -> bool:
        if self.kinds is not None and get_resource_kind(resource) not in self.kinds:
            return False
        if (
            self.api_versions is not None
            and resource.get("apiVersion") not in self.api_versions
        ):
            return False
        return True

    def __call__(
        self, resources: list[K8sResource], ctx: RuleContext
    ) -> list[K8sResource]:
        output: list[K8sResource] = []
        for resource in resources:
            if not self.matches(resource):
                output.append(resource)
                continue
            result = self.fn(copy.deepcopy(resource), ctx)
            if result is None:
                continue
            if isinstance(result, dict):
                output.append(result)
            elif isinstance(result, list):
                output.extend(result)
            else:
                raise TypeError(
                    f"Rule '{self.name}' returned {type(result).__name__}, "
                    "expected a resource, a list of resources or None"
                )
        return output


def rule(
    kinds: Iterable[str] | None = None, api_versions: Iterable[str] | None = None
) -> Callable[[ResourceFn], Rule]:
    """Decorator form of :class:`Rule`."""

    def wrap(fn: ResourceFn) -> Rule:
        return Rule(fn, kinds=kinds, api_versions=api_versions)

    return wrap
