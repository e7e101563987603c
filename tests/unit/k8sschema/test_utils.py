"""Unit tests for identity-keyed set operations."""

import itertools

from kubetranslate.k8sschema.utils import intersection, merge
from kubetranslate.models.objects import new_object

A = new_object("v1", "ConfigMap", "a")
B = new_object("v1", "ConfigMap", "b")
C = new_object("v1", "Secret", "a")
A_NS = new_object("v1", "ConfigMap", "a", namespace="other")


class TestIntersection:
    def test_keeps_first_list_order(self) -> None:
        assert intersection([A, B, C], [C, A]) == [A, C]

    def test_namespace_is_part_of_identity(self) -> None:
        assert intersection([A, A_NS], [A_NS]) == [A_NS]

    def test_empty(self) -> None:
        assert intersection([A, B], []) == []
        assert intersection([], [A]) == []

    def test_running_intersection_is_order_independent(self) -> None:
        declined = [[A, B, C], [A, C], [B, A, C]]
        results = set()
        for order in itertools.permutations(declined):
            ignored = [A, B, C]
            for d in order:
                ignored = intersection(ignored, d)
            results.add(tuple(o.identity() for o in ignored))
        assert results == {(A.identity(), C.identity())}


class TestMerge:
    def test_override_replaces_in_place(self) -> None:
        override = new_object("v1", "ConfigMap", "a", data={"x": "1"})
        assert merge([A, B], [override]) == [override, B]

    def test_new_overrides_appended(self) -> None:
        assert merge([A], [C, B]) == [A, C, B]
