"""Set operations over versioned objects, keyed by identity."""

from kubetranslate.models.objects import K8sObject


def intersection(objs1: list[K8sObject], objs2: list[K8sObject]) -> list[K8sObject]:
    """
    Return the objects of ``objs1`` whose identity also appears in ``objs2``.

    Relative order of ``objs1`` is preserved.
    """
    identities = {obj.identity() for obj in objs2}
    return [obj for obj in objs1 if obj.identity() in identities]


def merge(base: list[K8sObject], overrides: list[K8sObject]) -> list[K8sObject]:
    """
    Replace objects of ``base`` by same-identity objects from ``overrides``.

    Overrides with no counterpart in ``base`` are appended in their own order.
    """
    by_identity = {obj.identity(): obj for obj in overrides}
    merged = [by_identity.pop(obj.identity(), obj) for obj in base]
    merged.extend(obj for obj in overrides if obj.identity() in by_identity)
    return merged
