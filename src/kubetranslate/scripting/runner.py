"""Apply loaded rule-sets to a resource list."""

import copy
import logging

from kubetranslate.core.exceptions import RuleSetApplyError
from kubetranslate.models.yaml_io import K8sResource

from .api import RuleContext
from .loader import RuleSet

logger = logging.getLogger(__name__)


def _check_result(result: object, rule_set: RuleSet, index: int) -> list[K8sResource]:
    if not isinstance(result, list):
        raise RuleSetApplyError(
            f"Rule returned {type(result).__name__}, expected a list of resources",
            rule_set.path,
            index,
        )
    for resource in result:
        if not isinstance(resource, dict):
            raise RuleSetApplyError(
                f"Rule returned a {type(resource).__name__} item, expected a mapping",
                rule_set.path,
                index,
            )
    return result


def apply_transforms(
    rule_sets: list[RuleSet], resources: list[K8sResource]
) -> list[K8sResource]:
    """
    Apply rule-sets in order; within a set, rules apply in declaration order.

    Each rule receives a copy of the resources produced by the previous rule.

    Raises:
        RuleSetApplyError: If a rule fails or returns something that is not a
            list of resources
    """
    current = copy.deepcopy(resources)
    for rule_set in rule_sets:
        logger.debug(f"Applying rule-set {rule_set.path}")
        for index, rule in enumerate(rule_set.rules):
            ctx = RuleContext(rule_set.engine, current, rule_set.path)
            try:
                result = rule(copy.deepcopy(current), ctx)
            except RuleSetApplyError:
                raise
            except Exception as exc:
                raise RuleSetApplyError(
                    f"Rule {getattr(rule, '__name__', repr(rule))} failed: {exc}",
                    rule_set.path,
                    index,
                ) from exc
            current = _check_result(result, rule_set, index)
    return current
