"""Load rule-sets from Python files."""

import importlib.util
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any

from kubetranslate.core.exceptions import RuleSetLoadError

from .questions import AnswerFn, DynamicAsker, QuestionEngine, StaticAsker

logger = logging.getLogger(__name__)

RULES_ATTRIBUTE = "RULES"
RULESET_SUFFIX = ".py"


@dataclass
class RuleSet:
    """Ordered rules loaded from one file, identified by its path."""

    path: Path
    rules: list[Callable[..., Any]]
    engine: QuestionEngine


def _discover_ruleset_files(path: Path) -> list[Path]:
    """Expand a directory into its rule-set files, in name order."""
    if path.is_dir():
        return sorted(
            p
            for p in path.iterdir()
            if p.is_file()
            and p.suffix == RULESET_SUFFIX
            and not p.name.startswith(("_", "."))
        )
    return [path]


def _load_module(path: Path, index: int) -> ModuleType:
    if not path.is_file():
        raise RuleSetLoadError("Rule-set file not found", path)
    if path.suffix != RULESET_SUFFIX:
        raise RuleSetLoadError(
            f"Unsupported rule-set extension '{path.suffix}'", path
        )

    mod_name = f"kubetranslate_ruleset_{index}_{path.stem}"
    spec = importlib.util.spec_from_file_location(mod_name, path)
    if spec is None or spec.loader is None:
        raise RuleSetLoadError("Cannot create a module spec for rule-set", path)
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise RuleSetLoadError(f"Failed to load rule-set: {exc}", path) from exc
    return module


def _get_rules(module: ModuleType, path: Path) -> list[Callable[..., Any]]:
    rules = getattr(module, RULES_ATTRIBUTE, None)
    if rules is None:
        raise RuleSetLoadError(f"Rule-set does not define {RULES_ATTRIBUTE}", path)
    if isinstance(rules, (str, bytes)) or not isinstance(rules, Sequence):
        raise RuleSetLoadError(f"{RULES_ATTRIBUTE} must be a sequence of rules", path)
    for index, rule in enumerate(rules):
        if not callable(rule):
            raise RuleSetLoadError(
                f"{RULES_ATTRIBUTE}[{index}] is not callable "
                f"({type(rule).__name__})",
                path,
            )
    return list(rules)


def get_transforms_from_paths(
    paths: list[Path] | list[str],
    answer_fn: AnswerFn,
    ask_static: StaticAsker,
    ask_dynamic: DynamicAsker,
    answer_cache: dict[str, str] | None = None,
) -> list[RuleSet]:
    """
    Load rule-sets from the given paths, in order.

    Args:
        paths: Rule-set files or directories of rule-set files
        answer_fn: Looks up a precomputed answer by question
        ask_static: Resolves static questions
        ask_dynamic: Resolves dynamic questions from the current resources
        answer_cache: Answers already resolved in this run, shared and updated

    Returns:
        The loaded rule-sets

    Raises:
        RuleSetLoadError: If any path is unreadable or malformed
    """
    engine = QuestionEngine(answer_fn, ask_static, ask_dynamic, answer_cache)
    rule_sets: list[RuleSet] = []
    files = [f for p in paths for f in _discover_ruleset_files(Path(p))]
    for index, path in enumerate(files):
        module = _load_module(path, index)
        rules = _get_rules(module, path)
        logger.debug(f"Loaded {len(rules)} rules from {path}")
        rule_sets.append(RuleSet(path=path, rules=rules, engine=engine))
    if rule_sets:
        logger.info(f"Loaded {len(rule_sets)} rule-sets")
    return rule_sets
