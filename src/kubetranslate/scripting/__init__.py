"""Scripted transformation of generated resources by user rule-sets."""

from .answers import AnswerStore, ConsolePrompter, default_resolvers, write_answers
from .api import Rule, RuleContext, rule
from .loader import RuleSet, get_transforms_from_paths
from .questions import (
    Question,
    QuestionEngine,
    QuestionKind,
    QuestionResolvers,
)
from .runner import apply_transforms

__all__ = [
    "AnswerStore",
    "ConsolePrompter",
    "default_resolvers",
    "write_answers",
    "Rule",
    "RuleContext",
    "rule",
    "RuleSet",
    "get_transforms_from_paths",
    "Question",
    "QuestionEngine",
    "QuestionKind",
    "QuestionResolvers",
    "apply_transforms",
]
