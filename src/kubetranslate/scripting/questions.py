"""
Questions raised by rules and their memoized resolution.

A question is resolved at most once per pipeline run: from the precomputed
answers first, then by the static or dynamic resolver depending on its kind.
The answer is cached and every later occurrence of the same id reuses it.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from kubetranslate.models.yaml_io import K8sResource

logger = logging.getLogger(__name__)


class QuestionKind(str, Enum):
    STATIC = "static"
    DYNAMIC = "dynamic"


class Question(BaseModel):
    """A named prompt a rule raises while transforming resources."""

    id: str = Field(..., min_length=1, description="Stable question identifier.")
    kind: QuestionKind = QuestionKind.STATIC
    description: str = ""
    hints: list[str] = Field(default_factory=list)
    default: str = ""
    compute: Callable[[list[K8sResource]], str] | None = Field(
        default=None,
        exclude=True,
        description="Computes the default of a dynamic question from resources.",
    )

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


AnswerFn = Callable[[Question], str | None]
StaticAsker = Callable[[Question], str]
DynamicAsker = Callable[[Question, list[K8sResource]], str]


@dataclass
class QuestionResolvers:
    """The three resolvers of a run plus the answer cache they share."""

    answer_fn: AnswerFn
    ask_static: StaticAsker
    ask_dynamic: DynamicAsker
    cache: dict[str, str] = field(default_factory=dict)


class QuestionEngine:
    """Resolves questions with memoization by question id."""

    def __init__(
        self,
        answer_fn: AnswerFn,
        ask_static: StaticAsker,
        ask_dynamic: DynamicAsker,
        cache: dict[str, str] | None = None,
    ):
        self._answer_fn = answer_fn
        self._ask_static = ask_static
        self._ask_dynamic = ask_dynamic
        self._cache = cache if cache is not None else {}
        self._logger = logger.getChild(self.__class__.__name__)

    @property
    def answers(self) -> dict[str, str]:
        """Answers resolved so far, by question id."""
        return dict(self._cache)

    def resolve(self, question: Question, resources: list[K8sResource]) -> str:
        if question.id in self._cache:
            self._logger.debug(f"Reusing answer for question '{question.id}'")
            return self._cache[question.id]

        answer = self._answer_fn(question)
        if answer is not None:
            self._logger.debug(f"Answer for '{question.id}' found in answers")
        elif question.kind is QuestionKind.STATIC:
            answer = self._ask_static(question)
        else:
            answer = self._ask_dynamic(question, resources)

        answer = str(answer)
        self._cache[question.id] = answer
        return answer
