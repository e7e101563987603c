"""Default question resolvers: stored answers and a console prompter."""

import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import TextIO

from ruamel.yaml import YAML

from kubetranslate.core.exceptions import ConfigError
from kubetranslate.models.yaml_io import K8sResource, dump_yaml

from .questions import Question, QuestionResolvers

logger = logging.getLogger(__name__)

_yaml_parser = YAML(typ="safe")


class AnswerStore:
    """Precomputed answers, keyed by question id."""

    def __init__(self, answers: dict[str, str] | None = None):
        self._answers = dict(answers or {})

    @classmethod
    def load(cls, path: str | Path) -> "AnswerStore":
        """
        Load answers from YAML, either a flat mapping or under ``answers:``.
        """
        file_path = Path(path)
        if not file_path.is_file():
            raise ConfigError(f"Answers file not found: {file_path}", "qa_answers_file")
        try:
            data = _yaml_parser.load(file_path.read_text(encoding="utf-8")) or {}
        except Exception as e:
            raise ConfigError(
                f"Cannot parse answers file {file_path.name}: {e}", "qa_answers_file"
            ) from e
        if isinstance(data, dict) and isinstance(data.get("answers"), dict):
            data = data["answers"]
        if not isinstance(data, dict):
            raise ConfigError("Answers file must contain a mapping", "qa_answers_file")
        logger.debug(f"Loaded {len(data)} answers from {file_path}")
        return cls({str(k): str(v) for k, v in data.items()})

    def get(self, question: Question) -> str | None:
        return self._answers.get(question.id)

    def __len__(self) -> int:
        return len(self._answers)


def write_answers(answers: dict[str, str], path: str | Path) -> None:
    """Persist resolved answers so that a later run can reuse them."""
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(dump_yaml({"answers": dict(sorted(answers.items()))}))


class ConsolePrompter:
    """Asks questions on the console, or answers with defaults when not interactive."""

    def __init__(
        self,
        interactive: bool | None = None,
        input_fn: Callable[[str], str] = input,
        output: TextIO | None = None,
    ):
        if interactive is None:
            interactive = sys.stdin.isatty()
        self.interactive = interactive
        self._input = input_fn
        self._output = output or sys.stdout
        self._logger = logger.getChild(self.__class__.__name__)

    def _prompt(self, question: Question, default: str) -> str:
        if not self.interactive:
            self._logger.info(f"Using default answer for '{question.id}': {default!r}")
            return default
        print(f"? {question.description or question.id}", file=self._output)
        for hint in question.hints:
            print(f"  Hint: {hint}", file=self._output)
        answer = self._input(f"  [{default}]: ").strip()
        return answer or default

    def ask_static(self, question: Question) -> str:
        return self._prompt(question, question.default)

    def ask_dynamic(self, question: Question, resources: list[K8sResource]) -> str:
        default = question.default
        if question.compute is not None:
            default = str(question.compute(resources))
        return self._prompt(question, default)


def default_resolvers(
    answers_file: str | Path | None = None, qa_skip: bool = False
) -> QuestionResolvers:
    """Resolvers backed by an optional answers file and the console."""
    store = AnswerStore.load(answers_file) if answers_file else AnswerStore()
    prompter = ConsolePrompter(interactive=False if qa_skip else None)
    return QuestionResolvers(
        answer_fn=store.get,
        ask_static=prompter.ask_static,
        ask_dynamic=prompter.ask_dynamic,
    )
