"""Unit tests for the default question resolvers."""

import io
from pathlib import Path

import pytest

from kubetranslate.core.exceptions import ConfigError
from kubetranslate.scripting.answers import (
    AnswerStore,
    ConsolePrompter,
    default_resolvers,
    write_answers,
)
from kubetranslate.scripting.questions import Question, QuestionKind


class TestAnswerStore:
    def test_flat_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "answers.yaml"
        path.write_text("team: web\nreplicas: 3\n")
        store = AnswerStore.load(path)
        assert len(store) == 2
        assert store.get(Question(id="replicas")) == "3"
        assert store.get(Question(id="other")) is None

    def test_nested_under_answers(self, tmp_path: Path) -> None:
        path = tmp_path / "answers.yaml"
        path.write_text("answers:\n  team: web\n")
        assert AnswerStore.load(path).get(Question(id="team")) == "web"

    def test_written_answers_load_back(self, tmp_path: Path) -> None:
        path = tmp_path / "cache" / "qa.yaml"
        write_answers({"b": "2", "a": "1"}, path)
        store = AnswerStore.load(path)
        assert store.get(Question(id="a")) == "1"
        assert path.read_text().index("a:") < path.read_text().index("b:")

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            AnswerStore.load(tmp_path / "missing.yaml")

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "answers.yaml"
        path.write_text("- a\n")
        with pytest.raises(ConfigError, match="mapping"):
            AnswerStore.load(path)


class TestConsolePrompter:
    def test_non_interactive_uses_defaults(self) -> None:
        prompter = ConsolePrompter(interactive=False)
        assert prompter.ask_static(Question(id="q", default="d")) == "d"

    def test_dynamic_default_computed_from_resources(self) -> None:
        prompter = ConsolePrompter(interactive=False)
        question = Question(
            id="count",
            kind=QuestionKind.DYNAMIC,
            compute=lambda resources: str(len(resources)),
        )
        assert prompter.ask_dynamic(question, [{}, {}, {}]) == "3"

    def test_interactive_prompt(self) -> None:
        output = io.StringIO()
        replies = iter(["payments", ""])
        prompter = ConsolePrompter(
            interactive=True, input_fn=lambda _: next(replies), output=output
        )
        question = Question(
            id="team", description="Owning team?", default="web", hints=["lowercase"]
        )
        assert prompter.ask_static(question) == "payments"
        assert prompter.ask_static(question) == "web"
        assert "? Owning team?" in output.getvalue()
        assert "Hint: lowercase" in output.getvalue()


def test_default_resolvers_with_answers_file(tmp_path: Path) -> None:
    path = tmp_path / "answers.yaml"
    path.write_text("team: ops\n")
    resolvers = default_resolvers(path, qa_skip=True)
    assert resolvers.answer_fn(Question(id="team")) == "ops"
    assert resolvers.ask_static(Question(id="x", default="y")) == "y"
    assert resolvers.cache == {}
