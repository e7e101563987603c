"""
Exception classes for the kubetranslate pipeline.

Fatal errors abort the whole run; per-object errors are caught by the stage
that owns the object, logged, and the object is skipped.
"""

from pathlib import Path
from typing import Any


class KubeTranslateError(Exception):
    """Base exception for all kubetranslate errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.context = context or {}

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.error_code:
            base_msg = f"[{self.error_code}] {base_msg}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg = f"{base_msg} (Context: {context_str})"
        return base_msg


class TransformerError(KubeTranslateError):
    """Raised when a transformer fails to transform or write its objects."""

    def __init__(
        self,
        message: str,
        transformer: str | None = None,
        stage: str | None = None,
    ) -> None:
        context = {}
        if transformer:
            context["transformer"] = transformer
        if stage:
            context["stage"] = stage
        super().__init__(message, "TRANSFORMER_ERROR", context)


class UnsupportedKindError(KubeTranslateError):
    """Raised when the target cluster cannot host any version of a kind."""

    def __init__(self, kind: str, api_version: str, name: str | None = None) -> None:
        context = {"kind": kind, "api_version": api_version}
        if name:
            context["name"] = name
        super().__init__(
            f"Kind '{kind}' is not supported by the target cluster",
            "UNSUPPORTED_KIND",
            context,
        )
        self.kind = kind
        self.api_version = api_version


class RuleSetLoadError(KubeTranslateError):
    """Raised when a rule-set file cannot be read or is malformed."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        context = {"path": str(path)} if path is not None else {}
        super().__init__(message, "RULESET_LOAD_ERROR", context)

    def get_recovery_hint(self) -> str:
        """Provide a helpful hint for fixing the rule-set."""
        return "Make sure the rule-set is a Python file that defines a RULES sequence"


class RuleSetApplyError(KubeTranslateError):
    """Raised when a rule fails while being applied to the resources."""

    def __init__(
        self,
        message: str,
        path: str | Path | None = None,
        rule_index: int | None = None,
    ) -> None:
        context: dict[str, Any] = {}
        if path is not None:
            context["path"] = str(path)
        if rule_index is not None:
            context["rule_index"] = rule_index
        super().__init__(message, "RULESET_APPLY_ERROR", context)


class IRLoadError(KubeTranslateError):
    """Raised when a serialized IR document cannot be read or validated."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        context = {"path": str(path)} if path is not None else {}
        super().__init__(message, "IR_LOAD_ERROR", context)


class ConfigError(KubeTranslateError):
    """Raised when configuration input is invalid."""

    def __init__(self, message: str, field_name: str | None = None) -> None:
        context = {"field_name": field_name} if field_name else {}
        super().__init__(message, "CONFIG_ERROR", context)

    def get_recovery_hint(self) -> str:
        """Provide a helpful hint for fixing the configuration."""
        if "field_name" in self.context:
            return f"Check the value given for '{self.context['field_name']}'"
        return "Check the configuration file and command line flags"
