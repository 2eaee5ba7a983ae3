from __future__ import annotations

from dataclasses import dataclass

from .exit_codes import ERR_CONFIG, ERR_INTERNAL, ERR_PREREQ, ERR_STEP, ERR_TIMEOUT


@dataclass
class ScriptError(Exception):
    message: str
    code: int = ERR_INTERNAL
    kind: str = "generic_error"

    def __str__(self) -> str:
        return self.message


@dataclass
class ConfigError(ScriptError):
    code: int = ERR_CONFIG
    kind: str = "config"


@dataclass
class DependencyMissingError(ScriptError):
    code: int = ERR_PREREQ
    kind: str = "dependency_missing"


@dataclass
class ConvergenceTimeoutError(ScriptError):
    code: int = ERR_TIMEOUT
    kind: str = "convergence_timeout"


@dataclass
class StepCommandError(ScriptError):
    code: int = ERR_STEP
    kind: str = "step_command"
