"""Parameter declarations and command schemas.

A :class:`CommandSchema` is the explicit, first-class description of a
command that the host reads once at registration. It is frozen: bound values
for an invocation live elsewhere (see :mod:`cmdunit.engine.binding`).
"""

from __future__ import annotations

import re
from typing import Any, Self

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from cmdunit.domain.errors import ConfigurationError

_PARAM_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_TOKEN_RE = re.compile(r"^[A-Za-z][A-Za-z0-9]*$")


def _as_configuration_error(
    subject: str, exc: ValidationError, *, command: str | None = None
) -> ConfigurationError:
    messages = "; ".join(err["msg"] for err in exc.errors())
    return ConfigurationError(f"Invalid {subject}: {messages}", command=command)


class ParameterDeclaration(BaseModel):
    """A bindable input: name, optional position, and mandatoriness.

    Raises :class:`ConfigurationError` (not ``ValidationError``) when
    constructed with invalid values.
    """

    model_config = {"frozen": True}

    name: str
    position: int | None = Field(default=None, ge=0)
    mandatory: bool = False
    help: str = ""

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            subject = f"parameter declaration {data.get('name')!r}"
            raise _as_configuration_error(subject, exc) from exc

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not _PARAM_NAME_RE.match(value):
            msg = f"Invalid parameter name {value!r}"
            raise ValueError(msg)
        return value

    @property
    def is_positional(self) -> bool:
        return self.position is not None


class CommandSchema(BaseModel):
    """The declared shape of a command.

    Invariants (checked on construction):

    - at most one parameter claims any given position;
    - parameter names are unique, compared case-insensitively;
    - verb and noun are non-empty alphanumeric tokens.

    A violation raises :class:`ConfigurationError`, whether the schema is
    built with :meth:`build` or constructed directly.
    """

    model_config = {"frozen": True}

    verb: str
    noun: str
    parameters: tuple[ParameterDeclaration, ...] = ()
    summary: str = ""

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            command = f"{data.get('verb')}-{data.get('noun')}"
            raise _as_configuration_error(f"schema for {command}", exc, command=command) from exc

    @field_validator("verb", "noun")
    @classmethod
    def _check_token(cls, value: str) -> str:
        if not _TOKEN_RE.match(value):
            msg = f"Invalid command name token {value!r}"
            raise ValueError(msg)
        return value

    @model_validator(mode="after")
    def _check_parameters(self) -> Self:
        names: dict[str, str] = {}
        positions: dict[int, str] = {}
        for param in self.parameters:
            folded = param.name.casefold()
            if folded in names:
                msg = f"Parameter {param.name!r} is declared more than once"
                raise ValueError(msg)
            names[folded] = param.name
            if param.position is None:
                continue
            if param.position in positions:
                msg = (
                    f"Parameters {positions[param.position]!r} and {param.name!r} "
                    f"both claim position {param.position}"
                )
                raise ValueError(msg)
            positions[param.position] = param.name
        return self

    @classmethod
    def build(
        cls,
        verb: str,
        noun: str,
        *parameters: ParameterDeclaration,
        summary: str = "",
    ) -> CommandSchema:
        """Positional shorthand for ``CommandSchema(verb=..., noun=..., parameters=...)``."""
        return cls(verb=verb, noun=noun, parameters=parameters, summary=summary)

    @property
    def name(self) -> str:
        """The externally visible ``<Verb>-<Noun>`` command name."""
        return f"{self.verb}-{self.noun}"

    def lookup(self, name: str) -> ParameterDeclaration | None:
        """Find a declaration by name, ignoring case."""
        folded = name.casefold()
        for param in self.parameters:
            if param.name.casefold() == folded:
                return param
        return None

    def at_position(self, position: int) -> ParameterDeclaration | None:
        """Find the declaration claiming *position*, if any."""
        for param in self.parameters:
            if param.position == position:
                return param
        return None

    def mandatory(self) -> list[ParameterDeclaration]:
        return [p for p in self.parameters if p.mandatory]


def declare(
    name: str,
    *,
    position: int | None = None,
    mandatory: bool = False,
    help: str = "",
) -> ParameterDeclaration:
    """Shorthand for building a ParameterDeclaration.

    Raises:
        ConfigurationError: If the declaration itself is invalid.
    """
    return ParameterDeclaration(name=name, position=position, mandatory=mandatory, help=help)
