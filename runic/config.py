"""Registry of console variables with a small configuration-file parser."""

from __future__ import annotations

import functools
import logging
import re
from pathlib import Path

from .cvar import DEFAULT_DESCRIPTION, CVar, CVarDescriptor

MAX_CONFIG_SIZE = 32768

_WHITESPACE = frozenset(" \t\n")
_TERMINALS = frozenset(".;=#\xff")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)


class ConfigError(Exception):
    """Raised when a configuration cannot be read or a command is malformed."""


def _atof(text: str) -> float:
    """Parse the longest numeric prefix of ``text``; 0.0 if there is none."""
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


class _Tokenizer:
    """Splits configuration text into names, values and single-character terminals."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def next_token(self) -> str:
        """Return the next token, or an empty string at end of input."""
        chars: list[str] = []
        text = self._text
        while self._pos < len(text):
            char = text[self._pos]
            if char in _TERMINALS:
                if not chars:
                    self._pos += 1
                    return char
                return "".join(chars)
            if char not in _WHITESPACE:
                chars.append(char)
            self._pos += 1
        return "".join(chars)


class Config:
    """A set of console variables, loadable from and savable to disk."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger if logger is not None else logging.getLogger("runic.config")
        self._values: dict[str, CVar] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def load_file(self, path: str | Path) -> None:
        """Apply the assignments in the file at ``path`` to registered variables.

        Raises ConfigError if the file cannot be read or is too large.
        """
        self.logger.info("Loading file [%s]. Please Stand By...", path)
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            self.logger.info("FAIL")
            self.logger.error("FILE NOT FOUND")
            raise ConfigError(f"cannot read configuration file {path}") from exc
        try:
            self.load_text(text)
        except ConfigError:
            self.logger.info("FAIL")
            raise
        self.logger.info("DONE")

    def load_text(self, text: str) -> None:
        """Apply ``name = value;`` assignments in ``text`` to registered variables.

        Unknown names are reported with a warning and skipped. Raises
        ConfigError once the names read exceed the maximum configuration size.
        """
        tokens = _Tokenizer(text)
        name = ""
        char_count = 0
        for token in iter(tokens.next_token, ""):
            char_count += len(token)
            if char_count > MAX_CONFIG_SIZE:
                message = (
                    "Configuation loader has exceeded the maximum configuration size! "
                    f"({char_count})"
                )
                self.logger.error(message)
                raise ConfigError(message)

            if token == "=":
                value = self._read_value(tokens)
                cvar = self.get(name)
                if cvar is None:
                    self.logger.warning("Could not find CVar %s", name)
                else:
                    cvar.set(_atof(value))
                self.logger.debug("%s=%s was successfully read", name, value)
                name = ""
            else:
                name += token

    def _read_value(self, tokens: _Tokenizer) -> str:
        parts: list[str] = []
        for token in iter(tokens.next_token, ""):
            if token == ";":
                return "".join(parts)
            parts.append(token)
        self.logger.error("Error Reading Value!")
        return "".join(parts)

    def register(
        self,
        name: str,
        value: float = 0,
        archive: bool = False,
        description: str = DEFAULT_DESCRIPTION,
    ) -> CVar:
        """Register a variable, or update the flags of an existing one.

        New values are truncated to whole numbers. An existing variable keeps
        its value; only its archive flag and description are replaced.
        """
        existing = self.get(name)
        if existing is not None:
            self.logger.warning(
                "CVar already exists with the name %s! Returning Existing Value of: %f",
                name,
                existing.value,
            )
            existing.archive = archive
            existing.description = description
            return existing
        cvar = CVar(name, float(int(value)), archive, description)
        self._values[name] = cvar
        return cvar

    def register_descriptor(self, descriptor: CVarDescriptor) -> CVar:
        """Register a variable from a descriptor."""
        return self.register(
            descriptor.name,
            descriptor.value,
            descriptor.archivable,
            descriptor.description,
        )

    def get(self, name: str) -> CVar | None:
        """Return the variable called ``name``, or None."""
        return self._values.get(name)

    def parse_input(self, line: str) -> str:
        """Run a console command of the form ``name``, ``name value`` or ``name = value``.

        Returns the variable's description for a bare name, otherwise a status
        message. Raises ConfigError for an empty command.
        """
        tokens = [token for token in line.split(" ") if token]
        if not tokens:
            raise ConfigError("empty command")

        name = tokens[0]
        cvar = self.get(name)
        if cvar is None:
            message = f"CVar {name} is invalid!"
            self.logger.info(message)
            return message

        if len(tokens) == 1:
            return cvar.describe()

        if len(tokens) > 2 and tokens[1] == "=":
            cvar.set(_atof(tokens[2]))
        else:
            cvar.set(_atof(tokens[1]))
        message = f"{name} successfully set"
        self.logger.info(message)
        return message

    def dump(self) -> str:
        """Return the archivable variables as configuration text."""
        return "".join(
            f"{name} = {cvar.value:g};\n"
            for name, cvar in self._values.items()
            if cvar.archive
        )

    def save(self, path: str | Path) -> None:
        """Write the archivable variables to ``path``."""
        self.logger.info("Writing Config to Disk...")
        Path(path).write_text(self.dump(), encoding="utf-8")
        self.logger.info("DONE")

    def report(self) -> list[str]:
        """Log a table of all variables and return its lines."""
        lines = ["============ CONFIG CONTENTS ============"]
        lines.extend(
            f"\t{name} :: {cvar.value:f} :: {int(cvar.archive)}"
            for name, cvar in self._values.items()
        )
        lines.append("=========================================")
        for line in lines:
            self.logger.info(line)
        return lines


@functools.lru_cache(maxsize=None)
def get_instance() -> Config:
    """Return the process-wide shared configuration."""
    return Config()