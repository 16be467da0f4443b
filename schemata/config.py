from dataclasses import dataclass
from logging import DEBUG
from pathlib import Path
from typing import AbstractSet


@dataclass(eq=False, frozen=True, repr=False)
class ConfigData:
    """
    All of the options that change how environments and schemes are
    built.

    Attributes
    ----------
    fresh_separator: str
        The text placed between a variable's original name and the
        counter when a fresh name is generated.
    relation_symbols: AbstractSet[str]
        The relation symbols that `relate` and scheme constraints may
        use.
    log_level: int
        The level passed to the package logger.
    log_file: Path
        Where the package logger writes its records.
    """

    fresh_separator: str
    relation_symbols: AbstractSet[str]
    log_level: int
    log_file: Path

    def __or__(self, other):
        if isinstance(other, ConfigData):
            return ConfigData(
                other.fresh_separator,
                self.relation_symbols | other.relation_symbols,
                min(self.log_level, other.log_level),
                other.log_file,
            )
        if isinstance(other, dict):
            return ConfigData(
                other.get("fresh_separator", self.fresh_separator),
                frozenset(other.get("relation_symbols", self.relation_symbols)),
                other.get("log_level", self.log_level),
                Path(other.get("log_file", self.log_file)),
            )
        return NotImplemented


DEFAULT_CONFIG = ConfigData(
    "_",
    frozenset(("<=", ">=", "==")),
    DEBUG,
    Path(__file__).parent.parent.joinpath("schemata.log").resolve(),
)
