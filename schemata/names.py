from typing import AbstractSet, Optional

from .config import ConfigData, DEFAULT_CONFIG
from .log import configure_logger
from .terms import Var


class NameGenerator:
    """
    The source of fresh variable names.

    Every name it issues ends in a counter that only goes up, so no two
    names from the same generator are ever equal. Generators are passed
    around explicitly so that tests can predict the exact names.

    Attributes
    ----------
    prefix: str
        Text added to the front of every generated name.
    separator: str
        The text between the original name and the counter.
    """

    def __init__(self, prefix: str = "", config: Optional[ConfigData] = None) -> None:
        if config is None:
            config = DEFAULT_CONFIG
        else:
            configure_logger(config)
        self.prefix: str = prefix
        self.separator: str = config.fresh_separator
        self._counter: int = 0

    @property
    def issued(self) -> int:
        """How many names have been generated so far."""
        return self._counter

    def fresh_name(self, base: str) -> str:
        """Generate a name that was never generated before."""
        name = f"{self.prefix}{base}{self.separator}{self._counter}"
        self._counter += 1
        return name

    def fresh_var(self, var: Var, taken: AbstractSet[str] = frozenset()) -> Var:
        """
        Make a new variable with the same kind as `var`.

        Parameters
        ----------
        var: Var
            The variable whose name and kind the new one is based on.
        taken: AbstractSet[str]
            Names that the new variable must not use.

        Returns
        -------
        Var
            A variable whose name is neither in `taken` nor was issued
            before by this generator.
        """
        name = self.fresh_name(var.name)
        while name in taken:
            name = self.fresh_name(var.name)
        return Var(var.kind, name)

    def reset(self) -> None:
        """Start counting from zero again."""
        self._counter = 0
