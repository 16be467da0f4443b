from enum import Enum, unique
from typing import (
    AbstractSet,
    Dict,
    Iterable,
    Mapping,
    NamedTuple,
    Optional,
    Tuple,
    Union,
)

from .config import ConfigData, DEFAULT_CONFIG
from .errors import (
    CircularBindingError,
    DoubleBindingError,
    DuplicateDeclarationError,
    KindMismatchError,
    UnknownRelationError,
    UnknownVariableError,
)
from .log import configure_logger, logger
from .substitution import free_vars, substitute
from .terms import Quantifier, Relation, Term, Var

Declaration = NamedTuple("Declaration", var=Var, origin=Quantifier)
Binding = NamedTuple("Binding", var=Var, value=Term)
Fact = Union[Binding, Relation]


@unique
class VarStatus(Enum):
    """What an environment knows about a declared variable."""

    BOUND = "bound"
    CONSTRAINED = "constrained"
    FREE = "free"


class Environment:
    """
    An append-only record of declared variables and the facts known
    about them.

    Environments are never changed in place. Every operation that adds
    something returns a new environment, so holding on to an old one is
    enough to go back to an earlier point in a derivation.

    Attributes
    ----------
    declarations: Tuple[Declaration, ...]
        The declared variables in the order they were introduced along
        with the quantifier that introduced each of them.
    facts: Tuple[Fact, ...]
        The bindings and relations in the order they were added.
    config: ConfigData
        The options used when checking new facts.
    """

    __slots__ = ("_bindings", "_names", "_origins", "config", "declarations", "facts")

    def __init__(
        self,
        declarations: Iterable[Declaration] = (),
        facts: Iterable[Fact] = (),
        config: Optional[ConfigData] = None,
    ) -> None:
        self.declarations: Tuple[Declaration, ...] = tuple(declarations)
        self.facts: Tuple[Fact, ...] = tuple(facts)
        if config is None:
            config = DEFAULT_CONFIG
        else:
            configure_logger(config)
        self.config: ConfigData = config
        self._origins: Dict[Var, Quantifier] = {
            declaration.var: declaration.origin for declaration in self.declarations
        }
        self._names: Dict[str, Var] = {var.name: var for var in self._origins}
        self._bindings: Dict[Var, Term] = {
            fact.var: fact.value for fact in self.facts if isinstance(fact, Binding)
        }

    @classmethod
    def empty(cls, config: Optional[ConfigData] = None) -> "Environment":
        """Create an environment with no declarations and no facts."""
        return cls((), (), config)

    @property
    def variables(self) -> Tuple[Var, ...]:
        """All of the declared variables in declaration order."""
        return tuple(declaration.var for declaration in self.declarations)

    @property
    def names(self) -> AbstractSet[str]:
        """The names of all the declared variables."""
        return self._names.keys()

    @property
    def bindings(self) -> Mapping[Var, Term]:
        return dict(self._bindings)

    @property
    def relations(self) -> Tuple[Relation, ...]:
        return tuple(fact for fact in self.facts if isinstance(fact, Relation))

    def lookup(self, name: str) -> Optional[Var]:
        """Find the declared variable called `name`, if there is one."""
        return self._names.get(name)

    def origin_of(self, var: Var) -> Quantifier:
        """Get the quantifier that introduced `var`."""
        self.check_declared(var, context="origin_of")
        return self._origins[var]

    def binding_of(self, var: Var) -> Optional[Term]:
        """Get the value `var` is bound to or `None` if it is unbound."""
        self.check_declared(var, context="binding_of")
        return self._bindings.get(var)

    def relations_of(self, var: Var) -> Tuple[Relation, ...]:
        """Get every relation that mentions `var` on either side."""
        self.check_declared(var, context="relations_of")
        return tuple(relation for relation in self.relations if var in relation)

    def status(self, var: Var) -> VarStatus:
        """
        Check whether `var` is bound, only constrained by relations or
        completely free.

        Raises
        ------
        UnknownVariableError
            If `var` isn't declared in this environment.
        """
        if self.binding_of(var) is not None:
            return VarStatus.BOUND
        if self.relations_of(var):
            return VarStatus.CONSTRAINED
        return VarStatus.FREE

    def is_bound(self, var: Var) -> bool:
        self.check_declared(var, context="is_bound")
        return var in self._bindings

    def check_declared(self, term: Term, context: Optional[str] = None) -> None:
        """
        Make sure every free variable in `term` is declared here.

        Raises
        ------
        UnknownVariableError
            The error for the first undeclared variable found.
        """
        for var in free_vars(term):
            if var not in self._origins:
                logger.error("Undeclared variable %r used in %s", var, context)
                raise UnknownVariableError(var, context)

    def resolve(self, term: Term) -> Term:
        """
        Replace every bound variable in `term` with its value until no
        bound variables are left.
        """
        result = term
        while any(var in self._bindings for var in free_vars(result)):
            result = substitute(result, self._bindings)
        return result

    def extend(
        self, declarations: Iterable[Declaration] = (), facts: Iterable[Fact] = ()
    ) -> "Environment":
        """
        Make a new environment with more declarations and facts added
        to the end. Facts that are already known are skipped.

        Warnings
        --------
        - Only the names of the new declarations are checked, so use
          `declare`, `bind` and `relate` unless the facts have already
          been validated.
        """
        declarations = tuple(declarations)
        facts = tuple(fact for fact in dict.fromkeys(facts) if fact not in self.facts)
        seen = set(self._names)
        for declaration in declarations:
            if declaration.var.name in seen:
                logger.error("The variable %r is already declared", declaration.var)
                raise DuplicateDeclarationError(declaration.var)
            seen.add(declaration.var.name)
        return Environment(
            (*self.declarations, *declarations),
            (*self.facts, *facts),
            self.config,
        )

    def declare(
        self, var: Var, origin: Quantifier = Quantifier.EXISTS
    ) -> "Environment":
        """Add a new free variable to the environment."""
        logger.debug("Declaring %r (%s)", var, origin.value)
        return self.extend((Declaration(var, origin),))

    def bind(self, var: Var, value: Term) -> "Environment":
        """
        Record that `var` stands for `value` from now on.

        Parameters
        ----------
        var: Var
            The declared and still unbound variable.
        value: Term
            What `var` stands for. It has to have the same kind as
            `var` and all its free variables have to be declared.

        Raises
        ------
        UnknownVariableError
            If `var` or a variable in `value` isn't declared.
        DoubleBindingError
            If `var` is already bound.
        KindMismatchError
            If `value` has a different kind from `var`.
        CircularBindingError
            If `value` contains `var` once the other bindings are
            resolved.

        Returns
        -------
        Environment
            The environment with the binding added.
        """
        if not isinstance(var, Var) or var not in self._origins:
            logger.error("Attempted to bind %r which is not a declared variable", var)
            raise UnknownVariableError(var, "bind")
        self.check_declared(value, context="bind")
        if var in self._bindings:
            logger.error("Attempted to rebind %r to %r", var, value)
            raise DoubleBindingError(var, self._bindings[var], value)
        if value.kind != var.kind:
            logger.error("Kind mismatch binding %r to %r", var, value)
            raise KindMismatchError(var, value)
        if var in self.resolve(value):
            logger.error("Circularity detected binding %r to %r", var, value)
            raise CircularBindingError(var, value)

        logger.debug("Binding %r := %r", var, value)
        return Environment(
            self.declarations, (*self.facts, Binding(var, value)), self.config
        )

    def relate(self, left: Term, symbol: str, right: Term) -> "Environment":
        """
        Record the relation `left symbol right`.

        Notes
        -----
        - No consistency checks are made, cyclic and contradictory
          relations are recorded like any other relation.
        - Relating the same operands with the same symbol twice only
          records the relation once.

        Raises
        ------
        UnknownRelationError
            If `symbol` isn't one of the configured relation symbols.
        UnknownVariableError
            If either operand mentions an undeclared variable.

        Returns
        -------
        Environment
            The environment with the relation added.
        """
        if symbol not in self.config.relation_symbols:
            logger.error("Unknown relation symbol: %s", symbol)
            raise UnknownRelationError(symbol, self.config.relation_symbols)
        relation = Relation(left, symbol, right)
        self.check_declared(relation, context="relate")
        if relation in self.facts:
            logger.debug("%r is already known", relation)
            return self
        logger.debug("Relating %r", relation)
        return Environment(self.declarations, (*self.facts, relation), self.config)

    def __contains__(self, var) -> bool:
        return var in self._origins

    def __eq__(self, other) -> bool:
        if isinstance(other, Environment):
            return (
                self.declarations == other.declarations and self.facts == other.facts
            )
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.declarations, self.facts))

    def __repr__(self) -> str:
        return f"Environment({self.declarations!r}, {self.facts!r})"


def bind(env: Environment, var: Var, value: Term) -> Environment:
    """Add the binding `var := value` to `env`."""
    return env.bind(var, value)


def relate(env: Environment, left: Term, symbol: str, right: Term) -> Environment:
    """Add the relation `left symbol right` to `env`."""
    return env.relate(left, symbol, right)
