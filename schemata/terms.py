# pylint: disable=R0903, C0115
from abc import ABC, abstractmethod
from enum import Enum, unique
from typing import Iterable, Optional, Tuple


@unique
class Kind(Enum):
    """The classification of a variable or constant."""

    TY = "Ty"
    LT = "Lt"

    def __repr__(self) -> str:
        return self.value


@unique
class Quantifier(Enum):
    """
    The binders a scheme can be built with. `FORALL` variables are
    chosen by the caller while `EXISTS` variables are chosen by the
    callee.
    """

    FORALL = "forall"
    EXISTS = "exists"

    def __repr__(self) -> str:
        return self.value


class Term(ABC):
    """
    This is the base class for everything that can be placed inside a
    scheme or an environment.

    Warnings
    --------
    - This class should not be used directly, instead use one of its
      subclasses.
    - Terms are used as dictionary keys so their attributes can only
      be set once, in `__init__`.
    """

    __slots__ = ()

    def __setattr__(self, name, value) -> None:
        if hasattr(self, name):
            raise AttributeError(f"{type(self).__name__}.{name} cannot be reassigned")
        super().__setattr__(name, value)

    @property
    @abstractmethod
    def kind(self) -> Optional[Kind]:
        """The kind of the values this term stands for, if any."""

    @abstractmethod
    def __eq__(self, other) -> bool:
        ...

    @abstractmethod
    def __hash__(self) -> int:
        ...

    @abstractmethod
    def __contains__(self, value) -> bool:
        """Check whether the variable `value` occurs free in `self`."""


class Var(Term):
    __slots__ = ("name", "var_kind")

    def __init__(self, kind: Kind, name: str) -> None:
        self.var_kind: Kind = kind
        self.name: str = name

    @classmethod
    def ty(cls, name: str) -> "Var":
        return cls(Kind.TY, name)

    @classmethod
    def lt(cls, name: str) -> "Var":
        return cls(Kind.LT, name)

    @property
    def kind(self) -> Kind:
        return self.var_kind

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, Var)
            and self.name == other.name
            and self.var_kind == other.var_kind
        )

    def __hash__(self) -> int:
        return hash((Var, self.var_kind, self.name))

    def __contains__(self, value) -> bool:
        return self == value

    def __repr__(self) -> str:
        return self.name


class Const(Term):
    """A named parameter that is always in scope, like `i32` or `static`."""

    __slots__ = ("const_kind", "name")

    def __init__(self, kind: Kind, name: str) -> None:
        self.const_kind: Kind = kind
        self.name: str = name

    @classmethod
    def ty(cls, name: str) -> "Const":
        return cls(Kind.TY, name)

    @classmethod
    def lt(cls, name: str) -> "Const":
        return cls(Kind.LT, name)

    @property
    def kind(self) -> Kind:
        return self.const_kind

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, Const)
            and self.name == other.name
            and self.const_kind == other.const_kind
        )

    def __hash__(self) -> int:
        return hash((Const, self.const_kind, self.name))

    def __contains__(self, value) -> bool:
        return False

    def __repr__(self) -> str:
        return self.name


class Rigid(Term):
    __slots__ = ("args", "name")

    REF_NAME = "&"

    def __init__(self, name: str, args: Iterable[Term] = ()) -> None:
        self.name: str = name
        self.args: Tuple[Term, ...] = tuple(args)

    @classmethod
    def ref(cls, lifetime: Term, referent: Term) -> "Rigid":
        """Build the reference type `&'lifetime referent`."""
        return cls(cls.REF_NAME, (lifetime, referent))

    @property
    def kind(self) -> Kind:
        return Kind.TY

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, Rigid)
            and self.name == other.name
            and self.args == other.args
        )

    def __hash__(self) -> int:
        return hash((Rigid, self.name, self.args))

    def __contains__(self, value) -> bool:
        return any(value in arg for arg in self.args)

    def __repr__(self) -> str:
        if self.name == self.REF_NAME and len(self.args) == 2:
            return f"&{self.args[0]!r} {self.args[1]!r}"
        if not self.args:
            return self.name
        return f"{self.name}[{', '.join(map(repr, self.args))}]"


class Relation(Term):
    """A directional fact between two operands, like `I <= K`."""

    __slots__ = ("left", "right", "symbol")

    def __init__(self, left: Term, symbol: str, right: Term) -> None:
        self.left: Term = left
        self.symbol: str = symbol
        self.right: Term = right

    @property
    def kind(self) -> None:
        return None

    @property
    def operands(self) -> Tuple[Term, Term]:
        return (self.left, self.right)

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, Relation)
            and self.symbol == other.symbol
            and self.left == other.left
            and self.right == other.right
        )

    def __hash__(self) -> int:
        return hash((Relation, self.left, self.symbol, self.right))

    def __contains__(self, value) -> bool:
        return value in self.left or value in self.right

    def __repr__(self) -> str:
        return f"{self.left!r} {self.symbol} {self.right!r}"


class QuantifiedScheme(Term):
    """
    A quantified package of terms: `quantifier (variables) implies
    (constraints) => (body)`.

    Attributes
    ----------
    quantifier: Quantifier
        Whether the variables are universal or existential.
    variables: Tuple[Var, ...]
        The kinded variables bound by this scheme, in order.
    constraints: Tuple[Relation, ...]
        The relations implied to hold among the variables.
    body: Tuple[Term, ...]
        The terms the scheme generalises over. It can be empty when
        only the constraints matter.
    """

    __slots__ = ("body", "constraints", "quantifier", "variables")

    def __init__(
        self,
        quantifier: Quantifier,
        variables: Iterable[Var],
        constraints: Iterable[Relation] = (),
        body: Iterable[Term] = (),
    ) -> None:
        self.quantifier: Quantifier = quantifier
        self.variables: Tuple[Var, ...] = tuple(variables)
        self.constraints: Tuple[Relation, ...] = tuple(constraints)
        self.body: Tuple[Term, ...] = tuple(body)

    @classmethod
    def forall(cls, variables, constraints=(), body=()) -> "QuantifiedScheme":
        return cls(Quantifier.FORALL, variables, constraints, body)

    @classmethod
    def exists(cls, variables, constraints=(), body=()) -> "QuantifiedScheme":
        return cls(Quantifier.EXISTS, variables, constraints, body)

    @property
    def kind(self) -> None:
        return None

    def is_trivial(self) -> bool:
        """Check if instantiating this scheme would change nothing."""
        return not self.variables and not self.constraints

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, QuantifiedScheme)
            and self.quantifier == other.quantifier
            and self.variables == other.variables
            and self.constraints == other.constraints
            and self.body == other.body
        )

    def __hash__(self) -> int:
        return hash(
            (
                QuantifiedScheme,
                self.quantifier,
                self.variables,
                self.constraints,
                self.body,
            )
        )

    def __contains__(self, value) -> bool:
        if value in self.variables:
            return False
        return any(value in term for term in (*self.constraints, *self.body))

    def __repr__(self) -> str:
        variables = ", ".join(f"{var.kind!r} {var!r}" for var in self.variables)
        constraints = ", ".join(map(repr, self.constraints))
        body = ", ".join(map(repr, self.body))
        return (
            f"{self.quantifier.value} ({variables}) "
            f"implies ({constraints}) => ({body})"
        )
