from .config import ConfigData, DEFAULT_CONFIG
from .env import bind, Binding, Declaration, Environment, Fact, relate, VarStatus
from .errors import (
    CircularBindingError,
    DoubleBindingError,
    DuplicateDeclarationError,
    KindMismatchError,
    MalformedSchemeError,
    SchemataError,
    UnknownRelationError,
    UnknownVariableError,
)
from .log import configure_logger
from .names import NameGenerator
from .schemes import (
    alpha_equivalent,
    check_scheme,
    extract_scheme,
    generalise,
    instantiate,
    normalise,
)
from .substitution import free_vars, substitute
from .terms import Const, Kind, Quantifier, QuantifiedScheme, Relation, Rigid, Term, Var

__all__ = (
    "alpha_equivalent",
    "bind",
    "Binding",
    "check_scheme",
    "CircularBindingError",
    "ConfigData",
    "configure_logger",
    "Const",
    "Declaration",
    "DEFAULT_CONFIG",
    "DoubleBindingError",
    "DuplicateDeclarationError",
    "Environment",
    "extract_scheme",
    "Fact",
    "free_vars",
    "generalise",
    "instantiate",
    "Kind",
    "KindMismatchError",
    "MalformedSchemeError",
    "NameGenerator",
    "normalise",
    "Quantifier",
    "QuantifiedScheme",
    "relate",
    "Relation",
    "Rigid",
    "SchemataError",
    "substitute",
    "Term",
    "UnknownRelationError",
    "UnknownVariableError",
    "Var",
    "VarStatus",
)
