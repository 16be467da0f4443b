from typing import List

from .env import Binding, Declaration, Environment, Fact
from .terms import QuantifiedScheme, Relation

INDENT = "    "


def show_declaration(declaration: Declaration) -> str:
    """Represent a declaration as `(Kind name)`."""
    return f"({declaration.var.kind!r} {declaration.var!r})"


def show_fact(fact: Fact) -> str:
    """
    Turn a fact into a string.

    Parameters
    ----------
    fact: Fact
        Either a binding or a relation.

    Returns
    -------
    str
        `var := value` for bindings and `left symbol right` for
        relations.
    """
    if isinstance(fact, Binding):
        return f"{fact.var!r} := {fact.value!r}"
    if isinstance(fact, Relation):
        return repr(fact)
    raise TypeError(f"{type(fact)} is not a valid fact.")


def show_scheme(scheme: QuantifiedScheme, indent: int = 0) -> str:
    """
    Lay a scheme out over several lines with nested schemes indented
    one level deeper than the scheme containing them.
    """
    prefix = INDENT * indent
    variables = " ".join(
        f"({var.kind!r} {var!r})" for var in scheme.variables
    )
    lines: List[str] = [f"{prefix}{scheme.quantifier.value} ({variables})"]
    if scheme.constraints:
        constraints = ", ".join(map(repr, scheme.constraints))
        lines.append(f"{prefix}{INDENT}implies ({constraints})")
    for term in scheme.body:
        if isinstance(term, QuantifiedScheme):
            lines.append(show_scheme(term, indent + 1))
        else:
            lines.append(f"{prefix}{INDENT}=> {term!r}")
    return "\n".join(lines)


def show_env(env: Environment) -> str:
    """
    Represent the whole environment: the declarations on the first
    line and then one fact per line.
    """
    declarations = " ".join(map(show_declaration, env.declarations))
    lines = [f"env ({declarations})"]
    lines.extend(f"{INDENT}{show_fact(fact)}" for fact in env.facts)
    return "\n".join(lines)
