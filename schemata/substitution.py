from typing import AbstractSet, Dict, Iterable, List, Mapping, Tuple

from .log import logger
from .terms import Const, QuantifiedScheme, Relation, Rigid, Term, Var

Substitution = Mapping[Var, Term]


def free_vars(*terms: Term) -> Tuple[Var, ...]:
    """
    Find all the free variables inside `terms`.

    Parameters
    ----------
    *terms: Term
        The terms containing free variables.

    Returns
    -------
    Tuple[Var, ...]
        Every free variable, listed once, in the order it was first
        seen when scanning `terms` left to right and depth first.
    """
    found: Dict[Var, None] = {}
    for term in terms:
        _collect(term, frozenset(), found)
    return tuple(found)


def _collect(term: Term, bound: AbstractSet[Var], found: Dict[Var, None]) -> None:
    if isinstance(term, Var):
        if term not in bound:
            found.setdefault(term)
    elif isinstance(term, Const):
        return
    elif isinstance(term, Rigid):
        for arg in term.args:
            _collect(arg, bound, found)
    elif isinstance(term, Relation):
        _collect(term.left, bound, found)
        _collect(term.right, bound, found)
    elif isinstance(term, QuantifiedScheme):
        inner_bound = bound | frozenset(term.variables)
        for inner in (*term.body, *term.constraints):
            _collect(inner, inner_bound, found)
    else:
        raise TypeError(f"{term} is an invalid subtype of Term.")


def substitute(term: Term, substitution: Substitution) -> Term:
    """
    Replace the free variables in `term` with the terms in
    `substitution`.

    Notes
    -----
    - Variables bound by a nested scheme are never replaced. If a
      replacement mentions a variable that a nested scheme binds, the
      bound variable is renamed first so it doesn't capture it.

    Parameters
    ----------
    term: Term
        The term containing variables to replace.
    substitution: Substitution
        The mapping used to replace the free variables.

    Returns
    -------
    Term
        A new term with the replacements made.
    """
    if not substitution or isinstance(term, Const):
        return term
    if isinstance(term, Var):
        return substitution.get(term, term)
    if isinstance(term, Rigid):
        return Rigid(term.name, (substitute(arg, substitution) for arg in term.args))
    if isinstance(term, Relation):
        return Relation(
            substitute(term.left, substitution),
            term.symbol,
            substitute(term.right, substitution),
        )
    if isinstance(term, QuantifiedScheme):
        return _substitute_scheme(term, substitution)
    raise TypeError(f"{term} is an invalid subtype of Term.")


def substitute_all(terms: Iterable[Term], substitution: Substitution) -> Tuple:
    """Run `substitute` on every term in `terms`."""
    return tuple(substitute(term, substitution) for term in terms)


def _substitute_scheme(
    scheme: QuantifiedScheme, substitution: Substitution
) -> QuantifiedScheme:
    inner_terms = (*scheme.body, *scheme.constraints)
    relevant = {
        var: value
        for var, value in substitution.items()
        if var not in scheme.variables and any(var in term for term in inner_terms)
    }
    if not relevant:
        return scheme

    incoming = {var.name for var in free_vars(*relevant.values())}
    renaming: Dict[Var, Term] = {}
    if incoming.intersection(var.name for var in scheme.variables):
        taken = set(incoming)
        taken.update(var.name for var in free_vars(*inner_terms))
        taken.update(var.name for var in scheme.variables)
        for var in scheme.variables:
            if var.name in incoming:
                renamed = _prime(var, taken)
                taken.add(renamed.name)
                renaming[var] = renamed
        logger.debug("Renamed bound variables to avoid capture: %r", renaming)

    full_sub = {**relevant, **renaming}
    variables: List[Var] = [renaming.get(var, var) for var in scheme.variables]
    return QuantifiedScheme(
        scheme.quantifier,
        variables,
        substitute_all(scheme.constraints, full_sub),
        substitute_all(scheme.body, full_sub),
    )


def _prime(var: Var, taken: AbstractSet[str]) -> Var:
    name = f"{var.name}'"
    while name in taken:
        name = f"{name}'"
    return Var(var.kind, name)
