from logging import DEBUG
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .config import ConfigData, DEFAULT_CONFIG
from .env import Declaration, Environment
from .errors import MalformedSchemeError
from .format import show_env, show_scheme
from .log import logger
from .names import NameGenerator
from .substitution import free_vars, substitute_all
from .terms import Quantifier, QuantifiedScheme, Relation, Term, Var

Instantiation = Tuple[Environment, Tuple[Term, ...]]


def check_scheme(
    scheme: QuantifiedScheme,
    env: Optional[Environment] = None,
    config: Optional[ConfigData] = None,
) -> None:
    """
    Make sure the variables, kinds and constraints of `scheme` fit
    together.

    Parameters
    ----------
    scheme: QuantifiedScheme
        The scheme to check. Schemes nested in its body are checked
        too.
    env: Optional[Environment] = None
        The environment the scheme will be instantiated in. Variables
        declared there may appear free in the scheme.
    config: Optional[ConfigData] = None
        Where the allowed relation symbols come from. If it's `None`,
        the environment's config (or the default one) is used.

    Raises
    ------
    MalformedSchemeError
        If a variable is bound twice, a constraint isn't a relation,
        a relation symbol is unknown, or a variable is used with the
        wrong kind or without being declared.
    """
    if config is None:
        config = DEFAULT_CONFIG if env is None else env.config
    _check_shape(scheme, config)

    bound_names = {var.name: var for var in scheme.variables}
    for var in free_vars(scheme):
        if var.name in bound_names:
            _malformed(
                scheme,
                f"{var!r} is used with the kind {var.kind!r} but bound with the kind "
                f"{bound_names[var.name].kind!r}",
            )
        if env is None or var not in env:
            _malformed(scheme, f"{var!r} is not declared by the scheme")


def _check_shape(scheme: QuantifiedScheme, config: ConfigData) -> None:
    seen: Set[str] = set()
    for var in scheme.variables:
        if not isinstance(var, Var):
            _malformed(scheme, f"{var!r} is not a variable")
        if var.name in seen:
            _malformed(scheme, f"{var!r} is bound more than once")
        seen.add(var.name)

    for constraint in scheme.constraints:
        if not isinstance(constraint, Relation):
            _malformed(scheme, f"the constraint {constraint!r} is not a relation")
        if constraint.symbol not in config.relation_symbols:
            _malformed(scheme, f'"{constraint.symbol}" is not a known relation')

    for term in scheme.body:
        if isinstance(term, QuantifiedScheme):
            _check_shape(term, config)


def _malformed(scheme: QuantifiedScheme, reason: str) -> None:
    logger.error("Malformed scheme (%s): %r", reason, scheme)
    raise MalformedSchemeError(scheme, reason)


def instantiate(
    env: Environment, scheme: QuantifiedScheme, names: NameGenerator
) -> Instantiation:
    """
    Replace the variables bound by `scheme` with fresh ones declared
    in `env`.

    Notes
    -----
    - Both universal and existential variables end up as plain
      declarations. The quantifier is only kept as the declaration's
      origin so that `extract_scheme` can quantify them the same way
      again.
    - The scheme is checked before any names are generated, so a
      malformed scheme leaves both `env` and `names` untouched.

    Parameters
    ----------
    env: Environment
        The environment to add the variables and constraints to.
    scheme: QuantifiedScheme
        The scheme being instantiated.
    names: NameGenerator
        Where the fresh names come from.

    Raises
    ------
    MalformedSchemeError
        If `scheme` doesn't pass `check_scheme`.

    Returns
    -------
    Tuple[Environment, Tuple[Term, ...]]
        The extended environment and the body of `scheme` rewritten to
        use the fresh variables.
    """
    check_scheme(scheme, env)
    if scheme.is_trivial():
        return env, scheme.body

    taken = set(env.names)
    mapping: Dict[Var, Term] = {}
    declarations: List[Declaration] = []
    for var in scheme.variables:
        fresh = names.fresh_var(var, taken)
        taken.add(fresh.name)
        mapping[var] = fresh
        declarations.append(Declaration(fresh, scheme.quantifier))

    constraints = substitute_all(scheme.constraints, mapping)
    body = substitute_all(scheme.body, mapping)
    logger.debug("Instantiated %r with %r", scheme, mapping)
    return env.extend(declarations, constraints), body


def extract_scheme(
    env: Environment, exported_terms: Iterable[Term]
) -> QuantifiedScheme:
    """
    Generalise `exported_terms` into a scheme over the unbound
    variables they depend on.

    Notes
    -----
    - Bound variables are replaced with their values, so only unbound
      variables get quantified.
    - Relations pull in every variable they connect to a retained
      variable. Relations that mention a bound variable are dropped.
    - The variables found directly in the terms come first, the most
      recently seen one first, then the ones pulled in by relations in
      the order they were found. Each relation is listed under its
      first variable, in that same order.
    - If all the variables were introduced existentially, the result
      is an `exists` scheme. If some were introduced universally, they
      are quantified by an outer `forall` scheme whose body is the
      `exists` scheme over the rest.

    Parameters
    ----------
    env: Environment
        Where the bindings and relations come from.
    exported_terms: Iterable[Term]
        The terms to generalise.

    Raises
    ------
    UnknownVariableError
        If one of the terms mentions an undeclared variable.

    Returns
    -------
    QuantifiedScheme
        A scheme that doesn't depend on `env` anymore.
    """
    exported_terms = tuple(exported_terms)
    for term in exported_terms:
        env.check_declared(term, context="extract_scheme")
    if logger.isEnabledFor(DEBUG):
        logger.debug("Extracting %r from:\n%s", exported_terms, show_env(env))

    body = tuple(env.resolve(term) for term in exported_terms)
    relations = [
        relation
        for relation in env.relations
        if not any(env.is_bound(var) for var in free_vars(relation))
    ]
    retained = _retained_vars(free_vars(*body), relations)
    constraints = _order_constraints(retained, relations)

    groups: Dict[Quantifier, List[Var]] = {quantifier: [] for quantifier in Quantifier}
    for var in retained:
        groups[env.origin_of(var)].append(var)
    scheme = _group(
        groups[Quantifier.FORALL], groups[Quantifier.EXISTS], constraints, body
    )
    if logger.isEnabledFor(DEBUG):
        logger.debug("Extracted scheme:\n%s", show_scheme(scheme))
    return scheme


def _retained_vars(seeds: Sequence[Var], relations: Sequence[Relation]) -> List[Var]:
    retained = list(reversed(seeds))
    retained_set = set(retained)
    changed = True
    while changed:
        changed = False
        for relation in relations:
            operands = free_vars(relation)
            if retained_set.isdisjoint(operands):
                continue
            for var in operands:
                if var not in retained_set:
                    retained.append(var)
                    retained_set.add(var)
                    changed = True
    return retained


def _order_constraints(
    retained: Sequence[Var], relations: Sequence[Relation]
) -> List[Relation]:
    position = {var: index for index, var in enumerate(retained)}
    kept = [
        relation
        for relation in relations
        if free_vars(relation) and all(var in position for var in free_vars(relation))
    ]
    return sorted(kept, key=lambda relation: position[free_vars(relation)[0]])


def _group(
    universals: Sequence[Var],
    existentials: Sequence[Var],
    constraints: Sequence[Relation],
    body: Sequence[Term],
) -> QuantifiedScheme:
    if not universals:
        return QuantifiedScheme.exists(existentials, constraints, body)
    if not existentials:
        return QuantifiedScheme.forall(universals, constraints, body)

    universal_set = set(universals)
    outer = [rel for rel in constraints if universal_set.issuperset(free_vars(rel))]
    inner = [rel for rel in constraints if not universal_set.issuperset(free_vars(rel))]
    return QuantifiedScheme.forall(
        universals, outer, (QuantifiedScheme.exists(existentials, inner, body),)
    )


def normalise(scheme: QuantifiedScheme, depth: int = 0) -> QuantifiedScheme:
    """
    Rename the bound variables of `scheme` to canonical names and put
    its variables and constraints in a canonical order.

    The variables are numbered by where they first appear (the body
    before the constraints) and unused variables go last, grouped by
    kind. Two schemes that only differ in the names and order of their
    variables or the order of their constraints normalise to the same
    scheme.
    """
    inner_terms = (*scheme.body, *scheme.constraints)
    used = [var for var in free_vars(*inner_terms) if var in scheme.variables]
    unused = sorted(
        (var for var in scheme.variables if var not in used),
        key=lambda var: var.kind.value,
    )
    renaming: Dict[Var, Term] = {
        var: Var(var.kind, f"_{depth}_{index}")
        for index, var in enumerate((*used, *unused))
    }
    body = tuple(
        normalise(term, depth + 1) if isinstance(term, QuantifiedScheme) else term
        for term in substitute_all(scheme.body, renaming)
    )
    constraints = sorted(substitute_all(scheme.constraints, renaming), key=repr)
    return QuantifiedScheme(
        scheme.quantifier,
        (renaming[var] for var in (*used, *unused)),
        constraints,
        body,
    )


def alpha_equivalent(left: QuantifiedScheme, right: QuantifiedScheme) -> bool:
    """
    Check if two schemes are equal up to renaming their bound variables
    and reordering their variables and constraints.
    """
    return normalise(left) == normalise(right)


def generalise(env: Environment, term: Term) -> Term:
    """
    Generalise a single term, returning it unchanged (after resolving
    its bindings) if there is nothing to quantify.
    """
    scheme = extract_scheme(env, (term,))
    return scheme if scheme.variables else scheme.body[0]
