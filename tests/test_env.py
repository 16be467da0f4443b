# pylint: disable=C0116
from pytest import mark, raises

from context import config, env, errors, terms
from utils import i32, pair, static

a = terms.Var.ty("a")
b = terms.Var.ty("b")
i = terms.Var.lt("i")
k = terms.Var.lt("k")


def make_env():
    result = env.Environment.empty()
    for var in (a, b, i, k):
        result = result.declare(var)
    return result


@mark.env
def test_empty_env():
    empty = env.Environment.empty()
    assert empty.declarations == ()
    assert empty.facts == ()
    assert a not in empty


@mark.env
def test_declare():
    sample = env.Environment.empty().declare(a, terms.Quantifier.FORALL)
    assert a in sample
    assert sample.variables == (a,)
    assert sample.origin_of(a) is terms.Quantifier.FORALL
    assert sample.status(a) is env.VarStatus.FREE
    assert sample.lookup("a") == a
    assert sample.lookup("z") is None


@mark.env
def test_declare_defaults_to_exists():
    sample = env.Environment.empty().declare(a)
    assert sample.origin_of(a) is terms.Quantifier.EXISTS


@mark.env
@mark.parametrize("var", (a, terms.Var.lt("a")))
def test_declare_twice(var):
    sample = env.Environment.empty().declare(a)
    with raises(errors.DuplicateDeclarationError):
        sample.declare(var)


@mark.env
def test_bind():
    original = make_env()
    result = original.bind(a, terms.Rigid.ref(i, i32))
    assert result.status(a) is env.VarStatus.BOUND
    assert result.binding_of(a) == terms.Rigid.ref(i, i32)
    assert result.is_bound(a)
    assert result.bindings == {a: terms.Rigid.ref(i, i32)}
    assert result.facts[-1] == env.Binding(a, terms.Rigid.ref(i, i32))
    assert original.binding_of(a) is None
    assert original.facts == ()


@mark.env
def test_bind_function_matches_method():
    sample = make_env()
    assert env.bind(sample, a, i32) == sample.bind(a, i32)


@mark.env
@mark.parametrize(
    "var,value",
    (
        (terms.Var.ty("z"), i32),
        (terms.Var.lt("a"), static),
        (a, terms.Rigid.ref(terms.Var.lt("z"), i32)),
        (i32, i32),
        (terms.Rigid.ref(i, i32), terms.Rigid.ref(i, i32)),
    ),
)
def test_bind_unknown_variable(var, value):
    sample = make_env()
    with raises(errors.UnknownVariableError):
        sample.bind(var, value)
    assert sample.facts == ()


@mark.env
def test_bind_twice():
    sample = make_env().bind(a, i32)
    with raises(errors.DoubleBindingError) as info:
        sample.bind(a, pair(i32, i32))
    assert info.value.old_value == i32
    assert sample.binding_of(a) == i32


@mark.env
@mark.parametrize(
    "var,value",
    (
        (a, static),
        (i, i32),
        (i, terms.Rigid.ref(k, i32)),
        (a, terms.Relation(i, "<=", k)),
    ),
)
def test_bind_wrong_kind(var, value):
    with raises(errors.KindMismatchError):
        make_env().bind(var, value)


@mark.env
def test_bind_circular():
    sample = make_env()
    with raises(errors.CircularBindingError):
        sample.bind(a, terms.Rigid("Vec", (a,)))

    indirect = sample.bind(a, terms.Rigid.ref(i, b))
    with raises(errors.CircularBindingError):
        indirect.bind(b, terms.Rigid("Vec", (a,)))


@mark.env
def test_relate():
    original = make_env()
    result = original.relate(i, "<=", k)
    assert result.relations == (terms.Relation(i, "<=", k),)
    assert result.status(i) is env.VarStatus.CONSTRAINED
    assert result.status(k) is env.VarStatus.CONSTRAINED
    assert result.relations_of(k) == (terms.Relation(i, "<=", k),)
    assert original.status(i) is env.VarStatus.FREE


@mark.env
def test_relate_function_matches_method():
    sample = make_env()
    assert env.relate(sample, i, "<=", static) == sample.relate(i, "<=", static)


@mark.env
def test_relate_accepts_cycles():
    sample = make_env().relate(i, "<=", k).relate(k, "<=", i).relate(i, "<=", i)
    assert len(sample.relations) == 3


@mark.env
def test_relate_twice_records_once():
    once = make_env().relate(i, "<=", k)
    twice = once.relate(i, "<=", k)
    assert twice is once
    assert twice.relations == (terms.Relation(i, "<=", k),)
    assert once.relate(k, "<=", i).relations == (
        terms.Relation(i, "<=", k),
        terms.Relation(k, "<=", i),
    )


@mark.env
def test_extend_skips_known_facts():
    sample = make_env().relate(i, "<=", k)
    result = sample.extend(
        (),
        (
            terms.Relation(i, "<=", k),
            terms.Relation(k, "<=", static),
            terms.Relation(k, "<=", static),
        ),
    )
    assert result.facts == (
        terms.Relation(i, "<=", k),
        terms.Relation(k, "<=", static),
    )


@mark.env
@mark.parametrize(
    "left,right",
    ((terms.Var.lt("z"), k), (i, terms.Var.lt("z")), (terms.Var.ty("i"), k)),
)
def test_relate_unknown_variable(left, right):
    with raises(errors.UnknownVariableError):
        make_env().relate(left, "<=", right)


@mark.env
def test_relate_unknown_symbol():
    with raises(errors.UnknownRelationError):
        make_env().relate(i, "<<", k)


@mark.env
def test_relate_uses_configured_symbols():
    custom = config.DEFAULT_CONFIG | {"relation_symbols": ["outlives"]}
    sample = env.Environment.empty(custom).declare(i).declare(k)
    assert sample.relate(i, "outlives", k).relations
    with raises(errors.UnknownRelationError):
        sample.relate(i, "<=", k)


@mark.env
def test_resolve_follows_bindings():
    sample = make_env().bind(a, terms.Rigid.ref(i, b)).bind(b, i32)
    assert sample.resolve(pair(a, b)) == pair(terms.Rigid.ref(i, i32), i32)
    assert sample.resolve(k) == k


@mark.env
def test_facts_only_grow():
    steps = [make_env()]
    steps.append(steps[-1].relate(i, "<=", k))
    steps.append(steps[-1].bind(a, i32))
    steps.append(steps[-1].declare(terms.Var.ty("c")))
    for before, after in zip(steps, steps[1:]):
        assert after.facts[: len(before.facts)] == before.facts
        assert after.declarations[: len(before.declarations)] == before.declarations


@mark.env
def test_queries_reject_undeclared_variables():
    sample = make_env()
    undeclared = terms.Var.ty("z")
    for query in (
        sample.status,
        sample.binding_of,
        sample.relations_of,
        sample.origin_of,
        sample.is_bound,
    ):
        with raises(errors.UnknownVariableError):
            query(undeclared)


@mark.env
def test_env_equality():
    assert make_env() == make_env()
    assert hash(make_env()) == hash(make_env())
    assert make_env() != make_env().relate(i, "<=", k)
