# pylint: disable=C0116
from pytest import mark, raises

from context import substitution, terms
from utils import i32, pair, static

a = terms.Var.ty("a")
b = terms.Var.ty("b")
c = terms.Var.ty("c")
i = terms.Var.lt("i")
k = terms.Var.lt("k")


@mark.substitution
@mark.parametrize(
    "given,expected",
    (
        ((i32,), ()),
        ((a,), (a,)),
        ((pair(b, pair(a, b)),), (b, a)),
        ((terms.Rigid.ref(i, a), pair(b, a)), (i, a, b)),
        ((terms.Relation(k, "<=", i),), (k, i)),
        ((terms.Relation(static, "<=", i),), (i,)),
        ((terms.QuantifiedScheme.exists((a,), (), (pair(a, b),)),), (b,)),
        (
            (
                terms.QuantifiedScheme.forall(
                    (i,), (terms.Relation(i, "<=", k),), (terms.Rigid.ref(i, c),)
                ),
            ),
            (c, k),
        ),
    ),
)
def test_free_vars(given, expected):
    assert substitution.free_vars(*given) == expected


@mark.substitution
def test_free_vars_rejects_non_terms():
    with raises(TypeError):
        substitution.free_vars("a")


@mark.substitution
@mark.parametrize(
    "term,mapping,expected",
    (
        (a, {a: i32}, i32),
        (a, {b: i32}, a),
        (i32, {a: b}, i32),
        (pair(a, b), {a: b, b: a}, pair(b, a)),
        (
            terms.Relation(i, "<=", k),
            {k: static},
            terms.Relation(i, "<=", static),
        ),
        (terms.Rigid.ref(i, a), {}, terms.Rigid.ref(i, a)),
        (
            terms.QuantifiedScheme.exists((a,), (), (pair(a, b),)),
            {a: i32, b: c},
            terms.QuantifiedScheme.exists((a,), (), (pair(a, c),)),
        ),
    ),
)
def test_substitute(term, mapping, expected):
    assert substitution.substitute(term, mapping) == expected


@mark.substitution
def test_substitute_avoids_capture():
    scheme = terms.QuantifiedScheme.exists((a,), (), (pair(a, b),))
    result = substitution.substitute(scheme, {b: a})
    renamed = terms.Var.ty("a'")
    assert result == terms.QuantifiedScheme.exists((renamed,), (), (pair(renamed, a),))


@mark.substitution
def test_substitute_avoids_capture_across_kinds():
    lifetime_a = terms.Var.lt("a")
    scheme = terms.QuantifiedScheme.exists(
        (lifetime_a,), (), (pair(b, terms.Rigid.ref(lifetime_a, i32)),)
    )
    result = substitution.substitute(scheme, {b: a})
    renamed = terms.Var.lt("a'")
    assert result == terms.QuantifiedScheme.exists(
        (renamed,), (), (pair(a, terms.Rigid.ref(renamed, i32)),)
    )


@mark.substitution
def test_substitute_primes_until_the_name_is_free():
    a_prime = terms.Var.ty("a'")
    scheme = terms.QuantifiedScheme.exists((a,), (), (pair(a, pair(a_prime, b)),))
    result = substitution.substitute(scheme, {b: a})
    renamed = terms.Var.ty("a''")
    assert result.variables == (renamed,)
    assert result.body == (pair(renamed, pair(a_prime, a)),)


@mark.substitution
def test_substitute_leaves_the_original_untouched():
    original = pair(a, b)
    substitution.substitute(original, {a: i32})
    assert original == pair(a, b)


@mark.substitution
def test_substitute_all():
    result = substitution.substitute_all((a, pair(a, b)), {a: i32})
    assert result == (i32, pair(i32, b))
