# pylint: disable=W0612
from context import env, names, schemes, terms

i32 = terms.Const.ty("i32")
static = terms.Const.lt("static")


def pair(first, second):
    return terms.Rigid("Pair", (first, second))


def instantiate_vars(environment, quantifier, *variables, generator):
    """
    Instantiate a scheme whose body is just its own variables so the
    fresh variables come back in order.
    """
    scheme = terms.QuantifiedScheme(quantifier, variables, (), variables)
    return schemes.instantiate(environment, scheme, generator)


def build_reference_env():
    """
    Instantiate `forall (Ty T)`, `exists (Ty A, Ty B)` and
    `exists (Lt I, Lt J, Lt K, Lt L)` then bind `A := &I i32`,
    `B := &J i32` and relate `I <= K`, `J <= K` and `K <= L`.
    """
    generator = names.NameGenerator()
    result = env.Environment.empty()
    result, (t,) = instantiate_vars(
        result, terms.Quantifier.FORALL, terms.Var.ty("T"), generator=generator
    )
    result, (a, b) = instantiate_vars(
        result,
        terms.Quantifier.EXISTS,
        terms.Var.ty("A"),
        terms.Var.ty("B"),
        generator=generator,
    )
    result, (i, j, k, l) = instantiate_vars(
        result,
        terms.Quantifier.EXISTS,
        *map(terms.Var.lt, "IJKL"),
        generator=generator,
    )
    result = result.bind(a, terms.Rigid.ref(i, i32))
    result = result.bind(b, terms.Rigid.ref(j, i32))
    result = result.relate(i, "<=", k)
    result = result.relate(j, "<=", k)
    result = result.relate(k, "<=", l)
    return result, {"T": t, "A": a, "B": b, "I": i, "J": j, "K": k, "L": l}
