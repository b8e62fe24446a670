"""Call standardization: match supplied arguments to formal parameters.

Matching runs three passes, each over whatever the previous passes left:

1. exact: an argument named exactly like a formal binds to it;
2. partial: a named argument that is a prefix of exactly one remaining formal
   binds to it (formals after `...` never match partially);
3. positional: unnamed arguments fill the remaining formals before `...`
   left to right.

Whatever is left goes to `...` when the formals have one, in call order,
and is an arity error otherwise.
"""

from __future__ import annotations

import logging
from typing import Any, NamedTuple, Optional, Sequence, TypeVar

from theta.types.call import Arg, Call
from theta.types.errors import ThetaAmbiguousArgumentMatch, ThetaArityError
from theta.types.formals import VARIADIC, ParameterList
from theta.types.symbol import MISSING

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ArgumentMatch(NamedTuple):
    matched: dict[str, Any]
    dots: list[tuple[Optional[str], Any]]


def _describe(name: Optional[str], item) -> str:
    return f"{name} = {item}" if name is not None else str(item)


def match_arguments(formals: ParameterList, supplied: Sequence[tuple[Optional[str], T]]) -> ArgumentMatch:
    """Match (name, item) pairs against `formals`.

    Items are opaque here: argument nodes when standardizing, promises when
    binding a closure call.
    """
    names = formals.names
    variadic = formals.variadic_index
    used = [False] * len(supplied)
    bound: dict[str, int] = {}

    # 1) exact names
    for formal in names:
        if formal == VARIADIC:
            continue
        hits = [i for i, (name, _) in enumerate(supplied) if name == formal]
        if len(hits) > 1:
            raise ThetaAmbiguousArgumentMatch(
                formal, [formal],
                f"formal argument '{formal}' matched by multiple actual arguments",
            )
        if hits:
            bound[formal] = hits[0]
            used[hits[0]] = True

    # Formals still open to partial and positional matching
    before_dots = [
        f for i, f in enumerate(names)
        if f != VARIADIC and f not in bound and (variadic is None or i < variadic)
    ]

    # 2) unique prefixes
    for i, (name, _) in enumerate(supplied):
        if used[i] or name is None:
            continue
        candidates = [f for f in before_dots if f.startswith(name)]
        if len(candidates) > 1:
            raise ThetaAmbiguousArgumentMatch(name, candidates)
        if candidates:
            formal = candidates[0]
            if formal in bound:
                raise ThetaAmbiguousArgumentMatch(
                    name, [formal],
                    f"formal argument '{formal}' matched by multiple actual arguments",
                )
            bound[formal] = i
            used[i] = True

    # 3) positions
    open_formals = iter([f for f in before_dots if f not in bound])
    dots: list[int] = []
    unused: list[int] = []
    for i, (name, _) in enumerate(supplied):
        if used[i]:
            continue
        if name is None:
            formal = next(open_formals, None)
            if formal is not None:
                bound[formal] = i
                used[i] = True
                continue
        if variadic is not None:
            dots.append(i)
        else:
            unused.append(i)

    if unused:
        described = [_describe(*supplied[i]) for i in unused]
        raise ThetaArityError(
            f"unused argument{'s' if len(described) > 1 else ''} ({', '.join(described)})",
            described,
        )

    return ArgumentMatch(
        {f: supplied[i][1] for f, i in bound.items()},
        [supplied[i] for i in dots],
    )


def standardize(call: Call, formals: ParameterList) -> Call:
    """Rewrite `call` so every matched argument carries its formal's full name.

    Arguments come out in formal order, with anything collected by `...`
    spliced at the position of `...` in its original relative order. Formals
    that were not supplied are omitted. The head is kept as is.
    """
    matching = match_arguments(formals, [(a.name, a.value) for a in call.args])
    out: list[Arg] = []
    dots_done = False
    for p in formals:
        if p.name == VARIADIC:
            if not dots_done:
                out.extend(Arg(name, value) for name, value in matching.dots)
                dots_done = True
        elif p.name in matching.matched:
            out.append(Arg(p.name, matching.matched[p.name]))
    result = call.with_args(out)
    logger.debug("standardized %s -> %s", call, result)
    return result


def match_form_args(args: Sequence[Arg], formals: ParameterList, form: str) -> dict[str, Any]:
    """Match a special form's argument nodes to its formals; required formals must be supplied."""
    matching = match_arguments(formals, [(a.name, a.value) for a in args])
    for p in formals:
        if p.name != VARIADIC and p.default is MISSING and p.name not in matching.matched:
            raise ThetaArityError(f"{form}: argument '{p.name}' is missing, with no default", [p.name])
    return matching.matched
