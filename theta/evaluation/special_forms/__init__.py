"""Registry of special forms for the Theta evaluator.

Maps names to SpecialForm callables that receive their argument nodes
unevaluated. `theta.builtin.env_builtin.register` installs them into the root
environment, where the evaluator resolves them like any other callee.
"""

from theta.types.callables import SpecialForm
from theta.evaluation.special_forms.quote_forms import (
    quote_form, substitute_form, bquote_form,
    QUOTE_FORMALS, SUBSTITUTE_FORMALS, BQUOTE_FORMALS,
)
from theta.evaluation.special_forms.if_form import if_form, IF_FORMALS
from theta.evaluation.special_forms.function_form import function_form, FUNCTION_FORMALS
from theta.evaluation.special_forms.assign_forms import assign_form, super_assign_form
from theta.evaluation.special_forms.block_forms import brace_form, paren_form
from theta.evaluation.special_forms.logic_forms import and_form, or_form
from theta.evaluation.special_forms.frame_forms import (
    missing_form, sys_call_form, match_call_form, MISSING_FORMALS,
)

SPECIAL_FORMS = {
    "quote": SpecialForm("quote", quote_form, QUOTE_FORMALS),
    "substitute": SpecialForm("substitute", substitute_form, SUBSTITUTE_FORMALS),
    "bquote": SpecialForm("bquote", bquote_form, BQUOTE_FORMALS),
    "if": SpecialForm("if", if_form, IF_FORMALS),
    "function": SpecialForm("function", function_form, FUNCTION_FORMALS),
    "<-": SpecialForm("<-", assign_form),
    "=": SpecialForm("=", assign_form),
    "<<-": SpecialForm("<<-", super_assign_form),
    "{": SpecialForm("{", brace_form),
    "(": SpecialForm("(", paren_form),
    "&&": SpecialForm("&&", and_form),
    "||": SpecialForm("||", or_form),
    "missing": SpecialForm("missing", missing_form, MISSING_FORMALS),
    "sys.call": SpecialForm("sys.call", sys_call_form),
    "match.call": SpecialForm("match.call", match_call_form),
}
