from theta.types.node import Node, NodeKind
from theta.types.constant import Constant
from theta.types.symbol import Symbol, MISSING, is_missing
from theta.types.call import Arg, Call
from theta.types.formals import Param, ParameterList, VARIADIC
from theta.types.kinds import (
    kind_of,
    identical,
    as_node,
    sym,
    const,
    call,
    formals,
)
from theta.types.null import Null
from theta.types.environment import Environment, CallFrame
from theta.types.promise import Promise
from theta.types.closure import Closure
from theta.types.callables import Primitive, SpecialForm, is_callable
