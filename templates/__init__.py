"""
Template Function Bridge.

Registry functions become helpers inside a Jinja2 template. A helper call
is bound (named or positional), type-checked, written into a shared
ExecutionContext, and the async function behind it is run to completion
before the template continues:

  - Argument resolution (qualified names win over bare names)
  - Type compatibility (numeric text is accepted for numeric parameters)
  - Blocking invocation (the single sync/async boundary)
  - Result unwrapping (chat message content → its text)
"""
from templates.errors import (
    FunctionHelperError, MissingRequiredParameterError, TypeMismatchError,
    ArityMismatchError, InvocationFailureError, DuplicateRegistrationError,
)
from templates.compatibility import is_compatible
from templates.arguments import ExecutionContext, resolve_arguments, bind_arguments
from templates.invoker import FunctionInvoker, run_blocking, unwrap_result
from templates.helpers import FunctionHelper, HelperHost, register_function_helpers
from templates.engine import TemplateEngine, FunctionPromptTemplate
