from enum import auto, Enum
from json import dumps
from textwrap import wrap
from typing import Iterable, Optional, TypedDict

from .log import logger

LINE_WIDTH = 87

wrap_text = lambda string: "\n".join(
    wrap(
        string,
        width=LINE_WIDTH,
        tabsize=4,
        drop_whitespace=False,
        replace_whitespace=False,
    )
)


class ResultTypes(Enum):
    """The different ways that an error message can be formed."""

    ALERT_MESSAGE = auto()
    JSON = auto()
    LONG_MESSAGE = auto()


class JSONResult(TypedDict, total=False):
    error_name: str


def to_json(error: Exception) -> str:
    """
    Report an error in JSON format.

    Parameters
    ----------
    error: Exception
        The error to be reported on.

    Returns
    -------
    str
        A JSON string containing all the error data.
    """
    return (
        dumps(error.to_json())
        if isinstance(error, SchemataError)
        else handle_other_exceptions(error, ResultTypes.JSON)
    )


def to_alert_message(error: Exception) -> str:
    """
    Report an error in a single short sentence, for things like editor
    tooltips.

    Parameters
    ----------
    error: Exception
        The error to be reported on.

    Returns
    -------
    str
        The short message.
    """
    if isinstance(error, SchemataError):
        return error.to_alert_message()
    return handle_other_exceptions(error, ResultTypes.ALERT_MESSAGE)


def to_long_message(error: Exception) -> str:
    """
    Generate a longer explanation of the error, framed so that it can
    be printed straight to a terminal.

    Parameters
    ----------
    error: Exception
        The error to be reported on.

    Returns
    -------
    str
        A beautified string containing all the error data.
    """
    if isinstance(error, SchemataError):
        return beautify(error.to_long_message())
    return handle_other_exceptions(error, ResultTypes.LONG_MESSAGE)


def handle_other_exceptions(error: Exception, result_type: ResultTypes) -> str:
    """
    Generate a message for exceptions outside the `SchemataError`
    hierarchy. The message follows the same rules as the function
    corresponding to `result_type`.

    Parameters
    ----------
    error: Exception
        The exception that the message is based on.
    result_type: ResultTypes
        What rules the message should conform to.

    Returns
    -------
    str
        A message based on the exception passed in.
    """
    logger.error(
        "Unknown error condition: %s( %s )",
        error.__class__.__name__,
        ", ".join(map(str, error.args)),
        exc_info=True,
    )
    if result_type == ResultTypes.JSON:
        return dumps(
            {
                "error_name": "internal_error",
                "actual_error": error.__class__.__name__,
            }
        )
    if result_type == ResultTypes.ALERT_MESSAGE:
        return wrap_text(
            "Internal Error: Encountered unknown error condition: "
            f'"{type(error).__name__}".'
        )
    return beautify(
        wrap_text(
            f"Internal Error: Encountered unknown error condition: "
            f'"{error.__class__.__name__}". Please check the log file for more '
            "details."
        )
    )


def beautify(message: str) -> str:
    """
    Make an error message look good before printing it to the terminal.

    Parameters
    ----------
    message: str
        The plain error message before formatting.

    Returns
    -------
    str
        The error message after formatting.
    """
    if LINE_WIDTH < 24:
        head = "Error Encountered:"
        tail = "=" * len(head)
    else:
        head = " Error Encountered ".center(LINE_WIDTH, "=")
        tail = "=" * LINE_WIDTH
    return f"\n{head}\n\n{message}\n\n{tail}\n"


class SchemataError(Exception):
    """
    The base exception for the entire library. It should never be
    raised directly, one of its subclasses should be used instead.

    Every subclass is a defect in the calling derivation rather than a
    transient condition, so none of them should be retried.

    Methods
    -------
    to_alert_message()
        Generate a short description of the error.
    to_long_message()
        Generate a longer explanation of the error.
    to_json()
        Generate an error report in JSON format.
    """

    name = "schemata_error"

    def to_alert_message(self) -> str:
        """Generate a short, single sentence description of the error."""
        return "An error occurred while working with an environment."

    def to_long_message(self) -> str:
        """
        Generate a longer explanation of the error. If possible, the
        message should have some suggestions on how to fix the problem.
        """
        return wrap_text(self.to_alert_message())

    def to_json(self) -> JSONResult:
        """
        Generate an error report as a `dict` that can be converted into
        a JSON object. It should contain enough data to rebuild the
        long message.
        """
        return {"error_name": self.name}

    def __str__(self) -> str:
        return self.to_alert_message()


class UnknownVariableError(SchemataError):
    """
    This is an error where an operation mentions a variable that the
    environment never declared.
    """

    name = "unknown_variable"

    def __init__(self, var, context: Optional[str] = None) -> None:
        super().__init__(var)
        self.var = var
        self.context: Optional[str] = context

    def to_json(self):
        return {
            "error_name": self.name,
            "variable": repr(self.var),
            "kind": repr(self.var.kind),
            "context": self.context,
        }

    def to_alert_message(self):
        return f'The variable "{self.var!r}" has not been declared.'

    def to_long_message(self):
        where = "" if self.context is None else f" while running `{self.context}`"
        return wrap_text(
            f'The variable "{self.var!r}" (of kind {self.var.kind!r}) was used{where} '
            "but it is not declared in the environment. Variables have to be "
            "introduced by instantiating a scheme or by declaring them before "
            "they can be bound, related or exported."
        )


class DoubleBindingError(SchemataError):
    """
    This is an error where a variable that already has a value is given
    another one.
    """

    name = "double_binding"

    def __init__(self, var, old_value, new_value) -> None:
        super().__init__(var, old_value, new_value)
        self.var = var
        self.old_value = old_value
        self.new_value = new_value

    def to_json(self):
        return {
            "error_name": self.name,
            "variable": repr(self.var),
            "old_value": repr(self.old_value),
            "new_value": repr(self.new_value),
        }

    def to_alert_message(self):
        return f'The variable "{self.var!r}" is already bound to {self.old_value!r}.'

    def to_long_message(self):
        return wrap_text(
            f'The variable "{self.var!r}" is already bound to {self.old_value!r} so '
            f"it cannot also be bound to {self.new_value!r}. Bindings are never "
            "overwritten since the earlier steps of the derivation depend on them."
        )


class MalformedSchemeError(SchemataError):
    """
    This is an error where a scheme's variables, kinds and constraints
    don't fit together, e.g. a constraint mentions a variable that is
    declared nowhere.
    """

    name = "malformed_scheme"

    def __init__(self, scheme, reason: str) -> None:
        super().__init__(scheme, reason)
        self.scheme = scheme
        self.reason: str = reason

    def to_json(self):
        return {
            "error_name": self.name,
            "scheme": repr(self.scheme),
            "reason": self.reason,
        }

    def to_alert_message(self):
        return f"This scheme is malformed: {self.reason}."

    def to_long_message(self):
        return "\n\n".join(
            (
                f"    {self.scheme!r}",
                wrap_text(
                    f"The scheme above cannot be instantiated because {self.reason}. "
                    "Nothing was added to the environment."
                ),
            )
        )


class KindMismatchError(SchemataError):
    """
    This is an error where a variable is bound to a value of another
    kind, like a lifetime variable being bound to a type.
    """

    name = "kind_mismatch"

    def __init__(self, var, value) -> None:
        super().__init__(var, value)
        self.var = var
        self.value = value

    def to_json(self):
        return {
            "error_name": self.name,
            "variable": repr(self.var),
            "expected_kind": repr(self.var.kind),
            "value": repr(self.value),
            "actual_kind": repr(self.value.kind),
        }

    def to_alert_message(self):
        return (
            f'The variable "{self.var!r}" has the kind {self.var.kind!r} but '
            f"{self.value!r} has the kind {self.value.kind!r}."
        )


class CircularBindingError(SchemataError):
    """
    This is an error where a variable would be bound to a value that
    (after resolving the other bindings) contains the variable itself.
    """

    name = "circular_binding"

    def __init__(self, var, value) -> None:
        super().__init__(var, value)
        self.var = var
        self.value = value

    def to_json(self):
        return {
            "error_name": self.name,
            "variable": repr(self.var),
            "value": repr(self.value),
        }

    def to_alert_message(self):
        return f'Cannot bind "{self.var!r}" to {self.value!r} because it is circular.'

    def to_long_message(self):
        return wrap_text(
            f'Binding "{self.var!r}" to {self.value!r} would make it infinitely '
            f'recursive because "{self.var!r}" occurs inside the value once the '
            "other bindings are taken into account."
        )


class UnknownRelationError(SchemataError):
    """This is an error where a relation uses an unsupported symbol."""

    name = "unknown_relation"

    def __init__(self, symbol: str, allowed: Iterable[str]) -> None:
        super().__init__(symbol)
        self.symbol: str = symbol
        self.allowed = tuple(sorted(allowed))

    def to_json(self):
        return {
            "error_name": self.name,
            "symbol": self.symbol,
            "allowed": list(self.allowed),
        }

    def to_alert_message(self):
        return (
            f'The relation symbol "{self.symbol}" is not one of: '
            f"{', '.join(self.allowed)}."
        )


class DuplicateDeclarationError(SchemataError):
    """
    This is an error where a variable is declared in an environment
    that already declares it.
    """

    name = "duplicate_declaration"

    def __init__(self, var) -> None:
        super().__init__(var)
        self.var = var

    def to_json(self):
        return {"error_name": self.name, "variable": repr(self.var)}

    def to_alert_message(self):
        return f'The variable "{self.var!r}" is already declared.'

