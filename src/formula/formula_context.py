"""Evaluation contexts that supply identifier and function bindings to the interpreter."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Mapping

from formula.formula_error import FormulaEvalError, FormulaUnsupportedFeatureError
from formula.formula_value import FormulaValue, to_formula_value


class FormulaEvaluationContext(ABC):
    """
    Capability the interpreter uses for everything the core language cannot
    evaluate on its own: looking up identifiers and calling functions.
    """

    @abstractmethod
    def resolve(self, name: str) -> FormulaValue:
        """
        Look up the value bound to an identifier.

        Raises:
            FormulaEvalError: If the name cannot be resolved
        """

    @abstractmethod
    def invoke(self, name: str, args: List[FormulaValue]) -> FormulaValue:
        """
        Call a function with already evaluated arguments.

        Raises:
            FormulaEvalError: If the function is unknown or the call fails
        """


class FormulaNoBindingsContext(FormulaEvaluationContext):
    """Context with no bindings at all; every identifier and call is rejected."""

    def resolve(self, name: str) -> FormulaValue:
        raise FormulaUnsupportedFeatureError(
            message=f"Cannot resolve identifier: '{name}'",
            context="No evaluation context was supplied, so identifiers have no values",
            suggestion="Evaluate with a context that binds this name"
        )

    def invoke(self, name: str, args: List[FormulaValue]) -> FormulaValue:
        raise FormulaUnsupportedFeatureError(
            message=f"Cannot call function: '{name}'",
            context="No evaluation context was supplied, so no functions are available",
            suggestion="Evaluate with a context that provides this function"
        )


class FormulaDictContext(FormulaEvaluationContext):
    """
    Context backed by plain dictionaries.

    Variables may be formula values or native Python values (bool, int, float,
    str).  Functions are Python callables that receive formula values and may
    return either kind of value.
    """

    def __init__(
        self,
        variables: Mapping[str, Any] | None = None,
        functions: Mapping[str, Callable[..., Any]] | None = None
    ) -> None:
        """
        Initialize the context.

        Args:
            variables: Identifier bindings
            functions: Function bindings, called with one argument per formula argument
        """
        self._variables: Dict[str, FormulaValue] = {
            name: to_formula_value(value) for name, value in (variables or {}).items()
        }
        self._functions: Dict[str, Callable[..., Any]] = dict(functions or {})

    def resolve(self, name: str) -> FormulaValue:
        if name not in self._variables:
            available = ", ".join(f"'{n}'" for n in sorted(self._variables)) or "none"
            raise FormulaUnsupportedFeatureError(
                message=f"Undefined identifier: '{name}'",
                context=f"Available identifiers: {available}",
                suggestion=f"Check spelling or bind '{name}' in the evaluation context"
            )

        return self._variables[name]

    def invoke(self, name: str, args: List[FormulaValue]) -> FormulaValue:
        function = self._functions.get(name)
        if function is None:
            available = ", ".join(f"'{n}'" for n in sorted(self._functions)) or "none"
            raise FormulaUnsupportedFeatureError(
                message=f"Undefined function: '{name}'",
                context=f"Available functions: {available}",
                suggestion=f"Check spelling or provide '{name}' in the evaluation context"
            )

        result = function(*args)
        try:
            return to_formula_value(result)

        except TypeError as e:
            raise FormulaEvalError(
                message=f"Function '{name}' returned an unsupported value: {type(result).__name__}",
                expected="A formula value, bool, int, float or str",
                suggestion=f"Make '{name}' return a number, string or boolean"
            ) from e

    def __repr__(self) -> str:
        return f"FormulaDictContext(variables={sorted(self._variables)}, functions={sorted(self._functions)})"
