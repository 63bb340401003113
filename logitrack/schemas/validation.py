# logitrack/schemas/validation.py
"""
Turns pydantic ValidationErrors into FormValidationError.

Field-level errors are collected by pydantic in one pass. Whole-object rules
(refinements) only run when every field is valid, and attach their messages
to a field path of their own.
"""

from typing import Callable, TypeVar

from pydantic import BaseModel, ValidationError
from pydantic_core import PydanticCustomError

from logitrack.errors import FormValidationError

FormT = TypeVar("FormT", bound=BaseModel)
Refinement = Callable[[FormT], dict[str, list[str]]]


def form_error(message: str, **context) -> PydanticCustomError:
    """A field error whose message is shown as-is (no "Value error, " prefix)."""
    return PydanticCustomError("form", message, context or None)


def error_map(exc: ValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        path = ".".join(str(part) for part in err["loc"]) or "__root__"
        errors.setdefault(path, []).append(err["msg"])
    return errors


def validate_form(model: type[FormT], payload: dict, refinements: tuple[Refinement, ...] = ()) -> FormT:
    try:
        form = model.model_validate(payload)
    except ValidationError as e:
        raise FormValidationError(error_map(e))

    errors: dict[str, list[str]] = {}
    for refine in refinements:
        for path, messages in refine(form).items():
            errors.setdefault(path, []).extend(messages)
    if errors:
        raise FormValidationError(errors)
    return form
