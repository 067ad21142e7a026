"""Result models for parsed interaction blocks.

Every parse produces exactly one of the variant classes below. They are frozen
pydantic models: built once per call and never mutated. `is_multi_select` is a
literal on each button variant, so it always agrees with the variant type.
"""

from enum import Enum
from typing import Annotated, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class InteractionType(str, Enum):
    """Wire names of the interaction variants."""

    TEXT_ONLY = "text_only"  # ?[%{{var}}...question]
    BUTTONS_ONLY = "buttons_only"  # ?[%{{var}} A|B]
    BUTTONS_WITH_TEXT = "buttons_with_text"  # ?[%{{var}} A|B|...question]
    BUTTONS_MULTI_SELECT = "buttons_multi_select"  # ?[%{{var}} A||B]
    BUTTONS_MULTI_WITH_TEXT = "buttons_multi_with_text"  # ?[%{{var}} A||B||...question]
    NON_ASSIGNMENT_BUTTON = "non_assignment_button"  # ?[Continue|Cancel]


class NameMode(str, Enum):
    """Which characters a %{{name}} binding may contain.

    strict: a letter or underscore, then letters, digits or underscores.
    permissive: whitespace-separated words; inner blanks are kept.
    """

    STRICT = "strict"
    PERMISSIVE = "permissive"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class Button(_Frozen):
    """A selectable option: the label shown and the value stored."""

    display: str
    value: str

    def __str__(self):
        if self.display == self.value:
            return self.display
        return f"{self.display}({self.value})"


Buttons = Annotated[Tuple[Button, ...], Field(min_length=1)]
VariableName = Annotated[str, Field(min_length=1)]


class InteractionResult(_Frozen):
    """Base for every successful parse."""

    @property
    def is_error(self) -> bool:
        return False


class TextOnly(InteractionResult):
    type: Literal[InteractionType.TEXT_ONLY] = InteractionType.TEXT_ONLY
    variable: VariableName
    question: str = ""


class ButtonsOnly(InteractionResult):
    type: Literal[InteractionType.BUTTONS_ONLY] = InteractionType.BUTTONS_ONLY
    variable: VariableName
    buttons: Buttons
    is_multi_select: Literal[False] = False


class ButtonsWithText(InteractionResult):
    type: Literal[InteractionType.BUTTONS_WITH_TEXT] = InteractionType.BUTTONS_WITH_TEXT
    variable: VariableName
    buttons: Buttons
    question: str
    is_multi_select: Literal[False] = False


class ButtonsMultiSelect(InteractionResult):
    type: Literal[InteractionType.BUTTONS_MULTI_SELECT] = (
        InteractionType.BUTTONS_MULTI_SELECT
    )
    variable: VariableName
    buttons: Buttons
    is_multi_select: Literal[True] = True


class ButtonsMultiWithText(InteractionResult):
    type: Literal[InteractionType.BUTTONS_MULTI_WITH_TEXT] = (
        InteractionType.BUTTONS_MULTI_WITH_TEXT
    )
    variable: VariableName
    buttons: Buttons
    question: str
    is_multi_select: Literal[True] = True


class NonAssignmentButton(InteractionResult):
    """Display-only action buttons; no variable receives the choice."""

    type: Literal[InteractionType.NON_ASSIGNMENT_BUTTON] = (
        InteractionType.NON_ASSIGNMENT_BUTTON
    )
    buttons: Buttons


class ErrorResult(_Frozen):
    """Returned instead of raising when a block cannot be parsed."""

    type: Literal[None] = None
    message: str

    @property
    def is_error(self) -> bool:
        return True


ParseResult = Union[
    TextOnly,
    ButtonsOnly,
    ButtonsWithText,
    ButtonsMultiSelect,
    ButtonsMultiWithText,
    NonAssignmentButton,
    ErrorResult,
]


class RemarkCompatibleResult(BaseModel):
    """Flattened projection handed to renderers as a property bag.

    Fields the source variant does not carry stay None and are dropped by
    `to_dict()`, which uses the camelCase keys renderers expect.
    """

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    variable_name: Optional[str] = None
    button_texts: Optional[List[str]] = None
    button_values: Optional[List[str]] = None
    placeholder: Optional[str] = None
    is_multi_select: Optional[bool] = None

    @classmethod
    def from_result(cls, result: InteractionResult) -> "RemarkCompatibleResult":
        fields = {}
        variable = getattr(result, "variable", None)
        if variable is not None:
            fields["variable_name"] = variable
        buttons = getattr(result, "buttons", None)
        if buttons is not None:
            fields["button_texts"] = [b.display for b in buttons]
            fields["button_values"] = [b.value for b in buttons]
        question = getattr(result, "question", None)
        if question is not None:
            fields["placeholder"] = question
        is_multi = getattr(result, "is_multi_select", None)
        if is_multi is not None:
            fields["is_multi_select"] = is_multi
        return cls(**fields)

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
