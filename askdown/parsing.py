"""Layered parser for ?[...] interaction blocks.

Layer 1 validates the ?[...] envelope, layer 2 detects an optional %{{name}}
binding, layer 3 resolves the | / || separator, splits the content into
buttons and assembles one of the result variants in `models`.

    ?[%{{var}}...question]                  text input
    ?[%{{var}} A|B]                         single-select buttons
    ?[%{{var}} A|B|...question]             buttons plus text input
    ?[%{{var}} A||B]                        multi-select buttons
    ?[%{{var}} A||B||...question]           multi-select plus text input
    ?[%{{var}} Submit]                      single button
    ?[Continue|Cancel]                      non-assignment buttons

Every function here is pure; an `InteractionParser` only remembers its
variable-name mode and can be shared between threads.
"""

import logging
import re
from typing import List, NamedTuple, Optional, Tuple

from decouple import config as env_config
from lark import Lark, Transformer
from lark.exceptions import LarkError
from pydantic import ValidationError

from .errors import AskdownError, InvalidEnvelopeError, MalformedBlockError
from .models import (Button, ButtonsMultiSelect, ButtonsMultiWithText,
                     ButtonsOnly, ButtonsWithText, ErrorResult,
                     InteractionResult, InteractionType, NameMode,
                     NonAssignmentButton, ParseResult,
                     RemarkCompatibleResult, TextOnly)

logger = logging.getLogger(__name__)

DEFAULT_NAME_MODE = env_config(
    "ASKDOWN_VARIABLE_NAMES", default=NameMode.STRICT.value, cast=NameMode
)

SINGLE_PIPE = "|"
DOUBLE_PIPE = "||"
ELLIPSIS = "..."
VALUE_SEPARATOR = "//"
BINDING_OPEN = "%{{"

# ?[content] not followed by "(" -- ?[text](url) is a link, not a block
INTERACTION_PATTERN = re.compile(r"\?\[([^\]]*)\](?!\()")

# everything before the first ... and everything after it
ELLIPSIS_PATTERN = re.compile(r"(.*?)\.\.\.(.*)", re.S)

# Display//value, split on the first //
BUTTON_VALUE_PATTERN = re.compile(r"(.+?)//(.+)", re.S)

# a | that is not part of ||
SINGLE_PIPE_SPLIT = re.compile(r"(?<!\|)\|(?!\|)")

NAME_PATTERNS = {
    NameMode.STRICT: r"[^\W\d]\w*",
    NameMode.PERMISSIVE: r"\w+(?:[ \t]+\w+)*",
}

# Mini-grammar for the leading %{{name}} marker. NAME is filled in per mode.
_binding_grammar = r"""
start: binding REMAINDER?

binding: "%{{" NAME "}}"

NAME: /__NAME__/
REMAINDER: /.+/s

%import common.WS
%ignore WS
"""


class BindingTransformer(Transformer):
    """Turns a binding parse tree into (name, remainder)."""

    def binding(self, items):
        return str(items[0]).strip()

    def start(self, items):
        remainder = str(items[1]) if len(items) > 1 else ""
        return items[0], remainder.strip()


_binding_parsers = {
    mode: Lark(_binding_grammar.replace("__NAME__", pattern), parser="lalr")
    for mode, pattern in NAME_PATTERNS.items()
}


class InteractionMatch(NamedTuple):
    """An interaction block located inside larger text."""

    start: int
    end: int
    inner: str
    result: InteractionResult

    def remark_properties(self) -> dict:
        return RemarkCompatibleResult.from_result(self.result).to_dict()


# Layer 1


def extract_block(content: str) -> Optional[str]:
    """Return the inner content of a ?[...] block, or None if not a block.

    The block must make up the whole (trimmed) input.
    """
    content = content.strip()
    match = INTERACTION_PATTERN.search(content)
    if not match:
        return None
    if match.group(0).strip() != content:
        return None
    return match.group(1)


# Layer 2


def detect_binding(
    inner: str, name_mode: NameMode = NameMode.STRICT
) -> Tuple[bool, Optional[str], str]:
    """Split a leading %{{name}} marker from the rest of the block.

    Returns (True, name, remainder) with both trimmed, or
    (False, None, inner) unchanged when there is no valid marker. A malformed
    marker is not an error; the caller treats the content as display buttons.
    """
    if not inner.startswith(BINDING_OPEN):
        return False, None, inner

    parser = _binding_parsers[NameMode(name_mode)]
    try:
        tree = parser.parse(inner)
    except LarkError as e:
        logger.debug(f"No binding in {inner!r}: {type(e).__name__}")
        return False, None, inner

    name, remainder = BindingTransformer().transform(tree)
    return True, name, remainder


# Layer 3


def resolve_separator(content: str) -> Tuple[Optional[str], bool]:
    """Decide which separator splits this content.

    The first pipe wins: if it starts a ||, the block is multi-select and any
    lone | is ordinary text; otherwise | splits and any || is ordinary text.
    Returns (None, False) when there is no pipe at all.
    """
    single_pos = content.find(SINGLE_PIPE)
    if single_pos == -1:
        return None, False

    double_pos = content.find(DOUBLE_PIPE)
    if double_pos == -1:
        return SINGLE_PIPE, False

    if double_pos <= single_pos:
        return DOUBLE_PIPE, True
    return SINGLE_PIPE, False


def split_segments(content: str, separator: Optional[str]) -> List[str]:
    """Split on the resolved separator, dropping segments that trim to empty."""
    if separator is None:
        parts = [content]
    elif separator == DOUBLE_PIPE:
        parts = content.split(DOUBLE_PIPE)
    else:
        parts = SINGLE_PIPE_SPLIT.split(content)
    return [part.strip() for part in parts if part.strip()]


def parse_button(text: str) -> Button:
    """Parse `Display//value`; without // the value is the display text."""
    text = text.strip()
    match = BUTTON_VALUE_PATTERN.fullmatch(text)
    if match:
        return Button(display=match.group(1).strip(), value=match.group(2).strip())
    return Button(display=text, value=text)


def parse_buttons(content: str) -> Tuple[Tuple[Button, ...], bool]:
    """Resolve the separator and parse every segment into a Button.

    Content without any pipe becomes a single button. Content made only of
    separators yields no buttons.

    Returns:
        (buttons, is_multi_select)
    """
    separator, is_multi_select = resolve_separator(content)
    segments = split_segments(content, separator)
    logger.debug(
        f"Separator {separator!r} (multi={is_multi_select}) -> {len(segments)} segments"
    )
    return tuple(parse_button(s) for s in segments), is_multi_select


class InteractionParser:
    """Parses a single ?[...] block into a result variant.

    Args:
        name_mode: strict or permissive variable names. Defaults to the
            ASKDOWN_VARIABLE_NAMES setting.
    """

    __slots__ = ("name_mode",)

    def __init__(self, name_mode: Optional[NameMode] = None):
        self.name_mode = (
            NameMode(name_mode) if name_mode is not None else DEFAULT_NAME_MODE
        )

    def __repr__(self):
        return f"InteractionParser(name_mode={self.name_mode.value!r})"

    def parse(self, content: str) -> ParseResult:
        """Parse a complete ?[...] block. Never raises; faults become ErrorResult."""
        try:
            inner = extract_block(content)
            if inner is None:
                raise InvalidEnvelopeError(content)

            has_variable, variable, remainder = detect_binding(inner, self.name_mode)
            if has_variable and variable:
                return self._assemble_variable(variable, remainder)
            return self._assemble_display(inner)
        except AskdownError as e:
            logger.debug(str(e))
            return ErrorResult(message=str(e))
        except Exception as e:
            logger.warning(f"Unexpected error parsing {content!r}: {e}")
            return ErrorResult(message=str(MalformedBlockError(content, e)))

    def parse_to_remark_format(self, content: str) -> RemarkCompatibleResult:
        """Parse and flatten for renderers; failures become a bare placeholder."""
        result = self.parse(content)
        if result.is_error:
            return RemarkCompatibleResult(placeholder=content.strip())
        return RemarkCompatibleResult.from_result(result)

    def _assemble_variable(self, variable: str, content: str) -> InteractionResult:
        ellipsis = ELLIPSIS_PATTERN.match(content)
        if ellipsis:
            before = ellipsis.group(1).strip()
            question = ellipsis.group(2).strip()
            buttons, is_multi_select = parse_buttons(before) if before else ((), False)
            if not buttons:
                return _build(TextOnly, content, variable=variable, question=question)
            cls = ButtonsMultiWithText if is_multi_select else ButtonsWithText
            return _build(
                cls, content, variable=variable, buttons=buttons, question=question
            )

        buttons, is_multi_select = parse_buttons(content)
        if not buttons:
            return _build(TextOnly, content, variable=variable, question="")
        cls = ButtonsMultiSelect if is_multi_select else ButtonsOnly
        return _build(cls, content, variable=variable, buttons=buttons)

    def _assemble_display(self, content: str) -> InteractionResult:
        # multi-select has no meaning without a variable
        buttons, _ = parse_buttons(content)
        if not buttons:
            buttons = (Button(display="", value=""),)
        return _build(NonAssignmentButton, content, buttons=buttons)


def _build(cls, fragment: str, **fields) -> InteractionResult:
    try:
        result = cls(**fields)
    except ValidationError as e:
        raise MalformedBlockError(fragment, e) from e
    logger.debug(f"Classified {fragment!r} as {result.type.value}")
    return result


def create_interaction_parser(name_mode: Optional[NameMode] = None) -> InteractionParser:
    return InteractionParser(name_mode)


def parse_interaction(content: str, name_mode: Optional[NameMode] = None) -> ParseResult:
    """Parse one ?[...] block with a throwaway parser."""
    return InteractionParser(name_mode).parse(content)


def parse_to_remark_format(content: str, name_mode: Optional[NameMode] = None) -> dict:
    """Parse one block into the camelCase property bag used by renderers."""
    return InteractionParser(name_mode).parse_to_remark_format(content).to_dict()


def parse_interaction_format(
    content: str, name_mode: Optional[NameMode] = None
) -> Tuple[InteractionType, dict]:
    """Backward-compatible (type, data) form of `parse`.

    Never fails: an unparseable block comes back as text input whose
    question is the raw trimmed content.
    """
    result = InteractionParser(name_mode).parse(content)
    if result.is_error:
        logger.debug(f"Falling back to text input for {content!r}")
        return InteractionType.TEXT_ONLY, {"question": content.strip()}

    data = {}
    variable = getattr(result, "variable", None)
    if variable is not None:
        data["variable"] = variable
    buttons = getattr(result, "buttons", None)
    if buttons is not None:
        data["buttons"] = [b.model_dump() for b in buttons]
    question = getattr(result, "question", None)
    if question is not None:
        data["question"] = question
    is_multi = getattr(result, "is_multi_select", None)
    if is_multi is not None:
        data["isMultiSelect"] = is_multi
    return result.type, data


def find_interactions(
    text: str, name_mode: Optional[NameMode] = None
) -> List[InteractionMatch]:
    """Find every ?[...] block inside larger text, in order.

    Blocks that fail to parse are skipped so callers leave that text as is.
    """
    parser = InteractionParser(name_mode)
    matches = []
    for m in INTERACTION_PATTERN.finditer(text):
        result = parser.parse(m.group(0))
        if result.is_error:
            logger.debug(f"Skipping block at {m.start()}: {result.message}")
            continue
        matches.append(InteractionMatch(m.start(), m.end(), m.group(1), result))
    return matches
