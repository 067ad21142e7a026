"""Askdown -- interactive ?[...] blocks for markdown text."""

import logging

# Version - reads from package metadata (set in pyproject.toml)
try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("askdown")
except PackageNotFoundError:
    __version__ = "0.0.0+dev"

logger = logging.getLogger(__name__)

# Re-export from errors module
from .errors import AskdownError, InvalidEnvelopeError, MalformedBlockError
# Re-export from models module
from .models import (Button, ButtonsMultiSelect, ButtonsMultiWithText,
                     ButtonsOnly, ButtonsWithText, ErrorResult,
                     InteractionResult, InteractionType, NameMode,
                     NonAssignmentButton, ParseResult, RemarkCompatibleResult,
                     TextOnly)
# Re-export from parsing module
from .parsing import (InteractionMatch, InteractionParser,
                      create_interaction_parser, detect_binding,
                      extract_block, find_interactions, parse_button,
                      parse_buttons, parse_interaction,
                      parse_interaction_format, parse_to_remark_format,
                      resolve_separator, split_segments)
