"""Exception classes raised inside the askdown parsing pipeline.

None of these escape `InteractionParser.parse`; they are caught at the
top-level entry point and folded into an `ErrorResult`.
"""

from typing import Optional


class AskdownError(Exception):
    """Base class for interaction block parsing failures."""


class InvalidEnvelopeError(AskdownError):
    """Input is not a complete ?[...] block (or is a ?[text](url) link)."""

    def __init__(self, content: str):
        self.content = content
        super().__init__(f"Invalid interaction format: {content}")


class MalformedBlockError(AskdownError):
    """Unexpected fault while splitting or classifying a block.

    Preserves the original exception and the fragment being processed so the
    folded error message can point at the offending text.
    """

    def __init__(self, fragment: str, original_error: Optional[Exception] = None):
        self.fragment = fragment
        self.original_error = original_error
        self.error_type = type(original_error).__name__ if original_error else None
        detail = str(original_error) if original_error else "unknown error"
        super().__init__(f"Parsing error: {detail} (in {fragment!r})")

    def __repr__(self):
        return f"MalformedBlockError({self.fragment!r}, {self.error_type})"
