"""Ex command line: line jumps, substitution and pattern search."""

from __future__ import annotations

import re
from typing import Callable, List, Optional, Tuple

from vi_engine.keymaps import ResolutionMatch
from vi_engine.modes.base_mode import ModeContext, ModeResult, SearchQuery, Substitution
from vi_engine.runtime import telemetry

from . import caret

NOT_RECOGNISED = "Command not recognised"
NO_STORED_PATTERN = "No stored pattern."


def _split_fields(body: str, delimiter: str) -> List[str]:
    """Split on ``delimiter``; a backslash-escaped delimiter stays literal."""

    parts: List[str] = []
    current: List[str] = []
    i = 0
    while i < len(body):
        if body[i] == "\\" and i + 1 < len(body) and body[i + 1] == delimiter:
            current.append(delimiter)
            i += 2
        elif body[i] == delimiter:
            parts.append("".join(current))
            current = []
            i += 1
        else:
            current.append(body[i])
            i += 1
    parts.append("".join(current))
    return parts


def compile_replacement(template: str) -> Callable[[re.Match], str]:
    """Turn a replacement template into a callable for ``re.subn``.

    ``&`` is the whole match, ``\\N`` capture group N, ``\\&`` and ``\\\\``
    are literals.
    """

    pieces: List[Tuple[bool, str]] = []  # (is_group, value)
    literal: List[str] = []
    i = 0
    while i < len(template):
        char = template[i]
        if char == "&":
            pieces.append((False, "".join(literal)))
            literal = []
            pieces.append((True, "0"))
        elif char == "\\" and i + 1 < len(template):
            nxt = template[i + 1]
            if nxt.isdigit():
                pieces.append((False, "".join(literal)))
                literal = []
                pieces.append((True, nxt))
            elif nxt == "n":
                literal.append("\n")
            elif nxt == "t":
                literal.append("\t")
            else:
                literal.append(nxt)
            i += 1
        else:
            literal.append(char)
        i += 1
    pieces.append((False, "".join(literal)))

    def _expand(match: re.Match) -> str:
        out = []
        for is_group, value in pieces:
            if is_group:
                out.append(match.group(int(value)) or "")
            else:
                out.append(value)
        return "".join(out)

    return _expand


def search(
    context: ModeContext,
    pattern: str,
    *,
    backward: bool = False,
    case_sensitive: Optional[bool] = None,
    save_mark: bool = True,
) -> str:
    """Move the caret to the next match; returns a status string.

    Without an explicit ``case_sensitive`` the search is case-sensitive only
    when the pattern contains an uppercase letter. With ``save_mark`` off the
    caller owns the context mark.
    """

    if case_sensitive is None:
        case_sensitive = any(char.isupper() for char in pattern)
    buffer = context.buffer
    context.state.last_search = SearchQuery(pattern, backward, case_sensitive)
    origin = buffer.caret_offset
    start = origin if backward else min(origin + 1, len(buffer.text))
    found = buffer.search(
        pattern, start, backward=backward, case_sensitive=case_sensitive
    )
    telemetry.record_event(
        "search", data={"pattern": pattern, "backward": backward, "found": found}
    )
    if found is None:
        return f"Pattern not found: '{pattern}'"
    if save_mark:
        caret.save_context_mark(context)
    buffer.caret_offset = found
    return ""


def _repeat_search(context: ModeContext, *, reverse: bool) -> ModeResult:
    query = context.state.last_search
    if query is None:
        return ModeResult(consumed=True, status="error", message=NO_STORED_PATTERN)
    message = ""
    for _ in range(context.count):
        message = search(
            context,
            query.pattern,
            backward=query.backward != reverse,
            case_sensitive=query.case_sensitive,
        )
        if message:
            break
    # n/N keep the original direction for later repeats
    context.state.last_search = query
    return ModeResult(consumed=True, message=message or None)


def search_next(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Repeat the last search in the same direction."""

    del match
    return _repeat_search(context, reverse=False)


def search_previous(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Repeat the last search in the opposite direction."""

    del match
    return _repeat_search(context, reverse=True)


def _word_under_caret(context: ModeContext) -> Optional[str]:
    buffer = context.buffer
    text = buffer.text
    offset = buffer.caret_offset
    line_end = buffer.line_start(buffer.caret_line) + buffer.line_length(buffer.caret_line)
    while offset < line_end and not (text[offset].isalnum() or text[offset] == "_"):
        offset += 1
    if offset >= line_end:
        return None
    start = offset
    while start > 0 and (text[start - 1].isalnum() or text[start - 1] == "_"):
        start -= 1
    end = offset
    while end < len(text) and (text[end].isalnum() or text[end] == "_"):
        end += 1
    return text[start:end]


def _search_word(context: ModeContext, *, backward: bool) -> ModeResult:
    word = _word_under_caret(context)
    if word is None:
        return ModeResult(consumed=True, status="error", message="No string under caret")
    buffer = context.buffer
    origin = buffer.caret_offset
    jumped_from = caret.position(context)
    # start from the word itself so the first hit is the next occurrence
    start = origin
    while start > 0 and (buffer.text[start - 1].isalnum() or buffer.text[start - 1] == "_"):
        start -= 1
    buffer.caret_offset = start
    pattern = rf"\b{re.escape(word)}\b"
    message = ""
    found = False
    for _ in range(context.count):
        message = search(
            context, pattern, backward=backward, case_sensitive=True, save_mark=False
        )
        if message:
            break
        found = True
    if found:
        context.marks.set_context(jumped_from)
    else:
        buffer.caret_offset = origin
    return ModeResult(consumed=True, message=message or None)


def search_word_forward(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Search forward for the word under the caret."""

    del match
    return _search_word(context, backward=False)


def search_word_backward(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Search backward for the word under the caret."""

    del match
    return _search_word(context, backward=True)


class ExCommandParser:
    """Evaluates one command line and returns a human-readable status.

    The first character selects the grammar: ``:`` for line numbers, ``$``
    and ``s`` substitution, ``/`` and ``?`` for searches. A substitution
    with the ``c`` flag leaves a callable in ``state.pending_confirm``.
    """

    def __init__(self, context: ModeContext) -> None:
        self.context = context

    def execute(self, command_text: str) -> str:
        telemetry.record_event("ex.command", data={"text": command_text})
        if not command_text:
            return ""
        prefix, body = command_text[0], command_text[1:]
        if prefix == "/":
            return self._search(body, backward=False)
        if prefix == "?":
            return self._search(body, backward=True)
        if prefix != ":":
            return NOT_RECOGNISED
        body = body.strip()
        if not body:
            return ""
        if body.isdigit():
            return self._goto_line(int(body))
        if body == "$":
            caret.jump_to_line(self.context, self.context.buffer.line_count - 1)
            return "Jumped to end of document."
        if body[0] == "s":
            return self._substitute(body[1:])
        return NOT_RECOGNISED

    def _goto_line(self, line: int) -> str:
        if line == 0:
            caret.save_context_mark(self.context)
            self.context.buffer.caret_offset = 0
            return "Jumped to beginning of document."
        landed = caret.jump_to_line(self.context, line - 1)
        return f"Jumped to line {landed + 1}."

    def _search(self, pattern: str, *, backward: bool) -> str:
        if not pattern:
            query = self.context.state.last_search
            if query is None:
                return NO_STORED_PATTERN
            pattern = query.pattern
        return search(self.context, pattern, backward=backward)

    def _substitute(self, rest: str) -> str:
        state = self.context.state
        if not rest.strip():
            stored = state.last_substitution
            if stored is None:
                return NO_STORED_PATTERN
            return self._apply(stored.pattern, stored.replacement, "")

        delimiter = rest[0]
        if delimiter.isalnum() or delimiter.isspace() or delimiter in "\\\"|":
            return NOT_RECOGNISED
        fields = _split_fields(rest[1:], delimiter)
        if len(fields) > 3:
            return NOT_RECOGNISED
        pattern = fields[0]
        replacement = fields[1] if len(fields) > 1 else ""
        flags = fields[2] if len(fields) > 2 else ""
        if not pattern:
            stored = state.last_substitution
            if stored is None:
                return NO_STORED_PATTERN
            pattern = stored.pattern
        if any(flag not in "gic" for flag in flags):
            return NOT_RECOGNISED
        return self._apply(pattern, replacement, flags)

    def _target(self) -> Tuple[int, int]:
        buffer = self.context.buffer
        current = buffer.selection
        if buffer.is_something_selected and current is not None:
            return current.start, current.end
        line = buffer.caret_line
        start = buffer.line_start(line)
        return start, start + buffer.line_length(line)

    def _apply(self, pattern: str, replacement: str, flags: str) -> str:
        re_flags = re.MULTILINE | (re.IGNORECASE if "i" in flags else 0)
        try:
            regex = re.compile(pattern, re_flags)
        except re.error as exc:
            return f"Replacement error: {exc}"

        buffer = self.context.buffer
        start, end = self._target()
        region = buffer.text[start:end]
        expand = compile_replacement(replacement)
        try:
            updated, count = regex.subn(expand, region, count=0 if "g" in flags else 1)
        except (IndexError, re.error) as exc:
            return f"Replacement error: {exc}"
        if count == 0:
            return f"Pattern not found: '{pattern}'"

        self.context.state.last_substitution = Substitution(pattern, replacement)

        def _perform() -> str:
            buffer.clear_selection()
            buffer.replace(start, end - start, updated)
            buffer.caret_offset = start
            telemetry.record_event(
                "ex.substitute", data={"pattern": pattern, "replacements": count}
            )
            return "Performed replacement."

        if "c" in flags:
            self.context.state.pending_confirm = _perform
            return f"Replace with '{replacement}'? (y/n)"
        return _perform()


__all__ = [
    "ExCommandParser",
    "compile_replacement",
    "search",
    "search_next",
    "search_previous",
    "search_word_backward",
    "search_word_forward",
]
