"""Validates rendered TypeScript artifacts before they are written."""

import re

_PLACEHOLDER = re.compile(r"\{\{.*?\}\}|\{%.*?%\}")
_PAIRS = {")": "(", "]": "[", "}": "{"}


def validate_placeholders(files: dict[str, str]) -> dict[str, str]:
    """Check for template syntax that leaked into the output.

    Returns dict of {filename: error_message} for files with errors.
    """
    errors = {}
    for filename, content in files.items():
        match = _PLACEHOLDER.search(content)
        if match:
            line = content.count("\n", 0, match.start()) + 1
            errors[filename] = f"Unresolved placeholder {match.group(0)!r} (line {line})"
    return errors


def validate_brackets(files: dict[str, str]) -> dict[str, str]:
    """Check that (), [] and {} balance outside strings and comments.

    Returns dict of {filename: error_message} for files with errors.
    """
    errors = {}
    for filename, content in files.items():
        if not filename.endswith(".ts"):
            continue
        error = _check_balance(content)
        if error:
            errors[filename] = error
    return errors


def validate_files(files: dict[str, str]) -> dict[str, str]:
    """Run all validations on rendered files.

    Returns dict of {filename: error_message} for all files with errors.
    """
    errors = {}
    errors.update(validate_placeholders(files))
    for filename, error in validate_brackets(files).items():
        errors.setdefault(filename, error)
    return errors


def _check_balance(source: str) -> str | None:
    stack: list[tuple[str, int]] = []
    line = 1
    i = 0
    n = len(source)
    while i < n:
        ch = source[i]
        if ch == "\n":
            line += 1
        elif source.startswith("//", i):
            end = source.find("\n", i)
            i = n if end == -1 else end
            continue
        elif source.startswith("/*", i):
            end = source.find("*/", i + 2)
            end = n if end == -1 else end + 2
            line += source.count("\n", i, end)
            i = end
            continue
        elif ch in "'\"`":
            end = _skip_string(source, i)
            if end is None:
                return f"Unterminated string literal (line {line})"
            line += source.count("\n", i, end)
            i = end
            continue
        elif ch in "([{":
            stack.append((ch, line))
        elif ch in _PAIRS:
            if not stack or stack[-1][0] != _PAIRS[ch]:
                return f"Unexpected {ch!r} (line {line})"
            stack.pop()
        i += 1

    if stack:
        opener, opened_at = stack[-1]
        return f"Unclosed {opener!r} (line {opened_at})"
    return None


def _skip_string(source: str, start: int) -> int | None:
    quote = source[start]
    i = start + 1
    while i < len(source):
        ch = source[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        if ch == "\n" and quote != "`":
            return None
        i += 1
    return None
