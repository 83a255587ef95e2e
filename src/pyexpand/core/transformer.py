from pyexpand.models import Program

MULTILINE_KEYWORD = b"return"
FUNCTION_NAME = b"user_fn"
MISSING_RETURN_PROGRAM = b"print('Error: No return statement found in a multiline code block!')"


def _body_lines(body: bytes) -> list[bytes]:
    """Split on LF, drop one trailing CR per line and skip empty lines."""
    lines = []
    for line in body.split(b"\n"):
        if line.endswith(b"\r"):
            line = line[:-1]
        if line:
            lines.append(line)
    return lines


def count_lines(body: bytes) -> int:
    return len(_body_lines(body))


def is_multi_statement(body: bytes) -> bool:
    return MULTILINE_KEYWORD in body


def _indent(line: bytes) -> bytes:
    if line[:1] in (b"\t", b" "):
        return line
    return b"\t" + line


def transform(body: bytes) -> Program:
    """Turn a directive body into a standalone program for the interpreter.

    Bodies containing ``return`` are wrapped in a function whose return value
    is printed; anything else is printed as a single expression.
    """
    if is_multi_statement(body):
        text = b"def " + FUNCTION_NAME + b"():\n"
        text += b"".join(_indent(line) + b"\n" for line in _body_lines(body))
        text += b"print(" + FUNCTION_NAME + b"())\n"
        return Program(text=text, is_multiline=True)

    if count_lines(body) > 1:
        return Program(text=MISSING_RETURN_PROGRAM, is_multiline=False)
    return Program(text=b"print(" + body + b")\n", is_multiline=False)
