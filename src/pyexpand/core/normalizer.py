from pyexpand.models import ExpansionResult, Program, RunOutput

_INDENT_BYTES = b" \t"


def trim_crlf(output: bytes) -> bytes:
    """Drop a single trailing CR+LF. A bare LF is left in place."""
    if output.endswith(b"\r\n"):
        return output[:-2]
    return output


def indent_prefix(text: bytes) -> bytes:
    """Return the leading spaces and tabs of the first non-empty line of *text*."""
    for line in text.split(b"\n"):
        if line.rstrip(b"\r"):
            stripped = line.lstrip(_INDENT_BYTES)
            return line[: len(line) - len(stripped)]
    return b""


def normalize(program: Program, run_output: RunOutput) -> ExpansionResult:
    return ExpansionResult(
        stdout_bytes=trim_crlf(run_output.output),
        exit_code=run_output.exit_code,
        is_multiline=program.is_multiline,
        indent_prefix=indent_prefix(program.text) if program.is_multiline else b"",
    )
