from pydantic import BaseModel, ConfigDict


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class KeptRange(_Frozen):
    lo: int
    hi: int

    def slice(self, source: bytes) -> bytes:
        return source[self.lo : self.hi]


class DirectiveRecord(_Frozen):
    open_start: int
    body_start: int
    body_end: int
    terminator_start: int

    def body(self, source: bytes) -> bytes:
        return source[self.body_start : self.body_end]


class ScanResult(_Frozen):
    directives: list[DirectiveRecord]
    kept_ranges: list[KeptRange]


class Program(_Frozen):
    text: bytes
    is_multiline: bool


class RunOutput(_Frozen):
    output: bytes
    exit_code: int


class ExpansionResult(_Frozen):
    stdout_bytes: bytes
    exit_code: int
    is_multiline: bool
    indent_prefix: bytes = b""
