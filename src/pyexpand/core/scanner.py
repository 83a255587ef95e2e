from pyexpand.models import DirectiveRecord, KeptRange, ScanResult

OPEN_MARKER = b"/*.py"
BODY_TERMINATOR = b"*/"
DIRECTIVE_TERMINATOR = b"/*"


def scan(source: bytes) -> ScanResult:
    """Locate every ``/*.py ... */ ... /*`` directive in *source*.

    Returns the directives in source order together with the kept ranges
    that surround them. There is always exactly one more kept range than
    directives; the last one covers everything after the final terminator.
    A directive without a closing ``*/`` or without a following ``/*`` ends
    the scan and is folded into the tail range.
    """
    directives: list[DirectiveRecord] = []
    kept_ranges: list[KeptRange] = []
    size = len(source)
    cursor = 0

    while True:
        open_start = source.find(OPEN_MARKER, cursor)
        if open_start < 0:
            break
        body_start = open_start + len(OPEN_MARKER)

        body_end = source.find(BODY_TERMINATOR, body_start)
        if body_end < 0:
            break

        terminator_start = source.find(DIRECTIVE_TERMINATOR, body_end + len(BODY_TERMINATOR))
        if terminator_start < 0:
            break

        kept_ranges.append(KeptRange(lo=cursor, hi=body_end + len(BODY_TERMINATOR)))
        directives.append(
            DirectiveRecord(
                open_start=open_start,
                body_start=body_start,
                body_end=body_end,
                terminator_start=terminator_start,
            )
        )
        cursor = terminator_start

    kept_ranges.append(KeptRange(lo=cursor, hi=size))
    return ScanResult(directives=directives, kept_ranges=kept_ranges)


def has_directives(source: bytes) -> bool:
    return bool(scan(source).directives)
