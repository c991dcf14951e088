"""
from_now.py – Resolve relative-time expressions such as "2 days 3 hours"
• LALR parser over <sign> (<count> <unit>)*
• Units must appear largest first, each at most once
• A year is 365 days, a month is 30 days
"""

import datetime
import logging

from lark import Lark, Transformer, Token
from lark.exceptions import LarkError

from ..builtin_exceptions import RelativeTimeError

logger = logging.getLogger(__name__)

OFFSET_GRAMMAR = r"""
    start: SIGN? component*

    component: INT UNIT

    SIGN: "+" | "-"
    UNIT: /[a-z]+/i

    %import common.INT
    %import common.WS
    %ignore WS
"""

# Field order matters: components must be given in this order.
FIELDS = ("years", "months", "weeks", "days", "hours", "minutes", "seconds")

UNIT_ALIASES = {
    "y": "years", "yr": "years", "year": "years", "years": "years",
    "mo": "months", "month": "months", "months": "months",
    "w": "weeks", "wk": "weeks", "week": "weeks", "weeks": "weeks",
    "d": "days", "day": "days", "days": "days",
    "h": "hours", "hr": "hours", "hour": "hours", "hours": "hours",
    "m": "minutes", "min": "minutes", "minute": "minutes", "minutes": "minutes",
    "s": "seconds", "sec": "seconds", "second": "seconds", "seconds": "seconds",
}

REFERENCE_FORMATS = ("%Y-%m-%dT%H:%M:%S.%fZ", "%Y-%m-%dT%H:%M:%SZ")


# ────────────────────────────────────────────────────────────
# Transformer
# ────────────────────────────────────────────────────────────
class OffsetTransformer(Transformer):
    def start(self, items):
        sign = 1
        if items and isinstance(items[0], Token) and items[0].type == "SIGN":
            sign = -1 if items[0].value == "-" else 1
            items = items[1:]

        offset = dict.fromkeys(FIELDS, 0)
        last_index = -1
        for field, count in items:
            index = FIELDS.index(field)
            if index <= last_index:
                raise ValueError(f"'{field}' is out of order or repeated")
            last_index = index
            offset[field] = sign * count
        return offset

    def component(self, items):
        count, unit = items
        field = UNIT_ALIASES.get(unit.value.lower())
        if field is None:
            raise ValueError(f"unknown time unit '{unit.value}'")
        return field, int(count.value)


offset_parser = Lark(OFFSET_GRAMMAR, parser="lalr", start="start")


def parse_offset(text: str) -> dict:
    """
    Parses an offset expression into a dict of signed counts keyed by
    ``years``, ``months``, ``weeks``, ``days``, ``hours``, ``minutes`` and
    ``seconds``. An empty expression is a zero offset.

    :raises RelativeTimeError: if the text is not a time expression.
    """
    try:
        tree = offset_parser.parse(text or "")
        return OffsetTransformer().transform(tree)
    except LarkError as e:
        # VisitError from the transformer also lands here
        logger.debug(f"Failed to parse offset {text!r}: {e}")
        raise RelativeTimeError(f"String: '{text}' isn't a time expression", builtin="fromNow") from e


def offset_to_timedelta(offset: dict) -> datetime.timedelta:
    return datetime.timedelta(
        weeks=offset["weeks"],
        days=offset["days"] + 365 * offset["years"] + 30 * offset["months"],
        hours=offset["hours"],
        minutes=offset["minutes"],
        seconds=offset["seconds"],
    )


def parse_reference(reference) -> datetime.datetime:
    """Normalizes a reference time to a naive UTC datetime."""
    if reference is None:
        return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)
    if isinstance(reference, datetime.datetime):
        if reference.tzinfo is not None:
            reference = reference.astimezone(datetime.timezone.utc).replace(tzinfo=None)
        return reference
    if isinstance(reference, str):
        for fmt in REFERENCE_FORMATS:
            try:
                return datetime.datetime.strptime(reference, fmt)
            except ValueError:
                continue
    raise RelativeTimeError(f"Reference time {reference!r} is not a valid timestamp", builtin="fromNow")


def format_timestamp(moment: datetime.datetime) -> str:
    """Formats as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` (milliseconds, truncated)."""
    return (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
        f".{moment.microsecond // 1000:03d}Z"
    )


def from_now(offset: str, reference=None) -> str:
    """
    Returns the timestamp `offset` away from `reference` (now, if omitted).

    >>> from_now("1 day", "2017-01-19T16:27:20.974Z")
    '2017-01-20T16:27:20.974Z'
    """
    parsed = parse_offset(offset)
    base = parse_reference(reference)
    logger.debug(f"Resolving offset {offset!r} {parsed} from {base.isoformat()}")
    try:
        return format_timestamp(base + offset_to_timedelta(parsed))
    except OverflowError as e:
        raise RelativeTimeError(f"Offset '{offset}' is out of range", builtin="fromNow") from e

