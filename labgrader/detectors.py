"""
Flexible requirement detectors.

Each detector takes the shared Evidence and answers one rubric question.
Submissions are free-form, so every detector accepts a family of surface
forms: the module-level pattern tuples below list the accepted forms and can
be extended without touching scoring. Captured console output is only ever
OR'd with a static signal.
"""

import re
from re import Pattern
from typing import Iterable

from .models import Evidence


def _compile(*patterns: str, flags: int = 0) -> tuple[Pattern[str], ...]:
    return tuple(re.compile(p, flags) for p in patterns)


def any_match(code: str, patterns: Iterable[Pattern[str]]) -> bool:
    """True if any of the patterns is found in the code."""
    return any(p.search(code) for p in patterns)


def all_match(code: str, patterns: Iterable[Pattern[str]]) -> bool:
    return all(p.search(code) for p in patterns)


def in_order(code: str, patterns: Iterable[Pattern[str]]) -> bool:
    """
    True if each pattern matches somewhere after the previous one ended.

    Same answer as joining the patterns with `[\\s\\S]*`, but every pattern
    is searched once, so long submissions cannot trigger backtracking.
    """
    pos = 0
    for pattern in patterns:
        match = pattern.search(code, pos)
        if match is None:
            return False
        pos = match.end()
    return True


def any_in_order(code: str, sequences: Iterable[Iterable[Pattern[str]]]) -> bool:
    return any(in_order(code, seq) for seq in sequences)


def logs_contain(evidence: Evidence, pattern: Pattern[str]) -> bool:
    """True if any captured log line matches. False when nothing was run."""
    if not evidence.logs:
        return False
    return any(pattern.search(line) for line in evidence.logs)


CONSOLE_LOG = re.compile(r"console\.log\s*\(")

# ---------------------------------------------------------------------------
# TODO 1: object with getters & setters
# ---------------------------------------------------------------------------

STUDENT_FIELDS = _compile(
    r"\b(firstName|firstname)\b",
    r"\b(lastName|lastname)\b",
    r"\bgpa\b",
)

FULL_NAME_COMBINATOR = _compile(
    r"\bget\s+fullName\s*\(",  # class / literal getter
    r"\bfullName\s*:\s*function\s*\(",  # method property
    r"\bfullName\s*\(\)\s*\{",  # shorthand method
)

GPA_UPDATER = _compile(r"\bset\s+gpa\s*\(") + _compile(
    r"\bupdateGpa\s*\(",
    r"\bsetGpa\s*\(",
    flags=re.IGNORECASE,
)

GPA_RANGE_CHECK = _compile(
    r"\b(gpa|newGpa|value)\s*>=\s*0(\.0+)?\s*&&\s*(gpa|newGpa|value)\s*<=\s*4(\.0+)?",
    r"\b(gpa|newGpa|value)\s*<\s*0(\.0+)?\s*\|\|\s*(gpa|newGpa|value)\s*>\s*4(\.0+)?",
    r"\bMath\.max\s*\(\s*0(\.0+)?\s*,\s*Math\.min\s*\(\s*4(\.0+)?\s*,",
    r"\bthrow\b[\s\S]{0,80}\b(gpa|newGpa)\b",
    flags=re.IGNORECASE,
)

FULL_NAME_USE = re.compile(r"fullName\b")
STUDENT_ATTR_OUTPUT = re.compile(
    r"console\.log\s*\([\s\S]*\b(firstName|lastName|gpa|fullName)\b", re.IGNORECASE
)
STUDENT_ATTR_LOG = re.compile(r"gpa|fullname|first", re.IGNORECASE)


def has_student_fields(evidence: Evidence) -> bool:
    return all_match(evidence.code, STUDENT_FIELDS)


def has_full_name_getter(evidence: Evidence) -> bool:
    return any_match(evidence.code, FULL_NAME_COMBINATOR)


def has_gpa_updater(evidence: Evidence) -> bool:
    return any_match(evidence.code, GPA_UPDATER)


def has_gpa_range_validation(evidence: Evidence) -> bool:
    """
    Accepts a bounds check in either polarity, a clamp, or a throw that
    mentions the GPA, e.g.:

        newGpa >= 0 && newGpa <= 4
        if (gpa < 0 || gpa > 4) throw ...
        Math.max(0, Math.min(4, x))
    """
    return any_match(evidence.code, GPA_RANGE_CHECK)


def outputs_student(evidence: Evidence) -> bool:
    code = evidence.code
    uses_full_name = bool(FULL_NAME_USE.search(code) and CONSOLE_LOG.search(code))
    return (
        uses_full_name
        or bool(STUDENT_ATTR_OUTPUT.search(code))
        or logs_contain(evidence, STUDENT_ATTR_LOG)
    )


# ---------------------------------------------------------------------------
# TODO 2: object as map + for...in
# ---------------------------------------------------------------------------

MAP_OBJECT = _compile(r"\b(const|let|var)\s+\w+\s*=\s*\{", r":", r"\}")
FOR_IN = re.compile(r"\bfor\s*\(\s*(const|let|var)?\s*\w+\s+in\s+\w+\s*\)")

# Each entry is a sequence of pieces that must appear in order
KEY_VALUE_OUTPUT = (
    _compile(r"console\.log\s*\(", r"\+", r"\)"),  # concatenation
    _compile(r"console\.log\s*\(\s*\w+\s*,\s*\w+\s*\[\s*\w+\s*\]\s*\)"),  # k, obj[k]
    _compile(r"console\.log\s*\(\s*`\$\{\w+\}", r"\$\{\w+\[\w+\]\}.*`\s*\)"),  # template literal
)
KEY_VALUE_LOG = re.compile(r":")


def has_map_object(evidence: Evidence) -> bool:
    return in_order(evidence.code, MAP_OBJECT)


def has_for_in_loop(evidence: Evidence) -> bool:
    return bool(FOR_IN.search(evidence.code))


def outputs_key_and_value(evidence: Evidence) -> bool:
    return any_in_order(evidence.code, KEY_VALUE_OUTPUT) or logs_contain(evidence, KEY_VALUE_LOG)


# ---------------------------------------------------------------------------
# TODO 3: string charAt() & length
# ---------------------------------------------------------------------------

STRING_VALUE = _compile(
    r"\bnew\s+String\s*\(",
    r"\"[^\"\n]*\"",
    r"'[^'\n]*'",
    r"`[^`]*`",
)
CHAR_AT = re.compile(r"\.charAt\s*\(\s*\w+")
LENGTH = re.compile(r"\.length\b")
STRING_OUTPUT = re.compile(r"console\.log\s*\([\s\S]*(charAt|length)", re.IGNORECASE)
NUMBER_LOG = re.compile(r"\b\d+\b")


def has_string_value(evidence: Evidence) -> bool:
    return any_match(evidence.code, STRING_VALUE)


def uses_char_at(evidence: Evidence) -> bool:
    return bool(CHAR_AT.search(evidence.code))


def uses_length(evidence: Evidence) -> bool:
    return bool(LENGTH.search(evidence.code))


def outputs_char_and_length(evidence: Evidence) -> bool:
    return bool(STRING_OUTPUT.search(evidence.code)) or logs_contain(evidence, NUMBER_LOG)


# ---------------------------------------------------------------------------
# TODO 4: Date day / month / year
# ---------------------------------------------------------------------------

NEW_DATE = re.compile(r"\bnew\s+Date\b")
GET_DATE = re.compile(r"\.getDate\s*\(\s*\)")
GET_MONTH = re.compile(r"\.getMonth\s*\(\s*\)")
GET_FULL_YEAR = re.compile(r"\.getFullYear\s*\(\s*\)")
DATE_OUTPUT = re.compile(r"console\.log\s*\([\s\S]*get(Date|Month|FullYear)")
YEAR_LOG = re.compile(r"\b20\d{2}\b")


def creates_current_date(evidence: Evidence) -> bool:
    return bool(NEW_DATE.search(evidence.code))


def uses_get_date(evidence: Evidence) -> bool:
    return bool(GET_DATE.search(evidence.code))


def uses_get_month(evidence: Evidence) -> bool:
    return bool(GET_MONTH.search(evidence.code))


def uses_get_full_year(evidence: Evidence) -> bool:
    return bool(GET_FULL_YEAR.search(evidence.code))


def outputs_date_parts(evidence: Evidence) -> bool:
    return bool(DATE_OUTPUT.search(evidence.code)) or logs_contain(evidence, YEAR_LOG)


# ---------------------------------------------------------------------------
# TODO 5: array + spread min / max
# ---------------------------------------------------------------------------

TEN_NUMBERS = _compile(
    r"\[\s*-?\d+(\.\d+)?\s*(,\s*-?\d+(\.\d+)?\s*){9,}\]",  # literal with 10+ numbers
    r"\bArray\s*\(\s*10\s*\)",  # sized constructor
    r"\bpush\s*\(",  # built up incrementally
)
MIN_SPREAD = re.compile(r"Math\.min\s*\(\s*\.\.\.\s*(\w|\[)")
MAX_SPREAD = re.compile(r"Math\.max\s*\(\s*\.\.\.\s*(\w|\[)")
MIN_MAX_OUTPUT = re.compile(r"console\.log\s*\([\s\S]*Math\.(min|max)")
MIN_MAX_LOG = re.compile(r"min|max", re.IGNORECASE)


def has_ten_numbers(evidence: Evidence) -> bool:
    return any_match(evidence.code, TEN_NUMBERS)


def uses_min_spread(evidence: Evidence) -> bool:
    return bool(MIN_SPREAD.search(evidence.code))


def uses_max_spread(evidence: Evidence) -> bool:
    return bool(MAX_SPREAD.search(evidence.code))


def outputs_min_max(evidence: Evidence) -> bool:
    return bool(MIN_MAX_OUTPUT.search(evidence.code)) or logs_contain(evidence, MIN_MAX_LOG)


# ---------------------------------------------------------------------------
# TODO 6: try / catch / finally with an empty array
# ---------------------------------------------------------------------------

TRY_CATCH_FINALLY = _compile(
    r"\btry\s*\{",
    r"\}\s*catch\s*(\(\s*\w+\s*\))?\s*\{",
    r"\}\s*finally\s*\{",
    r"\}",
)
ONE_ARG_FUNCTION = (
    _compile(r"\bfunction\s+\w+\s*\(\s*\w+\s*\)\s*\{", r"return", r"\}"),
    _compile(r"\b(const|let|var)\s+\w+\s*=\s*(\(\s*\w+\s*\)|\w+)\s*=>"),
)
MAX_CONSTRUCT = re.compile(r"\b(Math\.max|reduce|for\s*\(|while\s*\(|if\s*\()", re.IGNORECASE)
EMPTY_GUARD = _compile(
    r"if\s*\(\s*\w+\.length\s*===?\s*0\s*\)\s*\{[\s\S]*throw",
    r"if\s*\(\s*!\s*\w+\.length\s*\)\s*\{[\s\S]*throw",
    r"throw\s+new\s+Error",
    flags=re.IGNORECASE,
)
EMPTY_ARRAY_ARGUMENT = _compile(
    r"\(\s*\[\s*\]\s*\)",  # findMax([])
    r"\b\w+\s*=\s*\[\s*\]\s*;",  # const empty = [];
)
CONSOLE_CALL = r"console\.\w+\s*\("
FLOW_OUTPUT = (
    # a console call inside each of the three clauses
    _compile(
        r"\btry\s*\{",
        CONSOLE_CALL,
        r"\}\s*catch\s*(\([^)]*\))?\s*\{",
        CONSOLE_CALL,
        r"\}\s*finally\s*\{",
        CONSOLE_CALL,
        flags=re.IGNORECASE,
    ),
    _compile(r"console\.log\s*\(", r"try|catch|finally", r"\)", flags=re.IGNORECASE),
)
FLOW_LOG = re.compile(r"try|catch|finally", re.IGNORECASE)


def has_try_catch_finally(evidence: Evidence) -> bool:
    return in_order(evidence.code, TRY_CATCH_FINALLY)


def has_max_function(evidence: Evidence) -> bool:
    code = evidence.code
    return any_in_order(code, ONE_ARG_FUNCTION) and bool(MAX_CONSTRUCT.search(code))


def guards_empty_input(evidence: Evidence) -> bool:
    return any_match(evidence.code, EMPTY_GUARD)


def passes_empty_array(evidence: Evidence) -> bool:
    return any_match(evidence.code, EMPTY_ARRAY_ARGUMENT)


def outputs_in_all_clauses(evidence: Evidence) -> bool:
    return any_in_order(evidence.code, FLOW_OUTPUT) or logs_contain(evidence, FLOW_LOG)


# ---------------------------------------------------------------------------
# TODO 7: regex + forEach
# ---------------------------------------------------------------------------

WORD_LIST = _compile(
    r"\bwords\s*=\s*\[\s*[\"']ban[\"']\s*,\s*[\"']babble[\"']\s*,\s*[\"']make[\"']\s*,\s*[\"']flab[\"']\s*\]",
    flags=re.IGNORECASE,
) + _compile(r"\b(const|let|var)\s+words\s*=\s*\[")
AB_PATTERN = _compile(
    r"/ab/[gimsuy]*",
    r"new\s+RegExp\s*\(\s*[\"']ab[\"']",
)
FOR_EACH = re.compile(r"\.forEach\s*\(\s*\(?\s*\w+")
PATTERN_TEST = re.compile(r"\.test\s*\(\s*\w+\s*\)")
MATCHES_OUTPUT = _compile(r"matches!\s*[\"'`]") + _compile(
    r"console\.log\s*\(\s*[\"'`][\s\S]*matches!",
    flags=re.IGNORECASE,
)
MATCHES_LOG = re.compile(r"matches!", re.IGNORECASE)


def has_word_list(evidence: Evidence) -> bool:
    return any_match(evidence.code, WORD_LIST)


def has_ab_pattern(evidence: Evidence) -> bool:
    return any_match(evidence.code, AB_PATTERN)


def uses_for_each(evidence: Evidence) -> bool:
    return bool(FOR_EACH.search(evidence.code))


def uses_pattern_test(evidence: Evidence) -> bool:
    return bool(PATTERN_TEST.search(evidence.code))


def outputs_matches(evidence: Evidence) -> bool:
    return any_match(evidence.code, MATCHES_OUTPUT) or logs_contain(evidence, MATCHES_LOG)
