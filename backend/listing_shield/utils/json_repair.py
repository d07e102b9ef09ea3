"""
Best-effort JSON repair

Heuristic normalization for loosely formatted JSON (hand-edited feeds,
LLM output). It is a regex pass, not a parser. Handled malformations:

- trailing commas before '}' or ']'
- bare (unquoted) object keys
- single-quoted string values
- escaped single quotes (\\')
- raw newlines inside double-quoted strings

Anything else is returned as-is and will still fail json.loads.
"""

import json
import re
from typing import Any

_TRAILING_COMMA_OBJECT = re.compile(r",\s*}")
_TRAILING_COMMA_ARRAY = re.compile(r",\s*]")
_BARE_KEY = re.compile(r"([{,]\s*)(\w+):")
_SINGLE_QUOTED_VALUE = re.compile(r":\s*'([^']*)'")
_STRING_LITERAL = re.compile(r'"(?:[^"\\]|\\.)*"')


def repair_json_string(json_string: str) -> str:
    """Return the input unchanged when it already parses, else the patched text"""
    try:
        json.loads(json_string)
        return json_string
    except (json.JSONDecodeError, TypeError):
        pass

    repaired = _TRAILING_COMMA_OBJECT.sub("}", json_string)
    repaired = _TRAILING_COMMA_ARRAY.sub("]", repaired)
    repaired = _BARE_KEY.sub(r'\1"\2":', repaired)
    repaired = _SINGLE_QUOTED_VALUE.sub(r':"\1"', repaired)
    repaired = repaired.replace("\\'", "'")
    repaired = _STRING_LITERAL.sub(lambda m: m.group(0).replace("\n", "\\n"), repaired)
    return repaired


def parse_json_lenient(json_string: str) -> Any:
    """json.loads after repair; raises json.JSONDecodeError when beyond repair"""
    return json.loads(repair_json_string(json_string))
