from __future__ import annotations

import json
from typing import Any, Dict, Optional, Tuple

from task_synthesis.errors import MalformedResponse


def find_first_object_span(text: str) -> Optional[Tuple[int, int]]:
    """Return (start, end) of the first balanced ``{...}`` span in ``text``.

    The scan tracks brace depth and ignores braces inside JSON string literals
    (including escaped quotes), so ``{"a": "}"}`` is one span. Text before the
    first ``{`` and after its matching ``}`` is ignored, which is how prose
    around the object ("Sure! Here it is: {...} Thanks.") is tolerated.
    Returns None when no ``{`` exists or the first one is never closed.
    """
    start = text.find("{")
    if start < 0:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return start, i + 1
    return None


def extract_json_object(text: str) -> Dict[str, Any]:
    """Leniently parse model output into a dict.

    Only the first balanced span is considered. A second object later in the
    text is never used as a fallback; if the first span does not parse, the
    whole payload counts as malformed.
    """
    span = find_first_object_span(text or "")
    if span is None:
        raise MalformedResponse("no JSON object found in model output")

    raw = text[span[0]:span[1]]
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"invalid JSON in model output: {e}") from e
    except (ValueError, RecursionError) as e:
        # integers past the digit limit, or nesting deeper than the decoder allows
        raise MalformedResponse(f"undecodable JSON in model output: {type(e).__name__}") from e
