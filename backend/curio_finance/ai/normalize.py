"""
Turn near-JSON model output into ``{"commentary": [...], "tips": [...]}``.

Models asked for JSON still wrap it in prose, use single quotes, leave keys
bare or stop mid-object. Each pass below handles one of those defects and can
be used on its own; ``normalize_to_insight_json`` runs them in order.
"""

import json
import logging
import re
from typing import Any, Dict, List

from curio_finance.exceptions import ResponseParseError

logger = logging.getLogger(__name__)

_OBJECT_SPAN = re.compile(r"\{[\s\S]*\}")
_NON_ASCII = re.compile(r"[^\x00-\x7f]")
_ESCAPED_WHITESPACE = re.compile(r"\\[rnt]")
_WHITESPACE_RUN = re.compile(r"\s+")
_TRAILING_COMMA = re.compile(r",\s*([}\]])")
_BARE_KEY = re.compile(r"([{,]\s*)(\w+)\s*:")
_DOUBLE_QUOTED = re.compile(r'"(?:[^"\\]|\\.)*"')
_QUOTED = re.compile(r"\"(?:[^\"\\]|\\.)*\"|'([^']*)'")


def extract_json_span(text: str) -> str:
    """Text from the first ``{`` to the last ``}`` (or to the end if it never closes)."""
    text = text.strip()
    if text.startswith("{"):
        return text

    match = _OBJECT_SPAN.search(text)
    if match:
        return match.group(0)

    start = text.find("{")
    if start == -1:
        raise ResponseParseError("No JSON object found in response", raw=text)
    return text[start:]


def sanitize(text: str) -> str:
    text = _NON_ASCII.sub("", text)
    text = _ESCAPED_WHITESPACE.sub(" ", text)
    text = _WHITESPACE_RUN.sub(" ", text)
    return text.strip()


def close_truncated(text: str) -> str:
    if not text.endswith("}"):
        text += "}"
    return text


def _outside_strings(text: str, repair) -> str:
    """Apply ``repair`` to the stretches of ``text`` between double-quoted strings."""
    parts = []
    last = 0
    for match in _DOUBLE_QUOTED.finditer(text):
        parts.append(repair(text[last:match.start()]))
        parts.append(match.group(0))
        last = match.end()
    parts.append(repair(text[last:]))
    return "".join(parts)


def strip_trailing_commas(text: str) -> str:
    return _outside_strings(text, lambda chunk: _TRAILING_COMMA.sub(r"\1", chunk))


def quote_bare_keys(text: str) -> str:
    return _outside_strings(text, lambda chunk: _BARE_KEY.sub(r'\1"\2":', chunk))


def convert_single_quotes(text: str) -> str:
    """
    Rewrite single-quoted strings, keys included, as JSON strings.

    Double-quoted strings are matched first so apostrophes inside them are left alone.
    """
    return _QUOTED.sub(
        lambda m: m.group(0) if m.group(1) is None else json.dumps(m.group(1)),
        text,
    )


# Quotes first, so the later passes can tell string contents from structure.
REPAIR_PASSES = (convert_single_quotes, strip_trailing_commas, quote_bare_keys)


def parse_with_repair(text: str, provider: str = "unknown") -> Any:
    """Strict parse, then one repair pass and a single retry."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    repaired = text
    for repair in REPAIR_PASSES:
        repaired = repair(repaired)

    try:
        return json.loads(repaired)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse %s response as JSON: %s | span=%r", provider, e, repaired)
        raise ResponseParseError(
            f"Failed to parse LLM response as JSON: {e}", provider=provider, raw=repaired
        ) from e


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def coerce_insight_shape(parsed: Any) -> Dict[str, List[str]]:
    """
    Keep ``commentary`` and ``tips`` only if both are well-formed.

    Missing fields become empty lists. If either present field is not a list
    of strings, both are dropped.
    """
    empty: Dict[str, List[str]] = {"commentary": [], "tips": []}
    if not isinstance(parsed, dict):
        return empty

    commentary = parsed.get("commentary")
    tips = parsed.get("tips")
    commentary = [] if commentary is None else commentary
    tips = [] if tips is None else tips

    if not (_is_string_list(commentary) and _is_string_list(tips)):
        return empty
    return {"commentary": commentary, "tips": tips}


def normalize_to_insight_json(raw_text: str, provider: str = "unknown") -> Dict[str, List[str]]:
    """Run every pass over ``raw_text``. Raises ``ResponseParseError`` if nothing parses."""
    try:
        span = extract_json_span(raw_text or "")
    except ResponseParseError as e:
        e.provider = provider
        logger.error("No JSON object in %s response: %r", provider, raw_text)
        raise

    span = close_truncated(sanitize(span))
    return coerce_insight_shape(parse_with_repair(span, provider))
