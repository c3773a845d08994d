"""
JSON extraction and repair for raw LLM completions.

``extract_json_text`` is a heuristic text pass (fences, prose, truncation)
that never raises. ``parse_json_object`` does the strict parse plus one
structural repair attempt and raises ``MalformedResponseError`` when the
text still cannot be read as a JSON object.
"""
import json
import logging
import re
from typing import Any, Callable, Dict, Mapping, Optional

from kisanai.errors import MalformedResponseError

logger = logging.getLogger(__name__)

_FENCE_OPEN_RE = re.compile(r"```json\s*", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")

_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")
_DANGLING_COMMA_RE = re.compile(r",\s*$")
_DANGLING_KEY_RE = re.compile(r',?\s*"[^"]*"\s*:\s*$')
_DANGLING_MEMBER_RE = re.compile(r'([{,])\s*"[^"]*"\s*$')
_UNQUOTED_KEY_RE = re.compile(r"([{,]\s*)([A-Za-z_][\w-]*)(\s*:)")
_BARE_VALUE_RE = re.compile(r"(:\s*)([A-Za-z_][^\",{}\[\]]*?)(\s*[,}\]])")
_JSON_LITERALS = {"true", "false", "null"}


def clean_completion_text(raw: str) -> str:
    """Remove markdown fences and collapse every whitespace run to one space."""
    text = _FENCE_OPEN_RE.sub("", raw)
    text = text.replace("```", "")
    return _WHITESPACE_RE.sub(" ", text).strip()


def extract_json_text(
    raw: Optional[str],
    truncation_suffixes: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """
    Pull the first plausible JSON object out of a completion.

    Args:
        raw: completion text as returned by the model
        truncation_suffixes: ``{marker: suffix}``; when the text has no closing
            brace at all and contains ``marker``, ``suffix`` is appended to
            close the expected top-level shape

    Returns:
        Candidate JSON text (possibly still unparseable), or None when the
        completion holds no ``{`` at all
    """
    if not raw:
        return None

    cleaned = clean_completion_text(raw)
    start = cleaned.find("{")
    if start == -1:
        logger.warning("No JSON object found in completion")
        return None

    candidate = cleaned[start:]
    if not candidate.endswith("}"):
        # Truncated or followed by prose
        last_brace = candidate.rfind("}")
        if last_brace > 0:
            candidate = candidate[:last_brace + 1]
        else:
            for marker, suffix in (truncation_suffixes or {}).items():
                if marker in candidate:
                    logger.info(f"Completing truncated block after {marker}")
                    candidate += suffix
                    break

    return candidate


def _close_open_structures(text: str) -> str:
    """Terminate an open string and append the closers for every open ``{``/``[``."""
    in_string = False
    escaped = False
    stack = []
    closer_for = {"{": "}", "[": "]"}

    for ch in text:
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
        elif ch in closer_for:
            stack.append(closer_for[ch])
        elif ch in "}]" and stack and stack[-1] == ch:
            stack.pop()

    repaired = text
    if in_string:
        repaired += '"'
    if stack:
        repaired = _DANGLING_KEY_RE.sub("", repaired)
        if stack[-1] == "}":
            # Key cut off before its colon
            repaired = _DANGLING_MEMBER_RE.sub(r"\1", repaired)
        repaired = _DANGLING_COMMA_RE.sub("", repaired)
        repaired += "".join(reversed(stack))
    return repaired


def _quote_bare_value(match: re.Match) -> str:
    prefix, word, terminator = match.groups()
    if word.strip() in _JSON_LITERALS:
        return match.group(0)
    return f'{prefix}"{word.strip()}"{terminator}'


def _map_outside_strings(text: str, fn: Callable[[str], str]) -> str:
    """Apply ``fn`` to every stretch of ``text`` that is not inside a string literal."""
    out = []
    segment_start = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] != '"':
            i += 1
            continue
        out.append(fn(text[segment_start:i]))
        j = i + 1
        while j < n and text[j] != '"':
            j += 2 if text[j] == "\\" else 1
        out.append(text[i:j + 1])
        i = j + 1
        segment_start = i
    out.append(fn(text[segment_start:]))
    return "".join(out)


def _fix_unquoted_tokens(segment: str) -> str:
    segment = _TRAILING_COMMA_RE.sub(r"\1", segment)
    segment = _UNQUOTED_KEY_RE.sub(r'\1"\2"\3', segment)
    return _BARE_VALUE_RE.sub(_quote_bare_value, segment)


def repair_json_text(text: str) -> str:
    """Best-effort structural repair. The output may parse yet be semantically wrong."""
    fixed = _close_open_structures(text.strip())
    return _map_outside_strings(fixed, _fix_unquoted_tokens)


def parse_json_object(text: Optional[str]) -> Dict[str, Any]:
    """Strict parse, then one repair pass; raises MalformedResponseError on failure."""
    if text is None:
        raise MalformedResponseError("No JSON object found in model response")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning(f"JSON parse failed: {e}, trying repair...")
        repaired = repair_json_text(text)
        try:
            data = json.loads(repaired)
            logger.info("✓ JSON repaired and parsed")
        except json.JSONDecodeError as second_error:
            logger.error(f"Repaired JSON still unparseable: {repaired[:200]}")
            raise MalformedResponseError(
                f"Could not parse model response as JSON: {second_error}"
            ) from second_error

    if not isinstance(data, dict):
        raise MalformedResponseError("Model response is not a JSON object")
    return data
