"""Extraction of DOI and title from the model's labelled answer.

The model is asked for "DOI: ..." and "TITLE: ..." lines. It sometimes wraps
them in markdown, prefixes the DOI with a resolver URL, or skips the labels
entirely, so the parsing here is tolerant. It does not validate DOI syntax.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

_LABEL_LINE = r"^[\s*_>#-]*{label}[\s*_]*:[\s*_]*(?P<value>.*)$"
_DOI_LINE_RE = re.compile(_LABEL_LINE.format(label="DOI"), re.IGNORECASE | re.MULTILINE)
_TITLE_LINE_RE = re.compile(_LABEL_LINE.format(label="TITLE"), re.IGNORECASE | re.MULTILINE)

# DOI format: 10.<registrant>/<suffix>; suffix runs to whitespace
_DOI_PATTERN = re.compile(r"\b10\.\d{4,9}/\S+")
_TRAILING_PUNCT = ".,;:'\"`*_"
_CLOSERS = {")": "(", "]": "[", ">": "<"}
_RESOLVER_PREFIX = re.compile(r"^(?:https?://(?:dx\.)?doi\.org/|doi:\s*)", re.IGNORECASE)

_NOT_FOUND_MARKERS = frozenset({
    "", "NOT_FOUND", "NOT FOUND", "NOTFOUND", "NONE", "N/A", "NA", "NULL", "UNKNOWN",
})
_DECORATION = " \t*_`\"'<>[]"


def _strip_decoration(value: str) -> str:
    return value.strip().strip(_DECORATION).strip()


def _is_marker(value: str) -> bool:
    return value.upper().rstrip(".") in _NOT_FOUND_MARKERS


def _trim_doi(candidate: str) -> str:
    """Drop trailing punctuation and closing brackets that the DOI did not open."""
    while candidate:
        last = candidate[-1]
        if last in _TRAILING_PUNCT:
            candidate = candidate[:-1]
        elif last in _CLOSERS and candidate.count(last) > candidate.count(_CLOSERS[last]):
            candidate = candidate[:-1]
        else:
            break
    return candidate


def normalize_doi(value: str) -> Optional[str]:
    """Reduce a raw DOI field to the bare DOI, or None for a not-found marker."""
    cleaned = _strip_decoration(value)
    if _is_marker(cleaned):
        return None
    match = _DOI_PATTERN.search(value)
    if match:
        return _trim_doi(match.group(0))
    cleaned = _RESOLVER_PREFIX.sub("", cleaned)
    token = cleaned.split()[0] if cleaned.split() else ""
    token = _trim_doi(_strip_decoration(token))
    if _is_marker(token):
        return None
    return token


def find_doi_in_text(text: str) -> Optional[str]:
    match = _DOI_PATTERN.search(text)
    if not match:
        return None
    return _trim_doi(match.group(0))


def parse_title(text: str) -> Optional[str]:
    match = _TITLE_LINE_RE.search(text)
    if not match:
        return None
    title = _strip_decoration(match.group("value"))
    if _is_marker(title):
        return None
    return title


def parse_resolution_text(text: str) -> Tuple[Optional[str], Optional[str]]:
    """Return (doi, title) parsed from a model answer.

    A labelled DOI line wins, including an explicit not-found marker. Only when
    the label is missing altogether is the first DOI-shaped string in the text
    used.
    """
    doi_line = _DOI_LINE_RE.search(text)
    if doi_line:
        doi = normalize_doi(doi_line.group("value"))
    else:
        doi = find_doi_in_text(text)
    return doi, parse_title(text)
