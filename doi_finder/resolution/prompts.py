"""Prompt for the grounded DOI lookup."""

from __future__ import annotations

NOT_FOUND_MARKER = "NOT_FOUND"

_RESOLUTION_PROMPT = """You are a bibliographic research assistant.
Use Google Search to identify the scholarly work described by the citation below
and find its Digital Object Identifier (DOI) and canonical title.

Citation:
\"\"\"
{citation}
\"\"\"

Answer with exactly these two lines first:
DOI: <the bare DOI, e.g. 10.1000/xyz123, or {marker}>
TITLE: <the canonical title of the work, or {marker}>

Then, optionally, one short sentence explaining how the match was confirmed.
Only report a DOI that you found in a search result. Never invent one."""


def build_resolution_prompt(citation: str) -> str:
    return _RESOLUTION_PROMPT.format(citation=citation.strip(), marker=NOT_FOUND_MARKER)
