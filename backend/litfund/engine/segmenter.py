"""Turn the model's free-form answer into titled, verdict-tagged sections.

Three strategies run in a fixed order and the first one that yields any
section wins: markdown headers, then bold labels, then the whole text as a
single section. Verdicts come from keyword and emoji cues, one table per
splitting strategy, each checked in the order pass, fail, caution.
Negation is not understood ("insufficient" still contains "sufficient"),
and the precedence is kept as is because the classification users see
depends on it.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

from ..schemas import AnalysisSection, Verdict

FALLBACK_TITLE = "Underwriting Analysis"
EMPTY_CONTENT = "(No additional detail)"

_HEADER_SPLIT = re.compile(r"(?=^#{1,3}\s)", re.MULTILINE)
_HEADER_MARKERS = re.compile(r"^#{1,3}\s*")
_EMPHASIS = re.compile(r"\*\*([^*]+)\*\*")
_EMPHASIS_PREFIX = re.compile(r"^\*\*[^*]+\*\*:?\s*")

Cues = tuple[tuple[Verdict, re.Pattern[str]], ...]

HEADER_CUES: Cues = (
    (
        Verdict.PASS,
        re.compile(
            r"✅|verdict:\s*pass|\bpass\b.*complet|recommend.*fund|strong case"
            r"|\bstrong\b|sufficient"
        ),
    ),
    (
        Verdict.FAIL,
        re.compile(r"❌|verdict:\s*fail|decline|do not fund|reject|not recommended"),
    ),
    (
        Verdict.CAUTION,
        re.compile(
            r"⚠|verdict:\s*caution|conditional|insufficient"
            r"|additional.*needed|gaps?\s*identif"
        ),
    ),
)

# Bold-label cues match inside words ("passed", "strongly").
EMPHASIS_CUES: Cues = (
    (Verdict.PASS, re.compile(r"pass|sufficient|strong|recommend.*fund|✅")),
    (Verdict.FAIL, re.compile(r"fail|decline|reject|not recommended|❌")),
    (Verdict.CAUTION, re.compile(r"caution|conditional|insufficient|gaps|⚠")),
)

Strategy = Callable[[str], list[AnalysisSection] | None]


def classify_verdict(
    title: str, content: str, cues: Cues = HEADER_CUES
) -> Verdict | None:
    text = f"{title} {content}".lower()
    for verdict, pattern in cues:
        if pattern.search(text):
            return verdict
    return None


def split_by_headers(text: str) -> list[AnalysisSection] | None:
    blocks = [b for b in _HEADER_SPLIT.split(text) if b.strip()]
    if len(blocks) <= 1:
        return None

    sections = []
    for block in blocks:
        first, _, rest = block.strip().partition("\n")
        title = _HEADER_MARKERS.sub("", first).replace("*", "").strip()
        if not title:
            continue
        content = rest.strip()
        sections.append(
            AnalysisSection(
                title=title,
                content=content or EMPTY_CONTENT,
                verdict=classify_verdict(title, content),
            )
        )
    return sections or None


def split_by_emphasis(text: str) -> list[AnalysisSection] | None:
    starts = [m.start() for m in _EMPHASIS.finditer(text)]
    if not starts:
        return None
    bounds = [0, *starts] if text[: starts[0]].strip() else starts
    if len(bounds) <= 1:
        return None

    sections = []
    for start, end in zip(bounds, [*bounds[1:], len(text)]):
        block = text[start:end]
        match = _EMPHASIS.match(block)
        if match is None:
            continue
        title = match.group(1).strip().rstrip(":").strip()
        if not title:
            continue
        content = _EMPHASIS_PREFIX.sub("", block).strip()
        sections.append(
            AnalysisSection(
                title=title,
                content=content,
                verdict=classify_verdict(title, content, EMPHASIS_CUES),
            )
        )
    return sections or None


def whole_text(text: str) -> list[AnalysisSection]:
    return [AnalysisSection(title=FALLBACK_TITLE, content=text)]


STRATEGIES: tuple[Strategy, ...] = (split_by_headers, split_by_emphasis, whole_text)


def segment(text: str) -> list[AnalysisSection]:
    """Split ``text`` into sections. Never returns an empty list."""
    if not text or not text.strip():
        return [
            AnalysisSection(
                title="Error",
                content="No response received from the analysis engine.",
                verdict=Verdict.FAIL,
            )
        ]
    for strategy in STRATEGIES:
        sections = strategy(text)
        if sections:
            return sections
    return whole_text(text)


def sections_to_text(sections: Sequence[AnalysisSection]) -> str:
    parts = []
    for section in sections:
        lines = [f"## {section.title}"]
        if section.verdict is not None:
            lines.append(f"Verdict: {section.verdict.value.upper()}")
        lines.append(section.content)
        parts.append("\n".join(lines))
    return "\n\n".join(parts)
