"""Word-level diff between two plain-text renderings of a resume."""

from __future__ import annotations

import difflib
import re
from dataclasses import dataclass
from typing import List, Literal

from resume_studio.models.resume import ResumeRecord
from resume_studio.utils.plaintext import to_plain_text

SegmentKind = Literal["added", "removed", "unchanged"]

_TOKEN_RE = re.compile(r"\s+|\S+")


@dataclass(frozen=True)
class DiffSegment:
    kind: SegmentKind
    text: str

    @property
    def added(self) -> bool:
        return self.kind == "added"

    @property
    def removed(self) -> bool:
        return self.kind == "removed"


def tokenize(text: str) -> List[str]:
    """Split text into alternating word and whitespace tokens.

    Joining the tokens gives back the original text.
    """
    return _TOKEN_RE.findall(text)


def _append(segments: List[DiffSegment], kind: SegmentKind, tokens: List[str]) -> None:
    text = "".join(tokens)
    if not text:
        return
    if segments and segments[-1].kind == kind:
        segments[-1] = DiffSegment(kind, segments[-1].text + text)
    else:
        segments.append(DiffSegment(kind, text))


def diff_words(original: str, revised: str) -> List[DiffSegment]:
    """Compare two texts word by word.

    Adjacent tokens of the same kind are merged, so concatenating the
    ``unchanged`` and ``removed`` segments yields ``original`` and
    concatenating ``unchanged`` and ``added`` yields ``revised``.
    """
    a, b = tokenize(original), tokenize(revised)
    matcher = difflib.SequenceMatcher(None, a, b, autojunk=False)
    segments: List[DiffSegment] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            _append(segments, "unchanged", a[i1:i2])
        else:
            _append(segments, "removed", a[i1:i2])
            _append(segments, "added", b[j1:j2])
    return segments


def diff_records(original: ResumeRecord, revised: ResumeRecord) -> List[DiffSegment]:
    """Diff the plain-text reconstructions of two resume records."""
    return diff_words(to_plain_text(original), to_plain_text(revised))
