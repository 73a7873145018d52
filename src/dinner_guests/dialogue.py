"""Segmentation of generated conversation text into speaker turns."""

import re
from typing import List, Optional, Tuple

import structlog

from .models import DialogueTurn, Transcript

logger = structlog.get_logger(__name__)

FALLBACK_SPEAKER = "Conversation"

# **Name**: / **Name:** / *Name*: / __Name__:
_EMPHASIZED_TAG = (
    r"(?P<mark>\*\*|\*|__)(?P<emphasized>[^*_:\n]{1,80}?)"
    r"(?:(?P=mark)[ \t]*:|:[ \t]*(?P=mark))"
)
# A line that opens with a name-like token and a colon; find_tags keeps it
# only when the first letter is a capital (any script)
_BARE_TAG = r"^[ \t]*(?P<bare>[^\W\d_][\w.'-]*(?:[ \t]+[^\W\d_][\w.'-]*){0,4})[ \t]*:"

SPEAKER_TAG = re.compile(f"{_EMPHASIZED_TAG}|{_BARE_TAG}", re.MULTILINE)

_OPENING_QUOTES = ('"', "“")
_CLOSING_QUOTES = ('"', "”")


def clean_utterance(content: str) -> str:
    """Trim, unwrap one layer of quotes and drop a dangling closing quote."""
    content = content.strip()
    if content.startswith(_OPENING_QUOTES):
        content = content[1:]
        if content.endswith(_CLOSING_QUOTES):
            content = content[:-1]
        content = content.strip()
    elif len(content) >= 2 and content[0] == content[-1] == "'":
        content = content[1:-1].strip()
    if content.endswith(_CLOSING_QUOTES):
        content = content[:-1].rstrip()
    return content


class DialogueSegmenter:
    """Splits one block of generated text into a ``Transcript``."""

    def find_tags(self, text: str) -> List[Tuple[str, int, int]]:
        """Locate speaker tags as ``(label, start, end)`` in left-to-right order."""
        tags = []
        for match in SPEAKER_TAG.finditer(text):
            bare = match.group("bare")
            if bare is not None and not bare[0].isupper():
                continue
            label = (match.group("emphasized") or bare or "").strip()
            if label:
                tags.append((label, match.start(), match.end()))
        return tags

    def segment(self, text: Optional[str]) -> Transcript:
        """Convert generated text into ordered turns.

        Never fails: text without any usable speaker tag becomes a single
        ``Conversation`` turn holding the whole input.
        """
        text = text or ""
        tags = self.find_tags(text)

        turns: List[DialogueTurn] = []
        for index, (label, _, content_start) in enumerate(tags):
            content_end = tags[index + 1][1] if index + 1 < len(tags) else len(text)
            utterance = clean_utterance(text[content_start:content_end])
            if utterance:
                turns.append(DialogueTurn(speaker_label=label, utterance=utterance, ordinal=len(turns)))

        if not turns:
            logger.debug("No speaker structure found, wrapping whole text", length=len(text))
            turns = [DialogueTurn(speaker_label=FALLBACK_SPEAKER, utterance=text, ordinal=0)]
        else:
            logger.debug("Dialogue segmented", turns=len(turns), tags=len(tags))

        return Transcript(turns=tuple(turns))
