"""Split raw input into one block per story.

A block starts at a story header (``Story 1:``, ``Cuento 2:``, ...) and runs
up to the next header or the end of input. The header belongs to the block
that follows it. Whitespace-only blocks are dropped, so leading and trailing
blank lines never produce a block of their own; text before the first
header does, and fails later as a malformed title.
"""
from __future__ import annotations

from dataclasses import dataclass

from bilingual_stories.locales import STORY_SPLIT_RE


@dataclass(frozen=True)
class StoryBlock:
    text: str
    line: int  # 1-based line of the block's first character in the input


def locate_story_blocks(text: str) -> list[StoryBlock]:
    if not text.strip():
        return []

    cuts = [m.start() for m in STORY_SPLIT_RE.finditer(text)]
    if not cuts or cuts[0] != 0:
        cuts.insert(0, 0)
    cuts.append(len(text))

    blocks: list[StoryBlock] = []
    for start, end in zip(cuts, cuts[1:]):
        chunk = text[start:end]
        if not chunk.strip():
            continue
        blocks.append(StoryBlock(text=chunk, line=text.count("\n", 0, start) + 1))
    return blocks


def split_story_blocks(text: str) -> list[str]:
    return [b.text for b in locate_story_blocks(text)]
