"""Prompt for the segmentation call.

The model is asked to re-emit the chunk verbatim, broken into small
self-contained units separated by a sentinel delimiter that is very
unlikely to appear in prose or code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from langchain_core.messages import HumanMessage, SystemMessage

if TYPE_CHECKING:
    from langchain_core.messages import BaseMessage

SEGMENTATION_SYSTEM = """\
You are a careful text segmenter. Your duty is to dissect the text you are
given into clear, bite-sized segments. Isolate each sentence and each code
snippet as an independent unit and end every unit with the marker
"{delimiter}". Do not summarise, paraphrase or drop anything: the
segments, joined back together, must reproduce the original text.
Respect the headings and formatting of the source, since they guide
where one unit ends and the next begins.
"""

SEGMENTATION_USER = """\
Split the text below into short, logically divided segments so it can be
processed further afterwards.

1. Break dense paragraphs into individual sentences; each sentence is one
   segment. End every segment with "{delimiter}".
2. Treat code snippets as standalone segments, separate from the text
   around them. End every snippet with "{delimiter}".
3. Use the hierarchical markings and formatting of the source (headings,
   lists, listings) to guide the segmentation.

Reply with the segments only.

Text:
{chunk}"""


def build_segmentation_prompt(chunk: str, delimiter: str) -> list[BaseMessage]:
    """Build the two-message prompt sent for one chunk."""
    return [
        SystemMessage(content=SEGMENTATION_SYSTEM.format(delimiter=delimiter)),
        HumanMessage(content=SEGMENTATION_USER.format(delimiter=delimiter, chunk=chunk)),
    ]
