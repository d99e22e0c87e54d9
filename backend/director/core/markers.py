"""
Parsing of the routing markers the board embeds in conversational replies.

Two signals travel inside the model's free text:

- a leading marker line ``ACTIVATING <AGENT> — Reason: <text>`` followed by
  a newline, naming the agent that answers and why;
- the literal token ``MODE_SELECTION_REQUIRED`` anywhere in the reply, which
  forces the fundraising-mode picker instead of showing the reply.

All marker handling goes through :func:`parse_reply`; callers never match
these strings themselves.
"""

import re
from dataclasses import dataclass

from director.core.prompts import ACTIVATION_MARKER, MODE_SELECTION_TOKEN
from director.schemas.chat import Activation

ACTIVATION_PATTERN = re.compile(
    rf"^[ \t]*{ACTIVATION_MARKER}[ \t]+(?P<agent>[^\n]+?)[ \t]+—[ \t]+Reason:[ \t]*(?P<reason>[^\n]*?)[ \t]*\r?\n",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ParsedReply:
    content: str
    activation: Activation | None = None
    mode_selection_required: bool = False


def parse_reply(text: str) -> ParsedReply:
    """Split a raw conversational reply into display content and routing signals.

    The activation line is only recognised as the first line of the reply
    (leading blank lines are ignored) and only when newline-terminated; a
    marker that appears later is ordinary content.
    """
    if MODE_SELECTION_TOKEN in text:
        return ParsedReply(content="", mode_selection_required=True)

    body = text.lstrip("\r\n")
    match = ACTIVATION_PATTERN.match(body)
    if match is None:
        return ParsedReply(content=text.strip())

    activation = Activation(agent=match.group("agent"), reason=match.group("reason"))
    return ParsedReply(content=body[match.end():].strip(), activation=activation)
