"""Intent classifier (IntentClassifier)

Resolves one user turn to exactly one routing outcome using keyword and
attachment rules only.  No model call is involved: the gate between
"create a deck" and "everything else" is decided here, before the model is
ever asked for content.

Precedence, first match wins:

1. a deck-like file (PDF/PPT/PPTX) is attached        -> ARTIFACT_AUDIT
2. the founder answers a pending mode prompt by name   -> ARTIFACT_CREATION
3. audit / review / rate / feedback / critique wording -> ARTIFACT_AUDIT
   ("make a review of my deck" asks for an audit, not a deck)
4. an explicit create/build/make ... deck request      -> MODE_REQUIRED
   (or ARTIFACT_CREATION when a mode is already known)
5. everything else                                     -> GENERAL
   (image attachments turn this into a visual audit)
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from director.schemas.board import AgentType
from director.schemas.chat import Attachment, Message
from director.schemas.deck_content import DeckMode


class IntentKind(Enum):
    ARTIFACT_CREATION = "artifact_creation"
    ARTIFACT_AUDIT = "artifact_audit"
    MODE_REQUIRED = "mode_required"
    GENERAL = "general"


@dataclass(frozen=True)
class Intent:
    """Classification result"""

    kind: IntentKind
    mandate: AgentType | None = None
    mode: DeckMode | None = None
    visual_audit: bool = False
    signals: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_deck_request(self) -> bool:
        return self.kind in (IntentKind.ARTIFACT_CREATION, IntentKind.MODE_REQUIRED)

    @property
    def calls_model_for_chat(self) -> bool:
        return self.kind in (IntentKind.ARTIFACT_AUDIT, IntentKind.GENERAL)


_CREATE_VERB = re.compile(r"\b(?:create|generate|build|make|draft|produce|put\s+together)\b", re.IGNORECASE)
_DECK_NOUN = re.compile(
    r"\b(?:(?:pitch|investor|fundraising)(?:\s+\w+)?\s+)?(?:deck|slides|slide\s+deck)\b",
    re.IGNORECASE,
)
_DECK_QUALIFIER = re.compile(r"\b(?:pitch|investor|fundraising|seed|series\s+[a-c])\b", re.IGNORECASE)
# "How do I build a deck?" asks for advice, not an artifact.
_ADVICE_OPENER = re.compile(r"^\s*(?:how|what|why|when|which|should)\b", re.IGNORECASE)
_AUDIT_WORDS = re.compile(
    r"\b(?:audit|review|rate\s+(?:my|our|this|the)|feedback|critique|evaluate|assess|roast|tear\s+down)\b",
    re.IGNORECASE,
)

# Ordered: on equal keyword counts the earlier mandate wins.
_MANDATE_KEYWORDS: tuple[tuple[AgentType, tuple[str, ...]], ...] = (
    (AgentType.cpo, ("product", "ux", "user experience", "roadmap", "feature", "backlog", "onboarding", "usability")),
    (AgentType.cmo, ("gtm", "go-to-market", "go to market", "growth", "marketing", "acquisition", "channel", "funnel", "campaign", "brand", "seo", "content", "copy")),
    (AgentType.sales, ("pricing", "price", "sales", "pipeline", "closing", "close deals", "deal", "outreach", "prospect", "icp")),
    (AgentType.cfo, ("finance", "financial", "burn", "runway", "budget", "forecast", "cash", "unit economics", "margin")),
    (AgentType.fundraising, ("fundrais", "investor", "raise", "vc", "valuation", "seed round", "series a", "term sheet")),
    (AgentType.ceo, ("priorit", "tradeoff", "trade-off", "strategy", "focus", "decision", "what should we do")),
)


def _requests_deck(text: str) -> bool:
    if _ADVICE_OPENER.search(text):
        return False
    verb = _CREATE_VERB.search(text)
    if verb is None:
        return False
    deck = _DECK_NOUN.search(text, verb.end())
    if deck is None:
        return False
    # A bare "slides" only counts when the sentence says what kind of deck it is.
    return bool(_DECK_QUALIFIER.search(text)) or "deck" in deck.group(0).lower()


def _mode_from_text(text: str) -> DeckMode | None:
    wanted = text.strip().strip(".!").lower()
    for mode in DeckMode:
        if wanted == mode.value.lower():
            return mode
    return None


def _awaiting_mode(history: Sequence[Message]) -> bool:
    return bool(history) and history[-1].role == "model" and history[-1].is_mode_selection


def match_mandate(text: str) -> tuple[AgentType | None, tuple[str, ...]]:
    """Pick the executive whose keywords appear most often in *text*."""
    lowered = text.lower()
    best: AgentType | None = None
    best_hits: tuple[str, ...] = ()
    for agent, keywords in _MANDATE_KEYWORDS:
        hits = tuple(kw for kw in keywords if kw in lowered)
        if len(hits) > len(best_hits):
            best, best_hits = agent, hits
    return best, best_hits


def classify_intent(
    text: str,
    images: Sequence[Attachment] = (),
    files: Sequence[Attachment] = (),
    history: Sequence[Message] = (),
    mode: DeckMode | None = None,
) -> Intent:
    """Resolve one user turn to a single routing outcome.

    Args:
        text: the turn's free text (may be empty for attachment-only turns)
        images: inline image attachments
        files: inline file attachments
        history: messages before this turn, oldest first
        mode: the fundraising mode already chosen for this request, if any

    Returns:
        Intent with exactly one ``IntentKind``
    """
    attachments = tuple(images) + tuple(files)
    deck_files = [a for a in attachments if a.is_deck_like]
    if deck_files:
        names = tuple(a.filename or a.mime_type for a in deck_files)
        return Intent(IntentKind.ARTIFACT_AUDIT, mandate=AgentType.fundraising, signals=("attachment",) + names)

    if mode is None and _awaiting_mode(history):
        mode = _mode_from_text(text)
        if mode is not None:
            return Intent(IntentKind.ARTIFACT_CREATION, mandate=AgentType.fundraising, mode=mode, signals=("mode_reply",))

    audit_hit = _AUDIT_WORDS.search(text)
    if audit_hit:
        mandate, hits = match_mandate(text)
        return Intent(
            IntentKind.ARTIFACT_AUDIT,
            mandate=mandate or AgentType.fundraising,
            signals=(audit_hit.group(0).lower(),) + hits,
        )

    if _requests_deck(text):
        if mode is None:
            return Intent(IntentKind.MODE_REQUIRED, mandate=AgentType.fundraising, signals=("create_deck",))
        return Intent(IntentKind.ARTIFACT_CREATION, mandate=AgentType.fundraising, mode=mode, signals=("create_deck",))

    has_images = any(a.is_image for a in attachments)
    if has_images:
        return Intent(IntentKind.GENERAL, mandate=AgentType.cpo, visual_audit=True, signals=("image",))

    mandate, hits = match_mandate(text)
    return Intent(IntentKind.GENERAL, mandate=mandate, signals=hits)
