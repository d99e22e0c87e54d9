import base64
import binascii
import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from director.schemas.board import AgentType
from director.schemas.deck_content import DeckMode, PitchDeckSlide
from director.schemas.startup import StartupContext

DECK_MIME_TYPES = frozenset({
    "application/pdf",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
})
DECK_EXTENSIONS = (".pdf", ".ppt", ".pptx")


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class Attachment(BaseModel):
    """Inline binary payload sent alongside a user turn."""

    data: bytes
    mime_type: str
    filename: str | None = None

    model_config = ConfigDict(frozen=True, ser_json_bytes="base64")

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")

    @property
    def is_deck_like(self) -> bool:
        if self.mime_type in DECK_MIME_TYPES:
            return True
        return bool(self.filename) and self.filename.lower().endswith(DECK_EXTENSIONS)


class Activation(BaseModel):
    agent: str
    reason: str

    model_config = ConfigDict(frozen=True)


class Message(BaseModel):
    role: Literal["user", "model"]
    content: str
    images: tuple[Attachment, ...] = ()
    files: tuple[Attachment, ...] = ()
    is_mode_selection: bool = False
    is_deck: bool = False
    slides: tuple[PitchDeckSlide, ...] | None = None
    agent: AgentType | None = None
    activation: Activation | None = None
    is_error: bool = False
    created_at: datetime.datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(frozen=True, ser_json_bytes="base64")

    @property
    def attachments(self) -> tuple[Attachment, ...]:
        return self.images + self.files


# ---------------------------------------------------------------------------
# HTTP payloads
# ---------------------------------------------------------------------------

class AttachmentUpload(BaseModel):
    """An attachment as the browser sends it: base64 text, not raw bytes."""

    data: str
    mime_type: str
    filename: str | None = None

    @field_validator("data")
    @classmethod
    def _strip_data_url(cls, v: str) -> str:
        # FileReader.readAsDataURL prefixes the payload with "data:<mime>;base64,"
        if v.startswith("data:") and "," in v:
            v = v.split(",", 1)[1]
        return v

    def to_attachment(self) -> Attachment:
        try:
            raw = base64.b64decode(self.data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Attachment '{self.filename or self.mime_type}' is not valid base64") from e
        return Attachment(data=raw, mime_type=self.mime_type, filename=self.filename)


class TurnCreate(BaseModel):
    content: str = ""
    attachments: list[AttachmentUpload] = []


class ModeSelect(BaseModel):
    mode: DeckMode
    brief: str | None = None


class SessionCreate(StartupContext):
    pass


class TurnStatusRead(BaseModel):
    state: str
    agent: str | None = None
    reason: str | None = None
    error: str | None = None


class SessionRead(BaseModel):
    id: UUID
    context: StartupContext
    message_count: int
    status: TurnStatusRead
