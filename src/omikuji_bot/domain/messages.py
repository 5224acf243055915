"""Versioned storage format for committed slips."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from omikuji_bot.domain.omikuji import Draft, DraftSection, FortuneClass, SectionKind

MESSAGE_VERSION = 1


class SlipSectionPayload(BaseModel):
    """A single filled-in section of a stored slip."""

    kind: SectionKind
    text: str = Field(min_length=1)


class SlipMessage(BaseModel):
    """Serialized contents of a slip.

    Documents written before versioning carried no ``version`` key and stored
    sections as ``[kind, text]`` pairs; they are upgraded on read.
    """

    model_config = ConfigDict(populate_by_name=True)

    version: Literal[1] = MESSAGE_VERSION
    fortune_class: FortuneClass = Field(alias="class")
    description: str
    sections: list[SlipSectionPayload] = Field(min_length=1)
    photo: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _upgrade_legacy(cls, data: object) -> object:
        if not isinstance(data, dict) or "version" in data:
            return data
        sections = []
        for section in data.get("sections") or []:
            if isinstance(section, list | tuple) and len(section) == 2:  # noqa: PLR2004
                sections.append({"kind": section[0], "text": section[1]})
            else:
                sections.append(section)
        return {**data, "version": MESSAGE_VERSION, "sections": sections}

    def draft_sections(self) -> list[DraftSection]:
        """Return the sections in the shape used for rendering."""
        return [
            DraftSection(kind=section.kind, text=section.text)
            for section in self.sections
        ]


def encode_draft(draft: Draft) -> str:
    """Encode a completed draft, including its photo, as a JSON document."""
    if not draft.is_complete or draft.fortune_class is None:
        raise ValueError("Only completed drafts can be encoded")
    message = SlipMessage(
        fortune_class=draft.fortune_class,
        description=draft.description or "",
        sections=[
            SlipSectionPayload(kind=section.kind, text=section.text)
            for section in draft.sections
        ],
        photo=draft.photo,
    )
    return message.model_dump_json(by_alias=True)


def decode_message(raw: str) -> SlipMessage:
    """Decode a stored slip message; raises ``pydantic.ValidationError``."""
    return SlipMessage.model_validate_json(raw)
