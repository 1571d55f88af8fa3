from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

AppointmentType = Literal["shave", "massage", "intimate", "talk", "surprise"]
FantasyCategory = Literal["romantic", "adventurous", "playful", "sensual", "exploration"]
ConversationType = Literal["general", "relationship", "intimacy", "health", "emotional"]
MessageType = Literal["text", "image", "audio"]


def parse_tags(raw) -> List[str]:
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        items = raw
    else:
        items = str(raw).split(",")
    return [str(item).strip() for item in items if str(item).strip()]


class FormModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


class AppointmentForm(FormModel):
    title: str = Field(min_length=1)
    date: dt.date
    time: dt.time
    type: AppointmentType = "shave"
    notes: str = ""

    def to_row(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "date": self.date.isoformat(),
            "time": self.time.strftime("%H:%M"),
            "type": self.type,
            "notes": self.notes,
        }


class FantasyForm(FormModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    category: FantasyCategory = "romantic"
    intensity: int = Field(1, ge=1, le=5)
    is_private: bool = False
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value):
        return parse_tags(value)

    def to_row(self) -> Dict[str, Any]:
        return self.model_dump()


class MessageForm(FormModel):
    content: str = Field(min_length=1)
    message_type: MessageType = "text"
    media_url: Optional[str] = None


class ConversationForm(FormModel):
    user_message: str = Field(min_length=1)
    conversation_type: ConversationType = "general"
    mood_tag: Optional[str] = None

    @field_validator("mood_tag")
    @classmethod
    def _blank_mood_is_none(cls, value):
        return value or None


class MoodLogForm(FormModel):
    date: dt.date
    overall_mood: int = Field(5, ge=1, le=10)
    intimacy_mood: int = Field(5, ge=1, le=10)
    energy_level: int = Field(5, ge=1, le=10)
    connection_feeling: int = Field(5, ge=1, le=10)
    notes: str = ""

    def to_row(self) -> Dict[str, Any]:
        payload = self.model_dump()
        payload["date"] = self.date.isoformat()
        return payload


class ProfileForm(FormModel):
    display_name: str = Field(min_length=1, max_length=80)
    preferences: Dict[str, Any] = Field(default_factory=dict)


class ToySessionRecord(FormModel):
    toy_name: str
    toy_type: str
    session_data: Dict[str, Any] = Field(default_factory=dict)
    duration: str
    session_notes: str = ""
    mood_before: int = Field(5, ge=1, le=10)
