# cvhistory/domain/snapshot.py
"""
Immutable snapshot of a CV's content fields.

A Snapshot is what gets frozen into every CvVersion row. It is built
from the live document state (or from a stored JSON snapshot) and is
never mutated afterwards.
"""
from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ValidationError


class SectionType(StrEnum):
    SUMMARY = "summary"
    EXPERIENCE = "experience"
    EDUCATION = "education"
    SKILLS = "skills"
    CERTIFICATIONS = "certifications"
    CUSTOM = "custom"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class PersonalInfo(_Frozen):
    model_config = ConfigDict(frozen=True, extra="allow")

    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None


class Theme(_Frozen):
    model_config = ConfigDict(frozen=True, extra="allow")

    primary_color: Optional[str] = None
    font_family: Optional[str] = None
    layout: Optional[str] = None  # modern, classic, minimal, creative


class _SectionBase(_Frozen):
    title: str
    order: int = 0
    visible: bool = True
    content: Dict[str, Any] = Field(default_factory=dict)


class SummarySection(_SectionBase):
    type: Literal["summary"] = "summary"


class ExperienceSection(_SectionBase):
    type: Literal["experience"] = "experience"


class EducationSection(_SectionBase):
    type: Literal["education"] = "education"


class SkillsSection(_SectionBase):
    type: Literal["skills"] = "skills"


class CertificationsSection(_SectionBase):
    type: Literal["certifications"] = "certifications"


class CustomSection(_SectionBase):
    type: Literal["custom"] = "custom"


Section = Annotated[
    Union[
        SummarySection,
        ExperienceSection,
        EducationSection,
        SkillsSection,
        CertificationsSection,
        CustomSection,
    ],
    Field(discriminator="type"),
]


class Snapshot(_Frozen):
    title: str = ""
    summary: Optional[str] = None
    personal_info: Optional[PersonalInfo] = None
    sections: List[Section] = Field(default_factory=list)
    theme: Optional[Theme] = None
    template_id: Optional[str] = None
    generated_html: Optional[str] = None

    @classmethod
    def from_state(cls, state: Dict[str, Any]) -> "Snapshot":
        """
        Build a Snapshot from a live document state or a stored snapshot.

        Keys that are not snapshot fields (id, owner_id, timestamps) are
        ignored. Malformed content raises ValidationError.
        """
        data = {field: state.get(field) for field in cls.model_fields if field in state}
        for field in ("title", "sections"):
            if data.get(field) is None:
                data.pop(field, None)

        try:
            return cls.model_validate(data)
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid document state: {exc}") from exc

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")

    def to_json(self) -> str:
        return self.model_dump_json()

    @property
    def size_bytes(self) -> int:
        return len(self.to_json().encode("utf-8"))
