"""Generated letter and stored document models."""

from dataclasses import dataclass, field
from datetime import datetime

from pydantic import Field

from letterdesk.app.models.common import CamelModel
from letterdesk.app.models.form import FormData


class DocumentSection(CamelModel):
    """Labeled block of letter text, derived heuristically for display."""

    heading: str
    content: str


class GeneratedDocument(CamelModel):
    """Letter text as returned by generation, plus its parsed sections."""

    sections: list[DocumentSection] = Field(default_factory=list)
    raw_text: str = Field(..., description="Authoritative unparsed letter text")
    generated_at: datetime


@dataclass
class DocumentRecord:
    """Unit of storage in the document lifecycle store.

    ``is_paid`` is the visibility gate: callers must check it before releasing
    ``sections`` or ``raw_text`` to an untrusted reader.
    """

    sections: list[DocumentSection]
    raw_text: str
    generated_at: datetime
    form_data: FormData
    is_paid: bool = False
    expires_at: datetime | None = field(default=None, repr=False)

    @classmethod
    def from_generated(cls, document: GeneratedDocument, form_data: FormData) -> "DocumentRecord":
        """Build an unpaid record from a freshly generated document."""
        return cls(
            sections=list(document.sections),
            raw_text=document.raw_text,
            generated_at=document.generated_at,
            form_data=form_data,
        )

    def to_document(self) -> GeneratedDocument:
        """Public view of the letter content."""
        return GeneratedDocument(
            sections=self.sections,
            raw_text=self.raw_text,
            generated_at=self.generated_at,
        )

    @property
    def display_name(self) -> str:
        """Applicant name used for filenames and email greetings."""
        return self.form_data.about_you.full_name
