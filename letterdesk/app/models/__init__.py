"""Models package - re-exports for convenience."""

from letterdesk.app.models.common import CamelModel, ErrorCode, Result
from letterdesk.app.models.document import DocumentRecord, DocumentSection, GeneratedDocument
from letterdesk.app.models.form import (
    AboutYou,
    ApplicationContext,
    ContactInformation,
    Explanation,
    FormData,
    Template,
    Tone,
)

__all__ = [
    "AboutYou",
    "ApplicationContext",
    "CamelModel",
    "ContactInformation",
    "DocumentRecord",
    "DocumentSection",
    "ErrorCode",
    "Explanation",
    "FormData",
    "GeneratedDocument",
    "Result",
    "Template",
    "Tone",
]
