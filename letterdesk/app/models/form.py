"""Applicant form answers submitted for letter generation."""

from enum import Enum

from pydantic import Field

from letterdesk.app.models.common import CamelModel


class Tone(str, Enum):
    """Register of the generated letter."""

    formal = "formal"
    neutral = "neutral"
    personal = "personal"


class Template(str, Enum):
    """Structural density of the generated letter."""

    conservative = "conservative"
    modern = "modern"
    professional = "professional"


class AboutYou(CamelModel):
    """Applicant identity."""

    full_name: str = Field(..., min_length=2, description="Applicant's full legal name")
    citizenship_country: str = Field(..., min_length=1)
    current_country: str = Field(..., min_length=1)


class ApplicationContext(CamelModel):
    """What the applicant is applying for, and where."""

    application_type: str = Field(..., min_length=1, description="e.g. visa, green-card")
    target_country: str = Field(..., min_length=1)


class Explanation(CamelModel):
    """Situation the letter has to explain."""

    main_explanation: str = Field(..., min_length=50)
    dates: str | None = None
    background: str | None = None


class ContactInformation(CamelModel):
    """Optional contact block. Never sent to the text-generation provider."""

    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    email: str | None = None
    phone: str | None = None


class FormData(CamelModel):
    """Complete set of answers from the multi-step form."""

    about_you: AboutYou
    application_context: ApplicationContext
    explanation: Explanation
    tone: Tone
    template: Template = Template.professional
    emphasis: str | None = None
    contact_info: ContactInformation | None = None
