"""Instruction assembly for letter generation.

build_instructions() is pure string construction: the only branching is the
tone and template lookups, so identical inputs give identical output.
"""

from datetime import date

from letterdesk.app.models.form import FormData, Template, Tone

SYSTEM_PROMPT = (
    "You are an expert immigration document writer. "
    "Generate professional, factual letters of explanation."
)

ROLE_FRAMING = (
    "You are an expert immigration document writer with 15+ years of experience drafting "
    "Letters of Explanation for USCIS, IRCC, and other immigration authorities. Your letters "
    "are known for being clear, professional, and persuasive while maintaining complete honesty."
)

TONE_INSTRUCTIONS: dict[Tone, str] = {
    Tone.formal: "Use formal, professional language throughout.",
    Tone.neutral: "Use clear, balanced language that is professional but not overly formal.",
    Tone.personal: "Use warm, personal language while maintaining professionalism.",
}

TEMPLATE_INSTRUCTIONS: dict[Template, str] = {
    Template.conservative: (
        "Follow a conservative, traditional layout: 4-5 substantial paragraphs, "
        "formal legal register, no headings or bullet points inside the body."
    ),
    Template.modern: (
        "Follow a modern layout: 7-9 short, focused paragraphs of 2-4 sentences each, "
        "plain direct language, one idea per paragraph."
    ),
    Template.professional: (
        "Follow a professional business layout: 5-6 well-developed paragraphs with a clear "
        "introduction, background, explanation, supporting details and conclusion."
    ),
}

PROHIBITED_CONTENT = (
    "Do NOT make legal claims or guarantees about immigration outcomes",
    "Do NOT provide legal advice or interpretations of law",
    "Do NOT use overly emotional language",
    "Do NOT make promises about future behavior you cannot guarantee",
    "Do NOT include irrelevant personal details",
)

REQUIRED_CONTENT = (
    "Specific dates and timelines",
    "Concrete facts and verifiable information",
    "Logical flow from background to explanation to conclusion",
    "Professional, respectful tone throughout",
    "Clear paragraph breaks for readability",
)

WRITING_STANDARDS = (
    "Write in first person, professional tone",
    "Use specific details and concrete examples (not vague statements)",
    "Be honest and factual - never exaggerate or make promises",
    "Address potential concerns proactively",
    "Show responsibility and accountability where appropriate",
    "Use proper paragraph spacing (double line breaks between paragraphs)",
    "Professional vocabulary appropriate for government officials",
)

TARGET_LENGTH = "500-800 words"


def format_letter_date(letter_date: date) -> str:
    """Format a date the way it appears on the letter, e.g. 'June 5, 2025'."""
    return f"{letter_date.strftime('%B')} {letter_date.day}, {letter_date.year}"


def build_instructions(form: FormData, letter_date: date) -> str:
    """Build the full instruction string for the text-generation call.

    Args:
        form: Validated applicant answers
        letter_date: Date printed on the letter

    Returns:
        Instruction string with applicant fields interpolated verbatim
    """
    about = form.about_you
    context = form.application_context
    explanation = form.explanation

    lines: list[str] = [ROLE_FRAMING, ""]

    # Applicant section
    lines.append("**Applicant Information:**")
    lines.append(f"- Full Name: {about.full_name}")
    lines.append(f"- Country of Citizenship: {about.citizenship_country}")
    lines.append(f"- Current Country of Residence: {about.current_country}")
    lines.append(f"- Application Type: {context.application_type}")
    lines.append(f"- Target Country: {context.target_country}")
    lines.append("")

    lines.append("**Situation Requiring Explanation:**")
    lines.append(explanation.main_explanation)
    lines.append("")

    # Optional context blocks
    if explanation.dates:
        lines.append("**Timeline/Relevant Dates:**")
        lines.append(explanation.dates)
        lines.append("")
    if explanation.background:
        lines.append("**Background Context:**")
        lines.append(explanation.background)
        lines.append("")
    if form.emphasis:
        lines.append("**Key Points to Emphasize:**")
        lines.append(form.emphasis)
        lines.append("")

    lines.append("**Writing Guidelines:**")
    lines.append(TONE_INSTRUCTIONS[form.tone])
    lines.append(TEMPLATE_INSTRUCTIONS[form.template])
    lines.append("")

    lines.append("**Critical Requirements:**")
    lines.append("1. **Format as a professional business letter:**")
    lines.append(f"   - Date: {format_letter_date(letter_date)}")
    lines.append('   - Salutation: "To Whom It May Concern:"')
    lines.append("   - Body with clear paragraph structure")
    lines.append(f'   - Closing: "Sincerely," followed by {about.full_name}')
    lines.append("")
    lines.append(f"2. **Length:** {TARGET_LENGTH}.")
    lines.append("")
    lines.append("3. **Writing Quality Standards:**")
    lines.extend(f"   - {item}" for item in WRITING_STANDARDS)
    lines.append("")
    lines.append("4. **What to AVOID:**")
    lines.extend(f"   - {item}" for item in PROHIBITED_CONTENT)
    lines.append("")
    lines.append("5. **What to INCLUDE:**")
    lines.extend(f"   - {item}" for item in REQUIRED_CONTENT)
    lines.append("")

    lines.append(
        "Generate a complete, professional Letter of Explanation now. "
        "Make it thorough, credible, and well-structured."
    )

    return "\n".join(lines)
