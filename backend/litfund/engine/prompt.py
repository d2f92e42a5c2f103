from __future__ import annotations

from collections.abc import Sequence

from ..schemas import Attachment, ContentPart, ImagePart, IntakeForm, TextPart

NOT_PROVIDED = "Not provided"
NOT_SPECIFIED = "Not specified"


def compose_prompt(
    form: IntakeForm, attachments: Sequence[Attachment] = ()
) -> tuple[str, list[ContentPart]]:
    """Render the intake as one narrative text part followed by image parts."""
    funding = f"${form.funding_request}" if form.funding_request else NOT_SPECIFIED

    text = (
        "=== LITIGATION FUNDING APPLICATION ===\n\n"
        "CASE NARRATIVE:\n"
        f"{form.case_narrative or NOT_PROVIDED}\n\n"
        "JURISDICTION:\n"
        f"{form.jurisdiction or NOT_SPECIFIED}\n\n"
        "KEY DOCUMENTS & LEGAL BASIS:\n"
        f"{form.key_documents or NOT_PROVIDED}\n\n"
        "DEFENDANT & ASSET PROFILE:\n"
        f"{form.defendant_profile or NOT_PROVIDED}\n\n"
        "DAMAGES ESTIMATE:\n"
        f"{form.damages_estimate or NOT_PROVIDED}\n\n"
        "FUNDING REQUEST (USD):\n"
        f"{funding}\n\n"
        "LEGAL REPRESENTATION:\n"
        f"{_representation(form)}"
    )

    images: list[ContentPart] = []
    if attachments:
        text += "\n\n--- ATTACHED DOCUMENTS ---\n"
        for doc in attachments:
            if doc.is_image:
                images.append(
                    ImagePart(
                        mime_type=doc.mime_type,
                        encoded_content=doc.encoded_content,
                    )
                )
                text += f"\n[Image attachment: {doc.name}]"
            else:
                text += f"\nDocument: {doc.name}\n{doc.encoded_content}\n"

    return text, [TextPart(text=text), *images]


def _representation(form: IntakeForm) -> str:
    status = form.representation_status
    if status == "represented":
        lines = ["Represented"]
        if form.firm_name:
            lines.append(f"  Firm: {form.firm_name}")
        if form.attorney_name:
            lines.append(f"  Lead Attorney: {form.attorney_name}")
        if form.fee_structure:
            lines.append(f"  Fee Structure: {form.fee_structure}")
        return "\n".join(lines)
    if status == "seeking":
        return "Seeking Representation"
    if status == "preliminary":
        return "Preliminary Only - exploring options"
    return status or NOT_SPECIFIED
