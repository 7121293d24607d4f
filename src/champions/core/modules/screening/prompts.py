import base64
from typing import Any

from champions.core.modules.screening.models import ScreeningAttachment

SYSTEM_PROMPT = """You are an expert vascular specialist assistant for the CHAMPIONS Limb Preservation Network.
Your goal is to screen for Peripheral Artery Disease (PAD) risks.

Analyze the provided medical notes and/or file uploads (which may be blood work results, medical reports, or photos of legs/feet).

Provide a response in the following structure:
1. **Risk Assessment**: High, Medium, or Low. Explain why.
2. **Key Observations**: Bullet points of what you found in the text or file.
3. **Lifestyle Recommendations**: 3-4 actionable tips.
4. **Action Plan**: Specifically, should they see a doctor? (Yes/No/Urgent).

IMPORTANT: If the file is unclear or not medical, politely say so.
Disclaimer: Start your response with "AI Assessment (Not a Diagnosis):"."""

ATTACHMENT_NOTE = (
    "I have uploaded a file (image, PDF, DOCX, or TXT) containing my lab results or leg condition. Please analyze it."
)


def _attachment_part(attachment: ScreeningAttachment) -> dict[str, Any]:
    data_url = f"data:{attachment.mime_type};base64,{base64.b64encode(attachment.content).decode('ascii')}"
    if attachment.mime_type.startswith("image/"):
        return {"type": "image_url", "image_url": {"url": data_url}}
    return {"type": "file", "file": {"file_data": data_url}}


def build_screening_messages(medical_history: str, attachment: ScreeningAttachment | None) -> list[dict[str, Any]]:
    """Chat messages for one screening request: system template plus the user's parts."""
    parts: list[dict[str, Any]] = []
    if medical_history.strip():
        parts.append({"type": "text", "text": f"Patient History/Symptoms: {medical_history.strip()}"})
    if attachment is not None:
        parts.append(_attachment_part(attachment))
        parts.append({"type": "text", "text": ATTACHMENT_NOTE})
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": parts},
    ]
