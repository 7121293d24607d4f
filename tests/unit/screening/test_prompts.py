import base64

from champions.core.modules.screening.models import ScreeningAttachment
from champions.core.modules.screening.prompts import ATTACHMENT_NOTE, SYSTEM_PROMPT, build_screening_messages


class TestBuildScreeningMessages:
    def test_history_only(self):
        messages = build_screening_messages("  smoker, leg pain when walking ", None)
        assert messages[0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert messages[1]["role"] == "user"
        assert messages[1]["content"] == [
            {"type": "text", "text": "Patient History/Symptoms: smoker, leg pain when walking"}
        ]

    def test_image_attachment_as_data_url(self):
        attachment = ScreeningAttachment(content=b"\xff\xd8jpeg", mime_type="image/jpeg")
        parts = build_screening_messages("", attachment)[1]["content"]

        expected_url = "data:image/jpeg;base64," + base64.b64encode(b"\xff\xd8jpeg").decode()
        assert parts == [
            {"type": "image_url", "image_url": {"url": expected_url}},
            {"type": "text", "text": ATTACHMENT_NOTE},
        ]

    def test_document_attachment_as_file_part(self):
        attachment = ScreeningAttachment(content=b"%PDF-1.7", mime_type="application/pdf")
        parts = build_screening_messages("diabetic", attachment)[1]["content"]
        assert parts[0]["type"] == "text"
        assert parts[1]["type"] == "file"
        assert parts[1]["file"]["file_data"].startswith("data:application/pdf;base64,")

    def test_system_prompt_requires_disclaimer(self):
        assert "AI Assessment (Not a Diagnosis):" in SYSTEM_PROMPT
