"""
Unit tests for the submission service: validation, attachment extraction and
HTML rendering. Pure functions, no app or network involved.
"""

import pytest

from formrelay.models.submission import EmailAttachment, OutboundEmail
from formrelay.services.submission import (
    SubmissionError,
    build_outbound_email,
    extract_attachments,
    render_submission_html,
)


def _payload(**overrides) -> dict:
    payload = {
        "to": "a@b.com",
        "form": {"email": "c@d.com", "firstName": "Jane", "agree": True},
    }
    payload.update(overrides)
    return payload


class TestBuildOutboundEmail:
    """build_outbound_email validates in order and shapes the message."""

    def test_builds_message(self):
        message = build_outbound_email(_payload(), sender="Forms <forms@example.com>")

        assert isinstance(message, OutboundEmail)
        assert message.sender == "Forms <forms@example.com>"
        assert message.to == ["a@b.com"]
        assert message.subject == "New Submission"
        assert message.reply_to == "c@d.com"
        assert message.attachments == []

    def test_subject_is_stringified(self):
        message = build_outbound_email(_payload(subject=2025))
        assert message.subject == "2025"

    def test_non_dict_payload_is_treated_as_empty(self):
        with pytest.raises(SubmissionError) as exc_info:
            build_outbound_email(None)

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Missing or invalid 'to' email."

    def test_to_checked_before_form(self):
        with pytest.raises(SubmissionError) as exc_info:
            build_outbound_email({"form": None})

        assert exc_info.value.message == "Missing or invalid 'to' email."

    def test_empty_form_object_reports_missing_email(self):
        with pytest.raises(SubmissionError) as exc_info:
            build_outbound_email(_payload(form={}))

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Missing form.email."

    def test_form_email_checked_before_attachment(self):
        payload = _payload(
            form={"firstName": "Jane"},
            attachment={"name": "x.png", "dataUrl": "no-comma"},
        )

        with pytest.raises(SubmissionError) as exc_info:
            build_outbound_email(payload)

        assert exc_info.value.message == "Missing form.email."

    def test_non_string_email_is_stringified_for_reply_to(self):
        message = build_outbound_email(_payload(form={"email": 12345}))
        assert message.reply_to == "12345"

    def test_to_resend_params(self):
        payload = _payload(attachment={"name": "a.png", "dataUrl": "data:image/png;base64,QUJD"})

        params = build_outbound_email(payload, sender="Forms <f@x.io>").to_resend_params()

        assert params["from"] == "Forms <f@x.io>"
        assert params["to"] == ["a@b.com"]
        assert params["reply_to"] == "c@d.com"
        assert params["attachments"] == [{"filename": "a.png", "content": "QUJD"}]


class TestExtractAttachments:

    @pytest.mark.parametrize(
        "attachment",
        [None, "data:image/png;base64,AAAA", {}, {"name": "a.png"}, {"dataUrl": "x,y"}, {"name": "", "dataUrl": "x,y"}],
    )
    def test_incomplete_attachment_is_skipped(self, attachment):
        assert extract_attachments(attachment) == []

    def test_uses_everything_after_first_comma(self):
        result = extract_attachments({"name": "a.txt", "dataUrl": "data:text/plain;base64,QQ==,QQ=="})

        assert result == [EmailAttachment(filename="a.txt", content="QQ==,QQ==")]

    def test_name_is_stringified(self):
        result = extract_attachments({"name": 7, "dataUrl": "data:,AAAA"})
        assert result[0].filename == "7"

    def test_missing_comma_raises_400(self):
        with pytest.raises(SubmissionError) as exc_info:
            extract_attachments({"name": "a.png", "dataUrl": "iVBORw0KGgo"})

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Invalid attachment format."

    def test_payload_at_ceiling_is_accepted(self):
        content = "A" * 12_000_000

        result = extract_attachments({"name": "a.png", "dataUrl": "data:image/png;base64," + content})

        assert len(result) == 1
        assert result[0].content == content

    def test_payload_over_ceiling_raises_413(self):
        with pytest.raises(SubmissionError) as exc_info:
            extract_attachments(
                {"name": "a.png", "dataUrl": "data:image/png;base64," + "A" * 12_000_001}
            )

        assert exc_info.value.status_code == 413
        assert exc_info.value.message == "Attachment too large."


class TestRenderSubmissionHtml:

    def test_renders_all_fields(self):
        html = render_submission_html(
            "trk-1",
            {
                "firstName": "Jane",
                "lastName": "Doe",
                "email": "jane@example.com",
                "phone": "555-0100",
                "city": "Lisbon",
                "agree": True,
            },
            {"url": "https://example.com/form", "userAgent": "Mozilla/5.0", "timestamp": "2026-01-01T00:00:00Z"},
        )

        assert "<b>Tracking ID:</b> trk-1</p>" in html
        assert "<b>First Name:</b> Jane</p>" in html
        assert "<b>Last Name:</b> Doe</p>" in html
        assert "<b>Email:</b> jane@example.com</p>" in html
        assert "<b>Phone:</b> 555-0100</p>" in html
        assert "<b>City:</b> Lisbon</p>" in html
        assert "<b>Agreed:</b> Yes</p>" in html
        assert "<b>Page URL:</b> https://example.com/form</p>" in html
        assert "<b>User Agent:</b> Mozilla/5.0</p>" in html
        assert "<b>Time:</b> 2026-01-01T00:00:00Z</p>" in html

    def test_missing_values_render_empty(self):
        html = render_submission_html(None, {"email": "c@d.com"}, None)

        assert "<b>Tracking ID:</b> -</p>" in html
        assert "<b>First Name:</b> </p>" in html
        assert "<b>Page URL:</b> </p>" in html
        assert "None" not in html
        assert "undefined" not in html

    @pytest.mark.parametrize(
        "agree,expected",
        [(False, "No"), (None, "No"), ("", "No"), (0, "No"), ("on", "Yes"), (1, "Yes"), ([], "Yes"), ({}, "Yes")],
    )
    def test_agree_truthiness(self, agree, expected):
        html = render_submission_html(None, {"email": "c@d.com", "agree": agree}, {})
        assert f"<b>Agreed:</b> {expected}</p>" in html

    def test_values_are_escaped(self):
        html = render_submission_html(None, {"email": "c@d.com", "firstName": "<script>x</script>"}, {})

        assert "<script>" not in html
        assert "&lt;script&gt;x&lt;/script&gt;" in html

    def test_numeric_values_are_stringified(self):
        html = render_submission_html(0, {"email": "c@d.com", "phone": 5550100}, {})

        assert "<b>Phone:</b> 5550100</p>" in html
        assert "<b>Tracking ID:</b> 0</p>" in html

    @pytest.mark.parametrize(
        "value,expected",
        [(True, "true"), (False, "false"), (2.0, "2"), (2.5, "2.5"), (["a", None, 3], "a,,3"), ({"k": 1}, "[object Object]")],
    )
    def test_values_stringified_like_the_browser(self, value, expected):
        html = render_submission_html(None, {"email": "c@d.com", "city": value}, {})
        assert f"<b>City:</b> {expected}</p>" in html


class TestBrowserTruthiness:
    """Only null, false, 0 and "" count as unset; empty lists and objects are set."""

    def test_empty_list_email_passes_validation(self):
        message = build_outbound_email(_payload(form={"email": []}))
        assert message.reply_to == ""

    @pytest.mark.parametrize("email", [0, False, None, ""])
    def test_falsy_email_is_rejected(self, email):
        with pytest.raises(SubmissionError) as exc_info:
            build_outbound_email(_payload(form={"email": email}))

        assert exc_info.value.message == "Missing form.email."

    def test_object_subject_is_stringified(self):
        message = build_outbound_email(_payload(subject={}))
        assert message.subject == "[object Object]"

    def test_boolean_email_reply_to(self):
        message = build_outbound_email(_payload(form={"email": True}))
        assert message.reply_to == "true"
