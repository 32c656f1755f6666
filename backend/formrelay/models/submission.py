"""
Outbound email models.

The relay builds one OutboundEmail per request from the validated form
submission and hands it to the delivery client. Nothing here is persisted.
"""

from pydantic import BaseModel


class EmailAttachment(BaseModel):
    """A single attachment, still base64-encoded as received in the data URL."""

    filename: str
    content: str


class OutboundEmail(BaseModel):
    """Provider-agnostic email message produced by the submission service."""

    sender: str
    to: list[str]
    subject: str
    html: str
    reply_to: str
    attachments: list[EmailAttachment] = []

    def to_resend_params(self) -> dict:
        """Map to the parameter dict accepted by resend.Emails.send."""
        return {
            "from": self.sender,
            "to": list(self.to),
            "subject": self.subject,
            "html": self.html,
            "reply_to": self.reply_to,
            "attachments": [
                {"filename": a.filename, "content": a.content}
                for a in self.attachments
            ],
        }
