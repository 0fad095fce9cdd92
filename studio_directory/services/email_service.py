"""Email service using Resend for claim notifications."""

import logging
from html import escape
from typing import Any

import resend

from studio_directory.core.config import get_settings

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending transactional emails via Resend."""

    def __init__(self) -> None:
        """Initialize email service with Resend API key."""
        settings = get_settings()
        resend.api_key = settings.resend_api_key
        self.enabled = settings.email_enabled
        self.from_email = settings.email_from_address
        self.admin_email = settings.admin_notification_email
        self.site_url = settings.site_base_url

    def _send(self, to_email: str, subject: str, html_content: str, text_content: str) -> dict[str, Any]:
        if not self.enabled:
            logger.info("Email disabled, skipping '%s' to %s", subject, to_email)
            return {"success": False, "error": "email disabled"}

        try:
            response = resend.Emails.send({
                "from": self.from_email,
                "to": [to_email],
                "subject": subject,
                "html": html_content,
                "text": text_content,
            })

            logger.info("Email '%s' sent to %s, id: %s", subject, to_email, response.get("id"))
            return {"success": True, "email_id": response.get("id")}

        except Exception as e:
            logger.error("Failed to send email '%s' to %s: %s", subject, to_email, str(e))
            return {"success": False, "error": str(e)}

    async def send_claim_request_notification(
        self,
        request_id: str,
        profile_label: str,
        requested_username: str | None,
        message: str | None,
        requester_name: str | None = None,
    ) -> dict[str, Any]:
        """Tell the admin mailbox a claim request is waiting for review.

        Args:
            request_id: The claim request's id.
            profile_label: Display name or username of the profile.
            requested_username: Username the requester asked for, if any.
            message: Requester's note or proof, if any.
            requester_name: Name given on a proof request.

        Returns:
            dict: Send status.
        """
        if not self.admin_email:
            return {"success": False, "error": "no admin mailbox configured"}

        review_url = f"{self.site_url}/admin/claims/{request_id}"
        note = message or "(no message)"
        fields = [("Profile", profile_label)]
        if requester_name:
            fields.append(("Requester", requester_name))
        if requested_username:
            fields.append(("Requested username", requested_username))
        items = "\n".join(f"    <li><strong>{label}:</strong> {escape(value)}</li>" for label, value in fields)
        html_content = f"""
<p>A new claim request is waiting for review.</p>
<ul>
{items}
</ul>
<p style="white-space: pre-wrap;">{escape(note)}</p>
<p><a href="{escape(review_url)}">Review request</a></p>
"""
        summary = "".join(f"{label}: {value}\n" for label, value in fields)
        text_content = f"A new claim request is waiting for review.\n\n{summary}\n{note}\n\nReview: {review_url}\n"
        return self._send(self.admin_email, f"Claim request for {profile_label}", html_content, text_content)

    async def send_claim_decision_email(
        self,
        to_email: str,
        profile_label: str,
        approved: bool,
        note: str | None = None,
    ) -> dict[str, Any]:
        """Tell a requester whether their claim request was approved.

        Args:
            to_email: Requester email address.
            profile_label: Username or display name of the profile.
            approved: Whether the request was approved.
            note: Reviewer's note, shown on rejection.

        Returns:
            dict: Send status.
        """
        if approved:
            subject = f"Your claim for {profile_label} was approved"
            body = f"You now own the profile {profile_label}."
        else:
            subject = f"Your claim for {profile_label} was not approved"
            body = f"Your request to claim {profile_label} was not approved."
            if note:
                body += f"\n\nReviewer note: {note}"

        html_content = f'<p style="white-space: pre-wrap;">{escape(body)}</p>'
        return self._send(to_email, subject, html_content, body)
