import asyncio
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from email.utils import formataddr
from typing import Optional
from travel_inbox.core.config import settings
from travel_inbox.core.logger import logger


def generate_trip_link(trip_id: int) -> str:
    """Where the invitee lands after signing up."""
    return f"{settings.FRONTEND_BASE_URL}/trip/{trip_id}"


def build_invite_message(invitee_email: str, invite_link: str, trip_name: Optional[str] = None) -> MIMEMultipart:
    message = MIMEMultipart("alternative")
    message["From"] = formataddr((settings.APP_NAME, settings.SMTP_USER))
    message["To"] = invitee_email
    message["Subject"] = f"You're invited to a trip on {settings.APP_NAME}"

    html = f"""
    <html>
      <body>
        <p>Hey there,<br><br>
           You've been invited to plan a trip on <strong>{settings.APP_NAME}</strong>{f" - <b>{trip_name}</b>" if trip_name else ""}!<br><br>
           Create your account to join:<br><br>
           <a href="{invite_link}" style="padding: 10px 20px; background-color: #2563eb; color: white; text-decoration: none; border-radius: 5px;">Join the trip</a>
           <br><br>
           Or paste this link into your browser:<br>
           <code>{invite_link}</code>
        </p>
      </body>
    </html>
    """
    message.attach(MIMEText(html, "html"))
    return message


class InvitationMailer:
    def __init__(self, timeout: float = settings.SMTP_TIMEOUT_SECONDS):
        self.timeout = timeout

    def _deliver(self, message: MIMEMultipart, invitee_email: str) -> None:
        with smtplib.SMTP_SSL(settings.SMTP_HOST, settings.SMTP_PORT, timeout=self.timeout) as server:
            server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
            server.sendmail(settings.SMTP_USER, [invitee_email], message.as_string())

    async def send_invite(self, invitee_email: str, redirect_to: str, trip_name: Optional[str] = None) -> bool:
        """Send the invitation email. Returns False on any delivery failure.

        The SMTP socket timeout bounds every network step and the worker
        thread is awaited to completion, so no delivery is still in flight
        once this returns.
        """
        message = build_invite_message(invitee_email, redirect_to, trip_name)
        try:
            await asyncio.to_thread(self._deliver, message, invitee_email)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"[Email Invite] Failed to send to {invitee_email}: {e}")
            return False

        logger.info(f"[Email Invite] Sent to {invitee_email}")
        return True


def get_mailer() -> InvitationMailer:
    return InvitationMailer()
