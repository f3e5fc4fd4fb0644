# ecampaign/notifications/mailer.py

import logging
import requests

from ecampaign.errors import DownstreamError

# Transactional email through the SendGrid v3 HTTP API.
# Sending is best-effort: a failure is logged and reported as False unless the
# caller asks for it to be fatal with required=True.

SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"

logger = logging.getLogger(__name__)

VERIFY_SUBJECT = "Verify your Kenya E-Campaign account \U0001F1F0\U0001F1EA"
VERIFY_TEMPLATE = """
<h3>Welcome to Kenya E-Campaign Platform</h3>
<p>Your verification code is:</p>
<h2>{code}</h2>
<p>This code expires in 15 minutes.</p>
"""

RESET_SUBJECT = "Reset your Kenya E-Campaign password \U0001F1F0\U0001F1EA"
RESET_TEMPLATE = """
<p>Your reset code:</p>
<h2>{code}</h2>
<p>Expires in 15 minutes.</p>
"""


class NotificationGateway:
    def __init__(self, api_key=None, sender=None, sender_name="Kenya E-Campaign", timeout=10):
        self.api_key = api_key
        self.sender = sender
        self.sender_name = sender_name
        self.timeout = timeout

    def send(self, to, subject, html, required=False):
        if not self.api_key or not self.sender:
            return self._failed(to, subject, "mail sender is not configured", required)

        payload = {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": self.sender, "name": self.sender_name},
            "subject": subject,
            "content": [{"type": "text/html", "value": html}],
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            response = requests.post(SENDGRID_URL, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            return self._failed(to, subject, str(e), required)

        if response.status_code >= 300:
            return self._failed(to, subject, f"HTTP {response.status_code}: {response.text}", required)
        logger.info("Sent '%s' to %s", subject, to)
        return True

    def _failed(self, to, subject, reason, required):
        logger.warning("Email '%s' to %s not sent: %s", subject, to, reason)
        if required:
            raise DownstreamError(f"Email delivery failed: {reason}")
        return False

    def send_verification_code(self, to, code):
        return self.send(to, VERIFY_SUBJECT, VERIFY_TEMPLATE.format(code=code))

    def send_reset_code(self, to, code):
        return self.send(to, RESET_SUBJECT, RESET_TEMPLATE.format(code=code))
