from email.message import EmailMessage
from html import escape
from email.utils import formataddr

from contact_relay.lib.submission import Submission


def _one_line(text: str) -> str:
    return " ".join(text.split())


def render_html(submission: Submission) -> str:
    # name and message are already escaped by Submission
    body = submission.message.replace("\r\n", "\n").replace("\n", "<br>")
    return (
        f"<h3>New message from {submission.name}</h3>\n"
        f"<p><strong>Email:</strong> {escape(submission.email)}</p>\n"
        f"<p><strong>Message:</strong></p>\n"
        f"<p>{body}</p>\n"
    )


def build_message(submission: Submission, sender: str, recipient: str, from_name: str) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = formataddr((from_name, sender))
    msg["To"] = recipient
    msg["Reply-To"] = submission.email
    msg["Subject"] = f"New message from {_one_line(submission.name)}"
    msg.set_content(submission.message)
    msg.add_alternative(render_html(submission), subtype="html")
    return msg
