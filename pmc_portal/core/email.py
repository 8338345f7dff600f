import smtplib
from email.message import EmailMessage
from pmc_portal.core.config import get_settings

PORTAL_SIGNATURE = "Pune Municipal Corporation<br/>Building Permission Department"


def render_email(heading: str, *paragraphs: str) -> str:
    body = "\n".join(f"      <p>{p}</p>" for p in paragraphs)
    return f"""
    <div style="font-family: Arial, sans-serif; line-height: 1.6;">
      <h2>{heading}</h2>
{body}
      <p>Regards,<br/>{PORTAL_SIGNATURE}</p>
    </div>
    """


def send_email(to_email: str, subject: str, html_body: str, text_body: str | None = None):
    settings = get_settings()
    if not settings.smtp_host or not settings.smtp_user or not settings.smtp_pass or not settings.smtp_from:
        raise RuntimeError("SMTP settings are not configured")

    msg = EmailMessage()
    msg["From"] = settings.smtp_from
    msg["To"] = to_email
    msg["Subject"] = f"PMC Registration: {subject}"
    msg.set_content(text_body or "This email requires an HTML-capable client.")
    msg.add_alternative(html_body, subtype="html")

    with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
        server.starttls()
        server.login(settings.smtp_user, settings.smtp_pass)
        server.send_message(msg)
