import os, logging, smtplib, mimetypes
from email.message import EmailMessage

from core.models import Itinerary

logger = logging.getLogger(__name__)


def build_itinerary_message(recipient: str, itinerary: Itinerary, gsheet_url: str | None = None) -> EmailMessage:
    lines = [
        "Hello,",
        "",
        f"Here is your trip plan: {itinerary.title}",
        "",
        f"Destination: {itinerary.location}",
        f"Dates: {itinerary.start_date} → {itinerary.end_date} ({itinerary.total_days} days)",
        f"Estimated cost: {itinerary.actual_cost:,.0f} (budget {itinerary.total_budget:,.0f})",
        f"Stay: {itinerary.accommodation.name}",
        "",
    ]
    for day in itinerary.days:
        names = ", ".join(a.name for a in day.activities) or "Free day"
        lines.append(f"Day {day.day} ({day.date}): {names}")
    if itinerary.summary:
        lines += ["", itinerary.summary]
    if gsheet_url:
        lines += ["", f"You can also open the itinerary online: {gsheet_url}"]
    lines += ["", "Have a great trip,", "AI Trip Planner"]

    msg = EmailMessage()
    msg["From"] = os.getenv("EMAIL_FROM") or os.getenv("SMTP_USER", "")
    msg["To"] = recipient
    msg["Subject"] = f"Your itinerary – {itinerary.title}"
    msg.set_content("\n".join(lines))
    return msg


def send_itinerary_email(
    recipient: str,
    itinerary: Itinerary,
    attachment_path: str | None = None,
    gsheet_url: str | None = None,
):
    smtp_host = os.getenv("SMTP_HOST")
    smtp_port = os.getenv("SMTP_PORT")
    smtp_user = os.getenv("SMTP_USER")
    smtp_pass = os.getenv("SMTP_PASS")

    if not all([smtp_host, smtp_port, smtp_user, smtp_pass]):
        raise RuntimeError("SMTP settings are not configured")

    msg = build_itinerary_message(recipient, itinerary, gsheet_url)

    # attachment ?
    if attachment_path and os.path.exists(attachment_path):
        ctype, _ = mimetypes.guess_type(attachment_path)
        maintype, subtype = (ctype.split("/", 1) if ctype else ("application", "octet-stream"))
        with open(attachment_path, "rb") as f:
            msg.add_attachment(
                f.read(),
                maintype=maintype,
                subtype=subtype,
                filename=os.path.basename(attachment_path),
            )

    try:
        with smtplib.SMTP(smtp_host, int(smtp_port)) as s:
            s.starttls()
            s.login(smtp_user, smtp_pass)
            s.send_message(msg)
    except (smtplib.SMTPException, OSError) as exc:
        logger.exception("Could not send itinerary %s to %s", itinerary.id, recipient)
        raise RuntimeError("Failed to send itinerary email") from exc

    logger.info("Itinerary %s sent to %s", itinerary.id, recipient)
