import html
import logging
import os
import re
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Any, Dict, List, Mapping, Optional, Sequence

from core.config import env_bool

logger = logging.getLogger(__name__)

EMAIL_REGEX = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

SUBJECT = "Topsis Analysis Result"

_CELL_STYLE = "border: 1px solid black; padding: 8px;"


class EmailError(RuntimeError):
    pass


class EmailConfigError(EmailError):
    pass


class InvalidEmailError(EmailError):
    pass


class EmailDeliveryError(EmailError):
    pass


@dataclass(frozen=True)
class SMTPConfig:
    host: str
    port: int
    user: Optional[str]
    password: Optional[str]
    sender: str
    use_ssl: bool
    timeout: float


def get_smtp_config() -> SMTPConfig:
    host = os.getenv("SMTP_HOST")
    user = os.getenv("SMTP_USER") or None
    sender = os.getenv("SMTP_SENDER") or user
    if not host or not sender:
        raise EmailConfigError("Email is not configured. Set SMTP_HOST and SMTP_USER (or SMTP_SENDER).")

    try:
        port = int(os.getenv("SMTP_PORT", "465"))
        timeout = float(os.getenv("SMTP_TIMEOUT", "30"))
    except ValueError as e:
        raise EmailConfigError(f"Invalid SMTP setting: {e}") from e

    return SMTPConfig(
        host=host,
        port=port,
        user=user,
        password=os.getenv("SMTP_PASSWORD") or None,
        sender=sender,
        use_ssl=env_bool("SMTP_USE_SSL", True),
        timeout=timeout,
    )


def email_enabled() -> bool:
    return bool(os.getenv("SMTP_HOST") and (os.getenv("SMTP_SENDER") or os.getenv("SMTP_USER")))


def validate_address(address: str) -> str:
    address = (address or "").strip()
    if not EMAIL_REGEX.match(address):
        raise InvalidEmailError(f"Invalid email address: {address!r}")
    return address


def build_results_html(rows: Sequence[Mapping[str, Any]]) -> str:
    columns = list(rows[0].keys()) if rows else []

    header = "".join(f'<th style="{_CELL_STYLE}">{html.escape(str(c))}</th>' for c in columns)
    body = "".join(
        "<tr>"
        + "".join(f'<td style="{_CELL_STYLE}">{html.escape(str(row.get(c, "")))}</td>' for c in columns)
        + "</tr>"
        for row in rows
    )

    return (
        "<h1>Your Topsis Analysis is Complete</h1>"
        "<p>Dear User,</p>"
        "<p>Your Topsis analysis has been successfully completed. Please find the results below:</p>"
        f"<table><tr>{header}</tr>{body}</table>"
        "<p>Thank you for using our Topsis service!</p>"
    )


def build_results_text(rows: Sequence[Mapping[str, Any]]) -> str:
    lines = ["Your Topsis analysis is complete.", ""]
    for row in rows:
        lines.append(", ".join(f"{k}: {v}" for k, v in row.items()))
    return "\n".join(lines)


class EmailService:
    def __init__(self, config: Optional[SMTPConfig] = None):
        self.config = config or get_smtp_config()

    def build_message(self, recipient: str, rows: List[Dict[str, Any]]) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = SUBJECT
        msg["From"] = self.config.sender
        msg["To"] = validate_address(recipient)
        msg.set_content(build_results_text(rows))
        msg.add_alternative(build_results_html(rows), subtype="html")
        return msg

    def send_results(self, recipient: str, rows: List[Dict[str, Any]]) -> None:
        msg = self.build_message(recipient, rows)
        cfg = self.config

        try:
            if cfg.use_ssl:
                server = smtplib.SMTP_SSL(cfg.host, cfg.port, timeout=cfg.timeout)
            else:
                server = smtplib.SMTP(cfg.host, cfg.port, timeout=cfg.timeout)
            with server:
                if not cfg.use_ssl:
                    server.starttls()
                if cfg.user and cfg.password:
                    server.login(cfg.user, cfg.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.exception("Failed to send results to %s via %s:%s", msg["To"], cfg.host, cfg.port)
            raise EmailDeliveryError(f"Could not send email: {e}") from e

        logger.info("Sent %d result row(s) to %s", len(rows), msg["To"])
