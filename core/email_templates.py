# core/email_templates.py

"""
Email bodies for tenant notices.

Each builder returns an EmailContent with a plain-text part (also used
as the in-app notification text) and an HTML part.
"""

from datetime import datetime
from html import escape
from typing import Any, NamedTuple, Optional

from core.config import settings


class EmailContent(NamedTuple):
    subject: str
    text: str
    html: str


def format_currency(amount: Any) -> str:
    try:
        return f"KES {float(amount):,.2f}"
    except (TypeError, ValueError):
        return "KES 0.00"


def format_date(value: Any) -> str:
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return str(value)
    return parsed.strftime("%A, %d %B %Y")


def _rows(rows) -> str:
    return "".join(
        f"<p><strong>{escape(label)}:</strong> {escape(str(value))}</p>"
        for label, value in rows
        if value not in (None, "")
    )


def base_template(title: str, content: str) -> str:
    year = datetime.now().year
    return f"""
    <html>
      <body style="font-family: Arial, sans-serif; color: #333; background: #f9fafb;">
        <div style="max-width: 600px; margin: 0 auto; background: #fff; padding: 20px;">
          <h2 style="border-bottom: 1px solid #e5e7eb; padding-bottom: 10px;">{escape(title)}</h2>
          {content}
          <p style="font-size: 12px; color: #6b7280; border-top: 1px solid #e5e7eb; padding-top: 10px;">
            © {year} {escape(settings.PROJECT_NAME)}. If you have any questions, reply to this email.
          </p>
        </div>
      </body>
    </html>
    """


# -----------------------------------------------------
# Payments
# -----------------------------------------------------
def payment_receipt_email(payment: dict, tenant_name: Optional[str] = None) -> EmailContent:
    amount = format_currency(payment.get("amount"))
    receipt = f"RCT-{str(payment.get('id') or '')[:6].upper()}"
    text = f"Your payment of {amount} has been verified. Receipt {receipt}."

    details = _rows([
        ("Receipt Number", receipt),
        ("Payment Date", format_date(payment.get("payment_date"))),
        ("Amount", amount),
        ("Payment Method", payment.get("payment_method")),
        ("Reference", payment.get("reference")),
    ])
    html = base_template("Payment Receipt", f"""
          <p>Hello {escape(tenant_name or "there")},</p>
          <p>Thank you for your payment. This email confirms that it has been verified.</p>
          <div style="background: #f3f4f6; border-left: 4px solid #3b82f6; padding: 15px;">{details}</div>
    """)
    return EmailContent("Payment Receipt", text, html)


def payment_rejected_email(payment: dict, reason: str, tenant_name: Optional[str] = None) -> EmailContent:
    amount = format_currency(payment.get("amount"))
    text = f"Your payment of {amount} was rejected: {reason}"

    details = _rows([
        ("Payment Date", format_date(payment.get("payment_date"))),
        ("Amount", amount),
        ("Reference", payment.get("reference")),
        ("Reason", reason),
    ])
    html = base_template("Payment Rejected", f"""
          <p>Hello {escape(tenant_name or "there")},</p>
          <p>We could not verify your payment. Please check the details below and submit it again.</p>
          <div style="background: #fef3c7; border-left: 4px solid #f59e0b; padding: 15px;">{details}</div>
    """)
    return EmailContent("Payment Rejected", text, html)


# -----------------------------------------------------
# Maintenance
# -----------------------------------------------------
def maintenance_update_email(
    request: dict,
    message: Optional[str] = None,
    tenant_name: Optional[str] = None,
) -> EmailContent:
    title = request.get("title") or "your maintenance request"
    status = str(request.get("status") or "").replace("_", " ")
    text = f"Your request '{title}' is now {status}."
    if message:
        text = f"{text} {message}"

    details = _rows([
        ("Request", title),
        ("Status", status.title()),
        ("Scheduled", format_date(request.get("scheduled_date"))),
        ("Completed", format_date(request.get("completed_date"))),
        ("Note", message),
    ])
    html = base_template("Maintenance Request Update", f"""
          <p>Hello {escape(tenant_name or "there")},</p>
          <p>There is an update on your maintenance request.</p>
          <div style="background: #f3f4f6; border-left: 4px solid #3b82f6; padding: 15px;">{details}</div>
    """)
    return EmailContent("Maintenance Request Update", text, html)
