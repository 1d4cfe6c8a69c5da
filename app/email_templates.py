"""
MJML Email Templates
All email templates using MJML for responsive, cross-client compatibility.

Every value that originates from a user (names, descriptions, notes, addresses)
passes through sanitize_string before it is placed in markup.
"""

from typing import Optional

from .config import FRONTEND_URL
from .utils.sanitization import sanitize_string

# App theme colors - Teal/Slate color scheme
THEME = {
    "primary": "#14b8a6",
    "primary_dark": "#0d9488",
    "primary_light": "#ccfbf1",
    "background": "#f8fafc",
    "card_bg": "#ffffff",
    "text_primary": "#0f172a",
    "text_secondary": "#334155",
    "text_muted": "#64748b",
    "border": "#e2e8f0",
    "success": "#14b8a6",
    "warning": "#f59e0b",
    "danger": "#ef4444",
}

BRAND_NAME = "Sewa Booking"


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
    is_user_email: bool = False,
) -> str:
    """Base MJML template wrapper for all emails"""

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <mj-section padding="20px 0">
          <mj-column>
            <mj-button
              href="{cta_url}"
              background-color="{THEME['primary']}"
              color="#ffffff"
              font-weight="600"
              border-radius="8px"
              padding="18px 40px"
              font-size="16px">
              {cta_label}
            </mj-button>
          </mj-column>
        </mj-section>
        """

    footer_notice = ""
    if is_user_email:
        footer_notice = f"""
        <mj-text align="center" font-size="12px" color="#94a3b8" padding="12px 0 0 0">
          You're receiving this because you have an account with {BRAND_NAME}.
        </mj-text>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="-apple-system, BlinkMacSystemFont, 'Segoe UI', 'Helvetica Neue', Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <!-- Header -->
        <mj-section background-color="#ffffff" padding="32px 20px 0 20px">
          <mj-column>
            <mj-text font-size="20px" font-weight="700" color="{THEME['primary_dark']}" padding="0">
              {BRAND_NAME}
            </mj-text>
          </mj-column>
        </mj-section>

        <mj-section background-color="#ffffff" padding="0 40px 24px 40px">
          <mj-column>
            <mj-divider border-color="{THEME['border']}" border-width="1px" padding="24px 0 0 0" />
          </mj-column>
        </mj-section>

        <!-- Main Content -->
        <mj-section background-color="#ffffff" padding="0 40px 48px 40px">
          <mj-column>
            <mj-text font-size="24px" font-weight="600" color="{THEME['text_primary']}" line-height="1.3" padding="0 0 16px 0">
              {title}
            </mj-text>

            {content_sections}
          </mj-column>
        </mj-section>

        {cta_section}

        <!-- Footer -->
        <mj-section padding="32px 20px">
          <mj-column>
            <mj-text align="center" font-size="13px" color="#94a3b8" padding="0">
              © {BRAND_NAME}. All rights reserved.
            </mj-text>
            {footer_notice}
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def _detail_rows(rows: list[tuple[str, Optional[str]]]) -> str:
    cells = "".join(
        f"""
        <tr>
          <td style="padding: 6px 0; color: {THEME['text_muted']}; width: 40%;">{label}</td>
          <td style="padding: 6px 0; color: {THEME['text_primary']}; font-weight: 500;">{sanitize_string(str(value))}</td>
        </tr>"""
        for label, value in rows
        if value not in (None, "")
    )
    return f"""
    <mj-table padding="8px 0 16px 0" font-size="15px">
      {cells}
    </mj-table>
    """


def _notes_block(label: str, notes: Optional[str]) -> str:
    if not notes:
        return ""
    return f"""
    <mj-text padding="8px 0 0 0" color="{THEME['text_muted']}" font-size="14px">{label}</mj-text>
    <mj-text padding="4px 0 16px 0" container-background-color="{THEME['primary_light']}">
      {sanitize_string(notes)}
    </mj-text>
    """


def _appointment_details(appointment) -> str:
    """Booking summary table shared by all appointment emails"""
    return _detail_rows(
        [
            ("Appointment ID", appointment.appointment_id),
            ("Service", appointment.service_category.replace("_", " ").title()),
            ("Description", appointment.service_description),
            ("Date", appointment.appointment_date),
            ("Time", appointment.appointment_time),
            ("Estimated hours", appointment.estimated_hours),
            ("Hourly rate", f"Rs. {appointment.hourly_rate:,.0f}"),
            ("Total price", f"Rs. {appointment.price:,.0f}"),
            ("Location", appointment.location),
        ]
    )


def _greeting(name: str) -> str:
    return f"<mj-text>Hi {sanitize_string(name)},</mj-text>"


def new_appointment_admin_template(appointment) -> str:
    """Admin: a customer booked a provider and the request awaits review"""
    content = f"""
    <mj-text color="{THEME['text_muted']}" padding="0 0 24px 0">
      A new appointment is waiting for your review.
    </mj-text>
    <mj-text>
      <strong>{sanitize_string(appointment.customer_name)}</strong> ({sanitize_string(appointment.customer_email)})
      booked <strong>{sanitize_string(appointment.provider_name)}</strong>.
    </mj-text>
    {_appointment_details(appointment)}
    {_notes_block("Customer notes", appointment.customer_notes)}
    """
    return get_base_template(
        title="New Appointment Request",
        preview_text=f"New booking {appointment.appointment_id} needs approval",
        content_sections=content,
        cta_url=f"{FRONTEND_URL}/admin/appointments",
        cta_label="Review Appointment",
    )


def appointment_approved_provider_template(appointment) -> str:
    """Provider: admin approved a booking addressed to them, awaiting their answer"""
    content = f"""
    {_greeting(appointment.provider_name)}
    <mj-text>
      You have a new job request from <strong>{sanitize_string(appointment.customer_name)}</strong>.
      Please accept or decline it from your dashboard.
    </mj-text>
    {_appointment_details(appointment)}
    {_notes_block("Customer notes", appointment.customer_notes)}
    {_notes_block("Notes from our team", appointment.admin_notes)}
    """
    return get_base_template(
        title="New Job Request",
        preview_text=f"Appointment {appointment.appointment_id} is waiting for your response",
        content_sections=content,
        cta_url=f"{FRONTEND_URL}/provider/appointments",
        cta_label="Respond to Request",
        is_user_email=True,
    )


def appointment_approved_customer_template(appointment) -> str:
    """Customer: admin approved the booking, provider still has to accept"""
    content = f"""
    {_greeting(appointment.customer_name)}
    <mj-text>
      Your booking with <strong>{sanitize_string(appointment.provider_name)}</strong> has been approved
      and sent to the provider for confirmation.
    </mj-text>
    {_appointment_details(appointment)}
    {_notes_block("Notes from our team", appointment.admin_notes)}
    """
    return get_base_template(
        title="Your Appointment Was Approved",
        preview_text="We've forwarded your booking to the provider",
        content_sections=content,
        cta_url=f"{FRONTEND_URL}/appointments",
        cta_label="View Appointment",
        is_user_email=True,
    )


def appointment_rejected_customer_template(appointment) -> str:
    """Customer: admin declined the booking"""
    content = f"""
    {_greeting(appointment.customer_name)}
    <mj-text>
      Unfortunately we could not approve your booking with
      <strong>{sanitize_string(appointment.provider_name)}</strong>.
    </mj-text>
    {_appointment_details(appointment)}
    {_notes_block("Reason", appointment.admin_notes)}
    <mj-text>You're welcome to book another provider at any time.</mj-text>
    """
    return get_base_template(
        title="Appointment Not Approved",
        preview_text=f"Update on appointment {appointment.appointment_id}",
        content_sections=content,
        cta_url=f"{FRONTEND_URL}/providers",
        cta_label="Find Another Provider",
        is_user_email=True,
    )


def provider_accepted_customer_template(appointment) -> str:
    """Customer: provider confirmed the job"""
    content = f"""
    {_greeting(appointment.customer_name)}
    <mj-text>
      Good news! <strong>{sanitize_string(appointment.provider_name)}</strong> accepted your appointment.
    </mj-text>
    {_appointment_details(appointment)}
    {_notes_block("Message from your provider", appointment.provider_notes)}
    """
    return get_base_template(
        title="Appointment Confirmed",
        preview_text=f"{appointment.provider_name} confirmed your booking",
        content_sections=content,
        cta_url=f"{FRONTEND_URL}/appointments",
        cta_label="View Appointment",
        is_user_email=True,
    )


def provider_declined_customer_template(appointment) -> str:
    """Customer: provider declined the job"""
    content = f"""
    {_greeting(appointment.customer_name)}
    <mj-text>
      <strong>{sanitize_string(appointment.provider_name)}</strong> is unable to take this appointment.
    </mj-text>
    {_appointment_details(appointment)}
    {_notes_block("Message from the provider", appointment.provider_notes)}
    <mj-text>You can book another provider for the same service.</mj-text>
    """
    return get_base_template(
        title="Provider Unavailable",
        preview_text=f"Update on appointment {appointment.appointment_id}",
        content_sections=content,
        cta_url=f"{FRONTEND_URL}/providers",
        cta_label="Find Another Provider",
        is_user_email=True,
    )


def provider_response_admin_template(appointment, accepted: bool) -> str:
    """Admin: provider answered an approved booking"""
    verb = "accepted" if accepted else "declined"
    content = f"""
    <mj-text>
      <strong>{sanitize_string(appointment.provider_name)}</strong> {verb} appointment
      {appointment.appointment_id} for {sanitize_string(appointment.customer_name)}.
    </mj-text>
    {_appointment_details(appointment)}
    {_notes_block("Provider notes", appointment.provider_notes)}
    """
    return get_base_template(
        title=f"Provider {verb.title()} Appointment",
        preview_text=f"{appointment.appointment_id} was {verb} by the provider",
        content_sections=content,
        cta_url=f"{FRONTEND_URL}/admin/appointments",
        cta_label="Open Dashboard",
    )


def appointment_cancelled_template(appointment, recipient_name: Optional[str], cancelled_by: str, reason: Optional[str] = None) -> str:
    """Admin or provider: appointment was cancelled"""
    greeting = _greeting(recipient_name) if recipient_name else ""
    content = f"""
    {greeting}
    <mj-text>
      Appointment {appointment.appointment_id} was cancelled by the {sanitize_string(cancelled_by)}.
    </mj-text>
    {_appointment_details(appointment)}
    {_notes_block("Reason", reason)}
    """
    return get_base_template(
        title="Appointment Cancelled",
        preview_text=f"{appointment.appointment_id} was cancelled",
        content_sections=content,
    )


def provider_application_approved_template(provider_name: str) -> str:
    """Provider: application approved, profile is now bookable"""
    content = f"""
    {_greeting(provider_name)}
    <mj-text>
      Your provider application has been approved. Customers can now find and book you on {BRAND_NAME}.
    </mj-text>
    """
    return get_base_template(
        title="You're Approved!",
        preview_text="Your provider account is live",
        content_sections=content,
        cta_url=f"{FRONTEND_URL}/provider/dashboard",
        cta_label="Go to Dashboard",
        is_user_email=True,
    )


def provider_application_rejected_template(provider_name: str, reason: Optional[str] = None) -> str:
    """Provider: application rejected"""
    content = f"""
    {_greeting(provider_name)}
    <mj-text>
      Thank you for applying. We are unable to approve your provider application at this time.
    </mj-text>
    {_notes_block("Reason", reason)}
    <mj-text>If your circumstances change, please contact our support team.</mj-text>
    """
    return get_base_template(
        title="Application Update",
        preview_text="An update on your provider application",
        content_sections=content,
        is_user_email=True,
    )
