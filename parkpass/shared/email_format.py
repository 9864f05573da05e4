from html import escape
from typing import Optional
from datetime import tzinfo

from parkpass.shared.formatting import format_currency, format_time


def parking_checkout_email(parking_pass, tz: Optional[tzinfo] = None) -> str:
    """Confirmation email body sent once a pass has been paid for."""
    return f"""
    <div style="font-family: Arial, sans-serif; max-width: 400px; margin: 0 auto; background: #fff; border-radius: 8px; border: 1px solid #eee; padding: 24px;">
      <h2 style="text-align:center; font-size: 20px; margin-bottom: 24px;">RESERVATION DETAILS</h2>
      <a href="{escape(parking_pass.pass_url)}" style="background-color: #2196F3; color: white; padding: 10px 20px; border-radius: 5px; text-decoration: none; display: inline-block; margin-bottom: 24px;">
        View your pass
      </a>
      <table style="width: 100%; font-size: 15px; margin-bottom: 24px;">
        <tr>
          <td style="font-weight: bold;">PARKING PASS:</td>
          <td style="text-align: right;">{escape(parking_pass.payment_intent_id or "")}</td>
        </tr>
        <tr>
          <td style="font-weight: bold;">LOCATION:</td>
          <td style="text-align: right;">{escape(parking_pass.location)}</td>
        </tr>
        <tr>
          <td style="font-weight: bold;">ENTER AFTER:</td>
          <td style="text-align: right;">{format_time(parking_pass.park_after, tz)}</td>
        </tr>
        <tr>
          <td style="font-weight: bold;">EXIT BY:</td>
          <td style="text-align: right;">{format_time(parking_pass.exit_before, tz)}</td>
        </tr>
      </table>
      <h3 style="font-size: 16px; margin-bottom: 8px;">PARKING TOTAL</h3>
      <div style="font-size: 28px; font-weight: bold; text-align: center; margin-bottom: 16px;">{format_currency(parking_pass.amount)}</div>
    </div>
    """


def parking_checkout_text(parking_pass, tz: Optional[tzinfo] = None) -> str:
    return "\n".join([
        f"Parking pass: {parking_pass.payment_intent_id}",
        f"Location: {parking_pass.location}",
        f"Enter after: {format_time(parking_pass.park_after, tz)}",
        f"Exit by: {format_time(parking_pass.exit_before, tz)}",
        f"Total: {format_currency(parking_pass.amount)}",
        f"View your pass: {parking_pass.pass_url}",
    ])
