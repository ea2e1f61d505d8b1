"""Notification templates for purchase and reward confirmations."""

from __future__ import annotations

import html
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Sequence


@dataclass
class RenderedTemplate:
    subject: str
    text_body: str
    html_body: str


@dataclass(frozen=True)
class PurchaseLine:
    name: str
    quantity: int
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


def format_money(amount: Decimal) -> str:
    return f"${amount.quantize(Decimal('0.01'))}"


_BASE_STYLE = """
      body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Arial, sans-serif;
             line-height: 1.6; color: #333; background-color: #f5f5f5; margin: 0; padding: 0; }
      .container { max-width: 600px; margin: 40px auto; background: #ffffff; border-radius: 12px;
                   overflow: hidden; box-shadow: 0 4px 12px rgba(0,0,0,0.1); }
      .header { background: #006938; padding: 32px 30px; text-align: center; color: white; }
      .header h1 { margin: 0 0 8px 0; font-size: 26px; }
      .content { padding: 36px 30px; }
      .banner { background: #e6f4ed; border: 3px solid #006938; border-radius: 12px;
                padding: 20px; text-align: center; margin: 24px 0; }
      .banner .points { font-size: 32px; font-weight: 700; color: #006938; }
      .info-box { background: #f9fafb; border-left: 4px solid #006938; padding: 16px 20px; margin: 24px 0; }
      .code { font-size: 24px; font-weight: 700; color: #92400e; letter-spacing: 2px;
              font-family: 'Courier New', monospace; }
      .footer { background: #f9fafb; padding: 24px 30px; text-align: center; color: #6b7280;
                font-size: 14px; border-top: 1px solid #e5e7eb; }
      table { width: 100%; border-collapse: collapse; }
      td { padding: 10px 12px; border-bottom: 1px solid #e5e7eb; }
"""


def _document(title: str, body: str, footer: str) -> str:
    return (
        "<!DOCTYPE html>\n<html>\n<head>\n"
        '  <meta charset="UTF-8">\n'
        '  <meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        f"  <style>{_BASE_STYLE}  </style>\n"
        "</head>\n<body>\n"
        '  <div class="container">\n'
        f'    <div class="header"><h1>{html.escape(title)}</h1></div>\n'
        f'    <div class="content">\n{body}\n    </div>\n'
        f'    <div class="footer"><strong>{html.escape(footer)}</strong></div>\n'
        "  </div>\n</body>\n</html>\n"
    )


def render_purchase_confirmation(
    *,
    brand_name: str,
    lines: Sequence[PurchaseLine],
    total_price: Decimal,
    points_earned: int,
    points_per_item: int,
    new_points_balance: Any = None,
) -> RenderedTemplate:
    subject = f"Thank You for Your {brand_name} Order!"

    rows = "\n".join(
        "        <tr>"
        f"<td><strong>{html.escape(line.name)}</strong><br>Quantity: {line.quantity}</td>"
        f'<td style="text-align: right;">{format_money(line.line_total)}</td>'
        "</tr>"
        for line in lines
    )
    balance_html = ""
    if new_points_balance is not None:
        balance_html = (
            '      <div class="info-box">Your new points balance: '
            f"<strong>{html.escape(str(new_points_balance))}</strong> loyalty points</div>\n"
        )
    body = (
        f'      <p>Your {html.escape(brand_name)} purchase has been confirmed.</p>\n'
        '      <div class="banner">\n'
        f'        <div class="points">+{points_earned} Points Earned!</div>\n'
        "        <div>You've earned loyalty points with this purchase</div>\n"
        "      </div>\n"
        "      <h2>Order Summary</h2>\n"
        "      <table>\n"
        f"{rows}\n"
        f'        <tr><td><strong>Total</strong></td><td style="text-align: right;">'
        f"<strong>{format_money(total_price)}</strong></td></tr>\n"
        "      </table>\n"
        f"{balance_html}"
        f"      <p>You earn {points_per_item} points for every item you purchase! "
        "Keep ordering to unlock exclusive rewards.</p>\n"
        f"      <p>Thank you for choosing {html.escape(brand_name)}. We appreciate your loyalty!</p>"
    )

    text_lines = [
        f"Thank You for Your {brand_name} Order!",
        "",
        f"You've Earned {points_earned} Points!",
        "",
        "ORDER SUMMARY",
    ]
    text_lines.extend(
        f"{line.name} (Qty: {line.quantity}) - {format_money(line.line_total)}" for line in lines
    )
    text_lines.extend(["", f"Total: {format_money(total_price)}"])
    if new_points_balance is not None:
        text_lines.append(f"Your New Points Balance: {new_points_balance} points")
    text_lines.extend(
        [
            "",
            f"You earn {points_per_item} points for every item you purchase!",
            "",
            f"Thank you for choosing {brand_name}. We appreciate your loyalty!",
            "",
            "---",
            brand_name,
        ]
    )

    return RenderedTemplate(
        subject=subject,
        text_body="\n".join(text_lines),
        html_body=_document("Thank You for Your Order!", body, brand_name),
    )


def render_reward_confirmation(
    *,
    brand_name: str,
    customer_name: str,
    reward_name: str,
    reward_code: str | None,
    points_redeemed: Any,
    points_remaining: Any,
) -> RenderedTemplate:
    subject = f"Your {brand_name} Reward - Confirmation"
    instructions = (
        "Please use this code at checkout to redeem your reward."
        if reward_code
        else "Your reward has been applied to your account."
    )

    if reward_code:
        code_html = (
            '        <div>DISCOUNT CODE</div>\n'
            f'        <div class="code">{html.escape(str(reward_code))}</div>\n'
        )
    else:
        code_html = "        <div><strong>Status:</strong> Active</div>\n"

    body = (
        f"      <p>Hello {html.escape(customer_name)},</p>\n"
        "      <p>Your reward has been successfully redeemed!</p>\n"
        '      <div class="info-box">\n'
        f"        <div><strong>Reward:</strong> {html.escape(reward_name)}</div>\n"
        f"{code_html}"
        f"        <div><strong>Points Redeemed:</strong> {html.escape(str(points_redeemed))}</div>\n"
        f"        <div><strong>Points Remaining:</strong> {html.escape(str(points_remaining))}</div>\n"
        "      </div>\n"
        f"      <p>{instructions}</p>\n"
        f"      <p>Thank you for choosing {html.escape(brand_name)}.</p>"
    )

    text_body = "\n".join(
        [
            f"Hello {customer_name},",
            "",
            "Your reward has been successfully redeemed!",
            "",
            f"Reward: {reward_name}",
            f"Discount Code: {reward_code}" if reward_code else "Status: Active",
            "",
            instructions,
            "",
            f"Points Redeemed: {points_redeemed}",
            f"Points Remaining: {points_remaining}",
            "",
            f"Thank you for choosing {brand_name}.",
            "",
            "Best regards,",
            f"{brand_name} Team",
        ]
    )

    return RenderedTemplate(
        subject=subject,
        text_body=text_body,
        html_body=_document("Reward Confirmation", body, f"{brand_name} Team"),
    )


__all__ = [
    "PurchaseLine",
    "RenderedTemplate",
    "format_money",
    "render_purchase_confirmation",
    "render_reward_confirmation",
]
