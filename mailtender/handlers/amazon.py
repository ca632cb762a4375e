"""
Templates for Amazon order and subscription mail.

An order confirmation files two tasks: the purchase, scheduled today, and
the expected delivery, scheduled on the delivery date (or window). The
delivery task is only sent once the purchase task was accepted.
"""

import re

from mailtender.classifiers.patterns import sender_is, subject_contains, subject_is
from mailtender.extractors.fields import (
    BODY,
    SUBJECT,
    Anchor,
    FieldRule,
    schedule,
    today_schedule,
)
from mailtender.handlers.registry import register_handler
from mailtender.handlers.template import TaskSpec, TemplateHandler

# Plain-text part of the order mails
TEXT_PART = (0,)


def delivery_anchor(label: str) -> Anchor:
    """Date on the line after (or beside) a delivery label."""
    return Anchor(rf"{label}:\s*(.+?)\r?\n", BODY, part=TEXT_PART)


register_handler(TemplateHandler(
    name="amazon_subscribe_and_save",
    matcher=subject_is("Amazon Subscribe & Save: Review Your Monthly Delivery")
    & sender_is('"Amazon Subscribe & Save" <no-reply@amazon.com>'),
    tasks=(
        TaskSpec(
            heading="review amazon subscribe and save delivery",
            context="amazon:@home",
            lines=("https://www.amazon.com/manageyoursubscription",),
        ),
    ),
))

register_handler(TemplateHandler(
    name="amazon_order",
    matcher=subject_contains("Your Amazon.com order")
    & sender_is('"auto-confirm@amazon.com" <auto-confirm@amazon.com>'),
    fields=(
        FieldRule(
            "order",
            (
                Anchor(r"Your Amazon\.com order of (.*)\.", SUBJECT),
                Anchor(r'You ordered\s+(".*?")\s*\.\r?\n', BODY, part=TEXT_PART, flags=re.S),
            ),
            required=True,
        ),
        FieldRule(
            "orders_url",
            (
                Anchor(
                    r"View or manage your orders in Your Orders:\r?\n?(https:.*?)\r?\n",
                    BODY,
                    part=TEXT_PART,
                ),
            ),
        ),
        FieldRule(
            "delivery",
            (
                delivery_anchor("Guaranteed delivery date"),
                delivery_anchor("Estimated delivery date"),
                delivery_anchor("Arriving"),
            ),
            transform=schedule,
            default=today_schedule,
        ),
        FieldRule(
            "total",
            (Anchor(r"Order Total: (\$.*?)\r?\n", BODY, part=TEXT_PART),),
        ),
    ),
    tasks=(
        TaskSpec(
            heading="order of {order}",
            context="amazon:@quicken",
            lines=("{orders_url}", "{total}"),
        ),
        TaskSpec(
            heading="delivery of {order}",
            context="amazon:@waiting",
            lines=("{orders_url}",),
            scheduled="delivery",
        ),
    ),
))

register_handler(TemplateHandler(
    name="amazon_digital_order",
    matcher=subject_contains("Amazon.com order of")
    & sender_is('"Amazon.com" <digital-no-reply@amazon.com>'),
    fields=(
        FieldRule(
            "order",
            (Anchor(r"Amazon\.com order of (.*)\.", SUBJECT),),
            required=True,
        ),
        FieldRule(
            "total",
            (Anchor(r"Grand Total:\s+(\$.*?)\r?\n", BODY, part=TEXT_PART),),
        ),
    ),
    tasks=(
        TaskSpec(
            heading="order of {order}",
            context="amazon:@quicken",
            lines=("{total}",),
        ),
    ),
))
