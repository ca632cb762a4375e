"""
Templates for bank, bill and statement notifications.

Most of these only announce that a document is ready, so the task is a
fixed heading plus a link to the provider's site.
"""

import re

from mailtender.classifiers.patterns import (
    sender_contains,
    sender_is,
    subject_contains,
    subject_is,
    subject_matches,
)
from mailtender.extractors.fields import BODY, RAW, Anchor, FieldRule, block
from mailtender.handlers.registry import register_handler
from mailtender.handlers.template import TaskSpec, TemplateHandler


def statement_template(name, matcher, heading, context, link=None, fields=()):
    """Template whose task is a heading, optional extracted lines, and a site link."""
    lines = tuple(f"{{{rule.name}}}" for rule in fields)
    if link:
        lines += (link,)
    return TemplateHandler(
        name=name,
        matcher=matcher,
        tasks=(TaskSpec(heading=heading, context=context, lines=lines),),
        fields=tuple(fields),
    )


# Policy Number: XXXX63191
# Policy Type: Auto - private passenger voluntary
# Due Date: Payments scheduled for the 16th
# Minimum Amount Due: See Schedule
register_handler(statement_template(
    "allstate_bill",
    subject_is("Allstate: Your billing document is ready to view online")
    & sender_is("Allstate My Account <allstate@trns01.allstate-email.com>"),
    heading="allstate bill available",
    context="@quicken",
    link="https://myaccount.allstate.com/anon/login/login.aspx",
    fields=(
        FieldRule(
            "detail",
            (Anchor(r"(Policy Number:.*?Minimum Amount Due:.*?\n)", RAW, flags=re.S),),
            transform=block,
        ),
    ),
))

register_handler(statement_template(
    "chase_credit_card_statement",
    subject_matches(r"^Your credit card statement is (?:ready|available online)$")
    & sender_is("Chase <no-reply@alertsp.chase.com>"),
    heading="chase credit card statement available",
    context="chase:@quicken",
    link="https://stmts.chase.com/stmtslist",
))

register_handler(statement_template(
    "chase_mortgage_statement",
    subject_is("Your mortgage statement is available online.")
    & sender_is("Chase <no-reply@alertsp.chase.com>"),
    heading="chase mortgage statement available",
    context="chase:@quicken",
    link="https://stmts.chase.com/stmtslist",
))

# Amount: $39.99
# From: Orange Parker Allowance, XXXXXX1099
# To: Orange Checking, XXXXXX6515
# Memo: game
# Transferred On: 08/22/2015
register_handler(statement_template(
    "capitalone_transfer",
    subject_is("Transfer Money Notice") & sender_contains("capitalone.com"),
    heading="capital one transfer money notice",
    context="capitalone:@quicken",
    fields=(
        FieldRule(
            "detail",
            (Anchor(r"(Amount:.*?Transferred On:.*?\n)", RAW, flags=re.S),),
            transform=block,
        ),
    ),
))

register_handler(statement_template(
    "capitalone_statement",
    subject_contains("eStatement's now available")
    & sender_is("Capital One <capitalone@email.capitalone.com>"),
    heading="account statement available",
    context="capitalone:@quicken",
    link="https://secure.capitalone360.com/myaccount/banking/login.vm",
))

register_handler(statement_template(
    "paypal_statement",
    subject_contains("account statement is available")
    & sender_is("PayPal Statements <paypal@e.paypal.com>"),
    heading="account statement available",
    context="paypal:@quicken",
    fields=(
        FieldRule(
            "statement_url",
            (Anchor(r'<a[^>]*?href="([^"]*)"[^>]*>(?:(?!</a>).)*?View Statement</a>', BODY, flags=re.S),),
        ),
    ),
))

register_handler(statement_template(
    "pershing_statement",
    subject_is("Account Statement Notification")
    & sender_is("pershing@advisor.netxinvestor.com"),
    heading="account statement available",
    context="pershing:@quicken",
))

register_handler(statement_template(
    "pge_statement",
    subject_is("Your PG&E Energy Statement is Ready to View")
    & sender_is("CustomerServiceOnline@pge.com"),
    heading="pg&e statement available",
    context="amex:@quicken",
    link="http://www.pge.com/MyEnergy",
))

register_handler(statement_template(
    "peets_reload",
    subject_contains("Your Peet's Card Reload Order")
    & sender_is("Customer Service <customerservice@peets.com>"),
    heading="peet's card reload order",
    context="amex:@quicken",
    fields=(
        FieldRule(
            "amount",
            (
                Anchor(r"You paid (\$[\d,]+(?:\.\d{2})?) with", BODY),
                Anchor(r"(\$[\d,]+(?:\.\d{2})?)", BODY),
            ),
        ),
    ),
))

register_handler(statement_template(
    "comcast_bill",
    subject_is("Your bill is ready")
    & sender_is("XFINITY My Account <online.communications@alerts.comcast.net>"),
    heading="comcast bill ready",
    context="amex:@quicken",
    link="https://customer.xfinity.com/Secure/MyAccount/",
))

register_handler(statement_template(
    "etrade_statement",
    subject_is("You have a new account statement from E*TRADE Securities")
    & sender_is('"E*TRADE SECURITIES LLC" <etrade_stmt_mbox@statement.etradefinancial.com>'),
    heading="etrade statement available",
    context="etrade:@quicken",
    link="https://edoc.etrade.com/e/t/onlinedocs/docsearch?doc_type=stmt",
))

register_handler(statement_template(
    "amex_statement",
    subject_matches(r"Important Notice: Your .* Statement")
    & sender_is("American Express <AmericanExpress@welcome.aexp.com>"),
    heading="account statement available",
    context="amex:@quicken",
    link="https://online.americanexpress.com/myca/statementimage/us/welcome.do",
))

register_handler(statement_template(
    "verizon_bill",
    subject_is("Your online bill is available.")
    & sender_is("Verizon Wireless <VZWMail@ecrmemail.verizonwireless.com>"),
    heading="verizon bill available",
    context="amex:@quicken",
    link="https://ebillpay.verizonwireless.com/vzw/accountholder/mybill/BillingSummary.action",
))

register_handler(statement_template(
    "vanguard_statement",
    subject_is("Your Vanguard statement is ready")
    & sender_is("Vanguard <ParticipantServices@vanguard.com>"),
    heading="account statement available",
    context="vanguard:@quicken",
    link="https://retirementplans.vanguard.com/VGApp/pe/PublicHome",
))
