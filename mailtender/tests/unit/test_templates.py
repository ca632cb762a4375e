"""Tests for the shipped sender templates, run through the dispatcher."""

from datetime import date

import pytest

from mailtender.core.models import (
    BodyFormat,
    BodyPart,
    CaptureResponse,
    DispatchStatus,
    Message,
    Schedule,
)
from mailtender.processors.dispatcher import Dispatcher

LINK = "https://mail.google.com/mail/u/0/#inbox/"


@pytest.fixture
def dispatcher(mailbox, sink, test_settings, today):
    """Dispatcher over the global registry of shipped templates."""
    return Dispatcher(mailbox, sink, settings=test_settings, clock=lambda: today)


def add(mailbox, message_id, headers, **bodies) -> Message:
    return mailbox.add_message(message_id, headers, **bodies)


class TestStatementTemplates:
    """Tests for header-only statement templates."""

    def test_chase_credit_card_statement(self, dispatcher, mailbox, sink, chase_headers, today):
        message = add(mailbox, "c1", chase_headers)
        outcome = dispatcher.dispatch(message, chase_headers)

        assert outcome.template == "chase_credit_card_statement"
        assert outcome.status == DispatchStatus.FILED
        task = sink.tasks[0]
        assert task.heading == "chase credit card statement available"
        assert task.context == "chase:@quicken"
        assert task.priority == "#C"
        assert task.scheduled == Schedule(today)
        assert task.body == f"https://stmts.chase.com/stmtslist\n{LINK}c1"
        assert mailbox.removed_message_labels == [("c1", "INBOX")]

    def test_statement_templates_skip_body_fetch(self, dispatcher, mailbox, chase_headers):
        message = add(mailbox, "c1", chase_headers)
        dispatcher.dispatch(message, chase_headers)
        assert mailbox.body_fetches == []

    def test_older_chase_subject_still_matches(self, dispatcher, mailbox, chase_headers):
        headers = dict(chase_headers, Subject="Your credit card statement is available online")
        outcome = dispatcher.dispatch(add(mailbox, "c2", headers), headers)
        assert outcome.template == "chase_credit_card_statement"

    def test_amex_regex_subject(self, dispatcher, mailbox, sink):
        headers = {
            "Subject": "Important Notice: Your Blue Cash Statement",
            "From": "American Express <AmericanExpress@welcome.aexp.com>",
        }
        outcome = dispatcher.dispatch(add(mailbox, "x1", headers), headers)

        assert outcome.template == "amex_statement"
        assert sink.tasks[0].context == "amex:@quicken"

    def test_pge_heading_keeps_ampersand(self, dispatcher, mailbox, sink):
        headers = {
            "Subject": "Your PG&E Energy Statement is Ready to View",
            "From": "CustomerServiceOnline@pge.com",
        }
        dispatcher.dispatch(add(mailbox, "p1", headers), headers)
        assert sink.tasks[0].heading == "pg&e statement available"

    def test_wrong_sender_is_unmatched(self, dispatcher, mailbox, sink, chase_headers):
        headers = dict(chase_headers, From="Chase <phish@example.com>")
        outcome = dispatcher.dispatch(add(mailbox, "c3", headers), headers)

        assert outcome.status == DispatchStatus.UNMATCHED
        assert sink.tasks == []
        assert mailbox.removed_message_labels == []

    def test_missing_subject_is_unmatched(self, dispatcher, mailbox):
        headers = {"From": "Chase <no-reply@alertsp.chase.com>"}
        outcome = dispatcher.dispatch(add(mailbox, "c4", headers), headers)
        assert outcome.status == DispatchStatus.UNMATCHED


class TestRawBlockTemplates:
    """Tests for templates that read the raw transport body."""

    def test_capitalone_transfer(self, dispatcher, mailbox, sink, capitalone_transfer_raw):
        headers = {
            "Subject": "Transfer Money Notice",
            "From": "Capital One <transfers@notification.capitalone.com>",
        }
        message = add(mailbox, "t1", headers, raw=capitalone_transfer_raw)
        outcome = dispatcher.dispatch(message, headers)

        assert outcome.template == "capitalone_transfer"
        assert mailbox.body_fetches == [("t1", BodyFormat.RAW)]
        task = sink.tasks[0]
        assert task.heading == "capital one transfer money notice"
        assert "\r" not in task.body
        assert task.body == (
            "Amount: $39.99\n"
            "From: Orange Parker Allowance, XXXXXX1099\n"
            "To: Orange Checking, XXXXXX6515\n"
            "Memo: game\n"
            "Transferred On: 08/22/2015\n"
            f"{LINK}t1"
        )

    def test_allstate_without_block_still_files(self, dispatcher, mailbox, sink):
        """Test a missing optional block does not crash the template."""
        headers = {
            "Subject": "Allstate: Your billing document is ready to view online",
            "From": "Allstate My Account <allstate@trns01.allstate-email.com>",
        }
        outcome = dispatcher.dispatch(add(mailbox, "a1", headers, raw="no details\r\n"), headers)

        assert outcome.success is True
        assert sink.tasks[0].body == f"https://myaccount.allstate.com/anon/login/login.aspx\n{LINK}a1"


class TestHtmlTemplates:
    """Tests for templates that parse decoded MIME parts."""

    def test_paypal_statement_link(self, dispatcher, mailbox, sink):
        headers = {
            "Subject": "Your November account statement is available",
            "From": "PayPal Statements <paypal@e.paypal.com>",
        }
        html = (
            '<p><a href="https://www.paypal.com/help">Help</a></p>\r\n'
            '<a class="button"\r\n href="https://www.paypal.com/statements/2020-11">View Statement</a>'
        )
        payload = BodyPart(mime_type="text/html", text=html)
        dispatcher.dispatch(add(mailbox, "pp1", headers, payload=payload), headers)

        assert sink.tasks[0].body == f"https://www.paypal.com/statements/2020-11\n{LINK}pp1"

    def test_paypal_without_link(self, dispatcher, mailbox, sink):
        headers = {
            "Subject": "Your account statement is available",
            "From": "PayPal Statements <paypal@e.paypal.com>",
        }
        payload = BodyPart(mime_type="text/html", text="<p>Log in to view</p>")
        outcome = dispatcher.dispatch(add(mailbox, "pp2", headers, payload=payload), headers)

        assert outcome.success is True
        assert sink.tasks[0].body == f"{LINK}pp2"

    def test_peets_paid_amount(self, dispatcher, mailbox, sink):
        headers = {
            "Subject": "Your Peet's Card Reload Order #1234",
            "From": "Customer Service <customerservice@peets.com>",
        }
        payload = BodyPart(text="Balance $12.00. You paid $50.00 with Visa ending 1111.")
        dispatcher.dispatch(add(mailbox, "pe1", headers, payload=payload), headers)

        assert sink.tasks[0].body == f"$50.00\n{LINK}pe1"

    def test_workday_feedback_request(self, dispatcher, mailbox, sink):
        headers = {
            "Subject": "Feedback is requested",
            "From": "AutoNotification workday <autodesk@myworkday.com>",
        }
        html = (
            "<div><span>Mark Davis (110932) has requested that you provide feedback on "
            "Anthony Ruto - Please visit your Workday inbox</span>"
            '<a href="https://wd5.myworkday.com/inbox/123">Click Here to view the notification details</a></div>'
        )
        payload = BodyPart(
            mime_type="multipart/mixed",
            parts=[BodyPart(mime_type="multipart/alternative", parts=[BodyPart("text/html", html)])],
        )
        dispatcher.dispatch(add(mailbox, "w1", headers, payload=payload), headers)

        task = sink.tasks[0]
        assert task.heading == "provide feedback on anthony ruto to mark davis"
        assert task.context == "@work"
        assert task.body == f"https://wd5.myworkday.com/inbox/123\n{LINK}w1"

    def test_workday_unrecognized_body_is_required_miss(self, dispatcher, mailbox, sink):
        headers = {
            "Subject": "Feedback is requested",
            "From": "AutoNotification workday <autodesk@myworkday.com>",
        }
        payload = BodyPart(parts=[BodyPart(parts=[BodyPart("text/html", "<p>new layout</p>")])])
        outcome = dispatcher.dispatch(add(mailbox, "w2", headers, payload=payload), headers)

        assert outcome.status == DispatchStatus.ERROR
        assert sink.tasks == []
        assert mailbox.removed_message_labels == []


class TestAmazonOrder:
    """Tests for the two-step Amazon order template."""

    def test_purchase_and_delivery_tasks(self, dispatcher, mailbox, sink, amazon_order_headers, amazon_order_body, today):
        message = add(mailbox, "o1", amazon_order_headers, payload=amazon_order_body)
        outcome = dispatcher.dispatch(message, amazon_order_headers)

        assert outcome.template == "amazon_order"
        assert outcome.success is True
        purchase, delivery = sink.tasks
        assert purchase.heading == 'order of "usb-c cable"'
        assert purchase.context == "amazon:@quicken"
        assert purchase.scheduled == Schedule(today)
        assert purchase.body == (
            "https://www.amazon.com/gp/css/your-orders-access\n"
            "$12.99\n"
            f"{LINK}o1"
        )
        assert delivery.heading == 'delivery of "usb-c cable"'
        assert delivery.context == "amazon:@waiting"
        assert delivery.body == f"https://www.amazon.com/gp/css/your-orders-access\n{LINK}o1"
        assert mailbox.removed_message_labels == [("o1", "INBOX")]

    def test_estimated_date_used_when_no_guaranteed(self, dispatcher, mailbox, sink, amazon_order_headers, amazon_order_body):
        """Test the estimated block wins over the 'now' default."""
        dispatcher.dispatch(add(mailbox, "o1", amazon_order_headers, payload=amazon_order_body), amazon_order_headers)
        assert sink.tasks[1].scheduled == Schedule(date(2020, 12, 23))

    def test_guaranteed_date_preferred(self, dispatcher, mailbox, sink, amazon_order_headers, make_amazon_order_body):
        body = make_amazon_order_body(
            "Estimated delivery date:\r\n  December 28, 2020\r\n"
            "Guaranteed delivery date:\r\n  December 22, 2020\r\n"
        )
        dispatcher.dispatch(add(mailbox, "o1", amazon_order_headers, payload=body), amazon_order_headers)
        assert sink.tasks[1].scheduled == Schedule(date(2020, 12, 22))

    def test_arriving_window(self, dispatcher, mailbox, sink, amazon_order_headers, make_amazon_order_body):
        body = make_amazon_order_body("Arriving:\r\n  December 22 - December 24\r\n")
        dispatcher.dispatch(add(mailbox, "o1", amazon_order_headers, payload=body), amazon_order_headers)

        assert sink.tasks[1].scheduled.render() == "<2020-12-22 Tue>--<2020-12-24 Thu>"

    def test_no_delivery_date_defaults_to_today(self, dispatcher, mailbox, sink, amazon_order_headers, make_amazon_order_body, today):
        body = make_amazon_order_body("")
        dispatcher.dispatch(add(mailbox, "o1", amazon_order_headers, payload=body), amazon_order_headers)
        assert sink.tasks[1].scheduled == Schedule(today)

    def test_order_name_from_body(self, dispatcher, mailbox, sink, amazon_order_headers, amazon_order_body):
        headers = dict(amazon_order_headers, Subject="Your Amazon.com order #112-3456789")
        dispatcher.dispatch(add(mailbox, "o2", headers, payload=amazon_order_body), headers)
        assert sink.tasks[0].heading == 'order of "usb-c cable"'

    def test_delivery_not_sent_when_purchase_fails(self, mailbox, make_sink, test_settings, today, amazon_order_headers, amazon_order_body):
        sink = make_sink([CaptureResponse(success=False, status_code=500, reason="boom")])
        dispatcher = Dispatcher(mailbox, sink, settings=test_settings, clock=lambda: today)
        outcome = dispatcher.dispatch(add(mailbox, "o1", amazon_order_headers, payload=amazon_order_body), amazon_order_headers)

        assert len(sink.tasks) == 1
        assert outcome.status == DispatchStatus.CAPTURE_FAILED
        assert mailbox.removed_message_labels == []

    def test_digital_order_total(self, dispatcher, mailbox, sink):
        headers = {
            "Subject": "Amazon.com order of The Expanse Season 1.",
            "From": '"Amazon.com" <digital-no-reply@amazon.com>',
        }
        payload = BodyPart(parts=[BodyPart(text="Item Subtotal: $19.99\r\nGrand Total:   $21.64\r\n")])
        outcome = dispatcher.dispatch(add(mailbox, "d1", headers, payload=payload), headers)

        assert outcome.template == "amazon_digital_order"
        assert sink.tasks[0].heading == "order of the expanse season 1"
        assert sink.tasks[0].body == f"$21.64\n{LINK}d1"
