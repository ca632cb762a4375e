"""
Templates for work notifications.
"""

from mailtender.classifiers.patterns import sender_is, subject_is
from mailtender.extractors.fields import BODY, Anchor, FieldRule
from mailtender.handlers.registry import register_handler
from mailtender.handlers.template import TaskSpec, TemplateHandler

# HTML part nested inside the multipart/alternative part
WORKDAY_PART = (0, 0)

# <span>Mark Davis (110932) has requested that you provide feedback on Anthony Ruto - Please visit ...
FEEDBACK_REQUEST = (
    r"<span>([^<].*?) \(\d+\) has requested that you provide feedback on (.*?)"
    r" - Please visit your Workday inbox"
)

register_handler(TemplateHandler(
    name="workday_feedback_request",
    matcher=subject_is("Feedback is requested")
    & sender_is("AutoNotification workday <autodesk@myworkday.com>"),
    fields=(
        FieldRule("requester", (Anchor(FEEDBACK_REQUEST, BODY, part=WORKDAY_PART, group=1),), required=True),
        FieldRule("employee", (Anchor(FEEDBACK_REQUEST, BODY, part=WORKDAY_PART, group=2),), required=True),
        FieldRule(
            "details_url",
            (
                Anchor(
                    r'<a href="(https://.*?)">Click Here to view the notification details',
                    BODY,
                    part=WORKDAY_PART,
                ),
            ),
        ),
    ),
    tasks=(
        TaskSpec(
            heading="provide feedback on {employee} to {requester}",
            context="@work",
            lines=("{details_url}",),
        ),
    ),
))
