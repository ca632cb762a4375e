"""
Data-driven handler for one sender template.

A template is a header predicate, a set of field rules, and one or more
task specs. Task specs are rendered with str.format over the extracted
fields; a heading that refers to an unknown field is a required-field
miss, while body lines that refer to unknown fields are dropped.
"""

from dataclasses import dataclass
from string import Formatter
from typing import Callable

from mailtender.core.exceptions import RequiredFieldMissing
from mailtender.core.formatter import format_task
from mailtender.core.models import (
    BodyAccessor,
    HandlerResult,
    Headers,
    Message,
    Schedule,
    TaskRecord,
)
from mailtender.extractors.fields import FieldExtractor, FieldRule, Fields
from mailtender.handlers.base import BaseHandler, FilingContext


@dataclass(frozen=True)
class TaskSpec:
    """How to build one task from extracted fields."""

    heading: str
    context: str
    lines: tuple[str, ...] = ()
    scheduled: str | None = None  # Name of a Schedule field; today if unset


def _referenced_fields(template: str) -> list[str]:
    return [name for _, name, _, _ in Formatter().parse(template) if name]


class TemplateHandler(BaseHandler):
    """Handler built from a matcher, field rules and task specs."""

    def __init__(
        self,
        name: str,
        matcher: Callable[[Headers], bool],
        tasks: tuple[TaskSpec, ...],
        fields: tuple[FieldRule, ...] = (),
        archive: bool = True,
    ):
        if not tasks:
            raise ValueError(f"{name}: a template needs at least one task")
        self.name = name
        self.matcher = matcher
        self.tasks = tasks
        self.fields = fields
        self.archive = archive

    def match(self, headers: Headers) -> bool:
        return self.matcher(headers)

    def handle(
        self,
        message: Message,
        headers: Headers,
        body: BodyAccessor,
        context: FilingContext,
    ) -> HandlerResult:
        extractor = FieldExtractor(self.name, self.fields, logger=context.logger)
        fields = extractor.extract(headers, body, context.today)
        tasks = [self._build_task(spec, fields, context) for spec in self.tasks]
        return HandlerResult(
            template=self.name,
            tasks=tasks,
            fields=dict(fields.values),
            archive=self.archive,
        )

    def _build_task(self, spec: TaskSpec, fields: Fields, context: FilingContext) -> TaskRecord:
        for name in _referenced_fields(spec.heading):
            if not fields.is_known(name):
                raise RequiredFieldMissing(self.name, name)
        heading = spec.heading.format(**fields.values).strip()
        if not heading:
            raise RequiredFieldMissing(self.name, "heading")

        lines = []
        for line in spec.lines:
            if not all(fields.is_known(name) for name in _referenced_fields(line)):
                continue
            rendered = line.format(**fields.values).rstrip("\n")
            if rendered.strip():
                lines.append(rendered)
        lines.append(context.message_link)

        scheduled = fields.get(spec.scheduled) if spec.scheduled else None
        if not isinstance(scheduled, Schedule):
            scheduled = Schedule(context.today)

        return format_task(
            heading=heading,
            context=spec.context,
            priority=context.priority,
            scheduled=scheduled,
            body="\n".join(lines),
        )

    def __repr__(self) -> str:
        return f"TemplateHandler({self.name!r})"
