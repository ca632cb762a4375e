"""
Task capture sink.

Tasks are sent as a GET request whose path carries the percent-encoded
headline and body, e.g. http://carbon:3333/capture/b/LINK/<title>/<body>.
"""

from abc import ABC, abstractmethod

import requests

from mailtender.config import Settings, settings as default_settings
from mailtender.core.formatter import encode_task
from mailtender.core.logging import get_logger
from mailtender.core.models import CaptureResponse, TaskRecord

log = get_logger(__name__)


class TaskSink(ABC):
    """Abstract destination for filed tasks."""

    @abstractmethod
    def capture(self, task: TaskRecord) -> CaptureResponse:
        """
        Persist one task.

        Args:
            task: Task to file

        Returns:
            CaptureResponse with success flag and, on failure, code/reason
        """
        pass


class CaptureClient(TaskSink):
    """HTTP client for the task capture endpoint."""

    def __init__(
        self,
        base_url: str | None = None,
        path_template: str | None = None,
        timeout: float | None = None,
        settings: Settings | None = None,
        logger=None,
    ):
        settings = settings or default_settings
        self.base_url = (base_url or settings.capture_url).rstrip("/")
        self.path_template = path_template or settings.capture_path_template
        self.timeout = timeout if timeout is not None else settings.capture_timeout
        self.log = logger or log

    def url_for(self, task: TaskRecord) -> str:
        return f"{self.base_url}{encode_task(task).path(self.path_template)}"

    def capture(self, task: TaskRecord) -> CaptureResponse:
        url = self.url_for(task)
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            self.log.error("capture_request_error", heading=task.heading, error=str(e))
            return CaptureResponse(success=False, status_code=None, reason=str(e))

        if response.status_code != 200:
            return CaptureResponse(
                success=False,
                status_code=response.status_code,
                reason=response.reason or "",
            )
        return CaptureResponse(success=True, status_code=response.status_code, reason=response.reason or "")
