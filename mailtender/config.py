"""
Centralized configuration using Pydantic Settings.

All environment variables are loaded and validated here.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CONTEXTS = [
    "@agendas",
    "@calls",
    "@errands",
    "@home",
    "@quicken",
    "@view",
    "@waiting",
    "@work",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MAILTENDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Task capture endpoint
    capture_url: str = "http://carbon:3333"
    capture_path_template: str = "/capture/b/LINK/{title}/{body}"
    capture_timeout: float = 30.0
    task_priority: str = "#C"

    # Deep link back to the source message
    mail_link_base: str = "https://mail.google.com/mail/u/0/#inbox/"

    # Mailbox owner, in friendly-name form (e.g. "jane_doe")
    owner_name: str = ""

    # Scan queries
    inbox_query: str = "in:inbox is:unread"
    inbox_label: str = "INBOX"
    context_query: str = "in:{context}"
    contexts: list[str] = DEFAULT_CONTEXTS
    waiting_contexts: list[str] = ["@waiting"]

    # Google OAuth
    client_secrets_path: str = "client_secret.json"
    token_path: str = "~/.credentials/mailtender.json"
    gmail_scopes: list[str] = ["https://www.googleapis.com/auth/gmail.modify"]

    # Calendar access is opt-in; enabling it requires re-running authorize
    calendar_enabled: bool = False
    calendar_scope: str = "https://www.googleapis.com/auth/calendar"
    calendar_id: str = "primary"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False
    log_file: str = "~/.mailtender.log"

    # Processing
    dry_run: bool = False
    scan_interval_minutes: int = 15

    @property
    def token_file(self) -> Path:
        """Expanded path of the stored OAuth token."""
        return Path(self.token_path).expanduser()

    @property
    def oauth_scopes(self) -> list[str]:
        """Scopes requested at authorization time."""
        if self.calendar_enabled:
            return [*self.gmail_scopes, self.calendar_scope]
        return list(self.gmail_scopes)

    @property
    def log_path(self) -> Path | None:
        """Expanded log file path, or None when logging to stdout only."""
        if not self.log_file:
            return None
        return Path(self.log_file).expanduser()

    def message_link(self, message_id: str) -> str:
        """Deep link to a message in the mail web UI."""
        return f"{self.mail_link_base}{message_id}"

    def context_search(self, context: str) -> str:
        """Mailbox query for threads filed under a context label."""
        return self.context_query.format(context=context)

    def is_waiting_context(self, context: str) -> bool:
        """Check if a context is a 'waiting on a reply' bucket."""
        return context in self.waiting_contexts


# Global settings instance
settings = Settings()
