"""
OAuth2 credentials for the Gmail and Calendar APIs.

Credentials are restored from the saved token file when possible. When no
usable token exists and the run is interactive, the installed-app flow
opens a browser for consent and the resulting token is saved.
"""

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from mailtender.config import Settings, settings as default_settings
from mailtender.core.exceptions import AuthorizationError
from mailtender.core.logging import get_logger

log = get_logger(__name__)


def load_credentials(settings: Settings) -> Credentials | None:
    """Load saved credentials, refreshing them if expired."""
    token_file = settings.token_file
    if not token_file.exists():
        return None

    credentials = Credentials.from_authorized_user_file(str(token_file), settings.oauth_scopes)
    if credentials.valid:
        return credentials

    if credentials.expired and credentials.refresh_token:
        try:
            credentials.refresh(Request())
        except RefreshError as e:
            log.warning("credentials_refresh_failed", error=str(e))
            return None
        save_credentials(credentials, settings)
        log.info("credentials_refreshed")
        return credentials
    return None


def save_credentials(credentials: Credentials, settings: Settings) -> None:
    token_file = settings.token_file
    token_file.parent.mkdir(parents=True, exist_ok=True)
    token_file.write_text(credentials.to_json())
    token_file.chmod(0o600)


def authorize(interactive: bool, settings: Settings | None = None) -> Credentials:
    """
    Ensure valid credentials.

    Args:
        interactive: Allow launching the browser consent flow
        settings: Settings with token and client secrets paths

    Returns:
        Valid OAuth2 credentials

    Raises:
        AuthorizationError: if no credentials are stored and the run is not interactive
    """
    settings = settings or default_settings
    credentials = load_credentials(settings)
    if credentials is not None:
        return credentials

    if not interactive:
        raise AuthorizationError(
            f"No valid credentials at {settings.token_file}; run 'mailtender authorize' first"
        )

    try:
        flow = InstalledAppFlow.from_client_secrets_file(
            settings.client_secrets_path,
            scopes=settings.oauth_scopes,
        )
    except FileNotFoundError as e:
        raise AuthorizationError(
            f"OAuth client secrets not found at {settings.client_secrets_path}"
        ) from e

    credentials = flow.run_local_server(port=0)
    save_credentials(credentials, settings)
    log.info("credentials_stored", path=str(settings.token_file))
    return credentials
