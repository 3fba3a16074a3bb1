from collections.abc import Iterable
from pathlib import Path
import json
import copy
import logging
import threading

import google.auth
import google.auth.exceptions
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google.oauth2 import service_account
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build, Resource

from .config import Settings

logger = logging.getLogger(__name__)


class __GWSAccess():
    """
    Authenticated access to the Google Sheets API for the service.

    The deployed service authenticates as a service account (email plus private
    key handed in through configuration).  For local work against a personal
    spreadsheet the installed app OAuth flow is also supported, with the tokens
    cached so the consent screen is only shown once, and as a last resort the
    application default credentials are tried.

    One authenticated session per process is all that makes sense, so this is
    a module singleton.  Connecting is serialized by a lock.  A discovery
    service sits on an httplib2.Http, which is not thread-safe, so services
    are built and cached per thread and rebuilt once the session changes.
    """

    __SCOPES = {
        "sheets": "https://www.googleapis.com/auth/spreadsheets",
        "sheets-ro": "https://www.googleapis.com/auth/spreadsheets.readonly",
        "drive-file": "https://www.googleapis.com/auth/drive.file",
        "drive": "https://www.googleapis.com/auth/drive",
        "drive-ro": "https://www.googleapis.com/auth/drive.readonly",
    }
    __SCOPE_URL_PREFIX = "https://www.googleapis.com/"

    __DEFAULT_AUTH_PROMPT_MSG = "Authorize eventsheets by visiting: {url}"
    __DEFAULT_AUTH_FLOW_SUCCESS_MSG = "eventsheets is authorized, this window can be closed."
    __DEFAULT_SECRETS = (Path.home() / "gws_client_secrets.json").absolute()
    __DEFAULT_CACHE = (Path.home() / "gws_tokens.json").absolute()

    def __init__(self) -> None:
        self.__lock = threading.RLock()
        self.__generation = 0
        self.reset()

    def __bool__(self) -> bool:
        """True is we are connected and authenticated"""
        return self.connected

    def __str__(self) -> str:
        if self.connected:
            return f"Connected:{str(self.session_scopes)}"
        return f"Disconnected:{str(self.__scopes)}"

    def __repr__(self) -> str:
        return f"{str(self.__class__)}:{str(self)}"

    @classmethod
    def get_scope(cls, scope: str) -> str:
        """
        Get a scope based on simplified label.
        A raw URL will also be expected.
        """
        s = str(scope)
        sc = cls.__SCOPES.get(s, "")
        if not sc and s.startswith(cls.__SCOPE_URL_PREFIX):
            sc = s
        return sc

    @property
    def client_secrets(self) -> Path:
        return self.__secrets

    @client_secrets.setter
    def client_secrets(self, value: Path|str) -> None:
        val = value if isinstance(value, Path) else Path(str(value))
        if val != self.__secrets:
            self.__secrets = val
            self.disconnect()

    @property
    def cred_cache(self) -> Path:
        return self.__cache

    @cred_cache.setter
    def cred_cache(self, value: Path|str) -> None:
        val = value if isinstance(value, Path) else Path(str(value))
        if val != self.__cache:
            self.__cache = val
            self.disconnect()

    @property
    def connected(self) -> bool:
        """
        Are we holding valid credentials?
        """
        return bool(self.__creds) and bool(self.__creds.valid)

    @property
    def session_scopes(self) -> list[str]:
        if self.connected:
            return list(self.__creds.scopes or [])
        return []

    @property
    def scopes(self) -> list[str]:
        """
        The scopes requested or to be requested on next connect.
        """
        return self.__scopes

    @scopes.setter
    def scopes(self, value: None|list[str]|str) -> None:
        slist = []
        if value is not None:
            vals = [value] if isinstance(value, str) or not isinstance(value, Iterable) else value
            for v in vals:
                s = self.get_scope(str(v))
                if s and s not in slist:
                    slist.append(s)
        self.__scopes = slist
        self.disconnect()

    def append_scopes(self, *args) -> None:
        """
        Add to the current scope list, dropping the session if new scopes
        were actually requested.
        """
        added = False
        for a in args:
            b = [a] if isinstance(a, str) or not isinstance(a, Iterable) else a
            for i in b:
                s = self.get_scope(str(i))
                if s and s not in self.__scopes:
                    self.__scopes.append(s)
                    added = True
        if added:
            self.disconnect()

    def set_service_account(self, email: str, private_key: str) -> None:
        """
        Credentials for a service account, as an email and PEM private key.
        Escaped newlines in the key are converted to real ones.
        """
        key = str(private_key or "").replace("\\n", "\n")
        info = (str(email or ""), key)
        if info != self.__service_account:
            self.__service_account = info
            self.disconnect()

    @property
    def has_service_account(self) -> bool:
        email, key = self.__service_account
        return bool(email) and bool(key)

    @property
    def creds(self):
        return self.__creds

    @property
    def services(self) -> dict[str, Resource]:
        """Services built by the calling thread for the current session."""
        if getattr(self.__local, "generation", None) != self.__generation:
            return {}
        return self.__local.services

    def configure(self, settings: Settings) -> None:
        """
        Apply runtime settings.  Only the values actually present are used
        so a partial configuration keeps the defaults for the rest.
        """
        if settings.service_account_email or settings.private_key:
            self.set_service_account(settings.service_account_email, settings.private_key)
        if settings.client_secrets:
            self.client_secrets = settings.client_secrets
        if settings.token_cache:
            self.cred_cache = settings.token_cache
        if not self.__scopes:
            self.append_scopes("sheets")

    def disconnect(self) -> None:
        """Forget the current session and any services built from it."""
        with self.__lock:
            self.__creds = None
            # threads drop their cached services on their next get_service()
            self.__generation += 1

    def reset(self) -> None:
        """
        Reset all connection state to defaults.
        """
        with self.__lock:
            self.__secrets = self.__DEFAULT_SECRETS
            self.__cache = self.__DEFAULT_CACHE
            self.__service_account = ("", "")
            self.__scopes = []
            self.__local = threading.local()
            self.disconnect()
        self.auth_server = 'localhost'
        self.auth_port = 0
        self.auth_prompt_msg = self.__DEFAULT_AUTH_PROMPT_MSG
        self.auth_flow_success_msg = self.__DEFAULT_AUTH_FLOW_SUCCESS_MSG

    def _connect_service_account(self, scopes: list[str]) -> None:
        email, key = self.__service_account
        info = {
            "type": "service_account",
            "client_email": email,
            "private_key": key,
            "token_uri": "https://oauth2.googleapis.com/token",
        }
        creds = service_account.Credentials.from_service_account_info(info, scopes=scopes)
        creds.refresh(Request())
        self.__creds = creds

    def _connect_cached(self, scopes: list[str]) -> None:
        if not (self.__cache.exists() and self.__cache.is_file()):
            return
        cf = self.__cache.resolve()
        with open(cf, 'r', encoding='utf-8') as f:
            cached_scopes = json.load(f).get('scopes', [])
        if not all(s in cached_scopes for s in scopes):
            # the refresh token would not cover what is asked for now
            self.__cache.unlink()
            return
        self.__creds = Credentials.from_authorized_user_file(str(cf), scopes)
        if not self.connected and self.__creds.refresh_token:
            try:
                self.__creds.refresh(Request())
            except google.auth.exceptions.RefreshError as e:
                logger.warning("failed to refresh stored creds: %s, re-authorizing", e)
        if not self.connected:
            self.__creds = None
            self.__cache.unlink()

    def _connect_installed_app(self, scopes: list[str]) -> None:
        flow = InstalledAppFlow.from_client_secrets_file(str(self.__secrets), scopes)
        self.__creds = flow.run_local_server(host=self.auth_server, port=self.auth_port,
                                             authorization_prompt_message=self.auth_prompt_msg,
                                             success_message=self.auth_flow_success_msg)
        if self.connected:
            user_info = {'refresh_token': self.__creds.refresh_token, 'client_id': self.__creds.client_id,
                         'client_secret': self.__creds.client_secret, 'scopes': scopes}
            with open(self.__cache.resolve(), 'w', encoding='utf-8') as f:
                json.dump(user_info, f, ensure_ascii=False, indent=2)

    def connect(self) -> bool:
        """
        Establish a new authentication session, trying in order: the service
        account, the token cache, the installed app flow (only when a secrets
        file exists) and the application default credentials.
        """
        with self.__lock:
            self.disconnect()
            if not self.__scopes:
                self.append_scopes("sheets")
            requested_scopes = copy.copy(self.__scopes)

            if self.has_service_account:
                self._connect_service_account(requested_scopes)
                return self.connected

            self._connect_cached(requested_scopes)
            if not self.connected and self.__secrets.exists() and self.__secrets.is_file():
                self._connect_installed_app(requested_scopes)
            if not self.connected:
                try:
                    # GOOGLE_APPLICATION_CREDENTIALS and the usual cloud locations
                    creds, _ = google.auth.default(scopes=requested_scopes)
                    creds.refresh(Request())
                    self.__creds = creds
                except google.auth.exceptions.DefaultCredentialsError:
                    logger.error("no Google credentials available")
            return self.connected

    def get_service(self, name: str, version: str) -> Resource|None:
        """
        Build the requested service for the calling thread if not already
        available, connecting if required.  Returns None if no connection could
        be made.
        """
        with self.__lock:
            # another thread may have reconnected while this one waited
            if not self.connected:
                self.connect()
            if not self.connected:
                return None
            creds = self.__creds
            generation = self.__generation

        local = self.__local
        if getattr(local, "generation", None) != generation:
            local.generation = generation
            local.services = {}
        id = f'{name}:{version}'
        s = local.services.get(id, None)
        if s is None:
            s = build(name, version, credentials=creds, cache_discovery=False)
            local.services[id] = s
        return s


gws = __GWSAccess()
