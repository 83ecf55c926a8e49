"""Host integration: activation and the pre-file-download hook.

The host calls :meth:`AuthenticatedDownloadPlugin.activate` once with the
manifest ``extra`` section and its credential tables, then awaits
:meth:`AuthenticatedDownloadPlugin.on_pre_file_download` before each
file it fetches.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

import aiohttp

from release_auth.config.credentials import load_credentials
from release_auth.config.manifest import load_repository_rules
from release_auth.config.settings import SettingsManager
from release_auth.config.token import KeyringTokenStore
from release_auth.constants import HOST_GITHUB_OAUTH, HOST_HTTP_BASIC
from release_auth.core.protocols import HostTransport
from release_auth.core.repository import AuthenticatedRepository
from release_auth.core.transfer import TransferEngine
from release_auth.domain.rules import RepositoryAllowList, RepositoryRule
from release_auth.domain.transfer import TransportOptions
from release_auth.domain.types import Credentials, GlobalConfig
from release_auth.exceptions import ConfigurationError
from release_auth.logger import get_logger, update_logger_from_config

logger = get_logger(__name__)


@dataclass(slots=True)
class PreFileDownloadEvent:
    """Mutable event the host passes to the pre-file-download hook.

    Attributes:
        processed_url: URL the host is about to fetch
        transport_options: Options for this request, in the host's
            nested ``{"http": {...}}`` form
        context_options: Transport options of the package being
            downloaded; None when the download has no package context

    """

    processed_url: str
    transport_options: dict[str, Any] = field(default_factory=dict)
    context_options: dict[str, Any] | None = None


class AuthenticatedDownloadPlugin:
    """Wires the allow-list, credentials and engine into the host."""

    def __init__(self) -> None:
        self.allow_list = RepositoryAllowList()
        self.config_errors: list[ConfigurationError] = []
        self._engine: TransferEngine | None = None
        self._host_config: Mapping[str, Any] = {}
        self._token_store: KeyringTokenStore | None = None
        self._session: aiohttp.ClientSession | None = None
        self._transport: HostTransport | None = None
        self._settings: GlobalConfig | None = None

    @property
    def engine(self) -> TransferEngine:
        if self._engine is None:
            msg = "plugin is not activated"
            raise RuntimeError(msg)
        return self._engine

    def activate(
        self,
        extra: Mapping[str, Any] | None,
        host_config: Mapping[str, Any] | None,
        session: aiohttp.ClientSession,
        transport: HostTransport | None = None,
        settings: GlobalConfig | None = None,
        token_store: KeyringTokenStore | None = None,
    ) -> TransferEngine:
        """Build the engine from the host's configuration.

        Invalid allow-list entries are logged as warnings, kept in
        :attr:`config_errors` and skipped; activation itself never fails
        on them.

        Args:
            extra: Manifest ``extra`` section
            host_config: Host configuration holding the ``github-oauth``
                and ``http-basic`` tables
            session: aiohttp session shared by all requests
            transport: Host downloader; AiohttpTransport when omitted
            settings: Network and auth settings; read from the settings
                file when omitted
            token_store: Fallback token source

        Returns:
            The configured engine

        """
        self.allow_list, self.config_errors = load_repository_rules(extra)
        self._host_config = host_config or {}
        self._token_store = token_store
        self._session = session
        self._transport = transport
        self._settings = settings or SettingsManager().load_settings()
        update_logger_from_config(self._settings)

        credentials = self._load_credentials()
        if not (credentials.has_token or credentials.has_basic_auth):
            logger.warning(
                "No credentials configured for authenticated downloads"
            )
        self._engine = self._build_engine(self.allow_list, credentials)
        logger.info(
            "Authenticated downloads enabled for %d repositories",
            len(self.allow_list),
        )
        return self._engine

    def _load_credentials(self, host: str | None = None) -> Credentials:
        return load_credentials(
            self._host_config.get(HOST_GITHUB_OAUTH),
            self._host_config.get(HOST_HTTP_BASIC),
            host=host,
            token_store=self._token_store,
        )

    def _build_engine(
        self, allow_list: RepositoryAllowList, credentials: Credentials
    ) -> TransferEngine:
        return TransferEngine(
            allow_list,
            credentials,
            self._session,
            transport=self._transport,
            settings=self._settings,
        )

    async def on_pre_file_download(self, event: PreFileDownloadEvent) -> None:
        """Rewrite and authenticate ``event`` in place.

        URLs outside the allow-list are left untouched. For allow-listed
        URLs the processed URL may be rewritten to the asset API URL and
        the authenticated options are merged into the event's options.
        A package context's own options are replaced with the same
        authenticated options.
        """
        url = event.processed_url
        if not self.engine.needs_authentication(url):
            return

        base = (
            event.context_options
            if event.context_options is not None
            else event.transport_options
        )
        new_url, options = await self.engine.prepare(
            url, TransportOptions.from_mapping(base)
        )

        event.processed_url = new_url
        event.transport_options = options.to_mapping(event.transport_options)
        if event.context_options is not None:
            event.context_options = options.to_mapping(event.context_options)

    def repositories(self) -> list[AuthenticatedRepository]:
        """Return one repository per allow-list entry with a source URL.

        Each repository gets its own engine, limited to its rule and
        using the credentials configured for the host of its URL.
        """
        return [
            AuthenticatedRepository(rule, self._repository_engine(rule))
            for rule in self.allow_list
            if rule.source_url
        ]

    def _repository_engine(self, rule: RepositoryRule) -> TransferEngine:
        credentials = self._load_credentials(
            urlsplit(rule.source_url).hostname
        )
        if not (credentials.has_token or credentials.has_basic_auth):
            logger.error(
                "Authorization is empty for %s (%s)",
                rule.display_name,
                rule.source_url,
            )
        return self._build_engine(RepositoryAllowList([rule]), credentials)
