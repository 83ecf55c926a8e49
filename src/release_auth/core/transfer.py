"""Transfer engine for authenticated release asset downloads.

Entry points:

- :meth:`TransferEngine.prepare` is the pre-transfer hook. It classifies
  the URL, rewrites browser release links of allow-listed GitHub
  repositories to their asset API URL and returns authenticated
  transport options.
- :meth:`TransferEngine.retrieve_passthrough` hands the request to the
  host transport, retrying once against a resolved URL when a GitHub
  transfer fails.
- :meth:`TransferEngine.download` streams a binary to disk, resolving
  release links first and verifying the result.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import aiohttp

from release_auth.config.settings import SettingsManager
from release_auth.constants import (
    ACCEPT_OCTET_STREAM,
    GITHUB_API_BASE_URL,
    HTTP_BAD_REQUEST,
    HTTP_FORBIDDEN,
    HTTP_UNAUTHORIZED,
)
from release_auth.core.auth import AuthHeaderInjector
from release_auth.core.classifier import (
    URLClassifier,
    UrlClassification,
    is_github_host,
)
from release_auth.core.file_ops import (
    commit_download,
    partial_path,
    remove_partial,
    stream_to_file,
    verify_download,
)
from release_auth.core.github.resolver import AssetResolver
from release_auth.core.headers import AUTHORIZATION, without_header
from release_auth.core.http_session import transfer_timeout
from release_auth.core.protocols import HostTransport
from release_auth.core.redirects import (
    credentials_allowed,
    open_following_redirects,
)
from release_auth.core.transport import AiohttpTransport
from release_auth.domain.rules import RepositoryAllowList, RepositoryRule
from release_auth.domain.transfer import (
    TransferRequest,
    TransferResult,
    TransportOptions,
)
from release_auth.domain.types import Credentials, GlobalConfig
from release_auth.exceptions import (
    AuthenticationError,
    NotFoundError,
    ReleaseAuthError,
    TransferError,
)
from release_auth.logger import get_logger

logger = get_logger(__name__)


class TransferEngine:
    """Coordinates classification, authentication, resolution and transfer.

    The allow-list and credentials are read-only after construction, so
    concurrent downloads share them without locking.
    """

    def __init__(
        self,
        allow_list: RepositoryAllowList,
        credentials: Credentials,
        session: aiohttp.ClientSession,
        transport: HostTransport | None = None,
        settings: GlobalConfig | None = None,
        api_base_url: str = GITHUB_API_BASE_URL,
    ) -> None:
        """Initialize the engine.

        Args:
            allow_list: Repositories permitted to receive credentials
            credentials: Token and/or basic-auth credentials
            session: aiohttp session for API and binary requests
            transport: Host downloader (defaults to AiohttpTransport)
            settings: Network and auth settings (read from the settings
                file when omitted)
            api_base_url: GitHub REST API root

        """
        settings = settings or SettingsManager().load_settings()
        network = settings["network"]

        self.allow_list = allow_list
        self.credentials = credentials
        self.session = session
        self.timeout_seconds = network["timeout_seconds"]
        self.transfer_timeout_minutes = network["transfer_timeout_minutes"]
        self.forward_auth = settings["auth"]["forward_auth_on_redirect"]

        self.classifier = URLClassifier(allow_list)
        self.injector = AuthHeaderInjector(credentials)
        self.resolver = AssetResolver(
            session,
            credentials,
            api_base_url=api_base_url,
            timeout_seconds=self.timeout_seconds,
        )
        self.transport = transport or AiohttpTransport(
            session,
            timeout_seconds=self.timeout_seconds,
            forward_auth=self.forward_auth,
        )

    def classify(self, url: str) -> UrlClassification:
        return self.classifier.classify(url)

    def needs_authentication(self, url: str) -> bool:
        """Return True if ``url`` belongs to an allow-listed repository."""
        return self.classify(url).is_matched

    def is_link_supported(self, url: str) -> bool:
        """Return True for browser release links of allow-listed repos."""
        classification = self.classify(url)
        return classification.is_matched and classification.is_release_download

    def authenticate_source(
        self,
        url: str,
        rule: RepositoryRule,
        options: TransportOptions | None = None,
    ) -> TransportOptions:
        """Options for a request to ``rule``'s own repository URL.

        The URL is trusted through configuration rather than matched by
        its path, so credentials are attached as for an allow-listed URL.
        """
        classification = UrlClassification(
            is_github_host=is_github_host(url), rule=rule
        )
        return self.injector.inject(
            url, classification, options or TransportOptions()
        )

    async def prepare(
        self, url: str, options: TransportOptions | None = None
    ) -> tuple[str, TransportOptions]:
        """Pre-transfer hook: return the URL and options to use.

        Args:
            url: URL the host is about to fetch
            options: Host transport options

        Returns:
            Tuple of (possibly rewritten URL, transport options). Options
            come back unchanged for URLs that are not allow-listed. A
            browser link whose release lookup fails is kept as is.

        Raises:
            AuthenticationError: If the API rejects the token

        """
        options = options or TransportOptions()
        classification = self.classify(url)
        if not classification.is_matched:
            return url, options

        if (
            classification.is_github_host
            and classification.is_release_download
        ):
            try:
                asset_url = await self.resolver.resolve_asset_api_url(
                    url, classification.rule
                )
            except TransferError as e:
                logger.warning(
                    "Could not resolve %s, keeping the link: %s", url, e
                )
                asset_url = None
            if asset_url is not None:
                logger.debug("Rewrote %s to %s", url, asset_url)
                return asset_url, self.injector.inject(
                    asset_url,
                    self.classify(asset_url),
                    options,
                    accept=ACCEPT_OCTET_STREAM,
                )

        accept = (
            ACCEPT_OCTET_STREAM if classification.is_release_asset else None
        )
        return url, self.injector.inject(url, classification, options, accept)

    async def retrieve_passthrough(
        self, url: str, options: TransportOptions | None = None
    ) -> TransferResult:
        """Fetch ``url`` through the host transport with authentication.

        A :class:`TransferError` for an allow-listed GitHub URL triggers
        one retry against the URL resolved by :class:`AssetResolver`. A
        second failure propagates unchanged.

        Raises:
            TransferError: If the transfer fails and cannot be recovered

        """
        options = options or TransportOptions()
        classification = self.classify(url)
        authenticated = self.injector.inject(url, classification, options)

        try:
            return await self.transport.get(url, authenticated)
        except TransferError as e:
            if not (
                classification.is_matched and classification.is_github_host
            ):
                raise
            resolved = await self._resolve_fallback(url, classification)
            if resolved is None:
                raise
            logger.info(
                "Transfer of %s failed (%s); retrying via %s",
                url,
                e.message,
                resolved,
            )

        return await self.transport.get(
            resolved, self._options_for(url, resolved, classification, options)
        )

    async def _resolve_fallback(
        self, url: str, classification: UrlClassification
    ) -> str | None:
        rule = classification.rule
        try:
            if classification.is_release_download:
                return await self.resolver.resolve_browser_release_url(
                    url, rule
                )
            if classification.is_release_asset:
                return await self.resolver.resolve_download_location(
                    url, rule
                )
        except (NotFoundError, TransferError) as e:
            logger.debug("Fallback resolution failed for %s: %s", url, e)
        return None

    def _options_for(
        self,
        origin_url: str,
        target_url: str,
        classification: UrlClassification,
        base_options: TransportOptions,
    ) -> TransportOptions:
        """Options for a request to a location resolved from ``origin_url``.

        Credentials follow the same rule as redirects: only to the same
        host or to another GitHub host.
        """
        if credentials_allowed(origin_url, target_url, self.forward_auth):
            return self.injector.inject(
                target_url,
                classification,
                base_options,
                accept=ACCEPT_OCTET_STREAM,
            )
        headers = without_header(base_options.headers, AUTHORIZATION)
        headers = (
            *without_header(headers, "Accept"),
            f"Accept: {ACCEPT_OCTET_STREAM}",
        )
        return base_options.with_headers(headers)

    async def download(
        self,
        url: str,
        destination: Path | str,
        options: TransportOptions | None = None,
    ) -> TransferResult:
        """Download ``url`` to ``destination``.

        Browser release links and asset API URLs of allow-listed GitHub
        repositories are resolved to the binary's location and fetched
        directly. Everything else goes through the host transport. The body
        is written to a ``.part`` sibling that replaces ``destination``
        only once verified; on failure the sibling is removed and an
        existing ``destination`` is left untouched.

        Args:
            url: Download URL
            destination: Target file; parent directories are created
            options: Host transport options

        Returns:
            Transfer result with the written size

        Raises:
            AuthenticationError: If GitHub rejects the credentials
            RedirectLimitError: If a redirect chain has more than 5 hops
            TransferError: On network failure or error status
            IntegrityError: If the destination is missing or empty

        """
        dest = Path(destination)
        part = partial_path(dest)
        options = options or TransportOptions()
        classification = self.classify(url)

        try:
            result = await self._download(url, part, classification, options)
            size = verify_download(part)
            commit_download(part, dest)
        except BaseException:
            remove_partial(part)
            raise

        result.body = dest
        result.bytes_written = size
        logger.info("Downloaded %s (%s bytes)", dest.name, f"{size:,}")
        return result

    async def _download(
        self,
        url: str,
        dest: Path,
        classification: UrlClassification,
        options: TransportOptions,
    ) -> TransferResult:
        if not (classification.is_matched and classification.is_github_host):
            return await self.transport.copy(
                url, dest, self.injector.inject(url, classification, options)
            )

        rule = classification.rule
        if classification.is_release_download:
            location = await self.resolver.resolve_browser_release_url(
                url, rule
            )
            if location is None:
                logger.info(
                    "Could not resolve %s; using host transport", url
                )
                return await self.transport.copy(
                    url,
                    dest,
                    self.injector.inject(url, classification, options),
                )
        elif classification.is_release_asset:
            location = await self.resolver.resolve_download_location(url, rule)
        else:
            location = url

        request = TransferRequest(
            url=location,
            destination=dest,
            headers=self._options_for(
                url, location, classification, options
            ).headers,
        )
        return await self._transfer(request, rule)

    async def _transfer(
        self, request: TransferRequest, rule: RepositoryRule | None
    ) -> TransferResult:
        """Issue a direct GET and stream the body to the destination."""
        if request.destination is None:
            msg = "direct transfers require a destination"
            raise ValueError(msg)

        timeout = transfer_timeout(
            self.transfer_timeout_minutes, self.timeout_seconds
        )
        try:
            async with open_following_redirects(
                self.session,
                "GET",
                request.url,
                request.headers,
                timeout=timeout,
                max_redirects=request.max_redirects,
                forward_auth=self.forward_auth,
                follow=request.follow_redirects,
            ) as response:
                final_url = str(response.url)
                status = response.status
                if status in (HTTP_UNAUTHORIZED, HTTP_FORBIDDEN) and (
                    is_github_host(final_url)
                ):
                    raise AuthenticationError(final_url, status, rule)
                if status >= HTTP_BAD_REQUEST:
                    msg = f"HTTP {status}"
                    raise TransferError(msg, url=request.url, status=status)

                written = await stream_to_file(response, request.destination)
        except ReleaseAuthError:
            raise
        except (aiohttp.ClientError, TimeoutError) as e:
            msg = str(e) or type(e).__name__
            raise TransferError(msg, url=request.url) from e

        return TransferResult(
            final_url=final_url,
            status_code=status,
            body=request.destination,
            bytes_written=written,
        )

    def schedule_download(
        self,
        url: str,
        destination: Path | str,
        options: TransportOptions | None = None,
    ) -> asyncio.Task[TransferResult]:
        """Start :meth:`download` as a task and return its handle.

        Must be called from a running event loop.
        """
        return asyncio.create_task(
            self.download(url, destination, options),
            name=f"download:{Path(destination).name}",
        )
