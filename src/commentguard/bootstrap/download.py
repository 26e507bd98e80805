"""Lazy download of the comment-checker binary.

The checker is published as per-platform archives on GitHub releases.
The downloader fetches the archive for the current platform once, extracts
only the executable into ~/.commentguard/bin/comment-checker/{version}/ and
reports the final path. Nothing here is required for a working install:
when the download fails the checker is simply unavailable.
"""

from __future__ import annotations

import asyncio
import os
import shutil
import ssl
import tarfile
import tempfile
import zipfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Optional
from urllib.error import URLError
from urllib.request import urlopen

from commentguard.bootstrap.paths import CommentGuardPaths
from commentguard.bootstrap.platform import PlatformInfo, get_binary_name, get_platform_info
from commentguard.bootstrap.validation import ToolStatus, validate_binary
from commentguard.bootstrap.versions import get_tool_version
from commentguard.core.logging import get_logger

LOGGER = get_logger(__name__)

TOOL_NAME = "comment-checker"

# Default version from pyproject.toml [tool.commentguard.tools]
DEFAULT_VERSION = get_tool_version(TOOL_NAME)

DEFAULT_BASE_URL = (
    "https://github.com/code-yeongyu/go-claude-code-comment-checker/releases/download"
)

DEFAULT_DOWNLOAD_TIMEOUT = 60

# Release asset naming uses Go's GOOS/GOARCH values
_RELEASE_OS = {
    "darwin": "darwin",
    "linux": "linux",
    "win32": "windows",
}

_RELEASE_ARCH = {
    "x64": "amd64",
    "arm64": "arm64",
}


class DownloadError(Exception):
    """The checker binary could not be downloaded or extracted."""

    pass


def secure_urlopen(url: str, timeout: float = DEFAULT_DOWNLOAD_TIMEOUT):
    """Open an HTTPS URL with certificate verification.

    Args:
        url: URL to fetch. Must use the https scheme.
        timeout: Socket timeout in seconds.

    Returns:
        The response object from urlopen.

    Raises:
        DownloadError: If the URL is not HTTPS.
    """
    if not url.lower().startswith("https://"):
        raise DownloadError(f"Refusing to download over a non-HTTPS URL: {url}")
    context = ssl.create_default_context()
    return urlopen(url, timeout=timeout, context=context)  # nosec B310 - scheme checked above


class BinaryAcquirer(ABC):
    """Fetches the checker binary when no local copy exists."""

    @abstractmethod
    async def acquire(self) -> Optional[Path]:
        """Acquire the binary.

        Returns:
            Path to the binary, or None on failure. Must not raise.
        """

    def get_cached_binary_path(self) -> Optional[Path]:
        """Previously acquired binary, without acquiring. None by default."""
        return None


class CheckerDownloader(BinaryAcquirer):
    """Downloads the comment-checker binary into the commentguard cache.

    Binary management:
    - Downloads from GitHub releases
    - Caches at ~/.commentguard/bin/comment-checker/{version}/comment-checker
    """

    def __init__(
        self,
        version: str = DEFAULT_VERSION,
        paths: Optional[CommentGuardPaths] = None,
        platform_info: Optional[PlatformInfo] = None,
        base_url: str = DEFAULT_BASE_URL,
        enabled: bool = True,
        timeout: float = DEFAULT_DOWNLOAD_TIMEOUT,
    ) -> None:
        self._version = version
        self._paths = paths or CommentGuardPaths.default()
        self._platform = platform_info or get_platform_info()
        self._base_url = base_url.rstrip("/")
        self._enabled = enabled
        self._timeout = timeout

    @property
    def version(self) -> str:
        return self._version

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def binary_dir(self) -> Path:
        return self._paths.tool_bin_dir(TOOL_NAME, self._version)

    @property
    def binary_path(self) -> Path:
        """Where the cached binary lives (whether or not it exists yet)."""
        return self.binary_dir / get_binary_name(TOOL_NAME, self._platform)

    def get_cached_binary_path(self) -> Optional[Path]:
        """Return the cached binary if it was already downloaded.

        Never downloads and never raises.
        """
        path = self.binary_path
        if validate_binary(path) == ToolStatus.PRESENT:
            return path
        return None

    def asset_name(self) -> str:
        """Release asset file name for the current platform.

        Raises:
            DownloadError: If no build is published for this platform.
        """
        os_name = _RELEASE_OS.get(self._platform.os)
        arch_name = _RELEASE_ARCH.get(self._platform.arch)
        if not os_name or not arch_name or not self._platform.is_supported:
            raise DownloadError(f"Unsupported platform: {self._platform.key}")

        ext = "zip" if self._platform.is_windows else "tar.gz"
        return f"{TOOL_NAME}_v{self._version}_{os_name}_{arch_name}.{ext}"

    def download_url(self) -> str:
        return f"{self._base_url}/v{self._version}/{self.asset_name()}"

    def download(self) -> Path:
        """Download and install the binary, blocking.

        Returns:
            Path to the installed binary.

        Raises:
            DownloadError: On unsupported platform, network or archive errors.
        """
        cached = self.get_cached_binary_path()
        if cached is not None:
            LOGGER.debug(f"comment-checker already cached at {cached}")
            return cached

        url = self.download_url()
        LOGGER.info(f"Downloading comment-checker v{self._version}...")
        LOGGER.debug(f"Downloading from {url}")

        dest_dir = self.binary_dir
        dest_dir.mkdir(parents=True, exist_ok=True)

        suffix = ".zip" if url.endswith(".zip") else ".tar.gz"
        with tempfile.NamedTemporaryFile(suffix=suffix, delete=False) as tmp_file:
            tmp_path = Path(tmp_file.name)
            try:
                try:
                    with secure_urlopen(url, timeout=self._timeout) as response:
                        shutil.copyfileobj(response, tmp_file)
                except (URLError, OSError) as e:
                    raise DownloadError(f"Failed to download {url}: {e}") from e
                tmp_file.close()
                binary_path = self._extract_binary(tmp_path, dest_dir)
            finally:
                tmp_path.unlink(missing_ok=True)

        LOGGER.info(f"comment-checker v{self._version} installed to {binary_path}")
        return binary_path

    async def acquire(self) -> Optional[Path]:
        """Download the binary without blocking the event loop.

        Returns:
            Path to the binary, or None if acquisition is disabled or failed.
        """
        if not self._enabled:
            LOGGER.debug("comment-checker download disabled by configuration")
            return None

        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, self.download)
        except DownloadError as e:
            LOGGER.warning(f"comment-checker download failed: {e}")
        except Exception as e:
            LOGGER.debug(f"comment-checker download error: {e!r}")
        return None

    def _extract_binary(self, archive: Path, dest_dir: Path) -> Path:
        """Extract only the checker executable from the archive.

        Members are matched by base name and copied by content, so archive
        paths never influence where files are written.
        """
        binary_name = get_binary_name(TOOL_NAME, self._platform)
        target = dest_dir / binary_name

        try:
            if zipfile.is_zipfile(archive):
                with zipfile.ZipFile(archive) as zf:
                    for info in zf.infolist():
                        if not info.is_dir() and Path(info.filename).name == binary_name:
                            with zf.open(info) as src:
                                self._install_stream(src, target)
                            return target
            else:
                with tarfile.open(archive, "r:*") as tar:
                    for member in tar.getmembers():
                        if member.isfile() and Path(member.name).name == binary_name:
                            src = tar.extractfile(member)
                            if src is None:
                                break
                            with src:
                                self._install_stream(src, target)
                            return target
        except (tarfile.TarError, zipfile.BadZipFile) as e:
            raise DownloadError(f"Corrupt archive {archive.name}: {e}") from e

        raise DownloadError(f"{binary_name} not found in downloaded archive")

    @staticmethod
    def _install_stream(src: IO[bytes], target: Path) -> None:
        # Write next to the target and rename, so other processes never
        # observe a partially written executable.
        tmp_target = target.with_name(f".{target.name}.{os.getpid()}.tmp")
        try:
            with open(tmp_target, "wb") as out:
                shutil.copyfileobj(src, out)
            tmp_target.chmod(0o755)
            os.replace(tmp_target, target)
        finally:
            tmp_target.unlink(missing_ok=True)
