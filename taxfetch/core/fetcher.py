"""Idempotent file transfers with a bounded worker pool."""

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from email.utils import parsedate_to_datetime
from pathlib import Path
from typing import Iterable, List, Optional

import requests
from tqdm import tqdm

from taxfetch.models.errors import DownloadError

logger = logging.getLogger(__name__)

DOWNLOADED = "downloaded"
SKIPPED = "skipped"
CHUNK_SIZE = 1 << 16

@dataclass
class FetchResult:
    """Outcome of a single transfer."""
    url: str
    path: Path
    status: str

@dataclass
class FetchSummary:
    """Outcome of a batch of transfers."""
    downloaded: List[FetchResult] = field(default_factory=list)
    skipped: List[FetchResult] = field(default_factory=list)
    failed: List[DownloadError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    def add(self, result: FetchResult) -> None:
        if result.status == SKIPPED:
            self.skipped.append(result)
        else:
            self.downloaded.append(result)

def to_https(url: str) -> str:
    """NCBI serves its FTP tree over HTTPS at the same paths."""
    if url.startswith("ftp://"):
        return "https://" + url[len("ftp://"):]
    return url

def _remote_mtime(response) -> Optional[float]:
    value = response.headers.get("Last-Modified")
    if not value:
        return None
    try:
        return parsedate_to_datetime(value).timestamp()
    except (TypeError, ValueError):
        return None

def _is_up_to_date(dest: Path, head) -> bool:
    """Compare a local file against the remote timestamp and size, like wget -N."""
    remote_mtime = _remote_mtime(head)
    if remote_mtime is None:
        return False
    stat = dest.stat()
    if stat.st_mtime < remote_mtime:
        return False
    length = head.headers.get("Content-Length")
    if length is not None and length.isdigit() and int(length) != stat.st_size:
        return False
    return True

def fetch_file(
    url: str,
    dest_dir: Path,
    session=None,
    timeout: float = 60,
    filename: Optional[str] = None
) -> FetchResult:
    """
    Download url into dest_dir unless an up-to-date copy is already there.

    The file is written to a temporary ``.part`` file first and renamed when
    complete, and its mtime is set from the server's Last-Modified header.

    Args:
        url: Source URL (ftp:// NCBI URLs are fetched over HTTPS)
        dest_dir: Directory to write into
        session: requests.Session-like object, a new Session if None
        timeout: Per-request timeout in seconds
        filename: Local file name, defaults to the last URL segment

    Returns:
        FetchResult for the transfer

    Raises:
        DownloadError: If the transfer fails
    """
    url = to_https(url)
    session = session or requests.Session()
    dest_dir = Path(dest_dir)
    dest = dest_dir / (filename or url.rstrip("/").split("/")[-1])

    if dest.exists():
        try:
            head = session.head(url, timeout=timeout, allow_redirects=True)
            head.raise_for_status()
        except requests.RequestException as e:
            logger.debug(f"HEAD {url} failed ({str(e)}), downloading again")
        else:
            if _is_up_to_date(dest, head):
                logger.debug(f"{dest.name} is up to date, skipping")
                return FetchResult(url, dest, SKIPPED)

    part = dest.with_name(dest.name + ".part")
    try:
        dest_dir.mkdir(parents=True, exist_ok=True)
        with session.get(url, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            with open(part, "wb") as out:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        out.write(chunk)
            remote_mtime = _remote_mtime(response)
        os.replace(part, dest)
        if remote_mtime is not None:
            os.utime(dest, (remote_mtime, remote_mtime))
    except (requests.RequestException, OSError) as e:
        if part.exists():
            part.unlink()
        raise DownloadError(f"Failed to download {url}: {str(e)}", url)

    logger.debug(f"Downloaded {dest.name}")
    return FetchResult(url, dest, DOWNLOADED)

class Fetcher:
    """Runs independent transfers on a bounded thread pool."""

    def __init__(self, workers: int = 4, timeout: float = 60, show_progress: bool = True, session=None):
        """Initialize a fetcher.

        Args:
            workers: Maximum number of concurrent transfers
            timeout: Per-request timeout in seconds
            show_progress: Whether to display a progress bar
            session: Shared requests.Session-like object; by default each
                worker thread creates its own Session
        """
        self.workers = max(1, workers)
        self.timeout = timeout
        self.show_progress = show_progress
        self._session = session
        self._local = threading.local()
        self._owned_sessions = []
        self._lock = threading.Lock()

    def __enter__(self) -> 'Fetcher':
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def session(self):
        if self._session is not None:
            return self._session
        if not hasattr(self._local, "session"):
            self._local.session = requests.Session()
            with self._lock:
                self._owned_sessions.append(self._local.session)
        return self._local.session

    def close(self) -> None:
        """Close every Session this fetcher created; a shared session is left open."""
        with self._lock:
            sessions, self._owned_sessions = self._owned_sessions, []
            self._local = threading.local()
        for session in sessions:
            session.close()

    def fetch(self, url: str, dest_dir: Path, filename: Optional[str] = None) -> FetchResult:
        """Download a single file."""
        return fetch_file(url, dest_dir, self.session(), self.timeout, filename)

    def fetch_all(self, urls: Iterable[str], dest_dir: Path) -> FetchSummary:
        """
        Download every url into dest_dir.

        A failed transfer is logged and recorded in the summary; it does not
        stop the remaining transfers.

        Args:
            urls: URLs to download
            dest_dir: Directory to write into

        Returns:
            FetchSummary of all transfers
        """
        urls = list(urls)
        summary = FetchSummary()
        if not urls:
            return summary

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            futures = {executor.submit(self.fetch, url, dest_dir): url for url in urls}
            with tqdm(total=len(futures), desc="Genomes", unit="file", disable=not self.show_progress) as progress:
                for future in as_completed(futures):
                    try:
                        summary.add(future.result())
                    except DownloadError as e:
                        logger.error(str(e))
                        summary.failed.append(e)
                    progress.update(1)

        logger.info(
            f"Downloaded {len(summary.downloaded)}, up to date {len(summary.skipped)}, "
            f"failed {len(summary.failed)}"
        )
        return summary
