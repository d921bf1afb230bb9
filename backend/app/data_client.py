from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import Dict, List, Optional

import aiohttp
import requests

from app.csv_parser import Record, parse_csv
from app.dataset import PHASES, TournamentDataset, file_names_for_phase
from app.settings import Settings, TournamentConfigError

logger = logging.getLogger(__name__)

RawPhase = Dict[str, List[Record]]


class TournamentDataError(RuntimeError):
    pass


class BaseTournamentDataClient:
    """Sequential loader shared by the HTTP and local-directory sources.

    A file that cannot be fetched is logged and left out of the dataset; there
    is no retry and no reconstruction of partial matches.
    """

    def fetch_csv(self, phase: str, file_name: str) -> str:
        raise NotImplementedError

    def load_phase(self, phase: str) -> RawPhase:
        loaded: RawPhase = {}
        for file_name in file_names_for_phase(phase):
            try:
                text = self.fetch_csv(phase, file_name)
            except TournamentDataError as exc:
                logger.warning(f"[LOADER] Could not load file: {phase}/{file_name} ({exc})")
                continue
            loaded[file_name] = parse_csv(text)
        return loaded

    def load_dataset(self) -> TournamentDataset:
        t0 = time.perf_counter()
        raw: Dict[str, RawPhase] = {}
        for phase in PHASES:
            raw[phase] = self.load_phase(phase)
        dataset = TournamentDataset.from_raw(raw)
        logger.info(
            f"[LOADER TIMING] load_dataset: {time.perf_counter() - t0:.2f}s "
            f"({dataset.match_count} matches)"
        )
        return dataset


class TournamentDataClient(BaseTournamentDataClient):
    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
    ) -> None:
        if not base_url:
            raise TournamentConfigError("TOURNAMENT_DATA_URL is required for HTTP loading.")
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def url_for(self, phase: str, file_name: str) -> str:
        return f"{self.base_url}/{phase}/{file_name}"

    def fetch_csv(self, phase: str, file_name: str) -> str:
        url = self.url_for(phase, file_name)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TournamentDataError(f"Failed to fetch CSV: {url} ({exc})") from exc
        if response.status_code >= 400:
            detail = _extract_error_detail(response.text)
            raise TournamentDataError(
                f"Failed to fetch CSV: {url} ({response.status_code} - {detail})"
            )
        if not response.encoding or response.encoding.lower() == "iso-8859-1":
            # Headers carry accented characters; servers often omit the charset.
            response.encoding = "utf-8"
        return response.text


class LocalTournamentDataClient(BaseTournamentDataClient):
    """Reads ``<data_dir>/<phase>/<file>`` from disk."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)

    def fetch_csv(self, phase: str, file_name: str) -> str:
        path = self.data_dir / phase / file_name
        try:
            return path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as exc:
            raise TournamentDataError(f"Failed to read CSV: {path} ({exc})") from exc


class AsyncTournamentDataClient:
    """Async HTTP loader. Files are awaited one at a time, in bracket order."""

    def __init__(
        self,
        base_url: str,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = 30,
    ) -> None:
        if not base_url:
            raise TournamentConfigError("TOURNAMENT_DATA_URL is required for HTTP loading.")
        self.base_url = base_url.rstrip("/")
        self.session = session
        self._own_session = session is None
        self.timeout = timeout

    def url_for(self, phase: str, file_name: str) -> str:
        return f"{self.base_url}/{phase}/{file_name}"

    async def fetch_csv(self, phase: str, file_name: str) -> str:
        if self.session is None:
            self.session = aiohttp.ClientSession()
        url = self.url_for(phase, file_name)
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with self.session.get(url, timeout=timeout) as response:
                # Spreadsheet exports are not always UTF-8; bad bytes become U+FFFD.
                text = await response.text(encoding="utf-8", errors="replace")
                if response.status >= 400:
                    detail = _extract_error_detail(text)
                    raise TournamentDataError(
                        f"Failed to fetch CSV: {url} ({response.status} - {detail})"
                    )
                return text
        except asyncio.TimeoutError as exc:
            raise TournamentDataError(
                f"Failed to fetch CSV: {url} (timeout after {self.timeout}s)"
            ) from exc
        except aiohttp.ClientError as exc:
            raise TournamentDataError(f"Failed to fetch CSV: {url} ({exc})") from exc

    async def load_phase(self, phase: str) -> RawPhase:
        loaded: RawPhase = {}
        for file_name in file_names_for_phase(phase):
            try:
                text = await self.fetch_csv(phase, file_name)
            except TournamentDataError as exc:
                logger.warning(f"[LOADER] Could not load file: {phase}/{file_name} ({exc})")
                continue
            loaded[file_name] = parse_csv(text)
        return loaded

    async def load_dataset(self) -> TournamentDataset:
        t0 = time.perf_counter()
        raw: Dict[str, RawPhase] = {}
        try:
            for phase in PHASES:
                raw[phase] = await self.load_phase(phase)
        finally:
            await self.close()
        dataset = TournamentDataset.from_raw(raw)
        logger.info(
            f"[LOADER TIMING] async load_dataset: {time.perf_counter() - t0:.2f}s "
            f"({dataset.match_count} matches)"
        )
        return dataset

    async def close(self) -> None:
        if self._own_session and self.session:
            await self.session.close()
            self.session = None


def build_data_client(settings: Settings) -> BaseTournamentDataClient:
    if settings.data_dir is not None:
        if not settings.data_dir.is_dir():
            raise TournamentConfigError(
                f"TOURNAMENT_DATA_DIR does not exist: {settings.data_dir}"
            )
        return LocalTournamentDataClient(settings.data_dir)
    return TournamentDataClient(settings.data_url, timeout=settings.request_timeout)


def _extract_error_detail(text: Optional[str]) -> str:
    detail = (text or "").strip()
    if not detail:
        return "No response body"
    return detail[:200]
