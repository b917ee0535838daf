# Purpose: Load the named JSON collections the viewer needs, in parallel, exactly once.
# Each collection fails independently: a failed source leaves a None slot in the store
# and is logged, while the others are still loaded. Only a failure of the load as a
# whole (no usable data source, executor error) is raised, as BootstrapError.

import json
import logging
import os
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

import requests

from core.config import DEFAULT_FETCH_TIMEOUT
from core.errors import BootstrapError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollectionSource:
    """One independently loadable collection: ``<name>.json`` stored under ``key``."""

    name: str
    key: str

    @property
    def filename(self) -> str:
        return f"{self.name}.json"


def sources_from_config(entries: Sequence[Dict[str, str]]) -> List[CollectionSource]:
    """Build CollectionSource objects from settings entries ({name, key})."""
    sources = []
    for entry in entries:
        name = entry.get("name")
        if not name:
            logger.warning(f"Ignoring collection entry without a name: {entry}")
            continue
        key = entry.get("key") or name.replace("-", "_")
        sources.append(CollectionSource(name=name, key=key))
    return sources


class AppData(Mapping):
    """Read-only store of loaded collections: key -> payload, or None on failure."""

    def __init__(self, payloads: Dict[str, Any]):
        self._payloads = MappingProxyType(dict(payloads))

    def __getitem__(self, key: str) -> Any:
        return self._payloads[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._payloads)

    def __len__(self) -> int:
        return len(self._payloads)

    @property
    def failed(self) -> List[str]:
        """Keys whose collection could not be loaded."""
        return [key for key, value in self._payloads.items() if value is None]

    def __repr__(self) -> str:
        return f"AppData(keys={list(self._payloads)}, failed={self.failed})"


def extract_records(payload: Any, field: str) -> List[Any]:
    """Return the record list of a collection payload.

    A collection is either a bare list of records or an object holding the
    list under ``field``. Anything else (including None) yields [].
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        records = payload.get(field)
        if isinstance(records, list):
            return records
    return []


def is_remote(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def read_json_file(folder: str, filename: str) -> Any:
    filepath = os.path.join(folder, filename)
    with open(filepath, "r", encoding="utf-8") as f:
        return json.load(f)


def fetch_json_url(base_url: str, filename: str, timeout: float = DEFAULT_FETCH_TIMEOUT) -> Any:
    url = f"{base_url.rstrip('/')}/{filename}"
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.json()


class CollectionLoader:
    """Fetches every configured collection concurrently and builds the AppData store."""

    def __init__(
        self,
        sources: Sequence[CollectionSource],
        location: str,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        max_workers: Optional[int] = None,
        fetcher: Optional[Callable[[CollectionSource], Any]] = None,
    ):
        self.sources = list(sources)
        self.location = location
        self.timeout = timeout
        self.max_workers = max_workers or max(len(self.sources), 1)
        self._fetcher = fetcher or self._default_fetch
        self._uses_default_fetch = fetcher is None
        self.data: Optional[AppData] = None

    def _default_fetch(self, source: CollectionSource) -> Any:
        if is_remote(self.location):
            return fetch_json_url(self.location, source.filename, timeout=self.timeout)
        return read_json_file(self.location, source.filename)

    def _check_location(self) -> None:
        if not self.location:
            raise BootstrapError("No data source configured")
        if not is_remote(self.location) and not os.path.isdir(self.location):
            raise BootstrapError(f"Data folder does not exist or is not a directory: {self.location}")

    def load_all(self) -> AppData:
        """Load every source in parallel and return the populated store.

        Never raises because of a single source; raises BootstrapError when
        the load cannot run at all, and RuntimeError if called twice.
        """
        if self.data is not None:
            raise RuntimeError("Collections are already loaded; reloading is not supported")

        if self._uses_default_fetch:
            self._check_location()

        payloads: Dict[str, Any] = {source.key: None for source in self.sources}
        logger.info(f"Loading {len(self.sources)} collections from {self.location}")

        try:
            with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="collection") as executor:
                futures = {executor.submit(self._fetcher, source): source for source in self.sources}
                for future in as_completed(futures):
                    source = futures[future]
                    try:
                        payloads[source.key] = future.result()
                        logger.debug(f"Loaded {source.filename} into '{source.key}'")
                    except Exception as e:
                        # Per-source failures are recorded, never propagated
                        logger.error(f"Error loading {source.filename}: {e}", exc_info=True)
                        payloads[source.key] = None
        except RuntimeError as e:
            raise BootstrapError(f"Could not run the collection loader: {e}") from e

        self.data = AppData(payloads)
        if self.data.failed:
            logger.warning(f"Collections unavailable after load: {self.data.failed}")
        else:
            logger.info("All collections loaded")
        return self.data
