"""
Data sources for recorded trajectories.

A source is anything with an async ``fetch()`` that returns the full,
ordered list of raw records once. Records are plain mappings carrying
``latitude``, ``longitude`` and ``timestamp``.
"""
import asyncio
import json
import logging
import os
from typing import Any, List

import aiohttp

from trajectory.errors import TrajectoryLoadError

logger = logging.getLogger(__name__)


class JsonFileSource:
    """Reads a recording from a local JSON file."""

    def __init__(self, path: str):
        self.path = path

    def __repr__(self) -> str:
        return f"JsonFileSource({self.path!r})"

    async def fetch(self) -> List[Any]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._read)

    def _read(self) -> List[Any]:
        logger.info(f"Reading trajectory file {self.path}")
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError as e:
            raise TrajectoryLoadError(f"Trajectory file not found: {self.path}") from e
        except json.JSONDecodeError as e:
            raise TrajectoryLoadError(f"Trajectory file is not valid JSON: {e}") from e
        except UnicodeDecodeError as e:
            raise TrajectoryLoadError(f"Trajectory file is not UTF-8 text: {e}") from e
        except OSError as e:
            raise TrajectoryLoadError(f"Could not read trajectory file: {e}") from e


class HttpJsonSource:
    """Fetches a recording with a single HTTP GET."""

    def __init__(self, url: str, timeout: float = 10.0):
        self.url = url
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"HttpJsonSource({self.url!r})"

    async def fetch(self) -> List[Any]:
        logger.info(f"Fetching trajectory from {self.url}")
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(self.url, headers={"Accept": "application/json"}) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        raise TrajectoryLoadError(
                            f"Trajectory request failed with HTTP {response.status}: {error_text[:200]}"
                        )
                    body = await response.text()
        except aiohttp.ClientError as e:
            raise TrajectoryLoadError(f"Could not reach {self.url}: {e}") from e
        except asyncio.TimeoutError as e:
            raise TrajectoryLoadError(f"Timed out fetching {self.url}") from e
        except UnicodeDecodeError as e:
            raise TrajectoryLoadError(f"Response from {self.url} could not be decoded: {e}") from e

        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise TrajectoryLoadError(f"Response from {self.url} is not valid JSON: {e}") from e


def source_for(location: str):
    """Pick an HTTP source for URLs and a file source for everything else."""
    if location.startswith(("http://", "https://")):
        return HttpJsonSource(location)
    return JsonFileSource(os.path.expanduser(location))
