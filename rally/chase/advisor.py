"""
Level advice from a local LLM.

Asks an Ollama-compatible endpoint for a one-sentence tip when a level
starts. The request runs in a daemon thread; the answer only replaces a
display string, and failures leave the previous string in place.
"""

from __future__ import annotations

import threading
from typing import Optional

import httpx
from loguru import logger
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ADVICE = "Collect every flag to reach the next level!"

_PROMPT = (
    "You are a veteran of the classic smoke-screen car chase arcade game. "
    "In one English sentence, encourage a player who is on level {level} and give them a tip. "
    "Mention why collecting the flags matters."
)


class AdvisorSettings(BaseSettings):
    """Advisor settings loaded from RALLY_ADVISOR_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RALLY_ADVISOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = True
    host: str = "http://localhost:11434"
    model: str = "gemma3:4b"
    timeout: float = 10.0
    temperature: float = 0.8


def fetch_advice(level: int, settings: AdvisorSettings, client: Optional[httpx.Client] = None) -> str:
    """Blocking request for one tip; raises on transport or format errors"""
    payload = {
        "model": settings.model,
        "prompt": _PROMPT.format(level=level),
        "stream": False,
        "options": {"temperature": settings.temperature},
    }
    own_client = client is None
    if own_client:
        client = httpx.Client(timeout=settings.timeout)
    try:
        resp = client.post(f"{settings.host}/api/generate", json=payload)
        resp.raise_for_status()
        data = resp.json()
    finally:
        if own_client:
            client.close()

    text = data.get("response") if isinstance(data, dict) else None
    if not isinstance(text, str):
        raise ValueError(f"Malformed advice response: {data!r}")
    return text.strip()


class LevelAdvisor:
    """Best-effort background advice with stale-result protection."""

    def __init__(self, settings: Optional[AdvisorSettings] = None, default: str = DEFAULT_ADVICE):
        self.settings = settings or AdvisorSettings()
        self._text = default
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def text(self) -> str:
        with self._lock:
            return self._text

    def cancel(self):
        """Drop any answers still in flight"""
        with self._lock:
            self._generation += 1

    def request(self, level: int) -> Optional[threading.Thread]:
        """Start a fetch for `level`; returns the worker thread, if any"""
        if not self.settings.enabled:
            return None
        with self._lock:
            generation = self._generation
        worker = threading.Thread(
            target=self._run, args=(level, generation), name=f"advisor-level-{level}", daemon=True
        )
        worker.start()
        return worker

    def _run(self, level: int, generation: int):
        try:
            text = fetch_advice(level, self.settings)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Advice fetch for level {level} failed: {e}")
            return
        if not text:
            return
        with self._lock:
            if generation != self._generation:
                logger.debug(f"Discarding stale advice for level {level}")
                return
            self._text = text
