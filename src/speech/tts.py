"""Text-to-speech sinks for navigation announcements.

The navigation core only depends on ``SpeechSink``; ``Pyttsx3Speaker`` is the
on-device implementation. Speaking runs on a worker thread so the caller's
tick loop never blocks on audio.
"""

import logging
import queue
import threading
from abc import ABC, abstractmethod
from typing import List, Optional

import pyttsx3

logger = logging.getLogger(__name__)


PREFERRED_VOICES = ["Samantha", "Victoria", "Ava", "Moira", "Karen", "Tessa", "Kathy"]


class SpeechSink(ABC):
    """Anything that can say a sentence out loud."""

    @abstractmethod
    def speak(self, text: str) -> None:
        ...

    def close(self) -> None:
        """Release resources. Default: nothing to do."""


class Pyttsx3Speaker(SpeechSink):
    """Queue-backed pyttsx3 speaker.

    Args:
        rate: Words per minute.
        volume: 0.0 - 1.0.
        preferred_voices: Voice names to try, first match wins.
    """

    def __init__(
        self,
        rate: int = 150,
        volume: float = 1.0,
        preferred_voices: Optional[List[str]] = None,
    ) -> None:
        self.rate = rate
        self.volume = volume
        self.preferred_voices = preferred_voices or PREFERRED_VOICES
        self._queue: "queue.Queue[Optional[str]]" = queue.Queue()
        self._thread = threading.Thread(target=self._worker, daemon=True)
        self._thread.start()

    def _init_engine(self):
        engine = pyttsx3.init()
        engine.setProperty("rate", self.rate)
        engine.setProperty("volume", self.volume)

        for v in engine.getProperty("voices"):
            if any(p.lower() in (v.name or "").lower() for p in self.preferred_voices):
                engine.setProperty("voice", v.id)
                break
        return engine

    def _worker(self) -> None:
        engine = None
        while True:
            text = self._queue.get()
            try:
                if text is None:
                    break
                if engine is None:
                    engine = self._init_engine()
                engine.say(text)
                engine.runAndWait()
            except Exception as e:
                logger.error(f"TTS error: {e}")
            finally:
                self._queue.task_done()

    def speak(self, text: str) -> None:
        text = (text or "").strip()
        if text:
            self._queue.put(text)

    def close(self, timeout: float = 5.0) -> None:
        self._queue.join()       # wait for queued sentences
        self._queue.put(None)    # stop signal for the worker
        self._thread.join(timeout=timeout)
