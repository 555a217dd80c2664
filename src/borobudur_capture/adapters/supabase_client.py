"""Lazily created Supabase client shared by the store adapters."""

import asyncio
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar

import httpx
from supabase import Client, PostgrestAPIError, StorageException, create_client

from borobudur_capture.domain.errors import (
    NotConfiguredError,
    StoreTimeoutError,
    StoreUnavailableError,
)

T = TypeVar("T")


@dataclass
class SupabaseClientProvider:
    """Creates the Supabase client on first use and runs calls against it.

    The SDK is synchronous, so each call runs in a worker thread and is bounded
    by ``timeout_seconds``.
    """

    url: str | None
    service_key: str | None
    timeout_seconds: float = 5.0
    client: Client | None = None
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    def get(self) -> Client:
        """Return the shared client, creating it once."""
        if self.client is not None:
            return self.client
        with self._lock:
            if self.client is None:
                if not self.url:
                    raise NotConfiguredError(
                        "Supabase URL is not configured (set SUPABASE_URL)",
                        details={"setting": "supabase_url"},
                    )
                if not self.service_key:
                    raise NotConfiguredError(
                        "Supabase service key is not configured "
                        "(set SUPABASE_SERVICE_KEY)",
                        details={"setting": "supabase_service_key"},
                    )
                self.client = create_client(self.url, self.service_key)
        return self.client

    async def run(self, operation: Callable[[Client], T], description: str) -> T:
        """Run a blocking SDK operation off the event loop under the timeout."""
        try:
            async with asyncio.timeout(self.timeout_seconds):
                return await asyncio.to_thread(lambda: operation(self.get()))
        except TimeoutError as exc:
            raise StoreTimeoutError(
                f"{description} timed out after {self.timeout_seconds:g}s"
            ) from exc
        except (PostgrestAPIError, StorageException, httpx.HTTPError) as exc:
            raise StoreUnavailableError(f"{description} failed: {exc}") from exc

    def reset(self) -> None:
        """Drop the shared client; the next call creates a new one."""
        with self._lock:
            self.client = None
