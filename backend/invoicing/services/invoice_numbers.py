"""Invoice number allocation.

Numbers look like ``INV-20261019T101530123456-000042-9F3A1C``: a UTC timestamp
with microseconds, a per-process sequence and a random suffix. The store's
unique index on ``invoices.invoice_number`` stays the authoritative guard; the
existence check here only keeps collisions rare.

The sequence only separates numbers drawn from the same generator, so the
service takes its generator from ``get_invoice_number_generator``, which hands
out one instance per prefix for the whole process.
"""

import itertools
import logging
import secrets
import threading
from datetime import datetime
from typing import Callable, Optional

from backend.invoicing.core.errors import NumberGenerationExhausted
from backend.invoicing.core.time import utc_now

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5


class InvoiceNumberGenerator:
    def __init__(
        self,
        prefix: str = "INV",
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        clock: Callable[[], datetime] = utc_now,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.prefix = prefix
        self.max_attempts = max_attempts
        self._clock = clock
        self._sequence = itertools.count(1)
        self._lock = threading.Lock()

    def candidate(self) -> str:
        """Build one candidate number without checking the store."""
        with self._lock:
            sequence = next(self._sequence) % 1_000_000
        stamp = self._clock().strftime("%Y%m%dT%H%M%S%f")
        suffix = secrets.token_hex(3).upper()
        return f"{self.prefix}-{stamp}-{sequence:06d}-{suffix}"

    def generate(self, exists: Optional[Callable[[str], bool]] = None) -> str:
        """Return a number that ``exists`` reports as unused.

        Raises NumberGenerationExhausted after ``max_attempts`` collisions.
        """
        for attempt in range(1, self.max_attempts + 1):
            number = self.candidate()
            if exists is None or not exists(number):
                return number
            logger.warning("Invoice number collision on %s (attempt %d/%d)", number, attempt, self.max_attempts)
        raise NumberGenerationExhausted(self.max_attempts)


_generators: dict[str, InvoiceNumberGenerator] = {}
_generators_lock = threading.Lock()


def get_invoice_number_generator(prefix: str = "INV") -> InvoiceNumberGenerator:
    with _generators_lock:
        generator = _generators.get(prefix)
        if generator is None:
            generator = _generators[prefix] = InvoiceNumberGenerator(prefix=prefix)
        return generator
