"""Base generator class for all data generators."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Iterator

from faker import Faker


class BaseGenerator(ABC):
    """Base class for all data generators.

    Each generator owns its Faker instance and a private ``random.Random``;
    two generators built with the same seed produce the same sequence no
    matter what else runs in between.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    locale : str
        Faker locale (default ``pt_BR``, which provides CPF/CNPJ).
    """

    def __init__(
        self,
        seed: int | None = None,
        locale: str = "pt_BR",
    ) -> None:
        self.fake = Faker(locale)
        self.random = random.Random(seed)
        if seed is not None:
            self.fake.seed_instance(seed)

    @abstractmethod
    def generate(self, *args: Any, **kwargs: Any) -> Any:
        """Generate a single record."""

    def generate_batch(self, count: int, *args: Any, **kwargs: Any) -> Iterator[Any]:
        """Yield ``count`` records from :meth:`generate`."""
        for _ in range(count):
            yield self.generate(*args, **kwargs)

    def amount(self, low: int, high: int, step: int = 1) -> Decimal:
        """Whole-unit amount between ``low`` and ``high`` in multiples of ``step``."""
        return Decimal(self.random.randrange(low, high + 1, step))
