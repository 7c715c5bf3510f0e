"""Terminal progress bar for committed write batches."""

from __future__ import annotations

from typing import Optional

from tqdm import tqdm


class TqdmProgress:
    """Writer progress callback backed by a tqdm bar.

    The bar is created on the first update, once the total is known.
    """

    def __init__(self, desc: str = "Rows written", unit: str = "row") -> None:
        self._desc = desc
        self._unit = unit
        self._bar: Optional[tqdm] = None
        self._done = 0

    def __call__(self, written: int, total: int) -> None:
        if self._bar is None:
            self._bar = tqdm(total=total, desc=self._desc, unit=self._unit)
        self._bar.update(written - self._done)
        self._done = written
        if written >= total:
            self.close()

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None
