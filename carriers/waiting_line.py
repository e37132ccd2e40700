"""
Purpose: FIFO registry of idle carriers.
What it does:
Carriers enter when they report idle and leave when matched to a job.
"""

from __future__ import annotations

from typing import List
import logging

from .models import Carrier, CarrierContractError, carrier_label

logger = logging.getLogger(__name__)


class CarrierWaitingLine:

    def __init__(self):
        self._carriers: List[Carrier] = []

    def register(self, carrier: Carrier) -> None:
        if carrier in self:
            raise CarrierContractError(f"Carrier {carrier_label(carrier)} is already waiting")

        self._carriers.append(carrier)
        logger.debug("Carrier %s waiting (line length %d)", carrier_label(carrier), len(self._carriers))

    def remove(self, carrier: Carrier) -> None:
        for index, waiting in enumerate(self._carriers):
            if waiting is carrier:
                del self._carriers[index]
                return
        raise CarrierContractError(f"Carrier {carrier_label(carrier)} is not waiting")

    def followers(self, carrier: Carrier, count: int) -> List[Carrier]:
        """
        Up to `count` carriers queued directly behind `carrier`.
        """
        for index, waiting in enumerate(self._carriers):
            if waiting is carrier:
                return self._carriers[index + 1:index + 1 + count]
        return []

    def snapshot(self) -> List[Carrier]:
        return list(self._carriers)

    def __contains__(self, carrier: object) -> bool:
        return any(waiting is carrier for waiting in self._carriers)

    def __len__(self) -> int:
        return len(self._carriers)
