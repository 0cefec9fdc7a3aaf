"""
FILE: questboard/core/economy.py
PURPOSE: Points ledger, shop purchases, inventory and upgrade flags
EXPORTS:
  - Economy (class)
DEPENDENCIES:
  - questboard.core.catalog (shop items)
  - questboard.core.events (TaskCompleted, TaskReopened, EventBus)
  - questboard.core.models (PurchaseRecord)
NOTES:
  - Balance never goes negative
  - Reopening a task refunds at most the current balance (clamped at 0,
    no debt is tracked)
  - Purchases are idempotent per item: owned items can't be bought again
  - Inventory is append-only; upgrades mirror inventory membership
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional

from . import timer
from .catalog import get_item
from .events import EventBus, TaskCompleted, TaskReopened
from .models import PurchaseRecord, new_id

logger = logging.getLogger(__name__)


class Economy:
    """The single running points balance and what it has been spent on."""

    def __init__(
        self,
        points: int = 0,
        inventory: Optional[Iterable[PurchaseRecord]] = None,
        upgrades: Optional[Dict[str, bool]] = None,
        clock: Callable[[], int] = timer.now_ms,
    ) -> None:
        self._points = max(0, int(points))
        self._inventory: List[PurchaseRecord] = list(inventory or [])
        self._upgrades: Dict[str, bool] = {k: True for k, v in (upgrades or {}).items() if v}
        # Upgrades are derived from inventory; heal a cache that lost entries
        for record in self._inventory:
            self._upgrades[record.item_id] = True
        self._clock = clock

    # -------------------- state --------------------

    @property
    def points(self) -> int:
        return self._points

    @property
    def inventory(self) -> List[PurchaseRecord]:
        return list(self._inventory)

    @property
    def upgrades(self) -> Dict[str, bool]:
        return dict(self._upgrades)

    def owns(self, item_id: str) -> bool:
        return self._upgrades.get(item_id, False)

    def can_afford(self, item_id: str) -> bool:
        """True if the item exists and the balance covers it (ownership not considered)."""
        item = get_item(item_id)
        return item is not None and self._points >= item.cost

    def can_purchase(self, item_id: str) -> bool:
        return self.can_afford(item_id) and not self.owns(item_id)

    # -------------------- ledger --------------------

    def credit(self, amount: int) -> int:
        self._points += max(0, amount)
        return self._points

    def debit(self, amount: int) -> int:
        """Take points off, flooring at zero. Returns the amount actually removed."""
        taken = min(self._points, max(0, amount))
        self._points -= taken
        return taken

    def on_task_completed(self, event: TaskCompleted) -> None:
        self.credit(event.reward)
        logger.info("Awarded %d points for task %s (balance %d)", event.reward, event.task_id, self._points)

    def on_task_reopened(self, event: TaskReopened) -> None:
        taken = self.debit(event.refund)
        if taken < event.refund:
            logger.warning(
                "Task %s reopened: refund %d clamped to %d (balance was too low)",
                event.task_id, event.refund, taken,
            )
        else:
            logger.info("Revoked %d points for task %s (balance %d)", taken, event.task_id, self._points)

    def subscribe(self, bus: EventBus) -> None:
        bus.subscribe(TaskCompleted, self.on_task_completed)
        bus.subscribe(TaskReopened, self.on_task_reopened)

    # -------------------- shop --------------------

    def purchase(self, item_id: str) -> Optional[PurchaseRecord]:
        """
        Buy a shop item.

        Returns:
            The new inventory record, or None when the item is unknown,
            already owned, or the balance is short. Rejections change nothing.
        """
        item = get_item(item_id)
        if item is None:
            logger.debug("Rejected purchase: unknown item %r", item_id)
            return None
        if self.owns(item_id):
            logger.debug("Rejected purchase: %s already owned", item_id)
            return None
        if self._points < item.cost:
            logger.debug("Rejected purchase of %s: %d < %d", item_id, self._points, item.cost)
            return None

        self._points -= item.cost
        record = PurchaseRecord(
            id=new_id(),
            item_id=item.id,
            name=item.name,
            emoji=item.emoji,
            purchased_at=self._clock(),
        )
        self._inventory.append(record)
        self._upgrades[item.id] = True
        logger.info("Purchased %s for %d points (balance %d)", item.id, item.cost, self._points)
        return record

    def reset(self) -> None:
        self._points = 0
        self._inventory.clear()
        self._upgrades.clear()
