"""Plan execution and history recording.

Runs the executable part of an ActionPlan strictly in order (Cargo
installs share a lockfile and must not run concurrently) and records
successful actions to history.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from crateback.core.state import StateManager
from crateback.models.action import ActionType
from crateback.models.history import HistoryActionType, HistoryItem, create_history_entry
from crateback.utils.formatting import print_warning

if TYPE_CHECKING:
    from crateback.models.action import ActionPlan, ActionResult
    from crateback.operators.cargo import CargoOperator

logger = logging.getLogger(__name__)

# Mapping from action model types to history model types.
ACTION_TO_HISTORY: dict[ActionType, HistoryActionType] = {
    ActionType.INSTALL: HistoryActionType.INSTALL,
    ActionType.UPDATE: HistoryActionType.UPDATE,
    ActionType.REMOVE: HistoryActionType.REMOVE,
}


def execute_plan(
    plan: ActionPlan,
    operator: CargoOperator,
    on_result: Callable[[ActionResult], None] | None = None,
) -> list[ActionResult]:
    """Execute a plan's actions one after another.

    A failed action does not stop the run; later actions still execute.

    Args:
        plan: Plan from reconciliation.
        operator: Operator running the cargo invocations.
        on_result: Optional callback invoked after each action.

    Returns:
        One ActionResult per executable action, in plan order.
    """
    results: list[ActionResult] = []

    for action in plan.executable:
        result = operator.run(action)
        if result.failed:
            logger.warning("%s %s failed: %s", action.action_type.value, action.name, result.error)
        results.append(result)
        if on_result is not None:
            on_result(result)

    return results


def record_results_to_history(
    results: list[ActionResult],
    command: str = "crateback restore",
    state: StateManager | None = None,
) -> None:
    """Record successful actions to history.

    Groups results by action type and records one history entry per
    type. Errors while recording are logged but do not interrupt the
    calling command.

    Args:
        results: Results from execute_plan.
        command: Command string stored in the entry metadata.
        state: StateManager to write to. Defaults to the user state dir.
    """
    try:
        state = state or StateManager()

        for action_type, history_type in ACTION_TO_HISTORY.items():
            items: list[HistoryItem] = []
            for r in results:
                if not r.success or r.action.action_type != action_type:
                    continue
                record = r.action.record or r.action.current
                items.append(
                    HistoryItem(
                        name=r.action.name,
                        version=record.version if record else None,
                        source=record.source_kind if record else None,
                    )
                )

            if items:
                state.record_action(
                    create_history_entry(
                        action_type=history_type,
                        items=items,
                        metadata={"command": command},
                    )
                )
                logger.debug("Recorded %d %s action(s) to history", len(items), action_type.value)

    except (OSError, RuntimeError) as e:
        logger.warning("Failed to record actions to history: %s", str(e))
        print_warning(f"Could not record actions to history: {e}")
