"""Apply validated inventory tasks to the record store."""

import logging
from collections.abc import Sequence

from src.agents.retry_handler import RetryPolicy
from src.core.config import constants
from src.core.db_client import DatabaseError, RecordNotFoundError
from src.core.errors import ErrorCode
from src.core.logging import log_with_user_context, span
from src.core.record_store import RecordStore, StoredRecord
from src.domain.pantry import is_valid_amount, normalize_amount, normalize_item_name
from src.domain.task import Task, TaskAction, TaskOutcome, TaskRejection


logger = logging.getLogger(__name__)

StoreFailure = (DatabaseError, RecordNotFoundError)


class TaskExecutor:
    """Performs one logical store mutation per task.

    Every failure is converted into a failed TaskOutcome; nothing raises past
    ``execute``. Only the update lookup is retried, under ``retry_policy``.
    """

    def __init__(
        self,
        store: RecordStore,
        retry_policy: RetryPolicy | None = None,
        *,
        collection: str = constants.PANTRY_COLLECTION,
    ) -> None:
        self.store = store
        self.retry_policy = retry_policy or RetryPolicy()
        self.collection = collection

    async def _find_items(self, name: str, owner_id: str) -> list[StoredRecord]:
        return await self.store.query(
            self.collection,
            [("name", "=", name), ("owner_id", "=", owner_id)],
        )

    async def add(self, task: Task, owner_id: str) -> TaskOutcome:
        name = normalize_item_name(task.item_name)
        count = task.item_count if task.item_count is not None else 1
        if not is_valid_amount(count):
            return TaskOutcome.failed(f"Invalid quantity for {task.item_name}.", ErrorCode.ERR_TASK_INVALID)
        amount = normalize_amount(count)
        try:
            await self.store.insert(self.collection, {"name": name, "amount": amount, "owner_id": owner_id})
        except StoreFailure as e:
            logger.error("task_add_failed", extra={"item_name": name, "owner_id": owner_id, "error": str(e)})
            return TaskOutcome.failed(f"Error adding {task.item_name}. Please try again.", ErrorCode.ERR_STORE_FAILURE)

        return TaskOutcome.ok(f"{amount} {name} have been added to your pantry.")

    async def delete(self, task: Task, owner_id: str) -> TaskOutcome:
        name = normalize_item_name(task.item_name)
        try:
            matches = await self._find_items(name, owner_id)
            if not matches:
                return TaskOutcome.failed(f"{name} not found in your pantry.", ErrorCode.ERR_ITEM_NOT_FOUND)

            # Names are not unique, so every matching record goes
            for record in matches:
                await self.store.delete(record.ref)
        except StoreFailure as e:
            logger.error("task_delete_failed", extra={"item_name": name, "owner_id": owner_id, "error": str(e)})
            return TaskOutcome.failed(
                f"Error deleting {task.item_name}. Please try again.", ErrorCode.ERR_STORE_FAILURE
            )

        return TaskOutcome.ok(f"{name} has been removed from your pantry.")

    async def update(self, task: Task, owner_id: str) -> TaskOutcome:
        name = normalize_item_name(task.item_name)
        count = task.item_count
        if not is_valid_amount(count):
            return TaskOutcome.failed(f"Invalid quantity for {task.item_name}.", ErrorCode.ERR_TASK_INVALID)
        amount = normalize_amount(count)

        if task.update_action is not None:
            # The hint is not applied: item_count is the new absolute amount
            logger.debug("update_action_ignored", extra={"item_name": name, "update_action": task.update_action})

        try:
            matches = await self.retry_policy.run(
                lambda: self._find_items(name, owner_id),
                should_retry=lambda records: not records,
                operation="update_lookup",
            )
            if not matches:
                return TaskOutcome.failed(f"{name} not found in your pantry.", ErrorCode.ERR_ITEM_NOT_FOUND)

            for record in matches:
                await self.store.update(record.ref, {"amount": amount})
        except StoreFailure as e:
            logger.error("task_update_failed", extra={"item_name": name, "owner_id": owner_id, "error": str(e)})
            return TaskOutcome.failed(
                f"Error updating {task.item_name}. Please try again.", ErrorCode.ERR_STORE_FAILURE
            )

        return TaskOutcome.ok(f"{name} quantity has been updated to {amount}.")

    async def execute(self, task: Task | TaskRejection, owner_id: str) -> TaskOutcome:
        """Execute a single task for ``owner_id`` and report its outcome."""
        if isinstance(task, TaskRejection):
            return TaskOutcome.failed(task.message, ErrorCode.ERR_TASK_INVALID)

        handlers = {
            TaskAction.ADD: self.add,
            TaskAction.DELETE: self.delete,
            TaskAction.UPDATE: self.update,
        }
        with span("task_executor.execute", action=str(task.action)):
            outcome = await handlers[task.action](task, owner_id)

        log_with_user_context(
            logger,
            "info" if outcome.success else "warning",
            "task_executed",
            user_id=owner_id,
            action=str(task.action),
            item_name=task.item_name,
            success=outcome.success,
        )
        return outcome

    async def execute_batch(self, tasks: Sequence[Task | TaskRejection], owner_id: str) -> list[TaskOutcome]:
        """Run tasks strictly in order, stopping at the first failure.

        The batch is not transactional: tasks committed before a failure stay
        committed, and tasks after it are never attempted.
        """
        outcomes: list[TaskOutcome] = []
        for index, task in enumerate(tasks):
            outcome = await self.execute(task, owner_id)
            outcomes.append(outcome)
            if not outcome.success:
                logger.warning(
                    "batch_aborted",
                    extra={"owner_id": owner_id, "failed_index": index, "skipped": len(tasks) - index - 1},
                )
                break
        return outcomes
