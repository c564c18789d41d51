"""Meal reminder scheduling and delivery."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Protocol

from diet_tracker.domain.meals import DailyLog, Meal, MealStatus
from diet_tracker.domain.reminders import ReminderOutcome, ReminderPayload, reminder_key
from diet_tracker.services.logs import LogStore
from diet_tracker.services.meals import MealCatalogService
from diet_tracker.timeutil import ONE_DAY, Clock, format_meal_time, to_epoch_millis

logger = logging.getLogger(__name__)

DEFAULT_LEAD_TIME = timedelta(minutes=15)


class TriggerRegistry(Protocol):
    """Timed trigger backend keyed by integer ids."""

    def arm(self, key: int, when_epoch_millis: int, payload: ReminderPayload) -> None:
        """Arm a trigger, replacing any trigger with the same key."""

    def cancel(self, key: int) -> None:
        """Cancel a trigger; unknown keys are ignored."""


class NotificationPresenter(Protocol):
    """Shows a reminder to the user."""

    async def present(
        self, meal_id: int, meal_name: str, formatted_time: str, day: date
    ) -> None:
        """Present a reminder for a meal on a date."""


@dataclass
class ReminderScheduler:
    """Arms reminders ahead of meal times and suppresses resolved meals."""

    registry: TriggerRegistry
    log_store: LogStore
    presenter: NotificationPresenter
    clock: Clock
    lead_time: timedelta = DEFAULT_LEAD_TIME

    def schedule_all(self, meals: Iterable[Meal], today: date) -> int:
        """Cancel then re-arm reminders for today and tomorrow."""
        meals = list(meals)
        days = (today, today + ONE_DAY)
        for meal in meals:
            for day in days:
                self.registry.cancel(reminder_key(meal.id, day))
        now = self.clock.now()
        armed = sum(self._arm(meal, day, now) for meal in meals for day in days)
        logger.info(
            "Armed %d reminders for %d meals starting %s", armed, len(meals), today
        )
        return armed

    def cancel_all(self, meals: Iterable[Meal], today: date) -> None:
        """Cancel reminders for today and tomorrow."""
        for meal in meals:
            self.registry.cancel(reminder_key(meal.id, today))
            self.registry.cancel(reminder_key(meal.id, today + ONE_DAY))

    def reschedule_for_tomorrow(self, meals: Iterable[Meal], today: date) -> int:
        """Re-arm only tomorrow's reminders."""
        tomorrow = today + ONE_DAY
        now = self.clock.now()
        armed = 0
        for meal in meals:
            self.registry.cancel(reminder_key(meal.id, tomorrow))
            armed += self._arm(meal, tomorrow, now)
        logger.info("Re-armed %d reminders for %s", armed, tomorrow)
        return armed

    def reminder_instant(self, meal: Meal, day: date) -> datetime:
        """Return when the reminder for a meal on a date should fire."""
        tz = self.clock.now().tzinfo
        return datetime.combine(day, meal.time_of_day, tzinfo=tz) - self.lead_time

    async def on_trigger_fired(
        self, meal_id: int, meal_name: str, meal_time: time, day: date
    ) -> ReminderOutcome:
        """Decide whether a fired reminder is shown.

        Meals already completed, skipped or modified are suppressed. If the
        status cannot be read the reminder is shown anyway.
        """
        if meal_id < 1:
            logger.error("Rejected reminder with invalid meal id %s", meal_id)
            return ReminderOutcome.REJECTED

        try:
            log = self.log_store.get_log(meal_id, day)
        except Exception:
            logger.exception(
                "Failed to read status of meal %s, showing reminder", meal_id
            )
            await self._present(meal_id, meal_name, meal_time, day)
            return ReminderOutcome.SHOWN

        if log is not None and log.status is not MealStatus.PENDING:
            logger.info(
                "Meal %s already %s on %s, reminder suppressed",
                meal_id,
                log.status,
                day,
            )
            return ReminderOutcome.SUPPRESSED

        await self._present(meal_id, meal_name, meal_time, day)
        if log is None:
            self.log_store.insert_if_absent(
                DailyLog(meal_id=meal_id, day=day, status=MealStatus.PENDING)
            )
        return ReminderOutcome.SHOWN

    def _arm(self, meal: Meal, day: date, now: datetime) -> bool:
        instant = self.reminder_instant(meal, day)
        if instant <= now:
            return False
        payload = ReminderPayload(
            meal_id=meal.id,
            meal_name=meal.name,
            meal_time=meal.time_of_day,
            day=day,
        )
        try:
            self.registry.arm(
                reminder_key(meal.id, day), to_epoch_millis(instant), payload
            )
        except Exception:
            logger.exception("Failed to arm reminder for %s on %s", meal.name, day)
            return False
        logger.debug("Armed reminder for %s at %s", meal.name, instant)
        return True

    async def _present(
        self, meal_id: int, meal_name: str, meal_time: time, day: date
    ) -> None:
        try:
            await self.presenter.present(
                meal_id, meal_name, format_meal_time(meal_time), day
            )
        except Exception:
            logger.exception("Failed to present reminder for meal %s", meal_id)


@dataclass
class ReminderDispatcher:
    """Entry points for fired triggers and periodic re-scheduling."""

    scheduler: ReminderScheduler
    meal_service: MealCatalogService
    clock: Clock

    def refresh(self) -> int:
        """Re-arm today's and tomorrow's reminders from the catalog."""
        meals = self.meal_service.get_all_meals()
        if not meals:
            logger.info("No meals found, skipping reminder setup")
            return 0
        return self.scheduler.schedule_all(meals, self.clock.now().date())

    def forget(self, meal: Meal) -> None:
        """Cancel pending reminders for a meal that is being removed."""
        self.scheduler.cancel_all([meal], self.clock.now().date())

    async def dispatch(self, payload: ReminderPayload) -> ReminderOutcome | None:
        """Handle a fired trigger and keep tomorrow's reminders armed."""
        outcome: ReminderOutcome | None = None
        try:
            outcome = await self.scheduler.on_trigger_fired(
                payload.meal_id, payload.meal_name, payload.meal_time, payload.day
            )
        except Exception:
            logger.exception("Failed to handle reminder for meal %s", payload.meal_id)
        try:
            meals = self.meal_service.get_all_meals()
            self.scheduler.reschedule_for_tomorrow(meals, self.clock.now().date())
        except Exception:
            logger.exception("Failed to reschedule reminders for tomorrow")
        return outcome
