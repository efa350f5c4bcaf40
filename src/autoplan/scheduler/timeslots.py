"""Free-interval computation within working hours."""

from collections.abc import Iterable, Iterator
from datetime import date, datetime, time, timedelta

from autoplan.logger import get_logger
from autoplan.models import Event, Task

from .config import SchedulingOptions
from .core import TimeSlot

logger = get_logger()

SATURDAY = 5  # date.weekday() value; Saturday and Sunday are >= this


class TimeWindowIndex:
    """Computes the free slots of a calendar day.

    A day's occupied intervals are its non-all-day events plus every
    not-completed task with both schedule fields set. Completed tasks never
    occupy space, so finishing a task frees its interval on the next pass.
    """

    def __init__(self, options: SchedulingOptions):
        self.options = options

    def is_working_day(self, day: date) -> bool:
        """Monday to Friday, or every day when weekends are allowed."""
        if self.options.allow_weekends:
            return True
        return day.weekday() < SATURDAY

    def working_day_start(self, day: date) -> datetime:
        return datetime.combine(_as_date(day), self.options.working_hours.start_time)

    def working_day_end(self, day: date) -> datetime:
        return datetime.combine(_as_date(day), self.options.working_hours.end_time)

    def candidate_days(self, first: datetime, last: datetime) -> Iterator[date]:
        """Yield the working days from first's date through last's date, inclusive.

        The sequence is finite because the caller always passes a bounded last
        instant (a deadline or the search horizon).
        """
        day = first.date()
        end_day = last.date()
        while day <= end_day:
            if self.is_working_day(day):
                yield day
            else:
                logger.debug(f"      Skipping non-working day {day.isoformat()}")
            day += timedelta(days=1)

    def available_slots(
        self, day: date, existing_tasks: Iterable[Task], events: Iterable[Event]
    ) -> list[TimeSlot]:
        """Compute the ordered free slots of a day within working hours.

        Args:
            day: Calendar day to inspect
            existing_tasks: Tasks that may occupy time (completed ones are ignored)
            events: Calendar events (all-day ones are ignored)

        Returns:
            Free slots sorted by start, each at least min_slot_minutes long
        """
        day = _as_date(day)
        day_start = self.working_day_start(day)
        day_end = self.working_day_end(day)
        midnight = datetime.combine(day, time.min)
        next_midnight = midnight + timedelta(days=1)

        occupied: list[TimeSlot] = []
        for event in events:
            if event.all_day:
                continue
            if event.start_date < next_midnight and event.end_date > midnight:
                occupied.append(TimeSlot(event.start_date, event.end_date, available=False))

        for task in existing_tasks:
            if task.completed or task.scheduled_start is None or task.scheduled_end is None:
                continue
            if task.scheduled_start < next_midnight and task.scheduled_end > midnight:
                occupied.append(
                    TimeSlot(task.scheduled_start, task.scheduled_end, available=False)
                )

        occupied.sort(key=lambda slot: slot.start)

        buffer = timedelta(minutes=self.options.buffer_between_tasks)
        slots: list[TimeSlot] = []
        cursor = day_start
        for busy in occupied:
            if cursor >= day_end:
                break
            if cursor < busy.start:
                slots.append(TimeSlot(cursor, min(busy.start, day_end)))
            cursor = max(cursor, busy.end + buffer)

        if cursor < day_end:
            slots.append(TimeSlot(cursor, day_end))

        free = [slot for slot in slots if slot.duration_minutes >= self.options.min_slot_minutes]
        logger.debug(
            f"      {day.isoformat()}: {len(occupied)} busy interval(s), "
            f"{len(free)} free slot(s)"
        )
        return free


def _as_date(day: date) -> date:
    # datetime is a subclass of date; normalize to the calendar day
    if isinstance(day, datetime):
        return day.date()
    return day
