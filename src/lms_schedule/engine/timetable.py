from __future__ import annotations

import datetime as dt
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Tuple

from lms_schedule.models import Person, Role, Roster, SlotContext, TimeSlot


@dataclass(frozen=True)
class PersonClass:
    context: SlotContext
    role:    str   # "Teacher" or "Translator"


def classes_for_person(roster: Roster, person: Person) -> List[PersonClass]:
    """Slots the person teaches or translates, limited to roles they hold."""
    out: List[PersonClass] = []
    for ctx in roster.iter_slots():
        if person.has_role(Role.TEACHER) and ctx.slot.teacher_id == person.id:
            out.append(PersonClass(ctx, "Teacher"))
        elif person.has_role(Role.TRANSLATOR) and ctx.slot.translator_id == person.id:
            out.append(PersonClass(ctx, "Translator"))
    return out


def split_upcoming(
    classes: List[PersonClass], today: dt.date,
) -> Tuple[List[PersonClass], List[PersonClass]]:
    """(upcoming ascending, past descending). Unscheduled classes are dropped."""
    dated    = [c for c in classes if c.context.slot.date is not None]
    upcoming = sorted((c for c in dated if c.context.slot.date >= today),
                      key=lambda c: c.context.slot.date)
    past     = sorted((c for c in dated if c.context.slot.date < today),
                      key=lambda c: c.context.slot.date, reverse=True)
    return upcoming, past


def daily_grid(roster: Roster) -> Dict[dt.date, Dict[TimeSlot, List[SlotContext]]]:
    """date -> {FIRST: [...], SECOND: [...]}; a BOTH class appears in each period."""
    grid: Dict[dt.date, Dict[TimeSlot, List[SlotContext]]] = defaultdict(
        lambda: {TimeSlot.FIRST: [], TimeSlot.SECOND: []}
    )
    for ctx in roster.iter_slots():
        if ctx.slot.date is None:
            continue
        for period in ctx.slot.time_slot.periods():
            grid[ctx.slot.date][period].append(ctx)
    return dict(sorted(grid.items()))
