"""Service for realizing recurring expenses and incomes."""

import logging
from dataclasses import dataclass, asdict
from datetime import date
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from curio_finance.config import settings
from curio_finance.exceptions import RecurringProcessingError
from curio_finance.models.expense import Expense
from curio_finance.models.income import Income
from curio_finance.models.recurring import RecurringPattern, RecurringExpense, RecurringIncome
from curio_finance.schemas.recurring import RecurrenceRequest
from curio_finance.services.recurrence_dates import advance_process_date, is_due, pattern_anchors

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecurringKind:
    """Binds a recurring definition model to the transaction model it realizes."""
    name: str
    definition_model: type
    transaction_model: type
    template_attr: str
    template_fk: str


EXPENSES = RecurringKind("expense", RecurringExpense, Expense, "expense", "expense_id")
INCOMES = RecurringKind("income", RecurringIncome, Income, "income", "income_id")

KINDS = {kind.name: kind for kind in (EXPENSES, INCOMES)}


@dataclass
class ProcessingReport:
    """Outcome of one processing run over one kind of definition."""
    processed: int = 0
    skipped: int = 0
    failed: int = 0
    occurrences_created: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def load_active_definitions(db: Session, kind: RecurringKind, today: date) -> List[Any]:
    """Definitions with no end date or an end date still ahead of ``today``."""
    model = kind.definition_model
    return db.query(model).options(
        joinedload(getattr(model, kind.template_attr)),
        joinedload(model.pattern),
    ).filter(
        or_(model.end_date.is_(None), model.end_date > today)
    ).all()


def realize_occurrence(db: Session, kind: RecurringKind, definition: Any) -> date:
    """
    Create the transaction for the definition's ``next_process_date`` and
    advance its schedule, committed as a single unit.

    On failure the session is rolled back so neither the new transaction nor
    the schedule change persists. Returns the new ``next_process_date``.
    """
    definition_id = definition.id
    try:
        template = getattr(definition, kind.template_attr)
        pattern = definition.pattern
        occurrence_date = definition.next_process_date

        db.add(kind.transaction_model(
            user_id=template.user_id,
            description=template.description,
            amount=template.amount,
            category_id=template.category_id,
            payment_method_id=template.payment_method_id,
            date=occurrence_date,
            notes=template.notes,
        ))

        # Advance from the scheduled date, not from today, so missed periods are not skipped
        definition.next_process_date = advance_process_date(
            occurrence_date,
            pattern.type,
            pattern.frequency,
            pattern.day_of_month,
            pattern.day_of_week,
            pattern.month_of_year,
        )
        definition.last_processed = occurrence_date
        db.commit()
    except (SQLAlchemyError, ValueError, OverflowError) as e:
        db.rollback()
        raise RecurringProcessingError(kind.name, definition_id, e) from e

    return definition.next_process_date


def process_recurring(
    db: Session,
    kind: RecurringKind,
    today: Optional[date] = None,
    catch_up: Optional[str] = None,
) -> ProcessingReport:
    """
    Realize every due definition of one kind.

    With ``catch_up="one"`` each definition gets at most one occurrence per
    call; ``"all"`` keeps realizing until the definition is no longer due
    (bounded by ``recurring_max_catch_up``). A failing definition is logged
    and the run moves on to the next one.
    """
    today = today or date.today()
    catch_up = catch_up or settings.recurring_catch_up
    limit = settings.recurring_max_catch_up if catch_up == "all" else 1
    report = ProcessingReport()

    for definition in load_active_definitions(db, kind, today):
        if not is_due(definition.next_process_date, definition.end_date, today):
            report.skipped += 1
            continue

        created = 0
        try:
            while created < limit and is_due(definition.next_process_date, definition.end_date, today):
                realize_occurrence(db, kind, definition)
                created += 1
        except RecurringProcessingError as e:
            logger.exception(str(e))
            report.failed += 1
        else:
            report.processed += 1
        report.occurrences_created += created

    logger.info(
        "Recurring %s run: %d processed, %d skipped, %d failed, %d occurrences created",
        kind.name, report.processed, report.skipped, report.failed, report.occurrences_created,
    )
    return report


def process_recurring_expenses(
    db: Session,
    today: Optional[date] = None,
    catch_up: Optional[str] = None,
) -> ProcessingReport:
    return process_recurring(db, EXPENSES, today, catch_up)


def process_recurring_incomes(
    db: Session,
    today: Optional[date] = None,
    catch_up: Optional[str] = None,
) -> ProcessingReport:
    return process_recurring(db, INCOMES, today, catch_up)


def process_all(
    db: Session,
    today: Optional[date] = None,
    catch_up: Optional[str] = None,
) -> Dict[str, ProcessingReport]:
    """Process recurring expenses, then recurring incomes."""
    return {
        "expenses": process_recurring_expenses(db, today, catch_up),
        "incomes": process_recurring_incomes(db, today, catch_up),
    }


def create_recurring_definition(
    db: Session,
    kind: RecurringKind,
    template: Union[Expense, Income],
    recurrence: RecurrenceRequest,
) -> Any:
    """
    Attach a recurrence to a freshly created template transaction.

    Pattern anchors come from the template's date. The caller commits.
    """
    anchors = pattern_anchors(template.date, recurrence.type)
    pattern = RecurringPattern(
        type=recurrence.type,
        frequency=recurrence.frequency,
        **anchors,
    )
    db.add(pattern)
    db.flush()

    definition = kind.definition_model(
        pattern_id=pattern.id,
        start_date=template.date,
        end_date=recurrence.end_date,
        next_process_date=advance_process_date(
            template.date, recurrence.type, recurrence.frequency, **anchors
        ),
    )
    setattr(definition, kind.template_fk, template.id)
    db.add(definition)
    return definition


def list_recurring_definitions(db: Session, user_id: str) -> List[Dict[str, Any]]:
    """All recurring definitions owned by a user, expenses first."""
    result = []
    for kind in (EXPENSES, INCOMES):
        model = kind.definition_model
        template_model = kind.transaction_model
        definitions = db.query(model).join(
            getattr(model, kind.template_attr)
        ).filter(
            template_model.user_id == user_id
        ).order_by(model.next_process_date).all()

        for definition in definitions:
            template = getattr(definition, kind.template_attr)
            result.append({
                "id": definition.id,
                "kind": kind.name,
                "template_id": template.id,
                "description": template.description,
                "amount": template.amount,
                "pattern": definition.pattern,
                "start_date": definition.start_date,
                "end_date": definition.end_date,
                "last_processed": definition.last_processed,
                "next_process_date": definition.next_process_date,
                "created_at": definition.created_at,
            })
    return result
