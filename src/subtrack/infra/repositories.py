from __future__ import annotations

from datetime import date, datetime, timezone
from uuid import UUID

from sqlalchemy import Integer, case, cast, delete, extract, func, literal, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.subtrack.infra.models import SubscriptionORM
from src.subtrack.domain.entities.subscription import Subscription
from src.subtrack.domain.errors import SubscriptionError
from src.subtrack.domain.services.month_date import month_index
from src.subtrack.domain.value_objects import ListFilter, SummaryFilter


# mappers ORM <-> Domain
def _month_dom(d: date | None) -> datetime | None:
    if d is None:
        return None
    return datetime(d.year, d.month, 1, tzinfo=timezone.utc)


def _month_db(dt: datetime | None) -> date | None:
    if dt is None:
        return None
    return date(dt.year, dt.month, 1)


def _month_idx(col):
    # Индекс месяца year*12 + (month-1), как в month_index; на SQLite extract компилируется в strftime
    return cast(extract("year", col), Integer) * 12 + cast(extract("month", col), Integer) - 1


def _is_unique_violation(e: IntegrityError) -> bool:
    # Postgres: SQLSTATE 23505, SQLite: текст ошибки
    if getattr(e.orig, "pgcode", None) == "23505":
        return True
    return "UNIQUE constraint failed" in str(e.orig)


def _utc(dt: datetime) -> datetime:
    # SQLite отдаёт naive datetime, Postgres – aware
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _sub_dom(s: SubscriptionORM) -> Subscription:
    return Subscription(
        id=s.id,
        service_name=str(s.service_name),
        price=int(s.price),
        user_id=s.user_id,
        start_date=_month_dom(s.start_date),
        end_date=_month_dom(s.end_date),
        created_at=_utc(s.created_at),
        updated_at=_utc(s.updated_at),
    )


# repos
class SqlSubscriptionRepo:
    def __init__(self, db: Session):
        self.db = db

    def create(self, sub: Subscription) -> Subscription:
        row = SubscriptionORM(
            id=sub.id,
            service_name=sub.service_name,
            price=sub.price,
            user_id=sub.user_id,
            start_date=_month_db(sub.start_date),
            end_date=_month_db(sub.end_date),
        )
        self.db.add(row)
        try:
            self.db.flush()
        except IntegrityError as e:
            if not _is_unique_violation(e):
                raise
            raise SubscriptionError.duplicate(f"subscription {sub.id} already exists") from e
        self.db.refresh(row)
        return _sub_dom(row)

    def get(self, sub_id: UUID) -> Subscription:
        s = self.db.query(SubscriptionORM).filter(SubscriptionORM.id == sub_id).first()
        if not s:
            raise SubscriptionError.not_found(f"subscription {sub_id} not found")
        return _sub_dom(s)

    def update(self, sub: Subscription) -> Subscription:
        row = self.db.query(SubscriptionORM).filter(SubscriptionORM.id == sub.id).first()
        if not row:
            raise SubscriptionError.not_found(f"subscription {sub.id} not found")

        row.service_name = sub.service_name
        row.price = sub.price
        row.user_id = sub.user_id
        row.start_date = _month_db(sub.start_date)
        row.end_date = _month_db(sub.end_date)
        row.updated_at = func.now()

        try:
            self.db.flush()
        except IntegrityError as e:
            if not _is_unique_violation(e):
                raise
            raise SubscriptionError.duplicate(f"subscription {sub.id} conflicts with an existing one") from e
        self.db.refresh(row)
        return _sub_dom(row)

    def delete(self, sub_id: UUID) -> None:
        res = self.db.execute(
            delete(SubscriptionORM).where(SubscriptionORM.id == sub_id)
        )
        if res.rowcount == 0:
            raise SubscriptionError.not_found(f"subscription {sub_id} not found")

    def list(self, flt: ListFilter) -> list[Subscription]:
        q = self.db.query(SubscriptionORM)
        if flt.user_id is not None:
            q = q.filter(SubscriptionORM.user_id == flt.user_id)
        if flt.service_name is not None:
            q = q.filter(SubscriptionORM.service_name == flt.service_name)

        rows = (
            q.order_by(SubscriptionORM.created_at.desc())
            .limit(flt.effective_limit())
            .offset(flt.effective_offset())
            .all()
        )
        return [_sub_dom(s) for s in rows]

    def summary(self, flt: SummaryFilter) -> int:
        """
        Для каждой подписки считается число месяцев пересечения её периода
        с [start, end], БД суммирует price * months. Размер запроса не зависит от длины диапазона.
        """
        lo, hi = month_index(flt.start), month_index(flt.end)
        if lo > hi:
            return 0

        start_idx = _month_idx(SubscriptionORM.start_date)
        end_idx = _month_idx(SubscriptionORM.end_date)
        first = case((start_idx > lo, start_idx), else_=literal(lo))
        last = case(
            (SubscriptionORM.end_date.is_(None), literal(hi)),
            (end_idx < hi, end_idx),
            else_=literal(hi),
        )

        q = self.db.query(
            func.coalesce(func.sum(SubscriptionORM.price * (last - first + 1)), 0)
        ).filter(
            SubscriptionORM.start_date <= _month_db(flt.end),
            or_(
                SubscriptionORM.end_date.is_(None),
                SubscriptionORM.end_date >= _month_db(flt.start),
            ),
        )
        if flt.user_id is not None:
            q = q.filter(SubscriptionORM.user_id == flt.user_id)
        if flt.service_name is not None:
            q = q.filter(SubscriptionORM.service_name == flt.service_name)

        return int(q.scalar() or 0)
