from typing import Iterable

from src.subtrack.domain.entities.subscription import Subscription
from src.subtrack.domain.services.month_date import iter_months
from src.subtrack.domain.value_objects import SummaryFilter


def total_cost(subs: Iterable[Subscription], flt: SummaryFilter) -> int:
    """
    Суммарная стоимость за каждый месяц диапазона [start, end]:
    подписка, активная в трёх месяцах диапазона, даёт price * 3.
    """
    matching = [s for s in subs if flt.matches(s.user_id, s.service_name)]
    total = 0
    for month in iter_months(flt.start, flt.end):
        total += sum(s.price for s in matching if s.is_active_in(month))
    return total
