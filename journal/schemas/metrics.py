"""Response schema for strategy performance metrics."""

from journal.schemas.common import CamelModel


class MetricsRead(CamelModel):
    win_rate: int
    total_profit: float
    avg_return: float
