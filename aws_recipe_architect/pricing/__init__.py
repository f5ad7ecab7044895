from .complexity import complexity_label, complexity_score
from .estimate import PriceEstimate, PriceLine, StartsFrom, calculate_estimate, starts_from
from .schedule import FeeSchedule, load_fee_schedule, parse_fee_schedule
from .usage import aws_usage_estimate, round_dollars

__all__ = [
    "FeeSchedule",
    "PriceEstimate",
    "PriceLine",
    "StartsFrom",
    "aws_usage_estimate",
    "calculate_estimate",
    "complexity_label",
    "complexity_score",
    "load_fee_schedule",
    "parse_fee_schedule",
    "round_dollars",
    "starts_from",
]
