"""Human-readable order numbers"""

import random
from datetime import datetime
from typing import Optional


def generate_order_number(
    prefix: str = "ORD",
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> str:
    """
    Build an order number like ORD-251019-4821.

    The date part is the local calendar day (YYMMDD) and the suffix is a
    random four-digit number, so numbers are not unique by construction;
    the order store's unique index is what rejects a collision.
    """
    now = now or datetime.now()
    suffix = (rng or random).randint(1000, 9999)
    return f"{prefix}-{now:%y%m%d}-{suffix}"
