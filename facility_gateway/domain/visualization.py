"""Income ring chart geometry"""

import math
from decimal import Decimal
from typing import Union

from facility_gateway.domain.models import ArcSegments

Number = Union[int, float, Decimal]


def derive_arcs(received: Number, pending: Number, radius: float = 45.0) -> ArcSegments:
    """
    Split a ring of the given radius into received and pending segments.

    The pending arc starts at -received_arc_length so the two segments are
    contiguous and never overlap. An empty total yields two zero fractions.
    """
    received_f = float(received)
    pending_f = float(pending)
    total = received_f + pending_f

    if total == 0:
        received_fraction = pending_fraction = 0.0
    else:
        received_fraction = received_f / total
        pending_fraction = pending_f / total

    circumference = 2 * math.pi * radius
    received_arc_length = received_fraction * circumference

    return ArcSegments(
        received_fraction=received_fraction,
        pending_fraction=pending_fraction,
        received_arc_length=received_arc_length,
        pending_arc_start_offset=-received_arc_length,
        circumference=circumference,
    )
