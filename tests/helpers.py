# tests/helpers.py
from datetime import datetime, timedelta
from wms_state.orders.models import Order, OrderLine

T0 = datetime(2025, 3, 1, 9, 0, 0)


def make_order(oid, otype, qty, loc="I009", item=7, status="completed", name="Tornillo", minutes=0, lines=None):
    lines = lines if lines is not None else [OrderLine(item_id=item, item_name=name, requested_quantity=qty, location_code=loc)]
    ts = T0 + timedelta(minutes=minutes)
    return Order(
        order_id=oid, type=otype, company_id=1,
        created_at=ts, updated_at=ts, status=status, lines=tuple(lines),
    )
