# wms_state/api/orders_client.py
from __future__ import annotations
import logging
from typing import Any, Dict, Iterable, List, Optional

import requests

from wms_state.config.settings import ApiConfig
from wms_state.errors import UnknownOrder
from wms_state.orders.models import Order, OrderStatus, order_from_api, status_to_api

logger = logging.getLogger(__name__)


class OrderApiClient:
    """
    Cliente de la API de órdenes:
      - GET  {orders_path}                -> lista de órdenes (cabecera + ítems)
      - PUT  {orders_path}/{id}/status    -> {"status": "COMPLETED"}
    Un 5xx se reintenta una sola vez; cualquier otro error se propaga
    (requests.RequestException) para que el llamador decida.
    """

    def __init__(self, cfg: Optional[ApiConfig] = None, session: Optional[requests.Session] = None, token: Optional[str] = None):
        self.cfg = cfg or ApiConfig()
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if token:
            self.session.headers.update({"Authorization": f"Bearer {token}"})

    def _url(self, *parts: Any) -> str:
        base = self.cfg.base_url.rstrip("/") + "/" + self.cfg.orders_path.strip("/")
        return "/".join([base] + [str(p) for p in parts])

    def _request(self, method: str, url: str, **kw) -> requests.Response:
        resp = self.session.request(method, url, timeout=self.cfg.timeout_s, **kw)
        if resp.status_code >= 500:
            logger.warning("%s %s -> %s, reintentando una vez", method, url, resp.status_code)
            resp = self.session.request(method, url, timeout=self.cfg.timeout_s, **kw)
        resp.raise_for_status()
        return resp

    def fetch_orders(self) -> List[Order]:
        payload = self._request("GET", self._url()).json()
        # algunas versiones del backend envuelven la lista en {"data": [...]}
        if isinstance(payload, dict):
            payload = payload.get("data") or payload.get("content") or []
        if not isinstance(payload, list):
            raise ValueError(f"Respuesta de órdenes inesperada: {type(payload).__name__}")
        orders: List[Order] = []
        for raw in payload:
            if not isinstance(raw, dict):
                logger.warning("Entrada ignorada, no es un objeto: %r", raw)
                continue
            try:
                orders.append(order_from_api(raw))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning("Orden ignorada por payload inválido (%s): %r", e, raw.get("orderId"))
        return orders

    def update_status(self, order_id: int, status: OrderStatus) -> None:
        self._request("PUT", self._url(order_id, "status"), json={"status": status_to_api(status)})


class InMemoryOrderSource:
    """Misma interfaz que OrderApiClient, sin red (tests y CLI)."""

    def __init__(self, orders: Iterable[Order] = ()):
        self._orders: Dict[int, Order] = {o.order_id: o for o in orders}
        self.status_updates: List[tuple] = []

    def fetch_orders(self) -> List[Order]:
        return list(self._orders.values())

    def update_status(self, order_id: int, status: OrderStatus) -> None:
        if order_id not in self._orders:
            raise UnknownOrder(order_id)
        self._orders[order_id] = self._orders[order_id].with_status(status)
        self.status_updates.append((order_id, status))

    def add(self, order: Order) -> None:
        self._orders[order.order_id] = order
