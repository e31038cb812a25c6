# wms_state/fleet/bus.py
import logging
import queue
import threading
from typing import Callable, Generic, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_STOP = object()


class Subscription(Generic[T]):
    """
    Canal acotado de un suscriptor. `offer` nunca bloquea: si el canal está lleno
    se descarta el mensaje más viejo, así un consumidor lento ve datos atrasados
    pero no frena el tick.
    """

    def __init__(self, bus: "SnapshotBus[T]", maxsize: int, callback: Optional[Callable[[T], None]] = None):
        self._bus = bus
        self._q: "queue.Queue" = queue.Queue(maxsize=max(1, maxsize))
        self.callback = callback
        self.dropped = 0
        self.closed = False
        self._worker: Optional[threading.Thread] = None
        if callback is not None:
            self._worker = threading.Thread(target=self._pump, name="snapshot-subscriber", daemon=True)
            self._worker.start()

    def offer(self, item: T) -> None:
        if self.closed and item is not _STOP:
            return
        while True:
            try:
                self._q.put_nowait(item)
                return
            except queue.Full:
                try:
                    self._q.get_nowait()
                    self.dropped += 1
                except queue.Empty:
                    pass

    def get(self, timeout: Optional[float] = None) -> T:
        """Siguiente mensaje; lanza queue.Empty si vence el timeout."""
        item = self._q.get(timeout=timeout)
        if item is _STOP:
            raise queue.Empty
        return item

    def drain(self) -> List[T]:
        items: List[T] = []
        while True:
            try:
                item = self._q.get_nowait()
            except queue.Empty:
                return items
            if item is not _STOP:
                items.append(item)

    def _pump(self) -> None:
        while True:
            try:
                item = self._q.get(timeout=0.1)
            except queue.Empty:
                # el centinela pudo perderse si un publish lo desalojó
                if self.closed:
                    return
                continue
            if item is _STOP or self.closed:
                return
            try:
                self.callback(item)
            except Exception:
                logger.exception("Fallo en callback de suscriptor; se continúa")

    def unsubscribe(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._bus._remove(self)
        if self._worker is not None:
            self.offer(_STOP)
            # no esperamos si el propio callback es quien se desuscribe
            if threading.current_thread() is not self._worker:
                self._worker.join(timeout=1.0)

    __call__ = unsubscribe


class SnapshotBus(Generic[T]):
    """Publicación/suscripción con canales acotados y envío no bloqueante."""

    def __init__(self, maxsize: int = 8):
        self.maxsize = maxsize
        self._lock = threading.Lock()
        self._subs: List[Subscription[T]] = []

    def subscribe(self, callback: Optional[Callable[[T], None]] = None, maxsize: Optional[int] = None) -> Subscription[T]:
        sub: Subscription[T] = Subscription(self, maxsize or self.maxsize, callback)
        with self._lock:
            self._subs.append(sub)
        return sub

    def publish(self, item: T) -> int:
        with self._lock:
            subs = list(self._subs)
        for sub in subs:
            sub.offer(item)
        return len(subs)

    def _remove(self, sub: Subscription[T]) -> None:
        with self._lock:
            self._subs = [s for s in self._subs if s is not sub]

    def __len__(self) -> int:
        with self._lock:
            return len(self._subs)

    def close(self) -> None:
        with self._lock:
            subs = list(self._subs)
        for sub in subs:
            sub.unsubscribe()
