"""Fan-out de notificações para consumidores de um store.

Callbacks rodam em ordem de registro, de forma síncrona, no mesmo turno
do loop que disparou a mudança. Falha de um callback é registrada em log
e não impede os seguintes. Registrar ou cancelar durante um notify é
seguro: a iteração usa uma cópia das inscrições e pula as canceladas.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

Unsubscribe = Callable[[], None]


class _Registration:
    __slots__ = ("active", "callback")

    def __init__(self, callback: Callable[..., Any]) -> None:
        self.callback = callback
        self.active = True


class ListenerSet:
    """Conjunto ordenado de callbacks.

    Args:
        name: Identificação nos logs (ex: "kpis:data")
    """

    __slots__ = ("_name", "_registrations")

    def __init__(self, name: str = "") -> None:
        self._name = name
        self._registrations: list[_Registration] = []

    def __len__(self) -> int:
        return len(self._registrations)

    def add(self, callback: Callable[..., Any]) -> Unsubscribe:
        """Registra callback e retorna função de cancelamento.

        O mesmo callback registrado duas vezes gera duas inscrições
        independentes. Cancelar mais de uma vez não tem efeito.
        """
        registration = _Registration(callback)
        self._registrations.append(registration)

        def unsubscribe() -> None:
            if not registration.active:
                return
            registration.active = False
            with contextlib.suppress(ValueError):
                self._registrations.remove(registration)

        return unsubscribe

    def notify(self, *args: Any) -> int:
        """Invoca todos os callbacks ativos.

        Returns:
            Quantidade de callbacks que levantaram exceção.
        """
        failures = 0
        for registration in tuple(self._registrations):
            if not registration.active:
                continue
            try:
                registration.callback(*args)
            except Exception:
                failures += 1
                logger.exception(
                    "listener_failed",
                    extra={"listener_set": self._name},
                )
        return failures

    def clear(self) -> None:
        """Cancela todas as inscrições."""
        for registration in self._registrations:
            registration.active = False
        self._registrations.clear()
