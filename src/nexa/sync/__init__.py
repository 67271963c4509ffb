"""Núcleo de sincronização: store, listeners, mutações pendentes e registro.

Uso:
    from nexa.sync import StoreRegistry

    async with registry.use(KPIS, department_scope(viewer)) as store:
        store.subscribe(render)
        await store.update(kpi_id, {"current": 92})
"""

from nexa.sync.collection import CollectionDefinition
from nexa.sync.listeners import ListenerSet, Unsubscribe
from nexa.sync.mutations import MutationKind, PendingLog, PendingMutation, materialize
from nexa.sync.policies import RefetchOnSignalPolicy
from nexa.sync.registry import StoreRegistry
from nexa.sync.store import SynchronizedCollectionStore

__all__ = [
    "CollectionDefinition",
    "ListenerSet",
    "MutationKind",
    "PendingLog",
    "PendingMutation",
    "RefetchOnSignalPolicy",
    "StoreRegistry",
    "SynchronizedCollectionStore",
    "Unsubscribe",
    "materialize",
]
