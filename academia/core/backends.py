import logging
from functools import lru_cache

from academia.core.config import settings
from academia.core.firebase import get_firebase_app, get_firestore_client
from academia.services.identity import FirebaseIdentityProvider, IdentityProvider, InMemoryIdentityProvider
from academia.store.base import DocumentStore
from academia.store.firestore import FirestoreDocumentStore
from academia.store.memory import InMemoryDocumentStore

logger = logging.getLogger("academia")


@lru_cache
def _local_store() -> InMemoryDocumentStore:
    logger.warning("LOCAL_BACKENDS ativo: dados mantidos apenas em memoria.")
    return InMemoryDocumentStore()


@lru_cache
def _local_identity() -> InMemoryIdentityProvider:
    return InMemoryIdentityProvider()


def get_store() -> DocumentStore:
    if settings.LOCAL_BACKENDS:
        return _local_store()
    return FirestoreDocumentStore(get_firestore_client())


def get_identity() -> IdentityProvider:
    if settings.LOCAL_BACKENDS:
        return _local_identity()
    return FirebaseIdentityProvider(get_firebase_app())
