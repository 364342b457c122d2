import json
import logging
import os
from functools import lru_cache

import firebase_admin
from firebase_admin import credentials, firestore

from academia.core.config import settings

logger = logging.getLogger("academia.firebase")


def _credentials_from_env():
    raw = os.getenv("FIREBASE_CREDENTIALS_JSON")
    if raw:
        return credentials.Certificate(json.loads(raw))
    path = os.getenv("FIREBASE_CREDENTIALS_PATH")
    if path:
        return credentials.Certificate(path)
    logger.info("usando Application Default Credentials para o Firebase")
    return credentials.ApplicationDefault()


@lru_cache
def get_firebase_app():
    # Reuse an app initialized elsewhere in the process (scripts, shells).
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass
    options = {"projectId": settings.FIREBASE_PROJECT_ID} if settings.FIREBASE_PROJECT_ID else None
    return firebase_admin.initialize_app(_credentials_from_env(), options)


@lru_cache
def get_firestore_client():
    return firestore.client(app=get_firebase_app())
