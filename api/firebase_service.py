"""
Firebase service for Django - lazy Firebase Admin initialization and the
Firestore lookup of push tokens.

Firestore Collections:
- users/{uid}: Contains fcmToken for push notifications
"""
import enum
import json
import logging
import os
import threading
from dataclasses import dataclass
from typing import Optional

import firebase_admin
from django.conf import settings
from firebase_admin import credentials, firestore

from . import errors
from .errors import Failure

logger = logging.getLogger("api")


class GatewayState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    FAILED = "failed"


class FirebaseGateway:
    """
    Owns the Firebase Admin app used for Firestore and FCM.

    Initialization is attempted once per process. Both outcomes are cached:
    a FAILED gateway stays failed until the process restarts.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._state = GatewayState.UNINITIALIZED
        self._cause: Optional[BaseException] = None
        self._app = None
        self._firestore_client = None

    @property
    def state(self) -> GatewayState:
        return self._state

    @property
    def cause(self) -> Optional[BaseException]:
        return self._cause

    @property
    def app(self):
        return self._app

    def is_ready(self) -> bool:
        return self._state is GatewayState.READY

    def ensure_ready(self) -> Optional[Failure]:
        """Return None when the app is usable, otherwise the init failure"""
        if self._state is GatewayState.UNINITIALIZED:
            with self._lock:
                if self._state is GatewayState.UNINITIALIZED:
                    self._initialize()

        if self._state is GatewayState.READY:
            return None
        return errors.configuration_error()

    def _initialize(self) -> None:
        # Caller holds self._lock
        try:
            app = self._create_app()
        except Exception as e:
            logger.error(f"[FIREBASE] Failed to initialize Firebase Admin SDK: {e}")
            self._cause = e
            self._state = GatewayState.FAILED
            return

        self._app = app
        self._state = GatewayState.READY
        logger.info("[FIREBASE] Firebase Admin SDK initialized successfully")

    def _create_app(self):
        use_emulator = getattr(settings, "FIREBASE_USE_EMULATOR", False)
        project_id = getattr(settings, "FIREBASE_PROJECT_ID", None)

        logger.info(f"[FIREBASE] Init: use_emulator={use_emulator}, project_id={project_id}")

        if use_emulator:
            firestore_host = getattr(settings, "FIRESTORE_EMULATOR_HOST", "localhost:8080")
            os.environ["FIRESTORE_EMULATOR_HOST"] = firestore_host
            logger.info(f"[FIREBASE] Using emulator (Firestore: {firestore_host})")
            return self._initialize_app(None, {"projectId": project_id or "demo-project"})

        options = {"projectId": project_id} if project_id else None
        return self._initialize_app(self._load_credential(), options)

    def _load_credential(self):
        """
        Credential sources, in order: FIREBASE_SERVICE_ACCOUNT (JSON payload),
        FIREBASE_SERVICE_ACCOUNT_PATH (file), Application Default Credentials.

        Raises ValueError for a malformed payload.
        """
        service_account_json = getattr(settings, "FIREBASE_SERVICE_ACCOUNT", None)
        service_account_path = getattr(settings, "FIREBASE_SERVICE_ACCOUNT_PATH", None)

        if service_account_json:
            try:
                sa_dict = json.loads(service_account_json)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid FIREBASE_SERVICE_ACCOUNT JSON: {e}") from e
            logger.info("[FIREBASE] Using FIREBASE_SERVICE_ACCOUNT env var")
            return credentials.Certificate(sa_dict)

        if service_account_path and os.path.exists(service_account_path):
            logger.info(f"[FIREBASE] Using service account from {service_account_path}")
            return credentials.Certificate(service_account_path)

        logger.warning(
            "[FIREBASE] No service account configured - "
            "falling back to Application Default Credentials"
        )
        return None

    def _initialize_app(self, cred, options):
        try:
            return firebase_admin.initialize_app(credential=cred, options=options)
        except ValueError:
            # The default app exists already (initialized elsewhere in the process)
            logger.warning("[FIREBASE] Firebase app already exists, reusing it")
            return firebase_admin.get_app()

    def firestore(self):
        """Firestore client bound to the gateway app. Requires ensure_ready()."""
        if self._firestore_client is None:
            self._firestore_client = firestore.client(app=self._app)
        return self._firestore_client


@dataclass
class TokenLookup:
    """Result of resolving a user's push token"""
    token: Optional[str] = None
    failure: Optional[Failure] = None

    @property
    def found(self) -> bool:
        return self.failure is None


class FirestoreService:
    """Service class for Firestore operations"""

    # Collection names
    USERS_COLLECTION = "users"

    # Field holding the device push token in users/{uid}
    PUSH_TOKEN_FIELD = "fcmToken"

    def __init__(self, gateway: FirebaseGateway):
        self.gateway = gateway

    def resolve_push_token(self, user_id: str) -> TokenLookup:
        """
        Look up users/{user_id} and return its fcmToken.

        Expected document structure at users/{uid}:
        {
            "fcmToken": "device_fcm_token",
            ...
        }

        A missing document and a document without a token are reported as
        different failures. Store errors never leave this method raw.
        """
        logger.info(f"[FIRESTORE] Fetching FCM token for user: {user_id}")

        try:
            doc = (
                self.gateway.firestore()
                .collection(self.USERS_COLLECTION)
                .document(user_id)
                .get()
            )
            if not doc.exists:
                logger.warning(f"[FIRESTORE] User not found: {user_id}")
                return TokenLookup(failure=errors.not_found_error())
            data = doc.to_dict() or {}
        except Exception as e:
            logger.error(f"[FIRESTORE] Error fetching user data for {user_id}: {e}")
            return TokenLookup(failure=errors.store_error())

        token = data.get(self.PUSH_TOKEN_FIELD)
        if not token or not isinstance(token, str):
            logger.warning(f"[FIRESTORE] User {user_id} has no FCM token")
            return TokenLookup(failure=errors.unavailable_target_error())

        logger.info(f"[FIRESTORE] FCM token retrieved for user {user_id[:10]}...")
        return TokenLookup(token=token)


# Singleton instances
firebase_gateway = FirebaseGateway()
firestore_service = FirestoreService(firebase_gateway)
