# admin_console/controller.py
import hmac
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Optional, Tuple

from catalog_sdk.client import CatalogClient, CatalogError
from catalog_sdk.models import Product
from admin_console.errors import AdminError, AuthenticationError, BusyError
from admin_console.reconciler import FormReconciler
from admin_console.session import AdminSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogSnapshot:
    accessories: Tuple[Product, ...] = ()
    gifts: Tuple[Product, ...] = ()


class CatalogController:
    """
    Gates access, owns the catalog snapshot and reloads it after every mutation.

    Every public operation returns True on success. On failure it returns
    False and leaves a message for the operator in ``error``.
    """

    def __init__(self, client: CatalogClient, session: AdminSession, admin_password: str):
        self.client = client
        self.session = session
        self.reconciler = FormReconciler(client)
        self._admin_password = admin_password
        self._snapshot = CatalogSnapshot()
        self.busy = False
        self.error: Optional[str] = None

    @property
    def snapshot(self) -> CatalogSnapshot:
        return self._snapshot

    @property
    def draft(self):
        return self.reconciler.draft

    @contextmanager
    def _operation(self):
        if self.busy:
            raise BusyError("Another operation is in progress.")
        if not self.session.authenticated:
            raise AuthenticationError("Login required")
        self.busy = True
        try:
            yield
        finally:
            self.busy = False

    # ---------------------------
    # Session
    # ---------------------------
    def start(self) -> bool:
        if self.session.load():
            return self.load()
        return False

    def login(self, password: str) -> bool:
        self.error = None
        if not hmac.compare_digest(password.encode(), self._admin_password.encode()):
            logger.info("Rejected login attempt")
            self.error = "Invalid password"
            return False
        self.session.mark_authenticated()
        return self.load()

    # ---------------------------
    # Snapshot
    # ---------------------------
    def _reload(self) -> bool:
        try:
            data = self.client.list()
        except CatalogError as e:
            logger.error("Catalog load failed: %s", e)
            self.error = "Failed to load products."
            return False
        # both lists change together or not at all
        self._snapshot = CatalogSnapshot(
            accessories=tuple(data["accessories"]),
            gifts=tuple(data["gifts"]),
        )
        logger.debug("Loaded %d accessories, %d gifts",
                     len(self._snapshot.accessories), len(self._snapshot.gifts))
        return True

    def load(self) -> bool:
        self.error = None
        try:
            with self._operation():
                return self._reload()
        except AdminError as e:
            self.error = str(e)
            return False

    # ---------------------------
    # Draft routing
    # ---------------------------
    # the draft only changes between operations
    def begin_edit(self, product: Product) -> bool:
        if self.busy:
            self.error = "Another operation is in progress."
            return False
        self.error = None
        self.reconciler.begin_edit(product)
        return True

    def cancel_edit(self) -> bool:
        if self.busy:
            self.error = "Another operation is in progress."
            return False
        self.reconciler.cancel()
        return True

    # ---------------------------
    # Mutations
    # ---------------------------
    def submit(self) -> bool:
        self.error = None
        updating = self.reconciler.editing_id is not None
        try:
            with self._operation():
                try:
                    self.reconciler.submit()
                except CatalogError as e:
                    logger.error("Submit failed: %s", e)
                    self.error = "Failed to update product." if updating else "Failed to add product."
                    return False
                return self._reload()
        except AdminError as e:
            self.error = str(e)
            return False

    def delete(self, product: Product) -> bool:
        self.error = None
        try:
            with self._operation():
                try:
                    self.client.delete(product.id, product.category)
                except CatalogError as e:
                    logger.error("Delete of %s failed: %s", product.id, e)
                    self.error = "Failed to delete product."
                    return False
                if self.reconciler.editing_id == product.id:
                    self.reconciler.cancel()
                return self._reload()
        except AdminError as e:
            self.error = str(e)
            return False
