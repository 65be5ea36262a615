from __future__ import annotations

import logging
from uuid import UUID

from chirpy.core.errors import Internal, NotFound, StorageError
from chirpy.db.store import Store

logger = logging.getLogger(__name__)

UPGRADE_EVENT = "user.upgraded"


def apply_payment_event(store: Store, event: str, user_id: UUID) -> bool:
    """
    Apply a payment-provider webhook event.

    Returns False for events we ignore. Raises NotFound when the upgraded
    user doesn't exist.
    """
    if event != UPGRADE_EVENT:
        return False
    try:
        user = store.upgrade_user(user_id)
    except StorageError as e:
        raise Internal("Couldn't set subscription") from e
    if user is None:
        raise NotFound("Couldn't find user")
    logger.info("User %s upgraded to Chirpy Red", user_id)
    return True
