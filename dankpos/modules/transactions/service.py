from typing import Dict
import logging

from dankpos.core.exceptions import AuthenticationError, BackendError, ValidationError
from dankpos.database.client import DataClient, neq
from dankpos.modules.transactions.schemas import ClearTransactionsRequest

logger = logging.getLogger(__name__)

NIL_UUID = "00000000-0000-0000-0000-000000000000"

# Auth service answers bad credentials with one of these
REJECTED_STATUSES = {400, 401, 403, 422}


class TransactionService:
    TABLE = "transactions"

    def __init__(self, db: DataClient):
        self.db = db

    async def clear_all(self, data: ClearTransactionsRequest) -> Dict[str, str]:
        """
        Delete every transaction of the shop after re-authenticating an admin
        against the shop's own auth service. The admin is signed out again
        whatever the outcome of the delete.
        """
        if not data.username or not data.password:
            raise ValidationError("Username and password are required.")

        try:
            session = await self.db.sign_in_with_password(data.username, data.password)
        except BackendError as e:
            if e.backend_status in REJECTED_STATUSES:
                logger.warning(f"Rejected admin credentials for transaction wipe: {e.message}")
                raise AuthenticationError("Invalid admin credentials.") from e
            raise

        access_token = session.get("access_token")
        if not access_token:
            raise AuthenticationError("Invalid admin credentials.")

        try:
            # The REST interface refuses an unfiltered delete
            await self.db.delete(self.TABLE, filters={"id": neq(NIL_UUID)})
        finally:
            try:
                await self.db.sign_out(access_token)
            except BackendError as e:
                logger.warning(f"Sign-out after transaction wipe failed: {e.message}")

        logger.info("All transactions deleted")
        return {"message": "All transactions deleted successfully"}
