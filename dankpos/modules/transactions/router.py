from fastapi import APIRouter

from dankpos.dependencies.dbDependencies import tenant_db_dependency
from dankpos.modules.transactions.schemas import ClearTransactionsRequest
from dankpos.modules.transactions.service import TransactionService

transactions_router = APIRouter(prefix="/transactions", tags=["Transactions"])


@transactions_router.delete("/clear")
async def clear_transactions(data: ClearTransactionsRequest, db: tenant_db_dependency):
    """Wipe the shop's transaction history. Requires admin credentials in the body."""
    return await TransactionService(db).clear_all(data)
