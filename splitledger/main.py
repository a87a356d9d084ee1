import logging
from fastapi import FastAPI
from .config import config
from .database import init_db
from .routers import users, groups, rates, expenses, shares, payments, settlements, balances

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = FastAPI(title="Split Ledger API", version="1.0.0")

init_db()

app.include_router(users.router, prefix="/users", tags=["users"])
app.include_router(groups.router, prefix="/groups", tags=["groups"])
app.include_router(rates.router, prefix="/rates", tags=["rates"])
app.include_router(expenses.router, prefix="/expenses", tags=["expenses"])
app.include_router(shares.router, tags=["shares"])
app.include_router(payments.router, prefix="/expenses/{expense_id}/payments", tags=["payments"])
app.include_router(settlements.router, prefix="/expenses/{expense_id}/settlements", tags=["settlements"])
app.include_router(balances.router, prefix="/users/{user_id}/balances", tags=["balances"])

@app.get("/")
def health():
    return {"status": "ok"}
