from fastapi import APIRouter
from .. import schemas
from ..config import config
from ..services.rates import fetch_live_rates

router = APIRouter()

@router.get("/live", response_model=schemas.RatesOut)
def live_rates():
    return {"base": config.BASE_CURRENCY, "rates": fetch_live_rates()}
