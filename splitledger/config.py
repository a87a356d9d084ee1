import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./splitledger.db")

    # Every settlement figure is expressed in this currency
    BASE_CURRENCY = os.environ.get("BASE_CURRENCY", "THB").upper()

    # Live FX provider, quoted as "1 BASE = x CCY"
    FX_API_URL = os.environ.get("FX_API_URL", "https://open.er-api.com/v6/latest/THB")
    FX_TIMEOUT_SECONDS = float(os.environ.get("FX_TIMEOUT_SECONDS", 5))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

config = Config()
