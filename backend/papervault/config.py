import os
from dotenv import load_dotenv
load_dotenv()

def _to_bool(v: str, default=False) -> bool:
    if v is None: return default
    return str(v).strip().lower() in {"1","true","yes","y","on"}

# memory | file | contract
STORE_BACKEND = os.getenv("STORE_BACKEND", "file").strip().lower()
DATA_DIR = os.getenv("DATA_DIR", "./data/store")

INDEX_KEY = os.getenv("INDEX_KEY", "paper_keys")
RECORD_PREFIX = os.getenv("RECORD_PREFIX", "paper_")

WEB3_PROVIDER_URI = os.getenv("WEB3_PROVIDER_URI", "http://127.0.0.1:8545")
CHAIN_ID = int(os.getenv("CHAIN_ID", "31337"))
PRIVATE_KEY = os.getenv("PRIVATE_KEY", "")
REGISTRY_ADDRESS = os.getenv("REGISTRY_ADDRESS", "")

REGISTRY_ABI_PATH = os.getenv("REGISTRY_ABI_PATH", "./contracts/registry_abi.json")
REGISTRY_ABI_JSON = os.getenv("REGISTRY_ABI_JSON", "")

FN_IS_AVAILABLE = os.getenv("FN_IS_AVAILABLE", "isAvailable")
FN_GET_DATA = os.getenv("FN_GET_DATA", "getData")
FN_SET_DATA = os.getenv("FN_SET_DATA", "setData")
WAIT_FOR_RECEIPT = _to_bool(os.getenv("WAIT_FOR_RECEIPT", "true"), default=True)

REVEAL_DURATION_DAYS = int(os.getenv("REVEAL_DURATION_DAYS", "30"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))
