"""Business services."""

from app.services.market_simulator import (
    AssetType,
    SUPPORTED_SYMBOLS,
    SymbolDef,
    generate_history,
    get_symbol,
    update_candle_with_tick,
)
from app.services.signal_service import SignalService

__all__ = [
    "AssetType",
    "SUPPORTED_SYMBOLS",
    "SymbolDef",
    "generate_history",
    "get_symbol",
    "update_candle_with_tick",
    "SignalService",
]
