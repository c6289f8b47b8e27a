"""Services for inventory business logic."""

from .exceptions import (
    InventoryServiceError,
    InvalidQuantityError,
    InventoryLineNotFoundError,
    InsufficientStockError,
    StockCountInProgressError,
    StockCountClosedError,
    StockCountItemError,
)
from .stock_levels import receive_stock, remove_stock, set_stock_levels, low_stock
from .stock_counts import (
    start_stock_count,
    save_count_progress,
    discrepancy_report,
    finalize_stock_count,
)

__all__ = [
    # Exceptions
    'InventoryServiceError',
    'InvalidQuantityError',
    'InventoryLineNotFoundError',
    'InsufficientStockError',
    'StockCountInProgressError',
    'StockCountClosedError',
    'StockCountItemError',
    # Services
    'receive_stock',
    'remove_stock',
    'set_stock_levels',
    'low_stock',
    'start_stock_count',
    'save_count_progress',
    'discrepancy_report',
    'finalize_stock_count',
]
