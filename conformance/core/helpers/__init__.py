from .dates import parse_iso_datetime
from .feeds import RPDE_ITEM_STATES, is_rpde_feed
from .precision import get_precision

__all__ = ["RPDE_ITEM_STATES", "get_precision", "is_rpde_feed", "parse_iso_datetime"]
