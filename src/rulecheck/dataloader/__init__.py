from rulecheck.dataloader.config_loader import ConfigLoader
from rulecheck.dataloader.items_loader import ItemsLoader
from rulecheck.dataloader.postload_handler import LoadResultHandler
from rulecheck.dataloader.types import LoadResult

__all__ = ["ConfigLoader", "ItemsLoader", "LoadResult", "LoadResultHandler"]
