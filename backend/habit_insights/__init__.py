import logging

from habit_insights.config.settings import config
from habit_insights.config.message_catalog import MessageCatalog, get_default_catalog
from habit_insights.services.engine import HabitAnalyticsEngine
from habit_insights.services.history_store import HistoryStore, InMemoryHistoryStore

__version__ = '0.1.0'

logging.getLogger(__name__).addHandler(logging.NullHandler())


def create_engine(store: HistoryStore = None, config_name: str = 'default') -> HabitAnalyticsEngine:
    """Engine factory pattern"""
    config_class = config[config_name]
    
    logging.getLogger(__name__).setLevel(config_class.LOG_LEVEL)
    
    if config_class.MESSAGE_CATALOG_PATH:
        catalog = MessageCatalog(config_class.MESSAGE_CATALOG_PATH)
    else:
        catalog = get_default_catalog()
    
    if store is None:
        store = InMemoryHistoryStore()
    
    return HabitAnalyticsEngine.from_config(store, config_class, catalog)


__all__ = ['create_engine', 'HabitAnalyticsEngine', 'HistoryStore', 'InMemoryHistoryStore']
