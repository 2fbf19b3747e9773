from .settings import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .message_catalog import MessageCatalog, get_default_catalog

__all__ = [
    'Config',
    'DevelopmentConfig',
    'ProductionConfig',
    'TestingConfig',
    'config',
    'MessageCatalog',
    'get_default_catalog'
]
