import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    LOG_LEVEL = os.environ.get('HABIT_INSIGHTS_LOG_LEVEL', 'WARNING')
    
    # History windows requested from the store (days)
    TIMING_LOOKBACK_DAYS = int(os.environ.get('HABIT_INSIGHTS_TIMING_DAYS', 30))
    RECENT_WINDOW_DAYS = int(os.environ.get('HABIT_INSIGHTS_RECENT_DAYS', 14))
    CORRELATION_LOOKBACK_DAYS = int(os.environ.get('HABIT_INSIGHTS_CORRELATION_DAYS', 60))
    WEEKLY_REPORT_DAYS = 7
    
    # Alternate copy catalog (defaults to the bundled insight_messages.json)
    MESSAGE_CATALOG_PATH = os.environ.get('HABIT_INSIGHTS_MESSAGES')
    
    DEBUG = False
    TESTING = False

class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = os.environ.get('HABIT_INSIGHTS_LOG_LEVEL', 'DEBUG')

class ProductionConfig(Config):
    DEBUG = False

class TestingConfig(Config):
    TESTING = True
    LOG_LEVEL = 'DEBUG'
    TIMING_LOOKBACK_DAYS = 30
    RECENT_WINDOW_DAYS = 14
    CORRELATION_LOOKBACK_DAYS = 60
    MESSAGE_CATALOG_PATH = None

config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': ProductionConfig
}
