"""
Test settings for outlet_server project.
"""

from decimal import Decimal

from .base import *

# Use SQLite for testing
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}


# Disable migrations for faster testing
class DisableMigrations:
    def __contains__(self, item):
        return True

    def __getitem__(self, item):
        return None


MIGRATION_MODULES = DisableMigrations()

# Use faster password hasher for testing
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

# Disable logging during tests
LOGGING_CONFIG = None

# Cache configuration for testing
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

# Fixed loyalty defaults so tests do not depend on the environment
LOYALTY_DEFAULTS = {
    'IS_ENABLED': True,
    'POINTS_PER_ITEM': Decimal('1'),
    'POINT_VALUE': Decimal('1000'),
    'MIN_POINTS_TO_REDEEM': 10,
    'MAX_POINTS_PER_TRANSACTION': None,
    'MAX_REDEMPTION_PERCENTAGE': 50,
}
ORDER_TAX_RATE = Decimal('0.11')
