"""
Site settings - seeded key/value store updated in atomic batches.
"""

from cms.kernel.settings.settings_manager import (
    BatchResult,
    DEFAULT_SETTINGS,
    SettingsTransactionManager,
    seed_default_settings,
)

__all__ = [
    "BatchResult",
    "DEFAULT_SETTINGS",
    "SettingsTransactionManager",
    "seed_default_settings",
]
