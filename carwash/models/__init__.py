# Studio Xpress car wash — Database Models
# Import all models here for SQLAlchemy discovery

from carwash.models.storage_slot import StorageSlot   # noqa
