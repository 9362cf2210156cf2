from vacant.db.models.types.utcdatetime import UTCDateTime

__all__ = ('UTCDateTime', )
