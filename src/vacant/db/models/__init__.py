from vacant.db.models.base import ORMBase
from vacant.db.models.reservation import ReservationRecord

__all__ = ('ORMBase', 'ReservationRecord')
