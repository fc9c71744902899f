from careshift.models.user import User, UserRole
from careshift.models.location import Location
from careshift.models.shift import Shift, ShiftStatus
