from adventure_api.models.user import User
from adventure_api.models.otp import Otp
from adventure_api.models.item import Item
from adventure_api.models.booking import ItemBooking, ItemBookingLine
from adventure_api.models.achievement import UserAchievement

__all__ = ["User", "Otp", "Item", "ItemBooking", "ItemBookingLine", "UserAchievement"]
