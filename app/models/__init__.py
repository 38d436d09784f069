from .profile import Profile
from .pet import Pet, PetGender
from .reminder import Reminder, ReminderType, Frequency
from .notification import NotificationLedgerEntry
