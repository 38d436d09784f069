"""
Application Constants

This module contains all magic strings and numbers used throughout the application.
Centralizing constants makes the codebase more maintainable and easier to update.
"""

# ============================================================================
# Scheduler Constants
# ============================================================================

# Job store holding pending local notifications, kept apart from any other jobs
NOTIFICATION_JOBSTORE = "notifications"
NOTIFICATION_JOBS_KEY = "pet_care:notification_jobs"
NOTIFICATION_RUN_TIMES_KEY = "pet_care:notification_run_times"

# ============================================================================
# Backend Retry Constants
# ============================================================================

# Retry settings for transient Reminder Store / Ledger failures
BACKEND_MAX_RETRIES = 3
BACKEND_RETRY_DELAY_BASE_SECONDS = 0.5  # Exponential backoff: 0.5, 1, 2 seconds

# ============================================================================
# Notification Constants
# ============================================================================

# Display behavior applied by the default notification handler
DEFAULT_SHOW_ALERT = True
DEFAULT_PLAY_SOUND = True
DEFAULT_SET_BADGE = True

# Telegram message limits
MAX_TELEGRAM_MESSAGE_LENGTH = 4096

# ============================================================================
# Database Constants
# ============================================================================

# Pagination
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
