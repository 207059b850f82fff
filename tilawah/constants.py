"""Global constants for the tilawah application."""

# Database-related constants
FIRESTORE_BATCH_LIMIT = 400

# Collection names
USERS_COLLECTION = "users"
GROUPS_COLLECTION = "groups"
RECITATIONS_COLLECTION = "recitations"
JOIN_REQUESTS_COLLECTION = "join_requests"
ANNOUNCEMENTS_COLLECTION = "announcements"

# Fields on 'users' documents
USER_DEVICE_TOKENS = "deviceTokens"
USER_SEARCH_TOKENS = "searchTokens"

# Recitation lifecycle
STATUS_PENDING = "pending"
STATUS_ONGOING = "ongoing"
STATUS_COMPLETED = "completed"
RECITATION_STATUSES = (STATUS_PENDING, STATUS_ONGOING, STATUS_COMPLETED)

# Join request lifecycle
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"
JOIN_REQUEST_STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED)

# Number of juz in a full Quran completion
JUZ_COUNT = 30

# Push topics
GROUP_TOPIC_PREFIX = "group_"

# Fallback display name when a member name is missing
DEFAULT_MEMBER_NAME = "A member"

# Notification actions carried in the data payload
ACTION_RECITATION_ASSIGNED = "recitation_assigned"
ACTION_RECITATION_STATUS = "recitation_status"
ACTION_RECITATION_COMPLETED = "recitation_completed"
ACTION_QURAN_COMPLETED = "quran_completed"
ACTION_ADMIN_ASSIGNED = "admin_assigned"
ACTION_JOIN_REQUEST_CREATED = "join_request_created"
ACTION_JOIN_REQUEST_APPROVED = "join_request_approved"
ACTION_JOIN_REQUEST_REJECTED = "join_request_rejected"
ACTION_WEEKLY_RESET = "weekly_reset"

# Scheduling
DEFAULT_TIMEZONE = "UTC"
DEFAULT_DISPATCH_MAX_WORKERS = 10
