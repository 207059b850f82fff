"""Sample community used to seed a fresh project."""

COMMUNITY_ID = "astu_muslim_community"
COMMUNITY_NAME = "Astu Muslim Community"

USERS = [
    {"uid": "user_aminah", "name": "Aminah Saleh", "email": "aminah@example.com"},
    {"uid": "user_yusuf", "name": "Yusuf Hamdan", "email": "yusuf@example.com"},
    {"uid": "user_khadija", "name": "Khadija Rahman", "email": "khadija@example.com"},
    {"uid": "user_mohamed", "name": "Mohamed Idris", "email": "mohamed@example.com"},
    {"uid": "user_samira", "name": "Samira Bekele", "email": "samira@example.com"},
    {"uid": "user_najma", "name": "Najma Ali", "email": "najma@example.com"},
]

GROUPS = [
    {
        "id": COMMUNITY_ID,
        "name": COMMUNITY_NAME,
        "admin_uid": "user_aminah",
        "invite_code": "ASTU24",
        "is_public": True,
        "description": "Community recitation circle for Astu Muslims.",
        "member_uids": [user["uid"] for user in USERS],
    },
]

# (id, assignee uid, surah, ayat range, juz, status, has deadline)
RECITATIONS = [
    ("recitation_khadija_5", "user_khadija", "Al-Ma'idah", "1-26", 6, "ongoing", True),
    ("recitation_yusuf_15", "user_yusuf", "Al-Kahf", "1-50", 15, "pending", False),
    ("recitation_mohamed_10", "user_mohamed", "Yunus", "1-30", 11, "ongoing", False),
    ("recitation_samira_1", "user_samira", "Al-Baqarah", "1-40", 1, "pending", False),
    ("recitation_najma_30", "user_najma", "An-Naba", "1-40", 30, "pending", False),
]

ANNOUNCEMENTS = [
    {
        "id": "announcement_1",
        "author_uid": "user_aminah",
        "message": (
            "Reminder: Let us recite Surah Al-Baqarah daily. The Prophet ﷺ said "
            "the Shaytan flees from a home where it is recited."
        ),
        "is_hadith": True,
        "pinned": True,
    },
    {
        "id": "announcement_2",
        "author_uid": "user_yusuf",
        "message": (
            "Great progress this week everyone! Please update your assignment "
            "status before Maghrib."
        ),
        "is_hadith": False,
        "pinned": False,
    },
]
