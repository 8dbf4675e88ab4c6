from mastery.models import CATEGORIES

APP_TITLE = "Self-Mastery Tracker"

CATEGORY_COLORS = {
    "morning": "#F2C14E",
    "productivity": "#3772A6",
    "self-development": "#8E6CC2",
    "wellness": "#5BA37A",
    "evening": "#D9825B",
}
CATEGORY_OPTIONS = list(CATEGORIES)

PRIMARY_COLOR = "#6C5CE7"
TREND_COLOR = "#3772A6"

TAB_OPTIONS = [
    "Daily Tasks",
    "Weekly View",
    "Progress",
    "Reports",
    "Settings",
]

REPORT_OPTIONS = {
    "completion": "Task completion ranking",
    "category": "Category analysis",
    "trend": "30-day trend",
}
