# Defaults written to a fresh config file, in declaration order.
DEFAULT_CATEGORY_RULES = [
    ("documents/pdf", ["pdf", "doc", "docx", "txt"]),
    ("images/photos", ["jpg", "jpeg", "png", "webp"]),
    ("presentations/ppt", ["ppt", "pptx", "odp"]),
    ("archives/all", ["zip", "rar", "7z", "tar", "gz"]),
]

# Flat "exe" entry kept in the config file; it is not a category rule.
EXE_KEY = "exe"
DEFAULT_EXE_ENTRY = ["exe", "msi"]

DEFAULT_OTHER_FOLDER = "others"

# Never relocated while skip_executables is on.
EXECUTABLE_EXTENSIONS = {"exe", "lnk"}

DATE_FORMAT = "%d-%m-%Y"
REPORT_NAME = "organizer_report-{date}.txt"
