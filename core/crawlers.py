"""Built-in crawler and static-asset lists."""

PRERENDER_SERVICE_URL = "http://service.prerender.io/"

X_PRERENDER_TOKEN = "X-Prerender-Token"
X_BUFFERBOT = "X-Bufferbot"
ESCAPED_FRAGMENT = "_escaped_fragment_"

# googlebot, yahoo, and bingbot are not in this list because
# we support _escaped_fragment_ and want to ensure people aren't
# penalized for cloaking.
CRAWLER_USER_AGENTS: tuple[str, ...] = (
    "baiduspider",
    "bufferbot",
    "developers.google.com/+/web/snippet",
    "embedly",
    "facebookexternalhit",
    "linkedinbot",
    "outbrain",
    "pinterest",
    "quora link preview",
    "rogerbot",
    "showyoubot",
    "slackbot",
    "twitterbot",
)

EXTENSIONS_TO_IGNORE: tuple[str, ...] = (
    ".ai",
    ".avi",
    ".css",
    ".dat",
    ".dmg",
    ".doc",
    ".exe",
    ".flv",
    ".gif",
    ".ico",
    ".iso",
    ".jpeg",
    ".jpg",
    ".js",
    ".less",
    ".m4a",
    ".m4v",
    ".mov",
    ".mp3",
    ".mp4",
    ".mpeg",
    ".mpg",
    ".pdf",
    ".png",
    ".ppt",
    ".psd",
    ".rar",
    ".rss",
    ".swf",
    ".tif",
    ".torrent",
    ".txt",
    ".wav",
    ".wmv",
    ".xls",
    ".xml",
    ".zip",
)
