"""Default heuristic tables.

These are data, not logic: every table can be overridden from
``config/heuristics.yaml`` (see :mod:`optimuspii.config`). Bump
``HEURISTICS_VERSION`` whenever a default value changes so that score
differences between releases can be traced back to the table revision.
"""

from __future__ import annotations

HEURISTICS_VERSION = "1.3"

DEFAULT_TRUSTED_DOMAINS: list[str] = [
    "google.com",
    "google.co",
    "microsoft.com",
    "apple.com",
    "amazon.com",
    "facebook.com",
    "instagram.com",
    "twitter.com",
    "youtube.com",
    "linkedin.com",
    "github.com",
    "stackoverflow.com",
    "netflix.com",
    "spotify.com",
    "yahoo.com",
    "bing.com",
    "baidu.com",
    "wikipedia.org",
    "cloudflare.com",
    "akamai.net",
]

DEFAULT_SUSPICIOUS_KEYWORDS: list[str] = [
    "login",
    "signin",
    "verify",
    "secure",
    "account",
    "password",
    "billing",
    "confirm",
    "update",
    "auth",
    "authenticate",
    "wallet",
    "validation",
    "suspended",
    "unusual",
    "verify-account",
    "secure-login",
    "service",
    "customer",
    "recover",
    "unlock",
    "helpdesk",
    "activity",
    "support",
    "security",
    "authentication",
    "authorize",
    "verification",
    "access",
    "submit",
    "form",
    "limited",
    "alert",
    "protection",
    "appleid",
    "paypal",
    "payment",
    "webscr",
    "cardservice",
    "resolve",
    "limit",
    "notification",
    "banking",
    "privacy",
    "identity",
    "purchase",
    "quick",
]

DEFAULT_TARGETED_BRANDS: list[str] = [
    "paypal",
    "apple",
    "google",
    "microsoft",
    "amazon",
    "facebook",
    "instagram",
    "netflix",
    "bank",
    "wells",
    "fargo",
    "chase",
    "citi",
    "amex",
    "coinbase",
    "crypto",
    "spotify",
    "adobe",
    "dropbox",
    "linkedin",
    "twitter",
    "steam",
    "github",
    "yahoo",
    "outlook",
    "office",
    "proton",
    "gmail",
    "icloud",
]

DEFAULT_RISK_TLDS: list[str] = [
    "xyz",
    "top",
    "club",
    "live",
    "online",
    "site",
    "store",
    "info",
    "icu",
    "vip",
    "app",
    "buzz",
    "su",
    "tk",
    "ml",
    "ga",
    "cf",
    "gq",
    "website",
]

# Weight per feature. Keys use the feature names of URLFeatures.as_dict().
DEFAULT_FEATURE_WEIGHTS: dict[str, float] = {
    "urlLength": 0.01,
    "domainLength": 0.05,
    "pathLength": 0.00,
    "hasSubdomain": 0.06,
    "tldIsRisky": 0.15,
    "domainHasDash": 0.10,
    "specialCharCount": 0.04,
    "digitCount": 0.15,
    "hasIPAddress": 0.30,
    "hasSuspiciousKeywords": 0.15,
    "queryParamCount": 0.005,
    "domainEntropyScore": 0.03,
    "urlEntropyScore": 0.005,
    "domainTokenCount": 0.04,
    "pathTokenCount": 0.005,
    "avgTokenLength": 0.03,
    "hexPatternCount": 0.09,
    "nonAsciiCharCount": 0.20,
    "consecutiveSpecialChars": 0.04,
    "trigramSuspiciousness": 0.07,
    "brandSimilarity": 0.25,
    "isDomainTrusted": 0.15,
    "isHttp": 0.20,
    "hasSuspiciousPath": 0.20,
}

DEFAULT_THRESHOLD = 0.6
DEFAULT_SENSITIVITY = 60

DEFAULT_SUSPICIOUS_PATH_SEGMENTS: list[str] = [
    "admin",
    "login",
    "signin",
    "secure",
    "auth",
    "account",
    "update",
    "confirm",
    "verify",
    "password",
    "credential",
    "webscr",
]

DEFAULT_SUSPICIOUS_SCRIPT_EXTENSIONS: list[str] = ["php", "aspx", "jsp", "cgi", "pl"]

# Known product/login names that stand in for a brand.
DEFAULT_BRAND_VARIATIONS: dict[str, list[str]] = {
    "apple": ["appleid", "apple-id", "icloud", "itunes"],
    "microsoft": ["msn", "outlook", "office365", "ms-online"],
    "google": ["gmail", "googlemail", "googleaccount"],
    "paypal": ["paypal-secure", "paypalverify"],
    "amazon": ["amazonaccount", "aws-amazon", "amazon-aws"],
    "facebook": ["fb-login", "facebook-secure"],
    "instagram": ["ig-verify", "insta-secure"],
}

# Words that, glued to a brand name, make a typical phishing host label.
DEFAULT_BRAND_SUFFIX_WORDS: list[str] = [
    "verify",
    "secure",
    "login",
    "auth",
    "account",
    "id",
    "confirm",
]

# Brand token in the host + credential-flow path on a host the brand does not own.
DEFAULT_BRAND_PHISHING_PATTERNS: list[dict] = [
    {"brand": "apple", "patterns": ["appleid", "icloud"], "paths": ["account", "verify", "signin"]},
    {"brand": "paypal", "patterns": ["paypal"], "paths": ["secure", "confirm", "login"]},
    {"brand": "microsoft", "patterns": ["office", "outlook"], "paths": ["login", "account", "verify"]},
    {"brand": "amazon", "patterns": ["amazon"], "paths": ["signin", "account", "verify"]},
]

DEFAULT_SUSPICIOUS_TRIGRAMS: list[str] = [
    "sec", "log", "sig", "ver", "acc", "pwd", "pay", "upd",
    "con", "cli", "onl", "inj", "pep", "cha", "otp", "pin",
    "ssn", "ssw", "scr", "acn", "lin", "pro", "uth", "dat",
]

DEFAULT_SAFE_TRIGRAMS: list[str] = [
    "com", "org", "gov", "edu", "net", "www", "htm", "app",
    "api", "cdn", "img", "css", "jsp", "xml", "rss", "svg",
    "png", "jpg", "gif", "pdf", "doc", "txt", "zip",
]

DEFAULT_SEARCH_ENGINES: list[str] = [
    "google.com",
    "google.co",
    "bing.com",
    "yahoo.com",
    "duckduckgo.com",
    "baidu.com",
    "yandex.com",
    "search.brave.com",
]

# ASCII letter -> characters rendered almost identically in common fonts.
DEFAULT_HOMOGLYPHS: dict[str, list[str]] = {
    "a": ["а", "ạ", "ä", "á", "à", "ą"],
    "b": ["ḅ", "ḃ", "ь", "б"],
    "c": ["с", "ċ", "ç"],
    "d": ["ḍ", "ḋ", "ď", "ԁ"],
    "e": ["е", "ē", "ĕ", "ė", "ę", "ё", "è", "é", "ê", "ë"],
    "g": ["ģ", "ğ", "ġ", "ɡ"],
    "h": ["ḥ", "ḣ", "ȟ"],
    "i": ["і", "ї", "ı", "ī", "ĭ", "į", "ì", "í", "î", "ï"],
    "j": ["ĵ", "ј"],
    "k": ["ķ", "ḳ", "ḱ", "к"],
    "l": ["ļ", "ḹ", "ḷ", "ḻ"],
    "m": ["м", "ṃ", "ṁ"],
    "n": ["ņ", "ṇ", "ṅ", "ǹ", "ñ", "ո"],
    "o": ["о", "ō", "ŏ", "ȯ", "ő", "ọ", "ỏ", "ơ", "ö", "ô", "ò", "ó"],
    "p": ["р", "ṗ", "ṕ"],
    "r": ["ŕ", "ř", "ŗ", "ṛ", "ṟ"],
    "s": ["ş", "ŝ", "ś", "ṣ", "ṡ", "š", "ѕ"],
    "t": ["ţ", "ț", "ṭ", "ṫ"],
    "u": ["μ", "υ", "ū", "ŭ", "ů", "ű", "ų", "ũ", "ṳ", "ú", "ù", "û", "ü", "ս"],
    "v": ["ν", "ṿ", "ṽ"],
    "w": ["ŵ", "ẁ", "ẃ", "ẅ", "ω"],
    "x": ["х", "ẋ", "ẍ"],
    "y": ["у", "ý", "ÿ", "ŷ", "ẏ", "ỵ", "ỳ"],
    "z": ["ż", "ẓ", "ẕ", "ź", "ž"],
}

# PII patterns shipped with the extension. Sources are browser-regex
# compatible; see optimuspii.patterns.compiler for the translation rules.
DEFAULT_PATTERNS: list[dict] = [
    {
        "id": "email-address",
        "name": "Email Address",
        "pattern": r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}",
        "enabled": True,
        "isDefault": True,
        "isGlobal": True,
        "sampleData": "example@redacted.com",
    },
    {
        "id": "credit-card-number",
        "name": "Credit Card Number",
        "pattern": (
            r"(?:4[0-9]{12}(?:[0-9]{3})?|5[1-5][0-9]{14}|3[47][0-9]{13}"
            r"|3(?:0[0-5]|[68][0-9])[0-9]{11}|6(?:011|5[0-9]{2})[0-9]{12}"
            r"|(?:2131|1800|35\d{3})\d{11}|(?:(?:5[0678]\d\d|6304|6390|67\d\d)\d{8,15}))"
            r"([-\s]?[0-9]{4})?"
        ),
        "enabled": True,
        "isDefault": True,
        "isGlobal": True,
        "sampleData": "4111-1111-1111-1111",
    },
    {
        "id": "phone-number",
        "name": "Phone Number",
        "pattern": r"(?:\+\d{1,3}[\s-]?)?\(?(?:\d{3,4})\)?[\s.-]?\d{3}[\s.-]?\d{3,4}",
        "enabled": True,
        "isDefault": True,
        "isGlobal": True,
        "sampleData": "(555) 555-5555",
    },
    {
        "id": "social-security-number",
        "name": "Social Security Number",
        "pattern": (
            r"\b(?!000|666|9\d{2})([0-8]\d{2}|7([0-6]\d|7[012]))([-\s]?)(?!00)\d\d\3(?!0000)\d{4}\b"
        ),
        "enabled": True,
        "isDefault": True,
        "isGlobal": True,
        "sampleData": "123-45-6789",
    },
    {
        "id": "passport-number",
        "name": "Passport Number",
        "pattern": r"\b[A-Z]{1,2}[0-9]{6,9}\b",
        "enabled": True,
        "isDefault": True,
        "isGlobal": True,
        "sampleData": "A1234567",
    },
    {
        "id": "aadhaar-number",
        "name": "Aadhaar Number",
        "pattern": r"\b\d{4}[\s-]?\d{4}[\s-]?\d{4}\b",
        "enabled": True,
        "isDefault": True,
        "isGlobal": True,
        "sampleData": "1234 5678 9012",
    },
    {
        "id": "pan-card",
        "name": "PAN Card",
        "pattern": r"\b[A-Z]{5}[0-9]{4}[A-Z]{1}\b",
        "enabled": True,
        "isDefault": True,
        "isGlobal": True,
        "sampleData": "ABCDE1234F",
    },
    {
        "id": "password",
        "name": "Password",
        "pattern": (
            r"\b(?=\S*[0-9])(?=\S*[a-z])(?=\S*[A-Z])"
            r"(?=\S*[!@#$%^&*()_\-+={}\[\]\\|:;'\",.<>/?])\S{8,32}\b"
        ),
        "enabled": True,
        "isDefault": True,
        "isGlobal": True,
        "sampleData": "P@ssw0rd123!",
    },
]

DEFAULT_BLOCKED_EXTENSIONS: list[str] = [".py", ".cpp"]

# Used when a file policy has an empty blocklist.
FALLBACK_BLOCKED_EXTENSIONS: list[str] = [
    ".js", ".jsx", ".ts", ".tsx",
    ".php", ".py", ".rb", ".env",
    ".config", ".yml", ".yaml", ".json",
    ".sh", ".bash", ".zsh", ".conf",
    ".htaccess", ".htpasswd",
]

DEFAULT_POLICIES: list[dict] = [
    {
        "policyId": "default-paste-policy",
        "policyName": "Default Paste Protection",
        "policyType": "pasteProtection",
        "enabled": True,
        "policyConfig": {
            "mode": "interactive",
            "enabledPatterns": [p["id"] for p in DEFAULT_PATTERNS],
        },
    },
    {
        "policyId": "default-file-upload-policy",
        "policyName": "Default File Upload Protection",
        "policyType": "fileUploadProtection",
        "enabled": True,
        "policyConfig": {
            "mode": "interactive",
            "blockedExtensions": list(DEFAULT_BLOCKED_EXTENSIONS),
        },
    },
]

DEFAULT_DOMAIN_MAPPINGS: list[dict] = [
    {
        "domainPattern": "*://chatgpt.com/*",
        "appliedPolicies": ["default-paste-policy", "default-file-upload-policy"],
    },
    {
        "domainPattern": "*://claude.ai/*",
        "appliedPolicies": ["default-paste-policy", "default-file-upload-policy"],
    },
    {
        "domainPattern": "*://chat.mistral.ai/*",
        "appliedPolicies": ["default-paste-policy", "default-file-upload-policy"],
    },
]
