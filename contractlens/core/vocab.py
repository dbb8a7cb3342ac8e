"""Default dictionaries for the contractlens pipeline.

These tables seed ``Lexicon.default()``. They are plain module-level data;
nothing reads them at query time except through a Lexicon snapshot.
"""

from __future__ import annotations

# ============================================================================
# Typo correction
# ============================================================================

# Misspellings of domain vocabulary -> canonical word
DOMAIN_CORRECTIONS: dict[str, str] = {
    # contract
    "contarct": "contract",
    "contrct": "contract",
    "contrat": "contract",
    "contraact": "contract",
    "contractt": "contract",
    "contracct": "contract",
    "contarcts": "contracts",
    "contrcts": "contracts",
    # customer / client
    "custmer": "customer",
    "cusotmer": "customer",
    "customr": "customer",
    "customar": "customer",
    "clinet": "client",
    "cleint": "client",
    "cilent": "client",
    # actions
    "retreive": "retrieve",
    "retrive": "retrieve",
    "retreave": "retrieve",
    "serach": "search",
    "seach": "search",
    "searh": "search",
    "updat": "update",
    "updaet": "update",
    "delet": "delete",
    "deleet": "delete",
    # status
    "activ": "active",
    "actve": "active",
    "inactiv": "inactive",
    "inactve": "inactive",
    "expird": "expired",
    "expir": "expire",
    "expiry": "expire",
    # billing
    "invoic": "invoice",
    "invioce": "invoice",
    "paymet": "payment",
    "paymnt": "payment",
    "paymetn": "payment",
    "accont": "account",
    "acount": "account",
    "accout": "account",
    "addres": "address",
    "adress": "address",
    "adres": "address",
    # parts
    "faild": "failed",
    "falied": "failed",
    "failled": "failed",
    "prts": "parts",
    "prt": "part",
    "parst": "parts",
    "componet": "component",
    "componets": "components",
    "compnent": "component",
    "manufactuer": "manufacturer",
    "manufacter": "manufacturer",
    "warrenty": "warranty",
    "warrantee": "warranty",
    "datashet": "datasheet",
    "compatable": "compatible",
    "specificaton": "specification",
    "specifcations": "specifications",
    "defectiv": "defective",
}

# Common typos with one or more candidate corrections (first = default)
TYPO_SUGGESTIONS: dict[str, tuple[str, ...]] = {
    "teh": ("the",),
    "adn": ("and",),
    "fo": ("of", "for"),
    "ot": ("to", "of"),
    "si": ("is",),
    "cna": ("can",),
    "yuo": ("you",),
    "taht": ("that",),
    "whta": ("what",),
    "hwo": ("how",),
    "whne": ("when",),
    "whre": ("where",),
    "wihch": ("which",),
    "thier": ("their",),
    "recieve": ("receive",),
    "seperate": ("separate",),
    "occured": ("occurred",),
    "definately": ("definitely",),
    "neccessary": ("necessary",),
    "managment": ("management",),
    "buisness": ("business",),
    "reccomend": ("recommend",),
    "proffesional": ("professional",),
    "sucessful": ("successful",),
}

# Short forms expanded by the typo corrector
TYPO_ABBREVIATIONS: dict[str, str] = {
    "cont": "contract",
    "cust": "customer",
    "info": "information",
    "num": "number",
    "addr": "address",
    "tel": "telephone",
    "ph": "phone",
    "acct": "account",
    "inv": "invoice",
    "qty": "quantity",
    "amt": "amount",
    "desc": "description",
    "stat": "status",
    "exp": "expire",
    "upd": "update",
    "del": "delete",
    "mod": "modify",
    "mgmt": "management",
    "dept": "department",
    "org": "organization",
    "corp": "corporation",
    "ltd": "limited",
    "inc": "incorporated",
}

# Compound tokens ("due_date") and bigram keys ("prev_token" / "token_next")
CONTEXTUAL_CORRECTIONS: dict[str, str] = {
    "contract_number": "contract number",
    "customer_info": "customer information",
    "payment_status": "payment status",
    "account_details": "account details",
    "invoice_date": "invoice date",
    "due_date": "due date",
    "expiry_date": "expiry date",
    "start_date": "start date",
    "end_date": "end date",
    "part_number": "part number",
    "due_dte": "date",
    "start_dte": "date",
    "end_dte": "date",
    "contract_numbr": "number",
    "part_numbr": "number",
    "customer_nme": "name",
}

_BUSINESS_WORDS = (
    "contract", "customer", "client", "account", "invoice", "payment", "active",
    "inactive", "expired", "expire", "pending", "approved", "rejected", "cancelled",
    "terminated", "renewed", "extended", "modified", "search", "find", "get",
    "retrieve", "update", "delete", "add", "modify", "create", "remove", "change",
    "edit", "view", "display", "show", "information", "details", "status", "number",
    "address", "phone", "telephone", "email", "date", "amount", "quantity",
    "description", "detail", "details", "name", "id", "type", "category", "department", "organization",
    "company", "corporation", "limited", "incorporated", "business", "management",
    "manager", "employee", "staff", "team", "group", "project", "task", "assignment",
    "deadline", "schedule", "meeting", "report", "document", "file", "record",
    "database", "system", "agreement", "deal", "user", "person", "bill", "money",
    "state", "condition", "rep", "representative", "expiry", "due", "start", "end",
)

_PARTS_WORDS = (
    "part", "failed", "failure", "defective", "broken", "issue", "problem",
    "component", "specification", "specifications", "spec", "datasheet",
    "manufacturer", "stock", "compatible", "warranty", "product", "list",
    "inventory", "supplier", "vendor", "serial", "model", "price",
)

_COMMON_WORDS = (
    "show", "display", "list", "all", "by", "with", "for", "from", "to", "what",
    "when", "where", "how", "who", "which", "why", "can", "could", "would",
    "should", "will", "shall", "may", "might", "must", "need", "want", "like",
    "have", "has", "had", "is", "are", "was", "were", "been", "being", "do", "does",
    "did", "done", "doing", "go", "goes", "went", "gone", "going", "come", "comes",
    "came", "coming", "see", "saw", "seen", "seeing", "know", "knew", "known",
    "knowing", "think", "thought", "thinking", "say", "said", "saying", "tell",
    "told", "telling", "ask", "asked", "asking", "give", "gave", "given", "giving",
    "take", "took", "taken", "taking", "make", "made", "making", "work", "worked",
    "working", "help", "helped", "helping", "use", "used", "using", "the", "a",
    "an", "and", "or", "but", "if", "then", "else", "not", "no", "yes", "ok",
    "okay", "please", "thank", "thanks", "sorry", "excuse", "hello", "hi", "bye",
    "goodbye", "good", "bad", "best", "better", "worse", "worst", "new", "old",
    "first", "last", "next", "previous", "current", "recent", "latest", "early",
    "late", "now", "today", "tomorrow", "yesterday", "week", "month", "year", "day",
    "time", "hour", "minute", "second", "morning", "afternoon", "evening", "night",
    "here", "there", "everywhere", "somewhere", "nowhere", "this", "that", "these",
    "those", "my", "your", "his", "her", "its", "our", "their", "me", "you", "him",
    "us", "them", "myself", "yourself", "himself", "herself", "itself",
    "ourselves", "themselves", "i", "it", "we", "they", "he", "she", "of", "in",
    "on", "at", "as", "be", "about", "any", "each", "every", "some", "more",
    "most", "many", "much", "one", "two", "three", "ready", "open", "closed",
    "me", "also", "only", "just", "into", "out", "up", "down", "over", "under",
)

_GENERAL_WORDS = (
    "contact", "call", "send", "reply", "message", "order", "review", "approve",
    "approval", "renew", "renewal", "expiration", "overdue", "balance", "total",
    "cost", "fee", "charge", "quote", "sign", "terms", "party", "shipping",
    "delivery", "ship", "am", "than", "so", "got", "let", "again", "already",
    "still", "yet", "very", "too", "well", "other", "another", "same", "such",
    "own", "both", "few", "less", "least", "lot", "lots", "kind", "sort", "way",
    "thing", "something", "anything", "nothing", "everything", "someone",
    "anyone", "everyone", "nobody", "everybody", "because", "while", "until",
    "after", "before", "since", "during", "without", "within", "between",
    "through", "across", "against", "among", "around", "behind", "below",
    "above", "near", "off", "per", "via", "regarding", "according", "instead",
    "despite", "given", "note", "soon", "later", "ago", "always", "never",
    "often", "sometimes", "usually", "maybe", "perhaps", "sure", "right",
    "wrong", "true", "false", "high", "low", "big", "small", "large", "long",
    "short", "full", "empty", "free", "paid", "unpaid", "due", "past", "future",
    "plan", "plans", "history", "result", "outcome", "process", "office", "bank",
    "card", "credit", "debit", "tax", "discount", "check", "confirm", "cancel",
    "close", "set", "put", "keep", "find", "look", "read", "write", "sent",
    "written", "ordered", "received", "shipped", "signed", "expiring",
    "welcome", "fine", "great", "nice", "happy", "sad", "angry", "mr", "mrs",
    "ms", "dr", "prof", "name", "names", "address", "city", "country", "zip",
    "code", "reference", "ticket", "case", "transaction", "receipt", "value",
    "quantity", "unit", "units", "item", "items", "service", "services",
    "support", "help", "request", "question", "answer", "problem", "issue",
    "fix", "repair", "replace", "return", "refund", "exchange", "available",
    "unavailable", "currently", "recently", "yes", "no", "not", "none",
)

VALID_WORDS: frozenset[str] = frozenset(_BUSINESS_WORDS + _PARTS_WORDS + _COMMON_WORDS + _GENERAL_WORDS)

# Relative usage frequency; unlisted words default to DEFAULT_WORD_FREQUENCY
WORD_FREQUENCY: dict[str, float] = {
    "contract": 0.95,
    "customer": 0.90,
    "account": 0.85,
    "payment": 0.80,
    "invoice": 0.75,
    "information": 0.70,
    "status": 0.65,
    "number": 0.60,
    "search": 0.55,
    "update": 0.50,
    "active": 0.45,
    "expired": 0.40,
    "pending": 0.35,
    "approved": 0.30,
    "details": 0.25,
    "parts": 0.50,
    "part": 0.50,
    "failed": 0.45,
    "the": 1.0,
    "and": 0.98,
    "of": 0.96,
    "to": 0.94,
    "a": 0.92,
    "is": 0.90,
    "for": 0.88,
    "with": 0.86,
    "by": 0.84,
    "from": 0.82,
}

DEFAULT_WORD_FREQUENCY = 0.1

# Words in the same cluster boost each other when picking a typo suggestion
SEMANTIC_CLUSTERS: tuple[frozenset[str], ...] = (
    frozenset({"contract", "agreement", "deal", "number", "id"}),
    frozenset({"customer", "client", "account", "user", "person"}),
    frozenset({"payment", "invoice", "bill", "amount", "money"}),
    frozenset({"status", "state", "condition", "active", "inactive"}),
)

# QWERTY neighbours of each key
KEYBOARD_ADJACENCY: dict[str, str] = {
    "q": "wa",
    "w": "qeas",
    "e": "wrds",
    "r": "etdf",
    "t": "ryfg",
    "y": "tugh",
    "u": "yihj",
    "i": "uojk",
    "o": "ipkl",
    "p": "ol",
    "a": "qwsz",
    "s": "awedxz",
    "d": "serfcx",
    "f": "drtgvc",
    "g": "ftyhbv",
    "h": "gyujnb",
    "j": "huikmn",
    "k": "jiolm",
    "l": "kop",
    "z": "asx",
    "x": "zsdc",
    "c": "xdfv",
    "v": "cfgb",
    "b": "vghn",
    "n": "bhjm",
    "m": "njk",
}

# ============================================================================
# Query normalization
# ============================================================================

CONTRACTIONS: dict[str, str] = {
    "ain't": "am not",
    "aren't": "are not",
    "can't": "cannot",
    "couldn't": "could not",
    "didn't": "did not",
    "doesn't": "does not",
    "don't": "do not",
    "hadn't": "had not",
    "hasn't": "has not",
    "haven't": "have not",
    "he'd": "he would",
    "he'll": "he will",
    "he's": "he is",
    "i'd": "i would",
    "i'll": "i will",
    "i'm": "i am",
    "i've": "i have",
    "isn't": "is not",
    "it'd": "it would",
    "it'll": "it will",
    "it's": "it is",
    "let's": "let us",
    "shouldn't": "should not",
    "that's": "that is",
    "there's": "there is",
    "they'd": "they would",
    "they'll": "they will",
    "they're": "they are",
    "they've": "they have",
    "wasn't": "was not",
    "we'd": "we would",
    "we'll": "we will",
    "we're": "we are",
    "we've": "we have",
    "weren't": "were not",
    "what's": "what is",
    "where's": "where is",
    "who's": "who is",
    "won't": "will not",
    "wouldn't": "would not",
    "you'd": "you would",
    "you'll": "you will",
    "you're": "you are",
    "you've": "you have",
}

SLANG: dict[str, str] = {
    "gonna": "going to",
    "wanna": "want to",
    "gotta": "got to",
    "hafta": "have to",
    "kinda": "kind of",
    "sorta": "sort of",
    "dunno": "do not know",
    "lemme": "let me",
    "gimme": "give me",
    "whatcha": "what are you",
    "betcha": "bet you",
    "gotcha": "got you",
    "shoulda": "should have",
    "coulda": "could have",
    "woulda": "would have",
    "mighta": "might have",
    "oughta": "ought to",
    "lotta": "lot of",
    "outta": "out of",
    "cuz": "because",
    "bout": "about",
    "em": "them",
    "ya": "you",
    "yep": "yes",
    "nope": "no",
    "yeah": "yes",
    "nah": "no",
    "ok": "okay",
    "sup": "what is up",
    "wassup": "what is up",
}

QUERY_ABBREVIATIONS: dict[str, str] = {
    "acct": "account",
    "addr": "address",
    "amt": "amount",
    "appt": "appointment",
    "bal": "balance",
    "biz": "business",
    "co": "company",
    "corp": "corporation",
    "cust": "customer",
    "dept": "department",
    "doc": "document",
    "emp": "employee",
    "info": "information",
    "inv": "invoice",
    "mgmt": "management",
    "num": "number",
    "org": "organization",
    "pmt": "payment",
    "qty": "quantity",
    "ref": "reference",
    "req": "request",
    "svc": "service",
    "txn": "transaction",
    "asap": "as soon as possible",
    "eod": "end of day",
    "eta": "estimated time of arrival",
    "fyi": "for your information",
    "tbd": "to be determined",
    "tba": "to be announced",
    "etc": "et cetera",
    "ie": "that is",
    "eg": "for example",
    "vs": "versus",
    "w/o": "without",
    "w/": "with",
    "b/c": "because",
    "thru": "through",
    "pls": "please",
    "thx": "thanks",
    "ur": "your",
    "u": "you",
    "r": "are",
}

DOMAIN_TERMS: dict[str, str] = {
    "apr": "annual percentage rate",
    "apy": "annual percentage yield",
    "cd": "certificate of deposit",
    "ach": "automated clearing house",
    "eft": "electronic funds transfer",
    "atm": "automated teller machine",
    "ssn": "social security number",
    "ein": "employer identification number",
    "ira": "individual retirement account",
    "401k": "401k retirement plan",
    "api": "application programming interface",
    "url": "uniform resource locator",
    "html": "hypertext markup language",
    "css": "cascading style sheets",
    "sql": "structured query language",
    "xml": "extensible markup language",
    "json": "javascript object notation",
    "http": "hypertext transfer protocol",
    "https": "hypertext transfer protocol secure",
    "ftp": "file transfer protocol",
    "ssh": "secure shell",
    "vpn": "virtual private network",
    "dns": "domain name system",
    "ip": "internet protocol",
    "tcp": "transmission control protocol",
    "udp": "user datagram protocol",
}

BUSINESS_TERMS: dict[str, str] = {
    "roi": "return on investment",
    "kpi": "key performance indicator",
    "sla": "service level agreement",
    "crm": "customer relationship management",
    "erp": "enterprise resource planning",
    "hr": "human resources",
    "qa": "quality assurance",
    "qc": "quality control",
    "r&d": "research and development",
    "ceo": "chief executive officer",
    "cfo": "chief financial officer",
    "cto": "chief technology officer",
    "coo": "chief operating officer",
    "vp": "vice president",
    "mgr": "manager",
    "dir": "director",
    "svp": "senior vice president",
    "evp": "executive vice president",
    "b2b": "business to business",
    "b2c": "business to consumer",
    "p&l": "profit and loss",
    "ipo": "initial public offering",
    "llc": "limited liability company",
    "inc": "incorporated",
    "ltd": "limited",
}

MISSPELLINGS: dict[str, str] = {
    "recieve": "receive",
    "seperate": "separate",
    "definately": "definitely",
    "occured": "occurred",
    "begining": "beginning",
    "beleive": "believe",
    "acheive": "achieve",
    "neccessary": "necessary",
    "accomodate": "accommodate",
    "embarass": "embarrass",
    "existance": "existence",
    "maintainance": "maintenance",
    "occassion": "occasion",
    "priviledge": "privilege",
    "recomend": "recommend",
    "succesful": "successful",
    "tommorow": "tomorrow",
    "untill": "until",
    "wierd": "weird",
    "thier": "their",
    "freind": "friend",
    "buisness": "business",
    "adress": "address",
    "calender": "calendar",
    "commitee": "committee",
    "enviroment": "environment",
    "goverment": "government",
    "independant": "independent",
    "managment": "management",
    "personel": "personnel",
}

SYNONYMS: dict[str, str] = {
    "purchase": "buy",
    "acquire": "buy",
    "obtain": "get",
    "receive": "get",
    "assist": "help",
    "support": "help",
    "resolve": "fix",
    "repair": "fix",
    "matter": "issue",
    "issue": "problem",
    "concern": "problem",
    "inquiry": "question",
    "query": "question",
    "request": "ask",
    "require": "need",
    "desire": "want",
    "wish": "want",
    "locate": "find",
    "search": "find",
    "discover": "find",
    "provide": "give",
    "supply": "give",
    "deliver": "give",
    "complete": "finish",
    "finalize": "finish",
    "conclude": "finish",
    "commence": "start",
    "begin": "start",
    "initiate": "start",
    "terminate": "end",
    "cease": "stop",
    "halt": "stop",
}

EMOJI: dict[str, str] = {
    "\U0001F600": "happy",
    "\U0001F603": "happy",
    "\U0001F604": "happy",
    "\U0001F60A": "happy",
    "\U0001F642": "happy",
    "\U0001F602": "laughing",
    "\U0001F923": "laughing",
    "\U0001F606": "laughing",
    "\U0001F641": "sad",
    "\U0001F622": "crying",
    "\U0001F620": "angry",
    "\U0001F621": "angry",
    "\U0001F624": "frustrated",
    "\U0001F615": "confused",
    "\U0001F61F": "worried",
    "\U0001F628": "scared",
    "\U0001F630": "anxious",
    "\U0001F914": "thinking",
    "\U0001F610": "neutral",
    "\U0001F611": "expressionless",
    "\U0001F644": "eye roll",
    "\U0001F612": "unamused",
    "\U0001F60E": "cool",
    "\U0001F917": "hugging",
    "\U0001F91D": "handshake",
    "\U0001F44D": "thumbs up",
    "\U0001F44E": "thumbs down",
    "\U0001F44C": "okay",
    "✅": "check mark",
    "❌": "cross mark",
    "⭐": "star",
    "\U0001F4AF": "hundred percent",
    "\U0001F525": "fire",
    "\U0001F4B0": "money",
    "\U0001F4B3": "credit card",
    "\U0001F4DE": "phone",
    "\U0001F4E7": "email",
    "\U0001F4C5": "calendar",
    "⏰": "alarm clock",
    "\U0001F3E2": "office building",
    "\U0001F3EA": "convenience store",
    "\U0001F3E6": "bank",
    "\U0001F697": "car",
    "✈️": "airplane",
    "✈": "airplane",
    "\U0001F3E0": "house",
    "❓": "question mark",
    "❗": "exclamation mark",
}

STOP_WORDS: frozenset[str] = frozenset({
    "a", "an", "and", "are", "as", "at", "be", "by", "for", "from", "has", "he",
    "in", "is", "it", "its", "of", "on", "that", "the", "to", "was", "will",
    "with", "this", "but", "they", "have", "had", "what", "said", "each",
    "which", "she", "do", "how", "their", "if", "up", "out", "many", "then",
    "them", "these", "so", "some", "her", "would", "make", "like", "into", "him",
    "time", "two", "more", "go", "no", "way", "could", "my", "than", "first",
    "been", "who", "sit", "now", "down", "day", "did", "come", "made", "may",
})

# Kept even when stop-word removal is enabled
BUSINESS_STOP_WORDS: frozenset[str] = frozenset({
    "please", "thank", "thanks", "hello", "hi", "hey", "goodbye", "bye", "yes",
    "no", "okay", "ok", "sure", "maybe", "perhaps", "actually", "really", "very",
    "quite", "rather", "pretty", "fairly", "somewhat", "definitely", "certainly",
    "absolutely", "exactly", "precisely",
})

PROFANITY: frozenset[str] = frozenset({
    "damn", "hell", "crap", "stupid", "idiot", "moron", "dumb", "suck", "sucks",
    "hate", "hated", "awful", "terrible", "horrible",
})

# ============================================================================
# Entity resolution
# ============================================================================

STATUS_VALUES: tuple[str, ...] = (
    "active", "inactive", "pending", "approved", "rejected", "cancelled",
    "completed", "in progress", "on hold", "suspended", "expired", "renewed",
    "draft", "final", "open", "closed", "paid", "unpaid", "overdue", "processing",
    "failed", "success",
)

PRIORITY_VALUES: tuple[str, ...] = (
    "low", "medium", "high", "critical", "urgent", "normal", "minor", "major",
    "p1", "p2", "p3", "p4", "priority 1", "priority 2", "priority 3", "priority 4",
)

DEPARTMENTS: tuple[str, ...] = (
    "accounting", "finance", "sales", "marketing", "hr", "human resources",
    "information technology", "operations", "customer service", "support",
    "legal", "compliance", "procurement", "logistics", "administration",
    "executive", "management", "research", "development", "quality assurance",
)

CURRENCIES: tuple[str, ...] = (
    "usd", "eur", "gbp", "jpy", "cad", "aud", "chf", "cny", "inr", "krw",
    "dollar", "euro", "pound", "yen", "franc", "yuan", "rupee",
)

# Words whose presence near an entity raises its context confidence
CONTEXT_BUSINESS_TERMS: tuple[str, ...] = (
    "contract", "agreement", "invoice", "payment", "customer", "client",
    "account", "transaction", "order", "purchase", "sale", "revenue", "profit",
    "loss", "budget", "forecast", "report", "analysis", "dashboard", "metrics",
    "kpi", "roi", "margin", "discount", "tax", "fee", "charge", "credit",
    "debit", "balance", "statement", "reconciliation", "audit", "compliance",
    "regulation", "policy", "procedure", "workflow", "process", "approval",
    "authorization", "verification", "validation", "notification", "alert",
    "reminder", "deadline", "milestone", "deliverable", "requirement",
    "specification", "documentation", "training", "support", "maintenance",
)

# Curated entities matched exactly (or fuzzily, for names); value is an
# EntityType name
KNOWN_ENTITIES: dict[str, str] = {
    "ACME Corp": "COMPANY_NAME",
    "John Smith": "PERSON_NAME",
    "jane.doe@company.com": "EMAIL",
    "CT-2024-001": "CONTRACT_NUMBER",
    "CUST-12345": "CUSTOMER_ID",
    "ACC-987654": "ACCOUNT_NUMBER",
    "INV-2024-0001": "INVOICE_NUMBER",
    "PAY-ABC123": "PAYMENT_ID",
}
