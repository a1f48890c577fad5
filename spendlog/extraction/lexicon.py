"""
Gazetteers used by the entity extractor.

All entries are lower case; the extractor matches them against
case-folded text on word boundaries, longest entry first.
Deployments add their own names through ParserSettings.
"""

PLACES: tuple[str, ...] = (
    # Countries
    "japan", "indonesia", "united states", "usa", "america", "canada",
    "mexico", "united kingdom", "uk", "england", "france", "germany",
    "italy", "spain", "australia", "singapore", "malaysia", "thailand",
    "vietnam", "philippines", "korea", "south korea", "china", "taiwan",
    "hong kong", "india",
    # Cities
    "tokyo", "osaka", "kyoto", "yokohama", "nagoya", "sapporo", "fukuoka",
    "kobe", "nara", "hiroshima", "sendai", "okinawa", "jakarta", "bandung",
    "surabaya", "yogyakarta", "bali", "denpasar", "new york", "los angeles",
    "san francisco", "seattle", "chicago", "boston", "honolulu", "london",
    "paris", "berlin", "seoul", "bangkok", "sydney", "melbourne",
    # Districts and neighbourhoods
    "shibuya", "shinjuku", "ginza", "akihabara", "harajuku", "roppongi",
    "ikebukuro", "ueno", "asakusa", "odaiba", "umeda", "namba", "tenjin",
    "kichijoji", "nakameguro", "ebisu", "shimokitazawa",
)

ORGANIZATIONS: tuple[str, ...] = (
    # Coffee shops
    "starbucks", "doutor", "tullys", "tully's", "komeda", "blue bottle",
    "excelsior", "dunkin", "costa coffee", "kopi kenangan",
    # Grocery and convenience
    "walmart", "costco", "target", "whole foods", "trader joe's",
    "trader joes", "kroger", "aeon", "seiyu", "ito yokado",
    "lawson", "familymart", "family mart", "7-eleven", "seven eleven",
    "ministop", "indomaret", "alfamart",
    # Retail
    "daiso", "uniqlo", "muji", "don quijote", "donki", "yodobashi",
    "bic camera", "ikea", "zara", "h&m", "nitori", "amazon", "ebay",
    "rakuten", "tokopedia", "shopee",
    # Restaurants
    "mcdonald's", "mcdonalds", "burger king", "kfc", "mos burger",
    "yoshinoya", "sukiya", "matsuya", "coco ichibanya", "ichiran",
    "saizeriya", "gusto", "sushiro", "kura sushi",
    # Streaming and subscriptions
    "netflix", "spotify", "youtube", "disney", "hulu", "amazon prime",
    # Transport
    "uber", "lyft", "gojek",
    # Health
    "matsumoto kiyoshi", "welcia", "cvs", "walgreens",
)

CURRENCY_WORDS: tuple[str, ...] = (
    "yen", "jpy", "dollar", "dollars", "buck", "bucks", "usd",
    "rupiah", "idr", "rp",
)

CURRENCY_SYMBOLS: tuple[str, ...] = ("$", "¥")
