"""
Prompt templates for the hotel search system.
"""
from langchain_core.prompts import ChatPromptTemplate

# Query Parsing Prompt
QUERY_PARSING_PROMPT = ChatPromptTemplate.from_messages([
    ("system", """You are a parser that extracts hotel search parameters from natural language.
    Always respond with pure JSON only, no extra text.

    Fields to extract:
    - location: city name (Melbourne, Sydney, or Brisbane) if specified, otherwise null
    - minPrice: integer minimum price per night in AUD if specified (e.g. "above $100" -> 100), otherwise null
    - maxPrice: integer maximum price per night in AUD if specified (e.g. "under $200" -> 200), otherwise null
    - price: exact price if the user names one specific price (e.g. "$200 hotel" -> 200), otherwise null
    - tier: "Budget", "Mid-tier" or "Luxury" if specified or clearly implied, otherwise null
    - name: hotel name if the user mentions a specific hotel, otherwise null
    - keywords: array of lowercased descriptive keywords (e.g. ["quiet", "family", "pool", "spa", "beach"])

    If the user asks for the "most expensive" or "cheapest" hotel, still extract location and
    keywords but leave the price fields null.

    Amenities to recognize in keywords: {amenities}

    Examples:
    - "I need a quiet place in Melbourne under $200" -> {{"location": "Melbourne", "maxPrice": 200, "keywords": ["quiet"], "tier": null}}
    - "luxury hotel in Sydney with pool" -> {{"location": "Sydney", "tier": "Luxury", "keywords": ["luxury", "pool"], "maxPrice": null}}
    - "tôi muốn tìm khách sạn mắc nhất ở Sydney" -> {{"location": "Sydney", "keywords": ["luxury", "expensive"], "tier": null, "minPrice": null, "maxPrice": null}}
    - "cheapest hotel in Melbourne" -> {{"location": "Melbourne", "keywords": ["cheap", "budget"], "tier": null, "minPrice": null, "maxPrice": null}}"""),
    ("human", "{query}")
])

# Results Re-ranking Prompt
RESULTS_RANKING_PROMPT = ChatPromptTemplate.from_messages([
    ("system", """You are an expert in recommending hotels that give the best value for the guest.
    User query: {query}
    Search constraints: {hints}

    Order these hotels from best to worst value for this request, weighing price
    against quality, amenities and how well the description fits the request.

    Return a JSON array of hotel ids, best first, e.g. [12, 7, 3].
    Return ONLY valid JSON, no other text."""),
    ("human", "Hotels to rank: {hotels}")
])
