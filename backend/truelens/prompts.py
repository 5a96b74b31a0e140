CLAIM_EXTRACTION_PROMPT = """Analyze the following article and extract 3-5 key factual claims that can be fact-checked. Format as JSON array.

Article:
{text}

Respond with JSON array only, like: ["claim1", "claim2", "claim3"]"""

SUMMARY_PROMPT = """Summarize the following article in exactly 3 bullet points. Each point should be concise and factual.

Article:
{text}

Format as JSON array, like: ["point1", "point2", "point3"]"""

CHAT_SYSTEM_PROMPT = """You are TrueLensGPT, an intelligent news verification assistant. You help users analyze articles, fact-check claims, and understand news credibility.

{article_block}
Provide helpful, accurate, and balanced responses. Be concise but thorough."""

ARTICLE_CONTEXT_BLOCK = """The user is currently reading this article:
{article_context}

"""

CHAT_PROMPT = """{system_prompt}

User message: {message}"""
