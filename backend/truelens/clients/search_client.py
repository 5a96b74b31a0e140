import logging
import requests
from typing import List, Dict, Any

logger = logging.getLogger(__name__)

class SerperClient:
    """
    Client for the Serper Google Search API.

    Only the organic results are used: a claim counts as corroborated when
    a plain web search for it returns at least one organic hit.
    """

    BASE_URL = "https://google.serper.dev/search"

    def __init__(self, api_key: str, timeout: float = 10.0, num_results: int = 5):
        """
        Args:
            api_key: Serper API key
            timeout: Per-request timeout in seconds
            num_results: Number of results requested per query
        """
        self.api_key = api_key
        self.timeout = timeout
        self.num_results = num_results
        self.session = requests.Session()
        self.session.headers.update({
            "X-API-KEY": api_key,
            "Content-Type": "application/json",
            "User-Agent": "TrueLensAI/1.0"
        })

    def search(self, query: str) -> List[Dict[str, Any]]:
        """
        Run a web search and return its organic results.

        Raises:
            requests.RequestException: on transport errors and non-2xx responses
        """
        logger.info(f"Searching Serper for: {query[:50]}...")
        response = self.session.post(
            self.BASE_URL,
            json={"q": query, "num": self.num_results},
            timeout=self.timeout,
        )
        response.raise_for_status()

        organic = response.json().get("organic") or []
        logger.info(f"Found {len(organic)} organic results")
        return organic

    def has_organic_results(self, query: str) -> bool:
        return len(self.search(query)) > 0
