# truelens/scoring.py
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Protocol

logger = logging.getLogger(__name__)

class ClaimSearcher(Protocol):
    def has_organic_results(self, query: str) -> bool: ...

def reliability_score(votes: List[int], base: int = 70, span: int = 30) -> int:
    """Map claim verification votes (1 = corroborated) onto [base, base + span]."""
    if not votes:
        return base
    verification_rate = sum(votes) / len(votes)
    score = round(base + verification_rate * span)
    return min(max(score, base), base + span)

def _verify_claim(searcher: ClaimSearcher, claim: str) -> int:
    try:
        return 1 if searcher.has_organic_results(claim) else 0
    except Exception as e:
        # A failed search is a negative vote, never an abort
        logger.warning(f"Claim verification failed for '{claim[:50]}': {e}")
        return 0

def verify_claims(searcher: ClaimSearcher, claims: List[str], max_claims: int = 3) -> List[int]:
    """Search the first `max_claims` claims concurrently and collect one vote per claim."""
    batch = claims[:max_claims]
    if not batch:
        return []
    with ThreadPoolExecutor(max_workers=len(batch)) as pool:
        votes = list(pool.map(lambda claim: _verify_claim(searcher, claim), batch))
    logger.info(f"Verified {sum(votes)}/{len(votes)} claims")
    return votes
