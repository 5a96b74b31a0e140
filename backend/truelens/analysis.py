import json
import logging
from typing import Any, Dict, List, Optional
from sqlmodel import Session

from .clients.llm_client import LLMClient
from .config import Settings
from .errors import InvalidInput, TrueLensError, UpstreamFailure
from .prompts import CLAIM_EXTRACTION_PROMPT, SUMMARY_PROMPT
from .scoring import ClaimSearcher, reliability_score, verify_claims
from .storage import append_history, save_analysis

logger = logging.getLogger(__name__)

def parse_json_list(response_text: str) -> List[str]:
    """
    Parse a model response that should be a JSON array of strings.

    Markdown code fences are tolerated. Anything that does not parse to a
    list degrades to a single-element list holding the raw response.
    """
    candidate = response_text.strip()
    if "```" in candidate:
        candidate = candidate.split("```")[1]
        if candidate.startswith("json"):
            candidate = candidate[4:]

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.warning(f"Model output is not JSON ({e}), using raw text")
        return [response_text]

    if not isinstance(parsed, list):
        logger.warning(f"Model output is {type(parsed).__name__}, not a list, using raw text")
        return [response_text]
    return [item if isinstance(item, str) else json.dumps(item) for item in parsed]

def _extract_claims(llm: LLMClient, text: str) -> List[str]:
    result = llm.call(CLAIM_EXTRACTION_PROMPT.format(text=text), temperature=0.2)
    logger.info(f"Claim extraction latency: {result['latency_ms']:.0f}ms")
    claims = parse_json_list(result["response"])
    logger.info(f"Extracted {len(claims)} claims")
    return claims

def _summarize(llm: LLMClient, text: str) -> List[str]:
    result = llm.call(SUMMARY_PROMPT.format(text=text), temperature=0.3)
    logger.info(f"Summary latency: {result['latency_ms']:.0f}ms")
    return parse_json_list(result["response"])

def analyze_article(text: Optional[str], user_id: str, url: Optional[str], *,
                    llm: LLMClient, searcher: Optional[ClaimSearcher],
                    session: Session, settings: Settings) -> Dict[str, Any]:
    """
    Main pipeline: claims, summary, reliability score, persistence.

    `searcher` is None when no search API key is configured, in which case
    the score stays at the default.
    """
    if not text or not text.strip():
        raise InvalidInput("Article text is required")

    try:
        prompt_text = text[:settings.prompt_char_limit]
        claims = _extract_claims(llm, prompt_text)
        summary = _summarize(llm, prompt_text)

        score = settings.default_reliability_score
        if searcher is not None:
            votes = verify_claims(searcher, claims, max_claims=settings.max_claims_to_verify)
            score = reliability_score(votes, base=settings.default_reliability_score,
                                      span=100 - settings.default_reliability_score)

        record = save_analysis(
            session,
            user_id=user_id,
            text=text[:settings.excerpt_char_limit],
            claims=claims,
            summary=summary,
            reliability_score=score,
            url=url,
        )
        append_history(session, user_id, record)
    except TrueLensError:
        raise
    except Exception as e:
        logger.exception(f"Analysis error: {e}")
        raise UpstreamFailure("Failed to analyze article") from e

    logger.info(f"Analysis {record.id} for user {user_id}: score={score}")
    return {
        "reliability_score": score,
        "summary": summary,
        "claims": claims,
        "source_analysis": [],
        "success": True,
    }
