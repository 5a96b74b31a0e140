import json
import logging
import time
from typing import Dict, Any
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

class LLMClient:
    def __init__(self, provider: str, model: str, api_key: str, log_calls: bool = True):
        self.provider = provider
        self.model = model
        self.api_key = api_key
        self.log_calls = log_calls

        if provider != "gemini":
            raise ValueError(f"Unsupported LLM provider: {provider}")

        import google.generativeai as genai
        genai.configure(api_key=api_key)
        self.client = genai.GenerativeModel(model)

    def call(self, prompt: str, temperature: float = 0.3, max_tokens: int = 1000) -> Dict[str, Any]:
        """Call LLM and log the interaction."""
        start = time.time()

        try:
            response = self.client.generate_content(
                prompt,
                generation_config={
                    "temperature": temperature,
                    "max_output_tokens": max_tokens,
                }
            )
            result = {"response": response.text}
        except Exception as e:
            logger.error(f"LLM call failed: {str(e)}")
            raise

        result["latency_ms"] = (time.time() - start) * 1000
        self._log_call(prompt, result)
        return result

    def _log_call(self, prompt: str, result: Dict[str, Any]):
        """Log LLM calls for debugging and latency analysis."""
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "provider": self.provider,
            "model": self.model,
            "prompt_length": len(prompt),
            "latency_ms": result["latency_ms"],
            "response_length": len(result["response"])
        }

        logger.info(f"LLM Call: {log_entry}")

        if not self.log_calls:
            return

        log_dir = Path("./logs")
        log_dir.mkdir(exist_ok=True)

        with open(log_dir / "llm_calls.jsonl", "a") as f:
            f.write(json.dumps(log_entry) + "\n")
