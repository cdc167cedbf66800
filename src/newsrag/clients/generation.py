"""
Generation Client (Gemini)

Asks a generative model to answer a question using only the supplied context.

Soft fallback: without a configured API key the client answers with a fixed
message instead of failing, so the HTTP response path never blocks on
missing configuration.
"""

import logging
from typing import Optional

from google import genai


logger = logging.getLogger(__name__)


FALLBACK_ANSWER = "Sorry — the LLM model is not configured on this machine."

PROMPT_TEMPLATE = """You are a news chatbot using Retrieval-Augmented Generation.

Use ONLY the context below to answer the user's question.
If the answer is not clearly in the context, say you are not sure.

Context:
{context}

User question: {query}

Answer in 3-6 concise sentences, neutral and factual.
"""


def build_prompt(query: str, context: str) -> str:
    """Embed the literal context and query into the answer prompt."""
    return PROMPT_TEMPLATE.format(context=context, query=query)


class GenerationClient:
    """Gemini answer generator with a degraded mode when unconfigured."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: str = "gemini-2.5-flash",
    ):
        """
        Initialize the generation client.

        Args:
            api_key: Gemini API key; None puts the client in fallback mode
            model_name: Gemini model used for answers
        """
        self.model_name = model_name
        self.client: Optional[genai.Client] = None

        if api_key:
            try:
                self.client = genai.Client(api_key=api_key)
            except Exception as e:
                logger.warning(f"Could not initialize Gemini client: {e}")
                self.client = None

        if self.client is None:
            logger.warning("Generation Client running without a model (fallback answers only)")
        else:
            logger.info(f"Generation Client initialized (model: {model_name})")

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    async def generate(self, query: str, context: str) -> str:
        """
        Generate an answer to ``query`` grounded in ``context``.

        Returns:
            The answer text, or FALLBACK_ANSWER when no model is configured
        """
        if self.client is None:
            return FALLBACK_ANSWER

        prompt = build_prompt(query, context)
        response = await self.client.aio.models.generate_content(
            model=self.model_name,
            contents=prompt,
        )
        return _response_text(response)


def _response_text(response) -> str:
    """Read ``response.text``, coercing unexpected shapes to a string."""
    try:
        text = response.text
    except (AttributeError, ValueError):
        text = None
    if isinstance(text, str) and text:
        return text
    return str(response)
