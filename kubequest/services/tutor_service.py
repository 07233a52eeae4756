# kubequest/services/tutor_service.py
import logging
from typing import Optional
from groq import Groq, RateLimitError, APIConnectionError, APIError # Import Groq client
from kubequest.core.config import settings
from kubequest.models.tutor import TutorAnswer

logger = logging.getLogger(__name__)

MISSING_KEY_ANSWER = "API Key is missing. Please configure GROQ_API_KEY to use the AI Tutor."
EMPTY_ANSWER = "I'm having trouble checking the ship's log right now. Try again!"

SYSTEM_PROMPT = """
You are Captain Kube, a friendly and wise sea captain who explains Kubernetes concepts.
Your audience is absolute beginners (freshers) or even 5-year-olds.

Rules:
1. Use the "Shipping Port" analogy consistent with:
   - Cluster = Port
   - Node = Ship
   - Pod = Shipping Container
   - App = Cargo inside the container
   - Service = Dispatcher/Phone Book
2. Keep answers short (under 3 sentences where possible).
3. Be encouraging and fun.
4. If the user asks about specific technical details, relate it back to the analogy first, then explain simply.

Current Context: {context}
"""


class TutorService:
    def __init__(self, api_key: Optional[str] = None, model: str = settings.TUTOR_MODEL,
                 temperature: float = settings.TUTOR_TEMPERATURE, max_tokens: int = settings.TUTOR_MAX_TOKENS):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.groq_client = None
        if api_key:
            try:
                self.groq_client = Groq(api_key=api_key)
                logger.info("Groq client initialized for the tutor.")
            except Exception as e:
                logger.error(f"Failed to initialize Groq client: {e}", exc_info=True)
                self.groq_client = None # Ensure it's None if init fails
        else:
            logger.warning("Groq API key not set. The AI tutor will answer with a configuration hint only.")

    def is_available(self) -> bool:
        return self.groq_client is not None

    def ask(self, question: str, context: Optional[str] = None) -> TutorAnswer:
        """Forwards one learner question to the LLM and returns its prose answer."""
        if not self.groq_client:
            return TutorAnswer(answer=MISSING_KEY_ANSWER, is_error=True)

        system_instruction = SYSTEM_PROMPT.format(context=context or "General Kubernetes questions")
        try:
            logger.info(f"Asking the tutor ({len(question)} chars, model={self.model})...")
            chat_completion = self.groq_client.chat.completions.create(
                messages=[
                    {"role": "system", "content": system_instruction},
                    {"role": "user", "content": question},
                ],
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
            answer_text = chat_completion.choices[0].message.content
            if not answer_text or not answer_text.strip():
                logger.warning("Tutor returned an empty completion.")
                return TutorAnswer(answer=EMPTY_ANSWER, is_error=True)
            return TutorAnswer(answer=answer_text.strip())

        except RateLimitError:
            logger.warning("Groq API rate limit exceeded while answering a tutor question.")
            return TutorAnswer(answer="Too many questions at once! The captain needs a breather. (API quota exceeded)", is_error=True)
        except APIConnectionError as e:
            logger.error(f"Could not reach the Groq API: {e}", exc_info=True)
            return TutorAnswer(answer="The radio is down! (Could not reach the tutor service)", is_error=True)
        except APIError as e:
            logger.error(f"Groq API error answering tutor question: Status={getattr(e, 'status_code', None)} Message={e.message}", exc_info=True)
            return TutorAnswer(answer=f"The radio is down! (API Error: {e.message})", is_error=True)
        except Exception as e:
            logger.error(f"Unexpected error calling Groq API for the tutor: {e}", exc_info=True)
            return TutorAnswer(answer="The radio is down! (Unexpected tutor error, check service logs)", is_error=True)


# Instantiate the service (singleton pattern)
tutor_service = TutorService(
    api_key=settings.GROQ_API_KEY.get_secret_value() if settings.GROQ_API_KEY else None
)


def get_tutor_service() -> TutorService:
    return tutor_service
