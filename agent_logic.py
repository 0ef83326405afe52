import logging
import os
from dotenv import load_dotenv

# LangChain imports
from langchain_core.output_parsers import PydanticOutputParser
from langchain_core.prompts import ChatPromptTemplate
from langchain_google_genai import GoogleGenerativeAI

from chart_models import ChartAnswer, ChatReply, parse_chat_reply
from src.config import LLM_MODEL_NAME

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """
You are an assistant for a dashboard about world economic and environmental indicators.
Answer the user's prompt. When the answer is a breakdown of a whole into parts
(shares, proportions, a mix of sources), set 'chartable' to true and fill 'data' with
one entry per slice so it can be drawn as a pie chart. Otherwise set 'chartable' to false
and put the answer in 'answer'.
You must format the output strictly as a JSON object that adheres to the schema provided below.

PROMPT:
{prompt}

FORMAT INSTRUCTIONS:
{format_instructions}
"""


def get_llm():
    """
    Initializes and returns the Google Generative AI LLM.
    Loads the API key from the .env file.
    """
    load_dotenv()
    api_key = os.getenv("GOOGLE_API_KEY")
    if not api_key:
        raise ValueError("GOOGLE_API_KEY not found in environment variables.")

    return GoogleGenerativeAI(
        model=LLM_MODEL_NAME,
        google_api_key=api_key,
        temperature=0.1,
    )


def create_chart_chain(llm):
    """
    Builds prompt | llm | parser, producing a ChartAnswer for each prompt.

    Args:
        llm: An initialized LangChain LLM object.
    """
    parser = PydanticOutputParser(pydantic_object=ChartAnswer)
    prompt = ChatPromptTemplate.from_template(
        template=PROMPT_TEMPLATE,
        partial_variables={"format_instructions": parser.get_format_instructions()},
    )
    return prompt | llm | parser


class GeminiChatBackend:
    """Answers chat prompts in-process with Gemini instead of a separate backend server."""

    def __init__(self, chain=None):
        self.chain = chain or create_chart_chain(get_llm())

    def ask(self, prompt: str) -> ChatReply:
        logger.info("Asking %s (prompt of %d chars)", LLM_MODEL_NAME, len(prompt))
        answer = self.chain.invoke({"prompt": prompt})
        # Same wire format as the HTTP backend so both go through one parser.
        return parse_chat_reply(answer.to_payload())
