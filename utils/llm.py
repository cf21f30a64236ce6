"""
LLM setup and utility functions.
"""
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_community.embeddings import HuggingFaceEmbeddings
from typing import Dict, Any
import logging

from config import LLM_CONFIG, EMBEDDING_CONFIG

logger = logging.getLogger(__name__)


def get_llm(temperature: float = None) -> ChatGoogleGenerativeAI:
    """
    Initialize and return the LLM instance.

    Args:
        temperature: Optional override of the configured temperature

    Returns:
        ChatGoogleGenerativeAI: Configured LLM instance
    """
    try:
        llm = ChatGoogleGenerativeAI(
            model=LLM_CONFIG["model"],
            temperature=LLM_CONFIG["temperature"] if temperature is None else temperature,
            api_key=LLM_CONFIG["api_key"]
        )
        return llm
    except Exception as e:
        logger.error(f"Failed to initialize LLM: {str(e)}")
        raise


def get_embeddings():
    """
    Initialize and return the embeddings model.

    Returns:
        HuggingFaceEmbeddings: Configured embeddings instance
    """
    try:
        embeddings = HuggingFaceEmbeddings(
            model_name=EMBEDDING_CONFIG["model"],
            model_kwargs={'device': EMBEDDING_CONFIG["device"]}
        )
        return embeddings
    except Exception as e:
        logger.error(f"Failed to initialize embeddings model: {str(e)}")
        raise


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` block if the model added one."""
    text = text.strip()
    if text.startswith("```"):
        text = text[3:]
        if text.lower().startswith("json"):
            text = text[4:]
        if text.endswith("```"):
            text = text[:-3]
    return text.strip()


def safe_llm_call(chain, inputs: Dict[str, Any], default_response: str = "") -> str:
    """
    Safely call an LLM chain with error handling.

    Args:
        chain: The LLM chain to call
        inputs: Dictionary of input values
        default_response: Fallback response if the call fails

    Returns:
        The LLM response or the default response on failure
    """
    try:
        response = chain.invoke(inputs)
        return response.content
    except Exception as e:
        logger.error(f"LLM call failed: {str(e)}")
        return default_response
