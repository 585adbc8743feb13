# relay_app/create_assistant.py
import os
import logging
from typing import Optional

from openai import OpenAI

from .config import Config

logger = logging.getLogger(__name__)

INSTRUCTIONS_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data", "instructions.txt")
DEFAULT_INSTRUCTIONS = "You are a helpful assistant. Answer clearly and concisely."


def load_instructions(path: str = INSTRUCTIONS_FILE) -> str:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read().strip() or DEFAULT_INSTRUCTIONS
    except FileNotFoundError:
        logger.warning(f"No instructions file at {path}. Using the default instructions.")
        return DEFAULT_INSTRUCTIONS


def create_relay_assistant(
    name: str = "Relay Assistant",
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    instructions_path: str = INSTRUCTIONS_FILE,
) -> Optional[str]:
    """
    Creates the assistant the relay runs against and returns its id.
    The id must then be set as OPENAI_ASSISTANT_ID.
    """
    api_key = api_key or Config.OPENAI_API_KEY
    if not api_key:
        logger.error("CRITICAL: OPENAI_API_KEY is not set. Cannot create the assistant.")
        return None

    client = OpenAI(api_key=api_key)
    instructions = load_instructions(instructions_path)

    logger.info(f"Creating assistant '{name}'...")
    assistant = client.beta.assistants.create(
        name=name,
        instructions=instructions,
        model=model or Config.OPENAI_ASSISTANT_MODEL,
    )
    logger.info(f"Assistant created with ID: {assistant.id}")
    return assistant.id


if __name__ == "__main__":
    assistant_id = create_relay_assistant()
    if assistant_id:
        print(f"\nAdd this to your .env file:\nOPENAI_ASSISTANT_ID={assistant_id}\n")
