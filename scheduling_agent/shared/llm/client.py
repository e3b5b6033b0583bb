"""
OpenAI client with retry logic.

Provides a cached AsyncOpenAI instance and the assistant bootstrap used at
startup. Transport-level retries use tenacity; the run-level rate-limit
retry lives in the orchestrator.
"""

import logging
import os
from typing import Any, Dict, List, Optional

from openai import APIConnectionError, APITimeoutError, AsyncOpenAI, InternalServerError
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)
from dotenv import load_dotenv

from scheduling_agent.config import AgentConfig

load_dotenv()

logger = logging.getLogger(__name__)

# Errors worth retrying at the HTTP level
TRANSIENT_ERRORS = (APIConnectionError, APITimeoutError, InternalServerError)

# Module-level cache for the OpenAI client
_client: Optional[AsyncOpenAI] = None


def get_cached_client() -> AsyncOpenAI:
    """
    Returns a cached instance of the async OpenAI client.

    Uses the OPENAI_API_KEY environment variable for authentication.
    The client is created once and reused for all subsequent calls.
    """
    global _client
    if _client is None:
        api_key = os.environ.get("OPENAI_API_KEY")
        if not api_key:
            raise ValueError(
                "OPENAI_API_KEY environment variable is not set. "
                "Please set it to your OpenAI API key."
            )
        _client = AsyncOpenAI(api_key=api_key)
    return _client


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type(TRANSIENT_ERRORS),
    reraise=True,
)
async def ensure_assistant(
    tools: List[Dict[str, Any]],
    config: AgentConfig,
    client: Optional[AsyncOpenAI] = None,
) -> str:
    """
    Return the assistant id to run threads against, creating one if needed.

    When an assistant id is configured its tool list is refreshed so the
    remote side always knows the locally registered tools.

    Args:
        tools: Function-tool specs from the tool registry
        config: Agent configuration (model, name, instructions, assistant id)
        client: Optional client instance. If not provided, uses cached client.

    Returns:
        The remote assistant id.
    """
    if client is None:
        client = get_cached_client()

    if config.assistant_id:
        await client.beta.assistants.update(
            config.assistant_id,
            tools=tools,
            instructions=config.instructions,
        )
        logger.info(f"Updated assistant {config.assistant_id} with {len(tools)} tools")
        return config.assistant_id

    assistant = await client.beta.assistants.create(
        name=config.assistant_name,
        model=config.model,
        instructions=config.instructions,
        tools=tools,
    )
    logger.info(f"Created assistant {assistant.id} with {len(tools)} tools")
    return assistant.id
