# agent/chains.py
from typing import Any, Dict, Optional

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import SystemMessage
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate
from langchain_core.runnables import Runnable

from agent.llm_factory import TaskType, get_chat_model
from agent.prompts import SIGNAL_PROMPT_TEMPLATE, SYSTEM_PROMPT
from agent.schemas import RESPONSE_FORMAT


def create_agent_chain(
    system_prompt: str,
    prompt_text: str,
    response_format: Dict[str, Any],
    task_name: TaskType = "default",
    llm: Optional[BaseChatModel] = None,
) -> Runnable:
    """
    prompt | llm bound to a strict response format | raw text.

    The chain stops at the raw text so the caller can still recover when the
    model answers with prose instead of the JSON object.
    """
    prompt = ChatPromptTemplate.from_messages([
        SystemMessage(content=system_prompt),
        ("human", prompt_text),
    ])

    llm = llm or get_chat_model(task=task_name)

    chain = prompt | llm.bind(response_format=response_format) | StrOutputParser()
    return chain


def create_signal_chain(llm: Optional[BaseChatModel] = None) -> Runnable:
    return create_agent_chain(
        SYSTEM_PROMPT,
        SIGNAL_PROMPT_TEMPLATE,
        RESPONSE_FORMAT,
        task_name="signal",
        llm=llm,
    )
