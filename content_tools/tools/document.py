"""
Document Tool

Retrieves web documents (title, link, snippet) using the Tavily API.
Requires TAVILY_API_KEY in environment.
"""

import asyncio
import json
import logging

from pydantic import ValidationError as SchemaError
from tavily import TavilyClient

from .. import config
from ..base import ExecutionError, PromptTool, require_api_key
from ..schemas import RetrievedDocument, TavilySearchResponse

logger = logging.getLogger(__name__)

NO_DOCUMENTS = "No documents found for the given prompt. Please try with different keywords."


class DocumentTool(PromptTool):
    """Search the web and return the hits as retriever documents."""

    prompt_description = "Prompt to retrieve documents with links"

    @property
    def name(self) -> str:
        return "document_tool"

    @property
    def title(self) -> str:
        return "Document Tool"

    @property
    def description(self) -> str:
        return "Retrieves documents with links based on the given prompt"

    @property
    def error_prefix(self) -> str:
        return "Error retrieving documents"

    @property
    def category(self) -> str:
        return "web"

    async def execute(self, prompt: str) -> str:
        api_key = require_api_key("TAVILY_API_KEY", "Tavily", self.name)
        client = TavilyClient(api_key=api_key)

        response = await asyncio.to_thread(
            client.search,
            query=prompt,
            max_results=config.TAVILY_MAX_RESULTS,
        )

        try:
            parsed = TavilySearchResponse.model_validate(response)
        except SchemaError as e:
            raise ExecutionError(f"Unexpected Tavily response: {e}", tool_name=self.name)

        if not parsed.results:
            return NO_DOCUMENTS

        documents = [RetrievedDocument.from_tavily(result) for result in parsed.results]
        logger.info(f"Retrieved {len(documents)} documents")
        return json.dumps(
            [doc.model_dump(by_alias=True) for doc in documents],
            indent=2,
            ensure_ascii=False,
        )
