"""
Chart Tool

Asks an OpenAI model for a small chart dataset ({title, type, data}) and
returns the first Responses output item as JSON text.
Requires OPENAI_API_KEY in environment.
"""

import asyncio
import logging

from openai import OpenAI

from .. import config
from ..base import PromptTool, require_api_key

logger = logging.getLogger(__name__)

CHART_INSTRUCTIONS = """You are a chart generator. Given a user prompt, return a JSON object with chart data.
The output must be a valid JSON object matching this structure:

{
  "title": "Sales for Q1 2024",
  "type": "bar",
  "data": [
    { "label": "January", "value": 10000 },
    { "label": "February", "value": 12000 },
    { "label": "March", "value": 14000 }
  ]
}

Only respond with the JSON data, nothing else."""

NO_CHART_DATA = "No chart data generated. Please try with a different prompt."


class ChartTool(PromptTool):
    """Generate chart data from a natural-language prompt."""

    prompt_description = "Prompt to retrieve chart data"

    @property
    def name(self) -> str:
        return "chart_tool"

    @property
    def title(self) -> str:
        return "Chart Tool"

    @property
    def description(self) -> str:
        return "Retrieves chart data based on the given prompt"

    @property
    def error_prefix(self) -> str:
        return "Error generating chart"

    @property
    def category(self) -> str:
        return "chart"

    async def execute(self, prompt: str) -> str:
        api_key = require_api_key("OPENAI_API_KEY", "OpenAI", self.name)
        client = OpenAI(api_key=api_key)

        result = await asyncio.to_thread(
            client.responses.create,
            model=config.OPENAI_CHART_MODEL,
            instructions=CHART_INSTRUCTIONS,
            input=[{"role": "user", "content": prompt}],
        )

        if not result.output:
            return NO_CHART_DATA

        # The renderer unwraps content[0].text from this item
        chart_item = result.output[0]
        logger.info(f"Chart generated with {config.OPENAI_CHART_MODEL}")
        return chart_item if isinstance(chart_item, str) else chart_item.model_dump_json()
