from docflow.genai.client_base import BaseGenAIClient
from docflow.genai.factory import GenAIClientFactory
from docflow.genai.service import GenAIService

__all__ = ["BaseGenAIClient", "GenAIClientFactory", "GenAIService"]
